"""
Outlet service — the entry points the UI layer calls.

Every mutation is load → change → save_all, so the repository only ever sees
whole-collection replacements. The pipeline modules do the actual work; this
layer looks outlets up by id, validates direct-entry input and logs.
"""
import logging
from datetime import datetime
from typing import Any, Dict, List, Optional, Tuple

from outlet_ops.models.outlet import Outlet, utcnow
from outlet_ops.pipeline import history, lifecycle, transitions
from outlet_ops.pipeline.analytics import search_outlets, pipeline_stats
from outlet_ops.pipeline.importer import ImportSummary, reconcile_rows, commit_import
from outlet_ops.pipeline.vocabulary import (
    Stage, DEFAULT_STATUS, DEFAULT_PRIORITY, stage_from_label,
    match_stage, match_brand, match_city, match_status, match_priority,
)

logger = logging.getLogger('services.outlets')


class OutletNotFound(LookupError):
    """No outlet with the requested id."""


def parse_stage(value) -> Stage:
    """
    Stage from an enum name, import key or display label.

    'CHEF_APPROVAL', 'chef approval' and 'Chef Approval' all resolve; so does
    'Training' for TRAINING OF OUTLET. Anything else raises ValueError.
    """
    if isinstance(value, Stage):
        return value
    text = str(value or '').strip()
    if text.upper() in Stage.__members__:
        return Stage[text.upper()]
    stage = match_stage(text) or stage_from_label(text)
    if stage is None:
        raise ValueError(f"Unknown stage '{value}'")
    return stage


def _clean_name(value) -> str:
    if value is not None and not isinstance(value, str):
        raise ValueError('Name must be text')
    name = (value or '').strip()
    if not name:
        raise ValueError('Name is required')
    return name


def _vocab(value, matcher, kind: str) -> Optional[str]:
    if value is None or str(value).strip() == '':
        return None
    found = matcher(value)
    if found is None:
        raise ValueError(f"Unknown {kind} '{value}'")
    return found


class OutletService:

    def __init__(self, repository):
        self.repository = repository

    # ── Queries ──────────────────────────────────────────────────────────────

    def list_active(self, term: Optional[str] = None) -> List[Outlet]:
        return search_outlets(self.repository.load(), term)

    def list_archived(self) -> List[Outlet]:
        return lifecycle.archived_outlets(self.repository.load())

    def get(self, outlet_id: str) -> Outlet:
        outlet = self.repository.get(outlet_id)
        if outlet is None:
            raise OutletNotFound(outlet_id)
        return outlet

    def stats(self, now: Optional[datetime] = None) -> Dict[str, Any]:
        return pipeline_stats(self.repository.load(), now)

    # ── Mutations ────────────────────────────────────────────────────────────

    def _load_with(self, outlet_id: str) -> Tuple[List[Outlet], Outlet]:
        outlets = self.repository.load()
        for outlet in outlets:
            if outlet.id == outlet_id:
                return outlets, outlet
        raise OutletNotFound(outlet_id)

    def add(self, name: str, description: str = '', note: str = '',
            status: Optional[str] = None, brand: Optional[str] = None,
            city: Optional[str] = None, priority: Optional[str] = None,
            now: Optional[datetime] = None) -> Outlet:
        outlet = transitions.create_outlet(
            name=_clean_name(name),
            description=str(description or '').strip(),
            note=note or '',
            status=_vocab(status, match_status, 'status') or DEFAULT_STATUS,
            brand=_vocab(brand, match_brand, 'brand'),
            city=_vocab(city, match_city, 'city'),
            priority=_vocab(priority, match_priority, 'priority') or DEFAULT_PRIORITY,
            now=now,
        )
        outlets = self.repository.load()
        outlets.append(outlet)
        self.repository.save_all(outlets)
        logger.info("Outlet %s created: %s", outlet.id, outlet.name, extra={'outlet_id': outlet.id})
        return outlet

    def update_fields(self, outlet_id: str, **changes) -> Outlet:
        """Edit descriptive fields. Never touches stage, history or last_moved_at."""
        outlets, outlet = self._load_with(outlet_id)
        if 'name' in changes:
            outlet.name = _clean_name(changes['name'])
        if 'description' in changes:
            outlet.description = str(changes['description'] or '')
        if 'brand' in changes:
            outlet.brand = _vocab(changes['brand'], match_brand, 'brand')
        if 'city' in changes:
            outlet.city = _vocab(changes['city'], match_city, 'city')
        if 'status' in changes:
            outlet.status = _vocab(changes['status'], match_status, 'status') or DEFAULT_STATUS
        if 'priority' in changes:
            outlet.priority = _vocab(changes['priority'], match_priority, 'priority') or DEFAULT_PRIORITY
        self.repository.save_all(outlets)
        return outlet

    def move(self, outlet_id: str, direction: str, now: Optional[datetime] = None) -> Tuple[Outlet, bool]:
        outlets, outlet = self._load_with(outlet_id)
        moved = transitions.move(outlet, direction, now)
        if moved:
            self.repository.save_all(outlets)
            logger.info("Outlet %s moved %s to %s", outlet.id, direction, outlet.current_stage.value,
                        extra={'outlet_id': outlet.id})
        return outlet, moved

    def set_stage(self, outlet_id: str, stage, now: Optional[datetime] = None) -> Tuple[Outlet, bool]:
        new_stage = parse_stage(stage)
        outlets, outlet = self._load_with(outlet_id)
        changed = transitions.set_stage(outlet, new_stage, now)
        if changed:
            self.repository.save_all(outlets)
            logger.info("Outlet %s set to %s", outlet.id, new_stage.value, extra={'outlet_id': outlet.id})
        return outlet, changed

    def update_note(self, outlet_id: str, note: str, stage=None,
                    now: Optional[datetime] = None) -> Outlet:
        """Note on the latest visit to stage (defaults to the current stage)."""
        outlets, outlet = self._load_with(outlet_id)
        target = parse_stage(stage) if stage else outlet.current_stage
        history.upsert_note_for_stage(outlet, target, note or '', now)
        self.repository.save_all(outlets)
        return outlet

    def update_timestamp(self, outlet_id: str, stage, timestamp: datetime) -> Outlet:
        outlets, outlet = self._load_with(outlet_id)
        history.upsert_timestamp_for_stage(outlet, parse_stage(stage), timestamp)
        self.repository.save_all(outlets)
        return outlet

    def archive(self, outlet_id: str, now: Optional[datetime] = None) -> Outlet:
        outlets, outlet = self._load_with(outlet_id)
        lifecycle.archive(outlet, now)
        self.repository.save_all(outlets)
        logger.info("Outlet %s archived", outlet.id, extra={'outlet_id': outlet.id})
        return outlet

    def restore(self, outlet_id: str) -> Outlet:
        outlets, outlet = self._load_with(outlet_id)
        lifecycle.restore(outlet)
        self.repository.save_all(outlets)
        logger.info("Outlet %s restored", outlet.id, extra={'outlet_id': outlet.id})
        return outlet

    def permanently_delete(self, outlet_id: str) -> None:
        if not lifecycle.permanently_delete(self.repository, outlet_id):
            raise OutletNotFound(outlet_id)

    # ── Bulk import ──────────────────────────────────────────────────────────

    def preview_import(self, rows, now: Optional[datetime] = None) -> ImportSummary:
        return reconcile_rows(rows, self.repository.load(), now or utcnow())

    def commit_import(self, summary: ImportSummary) -> List[Outlet]:
        """Apply a preview in one save_all; a failed save writes nothing."""
        merged = commit_import(self.repository.load(), summary)
        self.repository.save_all(merged)
        return merged
