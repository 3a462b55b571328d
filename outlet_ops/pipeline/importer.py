"""
Bulk import reconciliation — spreadsheet rows → validated New/Update outlets.

Two phases:

  reconcile_rows()  pure preview. Every row ends up in exactly one of
                    summary.success (tagged New or Update) or
                    summary.failures. Nothing existing is mutated.
  commit_import()   merges a preview into the outlet list the caller then
                    saves in one step.

Per row, checks run in order and stop at the first failure:
  name → match existing → stage → brand → city → status → live date.
"""
import copy
import logging
import warnings
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Dict, Iterable, List, Mapping, Optional, Union

import pandas as pd
from pandas.api.types import is_scalar

from outlet_ops.models.outlet import Outlet, StageLog, ensure_utc, new_outlet_id, utcnow
from outlet_ops.pipeline.lifecycle import active_outlets
from outlet_ops.pipeline.transitions import record_import_move
from outlet_ops.pipeline.vocabulary import (
    FIRST_STAGE, DEFAULT_STATUS,
    match_stage, match_brand, match_city, match_status,
)

logger = logging.getLogger('pipeline.importer')

NEW = 'New'
UPDATE = 'Update'

# ── Column aliases ────────────────────────────────────────────────────────────
# Matched case-insensitively; the first non-empty alias wins. Existing import
# templates depend on these names.
NAME_ALIASES = ('Outlet Name', 'Name', 'Brand')
BRAND_ALIASES = ('Brand',)
CITY_ALIASES = ('Cities', 'City')
STAGE_ALIASES = ('Pipeline Stage', 'Status')
STATUS_ALIASES = ('Outlet Status', 'Operational Status')
LIVE_DATE_ALIASES = ('Live Date',)
DESCRIPTION_ALIASES = ('Description',)

# ── Failure reasons ───────────────────────────────────────────────────────────
MISSING_NAME = 'Missing Name'
INVALID_STAGE = 'Invalid Pipeline Stage'
UNRECOGNIZED_BRAND = 'Unrecognized Brand'
UNRECOGNIZED_CITY = 'Unrecognized City'
INVALID_STATUS = 'Invalid Operational Status'

UNNAMED_ROW = 'Unnamed Row'
IMPORT_NOTE = 'Imported via Excel'
IMPORT_MOVE_NOTE = 'Moved via bulk import'
IMPORT_DESCRIPTION = 'Imported via Bulk Processor.'

# Spreadsheet row 1 is the header
FIRST_DATA_ROW = 2


@dataclass
class ImportFailure:
    row: int
    name: str
    reason: str
    offending_text: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'row': self.row,
            'name': self.name,
            'reason': self.reason,
            'offending_text': self.offending_text,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImportFailure':
        return cls(
            row=data['row'],
            name=data['name'],
            reason=data['reason'],
            offending_text=data.get('offending_text'),
        )


@dataclass
class ImportedOutlet:
    """A validated outlet record plus how it will be merged."""
    row: int
    action: str
    outlet: Outlet

    def to_dict(self) -> Dict[str, Any]:
        return {'row': self.row, 'import_action': self.action, 'outlet': self.outlet.to_dict()}

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImportedOutlet':
        return cls(
            row=data['row'],
            action=data['import_action'],
            outlet=Outlet.from_dict(data['outlet']),
        )


@dataclass
class ImportSummary:
    success: List[ImportedOutlet] = field(default_factory=list)
    failures: List[ImportFailure] = field(default_factory=list)

    @property
    def new_count(self) -> int:
        return sum(1 for item in self.success if item.action == NEW)

    @property
    def update_count(self) -> int:
        return sum(1 for item in self.success if item.action == UPDATE)

    @property
    def failure_count(self) -> int:
        return len(self.failures)

    def counts(self) -> Dict[str, int]:
        return {'new': self.new_count, 'update': self.update_count, 'failures': self.failure_count}

    def to_dict(self) -> Dict[str, Any]:
        return {
            'counts': self.counts(),
            'success': [item.to_dict() for item in self.success],
            'failures': [f.to_dict() for f in self.failures],
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'ImportSummary':
        return cls(
            success=[ImportedOutlet.from_dict(s) for s in data.get('success', [])],
            failures=[ImportFailure.from_dict(f) for f in data.get('failures', [])],
        )


# ── Public API ────────────────────────────────────────────────────────────────

def reconcile_rows(
    rows: Iterable[Mapping[str, Any]],
    existing: Iterable[Outlet],
    now: Optional[datetime] = None,
) -> ImportSummary:
    """
    Validate and classify every row against the existing outlets.

    Only active (non-archived) outlets are candidates for an Update match.
    A failed row never affects other rows. Several Update rows for one outlet
    apply in order, each building on the record the previous one produced.
    """
    now = ensure_utc(now) or utcnow()
    by_name = _index_by_name(active_outlets(existing))
    summary = ImportSummary()

    for idx, row in enumerate(rows):
        result = _reconcile_row(idx + FIRST_DATA_ROW, row, by_name, now)
        if isinstance(result, ImportFailure):
            summary.failures.append(result)
        else:
            summary.success.append(result)
            if result.action == UPDATE:
                by_name[_name_key(result.outlet.name)] = result.outlet

    logger.info(
        "Import preview: %d new, %d update, %d failed",
        summary.new_count, summary.update_count, summary.failure_count,
    )
    return summary


def commit_import(existing: Iterable[Outlet], summary: ImportSummary) -> List[Outlet]:
    """
    Merge a previewed import into the outlet list.

    Update records replace the active outlet whose name matches now (state
    may have changed since the preview). An Update that no longer matches
    anything is appended, as are New records. Returns the full new list for
    a single save_all().
    """
    merged = list(existing)
    live_count = len(merged)
    replaced = appended = 0

    for item in summary.success:
        record = copy.deepcopy(item.outlet)
        if item.action == UPDATE:
            idx = _find_active_by_name(merged[:live_count], record.name)
            if idx is not None:
                record.id = merged[idx].id
                merged[idx] = record
                replaced += 1
                continue
            logger.warning("Import row %d: '%s' no longer matches an active outlet, adding it",
                           item.row, record.name, extra={'row': item.row})
        if any(o.id == record.id for o in merged):
            record.id = new_outlet_id()
        merged.append(record)
        appended += 1

    logger.info("Import commit: %d replaced, %d added", replaced, appended)
    return merged


# ── Row handling ─────────────────────────────────────────────────────────────

def _reconcile_row(
    row_num: int,
    row: Mapping[str, Any],
    by_name: Dict[str, Outlet],
    now: datetime,
) -> Union[ImportedOutlet, ImportFailure]:
    fields = _normalize_keys(row)

    name = _field(fields, NAME_ALIASES)
    if not name:
        return ImportFailure(row=row_num, name=UNNAMED_ROW, reason=MISSING_NAME)

    existing = by_name.get(_name_key(name))
    action = UPDATE if existing is not None else NEW

    stage_raw = _field(fields, STAGE_ALIASES)
    if stage_raw:
        stage = match_stage(stage_raw)
        if stage is None:
            return ImportFailure(row_num, name, INVALID_STAGE, stage_raw)
    else:
        stage = existing.current_stage if existing else FIRST_STAGE

    brand_raw = _field(fields, BRAND_ALIASES)
    if brand_raw:
        brand = match_brand(brand_raw)
        if brand is None:
            return ImportFailure(row_num, name, UNRECOGNIZED_BRAND, brand_raw)
    else:
        brand = existing.brand if existing else None

    city_raw = _field(fields, CITY_ALIASES)
    if city_raw:
        city = match_city(city_raw)
        if city is None:
            return ImportFailure(row_num, name, UNRECOGNIZED_CITY, city_raw)
    else:
        city = existing.city if existing else None

    status_raw = _field(fields, STATUS_ALIASES)
    if status_raw:
        status = match_status(status_raw)
        if status is None:
            return ImportFailure(row_num, name, INVALID_STATUS, status_raw)
    else:
        status = existing.status if existing else DEFAULT_STATUS

    # Bad dates are ignored on purpose
    live_date = _parse_live_date(_field(fields, LIVE_DATE_ALIASES))
    description = _field(fields, DESCRIPTION_ALIASES)

    if existing is None:
        stamp = live_date or now
        outlet = Outlet(
            id=new_outlet_id(),
            name=name,
            brand=brand,
            city=city,
            status=status,
            description=description or IMPORT_DESCRIPTION,
            current_stage=stage,
            created_at=now,
            last_moved_at=stamp,
            history=[StageLog(stage=stage, timestamp=stamp, note=IMPORT_NOTE)],
        )
        return ImportedOutlet(row=row_num, action=action, outlet=outlet)

    outlet = copy.deepcopy(existing)
    outlet.brand = brand
    outlet.city = city
    outlet.status = status
    if description and _description_replaceable(existing.description):
        outlet.description = description
    record_import_move(outlet, stage, live_date or now, IMPORT_MOVE_NOTE)
    return ImportedOutlet(row=row_num, action=action, outlet=outlet)


def _description_replaceable(description: str) -> bool:
    text = (description or '').strip()
    return not text or text == IMPORT_DESCRIPTION


def _normalize_keys(row: Mapping[str, Any]) -> Dict[str, Any]:
    return {str(key).strip().lower(): value for key, value in row.items()}


def _field(fields: Dict[str, Any], aliases) -> str:
    for alias in aliases:
        text = _text(fields.get(alias.lower()))
        if text:
            return text
    return ''


def _text(value) -> str:
    """Every cell is untrusted text, whatever type the parser produced."""
    if value is None:
        return ''
    if is_scalar(value) and pd.isna(value):
        return ''
    return str(value).strip()


def _parse_live_date(text: str) -> Optional[datetime]:
    if not text:
        return None
    try:
        # Day-first cells (26/12/2023) still parse; pandas only warns about the guess
        with warnings.catch_warnings():
            warnings.simplefilter('ignore', UserWarning)
            parsed = pd.to_datetime(text, errors='coerce', utc=True)
    except (ValueError, TypeError, OverflowError):
        return None
    if pd.isna(parsed):
        return None
    return parsed.to_pydatetime()


def _name_key(name: str) -> str:
    return name.strip().lower()


def _index_by_name(outlets: Iterable[Outlet]) -> Dict[str, Outlet]:
    # First outlet wins when names collide
    index: Dict[str, Outlet] = {}
    for outlet in outlets:
        index.setdefault(_name_key(outlet.name), outlet)
    return index


def _find_active_by_name(outlets: List[Outlet], name: str) -> Optional[int]:
    wanted = _name_key(name)
    for i, outlet in enumerate(outlets):
        if not outlet.is_archived and _name_key(outlet.name) == wanted:
            return i
    return None
