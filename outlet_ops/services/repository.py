"""
Outlet repositories — where the outlet collection lives between operations.

Every implementation offers the same three calls:

    load()          → list of Outlet (fresh objects, safe to mutate)
    save_all(list)  → replace the whole collection, all-or-nothing
    get(id)         → one Outlet or None, without loading the rest

InMemoryRepository backs tests and scripted use; SqlRepository persists to
the configured database in a single transaction per save.
"""
import copy
import logging
from typing import Callable, List, Optional

from outlet_ops import database
from outlet_ops.models.db_outlet import DbOutlet, DbStageLog
from outlet_ops.models.outlet import Outlet, StageLog, ensure_utc
from outlet_ops.pipeline.vocabulary import Stage

logger = logging.getLogger('services.repository')


class RepositoryError(Exception):
    """Persisting the outlet collection failed; nothing was written."""


class InMemoryRepository:
    """Holds deep copies so callers never share state with the store."""

    def __init__(self, outlets: Optional[List[Outlet]] = None):
        self._outlets: List[Outlet] = copy.deepcopy(list(outlets or []))

    def load(self) -> List[Outlet]:
        return copy.deepcopy(self._outlets)

    def save_all(self, outlets: List[Outlet]) -> None:
        self._outlets = copy.deepcopy(list(outlets))

    def get(self, outlet_id: str) -> Optional[Outlet]:
        return next((o for o in self.load() if o.id == outlet_id), None)


class SqlRepository:
    """SQLAlchemy-backed repository. save_all() is one transaction."""

    def __init__(self, session_factory: Optional[Callable] = None):
        self._session_factory = session_factory

    def _session(self):
        if self._session_factory is not None:
            return self._session_factory()
        return database.get_session()

    def load(self) -> List[Outlet]:
        session = self._session()
        try:
            rows = session.query(DbOutlet).order_by(DbOutlet.created_at, DbOutlet.id).all()
            return [_to_domain(row) for row in rows]
        finally:
            session.close()

    def save_all(self, outlets: List[Outlet]) -> None:
        """Replace every stored outlet with outlets. Rolls back on any error."""
        session = self._session()
        try:
            session.query(DbStageLog).delete(synchronize_session=False)
            session.query(DbOutlet).delete(synchronize_session=False)
            for outlet in outlets:
                session.add(_to_row(outlet))
            session.commit()
            logger.debug("Saved %d outlets", len(outlets))
        except Exception as e:
            session.rollback()
            logger.error("Failed to save %d outlets", len(outlets), exc_info=True)
            raise RepositoryError(str(e)) from e
        finally:
            session.close()

    def get(self, outlet_id: str) -> Optional[Outlet]:
        session = self._session()
        try:
            row = session.get(DbOutlet, outlet_id)
            return _to_domain(row) if row is not None else None
        finally:
            session.close()


# ── Row mapping ──────────────────────────────────────────────────────────────

def _to_row(outlet: Outlet) -> DbOutlet:
    row = DbOutlet(
        id=outlet.id,
        name=outlet.name,
        brand=outlet.brand,
        city=outlet.city,
        status=outlet.status,
        priority=outlet.priority,
        description=outlet.description,
        current_stage=outlet.current_stage.value,
        created_at=outlet.created_at,
        last_moved_at=outlet.last_moved_at,
        is_archived=outlet.is_archived,
        archived_at=outlet.archived_at,
    )
    row.history = [
        DbStageLog(position=i, stage=log.stage.value, timestamp=log.timestamp, note=log.note)
        for i, log in enumerate(outlet.history)
    ]
    return row


def _to_domain(row: DbOutlet) -> Outlet:
    return Outlet(
        id=row.id,
        name=row.name,
        brand=row.brand,
        city=row.city,
        status=row.status,
        priority=row.priority,
        description=row.description or '',
        current_stage=Stage(row.current_stage),
        created_at=ensure_utc(row.created_at),
        last_moved_at=ensure_utc(row.last_moved_at),
        history=[
            StageLog(stage=Stage(log.stage), timestamp=ensure_utc(log.timestamp), note=log.note)
            for log in row.history
        ],
        is_archived=bool(row.is_archived),
        archived_at=ensure_utc(row.archived_at),
    )
