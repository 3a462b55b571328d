"""
Outlet lifecycle: active → archived → permanently deleted.

Archiving is a soft delete; only restore() leads back to active. Archived
outlets are hidden from every active view but stay addressable by id.
"""
import logging
from datetime import datetime
from typing import Iterable, List, Optional

from outlet_ops.models.outlet import Outlet, ensure_utc, utcnow

logger = logging.getLogger('pipeline.lifecycle')


def archive(outlet: Outlet, now: Optional[datetime] = None) -> None:
    outlet.is_archived = True
    outlet.archived_at = ensure_utc(now) or utcnow()


def restore(outlet: Outlet) -> None:
    outlet.is_archived = False
    outlet.archived_at = None


def permanently_delete(repository, outlet_id: str) -> bool:
    """
    Remove an outlet from the repository for good.

    Irreversible and unguarded: the archived precondition is the caller's
    responsibility. Returns False when no outlet has that id.
    """
    outlets = repository.load()
    remaining = [o for o in outlets if o.id != outlet_id]
    if len(remaining) == len(outlets):
        return False
    repository.save_all(remaining)
    logger.info("Outlet %s permanently deleted", outlet_id)
    return True


def active_outlets(outlets: Iterable[Outlet]) -> List[Outlet]:
    return [o for o in outlets if not o.is_archived]


def archived_outlets(outlets: Iterable[Outlet]) -> List[Outlet]:
    return [o for o in outlets if o.is_archived]
