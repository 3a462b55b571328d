"""
Stage transitions — the state machine over the ordered Stage enumeration.

Two ways to change stage, with different history policies:

  move()       steps one stage forward/backward and always appends a new
               StageLog, even if the stage was visited before.
  set_stage()  jumps directly to any stage and reuses the most recent
               StageLog for that stage when one exists.

Stepping past either end of the pipeline is a silent no-op.
"""
import logging
from datetime import datetime
from typing import Optional

from outlet_ops.models.outlet import Outlet, StageLog, ensure_utc, utcnow
from outlet_ops.pipeline.history import find_last_log_for_stage
from outlet_ops.pipeline.vocabulary import (
    Stage, STAGE_ORDER, FIRST_STAGE, DEFAULT_STATUS, DEFAULT_PRIORITY,
)

logger = logging.getLogger('pipeline.transitions')

FORWARD = 'forward'
BACKWARD = 'backward'
DIRECTIONS = (FORWARD, BACKWARD)

DEFAULT_DESCRIPTION = 'New outlet request.'


def create_outlet(
    name: str,
    description: str = '',
    note: str = '',
    status: str = DEFAULT_STATUS,
    brand: Optional[str] = None,
    city: Optional[str] = None,
    priority: str = DEFAULT_PRIORITY,
    now: Optional[datetime] = None,
) -> Outlet:
    """Build a new outlet at the first stage with its history seeded."""
    now = ensure_utc(now) or utcnow()
    return Outlet(
        name=name,
        brand=brand,
        city=city,
        status=status,
        priority=priority,
        description=description or DEFAULT_DESCRIPTION,
        current_stage=FIRST_STAGE,
        created_at=now,
        last_moved_at=now,
        history=[StageLog(stage=FIRST_STAGE, timestamp=now, note=note)],
    )


def move(outlet: Outlet, direction: str, now: Optional[datetime] = None) -> bool:
    """
    Step one stage in direction ('forward' or 'backward').

    Returns True if the outlet moved, False at either end of the pipeline.
    """
    if direction not in DIRECTIONS:
        raise ValueError(f"Unknown direction '{direction}'. Expected one of {DIRECTIONS}")

    current_index = STAGE_ORDER.index(outlet.current_stage)
    next_index = current_index + 1 if direction == FORWARD else current_index - 1
    if next_index < 0 or next_index >= len(STAGE_ORDER):
        return False

    now = ensure_utc(now) or utcnow()
    new_stage = STAGE_ORDER[next_index]
    outlet.current_stage = new_stage
    outlet.last_moved_at = now
    outlet.history.append(StageLog(stage=new_stage, timestamp=now))
    logger.debug("Outlet %s moved %s to %s", outlet.id, direction, new_stage.value)
    return True


def set_stage(outlet: Outlet, new_stage: Stage, now: Optional[datetime] = None) -> bool:
    """
    Jump directly to new_stage.

    Reuses the most recent log for new_stage (timestamp bumped to now) or
    appends one. No-op when the outlet is already there.
    """
    if new_stage == outlet.current_stage:
        return False

    now = ensure_utc(now) or utcnow()
    log = find_last_log_for_stage(outlet, new_stage)
    if log is not None:
        log.timestamp = now
    else:
        outlet.history.append(StageLog(stage=new_stage, timestamp=now))

    outlet.current_stage = new_stage
    outlet.last_moved_at = now
    logger.debug("Outlet %s set to %s", outlet.id, new_stage.value)
    return True


def record_import_move(outlet: Outlet, new_stage: Stage, moved_at: datetime,
                       note: str) -> bool:
    """
    Apply a stage change coming from a bulk import.

    Appends one checkpoint carrying note and advances last_moved_at to
    moved_at. Unchanged stage leaves history and last_moved_at alone.
    """
    if new_stage == outlet.current_stage:
        return False
    moved_at = ensure_utc(moved_at)
    outlet.history.append(StageLog(stage=new_stage, timestamp=moved_at, note=note))
    outlet.current_stage = new_stage
    outlet.last_moved_at = moved_at
    return True
