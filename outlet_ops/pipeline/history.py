"""
Per-stage history log for one outlet.

An outlet may visit the same stage more than once, so every lookup addresses
the *most recent* StageLog for a stage (scanning from the end of history).
Storage is never deduplicated.
"""
from datetime import datetime
from typing import Optional

from outlet_ops.models.outlet import Outlet, StageLog, ensure_utc, utcnow
from outlet_ops.pipeline.vocabulary import Stage


def _last_index_for_stage(outlet: Outlet, stage: Stage) -> int:
    for i in range(len(outlet.history) - 1, -1, -1):
        if outlet.history[i].stage == stage:
            return i
    return -1


def find_last_log_for_stage(outlet: Outlet, stage: Stage) -> Optional[StageLog]:
    """Most recent log for stage, or None. Last match wins, not exactly-one."""
    idx = _last_index_for_stage(outlet, stage)
    return outlet.history[idx] if idx != -1 else None


def upsert_note_for_stage(outlet: Outlet, stage: Stage, note: str,
                          now: Optional[datetime] = None) -> StageLog:
    """
    Attach a note to the most recent visit to stage.

    The existing entry keeps its identity and timestamp; when the stage has
    never been visited a new entry is appended. Any string, including '',
    is accepted.
    """
    log = find_last_log_for_stage(outlet, stage)
    if log is not None:
        log.note = note
        return log
    log = StageLog(stage=stage, timestamp=ensure_utc(now) or utcnow(), note=note)
    outlet.history.append(log)
    return log


def upsert_timestamp_for_stage(outlet: Outlet, stage: Stage,
                               new_timestamp: datetime) -> StageLog:
    """
    Set the timestamp of the most recent visit to stage, appending if needed.

    Backdating can invert order, so the whole history is re-sorted by
    timestamp afterwards. Callers must not hold on to history indices.
    """
    new_timestamp = ensure_utc(new_timestamp)
    log = find_last_log_for_stage(outlet, stage)
    if log is not None:
        log.timestamp = new_timestamp
    else:
        log = StageLog(stage=stage, timestamp=new_timestamp)
        outlet.history.append(log)
    outlet.history.sort(key=lambda entry: entry.timestamp)
    return log
