"""
Board search and pipeline analytics. Archived outlets never count.
"""
from datetime import datetime
from typing import Any, Dict, Iterable, List, Optional

from outlet_ops.models.outlet import Outlet, ensure_utc, utcnow
from outlet_ops.pipeline.lifecycle import active_outlets
from outlet_ops.pipeline.vocabulary import STAGE_ORDER, LAST_STAGE, stage_label

SECONDS_PER_DAY = 86400


def search_outlets(outlets: Iterable[Outlet], term: Optional[str]) -> List[Outlet]:
    """Active outlets whose name, description, brand, city or any note contains term."""
    active = active_outlets(outlets)
    needle = (term or '').strip().lower()
    if not needle:
        return active

    def _matches(outlet: Outlet) -> bool:
        haystack = [outlet.name, outlet.description, outlet.brand, outlet.city]
        haystack.extend(log.note for log in outlet.history)
        return any(text and needle in text.lower() for text in haystack)

    return [o for o in active if _matches(o)]


def days_in_stage(outlet: Outlet, now: Optional[datetime] = None) -> int:
    now = ensure_utc(now) or utcnow()
    return int((now - outlet.last_moved_at).total_seconds() // SECONDS_PER_DAY)


def is_delayed(outlet: Outlet, now: Optional[datetime] = None) -> bool:
    if outlet.current_stage == LAST_STAGE:
        return False
    return days_in_stage(outlet, now) > outlet.current_stage.target_days


def pipeline_stats(outlets: Iterable[Outlet], now: Optional[datetime] = None) -> Dict[str, Any]:
    """
    Board-level KPIs plus per-stage load.

    avg_cycle_days is measured from creation to the last move for outlets
    that are live; avg_days per stage is the mean time outlets have been
    sitting in that stage. A stage is a bottleneck when that mean exceeds a
    non-zero target.
    """
    now = ensure_utc(now) or utcnow()
    active = active_outlets(outlets)
    live = [o for o in active if o.current_stage == LAST_STAGE]
    delayed = [o for o in active if is_delayed(o, now)]

    avg_cycle_days = 0
    if live:
        total_seconds = sum((o.last_moved_at - o.created_at).total_seconds() for o in live)
        avg_cycle_days = round(total_seconds / len(live) / SECONDS_PER_DAY)

    stages = []
    for stage in STAGE_ORDER:
        in_stage = [o for o in active if o.current_stage == stage]
        avg_days = 0.0
        if in_stage:
            total_seconds = sum((now - o.last_moved_at).total_seconds() for o in in_stage)
            avg_days = round(total_seconds / len(in_stage) / SECONDS_PER_DAY, 1)
        stages.append({
            'stage': stage.value,
            'label': stage_label(stage),
            'count': len(in_stage),
            'avg_days': avg_days,
            'target_days': stage.target_days,
            'is_bottleneck': stage.target_days > 0 and avg_days > stage.target_days,
        })

    return {
        'total': len(active),
        'live': len(live),
        'in_pipeline': len(active) - len(live),
        'delayed': len(delayed),
        'delayed_ids': [o.id for o in delayed],
        'avg_cycle_days': avg_cycle_days,
        'stages': stages,
    }
