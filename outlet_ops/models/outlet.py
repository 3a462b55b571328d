"""
Outlet domain model — the entity that moves through the onboarding pipeline.

Plain dataclasses; persistence lives in models/db_outlet.py and the
repository. Timestamps are timezone-aware UTC datetimes and serialize to
ISO-8601 strings.
"""
import uuid
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional

from outlet_ops.pipeline.vocabulary import Stage, DEFAULT_STATUS, DEFAULT_PRIORITY, FIRST_STAGE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def new_outlet_id() -> str:
    return str(uuid.uuid4())


def _iso(value: Optional[datetime]) -> Optional[str]:
    return value.isoformat() if value else None


def ensure_utc(value: Optional[datetime]) -> Optional[datetime]:
    """Naive datetimes are taken to be UTC already."""
    if value is not None and value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value


def _parse_dt(value) -> Optional[datetime]:
    if value is None or value == '':
        return None
    if isinstance(value, datetime):
        return ensure_utc(value)
    return ensure_utc(datetime.fromisoformat(str(value).replace('Z', '+00:00')))


@dataclass
class StageLog:
    """One visit to a stage."""
    stage: Stage
    timestamp: datetime
    note: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'stage': self.stage.value,
            'timestamp': _iso(self.timestamp),
            'note': self.note,
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'StageLog':
        return cls(
            stage=Stage(data['stage']),
            timestamp=_parse_dt(data['timestamp']),
            note=data.get('note'),
        )


@dataclass
class Outlet:
    """
    A restaurant outlet being onboarded.

    history holds every StageLog in insertion order; it is never empty once
    the outlet has been created.
    """
    name: str
    id: str = field(default_factory=new_outlet_id)
    brand: Optional[str] = None
    city: Optional[str] = None
    status: str = DEFAULT_STATUS
    priority: str = DEFAULT_PRIORITY
    description: str = ''
    current_stage: Stage = FIRST_STAGE
    created_at: datetime = field(default_factory=utcnow)
    last_moved_at: datetime = field(default_factory=utcnow)
    history: List[StageLog] = field(default_factory=list)
    is_archived: bool = False
    archived_at: Optional[datetime] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            'id': self.id,
            'name': self.name,
            'brand': self.brand,
            'city': self.city,
            'status': self.status,
            'priority': self.priority,
            'description': self.description,
            'current_stage': self.current_stage.value,
            'created_at': _iso(self.created_at),
            'last_moved_at': _iso(self.last_moved_at),
            'history': [log.to_dict() for log in self.history],
            'is_archived': self.is_archived,
            'archived_at': _iso(self.archived_at),
        }

    @classmethod
    def from_dict(cls, data: Dict[str, Any]) -> 'Outlet':
        return cls(
            id=data['id'],
            name=data['name'],
            brand=data.get('brand'),
            city=data.get('city'),
            status=data.get('status') or DEFAULT_STATUS,
            priority=data.get('priority') or DEFAULT_PRIORITY,
            description=data.get('description') or '',
            current_stage=Stage(data['current_stage']),
            created_at=_parse_dt(data['created_at']),
            last_moved_at=_parse_dt(data['last_moved_at']),
            history=[StageLog.from_dict(h) for h in data.get('history', [])],
            is_archived=bool(data.get('is_archived', False)),
            archived_at=_parse_dt(data.get('archived_at')),
        )
