"""
Import preview store — Redis-backed holding area between preview and commit.

Keys:
    import_preview:{token}  → JSON blob of the ImportSummary (expires after
                              IMPORT_PREVIEW_TTL seconds)
"""
import json
import logging
import uuid

from outlet_ops.config import IMPORT_PREVIEW_TTL
from outlet_ops.extensions import redis_client as r
from outlet_ops.pipeline.importer import ImportSummary

logger = logging.getLogger('services.preview_store')

KEY_PREFIX = 'import_preview:'


class PreviewNotFound(LookupError):
    """Unknown, expired or already-committed preview token."""


def _key(token: str) -> str:
    return f'{KEY_PREFIX}{token}'


def save_preview(summary: ImportSummary, ttl: int = IMPORT_PREVIEW_TTL) -> str:
    """Stash a preview and return its token."""
    token = str(uuid.uuid4())
    r.setex(_key(token), ttl, json.dumps(summary.to_dict()))
    return token


def load_preview(token: str) -> ImportSummary:
    raw = r.get(_key(token))
    if not raw:
        raise PreviewNotFound(token)
    return ImportSummary.from_dict(json.loads(raw))


def discard_preview(token: str) -> bool:
    """Drop a preview. Returns False if there was nothing to drop."""
    return bool(r.delete(_key(token)))
