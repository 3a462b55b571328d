"""
Shared client instances — Redis (import previews) and OpenAI (descriptions).

Importing this module never touches the network: redis-py connects on first
command, and the OpenAI client is only built when a key is configured.
"""
import logging
from typing import Optional

import redis
from openai import OpenAI

from outlet_ops.config import REDIS_URL, OPENAI_API_KEY

logger = logging.getLogger('outlet_ops.extensions')


def build_openai_client(api_key: Optional[str]) -> Optional[OpenAI]:
    """OpenAI client for api_key, or None when descriptions are disabled."""
    if not api_key:
        logger.warning("OPENAI_API_KEY not set — description suggestions use the fallback text")
        return None
    try:
        return OpenAI(api_key=api_key)
    except Exception as e:
        logger.error("Could not create OpenAI client: %s", e)
        return None


redis_client = redis.from_url(REDIS_URL, decode_responses=True)
openai_client = build_openai_client(OPENAI_API_KEY)
