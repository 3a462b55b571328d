"""
OpenAI helpers — one-line outlet descriptions for the add-outlet form.
"""
import logging

from outlet_ops.config import OPENAI_MODEL
from outlet_ops.extensions import openai_client as client

logger = logging.getLogger('services.openai')

FALLBACK_DESCRIPTION = 'No description available.'


def generate_outlet_description(name: str) -> str:
    """
    Ask the model for a 1-sentence business description of an outlet.

    Never raises: a missing client, an API error or an empty answer all
    return FALLBACK_DESCRIPTION.
    """
    if client is None or not (name or '').strip():
        return FALLBACK_DESCRIPTION
    try:
        response = client.chat.completions.create(
            model=OPENAI_MODEL,
            messages=[{
                'role': 'user',
                'content': (
                    'Generate a 1-sentence professional business description '
                    f'for an outlet named "{name.strip()}".'
                ),
            }],
            max_tokens=80,
        )
        text = (response.choices[0].message.content or '').strip()
        return text or FALLBACK_DESCRIPTION
    except Exception as e:
        logger.error("Description generation failed for '%s': %s", name, e)
        return FALLBACK_DESCRIPTION
