from __future__ import annotations

import logging
from typing import Optional, Union

from pydantic import ValidationError

from packages.core.errors import ResponseParseError
from .models import BlocksResponse, UsageInterval

log = logging.getLogger(__name__)

_KNOWN_MODELS = {
    "claude-opus-4-20250514": "Opus 4",
    "claude-sonnet-4-20250514": "Sonnet 4",
    "claude-3-5-sonnet-20241022": "Sonnet 3.5",
    "claude-3-haiku-20240307": "Haiku",
}

# Checked in order; first substring hit wins.
_MODEL_FAMILIES = (
    ("opus", "Opus"),
    ("sonnet", "Sonnet"),
    ("haiku", "Haiku"),
)


def parse_blocks(raw: Union[bytes, str]) -> Optional[UsageInterval]:
    """
    Parse `blocks --json` output and pick the active interval.

    Returns the first block flagged active, or None when the list is empty or
    nothing is active. Raises ResponseParseError if the payload is not a
    valid blocks envelope.
    """
    text = raw.decode("utf-8", errors="replace") if isinstance(raw, bytes) else raw
    try:
        response = BlocksResponse.model_validate_json(text)
    except ValidationError as e:
        raise ResponseParseError(f"unexpected blocks response: {e.error_count()} error(s)") from e

    active = [block for block in response.blocks if block.is_active]
    if len(active) > 1:
        log.warning("Tool reported %d active blocks, using %s", len(active), active[0].id)
    return active[0] if active else None


def format_model_name(model_name: str) -> str:
    known = _KNOWN_MODELS.get(model_name)
    if known is not None:
        return known
    for keyword, label in _MODEL_FAMILIES:
        if keyword in model_name:
            return label
    return model_name
