from __future__ import annotations

import json
import re
from typing import Any, Dict

from ..logging import get_logger

LOG = get_logger("locate")

_FENCE_RE = re.compile(r"```(?:json)?\s*([\s\S]*?)\s*```")


def locate_json_candidate(text: str) -> str:
    """Return the substring of ``text`` most likely to hold a JSON object.

    Preference order: the body of the first fenced code block (``` or
    ```json), then the span from the first ``{`` to the last ``}``, then the
    stripped text itself. The result is not validated.
    """
    fenced = _FENCE_RE.search(text)
    if fenced:
        return fenced.group(1).strip()

    candidate = text.strip()
    start = candidate.find("{")
    end = candidate.rfind("}")
    if start != -1 and end != -1 and end > start:
        return candidate[start : end + 1]
    return candidate


def _reject_constant(token: str) -> Any:
    raise ValueError(f"non-standard JSON constant {token}")


def parse_json_object(text: str) -> Dict[str, Any]:
    """Decode the located candidate, returning ``{}`` unless it is an object.

    Strict JSON only: the ``NaN``/``Infinity``/``-Infinity`` tokens that
    ``json.loads`` would otherwise accept make the whole candidate invalid.
    """
    candidate = locate_json_candidate(text)
    try:
        obj = json.loads(candidate, parse_constant=_reject_constant)
    except (ValueError, RecursionError):
        LOG.debug("JSON parse failed for candidate (first 200 chars: %r)", candidate[:200])
        return {}
    if isinstance(obj, dict):
        return obj
    LOG.debug(f"Candidate decoded to {type(obj).__name__}, not an object")
    return {}
