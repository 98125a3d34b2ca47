"""Best-effort JSON extraction from model replies"""

from __future__ import annotations

import json
import re
from typing import Any


def _fix_json(text: str) -> str:
    """Repair the most common model JSON mistake: trailing commas."""
    # ,} -> } and ,] -> ]
    return re.sub(r",\s*([}\]])", r"\1", text)


def _try_parse(raw: str) -> Any:
    """Parse as-is, then retry once after repairs."""
    try:
        return json.loads(raw)
    except json.JSONDecodeError:
        return json.loads(_fix_json(raw))


def parse_json_response(text: str, expect: str = "object") -> Any:
    """Extract a JSON value from a model reply.

    Looks for a ```json fenced block first, then the outermost ``{...}`` (or
    ``[...]`` when ``expect="array"``), then the whole text.

    Raises:
        json.JSONDecodeError: nothing parseable was found.
    """
    match = re.search(r"```(?:json)?\s*([\s\S]*?)```", text)
    if match:
        return _try_parse(match.group(1).strip())

    pattern = r"\[[\s\S]*\]" if expect == "array" else r"\{[\s\S]*\}"
    match = re.search(pattern, text)
    if match:
        return _try_parse(match.group(0))

    return _try_parse(text.strip())
