# ashadidi/runtime/json_extract.py
from __future__ import annotations

import json
import logging
import re
from typing import Any, Dict, Optional

logger = logging.getLogger(__name__)

_FENCE_RE = re.compile(r"```(?:json)?[ \t]*\n?", re.I)


def strip_code_fences(text: Optional[str]) -> str:
    return _FENCE_RE.sub("", text or "").strip()


def find_json_object(text: Optional[str]) -> Optional[str]:
    """Return the first balanced ``{...}`` substring, or None.

    Braces inside JSON string literals are ignored.
    """
    s = text or ""
    start = s.find("{")
    while start != -1:
        depth = 0
        in_str = False
        escaped = False
        for i in range(start, len(s)):
            ch = s[i]
            if in_str:
                if escaped:
                    escaped = False
                elif ch == "\\":
                    escaped = True
                elif ch == '"':
                    in_str = False
                continue
            if ch == '"':
                in_str = True
            elif ch == "{":
                depth += 1
            elif ch == "}":
                depth -= 1
                if depth == 0:
                    return s[start:i + 1]
        # unbalanced from this brace; try the next one
        start = s.find("{", start + 1)
    return None


def parse_json_object(text: Optional[str]) -> Optional[Dict[str, Any]]:
    candidate = find_json_object(strip_code_fences(text))
    if candidate is None:
        logger.warning("No JSON object found in model output")
        return None
    try:
        data = json.loads(candidate)
    except json.JSONDecodeError as exc:
        logger.warning("JSON parse error in model output: %s", exc)
        return None
    if not isinstance(data, dict):
        return None
    return data
