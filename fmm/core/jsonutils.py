# fmm/core/jsonutils.py
from __future__ import annotations

import json
import traceback
from collections import deque
from pathlib import Path
from typing import Any

__all__ = ["safeJsonDumps", "serializeError"]



TRACEBACK_CHAR_LIMIT = 4000



# ------------------------------------------------
#                JSON serialization
# ------------------------------------------------

def safeJsonDumps(obj: object) -> str:
    """
    Serializes an object to a compact JSON string.
    Uses deterministic separators (",", ":") and disallows NaN/infinity.
    Paths and other unknown objects fall back to str() / repr().
    """
    try:
        return json.dumps(obj, ensure_ascii=False, allow_nan=False, separators=(",", ":"))
    except (TypeError, ValueError):
        return json.dumps(obj, ensure_ascii=False, separators=(",", ":"), default=_fallback)



def _fallback(obj: Any) -> Any:
    if isinstance(obj, Path):
        return str(obj)
    if isinstance(obj, BaseException):
        return serializeError(obj)
    if isinstance(obj, (set, frozenset, tuple)):
        return list(obj)
    return repr(obj)



# ------------------------------------------------
#              Error / Exception helpers
# ------------------------------------------------

def serializeError(err: Any) -> dict[str, Any]:
    """
    Converts Exception or arbitrary object into a JSON-serializable dict.

    Examples:
        ValueError("bad") -> {"type": "ValueError", "message": "bad", "stack": "..."}
        "error text"      -> {"message": "error text"}
        None              -> {}
    """
    if err is None:
        return {}

    if isinstance(err, str):
        return {"message": err}

    if isinstance(err, BaseException):
        data: dict[str, Any] = {
            "type": err.__class__.__name__,
            "message": str(err),
            "args": [repr(arg) for arg in getattr(err, "args", [])],
        }
        # Mod errors carry the mod/version/path they concern
        for attr in ("name", "modName", "version", "path", "offset"):
            value = getattr(err, attr, None)
            if value is not None:
                data[attr] = str(value)

        traceBack = getattr(err, "__traceback__", None)
        if traceBack:
            que: deque[str] = deque()
            total = 0
            truncated = False

            for part in traceback.format_tb(traceBack):
                que.append(part)
                total += len(part)
                while total > TRACEBACK_CHAR_LIMIT and que:
                    left = que.popleft()
                    total -= len(left)
                    truncated = True

            text = "".join(que)
            if truncated:
                text += "[TRUNCATED]"
            data["stack"] = text

        return data

    return {"type": type(err).__name__, "repr": repr(err)}
