"""Application cache – canonical filter signatures."""
from __future__ import annotations

import json
from typing import Any, Mapping

__all__ = ["canonical_signature"]


def canonical_signature(filters: Mapping[str, Any], namespace: str = "") -> str:
    """Deterministic key for *filters*: sorted keys, compact JSON.

    *namespace* (typically the list endpoint) is prefixed so the same
    filters against different endpoints never collide.
    """
    body = json.dumps(dict(filters), sort_keys=True, separators=(",", ":"), default=str)
    return f"{namespace}|{body}" if namespace else body
