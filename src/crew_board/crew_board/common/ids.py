from __future__ import annotations

import uuid


def new_id(prefix: str) -> str:
    """Row ids are client-generated strings such as ``att-3f2a...``."""
    return f"{prefix}-{uuid.uuid4().hex[:12]}"
