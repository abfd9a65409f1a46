"""Record id generation."""

from __future__ import annotations

import time
import uuid
from collections.abc import Container


def new_id(prefix: str, taken: Container[str] = ()) -> str:
    """``<prefix><epoch ms>-<random hex>``; redrawn until unused."""

    while True:
        candidate = f"{prefix}{int(time.time() * 1000)}-{uuid.uuid4().hex[:8]}"
        if candidate not in taken:
            return candidate
