from __future__ import annotations

import hashlib
import uuid
from datetime import datetime, timezone


def new_trace_id() -> str:
    ts = datetime.now(tz=timezone.utc).strftime("%Y%m%d%H%M%S")
    return f"trace_{ts}_{uuid.uuid4().hex[:10]}"


def content_fingerprint(payload: str | bytes) -> str:
    encoded = payload.encode("utf-8") if isinstance(payload, str) else payload
    return hashlib.sha256(encoded).hexdigest()
