"""Shared contracts for the capture session and the OCR pipeline."""

from .errors import (
    CredentialMissingError,
    CredentialStoreError,
    FreezerError,
    GatewayError,
    OcrError,
    OcrFormatError,
    OcrProviderError,
    StepTimeoutError,
)
from .models import (
    OcrResult,
    ProcessHandle,
    SessionPhase,
    SessionSnapshot,
    SettingsPayload,
    Vertex,
    Word,
)
from .utils import content_fingerprint, new_trace_id

__all__ = [
    "CredentialMissingError",
    "CredentialStoreError",
    "FreezerError",
    "GatewayError",
    "OcrError",
    "OcrFormatError",
    "OcrProviderError",
    "OcrResult",
    "ProcessHandle",
    "SessionPhase",
    "SessionSnapshot",
    "SettingsPayload",
    "StepTimeoutError",
    "Vertex",
    "Word",
    "content_fingerprint",
    "new_trace_id",
]
