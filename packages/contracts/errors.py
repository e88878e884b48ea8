from __future__ import annotations


class FreezerError(Exception):
    """Base class for failures surfaced to the session as a loading error."""


class GatewayError(FreezerError):
    def __init__(self, operation: str, cause: str) -> None:
        super().__init__(f"{operation} failed: {cause}")
        self.operation = operation
        self.cause = cause


class OcrError(FreezerError):
    pass


class OcrProviderError(OcrError):
    def __init__(self, status_code: int | None, body: str) -> None:
        label = f"HTTP {status_code}" if status_code is not None else "request error"
        super().__init__(f"OCR provider returned {label}: {body}")
        self.status_code = status_code
        self.body = body


class OcrFormatError(OcrError):
    pass


class CredentialMissingError(FreezerError):
    def __init__(self, key: str) -> None:
        super().__init__(f"No value configured for {key!r}; set it in the settings.")
        self.key = key


class CredentialStoreError(FreezerError):
    pass


class StepTimeoutError(GatewayError):
    def __init__(self, operation: str, seconds: float) -> None:
        super().__init__(operation, f"timed out after {seconds:g}s")
        self.seconds = seconds
