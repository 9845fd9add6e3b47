from typing import Any


class PrintError(Exception):
    """Base class for every failure a print job can report."""

    kind = "PrintError"

    def __init__(self, message: str, detail: str | None = None) -> None:
        super().__init__(message)
        self.message = message
        self.detail = detail if detail is not None else message


class ValidationError(PrintError):
    """The job description is unusable. Raised before any I/O."""

    kind = "ValidationError"


class ResolutionError(PrintError):
    """The document payload could not be materialized."""

    kind = "ResolutionError"


class DeliveryError(PrintError):
    """The transport failed while talking to the printer."""

    kind = "DeliveryError"


class MissingField(ValidationError):
    kind = "MissingField"

    def __init__(self, field: str, mode: str) -> None:
        super().__init__(f"{field} required for mode={mode}", detail=field)
        self.field = field
        self.mode = mode


class UnsupportedMode(ValidationError):
    kind = "UnsupportedMode"

    def __init__(self, mode: Any) -> None:
        super().__init__(f"Unsupported mode: {mode!r}", detail=str(mode))
        self.mode = mode


class ConflictingFields(ValidationError):
    kind = "ConflictingFields"

    def __init__(self, fields: tuple[str, ...], mode: str) -> None:
        joined = " and ".join(fields)
        super().__init__(f"{joined} are mutually exclusive for mode={mode}", detail=joined)
        self.fields = fields
        self.mode = mode


class InvalidEncoding(ValidationError, ResolutionError):
    """Inline payload is not ``<mime>;base64,<data>`` or its body is not base64."""

    kind = "InvalidEncoding"


class FetchFailed(ResolutionError):
    kind = "FetchFailed"

    def __init__(self, detail: str, reason: str | None = None) -> None:
        text = f"{detail} {reason}" if reason else detail
        super().__init__(f"Failed to fetch file: {text}", detail=detail)


class SpoolError(DeliveryError):
    kind = "SpoolError"


class PrinterConnectionError(DeliveryError):
    kind = "ConnectionError"


class IppError(DeliveryError):
    kind = "IppError"
