"""Job variants, payloads and results passed between the dispatcher and drivers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, ClassVar, Optional, Union

from .errors import UnsupportedMode


class PrintMode(str, Enum):
    OS = "os"
    RAW_SOCKET = "tcp"
    IPP = "ipp"

    @classmethod
    def parse(cls, value: Any) -> "PrintMode":
        """Accept the wire values (``os``, ``tcp``, ``ipp``) or the member names.

        A missing mode means OS spooling.
        """
        if value is None:
            return cls.OS
        if not isinstance(value, str):
            raise UnsupportedMode(value)
        key = value.strip().lower()
        for member in cls:
            if key in (member.value, member.name.lower()):
                return member
        raise UnsupportedMode(value)


@dataclass(frozen=True)
class RemoteReference:
    url: str


@dataclass(frozen=True)
class InlineEncoded:
    blob: str


DocumentSource = Union[RemoteReference, InlineEncoded]


@dataclass(frozen=True)
class OsJob:
    mode: ClassVar[PrintMode] = PrintMode.OS

    source: DocumentSource
    printer_name: Optional[str] = None

    @property
    def destination(self) -> str:
        return self.printer_name or "<default printer>"


@dataclass(frozen=True)
class RawSocketJob:
    mode: ClassVar[PrintMode] = PrintMode.RAW_SOCKET

    host: str
    raw: str

    @property
    def destination(self) -> str:
        return self.host


@dataclass(frozen=True)
class IppJob:
    mode: ClassVar[PrintMode] = PrintMode.IPP

    host: str
    source: DocumentSource

    @property
    def destination(self) -> str:
        return self.host


Job = Union[OsJob, RawSocketJob, IppJob]


@dataclass(frozen=True)
class ResolvedPayload:
    data: bytes
    media_type: str = "application/octet-stream"


@dataclass(frozen=True)
class DeliveryResult:
    success: bool
    mode: Optional[PrintMode]
    message: str
    error_kind: Optional[str] = None
    error_detail: Optional[str] = None
    invalid_request: bool = False

    @classmethod
    def ok(cls, mode: PrintMode, message: str) -> "DeliveryResult":
        return cls(success=True, mode=mode, message=message)

    @classmethod
    def failed(
        cls,
        mode: Optional[PrintMode],
        kind: str,
        message: str,
        detail: Optional[str] = None,
        invalid_request: bool = False,
    ) -> "DeliveryResult":
        return cls(
            success=False,
            mode=mode,
            message=message,
            error_kind=kind,
            error_detail=detail,
            invalid_request=invalid_request,
        )

    def to_response(self) -> dict[str, Any]:
        body: dict[str, Any] = {"success": self.success}
        if self.mode is not None:
            body["mode"] = self.mode.value
        if self.success:
            body["message"] = self.message
        else:
            body["error"] = self.message
            body["kind"] = self.error_kind
        return body
