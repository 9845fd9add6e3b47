"""Validate a print request, resolve its payload and hand it to one driver."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from typing import Optional

from ..drivers.base import Driver
from ..drivers.ipp import IppDriver
from ..drivers.raw_socket import RawSocketDriver
from ..drivers.spool import OsSpoolDriver
from ..errors import ConflictingFields, MissingField, PrintError, ValidationError
from ..jobs import (
    DeliveryResult,
    DocumentSource,
    InlineEncoded,
    IppJob,
    Job,
    OsJob,
    PrintMode,
    RawSocketJob,
    RemoteReference,
    ResolvedPayload,
)
from ..schemas import PrintRequest
from .payload import PayloadResolver

LOGGER = logging.getLogger(__name__)


def _present(value: Optional[str]) -> Optional[str]:
    if value is None:
        return None
    value = value.strip()
    return value or None


def _document_source(request: PrintRequest, mode: PrintMode) -> DocumentSource:
    url = _present(request.fileUrl)
    blob = _present(request.fileBase64)
    if url and blob:
        raise ConflictingFields(("fileUrl", "fileBase64"), mode.value)
    if blob:
        return InlineEncoded(blob)
    if url:
        return RemoteReference(url)
    raise MissingField("fileUrl or fileBase64", mode.value)


def build_job(request: PrintRequest) -> Job:
    """Turn the wire envelope into a job variant, or raise a ValidationError.

    Performs no I/O.
    """
    mode = PrintMode.parse(request.mode)

    if mode is PrintMode.OS:
        return OsJob(source=_document_source(request, mode), printer_name=_present(request.printerName))

    host = _present(request.printerIp)
    if host is None:
        raise MissingField("printerIp or printerAddress", mode.value)

    if mode is PrintMode.RAW_SOCKET:
        # raw is kept verbatim; only presence is checked
        if not request.raw:
            raise MissingField("raw", mode.value)
        return RawSocketJob(host=host, raw=request.raw)

    return IppJob(host=host, source=_document_source(request, mode))


def default_drivers() -> list[Driver]:
    return [OsSpoolDriver(), RawSocketDriver(), IppDriver()]


class PrintDispatcher:
    def __init__(
        self,
        resolver: Optional[PayloadResolver] = None,
        drivers: Optional[Iterable[Driver]] = None,
    ) -> None:
        self.resolver = resolver or PayloadResolver()
        self.drivers: dict[PrintMode, Driver] = {
            d.mode: d for d in (drivers if drivers is not None else default_drivers())
        }

    def dispatch(self, request: PrintRequest) -> DeliveryResult:
        mode: Optional[PrintMode] = None
        try:
            job = build_job(request)
            mode = job.mode
            driver = self.drivers[mode]
            payload = self._payload_for(job)
            LOGGER.info("Dispatching %s job to %s", mode.value, job.destination)
            driver.deliver(job, payload)
        except PrintError as exc:
            LOGGER.warning("Print job failed (%s): %s", exc.kind, exc.message)
            return DeliveryResult.failed(
                mode, exc.kind, exc.message, exc.detail, invalid_request=isinstance(exc, ValidationError)
            )
        except Exception:
            LOGGER.exception("Unexpected error while printing")
            return DeliveryResult.failed(mode, "InternalError", "Internal error while printing")
        return DeliveryResult.ok(mode, driver.success_message)

    def _payload_for(self, job: Job) -> ResolvedPayload:
        if isinstance(job, RawSocketJob):
            return ResolvedPayload(data=self.resolver.decode_inline(job.raw))
        return self.resolver.resolve(job.source)
