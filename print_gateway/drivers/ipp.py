from __future__ import annotations

import logging
from typing import Optional

import requests

from ..core.config import settings
from ..errors import IppError
from ..jobs import IppJob, PrintMode, ResolvedPayload
from ..services import ipp_codec
from .base import Driver

LOGGER = logging.getLogger(__name__)

DOCUMENT_FORMAT = "application/pdf"

# Each Print-Job is a one-shot exchange on its own connection.
REQUEST_ID = 1


class IppDriver(Driver):
    """Submit a document with one IPP Print-Job request.

    Success means the printer's IPP service accepted the job; job state is
    not followed up.
    """

    mode = PrintMode.IPP

    def __init__(
        self,
        session: Optional[requests.Session] = None,
        port: Optional[int] = None,
        path: Optional[str] = None,
    ) -> None:
        self.session = session
        self.port = port if port is not None else settings.IPP_PORT
        self.path = path or settings.IPP_PATH

    @property
    def success_message(self) -> str:
        return "IPP job sent"

    def printer_uri(self, host: str) -> str:
        return f"ipp://{host}:{self.port}{self.path}"

    def endpoint(self, host: str) -> str:
        return f"http://{host}:{self.port}{self.path}"

    def deliver(self, job: IppJob, payload: ResolvedPayload) -> None:
        body = ipp_codec.encode_print_job(
            printer_uri=self.printer_uri(job.host),
            requesting_user=settings.IPP_REQUESTING_USER,
            job_name=settings.JOB_NAME,
            document_format=DOCUMENT_FORMAT,
            request_id=REQUEST_ID,
        )
        url = self.endpoint(job.host)
        LOGGER.info("IPP Print-Job to %s (%d bytes)", url, len(payload.data))

        try:
            resp = (self.session or requests).post(
                url,
                data=body + payload.data,
                headers={"Content-Type": "application/ipp", "Accept": "application/ipp"},
            )
        except requests.RequestException as exc:
            raise IppError(f"IPP request to {url} failed: {exc}") from exc

        if resp.status_code != 200:
            raise IppError(f"IPP endpoint {url} returned HTTP {resp.status_code} {resp.reason or ''}".rstrip())

        try:
            header = ipp_codec.decode_response_header(resp.content)
        except ValueError as exc:
            raise IppError(f"Invalid IPP response from {url}: {exc}") from exc

        name = ipp_codec.status_name(header.status_code)
        if header.is_error:
            raise IppError(f"Printer rejected job: {name} (0x{header.status_code:04x})")
        LOGGER.info("IPP job accepted by %s: %s", job.host, name)
