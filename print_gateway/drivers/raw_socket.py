from __future__ import annotations

import logging
import socket
from typing import Optional

from ..core.config import settings
from ..errors import PrinterConnectionError
from ..jobs import PrintMode, RawSocketJob, ResolvedPayload
from .base import Driver

LOGGER = logging.getLogger(__name__)


class RawSocketDriver(Driver):
    """Send printer-ready bytes to the JetDirect/AppSocket data port.

    Completion is the peer closing the connection; raw-print devices send no
    acknowledgment, so anything they do send back is read and discarded.
    """

    mode = PrintMode.RAW_SOCKET

    def __init__(self, port: Optional[int] = None, timeout: Optional[float] = None) -> None:
        self.port = port if port is not None else settings.RAW_PORT
        self.timeout = timeout if timeout is not None else settings.RAW_TIMEOUT

    @property
    def success_message(self) -> str:
        return "Raw TCP sent to printer"

    def deliver(self, job: RawSocketJob, payload: ResolvedPayload) -> None:
        LOGGER.info("Sending %d raw bytes to %s:%s", len(payload.data), job.host, self.port)
        try:
            self.send(job.host, payload.data)
        except OSError as exc:
            raise PrinterConnectionError(f"{job.host}:{self.port}: {exc}") from exc

    def send(self, host: str, data: bytes) -> None:
        with socket.create_connection((host, self.port), timeout=self.timeout) as conn:
            conn.sendall(data)
            conn.shutdown(socket.SHUT_WR)
            while conn.recv(4096):
                pass
