"""OS print spooler driver.

POSIX hands files to CUPS ``lp``. On Windows PDFs are rendered and spooled by
SumatraPDF; other files go to the spooler as RAW jobs through win32print.
"""

from __future__ import annotations

import logging
import mimetypes
import os
import shutil
import subprocess
import tempfile
from collections.abc import Iterator
from contextlib import contextmanager
from pathlib import Path
from typing import Optional

from ..core.config import settings
from ..errors import SpoolError
from ..jobs import OsJob, PrintMode, ResolvedPayload
from .base import Driver

try:  # pragma: no cover - Windows specific dependency
    import win32print  # type: ignore
except Exception:  # pragma: no cover - non Windows environments
    win32print = None

LOGGER = logging.getLogger(__name__)

SUMATRA_INSTALL_PATHS = (
    r"C:\Program Files\SumatraPDF\SumatraPDF.exe",
    r"C:\Program Files (x86)\SumatraPDF\SumatraPDF.exe",
)


def _suffix_for(media_type: str) -> str:
    if media_type in {"application/pdf", "application/octet-stream"}:
        return ".pdf"
    return mimetypes.guess_extension(media_type) or ".bin"


@contextmanager
def temporary_document(data: bytes, suffix: str = ".pdf", directory: Optional[str] = None) -> Iterator[Path]:
    """Write ``data`` to a fresh, uniquely named file and remove it on exit."""
    try:
        if directory:
            Path(directory).mkdir(parents=True, exist_ok=True)
        fd, name = tempfile.mkstemp(prefix="print-", suffix=suffix, dir=directory)
    except OSError as exc:
        raise SpoolError(f"Cannot create temp print file in {directory or tempfile.gettempdir()}: {exc}") from exc
    path = Path(name)
    try:
        try:
            with os.fdopen(fd, "wb") as fh:
                fh.write(data)
        except OSError as exc:
            raise SpoolError(f"Cannot write temp print file {path}: {exc}") from exc
        yield path
    finally:
        try:
            path.unlink(missing_ok=True)
        except OSError as exc:
            LOGGER.warning("Failed to delete temp print file %s: %s", path, exc)


class OsSpoolDriver(Driver):
    mode = PrintMode.OS

    def __init__(
        self,
        tmp_dir: Optional[str] = None,
        lp_command: Optional[str] = None,
        lpstat_command: Optional[str] = None,
        sumatra_command: Optional[str] = None,
    ) -> None:
        self.tmp_dir = tmp_dir if tmp_dir is not None else settings.TMP_DIR
        self.lp_command = lp_command or settings.LP_COMMAND
        self.lpstat_command = lpstat_command or settings.LPSTAT_COMMAND
        self.sumatra_command = sumatra_command or settings.SUMATRA_PDF

    @property
    def success_message(self) -> str:
        return "Sent to OS print spooler"

    def deliver(self, job: OsJob, payload: ResolvedPayload) -> None:
        with temporary_document(payload.data, _suffix_for(payload.media_type), self.tmp_dir) as path:
            LOGGER.info("Spooling %s (%d bytes) to %s", path.name, len(payload.data), job.destination)
            self.print_file(path, job.printer_name)

    def print_file(self, path: Path, printer_name: Optional[str] = None) -> None:
        if os.name == "nt":
            self._print_file_windows(path, printer_name)
        else:
            self._print_file_lp(path, printer_name)

    def _print_file_lp(self, path: Path, printer_name: Optional[str]) -> None:
        cmd = [self.lp_command]
        if printer_name:
            cmd.extend(["-d", printer_name])
        cmd.append(str(path))
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise SpoolError(f"Print spooler not available: {exc}") from exc
        if proc.returncode != 0:
            out = ((proc.stderr or "") + (proc.stdout or "")).strip()
            raise SpoolError(f"lp failed (rc={proc.returncode}): {out}")
        LOGGER.info("lp accepted job: %s", (proc.stdout or "").strip())

    def _print_file_windows(self, path: Path, printer_name: Optional[str]) -> None:
        if path.suffix.lower() == ".pdf":
            self._print_pdf_sumatra(path, printer_name)
        else:
            self._print_raw_windows(path, printer_name)

    def find_sumatra(self) -> str:
        if self.sumatra_command:
            return self.sumatra_command
        for candidate in SUMATRA_INSTALL_PATHS:
            if Path(candidate).is_file():
                return candidate
        found = shutil.which("SumatraPDF")
        if found is None:
            raise SpoolError("SumatraPDF not found; install it or set SUMATRA_PDF to SumatraPDF.exe")
        return found

    def _print_pdf_sumatra(self, path: Path, printer_name: Optional[str]) -> None:
        """Render the PDF with SumatraPDF and spool it; returns once the job is queued."""
        cmd = [self.find_sumatra()]
        if printer_name:
            cmd.extend(["-print-to", printer_name])
        else:
            cmd.append("-print-to-default")
        cmd.extend(["-silent", str(path)])
        try:
            proc = subprocess.run(cmd, capture_output=True, text=True)
        except OSError as exc:
            raise SpoolError(f"SumatraPDF not available: {exc}") from exc
        if proc.returncode != 0:
            out = ((proc.stderr or "") + (proc.stdout or "")).strip()
            raise SpoolError(f"SumatraPDF failed (rc={proc.returncode}): {out}")
        LOGGER.info("SumatraPDF spooled %s to %s", path.name, printer_name or "default printer")

    def _print_raw_windows(self, path: Path, printer_name: Optional[str]) -> None:  # pragma: no cover - Windows only
        """Submit the file to the Windows spooler with the RAW datatype.

        The queue's printer has to understand the document format itself.
        """
        if win32print is None:
            raise SpoolError("win32print is not available on this platform")
        try:
            target = printer_name or win32print.GetDefaultPrinter()
            handle = win32print.OpenPrinter(target)
            try:
                job = win32print.StartDocPrinter(handle, 1, (settings.JOB_NAME, None, "RAW"))
                try:
                    win32print.StartPagePrinter(handle)
                    win32print.WritePrinter(handle, path.read_bytes())
                    win32print.EndPagePrinter(handle)
                finally:
                    win32print.EndDocPrinter(handle)
                LOGGER.info("Job %s sent to printer %s", job, target)
            finally:
                win32print.ClosePrinter(handle)
        except SpoolError:
            raise
        except Exception as exc:
            raise SpoolError(str(exc)) from exc

    def default_printer(self) -> Optional[str]:
        if os.name == "nt":  # pragma: no cover - Windows only
            if win32print is None:
                raise SpoolError("win32print is not available on this platform")
            return win32print.GetDefaultPrinter() or None
        out = self._run_lpstat("-d")
        # "system default destination: <name>" or "no system default destination"
        _, sep, name = out.partition(":")
        if not sep:
            return None
        return name.strip() or None

    def list_printers(self) -> list[str]:
        if os.name == "nt":  # pragma: no cover - Windows only
            if win32print is None:
                raise SpoolError("win32print is not available on this platform")
            flags = win32print.PRINTER_ENUM_LOCAL | win32print.PRINTER_ENUM_CONNECTIONS
            return [p[2] for p in win32print.EnumPrinters(flags)]
        out = self._run_lpstat("-e")
        return [line.strip() for line in out.splitlines() if line.strip()]

    def _run_lpstat(self, *args: str) -> str:
        try:
            proc = subprocess.run([self.lpstat_command, *args], capture_output=True, text=True)
        except OSError as exc:
            raise SpoolError(f"Print spooler not available: {exc}") from exc
        if proc.returncode != 0:
            raise SpoolError(f"lpstat failed (rc={proc.returncode}): {(proc.stderr or '').strip()}")
        return proc.stdout or ""
