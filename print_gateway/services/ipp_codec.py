"""Minimal IPP/1.1 binary encoding (RFC 8010) for the Print-Job operation."""

from __future__ import annotations

import struct
from typing import NamedTuple

IPP_VERSION = (1, 1)

IPP_OP_PRINT_JOB = 0x0002

TAG_OPERATION_ATTRIBUTES = 0x01
TAG_END_OF_ATTRIBUTES = 0x03

VT_NAME_WITHOUT_LANGUAGE = 0x42
VT_URI = 0x45
VT_CHARSET = 0x47
VT_NATURAL_LANGUAGE = 0x48
VT_MIME_MEDIA_TYPE = 0x49

# Status codes below this value are successful-ok or informational.
IPP_STATUS_CLIENT_ERROR = 0x0400

STATUS_NAMES = {
    0x0000: "successful-ok",
    0x0001: "successful-ok-ignored-or-substituted-attributes",
    0x0002: "successful-ok-conflicting-attributes",
    0x0400: "client-error-bad-request",
    0x0401: "client-error-forbidden",
    0x0402: "client-error-not-authenticated",
    0x0403: "client-error-not-authorized",
    0x0404: "client-error-not-possible",
    0x0405: "client-error-timeout",
    0x0406: "client-error-not-found",
    0x0407: "client-error-gone",
    0x0408: "client-error-request-entity-too-large",
    0x0409: "client-error-request-value-too-long",
    0x040A: "client-error-document-format-not-supported",
    0x040B: "client-error-attributes-or-values-not-supported",
    0x040C: "client-error-uri-scheme-not-supported",
    0x040D: "client-error-charset-not-supported",
    0x040E: "client-error-conflicting-attributes",
    0x040F: "client-error-compression-not-supported",
    0x0410: "client-error-compression-error",
    0x0411: "client-error-document-format-error",
    0x0412: "client-error-document-access-error",
    0x0500: "server-error-internal-error",
    0x0501: "server-error-operation-not-supported",
    0x0502: "server-error-service-unavailable",
    0x0503: "server-error-version-not-supported",
    0x0504: "server-error-device-error",
    0x0505: "server-error-temporary-error",
    0x0506: "server-error-not-accepting-jobs",
    0x0507: "server-error-busy",
    0x0508: "server-error-job-canceled",
    0x0509: "server-error-multiple-document-jobs-not-supported",
}


class IppResponseHeader(NamedTuple):
    version: tuple[int, int]
    status_code: int
    request_id: int

    @property
    def is_error(self) -> bool:
        return self.status_code >= IPP_STATUS_CLIENT_ERROR


def status_name(status_code: int) -> str:
    return STATUS_NAMES.get(status_code, f"status-0x{status_code:04x}")


def _ipp_attr(tag: int, name: str, value: bytes) -> bytes:
    name_b = name.encode("utf-8")
    return bytes([tag]) + struct.pack(">H", len(name_b)) + name_b + struct.pack(">H", len(value)) + value


def _ipp_attr_str(tag: int, name: str, value: str) -> bytes:
    return _ipp_attr(tag, name, value.encode("utf-8"))


def encode_print_job(
    printer_uri: str,
    requesting_user: str,
    job_name: str,
    document_format: str,
    request_id: int = 1,
) -> bytes:
    """Return the Print-Job request header and attributes; the document follows it."""
    out = bytearray()
    out += bytes(IPP_VERSION)
    out += struct.pack(">H", IPP_OP_PRINT_JOB)
    out += struct.pack(">I", request_id)

    out += bytes([TAG_OPERATION_ATTRIBUTES])
    # attributes-charset and attributes-natural-language must come first
    out += _ipp_attr_str(VT_CHARSET, "attributes-charset", "utf-8")
    out += _ipp_attr_str(VT_NATURAL_LANGUAGE, "attributes-natural-language", "en")
    out += _ipp_attr_str(VT_URI, "printer-uri", printer_uri)
    out += _ipp_attr_str(VT_NAME_WITHOUT_LANGUAGE, "requesting-user-name", requesting_user)
    out += _ipp_attr_str(VT_NAME_WITHOUT_LANGUAGE, "job-name", job_name)
    out += _ipp_attr_str(VT_MIME_MEDIA_TYPE, "document-format", document_format)

    out += bytes([TAG_END_OF_ATTRIBUTES])
    return bytes(out)


def decode_response_header(body: bytes) -> IppResponseHeader:
    if len(body) < 8:
        raise ValueError(f"IPP response too short ({len(body)} bytes)")
    major, minor = body[0], body[1]
    status_code, request_id = struct.unpack(">HI", body[2:8])
    return IppResponseHeader(version=(major, minor), status_code=status_code, request_id=request_id)
