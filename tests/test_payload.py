import base64
import unittest
from unittest.mock import Mock, patch

import requests

from print_gateway.errors import FetchFailed, InvalidEncoding, ResolutionError, ValidationError
from print_gateway.jobs import InlineEncoded, RemoteReference
from print_gateway.services.payload import PayloadResolver


def _response(status_code: int = 200, content: bytes = b"", reason: str = "OK", headers=None) -> Mock:
    return Mock(status_code=status_code, content=content, reason=reason, headers=headers or {})


class InlineResolveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = Mock()
        self.resolver = PayloadResolver(session=self.session)

    def test_pdf_blob_decodes_to_exact_bytes(self) -> None:
        payload = self.resolver.resolve(InlineEncoded("application/pdf;base64,JVBERi0x"))
        self.assertEqual(payload.data, bytes([0x25, 0x50, 0x44, 0x46, 0x2D, 0x31]))
        self.assertEqual(payload.media_type, "application/pdf")
        self.session.get.assert_not_called()

    def test_reencoding_reproduces_the_body(self) -> None:
        body = base64.b64encode(b"%PDF-1.7\n%\xe2\xe3\xcf\xd3\n1 0 obj").decode("ascii")
        payload = self.resolver.resolve(InlineEncoded(f"application/pdf;base64,{body}"))
        self.assertEqual(base64.b64encode(payload.data).decode("ascii"), body)

    def test_data_url_prefix_is_accepted(self) -> None:
        payload = self.resolver.resolve(InlineEncoded("data:application/pdf;base64,JVBERi0x"))
        self.assertEqual(payload.data, b"%PDF-1")

    def test_data_url_parameters_are_skipped(self) -> None:
        payload = self.resolver.resolve(InlineEncoded("data:application/pdf;name=a.pdf;charset=binary;base64,JVBERi0x"))
        self.assertEqual(payload.data, b"%PDF-1")
        self.assertEqual(payload.media_type, "application/pdf")

    def test_whitespace_in_body_is_ignored(self) -> None:
        payload = self.resolver.resolve(InlineEncoded("application/pdf;base64,JVBE\nRi0x "))
        self.assertEqual(payload.data, b"%PDF-1")

    def test_empty_mime_defaults_to_octet_stream(self) -> None:
        payload = self.resolver.resolve(InlineEncoded(";base64,VEVTVA=="))
        self.assertEqual(payload.media_type, "application/octet-stream")

    def test_missing_delimiter_is_invalid_encoding(self) -> None:
        with self.assertRaises(InvalidEncoding) as ctx:
            self.resolver.resolve(InlineEncoded("JVBERi0x"))
        self.assertIsInstance(ctx.exception, ValidationError)
        self.assertIsInstance(ctx.exception, ResolutionError)

    def test_bad_base64_body_is_invalid_encoding(self) -> None:
        with self.assertRaises(InvalidEncoding):
            self.resolver.resolve(InlineEncoded("application/pdf;base64,!!!!"))


class DecodeInlineTests(unittest.TestCase):
    def setUp(self) -> None:
        self.resolver = PayloadResolver(session=Mock())

    def test_literal_text_passes_through(self) -> None:
        self.assertEqual(self.resolver.decode_inline("TEST"), b"TEST")

    def test_printer_commands_pass_through(self) -> None:
        zpl = "^XA^FO50,50^FDHello^FS^XZ"
        self.assertEqual(self.resolver.decode_inline(zpl), zpl.encode("utf-8"))

    def test_inline_blob_is_decoded(self) -> None:
        self.assertEqual(self.resolver.decode_inline("data:application/octet-stream;base64,VEVTVA=="), b"TEST")

    def test_inline_blob_with_parameters_is_decoded(self) -> None:
        self.assertEqual(self.resolver.decode_inline("data:application/pdf;name=a.pdf;base64,JVBERi0x"), b"%PDF-1")

    def test_inline_blob_with_bad_body_fails(self) -> None:
        with self.assertRaises(InvalidEncoding):
            self.resolver.decode_inline("application/octet-stream;base64,%%%")


class RemoteResolveTests(unittest.TestCase):
    def setUp(self) -> None:
        self.session = Mock()
        self.resolver = PayloadResolver(session=self.session, timeout=5)

    def test_fetch_returns_body_and_content_type(self) -> None:
        self.session.get.return_value = _response(
            content=b"%PDF-1.4", headers={"Content-Type": "application/pdf; charset=binary"}
        )
        payload = self.resolver.resolve(RemoteReference("https://files.example/doc.pdf"))
        self.assertEqual(payload.data, b"%PDF-1.4")
        self.assertEqual(payload.media_type, "application/pdf")
        self.session.get.assert_called_once_with("https://files.example/doc.pdf", timeout=5)

    def test_missing_content_type_defaults(self) -> None:
        self.session.get.return_value = _response(content=b"x")
        payload = self.resolver.resolve(RemoteReference("http://files.example/x"))
        self.assertEqual(payload.media_type, "application/octet-stream")

    def test_not_found_is_fetch_failed_with_status(self) -> None:
        self.session.get.return_value = _response(status_code=404, reason="Not Found")
        with self.assertRaises(FetchFailed) as ctx:
            self.resolver.resolve(RemoteReference("http://bad.example/x.pdf"))
        self.assertEqual(ctx.exception.detail, "404")
        self.assertIn("404 Not Found", str(ctx.exception))

    def test_network_error_is_fetch_failed(self) -> None:
        self.session.get.side_effect = requests.ConnectionError("Name or service not known")
        with self.assertRaises(FetchFailed) as ctx:
            self.resolver.resolve(RemoteReference("http://nowhere.invalid/x.pdf"))
        self.assertIn("Name or service not known", str(ctx.exception))

    def test_non_http_scheme_is_rejected_without_fetching(self) -> None:
        with self.assertRaises(FetchFailed):
            self.resolver.resolve(RemoteReference("file:///etc/passwd"))
        self.session.get.assert_not_called()

    def test_without_session_each_fetch_uses_requests_get(self) -> None:
        resolver = PayloadResolver(timeout=5)
        with patch("print_gateway.services.payload.requests.get", return_value=_response(content=b"x")) as get:
            resolver.resolve(RemoteReference("http://files.example/a.pdf"))
            resolver.resolve(RemoteReference("http://files.example/b.pdf"))
        self.assertEqual(get.call_count, 2)
        get.assert_called_with("http://files.example/b.pdf", timeout=5)


if __name__ == "__main__":
    unittest.main()
