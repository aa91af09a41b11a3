"""Pytest configuration and fixtures."""

import base64

import pytest

from mailsift.config import Settings
from mailsift.parser import MessageParser

PDF_BYTES = b"%PDF-1.4 fake pdf content"


@pytest.fixture
def settings() -> Settings:
    """Settings with defaults, ignoring any .env file."""
    return Settings(_env_file=None)


@pytest.fixture
def parser(settings: Settings) -> MessageParser:
    return MessageParser(settings)


# ------------------------------------------------------------------
# Sample EML builders
# ------------------------------------------------------------------


def build_plain_email(
    *,
    subject: bytes = b"Test Email",
    from_addr: bytes = b"sender@example.com",
    to_addr: bytes = b"recipient@example.com",
    body: bytes = b"This is a test email body.",
    extra_headers: bytes = b"",
    newline: bytes = b"\r\n",
) -> bytes:
    """Build a simple text/plain message as raw bytes."""
    lines = [
        b"From: " + from_addr,
        b"To: " + to_addr,
        b"Subject: " + subject,
        b"Date: Mon, 02 Jun 2025 09:30:00 +0000",
        b"Message-ID: <test-123@example.com>",
        b"Content-Type: text/plain; charset=utf-8",
    ]
    head = newline.join(lines) + newline + extra_headers
    return head + newline + body


def build_multipart_email(newline: bytes = b"\r\n") -> bytes:
    """mixed( alternative(text, html), base64 pdf attachment )."""
    encoded = base64.b64encode(PDF_BYTES)
    lines = [
        b"From: Alice <alice@example.com>",
        b"To: bob@example.com",
        b"Subject: Report",
        b"Date: Mon, 02 Jun 2025 09:30:00 +0000",
        b"Message-ID: <multi-1@example.com>",
        b"MIME-Version: 1.0",
        b'Content-Type: multipart/mixed; boundary="outer"',
        b"",
        b"This is a multi-part message in MIME format.",
        b"--outer",
        b'Content-Type: multipart/alternative; boundary="inner"',
        b"",
        b"--inner",
        b'Content-Type: text/plain; charset="utf-8"',
        b"",
        b"Plain body",
        b"--inner",
        b'Content-Type: text/html; charset="utf-8"',
        b"",
        b"<p>HTML body</p>",
        b"--inner--",
        b"",
        b"--outer",
        b"Content-Type: application/pdf",
        b'Content-Disposition: attachment; filename="report.pdf"',
        b"Content-Transfer-Encoding: base64",
        b"",
        encoded,
        b"--outer--",
        b"",
    ]
    return newline.join(lines)


@pytest.fixture
def sample_email_bytes() -> bytes:
    """Sample raw email bytes with LF line endings."""
    return b"""From: sender@example.com
To: recipient@test.local
Subject: Test Email
Message-ID: <test-123@example.com>
Content-Type: text/plain

This is a test email body.
"""


@pytest.fixture
def plain_eml_bytes() -> bytes:
    return build_plain_email()


@pytest.fixture
def multipart_eml_bytes() -> bytes:
    return build_multipart_email()
