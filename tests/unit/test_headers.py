"""Tests for the header semantic resolver."""

from datetime import datetime, timezone

import pytest

from mailsift.exceptions import (
    AddressParseError,
    DateParseError,
    EncodedWordError,
)
from mailsift.models import Group, Header, Mailbox
from mailsift.parser.headers import HeaderResolver, make_id
from mailsift.parser.raw import parse_raw


def resolve(data: bytes, ignore_errors: bool = False):
    resolver = HeaderResolver(ignore_errors=ignore_errors)
    info = resolver.resolve(parse_raw(data))
    return info, resolver.defects


class TestTypedFields:
    def test_message_id_brackets_stripped(self):
        info, _ = resolve(b"Message-ID:  <abc@example.com> \r\n\r\n")
        assert info.message_id == "abc@example.com"
        assert info.id == make_id(b"abc@example.com")
        assert len(info.id) == 20

    def test_in_reply_to_and_references(self):
        info, _ = resolve(
            b"In-Reply-To: <p@x>\r\n"
            b"References: <a@x> <b@x>\r\n\t<c@x>\r\n"
            b"\r\n"
        )
        assert info.in_reply_to == ["p@x"]
        assert info.references == ["a@x", "b@x", "c@x"]

    def test_date(self):
        info, defects = resolve(b"Date: Mon, 02 Jun 2025 09:30:00 +0000\r\n\r\n")
        assert info.date == datetime(2025, 6, 2, 9, 30, tzinfo=timezone.utc)
        assert defects == []

    def test_unparsable_date_is_recorded(self):
        info, defects = resolve(b"Date: sometime last week\r\n\r\n")
        assert info.date is None
        assert len(defects) == 1
        assert isinstance(defects[0], DateParseError)

    def test_subject_encoded_word(self):
        info, _ = resolve(b"Subject: =?UTF-8?B?SGVsbG8gV29ybGQ=?=\r\n\r\n")
        assert info.subject == "Hello World"

    def test_subject_quoted_printable_word(self):
        info, _ = resolve(b"Subject: Re: =?utf-8?q?caf=C3=A9?=\r\n\r\n")
        assert info.subject == "Re: café"

    def test_bad_encoded_word_falls_back_to_raw(self):
        info, defects = resolve(b"Subject: =?x-bogus?q?abc?=\r\n\r\n")
        assert info.subject == "=?x-bogus?q?abc?="
        assert info.full_headers == [Header("Subject", "=?x-bogus?q?abc?=")]
        assert len(defects) == 1
        assert isinstance(defects[0], EncodedWordError)

    def test_comments_and_keywords(self):
        info, _ = resolve(
            b"Comments: first\r\nComments: second\r\nKeywords: one, two ,three\r\n\r\n"
        )
        assert info.comments == ["first", "second"]
        assert info.keywords == ["one", "two", "three"]

    def test_content_type_kept_verbatim(self):
        info, _ = resolve(b'Content-Type: multipart/mixed; boundary="b1"\r\n\r\n')
        assert info.content_type == 'multipart/mixed; boundary="b1"'

    def test_keys_match_case_insensitively(self):
        info, _ = resolve(b"SUBJECT: loud\r\nfrom: a@x.com\r\n\r\n")
        assert info.subject == "loud"
        assert info.from_addresses == [Mailbox(None, "a", "x.com")]


class TestAddresses:
    def test_address_list_order(self):
        info, _ = resolve(b"To: Bob <b@x.com>, c@x.com, \"D, Esq\" <d@x.com>\r\n\r\n")
        assert [a.address for a in info.to] == ["b@x.com", "c@x.com", "d@x.com"]
        assert info.to[0].name == "Bob"
        assert info.to[2].name == "D, Esq"

    def test_group(self):
        info, _ = resolve(b"To: Team: a@x.com, b@x.com;, c@x.com\r\n\r\n")
        assert info.to == [
            Group("Team", (Mailbox(None, "a", "x.com"), Mailbox(None, "b", "x.com"))),
            Mailbox(None, "c", "x.com"),
        ]

    def test_encoded_display_name(self):
        info, _ = resolve(b"From: =?utf-8?q?J=C3=B6rg?= <jorg@example.com>\r\n\r\n")
        assert info.from_addresses[0].name == "Jörg"

    def test_sender_defaults_to_first_from(self):
        info, _ = resolve(b"From: a@x.com, b@x.com\r\n\r\n")
        assert info.sender == Mailbox(None, "a", "x.com")

    def test_explicit_sender_wins(self):
        info, _ = resolve(b"From: a@x.com\r\nSender: s@x.com\r\n\r\n")
        assert info.sender == Mailbox(None, "s", "x.com")

    def test_each_address_field(self):
        info, _ = resolve(
            b"From: f@x.com\r\nReply-To: r@x.com\r\nTo: t@x.com\r\n"
            b"Cc: c@x.com\r\nBcc: b@x.com\r\n\r\n"
        )
        assert [a.address for a in info.from_addresses] == ["f@x.com"]
        assert [a.address for a in info.reply_to] == ["r@x.com"]
        assert [a.address for a in info.to] == ["t@x.com"]
        assert [a.address for a in info.cc] == ["c@x.com"]
        assert [a.address for a in info.bcc] == ["b@x.com"]

    def test_duplicate_address_headers_accumulate(self):
        info, _ = resolve(b"To: a@x.com\r\nTo: b@x.com\r\n\r\n")
        assert [a.address for a in info.to] == ["a@x.com", "b@x.com"]

    def test_bad_address_is_fatal(self):
        with pytest.raises(AddressParseError) as exc_info:
            resolve(b"To: not-an-address\r\nSubject: after\r\n\r\n")
        assert exc_info.value.header == "to"

    def test_bad_sender_is_fatal(self):
        with pytest.raises(AddressParseError):
            resolve(b"Sender: a@x.com, b@x.com\r\n\r\n")

    def test_ignore_errors_records_and_continues(self):
        info, defects = resolve(
            b"To: not-an-address\r\nSubject: after\r\n\r\n", ignore_errors=True
        )
        assert info.to == []
        assert info.subject == "after"
        assert len(defects) == 1
        assert isinstance(defects[0], AddressParseError)


class TestHeaderCollections:
    def test_full_and_opt_headers(self):
        info, _ = resolve(b"Subject: Hi\r\nX-Mailer: test\r\nReceived: a\r\n\r\n")
        assert [h.key for h in info.full_headers] == ["Subject", "X-Mailer", "Received"]
        assert info.opt_headers == [Header("X-Mailer", "test"), Header("Received", "a")]

    def test_header_map_keeps_raw_values(self):
        info, _ = resolve(
            b"Received: one\r\nReceived: two\r\nSubject: =?utf-8?q?x?=\r\n\r\n"
        )
        assert info.header_map["Received"] == ["one", "two"]
        assert info.header_map["Subject"] == ["=?utf-8?q?x?="]

    def test_singular_fields_keep_last_value(self):
        info, _ = resolve(
            b"Subject: first\r\nSubject: second\r\nMessage-ID: <1@x>\r\nMessage-ID: <2@x>\r\n\r\n"
        )
        assert info.subject == "second"
        assert info.message_id == "2@x"
