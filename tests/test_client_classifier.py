"""
tests/test_client_classifier.py
"""
from __future__ import annotations

import pytest

from services.client_classifier import (
    BROWSER_TOKENS,
    SUSPICIOUS_CLIENT_SIGNATURES,
    UNKNOWN,
    is_suspicious_client,
)
from tests.conftest import CHROME_UA, CURL_UA


@pytest.mark.parametrize('signature', sorted(SUSPICIOUS_CLIENT_SIGNATURES))
def test_tool_signature_wins_even_with_trusted_headers(signature):
    ua = f'Mozilla/5.0 Chrome/120 {signature.upper()}/1.0'
    assert is_suspicious_client(ua, 'http://localhost:3000', 'https://guia-tnn.com/dashboard')


def test_tool_signature_matches_anywhere_case_insensitive():
    assert is_suspicious_client('PostmanRuntime/7.36.0', UNKNOWN, UNKNOWN)
    assert is_suspicious_client('my-app python-requests/2.31', UNKNOWN, UNKNOWN)
    assert is_suspicious_client(CURL_UA, 'https://guia-tnn.com', UNKNOWN)


def test_trusted_origin_alone_is_enough():
    assert not is_suspicious_client('SomeClient/1.0', 'https://guia-tnn.vercel.app', UNKNOWN)


def test_trusted_referer_alone_is_enough():
    assert not is_suspicious_client('SomeClient/1.0', UNKNOWN, 'http://localhost:3000/dashboard/admins/add')


@pytest.mark.parametrize('token', sorted(BROWSER_TOKENS))
def test_browser_token_alone_is_enough(token):
    assert not is_suspicious_client(f'Mozilla/5.0 {token.title()}/99', UNKNOWN, UNKNOWN)


def test_no_trusted_header_and_no_browser_is_suspicious():
    assert is_suspicious_client('SomeClient/1.0', UNKNOWN, UNKNOWN)
    assert is_suspicious_client(UNKNOWN, UNKNOWN, UNKNOWN)


def test_untrusted_hostnames_do_not_count():
    assert is_suspicious_client('SomeClient/1.0', 'https://example.com', 'https://evil.example.org/')


def test_unknown_sentinel_is_absent_even_though_it_is_a_string():
    # "unknown" must never be read as a real origin value
    assert is_suspicious_client('SomeClient/1.0', 'unknown', 'unknown')


def test_none_inputs_are_treated_as_missing():
    assert is_suspicious_client(None, None, None)
    assert not is_suspicious_client(CHROME_UA, None, None)


def test_classification_is_repeatable():
    args = ('SomeClient/1.0', 'https://guia-tnn.com', UNKNOWN)
    assert {is_suspicious_client(*args) for _ in range(5)} == {False}
    args = (CURL_UA, UNKNOWN, UNKNOWN)
    assert {is_suspicious_client(*args) for _ in range(5)} == {True}
