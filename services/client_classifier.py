"""
Heuristic that flags admin-creation requests coming from API clients or
automation tools instead of a browser on our own site.

This only annotates audit records; it is not an access control.
"""
from __future__ import annotations

UNKNOWN = 'unknown'

SUSPICIOUS_CLIENT_SIGNATURES = frozenset({
    'postman',
    'insomnia',
    'curl',
    'wget',
    'python-requests',
    'axios',
    'node-fetch',
    'httpie',
    'rest-client',
    'swagger',
})

TRUSTED_ORIGIN_FRAGMENTS = frozenset({
    'localhost',
    'guia-tnn',
})

BROWSER_TOKENS = frozenset({
    'chrome',
    'firefox',
    'safari',
    'edge',
})


def _is_trusted(header_value: str | None) -> bool:
    if not header_value or header_value == UNKNOWN:
        return False
    return any(fragment in header_value for fragment in TRUSTED_ORIGIN_FRAGMENTS)


def is_suspicious_client(user_agent: str | None, origin: str | None, referer: str | None) -> bool:
    """Return True when the headers look like a non-browser client.

    A known tool signature in the user agent wins outright. Otherwise the
    request is suspicious only when it has neither a trusted origin, nor a
    trusted referer, nor a mainstream browser token.
    """
    ua = (user_agent or UNKNOWN).lower()
    if any(signature in ua for signature in SUSPICIOUS_CLIENT_SIGNATURES):
        return True

    valid_origin = _is_trusted(origin)
    valid_referer = _is_trusted(referer)
    has_browser_fingerprint = any(token in ua for token in BROWSER_TOKENS)
    return not valid_origin and not valid_referer and not has_browser_fingerprint
