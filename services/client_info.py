"""Request fingerprinting: IP, headers and parsed browser/OS/device."""
from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from user_agents import parse as parse_user_agent

from services.client_classifier import UNKNOWN


@dataclass(frozen=True)
class ClientDetails:
    browser: str
    operating_system: str
    device: str


def _label(family: str | None, version: str | None) -> str:
    if not family or family == 'Other':
        family = UNKNOWN
    return f'{family} {version or ""}'.strip()


def parse_client(user_agent: str) -> ClientDetails:
    """Describe the browser, OS and device category of a user-agent string."""
    ua = parse_user_agent(user_agent or '')
    if ua.is_bot:
        device = 'bot'
    elif ua.is_tablet:
        device = 'tablet'
    elif ua.is_mobile:
        device = 'mobile'
    elif ua.is_pc:
        device = 'desktop'
    else:
        device = UNKNOWN
    return ClientDetails(
        browser=_label(ua.browser.family, ua.browser.version_string),
        operating_system=_label(ua.os.family, ua.os.version_string),
        device=device,
    )


def _client_ip(headers) -> str:
    forwarded = (headers.get('X-Forwarded-For') or '').strip()
    if forwarded:
        return forwarded.split(',', 1)[0].strip() or UNKNOWN
    return (headers.get('X-Real-IP') or '').strip() or UNKNOWN


@dataclass(frozen=True)
class ClientFingerprint:
    """Everything recorded about the client of one request."""

    ip_address: str
    user_agent: str
    origin: str
    referer: str
    browser: str
    operating_system: str
    device: str

    @classmethod
    def from_request(cls, request, parse: Callable[[str], ClientDetails] = parse_client) -> 'ClientFingerprint':
        headers = request.headers
        user_agent = headers.get('User-Agent') or UNKNOWN
        details = parse(user_agent)
        return cls(
            ip_address=_client_ip(headers),
            user_agent=user_agent,
            origin=headers.get('Origin') or UNKNOWN,
            referer=headers.get('Referer') or UNKNOWN,
            browser=details.browser,
            operating_system=details.operating_system,
            device=details.device,
        )

    def snapshot(self) -> dict:
        """Column values shared by audit rows and creation metadata."""
        return {
            'ip_address': self.ip_address[:64],
            'user_agent': self.user_agent,
            'browser': self.browser[:120],
            'operating_system': self.operating_system[:120],
            'device': self.device[:40],
            'origin': self.origin[:255],
        }
