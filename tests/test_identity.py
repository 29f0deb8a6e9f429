"""Tests for Mojang name lookups and the rate-limited resolver."""

from __future__ import annotations

import pytest
import requests

from app.stat_reporter.src import identity
from app.stat_reporter.src.core import IdentityLookupError, PlayerNotFoundError


class _Resp:
    def __init__(self, status_code: int, payload=None, *, bad_json: bool = False):
        self.status_code = status_code
        self.ok = 200 <= status_code < 400
        self._payload = payload
        self._bad_json = bad_json

    def json(self):
        if self._bad_json:
            raise ValueError("no json")
        return self._payload


def test_fetch_display_name_returns_profile_name(monkeypatch: pytest.MonkeyPatch):
    """Return the name field of a successful profile response."""
    seen: dict[str, object] = {}

    def fake_get(url, headers=None, timeout=None):
        seen["url"] = url
        seen["timeout"] = timeout
        return _Resp(200, {"id": "abc", "name": "Notch"})

    monkeypatch.setattr(identity.requests, "get", fake_get)

    assert identity.fetch_display_name("abc", timeout=5) == "Notch"
    assert seen["url"] == "https://sessionserver.mojang.com/session/minecraft/profile/abc"
    assert seen["timeout"] == 5


def test_fetch_display_name_uses_custom_session_url(monkeypatch: pytest.MonkeyPatch):
    """Format the identifier into a caller-supplied URL template."""
    urls: list[str] = []

    def fake_get(url, **_kwargs):
        urls.append(url)
        return _Resp(200, {"name": "Jeb"})

    monkeypatch.setattr(identity.requests, "get", fake_get)

    identity.fetch_display_name("xyz", session_url="http://localhost/p/{identifier}")
    assert urls == ["http://localhost/p/xyz"]


@pytest.mark.parametrize("status_code", [400, 404, 429, 500, 204])
def test_fetch_display_name_raises_not_found_on_non_success(monkeypatch: pytest.MonkeyPatch, status_code: int):
    """Non-success statuses (and Mojang's empty 204) mean the profile was not found."""
    monkeypatch.setattr(identity.requests, "get", lambda *_a, **_k: _Resp(status_code))

    with pytest.raises(PlayerNotFoundError) as exc_info:
        identity.fetch_display_name("abc")

    assert exc_info.value.status_code == status_code
    assert exc_info.value.identifier == "abc"


def test_fetch_display_name_wraps_network_errors(monkeypatch: pytest.MonkeyPatch):
    """Network failures surface as IdentityLookupError."""

    def boom(*_a, **_k):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(identity.requests, "get", boom)

    with pytest.raises(IdentityLookupError):
        identity.fetch_display_name("abc")


def test_fetch_display_name_rejects_malformed_json(monkeypatch: pytest.MonkeyPatch):
    """An unparseable body is a lookup error, not a missing player."""
    monkeypatch.setattr(identity.requests, "get", lambda *_a, **_k: _Resp(200, bad_json=True))

    with pytest.raises(IdentityLookupError):
        identity.fetch_display_name("abc")


def test_fetch_display_name_rejects_profile_without_name(monkeypatch: pytest.MonkeyPatch):
    """A profile body with no name field fails validation."""
    monkeypatch.setattr(identity.requests, "get", lambda *_a, **_k: _Resp(200, {"id": "abc"}))

    with pytest.raises(IdentityLookupError):
        identity.fetch_display_name("abc")


def test_rate_limited_resolver_sleeps_after_success():
    """Pause for the configured delay after every successful lookup."""
    sleeps: list[float] = []
    resolver = identity.RateLimitedResolver(lambda ident: ident.upper(), delay_seconds=0.5, sleep=sleeps.append)

    assert resolver("a") == "A"
    assert resolver("b") == "B"
    assert sleeps == [0.5, 0.5]


def test_rate_limited_resolver_does_not_sleep_after_failure():
    """Failed lookups propagate straight away without the pause."""
    sleeps: list[float] = []

    def lookup(identifier: str) -> str:
        raise PlayerNotFoundError(identifier=identifier, status_code=404)

    resolver = identity.RateLimitedResolver(lookup, sleep=sleeps.append)

    with pytest.raises(PlayerNotFoundError):
        resolver("missing")
    assert sleeps == []


def test_build_mojang_resolver_passes_settings_through(monkeypatch: pytest.MonkeyPatch):
    """The production resolver forwards URL and timeout to the HTTP call."""
    calls: list[tuple[str, float]] = []

    def fake_get(url, headers=None, timeout=None):
        calls.append((url, timeout))
        return _Resp(200, {"name": "Dinnerbone"})

    monkeypatch.setattr(identity.requests, "get", fake_get)

    resolver = identity.build_mojang_resolver(session_url="http://svc/{identifier}", timeout=3, delay_seconds=0)
    assert resolver.delay_seconds == 0
    assert resolver("u1") == "Dinnerbone"
    assert calls == [("http://svc/u1", 3)]
