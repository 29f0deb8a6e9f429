"""Resolve player UUIDs to their current Minecraft usernames."""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from typing import Protocol

import requests
from pydantic import ValidationError

from ..schemas.schemas import MojangProfile
from .config import DEFAULT_LOOKUP_DELAY_SECONDS, DEFAULT_TIMEOUT_SECONDS, MOJANG_SESSION_URL
from .core import IdentityLookupError, PlayerNotFoundError

DEFAULT_UA = "stat-reporter/0.1 (+https://sessionserver.mojang.com)"

logger = logging.getLogger(__name__)


class IdentityResolver(Protocol):
    def __call__(self, identifier: str) -> str: ...


def fetch_display_name(
    identifier: str,
    *,
    session_url: str = MOJANG_SESSION_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
) -> str:
    """Look up the most recent username for a player UUID."""
    url = session_url.format(identifier=identifier)
    try:
        response = requests.get(url, headers={"User-Agent": DEFAULT_UA}, timeout=timeout)
    except requests.RequestException as exc:
        logger.error("Error fetching username for UUID: %s", identifier)
        raise IdentityLookupError(f"Request for {identifier} failed: {exc}") from exc

    # The session server answers 204 with an empty body for unknown profiles.
    if not response.ok or response.status_code == 204:
        logger.error("Failed to fetch username for UUID: %s. Status: %s", identifier, response.status_code)
        raise PlayerNotFoundError(identifier=identifier, status_code=response.status_code)

    try:
        profile = MojangProfile.model_validate(response.json())
    except (ValueError, ValidationError) as exc:
        logger.error("Malformed profile response for UUID: %s", identifier)
        raise IdentityLookupError(f"Malformed profile response for {identifier}") from exc

    return profile.name


class RateLimitedResolver:
    """Wrap a lookup so that every successful call is followed by a fixed pause.

    Failed lookups raise straight away without pausing.
    """

    def __init__(
        self,
        lookup: Callable[[str], str] = fetch_display_name,
        *,
        delay_seconds: float = DEFAULT_LOOKUP_DELAY_SECONDS,
        sleep: Callable[[float], None] = time.sleep,
    ) -> None:
        self._lookup = lookup
        self._delay_seconds = delay_seconds
        self._sleep = sleep

    @property
    def delay_seconds(self) -> float:
        return self._delay_seconds

    def __call__(self, identifier: str) -> str:
        name = self._lookup(identifier)
        logger.debug("Resolved %s -> %s", identifier, name)
        if self._delay_seconds > 0:
            self._sleep(self._delay_seconds)
        return name


def build_mojang_resolver(
    *,
    session_url: str = MOJANG_SESSION_URL,
    timeout: float = DEFAULT_TIMEOUT_SECONDS,
    delay_seconds: float = DEFAULT_LOOKUP_DELAY_SECONDS,
) -> RateLimitedResolver:
    """Build the production resolver backed by the Mojang session server."""

    def lookup(identifier: str) -> str:
        return fetch_display_name(identifier, session_url=session_url, timeout=timeout)

    return RateLimitedResolver(lookup, delay_seconds=delay_seconds)
