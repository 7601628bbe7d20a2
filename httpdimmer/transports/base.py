"""Transport interfaces."""

from __future__ import annotations

from typing import Protocol

from httpdimmer.core.model import HttpResponse


class Transport(Protocol):
    async def get(self, url: str, *, timeout_s: float = 4.0) -> HttpResponse:
        """Issue a single GET and return the status and raw body text."""
