"""Config settings – SiteSettings, the environment provider for URL resolution."""
from __future__ import annotations

import dataclasses
from typing import ClassVar

from mp_fetch.config.settings.base import Settings
from mp_fetch.config.validation import InvalidSettingValueError

DEFAULT_LOCALHOST_URL = "http://localhost:3000"


@dataclasses.dataclass(frozen=True)
class SiteSettings(Settings):
    """Where relative API paths live and which execution context we are in.

    Loaded from ``NEXT_PUBLIC_SITE_URL``, ``NEXT_PUBLIC_VERCEL_URL``,
    ``NEXT_PUBLIC_LOCALHOST_URL`` and ``NEXT_PUBLIC_BROWSER_CONTEXT``.

    ``site_url`` is an explicit absolute origin.  ``vercel_url`` is the
    bare host the deployment platform injects (no scheme).  In a browser
    context relative URLs are left for the user agent to resolve.
    """

    _prefix: ClassVar[str] = "NEXT_PUBLIC"

    site_url: str | None = None
    vercel_url: str | None = None
    localhost_url: str = DEFAULT_LOCALHOST_URL
    browser_context: bool = False

    def _validate(self) -> None:
        if "://" not in self.localhost_url:
            raise InvalidSettingValueError("localhost_url", self.localhost_url, "must be an absolute URL")
        if self.site_url and "://" not in self.site_url:
            raise InvalidSettingValueError("site_url", self.site_url, "must be an absolute URL")

    @property
    def base_url(self) -> str:
        """Origin prepended to relative paths; empty in a browser context."""
        if self.browser_context:
            return ""
        if self.site_url:
            return self.site_url.rstrip("/")
        if self.vercel_url:
            return f"https://{self.vercel_url.rstrip('/')}"
        return self.localhost_url.rstrip("/")


__all__ = ["DEFAULT_LOCALHOST_URL", "SiteSettings"]
