"""
Cookie Store
============
Flat, overwrite-by-key cookie map shared by every call of one
authentication run.

Cookies are keyed by ``(name, domain, path)``; a later write for the same
key replaces the earlier one.  The store wraps a ``RequestsCookieJar``
so that ``HttpClient`` can hand it straight to ``requests.Session``:
attaching cookies to outgoing requests and recording ``Set-Cookie``
headers is then done by ``requests`` itself.

Persistence:
    ``save()`` / ``load()`` write a small JSON document
    (``{"cookies": [...]}``) so that a session survives across runs.
    The caller decides when to save; nothing is written on failure.
"""

from __future__ import annotations

import json
import logging
from http.cookiejar import Cookie
from pathlib import Path
from typing import Iterator, List, Optional

from requests.cookies import RequestsCookieJar, create_cookie

logger = logging.getLogger(__name__)


def _domain_matches(cookie_domain: str, host: str) -> bool:
    cookie_domain = cookie_domain.lstrip(".").lower()
    host = host.lower()
    return host == cookie_domain or host.endswith("." + cookie_domain)


class CookieStore:
    """Holds the cookies of one authentication run."""

    def __init__(self, jar: Optional[RequestsCookieJar] = None):
        self.jar = jar if jar is not None else RequestsCookieJar()

    # ── Core operations ───────────────────────────────────────────

    def set(self, cookie: Cookie) -> None:
        """Store *cookie*, replacing any cookie with the same key."""
        self.jar.set_cookie(cookie)

    def get(self, domain: str) -> List[Cookie]:
        """Return every cookie that would be sent to *domain*."""
        return [c for c in self.jar if _domain_matches(c.domain, domain)]

    def inject(self, name: str, value: str, domain: str, path: str = "/") -> Cookie:
        """Manufacture a cookie and place it in the store directly.

        Used for cookies whose value arrives in a response *body* rather
        than in a ``Set-Cookie`` header (the IAM session token).
        """
        cookie = create_cookie(name, value, domain=domain, path=path)
        self.set(cookie)
        logger.debug(f"[COOKIES] Injected '{name}' for {domain}")
        return cookie

    def update_from(self, jar) -> None:
        """Record every cookie of *jar* (e.g. ``response.cookies``)."""
        for cookie in jar:
            self.set(cookie)

    # ── Lookups ───────────────────────────────────────────────────

    def value(self, name: str, domain: Optional[str] = None) -> Optional[str]:
        """Return the value of cookie *name* (optionally for *domain*)."""
        for cookie in self.jar:
            if cookie.name != name:
                continue
            if domain is None or _domain_matches(cookie.domain, domain):
                return cookie.value
        return None

    def names(self) -> List[str]:
        return sorted({c.name for c in self.jar})

    def __iter__(self) -> Iterator[Cookie]:
        return iter(self.jar)

    def __len__(self) -> int:
        return len(self.jar)

    def __contains__(self, name: str) -> bool:
        return any(c.name == name for c in self.jar)

    # ── Persistence ───────────────────────────────────────────────

    def save(self, path: str) -> None:
        """Write all cookies to *path* as JSON."""
        cookies = [
            {
                "name": c.name,
                "value": c.value,
                "domain": c.domain,
                "path": c.path,
                "secure": c.secure,
                "expires": c.expires,
            }
            for c in self.jar
        ]
        state_path = Path(path)
        state_path.parent.mkdir(parents=True, exist_ok=True)
        state_path.write_text(json.dumps({"cookies": cookies}, indent=2), encoding="utf-8")
        logger.info(f"[COOKIES] Saved {len(cookies)} cookies to {state_path}")

    def load(self, path: str) -> int:
        """Load cookies previously written by ``save()``.

        A missing or unreadable file leaves the store untouched.

        Returns:
            Number of cookies loaded.
        """
        state_path = Path(path)
        if not state_path.exists():
            logger.info("[COOKIES] No saved cookie file found")
            return 0

        try:
            data = json.loads(state_path.read_text(encoding="utf-8"))
            entries = data.get("cookies", [])
        except (json.JSONDecodeError, OSError, AttributeError) as exc:
            logger.warning(f"[COOKIES] Corrupt cookie file: {exc}")
            return 0

        if not isinstance(entries, list):
            logger.warning(f"[COOKIES] Corrupt cookie file: 'cookies' is {type(entries).__name__}, not a list")
            return 0

        loaded = 0
        for entry in entries:
            try:
                self.set(create_cookie(
                    entry["name"],
                    entry["value"],
                    domain=entry.get("domain", ""),
                    path=entry.get("path", "/"),
                    secure=bool(entry.get("secure", False)),
                    expires=entry.get("expires"),
                ))
                loaded += 1
            except (KeyError, TypeError, ValueError) as exc:
                logger.warning(f"[COOKIES] Skipping malformed cookie entry: {exc}")

        logger.info(f"[COOKIES] Loaded {loaded} cookies from {state_path}")
        return loaded
