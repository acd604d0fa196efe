"""Shared HTTP session for image downloads and the listings scrape."""

from typing import Optional

import requests  # type: ignore[import-untyped]

from seed.config import HEADERS

__all__ = ["create_session", "get_session"]

# Module-level session for connection reuse
_session: Optional[requests.Session] = None


def create_session() -> requests.Session:
    """Create a requests Session with the seeder's headers."""
    session = requests.Session()
    session.headers.update(HEADERS)
    session.headers.setdefault("Accept-Encoding", "gzip, deflate")
    return session


def get_session() -> requests.Session:
    """Get or create the module-level session."""
    global _session
    if _session is None:
        _session = create_session()
    return _session
