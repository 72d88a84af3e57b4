"""
HTTP caching for provider calls using requests-cache.

Soil survey lookups are cached on disk keyed by canonicalized coordinates;
weather lookups bypass the cache entirely.
"""

import os
from typing import Any

import requests
from requests_cache import CachedSession, create_key

from farm_advisor.logging_config import get_logger

logger = get_logger(__name__)

# Module-level singleton (tests can override/reset)
_SESSION: CachedSession | None = None

COORDINATE_KEYS = {"lat", "latitude", "lon", "lng", "longitude"}
COORDINATE_PRECISION = 4


def canonicalize_coords(params: dict[str, Any]) -> dict[str, Any]:
    """Round coordinate parameters so nearby requests share a cache entry.

    Four decimal places is roughly 11m, well under SoilGrids' 250m cells.
    """
    if not params:
        return params

    canonical: dict[str, Any] = {}
    for key, value in params.items():
        if key.lower() in COORDINATE_KEYS:
            try:
                canonical[key] = round(float(value), COORDINATE_PRECISION)
            except (ValueError, TypeError):
                canonical[key] = value
        else:
            canonical[key] = value

    return canonical


def _key_with_auth(request, **kwargs):
    # appid/key stay in the key so different accounts never share entries
    return create_key(request=request, ignored_parameters=[], **kwargs)


def _make_session() -> CachedSession:
    """Create a new SQLite-backed cached session."""
    cache_name = os.getenv("CACHE_NAME", "cache/http")
    expire_after = int(os.getenv("CACHE_EXPIRE_SECONDS", "3600"))

    # Per-worker cache files under pytest-xdist
    xdist_worker = os.getenv("PYTEST_XDIST_WORKER")
    if xdist_worker:
        cache_name = f"{cache_name}_{xdist_worker}"

    logger.info(f"Using SQLite cache backend: {cache_name}")
    return CachedSession(
        cache_name=cache_name,
        backend="sqlite",
        key_fn=_key_with_auth,
        cache_control=True,
        allowable_codes=(200,),
        expire_after=expire_after,
    )


def get_session() -> CachedSession:
    """
    Get the shared cached session.

    Environment variables:
    - CACHE_NAME: SQLite cache file name (default: 'cache/http')
    - CACHE_EXPIRE_SECONDS: entry lifetime (default: 3600)
    """
    global _SESSION
    if _SESSION is None:
        _SESSION = _make_session()
    return _SESSION


def reset_session() -> None:
    """Close and clear the module session (for tests)."""
    global _SESSION
    if _SESSION is not None:
        _SESSION.close()
    _SESSION = None


def set_session_for_tests(session: CachedSession) -> None:
    """Force get_session() to return a provided session (for tests)."""
    global _SESSION
    _SESSION = session


def request(
    method: str,
    url: str,
    use_cache: bool = True,
    refresh: bool = False,
    **kwargs: Any,
) -> requests.Response:
    """
    Make an HTTP request through the shared session.

    Args:
        method: HTTP method
        url: Request URL
        use_cache: When False the cache is neither read nor written
        refresh: Ignore any cached entry and store the fresh response
        **kwargs: Passed through to ``requests``

    Returns:
        HTTP response
    """
    if kwargs.get("params"):
        original_params = dict(kwargs["params"])
        kwargs["params"] = canonicalize_coords(kwargs["params"])
        if original_params != kwargs["params"]:
            logger.debug(
                f"Canonicalized coordinates for {url}: "
                f"{_redact(original_params)} -> {_redact(kwargs['params'])}"
            )

    session = get_session()

    if not use_cache:
        with session.cache_disabled():
            response = session.request(method, url, **kwargs)
        logger.debug(f"{method} {url} -> {response.status_code} (Cache: BYPASS)")
        return response

    if refresh:
        kwargs["force_refresh"] = True

    response = session.request(method, url, **kwargs)
    cache_status = "HIT" if getattr(response, "from_cache", False) else "MISS"
    if refresh:
        cache_status = "REFRESH"
    logger.debug(f"{method} {url} -> {response.status_code} (Cache: {cache_status})")
    return response


def _redact(params: dict[str, Any]) -> dict[str, Any]:
    return {k: ("***" if k.lower() in {"appid", "key"} else v) for k, v in params.items()}
