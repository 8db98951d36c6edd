"""
Rate-limit-aware HTTP GET with retry/backoff for the GitHub client.
Honors Retry-After and X-RateLimit-Remaining / X-RateLimit-Reset headers.
"""

import os
import time
import random
import email.utils
from datetime import datetime, timezone
from typing import Optional, Dict, Any, Tuple
import requests
from log_config import get_logger

logger = get_logger(__name__)

# retry/backoff defaults from environment
# - ADVISOR_MAX_RETRIES: int
# - ADVISOR_BACKOFF_BASE: float (seconds)
# - ADVISOR_BACKOFF_JITTER: float (seconds) - defaults to the backoff base when unset
# - ADVISOR_MAX_BACKOFF: float (seconds)
DEFAULT_MAX_RETRIES = int(os.getenv("ADVISOR_MAX_RETRIES", "3"))
DEFAULT_BACKOFF_BASE = float(os.getenv("ADVISOR_BACKOFF_BASE", "0.5"))
_env_jitter = os.getenv("ADVISOR_BACKOFF_JITTER")
DEFAULT_BACKOFF_JITTER = float(_env_jitter) if _env_jitter else None
DEFAULT_MAX_BACKOFF = float(os.getenv("ADVISOR_MAX_BACKOFF", "60.0"))
DEFAULT_TIMEOUT = 15.0

RETRY_STATUSES = (429, 502, 503, 504)

# runtime overrides (set from the CLI)
_runtime: Dict[str, Optional[float]] = {
    'max_retries': None,
    'backoff_base': None,
    'backoff_jitter': None,
    'max_backoff': None,
}


def configure_retry(max_retries: Optional[int] = None, backoff_base: Optional[float] = None, backoff_jitter: Optional[float] = None, max_backoff: Optional[float] = None):
    """Override retry/backoff defaults at runtime. None leaves a setting unchanged."""
    if max_retries is not None:
        if int(max_retries) < 1:
            raise ValueError('max_retries must be at least 1')
        _runtime['max_retries'] = int(max_retries)
    if backoff_base is not None:
        _runtime['backoff_base'] = float(backoff_base)
    if backoff_jitter is not None:
        _runtime['backoff_jitter'] = float(backoff_jitter)
    if max_backoff is not None:
        _runtime['max_backoff'] = float(max_backoff)


def reset_retry():
    for k in _runtime:
        _runtime[k] = None


def _setting(name: str, default):
    val = _runtime.get(name)
    return default if val is None else val


def parse_retry_after(raw: Optional[str]) -> Optional[float]:
    """Retry-After may be delta-seconds or an HTTP date."""
    if not raw:
        return None
    try:
        return max(0.0, float(raw))
    except (TypeError, ValueError):
        pass
    try:
        dt = email.utils.parsedate_to_datetime(raw)
    except (TypeError, ValueError):
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=timezone.utc)
    return max(0.0, (dt - datetime.now(timezone.utc)).total_seconds())


def _header_number(headers, key: str, cast):
    try:
        val = headers.get(key)
        return cast(val) if val is not None else None
    except (TypeError, ValueError):
        return None


def _wait_hint(resp) -> Tuple[bool, Optional[float]]:
    """Return (should_retry, seconds to wait if the server told us)."""
    headers = getattr(resp, 'headers', None) or {}
    retry_after = parse_retry_after(headers.get('Retry-After'))
    remaining = _header_number(headers, 'X-RateLimit-Remaining', int)
    reset = _header_number(headers, 'X-RateLimit-Reset', float)
    if retry_after is not None:
        return True, retry_after
    if remaining is not None and remaining <= 0 and resp.status_code in (403, 429):
        return True, max(0.0, reset - time.time()) if reset else None
    return resp.status_code in RETRY_STATUSES, None


def get_with_retries(url: str, headers: Optional[Dict[str, str]] = None, params: Optional[Dict[str, Any]] = None, timeout: float = DEFAULT_TIMEOUT) -> requests.Response:
    """
    GET url, retrying on transport errors, 429/5xx and exhausted rate limits.

    Returns the last response (which may be a non-200 the caller must handle).
    Raises requests.RequestException if every attempt failed at the transport level.
    """
    max_retries = int(_setting('max_retries', DEFAULT_MAX_RETRIES))
    backoff = float(_setting('backoff_base', DEFAULT_BACKOFF_BASE))
    jitter = _setting('backoff_jitter', DEFAULT_BACKOFF_JITTER)
    jitter = backoff if jitter is None else float(jitter)
    max_backoff = float(_setting('max_backoff', DEFAULT_MAX_BACKOFF))

    last_exc: Optional[requests.RequestException] = None
    resp = None
    for attempt in range(1, max_retries + 1):
        try:
            resp = requests.get(url, headers=headers or {}, params=params or {}, timeout=timeout)
        except requests.RequestException as exc:
            last_exc = exc
            resp = None
            logger.warning('GET %s failed (attempt %d/%d): %s', url, attempt, max_retries, exc)
            hint = None
        else:
            retry, hint = _wait_hint(resp)
            if not retry:
                return resp
            logger.warning('GET %s returned %s (attempt %d/%d)', url, resp.status_code, attempt, max_retries)
        if attempt == max_retries:
            break
        wait = hint if hint is not None else backoff
        time.sleep(min(wait + random.uniform(0, jitter), max_backoff))
        backoff = min(backoff * 2, max_backoff)

    if resp is None:
        raise last_exc
    return resp


__all__ = ["configure_retry", "reset_retry", "get_with_retries", "parse_retry_after"]
