import time
from typing import Any, Dict

import requests

from .errors import HomeLinksError

HEALTH_METHODS = {"HEAD", "GET"}
DEFAULT_TIMEOUT = 5.0


class ProbeTimeout(HomeLinksError):
    pass


def probe(url: str, method: str = "HEAD", timeout: float = DEFAULT_TIMEOUT) -> Dict[str, Any]:
    """
    Request *url* once and report the status code and round-trip time.
    Redirects are followed. Raises ProbeTimeout when the target does not
    answer within *timeout* seconds; other network errors propagate as
    requests.RequestException.
    """
    method = method.upper()
    if method not in HEALTH_METHODS:
        raise ValueError(f"unsupported health method {method!r}")

    start = time.perf_counter()
    try:
        resp = requests.request(method, url, timeout=timeout, allow_redirects=True)
    except requests.Timeout as exc:
        raise ProbeTimeout(f"{url} did not answer within {timeout}s") from exc
    ms = round((time.perf_counter() - start) * 1000)

    return {
        "status": resp.status_code,
        "statusText": resp.reason or "",
        "ok": 200 <= resp.status_code < 300,
        "ms": ms,
    }


def classify(status: int, ok_min: int = 200) -> str:
    """up / warn / down, the way the dashboard colours its health dot."""
    if ok_min <= status < 300:
        return "up"
    if 300 <= status < 400:
        return "warn"
    return "down"
