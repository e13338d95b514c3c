"""Single-request reachability probe for registry URLs."""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass

import requests
from requests import RequestException

from .errors import NetworkFailure
from .settings import DEFAULT_PROBE_TIMEOUT

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class ProbeResult:
    url: str
    reachable: bool
    elapsed_ms: int
    status_code: int | None = None
    error: NetworkFailure | None = None


class RegistryProber:
    """Send one HEAD request per URL and report status and elapsed time.

    There is no retry: a transport error or a non-2xx status is reported as
    unreachable rather than raised.
    """

    def __init__(
        self,
        *,
        timeout: float = DEFAULT_PROBE_TIMEOUT,
        session: requests.Session | None = None,
    ) -> None:
        self.timeout = timeout
        self.session = session

    def _head(self, url: str) -> requests.Response:
        if self.session is not None:
            return self.session.head(url, timeout=self.timeout)
        return requests.head(url, timeout=self.timeout)

    def probe(self, url: str) -> ProbeResult:
        start = time.perf_counter()
        try:
            response = self._head(url)
        except RequestException as exc:
            elapsed = _elapsed_ms(start)
            log.debug("probe %s failed after %sms: %s", url, elapsed, exc)
            return ProbeResult(
                url=url,
                reachable=False,
                elapsed_ms=elapsed,
                error=NetworkFailure(f"{url}: {exc}"),
            )
        elapsed = _elapsed_ms(start)
        reachable = 200 <= response.status_code < 300
        log.debug("probe %s -> %s in %sms", url, response.status_code, elapsed)
        return ProbeResult(
            url=url,
            reachable=reachable,
            elapsed_ms=elapsed,
            status_code=response.status_code,
        )


def _elapsed_ms(start: float) -> int:
    return int((time.perf_counter() - start) * 1000)
