"""
Deadline-bounded HTTP fetch used by the live-data connectors.
"""
import json
import socket
import threading
import time
from concurrent.futures import ThreadPoolExecutor
from concurrent.futures import TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Any, Dict, Mapping, Optional

import requests
from loguru import logger

from hscode_centrovert.config.settings import Config
from hscode_centrovert.exceptions import FetchNetworkError, FetchTimeoutError

CHUNK_SIZE = 8192

_fetch_pool = ThreadPoolExecutor(max_workers=Config.FETCH_WORKERS, thread_name_prefix="timed-fetch")


@dataclass
class FetchResponse:
    """Fully-read response returned by timed_fetch."""
    url: str
    status_code: int
    reason: str = ""
    headers: Mapping[str, str] = field(default_factory=dict)
    content: bytes = b""

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def content_type(self) -> str:
        for key, value in self.headers.items():
            if key.lower() == 'content-type':
                return value or ""
        return ""

    def json(self) -> Any:
        return json.loads(self.content.decode('utf-8'))


class _InFlight:
    """Response handle shared between the waiting caller and the reading worker."""

    def __init__(self):
        self._lock = threading.Lock()
        self._response = None
        self.cancelled = False

    def attach(self, response: requests.Response) -> None:
        with self._lock:
            self._response = response
            cancelled = self.cancelled
        if cancelled:
            _abort(response)

    def cancel(self) -> None:
        with self._lock:
            self.cancelled = True
            response = self._response
        if response is not None:
            _abort(response)


def _abort(response: requests.Response) -> None:
    # shutdown() wakes a recv() blocked in another thread; close() alone does not
    connection = getattr(response.raw, '_connection', None)
    sock = getattr(connection, 'sock', None)
    if sock is not None:
        try:
            sock.shutdown(socket.SHUT_RDWR)
        except OSError:
            pass
    try:
        response.close()
    except Exception as e:
        logger.debug(f"Error closing aborted response: {str(e)}")


def _read_response(http: requests.Session, method: str, url: str, timeout_ms: int,
                   deadline: float, in_flight: _InFlight, options: Dict[str, Any]) -> FetchResponse:
    if in_flight.cancelled:
        raise FetchTimeoutError("Request cancelled before it started", url)
    remaining = max(deadline - time.monotonic(), 0.001)
    response = http.request(method, url, stream=True, timeout=(remaining, remaining), **options)
    in_flight.attach(response)
    try:
        chunks = []
        for chunk in response.iter_content(chunk_size=CHUNK_SIZE):
            if in_flight.cancelled or time.monotonic() >= deadline:
                raise FetchTimeoutError(f"Request timed out (exceeded {timeout_ms}ms)", url)
            chunks.append(chunk)
        return FetchResponse(
            url=url,
            status_code=response.status_code,
            reason=response.reason or "",
            headers=dict(response.headers),
            content=b"".join(chunks)
        )
    finally:
        response.close()


def timed_fetch(url: str, options: Optional[Dict[str, Any]] = None,
                timeout_ms: Optional[int] = None,
                session: Optional[requests.Session] = None) -> FetchResponse:
    """
    Fetch a URL under a hard deadline.

    The request runs on a worker thread while the caller waits at most the
    remaining budget. When the deadline elapses the socket is shut down, so the
    worker's blocked read fails instead of finishing in the background, and the
    caller gets FetchTimeoutError immediately.

    Args:
        url: Resource to fetch
        options: Extra ``requests`` arguments (``method``, ``headers``, ``params``...)
        timeout_ms: Deadline in milliseconds (defaults to Config.CONNECTOR_TIMEOUT_MS)
        session: Optional session to reuse; a private one is created and closed otherwise

    Returns:
        FetchResponse with the complete body

    Raises:
        FetchTimeoutError: the deadline elapsed
        FetchNetworkError: any other transport failure
    """
    options = dict(options or {})
    method = options.pop('method', 'GET')
    timeout_ms = Config.CONNECTOR_TIMEOUT_MS if timeout_ms is None else timeout_ms
    started = time.monotonic()
    deadline = started + timeout_ms / 1000.0

    http = session or requests.Session()
    in_flight = _InFlight()
    future = _fetch_pool.submit(_read_response, http, method, url, timeout_ms, deadline, in_flight, options)
    try:
        return future.result(timeout=max(deadline - time.monotonic(), 0.0))
    except FutureTimeoutError as e:
        future.cancel()
        in_flight.cancel()
        raise FetchTimeoutError(f"Request timed out (exceeded {timeout_ms}ms)", url) from e
    except requests.exceptions.Timeout as e:
        raise FetchTimeoutError(f"Request timed out (exceeded {timeout_ms}ms)", url) from e
    except requests.exceptions.RequestException as e:
        # body reads surface read timeouts as ConnectionError
        if time.monotonic() >= deadline:
            raise FetchTimeoutError(f"Request timed out (exceeded {timeout_ms}ms)", url) from e
        raise FetchNetworkError(str(e), url) from e
    finally:
        if session is None:
            # the worker may still be unwinding after a cancel
            future.add_done_callback(lambda _: http.close())
        logger.debug(f"Fetch {method} {url} finished in {time.monotonic() - started:.3f}s")
