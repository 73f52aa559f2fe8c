"""HTTP transport with retry, tracing and error body capture.

Every request the CLI makes, whether through the API client or a direct
``requests`` call on the client's session, goes through ``CLITransport``.
The transport rewrites the base URL for test servers, forces the CLI
user agent, buffers request bodies so they can be replayed, retries
transient failures with exponential backoff (honouring ``Retry-After``),
and keeps the body of the most recent error response for the error bridge.
"""

import threading
import time
from typing import Any, Optional, Tuple, Union

from requests import PreparedRequest, Response
from requests.adapters import HTTPAdapter
from requests.exceptions import RequestException
from rich.console import Console

from .exceptions import MaxRetriesExceededError
from .utils.retry import RetryManager

DEFAULT_BASE_URL = "https://api.mailersend.com/v1"
DEFAULT_USER_AGENT = "mailersend-cli/dev"
MAX_RETRIES = 3

_user_agent = DEFAULT_USER_AGENT

TimeoutType = Union[None, float, Tuple[Optional[float], Optional[float]]]


def set_user_agent(user_agent: str) -> None:
    """Set the User-Agent sent with every API request."""
    global _user_agent
    _user_agent = user_agent


def get_user_agent() -> str:
    return _user_agent


class CLITransport(HTTPAdapter):
    """``requests`` transport adapter implementing the CLI request pipeline."""

    def __init__(
        self,
        verbose: bool = False,
        base_url: Optional[str] = None,
        retry_manager: Optional[RetryManager] = None,
        console: Optional[Console] = None,
        **kwargs: Any,
    ) -> None:
        """Initialize the transport.

        Args:
            verbose: Trace requests and responses to stderr
            base_url: Replacement for the default API base URL
            retry_manager: Backoff policy (three retries by default)
            console: Console used for the verbose trace
            **kwargs: Passed through to ``HTTPAdapter``
        """
        super().__init__(**kwargs)
        self.verbose = verbose
        self.base_url = base_url.rstrip("/") if base_url else None
        self.retry_manager = retry_manager or RetryManager(max_retries=MAX_RETRIES)
        self.console = console or Console(stderr=True, highlight=False)

        self._send_lock = threading.Lock()
        self._body_lock = threading.Lock()
        self._last_body: Optional[bytes] = None

    def last_error_body(self) -> Optional[bytes]:
        """Return the most recent 4xx/5xx response body and clear it."""
        with self._body_lock:
            body = self._last_body
            self._last_body = None
            return body

    def _set_last_body(self, body: bytes) -> None:
        with self._body_lock:
            self._last_body = body

    def send(
        self,
        request: PreparedRequest,
        stream: bool = False,
        timeout: TimeoutType = None,
        verify: Union[bool, str] = True,
        cert: Any = None,
        proxies: Any = None,
    ) -> Response:
        """Execute a request, retrying transient failures.

        Returns:
            The final response. Error responses have their body already read
            into memory so it stays available to the caller.

        Raises:
            MaxRetriesExceededError: If no attempt produced a response
        """
        with self._send_lock:
            self._rewrite_base_url(request)
            request.headers["User-Agent"] = _user_agent
            body = self._capture_body(request)

            if self.verbose:
                self._trace(f"--> {request.method} {request.url}")
                if body:
                    self._trace(f"--> body: {body.decode('utf-8', errors='replace')}")

            deadline = self._deadline(timeout)
            last_exception: Optional[Exception] = None
            attempt = 0

            for attempt in range(self.retry_manager.max_attempts):
                if attempt > 0 and body is not None:
                    request.body = body

                try:
                    response = super().send(
                        request,
                        stream=stream,
                        timeout=self._remaining(timeout, deadline),
                        verify=verify,
                        cert=cert,
                        proxies=proxies,
                    )
                except RequestException as e:
                    if not self.retry_manager.is_retryable_exception(e):
                        raise
                    last_exception = e
                    if self.verbose:
                        self._trace(f"<-- error: {e}")
                    if not self.retry_manager.has_attempts_left(attempt):
                        break
                    if not self._backoff(self.retry_manager.calculate_delay(attempt), deadline):
                        break
                    continue

                if self.verbose:
                    self._trace(f"<-- {response.status_code} {response.reason or ''}".rstrip())

                if response.status_code >= 400:
                    error_body = response.content or b""
                    if self.verbose and error_body:
                        self._trace(f"<-- body: {error_body.decode('utf-8', errors='replace')}")
                    self._set_last_body(error_body)

                    if (
                        self.retry_manager.is_retryable_status(response.status_code)
                        and self.retry_manager.has_attempts_left(attempt)
                    ):
                        delay = self.retry_manager.delay_for_response(
                            attempt, response.headers.get("Retry-After")
                        )
                        if self._backoff(delay, deadline):
                            response.close()
                            continue

                    return response

                if self.verbose:
                    payload = response.content
                    if payload:
                        self._trace(f"<-- body: {payload.decode('utf-8', errors='replace')}")

                return response

            raise MaxRetriesExceededError(
                f"request failed after {attempt} retries: {last_exception}",
                attempts=attempt + 1,
                last_exception=last_exception,
            )

    def _rewrite_base_url(self, request: PreparedRequest) -> None:
        if self.base_url and request.url and request.url.startswith(DEFAULT_BASE_URL):
            request.url = self.base_url + request.url[len(DEFAULT_BASE_URL):]

    def _capture_body(self, request: PreparedRequest) -> Optional[bytes]:
        """Drain the request body into memory so every attempt can resend it."""
        body = request.body
        if body is None:
            return None

        if isinstance(body, bytes):
            return body
        if isinstance(body, str):
            data = body.encode("utf-8")
        elif hasattr(body, "read"):
            data = body.read()
            if isinstance(data, str):
                data = data.encode("utf-8")
        else:
            data = b"".join(
                chunk.encode("utf-8") if isinstance(chunk, str) else chunk for chunk in body
            )

        request.headers.pop("Transfer-Encoding", None)
        request.body = data
        request.prepare_content_length(data)
        return data

    @staticmethod
    def _deadline(timeout: TimeoutType) -> Optional[float]:
        if isinstance(timeout, (int, float)):
            return time.monotonic() + timeout
        return None

    @staticmethod
    def _remaining(timeout: TimeoutType, deadline: Optional[float]) -> TimeoutType:
        if deadline is None:
            return timeout
        return max(deadline - time.monotonic(), 0.001)

    def _backoff(self, delay: float, deadline: Optional[float]) -> bool:
        """Sleep before the next attempt unless that would overrun the deadline."""
        if deadline is not None and time.monotonic() + delay >= deadline:
            if self.verbose:
                self._trace("    request deadline reached, not retrying")
            return False

        if self.verbose:
            self._trace(f"    retrying in {delay:g}s...")
        time.sleep(delay)
        return True

    def _trace(self, line: str) -> None:
        self.console.print(line, markup=False, highlight=False, soft_wrap=True)
