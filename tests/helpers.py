"""Canned HTTP responses and a fake MailerSend API for the test suite."""

import io
import json
from typing import Any, Dict, List, Optional, Tuple
from urllib.parse import parse_qs, urlparse

import requests
from requests.structures import CaseInsensitiveDict

REASONS = {
    200: "OK",
    201: "Created",
    202: "Accepted",
    204: "No Content",
    400: "Bad Request",
    401: "Unauthorized",
    404: "Not Found",
    422: "Unprocessable Entity",
    429: "Too Many Requests",
    500: "Internal Server Error",
    502: "Bad Gateway",
    503: "Service Unavailable",
}


def make_response(
    status: int = 200,
    json_body: Any = None,
    body: bytes = b"",
    headers: Optional[Dict[str, str]] = None,
    request: Optional[requests.PreparedRequest] = None,
) -> requests.Response:
    """Build a fully-read ``requests.Response``."""
    if json_body is not None:
        body = json.dumps(json_body).encode("utf-8")

    response = requests.Response()
    response.status_code = status
    response.reason = REASONS.get(status, "")
    response._content = body
    response._content_consumed = True
    response.raw = io.BytesIO(body)
    response.headers = CaseInsensitiveDict(headers or {})
    response.encoding = "utf-8"
    if request is not None:
        response.request = request
        response.url = request.url
    return response


class RecordedRequest:
    """Snapshot of a request as it reached the wire."""

    def __init__(self, request: requests.PreparedRequest, timeout: Any) -> None:
        self.method = request.method
        self.url = request.url
        parsed = urlparse(request.url)
        self.path = parsed.path
        self.query = parse_qs(parsed.query)
        self.headers = dict(request.headers)
        self.body = request.body
        self.timeout = timeout

    def json(self) -> Any:
        return json.loads(self.body)


class FakeAPI:
    """Routes requests by method and path to queued canned responses.

    Each route holds a queue; responses are consumed in order and the last
    one repeats. Queue entries are ``(status, json_body, headers)`` tuples
    or exceptions to raise.
    """

    PREFIX = "/v1"

    def __init__(self) -> None:
        self.routes: Dict[Tuple[str, str], List[Any]] = {}
        self.requests: List[RecordedRequest] = []

    def add(self, method: str, path: str, *responses: Any) -> "FakeAPI":
        self.routes.setdefault((method, self.PREFIX + path), []).extend(responses)
        return self

    def calls(self, method: str, path: str) -> List[RecordedRequest]:
        return [r for r in self.requests if r.method == method and r.path == self.PREFIX + path]

    def __call__(self, request: requests.PreparedRequest, **kwargs: Any) -> requests.Response:
        recorded = RecordedRequest(request, kwargs.get("timeout"))
        self.requests.append(recorded)

        queue = self.routes.get((request.method, recorded.path))
        if not queue:
            return make_response(404, {"message": "Resource not found."}, request=request)

        entry = queue.pop(0) if len(queue) > 1 else queue[0]
        if isinstance(entry, Exception):
            raise entry

        status, json_body, headers = (tuple(entry) + (None, None))[:3]
        return make_response(status, json_body, headers=headers, request=request)


def domain_page(*names: str, next_link: Optional[str] = None) -> Dict[str, Any]:
    """A ``/domains`` list page with one domain per name."""
    return {
        "data": [
            {
                "id": f"id-{name}",
                "name": name,
                "is_verified": True,
                "is_dns_active": True,
                "created_at": "2024-01-01T00:00:00Z",
            }
            for name in names
        ],
        "links": {"next": next_link},
        "meta": {"current_page": 1, "per_page": 25},
    }
