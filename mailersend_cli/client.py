"""MailerSend API client.

This module provides a high-level client for the MailerSend REST API. All
requests are sent through a ``requests.Session`` whose adapter is the CLI
transport, so every call gets retry, tracing and base-URL rewriting. HTTP
error responses are converted to ``APIError`` via the error bridge before
they leave the client.
"""

from typing import Any, Dict, List, Optional, Tuple

import requests
from requests.exceptions import HTTPError, RequestException, Timeout

from .exceptions import ResponseParseError, TransportError
from .transport import CLITransport, DEFAULT_BASE_URL
from .utils.domains import DomainResolver
from .utils.exceptions import wrap_error
from .utils.paginate import fetch_all

REQUEST_TIMEOUT = 30

SUPPRESSION_TYPES = {
    "blocklist": "blocklist",
    "hard-bounces": "hard-bounces",
    "spam-complaints": "spam-complaints",
    "unsubscribes": "unsubscribes",
    "on-hold": "on-hold-list",
}


class MailerSendClient:
    """High-level client for MailerSend API operations."""

    def __init__(
        self,
        token: str,
        transport: Optional[CLITransport] = None,
        timeout: int = REQUEST_TIMEOUT,
        session: Optional[requests.Session] = None,
    ) -> None:
        """Initialize the API client.

        Args:
            token: Bearer token for the ``Authorization`` header
            transport: Transport adapter; a default one is created if None
            timeout: Per-request deadline in seconds, including retries
            session: Session to mount the transport on
        """
        self.transport = transport or CLITransport()
        self.timeout = timeout

        self.session = session or requests.Session()
        self.session.mount("https://", self.transport)
        self.session.mount("http://", self.transport)
        self.session.headers.update({
            "Authorization": f"Bearer {token}",
            "Accept": "application/json",
        })

        self._domain_resolver: Optional[DomainResolver] = None

    # Request plumbing

    def request(
        self,
        method: str,
        path: str,
        params: Optional[Dict[str, Any]] = None,
        body: Any = None,
    ) -> requests.Response:
        """Send a request and return the successful response.

        Args:
            method: HTTP method
            path: Path below the API base, e.g. ``/domains``
            params: Query parameters; None values are dropped
            body: JSON-serialisable request body

        Returns:
            Response with a status below 400

        Raises:
            APIError: For any 4xx/5xx response
            TransportError: If the request could not be completed
        """
        if params:
            params = {k: v for k, v in params.items() if v is not None and v != ""}

        try:
            response = self.session.request(
                method,
                f"{DEFAULT_BASE_URL}{path}",
                params=params or None,
                json=body,
                timeout=self.timeout,
            )
            response.raise_for_status()
        except HTTPError as e:
            raise wrap_error(e, self.transport) from e
        except Timeout as e:
            raise TransportError(f"request timed out after {self.timeout}s: {e}") from e
        except RequestException as e:
            raise TransportError(f"request failed: {e}") from e

        return response

    @staticmethod
    def decode(response: requests.Response) -> Any:
        """Decode a JSON response body; empty bodies decode to ``{}``.

        Raises:
            ResponseParseError: If the body is not JSON
        """
        if not response.content:
            return {}
        try:
            return response.json()
        except ValueError as e:
            raise ResponseParseError(e)

    def get(self, path: str, params: Optional[Dict[str, Any]] = None) -> Any:
        return self.decode(self.request("GET", path, params=params))

    def post(self, path: str, body: Any = None) -> Any:
        return self.decode(self.request("POST", path, body=body))

    def put(self, path: str, body: Any = None) -> Any:
        return self.decode(self.request("PUT", path, body=body))

    def delete(self, path: str, body: Any = None) -> Any:
        return self.decode(self.request("DELETE", path, body=body))

    def list_page(
        self,
        path: str,
        page: int,
        per_page: int,
        params: Optional[Dict[str, Any]] = None,
    ) -> Tuple[List[Dict[str, Any]], bool]:
        """Fetch one page of a paginated list endpoint.

        Returns:
            Tuple of (items, has_next); a non-empty ``links.next`` means
            more pages follow
        """
        query = dict(params or {})
        query.update({"page": page, "limit": per_page})
        payload = self.get(path, params=query)

        if not isinstance(payload, dict) or not isinstance(payload.get("data"), list):
            raise ResponseParseError(ValueError(f"expected a data array from {path}"))

        links = payload.get("links") or {}
        return payload["data"], bool(links.get("next"))

    def paginate(
        self,
        path: str,
        limit: int = 0,
        params: Optional[Dict[str, Any]] = None,
    ) -> List[Dict[str, Any]]:
        """Fetch every page of a list endpoint, up to ``limit`` items."""
        return fetch_all(
            lambda page, per_page: self.list_page(path, page, per_page, params),
            limit,
        )

    @property
    def domain_resolver(self) -> DomainResolver:
        if self._domain_resolver is None:
            self._domain_resolver = DomainResolver(self.list_domains)
        return self._domain_resolver

    # Domains

    def list_domains(self, limit: int = 0, verified: Optional[bool] = None) -> List[Dict[str, Any]]:
        params = {}
        if verified is not None:
            params["verified"] = str(verified).lower()
        return self.paginate("/domains", limit, params)

    def get_domain(self, domain_id: str) -> Dict[str, Any]:
        return self.get(f"/domains/{domain_id}")

    def create_domain(
        self,
        name: str,
        return_path_subdomain: Optional[str] = None,
        custom_tracking_subdomain: Optional[str] = None,
    ) -> Dict[str, Any]:
        body = {"name": name}
        if return_path_subdomain:
            body["return_path_subdomain"] = return_path_subdomain
        if custom_tracking_subdomain:
            body["custom_tracking_subdomain"] = custom_tracking_subdomain
        return self.post("/domains", body)

    def delete_domain(self, domain_id: str) -> None:
        self.request("DELETE", f"/domains/{domain_id}")

    def update_domain_settings(self, domain_id: str, settings: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/domains/{domain_id}/settings", settings)

    def get_domain_dns(self, domain_id: str) -> Dict[str, Any]:
        return self.get(f"/domains/{domain_id}/dns-records")

    def verify_domain(self, domain_id: str) -> Dict[str, Any]:
        return self.get(f"/domains/{domain_id}/verify")

    # Email

    def send_email(self, message: Dict[str, Any]) -> Optional[str]:
        """Send an email.

        Returns:
            The queued message ID from ``X-Message-Id``, if any
        """
        response = self.request("POST", "/email", body=message)
        return response.headers.get("X-Message-Id")

    def send_bulk_email(self, messages: List[Dict[str, Any]]) -> Dict[str, Any]:
        return self.post("/bulk-email", messages)

    def get_bulk_email_status(self, bulk_email_id: str) -> Dict[str, Any]:
        return self.get(f"/bulk-email/{bulk_email_id}")

    # Activity and analytics

    def list_activity(
        self,
        domain_id: str,
        date_from: int,
        date_to: int,
        events: Optional[List[str]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"date_from": date_from, "date_to": date_to}
        if events:
            params["event[]"] = events
        return self.paginate(f"/activity/{domain_id}", limit, params)

    def get_activity(self, activity_id: str) -> Dict[str, Any]:
        return self.get(f"/activities/{activity_id}")

    def get_analytics_by_date(
        self,
        date_from: int,
        date_to: int,
        events: List[str],
        domain_id: Optional[str] = None,
        group_by: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        params: Dict[str, Any] = {
            "date_from": date_from,
            "date_to": date_to,
            "event[]": events,
            "domain_id": domain_id,
            "group_by": group_by,
            "tags[]": tags or None,
        }
        return self.get("/analytics/date", params=params)

    def get_opens_by(
        self,
        breakdown: str,
        date_from: int,
        date_to: int,
        domain_id: Optional[str] = None,
        tags: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        """Opens grouped by ``country``, ``ua-name`` or ``ua-type``."""
        params: Dict[str, Any] = {
            "date_from": date_from,
            "date_to": date_to,
            "domain_id": domain_id,
            "tags[]": tags or None,
        }
        return self.get(f"/analytics/{breakdown}", params=params)

    # Messages

    def list_messages(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/messages", limit)

    def get_message(self, message_id: str) -> Dict[str, Any]:
        return self.get(f"/messages/{message_id}")

    def list_scheduled_messages(
        self,
        domain_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        return self.paginate("/message-schedules", limit, {"domain_id": domain_id, "status": status})

    def get_scheduled_message(self, message_id: str) -> Dict[str, Any]:
        return self.get(f"/message-schedules/{message_id}")

    def delete_scheduled_message(self, message_id: str) -> None:
        self.request("DELETE", f"/message-schedules/{message_id}")

    # Templates

    def list_templates(self, domain_id: Optional[str] = None, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/templates", limit, {"domain_id": domain_id})

    def get_template(self, template_id: str) -> Dict[str, Any]:
        return self.get(f"/templates/{template_id}")

    def delete_template(self, template_id: str) -> None:
        self.request("DELETE", f"/templates/{template_id}")

    # Webhooks

    def list_webhooks(self, domain_id: str, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/webhooks", limit, {"domain_id": domain_id})

    def get_webhook(self, webhook_id: str) -> Dict[str, Any]:
        return self.get(f"/webhooks/{webhook_id}")

    def create_webhook(
        self,
        domain_id: str,
        name: str,
        url: str,
        events: List[str],
        enabled: bool = True,
    ) -> Dict[str, Any]:
        return self.post("/webhooks", {
            "domain_id": domain_id,
            "name": name,
            "url": url,
            "events": events,
            "enabled": enabled,
        })

    def update_webhook(self, webhook_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/webhooks/{webhook_id}", changes)

    def delete_webhook(self, webhook_id: str) -> None:
        self.request("DELETE", f"/webhooks/{webhook_id}")

    # Suppressions

    def list_suppressions(
        self,
        suppression_type: str,
        domain_id: Optional[str] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        path = f"/suppressions/{SUPPRESSION_TYPES[suppression_type]}"
        return self.paginate(path, limit, {"domain_id": domain_id})

    def add_suppressions(
        self,
        suppression_type: str,
        domain_id: str,
        recipients: Optional[List[str]] = None,
        patterns: Optional[List[str]] = None,
    ) -> Dict[str, Any]:
        body: Dict[str, Any] = {"domain_id": domain_id}
        if recipients:
            body["recipients"] = recipients
        if patterns:
            body["patterns"] = patterns
        return self.post(f"/suppressions/{SUPPRESSION_TYPES[suppression_type]}", body)

    def delete_suppressions(
        self,
        suppression_type: str,
        ids: Optional[List[str]] = None,
        domain_id: Optional[str] = None,
        delete_all: bool = False,
    ) -> None:
        body: Dict[str, Any] = {"ids": ids or []}
        if delete_all:
            body = {"all": True}
        if domain_id:
            body["domain_id"] = domain_id
        self.request("DELETE", f"/suppressions/{SUPPRESSION_TYPES[suppression_type]}", body=body)

    # Recipients

    def list_recipients(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/recipients", limit)

    def get_recipient(self, recipient_id: str) -> Dict[str, Any]:
        return self.get(f"/recipients/{recipient_id}")

    def delete_recipient(self, recipient_id: str) -> None:
        self.request("DELETE", f"/recipients/{recipient_id}")

    # API tokens

    def list_tokens(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/token", limit)

    def get_token(self, token_id: str) -> Dict[str, Any]:
        return self.get(f"/token/{token_id}")

    def create_token(self, name: str, domain_id: str, scopes: List[str]) -> Dict[str, Any]:
        return self.post("/token", {"name": name, "domain_id": domain_id, "scopes": scopes})

    def update_token_status(self, token_id: str, status: str) -> Dict[str, Any]:
        return self.put(f"/token/{token_id}/settings", {"status": status})

    def delete_token(self, token_id: str) -> None:
        self.request("DELETE", f"/token/{token_id}")

    # Sender identities

    @staticmethod
    def identity_path(identity: str) -> str:
        """Identities can be addressed by ID or by sender email."""
        if "@" in identity:
            return f"/identities/email/{identity}"
        return f"/identities/{identity}"

    def list_identities(self, domain_id: Optional[str] = None, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/identities", limit, {"domain_id": domain_id})

    def get_identity(self, identity: str) -> Dict[str, Any]:
        return self.get(self.identity_path(identity))

    def create_identity(self, identity: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("/identities", identity)

    def update_identity(self, identity: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(self.identity_path(identity), changes)

    def delete_identity(self, identity: str) -> None:
        self.request("DELETE", self.identity_path(identity))

    # Users

    def list_users(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/users", limit)

    def get_user(self, user_id: str) -> Dict[str, Any]:
        return self.get(f"/users/{user_id}")

    def update_user(self, user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/users/{user_id}", changes)

    def delete_user(self, user_id: str) -> None:
        self.request("DELETE", f"/users/{user_id}")

    def invite_user(self, invite: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("/users", invite)

    def list_invites(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/invites", limit)

    def get_invite(self, invite_id: str) -> Dict[str, Any]:
        return self.get(f"/invites/{invite_id}")

    def resend_invite(self, invite_id: str) -> Dict[str, Any]:
        return self.post(f"/invites/{invite_id}/resend")

    def cancel_invite(self, invite_id: str) -> None:
        self.request("DELETE", f"/invites/{invite_id}")

    # SMTP users

    def list_smtp_users(self, domain_id: str, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate(f"/domains/{domain_id}/smtp-users", limit)

    def get_smtp_user(self, domain_id: str, smtp_user_id: str) -> Dict[str, Any]:
        return self.get(f"/domains/{domain_id}/smtp-users/{smtp_user_id}")

    def create_smtp_user(self, domain_id: str, name: str, enabled: Optional[bool] = None) -> Dict[str, Any]:
        body: Dict[str, Any] = {"name": name}
        if enabled is not None:
            body["enabled"] = enabled
        return self.post(f"/domains/{domain_id}/smtp-users", body)

    def update_smtp_user(self, domain_id: str, smtp_user_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/domains/{domain_id}/smtp-users/{smtp_user_id}", changes)

    def delete_smtp_user(self, domain_id: str, smtp_user_id: str) -> None:
        self.request("DELETE", f"/domains/{domain_id}/smtp-users/{smtp_user_id}")

    # Inbound routes

    def list_inbound_routes(self, domain_id: Optional[str] = None, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/inbound", limit, {"domain_id": domain_id})

    def get_inbound_route(self, inbound_id: str) -> Dict[str, Any]:
        return self.get(f"/inbound/{inbound_id}")

    def create_inbound_route(self, route: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("/inbound", route)

    def update_inbound_route(self, inbound_id: str, route: Dict[str, Any]) -> Dict[str, Any]:
        """Replace an inbound route; the API expects every field on update."""
        return self.put(f"/inbound/{inbound_id}", route)

    def delete_inbound_route(self, inbound_id: str) -> None:
        self.request("DELETE", f"/inbound/{inbound_id}")

    # SMS

    def send_sms(self, sender: str, recipients: List[str], text: str) -> Optional[str]:
        """Send an SMS and return the ``X-SMS-Message-Id`` header."""
        response = self.request("POST", "/sms", body={"from": sender, "to": recipients, "text": text})
        return response.headers.get("X-SMS-Message-Id")

    def list_sms_numbers(self, paused: Optional[bool] = None, limit: int = 0) -> List[Dict[str, Any]]:
        params = {}
        if paused is not None:
            params["paused"] = str(paused).lower()
        return self.paginate("/sms-numbers", limit, params)

    def get_sms_number(self, number_id: str) -> Dict[str, Any]:
        return self.get(f"/sms-numbers/{number_id}")

    def update_sms_number(self, number_id: str, paused: bool) -> Dict[str, Any]:
        return self.put(f"/sms-numbers/{number_id}", {"paused": paused})

    def delete_sms_number(self, number_id: str) -> None:
        self.request("DELETE", f"/sms-numbers/{number_id}")

    def list_sms_activity(
        self,
        sms_number_id: Optional[str] = None,
        date_from: Optional[int] = None,
        date_to: Optional[int] = None,
        statuses: Optional[List[str]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {
            "sms_number_id": sms_number_id,
            "date_from": date_from,
            "date_to": date_to,
            "status[]": statuses or None,
        }
        return self.paginate("/sms-activity", limit, params)

    def list_sms_messages(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/sms-messages", limit)

    def get_sms_message(self, message_id: str) -> Dict[str, Any]:
        return self.get(f"/sms-messages/{message_id}")

    def list_sms_recipients(
        self,
        sms_number_id: Optional[str] = None,
        status: Optional[str] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        return self.paginate("/sms-recipients", limit, {"sms_number_id": sms_number_id, "status": status})

    def get_sms_recipient(self, recipient_id: str) -> Dict[str, Any]:
        return self.get(f"/sms-recipients/{recipient_id}")

    def update_sms_recipient(self, recipient_id: str, status: str) -> Dict[str, Any]:
        return self.put(f"/sms-recipients/{recipient_id}", {"status": status})

    def list_sms_webhooks(self, sms_number_id: str) -> List[Dict[str, Any]]:
        """SMS webhooks of one number; this endpoint is not paginated."""
        payload = self.get("/sms-webhooks", params={"sms_number_id": sms_number_id})
        if not isinstance(payload, dict):
            return []
        return payload.get("data") or []

    def get_sms_webhook(self, webhook_id: str) -> Dict[str, Any]:
        return self.get(f"/sms-webhooks/{webhook_id}")

    def create_sms_webhook(self, webhook: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("/sms-webhooks", webhook)

    def update_sms_webhook(self, webhook_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/sms-webhooks/{webhook_id}", changes)

    def delete_sms_webhook(self, webhook_id: str) -> None:
        self.request("DELETE", f"/sms-webhooks/{webhook_id}")

    def list_sms_inbound_routes(
        self,
        sms_number_id: Optional[str] = None,
        enabled: Optional[bool] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        params: Dict[str, Any] = {"sms_number_id": sms_number_id}
        if enabled is not None:
            params["enabled"] = str(enabled).lower()
        return self.paginate("/sms-inbounds", limit, params)

    def get_sms_inbound_route(self, inbound_id: str) -> Dict[str, Any]:
        return self.get(f"/sms-inbounds/{inbound_id}")

    def create_sms_inbound_route(self, route: Dict[str, Any]) -> Dict[str, Any]:
        return self.post("/sms-inbounds", route)

    def update_sms_inbound_route(self, inbound_id: str, changes: Dict[str, Any]) -> Dict[str, Any]:
        return self.put(f"/sms-inbounds/{inbound_id}", changes)

    def delete_sms_inbound_route(self, inbound_id: str) -> None:
        self.request("DELETE", f"/sms-inbounds/{inbound_id}")

    # Quota

    def get_quota(self) -> Dict[str, Any]:
        return self.get("/api-quota")

    # Email verification

    def verify_email(self, email: str) -> Dict[str, Any]:
        return self.post("/email-verification/verify", {"email": email})

    def verify_email_async(self, email: str) -> Dict[str, Any]:
        return self.post("/email-verification/verify-async", {"email": email})

    def get_async_verification(self, verification_id: str) -> Dict[str, Any]:
        return self.get(f"/email-verification/verify-async/{verification_id}")

    def list_verifications(self, limit: int = 0) -> List[Dict[str, Any]]:
        return self.paginate("/email-verification", limit)

    def get_verification(self, verification_id: str) -> Dict[str, Any]:
        return self.get(f"/email-verification/{verification_id}")

    def create_verification(self, name: str, emails: List[str]) -> Dict[str, Any]:
        return self.post("/email-verification", {"name": name, "emails": emails})

    def start_verification(self, verification_id: str) -> Dict[str, Any]:
        return self.get(f"/email-verification/{verification_id}/verify")

    def list_verification_results(
        self,
        verification_id: str,
        results: Optional[List[str]] = None,
        limit: int = 0,
    ) -> List[Dict[str, Any]]:
        params = {"results[]": results} if results else None
        return self.paginate(f"/email-verification/{verification_id}/results", limit, params)
