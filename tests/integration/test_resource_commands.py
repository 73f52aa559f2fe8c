"""Integration tests for identity, analytics, invite, SMS and other management commands."""

import json

from mailersend_cli.app import app
from mailersend_cli.cmds.inbound import current_route, parse_forwards

from tests.helpers import domain_page

EMPTY_PAGE = {"data": [], "links": {"next": None}}


class TestIdentity:
    """Test cases for the identity group."""

    def test_create_resolves_domain(self, runner, api_token, fake_api):
        fake_api.add("GET", "/domains", (200, domain_page("example.com")))
        fake_api.add("POST", "/identities", (201, {"data": {"id": "i1"}}))

        result = runner.invoke(app, [
            "identity", "create", "--domain", "example.com",
            "--name", "Support", "--email", "support@example.com",
            "--reply-to-email", "help@example.com", "--add-note",
        ])

        assert result.exit_code == 0, result.output
        assert fake_api.calls("POST", "/identities")[0].json() == {
            "domain_id": "id-example.com",
            "name": "Support",
            "email": "support@example.com",
            "reply_to_email": "help@example.com",
            "add_note": True,
        }
        assert "Identity created successfully. ID: i1" in result.output

    def test_create_requires_email(self, runner, api_token, fake_api):
        result = runner.invoke(app, ["identity", "create", "--domain", "d1", "--name", "Support"])

        assert result.exit_code == 1
        assert "--email is required" in result.output
        assert fake_api.requests == []

    def test_get_by_email(self, runner, api_token, fake_api):
        fake_api.add("GET", "/identities/email/support@example.com", (200, {"data": {
            "id": "i1", "name": "Support", "email": "support@example.com", "reply_to_email": None,
        }}))

        result = runner.invoke(app, ["identity", "get", "support@example.com"])

        assert result.exit_code == 0, result.output
        lines = [" ".join(line.split()) for line in result.output.splitlines()]
        assert "ID i1" in lines
        assert "Name Support" in lines

    def test_update_by_id_sends_only_given_fields(self, runner, api_token, fake_api):
        fake_api.add("PUT", "/identities/i1", (200, {"data": {"id": "i1"}}))

        result = runner.invoke(app, ["identity", "update", "i1", "--name", "Help Desk"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"name": "Help Desk"}
        assert "Identity i1 updated successfully." in result.output

    def test_delete_by_email(self, runner, api_token, fake_api):
        fake_api.add("DELETE", "/identities/email/old@example.com", (204, None))

        result = runner.invoke(app, ["identity", "delete", "old@example.com"])

        assert result.exit_code == 0, result.output
        assert "Identity old@example.com deleted successfully." in result.output


class TestAnalyticsBreakdowns:
    """Opens grouped by country and user agent."""

    def test_country_table(self, runner, api_token, fake_api):
        fake_api.add("GET", "/analytics/country", (200, {"data": {"stats": [
            {"name": "DK", "count": 12},
            {"name": "US", "count": 3},
        ]}}))

        result = runner.invoke(app, [
            "analytics", "country", "--date-from", "2025-01-01", "--date-to", "2025-01-02", "--tags", "news,promo",
        ])

        assert result.exit_code == 0, result.output
        query = fake_api.calls("GET", "/analytics/country")[0].query
        assert query["date_from"] == ["1735689600"]
        assert query["date_to"] == ["1735776000"]
        assert query["tags[]"] == ["news", "promo"]
        assert "COUNTRY" in result.output
        lines = [" ".join(line.split()) for line in result.output.splitlines()]
        assert any("DK" in line and "12" in line for line in lines)

    def test_ua_type_json(self, runner, api_token, fake_api):
        payload = {"data": {"stats": [{"name": "webmail", "count": 5}]}}
        fake_api.add("GET", "/analytics/ua-type", (200, payload))

        result = runner.invoke(app, ["--json", "analytics", "ua-type"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == payload

    def test_ua_name_resolves_domain(self, runner, api_token, fake_api):
        fake_api.add("GET", "/domains", (200, domain_page("example.com")))
        fake_api.add("GET", "/analytics/ua-name", (200, {"data": {"stats": []}}))

        result = runner.invoke(app, ["analytics", "ua-name", "--domain", "example.com"])

        assert result.exit_code == 0, result.output
        assert fake_api.calls("GET", "/analytics/ua-name")[0].query["domain_id"] == ["id-example.com"]
        assert "USER AGENT" in result.output


class TestScheduledMessages:
    """Test cases for ``message scheduled``."""

    def test_list_filters(self, runner, api_token, fake_api):
        fake_api.add("GET", "/message-schedules", (200, {
            "data": [{"message_id": "m1", "subject": "Launch", "send_at": "2025-02-01", "status": "scheduled"}],
            "links": {"next": None},
        }))

        result = runner.invoke(app, ["message", "scheduled", "list", "--status", "scheduled", "--domain", "d1"])

        assert result.exit_code == 0, result.output
        query = fake_api.calls("GET", "/message-schedules")[0].query
        assert query["status"] == ["scheduled"]
        assert query["domain_id"] == ["d1"]
        assert "Launch" in result.output

    def test_delete_json(self, runner, api_token, fake_api):
        fake_api.add("DELETE", "/message-schedules/m1", (204, None))

        result = runner.invoke(app, ["--json", "message", "scheduled", "delete", "m1"])

        assert result.exit_code == 0, result.output
        assert json.loads(result.output) == {"status": "deleted", "message_id": "m1"}


class TestUpdates:
    """Partial updates send only the options that were given."""

    def test_webhook_update(self, runner, api_token, fake_api):
        fake_api.add("PUT", "/webhooks/w1", (200, {"data": {"id": "w1"}}))

        result = runner.invoke(app, ["webhook", "update", "w1", "--disabled", "--events", "activity.opened"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"events": ["activity.opened"], "enabled": False}
        assert "Webhook w1 updated successfully." in result.output

    def test_smtp_create(self, runner, api_token, fake_api):
        fake_api.add("POST", "/domains/d1/smtp-users", (201, {"data": {"id": "s1"}}))

        result = runner.invoke(app, ["smtp", "create", "--domain", "d1", "--name", "relay"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"name": "relay"}
        assert "SMTP user created successfully. ID: s1" in result.output

    def test_smtp_update(self, runner, api_token, fake_api):
        fake_api.add("PUT", "/domains/d1/smtp-users/s1", (200, {"data": {"id": "s1"}}))

        result = runner.invoke(app, ["smtp", "update", "s1", "--domain", "d1", "--disabled"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"enabled": False}

    def test_user_update(self, runner, api_token, fake_api):
        fake_api.add("PUT", "/users/u1", (200, {"data": {"id": "u1"}}))

        result = runner.invoke(app, ["user", "update", "u1", "--role", "Admin", "--domains", "d1,d2"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"domains": ["d1", "d2"], "role": "Admin"}
        assert "User u1 updated successfully." in result.output

    def test_token_get(self, runner, api_token, fake_api):
        fake_api.add("GET", "/token/t1", (200, {"data": {"id": "t1", "name": "ci", "status": "unpause"}}))

        result = runner.invoke(app, ["token", "get", "t1"])

        assert result.exit_code == 0, result.output
        lines = [" ".join(line.split()) for line in result.output.splitlines()]
        assert "Name ci" in lines
        assert "Status unpause" in lines


class TestInboundRoutes:
    """Test cases for inbound route create and update."""

    def test_parse_forwards(self):
        assert parse_forwards(["https://example.com/in", "email:ops@example.com", "webhook:https://x.io"]) == [
            {"type": "webhook", "value": "https://example.com/in"},
            {"type": "email", "value": "ops@example.com"},
            {"type": "webhook", "value": "https://x.io"},
        ]

    def test_create_defaults_priority(self, runner, api_token, fake_api):
        fake_api.add("POST", "/inbound", (201, {"data": {"id": "r1"}}))

        result = runner.invoke(app, [
            "inbound", "create", "--domain", "d1", "--name", "support",
            "--match-filter-type", "match_all", "--forwards", "https://example.com/in",
            "--inbound-domain", "in.example.com",
        ])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {
            "domain_id": "d1",
            "name": "support",
            "domain_enabled": True,
            "match_filter": {"type": "match_all"},
            "forwards": [{"type": "webhook", "value": "https://example.com/in"}],
            "inbound_domain": "in.example.com",
            "inbound_priority": 100,
        }
        assert "Inbound route created successfully. ID: r1" in result.output

    def test_create_requires_forwards(self, runner, api_token, fake_api):
        result = runner.invoke(app, [
            "inbound", "create", "--domain", "d1", "--name", "support", "--match-filter-type", "match_all",
        ])

        assert result.exit_code == 1
        assert "--forwards is required" in result.output

    def test_update_merges_with_current_route(self, runner, api_token, fake_api):
        """Update sends the full route with the given options applied.

        Validates:
        1. The current route is fetched before updating
        2. Existing filters and forwards are carried over
        3. Only the changed field differs
        """
        fake_api.add("GET", "/inbound/r1", (200, {"data": {
            "id": "r1",
            "name": "support",
            "enabled": True,
            "domain": "in.example.com",
            "priority": 50,
            "filters": [{"type": "catch_recipient"}, {"type": "match_sender"}],
            "forwards": [{"type": "email", "value": "ops@example.com", "id": "f1"}],
        }}))
        fake_api.add("PUT", "/inbound/r1", (200, {"data": {"id": "r1"}}))

        result = runner.invoke(app, ["inbound", "update", "r1", "--name", "helpdesk"])

        assert result.exit_code == 0, result.output
        assert fake_api.calls("PUT", "/inbound/r1")[0].json() == {
            "name": "helpdesk",
            "domain_enabled": True,
            "inbound_domain": "in.example.com",
            "inbound_priority": 50,
            "match_filter": {"type": "match_sender"},
            "catch_filter": {"type": "catch_recipient", "filters": []},
            "forwards": [{"type": "email", "value": "ops@example.com"}],
        }

    def test_current_route_defaults_filters(self):
        route = current_route({"name": "r", "enabled": False})

        assert route["match_filter"] == {"type": "match_all"}
        assert route["catch_filter"] == {"type": "catch_all", "filters": []}
        assert route["forwards"] == []


class TestUserInvites:
    """Test cases for ``user invite``."""

    def test_create(self, runner, api_token, fake_api):
        fake_api.add("POST", "/users", (201, {"data": {"id": "inv1"}}))

        result = runner.invoke(app, [
            "user", "invite", "create", "--email", "new@example.com", "--role", "Designer",
            "--templates", "tpl1",
        ])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"email": "new@example.com", "role": "Designer", "templates": ["tpl1"]}
        assert "User invitation sent to new@example.com." in result.output

    def test_resend_and_cancel(self, runner, api_token, fake_api):
        fake_api.add("POST", "/invites/inv1/resend", (200, {"data": {"id": "inv1"}}))
        fake_api.add("DELETE", "/invites/inv1", (204, None))

        resent = runner.invoke(app, ["user", "invite", "resend", "inv1"])
        cancelled = runner.invoke(app, ["user", "invite", "cancel", "inv1"])

        assert "Invite inv1 resent successfully." in resent.output
        assert "Invite inv1 cancelled successfully." in cancelled.output


class TestSMSResources:
    """Test cases for the SMS sub-groups."""

    def test_number_update(self, runner, api_token, fake_api):
        fake_api.add("PUT", "/sms-numbers/n1", (200, {"data": {"id": "n1", "paused": True}}))

        result = runner.invoke(app, ["sms", "number", "update", "n1", "--paused"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"paused": True}
        assert "SMS number n1 updated successfully." in result.output

    def test_activity_filters(self, runner, api_token, fake_api):
        fake_api.add("GET", "/sms-activity", (200, EMPTY_PAGE))

        result = runner.invoke(app, [
            "sms", "activity", "list", "--sms-number-id", "test-number-123",
            "--date-from", "2025-01-01", "--status", "delivered,failed",
        ])

        assert result.exit_code == 0, result.output
        query = fake_api.calls("GET", "/sms-activity")[0].query
        assert query["sms_number_id"] == ["test-number-123"]
        assert query["date_from"] == ["1735689600"]
        assert query["status[]"] == ["delivered", "failed"]
        assert "date_to" not in query

    def test_message_get(self, runner, api_token, fake_api):
        fake_api.add("GET", "/sms-messages/s1", (200, {"data": {
            "id": "s1", "from": "+1555", "to": ["+1666", "+1777"], "text": "Hi",
        }}))

        result = runner.invoke(app, ["sms", "message", "get", "s1"])

        assert result.exit_code == 0, result.output
        assert "+1666, +1777" in result.output

    def test_recipient_update_requires_status(self, runner, api_token, fake_api):
        result = runner.invoke(app, ["sms", "recipient", "update", "r1"])

        assert result.exit_code == 1
        assert "--status is required" in result.output

    def test_recipient_update(self, runner, api_token, fake_api):
        fake_api.add("PUT", "/sms-recipients/r1", (200, {"data": {"id": "r1", "status": "opt_out"}}))

        result = runner.invoke(app, ["sms", "recipient", "update", "r1", "--status", "opt_out"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"status": "opt_out"}

    def test_webhook_list_is_single_request(self, runner, api_token, fake_api):
        fake_api.add("GET", "/sms-webhooks", (200, {"data": [
            {"id": "w1", "name": "hook", "url": "https://example.com", "enabled": True},
        ]}))

        result = runner.invoke(app, ["--json", "sms", "webhook", "list", "--sms-number-id", "n1"])

        assert result.exit_code == 0, result.output
        assert [w["id"] for w in json.loads(result.output)] == ["w1"]
        call = fake_api.calls("GET", "/sms-webhooks")[0]
        assert call.query == {"sms_number_id": ["n1"]}

    def test_webhook_create(self, runner, api_token, fake_api):
        fake_api.add("POST", "/sms-webhooks", (201, {"data": {"id": "w1"}}))

        result = runner.invoke(app, [
            "sms", "webhook", "create", "--sms-number-id", "n1", "--name", "hook",
            "--url", "https://example.com", "--events", "sms.sent",
        ])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {
            "sms_number_id": "n1",
            "name": "hook",
            "url": "https://example.com",
            "events": ["sms.sent"],
            "enabled": True,
        }

    def test_inbound_create_sends_enabled_by_default(self, runner, api_token, fake_api):
        fake_api.add("POST", "/sms-inbounds", (201, {"data": {"id": "in1"}}))

        result = runner.invoke(app, [
            "sms", "inbound", "create", "--sms-number-id", "n1", "--name", "route",
            "--forward-url", "https://example.com/sms",
        ])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json()["enabled"] is True
        assert "SMS inbound route created successfully. ID: in1" in result.output

    def test_inbound_create_disabled_with_filter(self, runner, api_token, fake_api):
        fake_api.add("POST", "/sms-inbounds", (201, {"data": {"id": "in1"}}))

        result = runner.invoke(app, [
            "sms", "inbound", "create", "--sms-number-id", "n1", "--name", "route",
            "--forward-url", "https://example.com/sms", "--disabled",
            "--filter-comparer", "starts-with", "--filter-value", "STOP",
        ])

        assert result.exit_code == 0, result.output
        body = fake_api.requests[0].json()
        assert body["enabled"] is False
        assert body["filter"] == {"comparer": "starts-with", "value": "STOP"}


class TestAsyncVerification:
    """Test cases for ``verification verify-async`` and ``status``."""

    def test_verify_async(self, runner, api_token, fake_api):
        fake_api.add("POST", "/email-verification/verify-async", (200, {"data": {
            "id": "v1", "address": "a@example.com", "status": "queued",
        }}))

        result = runner.invoke(app, ["verification", "verify-async", "a@example.com"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].json() == {"email": "a@example.com"}
        lines = [" ".join(line.split()) for line in result.output.splitlines()]
        assert "Status queued" in lines

    def test_status_shows_result(self, runner, api_token, fake_api):
        fake_api.add("GET", "/email-verification/verify-async/v1", (200, {"data": {
            "id": "v1", "address": "a@example.com", "status": "completed", "result": "valid", "error": None,
        }}))

        result = runner.invoke(app, ["verification", "status", "v1"])

        assert result.exit_code == 0, result.output
        lines = [" ".join(line.split()) for line in result.output.splitlines()]
        assert 'Result "valid"' in lines
        assert not any(line.startswith("Error") for line in lines)
