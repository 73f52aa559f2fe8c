"""End-to-end scenarios through the full request pipeline.

Each test runs a real command: credential resolution, client factory,
transport retry, error bridge and rendering all take part.
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import Mock, patch

import yaml

from mailersend_cli.app import app
from mailersend_cli.config import format_timestamp, parse_timestamp

from tests.helpers import domain_page


def write_config(config_home, document):
    config_home.mkdir(parents=True, exist_ok=True)
    (config_home / "config.yaml").write_text(yaml.safe_dump(document), encoding="utf-8")


def activity_page(count, next_link=None):
    return {
        "data": [
            {
                "id": f"act{i}",
                "type": "delivered",
                "created_at": "2025-01-01T10:00:00Z",
                "email": {"from": "me@d.com", "subject": f"Subject {i}"},
            }
            for i in range(count)
        ],
        "links": {"next": next_link},
    }


class TestTransientFailures:
    """Server errors and rate limits are retried transparently."""

    def test_server_errors_are_retried(self, runner, api_token, fake_api, no_sleep):
        """Two 500s followed by a 200 still list the domains.

        Validates:
        1. Exactly three requests are made
        2. The command succeeds with the final page
        """
        fake_api.add(
            "GET", "/domains",
            (500, {"message": "Server Error"}),
            (500, {"message": "Server Error"}),
            (200, domain_page("example.com")),
        )

        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 0, result.output
        assert len(fake_api.calls("GET", "/domains")) == 3
        assert "example.com" in result.output

    def test_rate_limit_honours_retry_after(self, runner, api_token, fake_api, no_sleep):
        """A 429 with Retry-After: 1 waits one second, then succeeds."""
        fake_api.add(
            "GET", "/domains",
            (429, {"message": "Too Many Attempts."}, {"Retry-After": "1"}),
            (200, domain_page("example.com")),
        )

        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 0, result.output
        assert len(fake_api.calls("GET", "/domains")) == 2
        no_sleep.assert_called_once_with(1.0)

    def test_persistent_server_errors_fail(self, runner, api_token, fake_api, no_sleep):
        fake_api.add("GET", "/domains", (503, {"message": "Service Unavailable"}))

        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 1
        assert len(fake_api.calls("GET", "/domains")) == 4
        assert "API error 503: Service Unavailable" in result.output


class TestValidationErrors:
    """Field-level validation errors reach the user."""

    def test_field_errors_are_listed(self, runner, api_token, fake_api):
        """A 422 prints the message and one aligned line per field.

        Validates:
        1. Exit code is 1
        2. The header line carries status and message
        3. Field names are padded to a common width
        4. The request is not retried
        """
        fake_api.add("POST", "/email", (422, {
            "message": "Validation failed",
            "errors": {"from.email": ["required"], "to": ["at least one"]},
        }))

        result = runner.invoke(app, ["email", "send", "--to", "x@y.z", "--subject", "S", "--text", "T"])

        assert result.exit_code == 1
        assert "API error 422: Validation failed" in result.output
        assert "from.email  required" in result.output
        assert "to          at least one" in result.output
        assert len(fake_api.calls("POST", "/email")) == 1

    def test_json_mode_prints_errors_as_text(self, runner, api_token, fake_api):
        fake_api.add("POST", "/email", (422, {"message": "Validation failed", "errors": {}}))

        result = runner.invoke(app, ["--json", "email", "send", "--to", "x@y.z", "--text", "T"])

        assert result.exit_code == 1
        assert "API error 422: Validation failed" in result.output
        assert '"message"' not in result.output


class TestPagination:
    """List commands stop fetching once the limit is reached."""

    def test_limit_stops_after_first_page(self, runner, api_token, fake_api):
        """--limit 7 takes seven rows from a ten-item page.

        Validates:
        1. The domain name is resolved through /domains
        2. Only one activity page is requested, with limit=10 and page=1
        3. Exactly seven rows are printed
        """
        fake_api.add("GET", "/domains", (200, domain_page("d.com")))
        fake_api.add(
            "GET", "/activity/id-d.com",
            (200, activity_page(10, next_link="https://api.mailersend.com/v1/activity/id-d.com?page=2")),
        )

        result = runner.invoke(app, [
            "--json", "activity", "list", "--domain", "d.com", "--limit", "7",
            "--date-from", "2025-01-01", "--date-to", "2025-01-02",
        ])

        assert result.exit_code == 0, result.output
        calls = fake_api.calls("GET", "/activity/id-d.com")
        assert len(calls) == 1
        assert calls[0].query["limit"] == ["10"]
        assert calls[0].query["page"] == ["1"]
        assert calls[0].query["date_from"] == ["1735689600"]
        assert calls[0].query["date_to"] == ["1735776000"]
        assert [item["id"] for item in json.loads(result.output)] == [
            f"act{i}" for i in range(7)
        ]

    def test_limit_in_table_mode(self, runner, api_token, fake_api):
        fake_api.add("GET", "/domains", (200, domain_page("d.com")))
        fake_api.add("GET", "/activity/id-d.com", (200, activity_page(10, next_link="next")))

        result = runner.invoke(app, [
            "activity", "list", "--domain", "d.com", "--limit", "7",
            "--date-from", "2025-01-01", "--date-to", "2025-01-02",
        ])

        assert result.exit_code == 0, result.output
        assert "act6" in result.output
        assert "act7" not in result.output

    def test_unknown_domain_name(self, runner, api_token, fake_api):
        fake_api.add("GET", "/domains", (200, domain_page("other.com")))

        result = runner.invoke(app, ["activity", "list", "--domain", "d.com"])

        assert result.exit_code == 1
        assert 'domain "d.com" not found' in result.output
        assert not fake_api.calls("GET", "/activity/id-d.com")


class TestCredentials:
    """Which credential ends up on the wire."""

    def test_environment_token_beats_profile(self, runner, config_home, fake_api, monkeypatch):
        write_config(config_home, {"active_profile": "p", "profiles": {"p": {"api_token": "cfg-tok"}}})
        monkeypatch.setenv("MAILERSEND_API_TOKEN", "env-tok")
        fake_api.add("GET", "/domains", (200, domain_page()))

        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].headers["Authorization"] == "Bearer env-tok"

    def test_profile_flag_selects_token(self, runner, config_home, fake_api):
        write_config(config_home, {
            "active_profile": "a",
            "profiles": {"a": {"api_token": "tok-a"}, "b": {"api_token": "tok-b"}},
        })
        fake_api.add("GET", "/domains", (200, domain_page()))

        result = runner.invoke(app, ["--profile", "b", "domain", "list"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].headers["Authorization"] == "Bearer tok-b"

    def test_expired_oauth_token_is_refreshed(self, runner, config_home, fake_api):
        """An expired OAuth token is refreshed and persisted before the call.

        Validates:
        1. The API request carries the new access token
        2. The config file holds the new access and refresh tokens
        3. The stored expiry is about an hour from now
        """
        now = datetime.now(timezone.utc)
        write_config(config_home, {
            "active_profile": "o1",
            "profiles": {
                "o1": {
                    "oauth_access_token": "old",
                    "oauth_refresh_token": "r1",
                    "oauth_expires_at": format_timestamp(now - timedelta(minutes=1)),
                },
            },
        })
        fake_api.add("GET", "/domains", (200, domain_page()))
        refresh = Mock(status_code=200)
        refresh.json.return_value = {"access_token": "new", "refresh_token": "r2", "expires_in": 3600}

        with patch("mailersend_cli.config.requests.post", return_value=refresh):
            result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].headers["Authorization"] == "Bearer new"

        saved = yaml.safe_load((config_home / "config.yaml").read_text(encoding="utf-8"))
        profile = saved["profiles"]["o1"]
        assert profile["oauth_access_token"] == "new"
        assert profile["oauth_refresh_token"] == "r2"
        expires_at = parse_timestamp(profile["oauth_expires_at"])
        assert abs((expires_at - (now + timedelta(seconds=3600))).total_seconds()) < 60

    def test_missing_credentials(self, runner, config_home, fake_api):
        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 1
        assert "no profiles configured" in result.output
        assert fake_api.requests == []

    def test_user_agent_carries_version(self, runner, api_token, fake_api):
        fake_api.add("GET", "/domains", (200, domain_page()))

        runner.invoke(app, ["domain", "list"])

        assert fake_api.requests[0].headers["User-Agent"] == "mailersend-cli/0.1.0"

    def test_base_url_override(self, runner, api_token, fake_api, monkeypatch):
        monkeypatch.setenv("MAILERSEND_API_BASE_URL", "http://localhost:9999/v1")
        fake_api.add("GET", "/domains", (200, domain_page()))

        result = runner.invoke(app, ["domain", "list"])

        assert result.exit_code == 0, result.output
        assert fake_api.requests[0].url.startswith("http://localhost:9999/v1/domains")
