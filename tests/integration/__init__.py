"""Integration tests for the MailerSend CLI.

These tests drive the Typer application end to end through ``CliRunner``
against a fake API mounted below the real transport.

Test Structure:
- test_scenarios.py: Retry, validation errors, pagination and credentials
- test_auth_flow.py: Login, logout and status
- test_config_profiles.py: Profile management commands
- test_output_formats.py: Table and JSON output
- test_commands.py: Individual resource commands
"""
