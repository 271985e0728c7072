"""
Tests for the operator CLI.

Tests cover:
- Argument parsing
- migrate/check/seed/statuses against a temporary database
"""

import pytest

from roster_guardian.cli import build_parser, main
from roster_guardian.config import settings


@pytest.fixture
def cli_database(tmp_path, monkeypatch):
    """Point the CLI at a fresh on-disk SQLite database."""
    url = f"sqlite:///{tmp_path / 'cli.db'}"
    monkeypatch.setattr(settings, "DATABASE_URL", url)
    return url


@pytest.mark.migrations
class TestCli:
    """Test suite for roster_guardian.cli."""

    def test_parser(self):
        """Test parsing of the seed command options."""
        args = build_parser().parse_args([
            "seed", "--admin-email", "admin@example.com",
            "--admin-name", "Admin", "--admin-password-hash", "hash",
        ])

        assert args.command == "seed"
        assert args.admin_email == "admin@example.com"
        assert args.admin_password_hash == "hash"

    def test_no_command_prints_help(self):
        """Test that running without a command fails."""
        assert main([]) == 1

    def test_check_fails_before_migrate(self, cli_database):
        """Test that an unmigrated database fails the schema check."""
        assert main(["check"]) == 1

    def test_full_setup(self, cli_database):
        """Test migrate, check, seed and listing in sequence."""
        assert main(["migrate"]) == 0
        assert main(["check"]) == 0
        assert main([
            "seed", "--admin-email", "admin@example.com",
            "--admin-name", "Admin", "--admin-password-hash", "hash",
        ]) == 0
        assert main(["seed", "--admin-email", "admin@example.com"]) == 1
        assert main(["statuses", "--all"]) == 0
