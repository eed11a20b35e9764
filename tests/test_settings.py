"""Tests for leadres.settings module."""

import os
from unittest.mock import patch

import pytest
from pydantic import ValidationError

from leadres.settings import Settings


class TestSettings:
    """Tests for Settings class."""

    def test_settings_default_values(self):
        """Test Settings default values."""
        # Patch both os.environ AND the .env file to prevent leakage
        with (
            patch.dict(os.environ, {}, clear=True),
            patch("pydantic_settings.sources.DotEnvSettingsSource.__call__", return_value={}),
        ):
            settings = Settings()
            assert settings.database_path == "leads.db"
            assert settings.max_accounts == 10000
            assert settings.name_match_threshold == 85.0
            assert settings.address_match_threshold == 80.0
            assert settings.name_weight == 0.6
            assert settings.address_weight == 0.4
            assert settings.contact_fields_qualify is False
            assert settings.merge_strategy == "transitive"
            assert settings.algorithm_version == "1.0"
            assert settings.progress_interval == 100

    def test_settings_from_environment(self):
        """Test Settings reads LEADRES_ prefixed variables."""
        with (
            patch.dict(
                os.environ,
                {
                    "LEADRES_DATABASE_PATH": "/tmp/dashboard.db",
                    "LEADRES_MAX_ACCOUNTS": "500",
                    "LEADRES_NAME_MATCH_THRESHOLD": "90",
                    "LEADRES_CONTACT_FIELDS_QUALIFY": "true",
                    "LEADRES_MERGE_STRATEGY": "first_match",
                },
                clear=True,
            ),
            patch("pydantic_settings.sources.DotEnvSettingsSource.__call__", return_value={}),
        ):
            settings = Settings()
            assert settings.database_path == "/tmp/dashboard.db"
            assert settings.max_accounts == 500
            assert settings.name_match_threshold == 90.0
            assert settings.contact_fields_qualify is True
            assert settings.merge_strategy == "first_match"

    def test_settings_reject_invalid_values(self):
        """Test Settings validation of out-of-range values."""
        with (
            patch.dict(os.environ, {"LEADRES_NAME_MATCH_THRESHOLD": "150"}, clear=True),
            patch("pydantic_settings.sources.DotEnvSettingsSource.__call__", return_value={}),
        ):
            with pytest.raises(ValidationError):
                Settings()

    def test_settings_reject_unknown_strategy(self):
        """Test Settings only accepts known merge strategies."""
        with (
            patch.dict(os.environ, {"LEADRES_MERGE_STRATEGY": "greedy"}, clear=True),
            patch("pydantic_settings.sources.DotEnvSettingsSource.__call__", return_value={}),
        ):
            with pytest.raises(ValidationError):
                Settings()

    def test_settings_ignore_unrelated_variables(self):
        """Test Settings ignores variables without the prefix."""
        with (
            patch.dict(os.environ, {"DATABASE_PATH": "other.db"}, clear=True),
            patch("pydantic_settings.sources.DotEnvSettingsSource.__call__", return_value={}),
        ):
            assert Settings().database_path == "leads.db"
