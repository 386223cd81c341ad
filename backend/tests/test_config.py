"""
Blogsite Backend — Configuration Tests
=======================================

What:  Defaults, normalisation and startup validation of Settings.
How:   Settings is built directly with `_env_file=None` so a developer's .env
       cannot leak into the results.
"""

import pytest
from pydantic import ValidationError

from blogsite.config import Settings


class TestSettings:
    """Tests for Settings."""

    def test_defaults(self, monkeypatch):
        for name in ("MONGO_URI", "MONGO_DATABASE", "PORT", "STATIC_DIR", "LOG_LEVEL"):
            monkeypatch.delenv(name, raising=False)

        settings = Settings(_env_file=None)

        assert settings.mongo_uri == ""
        assert settings.mongo_database == "main"
        assert settings.port == 8080
        assert settings.host == "0.0.0.0"
        assert settings.static_dir == "../static"
        assert settings.request_timeout == 10.0
        assert settings.connect_timeout == 20.0
        assert settings.shutdown_timeout == 10.0

    def test_reads_environment(self, monkeypatch):
        monkeypatch.setenv("MONGO_URI", "mongodb://db:27017")
        monkeypatch.setenv("PORT", "9000")
        monkeypatch.setenv("STATIC_DIR", "/srv/static")

        settings = Settings(_env_file=None)

        assert settings.mongo_uri == "mongodb://db:27017"
        assert settings.port == 9000
        assert settings.static_dir == "/srv/static"

    def test_values_are_stripped(self):
        settings = Settings(_env_file=None, mongo_uri="  mongodb://db  ")

        assert settings.mongo_uri == "mongodb://db"

    def test_log_level_uppercased(self):
        assert Settings(_env_file=None, log_level="debug").log_level == "DEBUG"

    def test_log_level_invalid(self):
        with pytest.raises(ValidationError, match="Invalid log_level"):
            Settings(_env_file=None, log_level="chatty")

    @pytest.mark.parametrize("port", [0, 70000])
    def test_port_out_of_range(self, port):
        with pytest.raises(ValidationError):
            Settings(_env_file=None, port=port)


class TestValidateRequired:
    """Tests for the startup check."""

    def test_missing_mongo_uri(self):
        settings = Settings(_env_file=None, mongo_uri="")

        with pytest.raises(ValueError, match="MONGO_URI is not set"):
            settings.validate_required()

    def test_whitespace_only_uri_counts_as_missing(self):
        settings = Settings(_env_file=None, mongo_uri="   ")

        with pytest.raises(ValueError, match="MONGO_URI is not set"):
            settings.validate_required()

    def test_valid(self):
        Settings(_env_file=None, mongo_uri="mongodb://db").validate_required()
