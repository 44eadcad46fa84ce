"""
Tests for configuration loading
"""

import pytest

import etl.config
from etl.config import get_setting, load_credentials, load_env_files

CREDENTIAL_VARS = ["SF_CLIENT_ID", "SF_CLIENT_SECRET", "SF_REFRESH_TOKEN", "SF_INSTANCE_URL"]


@pytest.fixture
def clean_environment(monkeypatch):
    """No Salesforce settings in the .env files or the process environment"""
    monkeypatch.setattr(etl.config, "envs", {})
    for name in CREDENTIAL_VARS:
        monkeypatch.delenv(name, raising=False)
    return monkeypatch


class TestLoadEnvFiles:
    """Tests for .env / .env.local merging"""

    def test_env_local_overrides_env(self, tmp_path):
        (tmp_path / ".env").write_text("SF_CLIENT_ID=from-env\nSF_INSTANCE_URL=https://a.my.salesforce.com\n")
        (tmp_path / ".env.local").write_text("SF_CLIENT_ID=from-env-local\n")

        envs = load_env_files(str(tmp_path))

        assert envs["SF_CLIENT_ID"] == "from-env-local"
        assert envs["SF_INSTANCE_URL"] == "https://a.my.salesforce.com"

    def test_missing_files(self, tmp_path):
        assert load_env_files(str(tmp_path)) == {}


class TestGetSetting:
    """Tests for get_setting"""

    def test_env_file_value_wins(self, clean_environment):
        clean_environment.setattr(etl.config, "envs", {"SF_CLIENT_ID": "  from-file  "})
        clean_environment.setenv("SF_CLIENT_ID", "from-process")

        assert get_setting("SF_CLIENT_ID") == "from-file"

    def test_falls_back_to_process_environment(self, clean_environment):
        clean_environment.setenv("SF_CLIENT_ID", "from-process")
        assert get_setting("SF_CLIENT_ID") == "from-process"

    def test_empty_file_value_falls_back(self, clean_environment):
        clean_environment.setattr(etl.config, "envs", {"SF_CLIENT_ID": None})
        clean_environment.setenv("SF_CLIENT_ID", "from-process")

        assert get_setting("SF_CLIENT_ID") == "from-process"

    def test_default(self, clean_environment):
        assert get_setting("SF_CLIENT_ID", "fallback") == "fallback"
        assert get_setting("SF_CLIENT_ID") is None


class TestLoadCredentials:
    """Tests for load_credentials"""

    def test_reads_all_four(self, clean_environment):
        clean_environment.setattr(etl.config, "envs", {
            "SF_CLIENT_ID": "id",
            "SF_CLIENT_SECRET": "secret",
            "SF_REFRESH_TOKEN": "refresh"
        })
        clean_environment.setenv("SF_INSTANCE_URL", "https://example.my.salesforce.com")

        credentials = load_credentials()

        assert credentials.client_id == "id"
        assert credentials.client_secret == "secret"
        assert credentials.refresh_token == "refresh"
        assert credentials.instance_url == "https://example.my.salesforce.com"
        assert credentials.missing_fields() == []

    def test_missing_values_are_empty_strings(self, clean_environment):
        clean_environment.setattr(etl.config, "envs", {"SF_CLIENT_ID": None})

        credentials = load_credentials()

        assert credentials.client_id == ""
        assert credentials.instance_url == ""
        assert credentials.missing_fields() == CREDENTIAL_VARS
