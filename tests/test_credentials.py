"""Tests for loading operator credentials."""

import pytest

from speedlingo.config import Credentials, load_credentials
from speedlingo.error_handling import ConfigurationError


def write(tmp_path, text):
    path = tmp_path / "config.yaml"
    path.write_text(text)
    return path


class TestLoadCredentials:
    def test_loads_all_fields(self, tmp_path):
        path = write(tmp_path, "username: octocat\nemail: octocat@example.com\ntoken: ghp_abc\n")
        creds = load_credentials(path)
        assert creds == Credentials(username="octocat", email="octocat@example.com", token="ghp_abc")

    def test_unknown_field_is_rejected(self, tmp_path):
        path = write(tmp_path, "username: a\nemail: b@c\ntoken: t\npassword: nope\n")
        with pytest.raises(ConfigurationError, match="Unknown fields.*password"):
            load_credentials(path)

    def test_missing_field_is_rejected(self, tmp_path):
        path = write(tmp_path, "username: a\nemail: b@c\n")
        with pytest.raises(ConfigurationError, match="Missing fields.*token"):
            load_credentials(path)

    @pytest.mark.parametrize("value", ['""', "''", "123", "null"])
    def test_field_must_be_non_empty_string(self, tmp_path, value):
        path = write(tmp_path, f"username: a\nemail: b@c\ntoken: {value}\n")
        with pytest.raises(ConfigurationError, match="token"):
            load_credentials(path)

    def test_document_must_be_mapping(self, tmp_path):
        path = write(tmp_path, "- username\n- email\n")
        with pytest.raises(ConfigurationError, match="mapping"):
            load_credentials(path)

    def test_missing_file(self, tmp_path):
        with pytest.raises(ConfigurationError, match="Cannot read") as excinfo:
            load_credentials(tmp_path / "absent.yaml")
        assert isinstance(excinfo.value.cause, OSError)

    def test_invalid_yaml(self, tmp_path):
        path = write(tmp_path, "username: [unclosed\n")
        with pytest.raises(ConfigurationError, match="Invalid YAML"):
            load_credentials(path)

    def test_repr_hides_token(self):
        creds = Credentials(username="octocat", email="o@example.com", token="ghp_secret")
        assert "ghp_secret" not in repr(creds)
