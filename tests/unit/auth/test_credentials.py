"""Tests for credentials file discovery and external configuration sources."""

import logging

import pytest

from cloud_sdk_core.auth import read_cr_token_file, read_credentials_file, read_external_sources
from cloud_sdk_core.auth.credentials import (
    DEFAULT_CREDENTIALS_FILENAME,
    construct_filepath,
    file_exists_at_path,
    filter_properties_by_service_name,
    locate_credentials_file,
)
from cloud_sdk_core.auth.exceptions import CredentialError, CredentialFileError


class TestHelpers:
    """Test path helpers."""

    def test_construct_filepath_appends_default_filename(self, tmp_path):
        assert construct_filepath(tmp_path) == str(tmp_path / DEFAULT_CREDENTIALS_FILENAME)

    def test_construct_filepath_keeps_full_path(self, tmp_path):
        path = str(tmp_path / DEFAULT_CREDENTIALS_FILENAME)
        assert construct_filepath(path) == path

    def test_file_exists_at_path(self, tmp_path):
        existing = tmp_path / "creds.env"
        existing.write_text("A=b\n")

        assert file_exists_at_path(existing)
        assert not file_exists_at_path(tmp_path / "missing.env")
        assert not file_exists_at_path(tmp_path)

    def test_file_exists_at_path_accepts_symlink(self, tmp_path):
        target = tmp_path / "target.env"
        target.write_text("A=b\n")
        link = tmp_path / "link.env"
        link.symlink_to(target)

        assert file_exists_at_path(link)


class TestReadCredentialsFile:
    """Test credentials file resolution order."""

    def test_env_var_pointing_at_file(self, tmp_path, monkeypatch, work_dir):
        custom = tmp_path / "custom-name.env"
        custom.write_text("SOURCE=env-file\n")
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=cwd\n")
        monkeypatch.setenv("IBM_CREDENTIALS_FILE", str(custom))

        assert read_credentials_file() == {"SOURCE": "env-file"}

    def test_env_var_pointing_at_directory(self, tmp_path, monkeypatch, work_dir):
        creds_dir = tmp_path / "creds"
        creds_dir.mkdir()
        (creds_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=env-dir\n")
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=cwd\n")
        monkeypatch.setenv("IBM_CREDENTIALS_FILE", str(creds_dir))

        assert read_credentials_file() == {"SOURCE": "env-dir"}

    def test_working_directory_before_home(self, work_dir, home_dir):
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=cwd\n")
        (home_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=home\n")

        assert read_credentials_file() == {"SOURCE": "cwd"}

    def test_home_directory(self, home_dir):
        (home_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=home\n")

        assert read_credentials_file() == {"SOURCE": "home"}

    def test_env_var_without_file_falls_back(self, tmp_path, monkeypatch, home_dir):
        monkeypatch.setenv("IBM_CREDENTIALS_FILE", str(tmp_path / "nowhere"))
        (home_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("SOURCE=home\n")

        assert read_credentials_file() == {"SOURCE": "home"}

    def test_no_file_returns_empty_record(self, caplog):
        caplog.set_level(logging.INFO, logger="cloud_sdk_core.auth.credentials")

        assert locate_credentials_file() is None
        assert read_credentials_file() == {}

        info_records = [r for r in caplog.records if r.levelno == logging.INFO]
        assert len(info_records) == 1
        assert "Credential file does not exist" in info_records[0].getMessage()

    def test_parses_key_value_lines(self, work_dir):
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text(
            "# comment\nMY_SERVICE_URL=https://host/api\nMY_SERVICE_APIKEY=abc=def\nlower_case=kept\n"
        )

        record = read_credentials_file()

        assert record == {
            "MY_SERVICE_URL": "https://host/api",
            "MY_SERVICE_APIKEY": "abc=def",
            "lower_case": "kept",
        }

    def test_values_are_not_interpolated(self, work_dir, monkeypatch):
        monkeypatch.setenv("TEST_SECRET_VAR", "leaked")
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text(
            "MY_SERVICE_APIKEY=abc${TEST_SECRET_VAR}def\nMY_SERVICE_PASSWORD=${MY_SERVICE_APIKEY}\n"
        )

        record = read_credentials_file()

        assert record == {
            "MY_SERVICE_APIKEY": "abc${TEST_SECRET_VAR}def",
            "MY_SERVICE_PASSWORD": "${MY_SERVICE_APIKEY}",
        }

    def test_values_are_not_logged(self, work_dir, caplog):
        caplog.set_level(logging.DEBUG)
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("MY_SERVICE_APIKEY=super-secret-key-123\n")

        read_credentials_file()

        assert "super-secret-key-123" not in caplog.text


class TestReadCrTokenFile:
    """Test CR token file reading."""

    def test_reads_token(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("cr-token-value")

        assert read_cr_token_file(token_file) == "cr-token-value"

    def test_token_is_read_in_full(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_text("cr-token-value\n")

        assert read_cr_token_file(str(token_file)) == "cr-token-value\n"

    def test_invalid_utf8_is_replaced(self, tmp_path):
        token_file = tmp_path / "token"
        token_file.write_bytes(b"cr-\xfftoken")

        assert read_cr_token_file(token_file) == "cr-\ufffdtoken"

    def test_missing_file_raises(self, tmp_path, caplog):
        caplog.set_level(logging.ERROR)
        path = tmp_path / "missing-token"

        with pytest.raises(CredentialFileError) as exc_info:
            read_cr_token_file(path)

        assert "does not exist" in str(exc_info.value)
        assert exc_info.value.path == str(path)
        assert "does not exist" in caplog.text

    def test_empty_file_raises(self, tmp_path, caplog):
        caplog.set_level(logging.ERROR)
        token_file = tmp_path / "empty-token"
        token_file.write_text("")

        with pytest.raises(CredentialFileError) as exc_info:
            read_cr_token_file(token_file)

        assert "is empty" in str(exc_info.value)
        assert "is empty" in caplog.text

    def test_missing_and_empty_are_same_kind_different_message(self, tmp_path):
        empty = tmp_path / "empty-token"
        empty.write_text("")

        with pytest.raises(CredentialError) as missing_info:
            read_cr_token_file(tmp_path / "missing-token")
        with pytest.raises(CredentialError) as empty_info:
            read_cr_token_file(empty)

        assert type(missing_info.value) is type(empty_info.value)
        assert str(missing_info.value) != str(empty_info.value)


class TestExternalSources:
    """Test service-scoped external configuration."""

    def test_filter_by_service_name(self):
        source = {
            "MY_SERVICE_URL": "https://host",
            "MY_SERVICE_AUTH_TYPE": "iam",
            "OTHER_SERVICE_URL": "https://other",
            "MY_SERVICE_": "ignored",
        }

        properties = filter_properties_by_service_name(source, "my-service")

        assert properties == {"url": "https://host", "auth_type": "iam"}

    def test_flags_and_numbers_are_converted(self):
        source = {
            "MY_SERVICE_DISABLE_SSL": "true",
            "MY_SERVICE_ENABLE_GZIP": "false",
            "MY_SERVICE_ENABLE_RETRIES": "TRUE",
            "MY_SERVICE_MAX_RETRIES": "3",
            "MY_SERVICE_RETRY_INTERVAL": "20",
        }

        properties = filter_properties_by_service_name(source, "my_service")

        assert properties == {
            "disable_ssl": True,
            "enable_gzip": False,
            "enable_retries": True,
            "max_retries": 3,
            "retry_interval": 20.0,
        }

    def test_invalid_number_is_dropped(self, caplog):
        caplog.set_level(logging.WARNING)

        properties = filter_properties_by_service_name({"MY_SERVICE_MAX_RETRIES": "many"}, "my-service")

        assert "max_retries" not in properties
        assert "MY_SERVICE_MAX_RETRIES" in caplog.text

    def test_reads_from_credentials_file(self, work_dir, monkeypatch):
        (work_dir / DEFAULT_CREDENTIALS_FILENAME).write_text("MY_SERVICE_URL=https://from-file\n")
        monkeypatch.setenv("MY_SERVICE_URL", "https://from-env")

        assert read_external_sources("my-service") == {"url": "https://from-file"}

    def test_falls_back_to_environment(self, monkeypatch):
        monkeypatch.setenv("MY_SERVICE_URL", "https://from-env")
        monkeypatch.setenv("MY_SERVICE_DISABLE_SSL", "true")

        assert read_external_sources("my-service") == {"url": "https://from-env", "disable_ssl": True}

    def test_nothing_configured(self):
        assert read_external_sources("my-service") == {}

    def test_service_name_required(self):
        with pytest.raises(ValueError, match="Service name is required"):
            read_external_sources("")
