"""Tests for argument parsing and the non-interactive diagnostics."""

import pytest

from reviewdesk import __main__ as cli
from reviewdesk.infrastructure.config import Platform
from reviewdesk.infrastructure.stores import StoreRequestError


@pytest.fixture(autouse=True)
def clean_env(monkeypatch):
    for name in (
        "APP_STORE_APP_ID",
        "APP_STORE_CONNECT_KEY_ID",
        "APP_STORE_CONNECT_ISSUER_ID",
        "APP_STORE_CONNECT_PRIVATE_KEY_PATH",
        "GOOGLE_PLAY_PACKAGE_NAME",
        "GOOGLE_PLAY_SERVICE_ACCOUNT_PATH",
        "OPENAI_API_KEY",
    ):
        monkeypatch.delenv(name, raising=False)


def test_platform_flags_are_exclusive():
    with pytest.raises(SystemExit):
        cli.build_parser().parse_args(["--ios", "--android"])


def test_ios_is_default():
    args = cli.build_parser().parse_args(["--app-id", "42"])
    settings = cli.settings_from_args(args)
    assert settings.platform is Platform.IOS
    assert settings.app_id == "42"


def test_android_flags():
    args = cli.build_parser().parse_args([
        "--android", "--app-id", "com.example.app", "--service-account", "/tmp/sa.json",
    ])
    settings = cli.settings_from_args(args)
    assert settings.platform is Platform.ANDROID
    assert str(settings.google_play.service_account_path) == "/tmp/sa.json"


def test_missing_credentials_exit_with_error(capsys):
    assert cli.main(["--android", "--test-store"]) == 1
    assert "ERROR: Package name is required" in capsys.readouterr().err


def test_store_check_reports_count(monkeypatch, capsys, tmp_path):
    class Client:
        def refresh_all_reviews(self):
            return [object(), object(), object()]

    monkeypatch.setattr(cli, "create_client", lambda settings: Client())
    code = cli.main([
        "--android", "--app-id", "com.example.app",
        "--service-account", str(tmp_path / "sa.json"), "--test-store",
    ])
    assert code == 0
    assert "Successfully accessed reviews: 3 found" in capsys.readouterr().out


def test_store_check_reports_failure(monkeypatch, capsys, tmp_path):
    class Client:
        def refresh_all_reviews(self):
            raise StoreRequestError("Fetch reviews", 403, "forbidden")

    monkeypatch.setattr(cli, "create_client", lambda settings: Client())
    code = cli.main([
        "--android", "--app-id", "com.example.app",
        "--service-account", str(tmp_path / "sa.json"), "--test-store",
    ])
    assert code == 1
    assert "Error accessing reviews: Fetch reviews failed with status 403" in capsys.readouterr().out


def test_ai_check_without_key_shows_template(capsys):
    assert cli.main(["--test-ai"]) == 1
    out = capsys.readouterr().out
    assert "AI Error" in out
    assert 'Template fallback: Thank you for your 5-star review about "Great app!"' in out
