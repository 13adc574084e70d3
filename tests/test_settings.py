from __future__ import annotations

import pytest

from storefront import Settings, policy_from_settings


@pytest.fixture(autouse=True)
def clean_env(monkeypatch: pytest.MonkeyPatch) -> None:
    for key in (
        "STOREFRONT_API_URL",
        "API_URL",
        "STOREFRONT_CART_KEY",
        "STOREFRONT_STORAGE_URL",
        "STOREFRONT_POLL_INTERVAL",
        "STOREFRONT_BOLETO_POLL_INTERVAL",
        "STOREFRONT_REQUEST_TIMEOUT",
        "STOREFRONT_MAX_INSTALLMENTS",
        "STOREFRONT_LOG_LEVEL",
    ):
        monkeypatch.delenv(key, raising=False)


def test_defaults() -> None:
    settings = Settings.from_env(dotenv=False)

    assert settings == Settings()
    assert settings.cart_key == "ln-educacional-cart"
    assert settings.poll_interval == 5.0


def test_reads_environment(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_API_URL", "https://api.example.com")
    monkeypatch.setenv("STOREFRONT_POLL_INTERVAL", "2.5")
    monkeypatch.setenv("STOREFRONT_MAX_INSTALLMENTS", "6")
    monkeypatch.setenv("STOREFRONT_LOG_LEVEL", "debug")

    settings = Settings.from_env(dotenv=False)

    assert settings.api_url == "https://api.example.com"
    assert settings.poll_interval == 2.5
    assert settings.max_installments == 6
    assert settings.log_level == "DEBUG"


def test_malformed_number_names_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_POLL_INTERVAL", "fast")

    with pytest.raises(RuntimeError, match="STOREFRONT_POLL_INTERVAL"):
        Settings.from_env(dotenv=False)


def test_max_installments_below_one_names_variable(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.setenv("STOREFRONT_MAX_INSTALLMENTS", "0")

    with pytest.raises(RuntimeError, match="STOREFRONT_MAX_INSTALLMENTS"):
        Settings.from_env(dotenv=False)



def test_policy_from_settings() -> None:
    policy = policy_from_settings(Settings(poll_interval=1.0, boleto_poll_interval=0, max_installments=4))

    assert policy.pix_watch.interval == 1.0
    assert policy.boleto_watch is None
    assert policy.max_installments == 4
