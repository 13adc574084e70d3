"""
Settings: environment-driven configuration.

    from storefront.settings import Settings, configure_logging

    settings = Settings.from_env()
    configure_logging(settings)

Values come from the process environment, optionally seeded from a `.env`
file in the working directory.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dotenv import load_dotenv

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"


def _get_env(*keys: str, default: str | None = None) -> str | None:
    for k in keys:
        v = os.getenv(k)
        if v is not None and str(v).strip() != "":
            return v.strip()
    return default


def _get_float(key: str, default: float) -> float:
    v = _get_env(key)
    if v is None:
        return default
    try:
        return float(v)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {key} must be a number, got: {v!r}") from e


def _get_int(key: str, default: int, *, minimum: int | None = None) -> int:
    v = _get_env(key)
    if v is None:
        return default
    try:
        value = int(v)
    except ValueError as e:
        raise RuntimeError(f"Environment variable {key} must be an integer, got: {v!r}") from e
    if minimum is not None and value < minimum:
        raise RuntimeError(f"Environment variable {key} must be >= {minimum}, got: {value}")
    return value


@dataclass(frozen=True)
class Settings:
    """
    Storefront client configuration.

    storage_url: SQLAlchemy URL for the durable cart storage.
    Empty means in-memory (nothing survives a restart).

    boleto_poll_interval: 0 disables confirmation polling for boletos.
    """

    api_url: str = "http://localhost:3333"
    cart_key: str = "ln-educacional-cart"
    storage_url: str = ""
    poll_interval: float = 5.0
    boleto_poll_interval: float = 60.0
    request_timeout: float = 15.0
    max_installments: int = 12
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, *, dotenv: bool = True) -> Settings:
        if dotenv:
            load_dotenv()

        return cls(
            api_url=_get_env("STOREFRONT_API_URL", "API_URL", default=cls.api_url) or cls.api_url,
            cart_key=_get_env("STOREFRONT_CART_KEY", default=cls.cart_key) or cls.cart_key,
            storage_url=_get_env("STOREFRONT_STORAGE_URL", default="") or "",
            poll_interval=_get_float("STOREFRONT_POLL_INTERVAL", cls.poll_interval),
            boleto_poll_interval=_get_float("STOREFRONT_BOLETO_POLL_INTERVAL", cls.boleto_poll_interval),
            request_timeout=_get_float("STOREFRONT_REQUEST_TIMEOUT", cls.request_timeout),
            max_installments=_get_int("STOREFRONT_MAX_INSTALLMENTS", cls.max_installments, minimum=1),
            log_level=(_get_env("STOREFRONT_LOG_LEVEL", default=cls.log_level) or cls.log_level).upper(),
        )


def configure_logging(settings: Settings) -> None:
    logging.basicConfig(
        level=getattr(logging, settings.log_level, logging.INFO),
        format=LOG_FORMAT,
    )


__all__ = ("Settings", "configure_logging", "LOG_FORMAT")
