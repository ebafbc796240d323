"""Carga da configuração do processo.

A configuração vem das variáveis de ambiente, opcionalmente semeadas por um
arquivo .env (variáveis reais do processo nunca são sobrescritas). O resultado
é um Config imutável, criado uma vez no startup e injetado no Flask app.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Mapping, Optional, Tuple
from urllib.parse import urlparse

from dotenv import load_dotenv

from .constants import (
    DEFAULT_NOTIFY_TIMEOUT_SECONDS,
    DEFAULT_SERVICE_NAME,
    ENV_FILE,
    LOG_LEVELS,
    REQUIRED_ENV_VARS,
)
from .errors import ConfigError


@dataclass(frozen=True)
class Config:
    sentry_secret: str
    mattermost_base_url: str
    mattermost_token: str
    mattermost_channel_id: str
    bind: str
    notify_timeout: float = float(DEFAULT_NOTIFY_TIMEOUT_SECONDS)
    verify_tls: bool = True
    debug: bool = False
    log_level: str = "INFO"
    service_name: str = DEFAULT_SERVICE_NAME

    @property
    def host(self) -> str:
        return parse_bind(self.bind)[0]

    @property
    def port(self) -> int:
        return parse_bind(self.bind)[1]


def load_env(env_file: Optional[Path] = None) -> None:
    """
    Carrega o .env (se existir) no ambiente do processo.
    Pode ser chamado várias vezes.
    """
    if env_file is None:
        env_file = Path.cwd() / ENV_FILE
    load_dotenv(env_file, override=False)


def _flag(value: Optional[str], default: str) -> bool:
    return (value or default).strip().lower() == "true"


def parse_bind(bind: str) -> Tuple[str, int]:
    host, sep, port = bind.rpartition(":")
    if not sep or not host:
        raise ConfigError(f"BIND inválido (esperado host:porta): {bind!r}")
    try:
        port_num = int(port)
    except ValueError:
        raise ConfigError(f"BIND com porta inválida: {bind!r}")
    if not 0 < port_num < 65536:
        raise ConfigError(f"BIND com porta fora do intervalo: {bind!r}")
    return host.strip("[]"), port_num


def _validate_base_url(url: str) -> str:
    parsed = urlparse(url)
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        raise ConfigError(f"MATTERMOST_BASE_URL não é uma URL válida: {url!r}")
    return url.rstrip("/")


def load_config(environ: Optional[Mapping[str, str]] = None) -> Config:
    if environ is None:
        environ = os.environ

    for name in REQUIRED_ENV_VARS:
        if not environ.get(name):
            raise ConfigError(f"{name} missing in .env!")

    try:
        timeout = float(environ.get("NOTIFY_TIMEOUT_SECONDS", DEFAULT_NOTIFY_TIMEOUT_SECONDS))
    except ValueError:
        raise ConfigError("NOTIFY_TIMEOUT_SECONDS precisa ser numérico")
    if timeout <= 0:
        raise ConfigError("NOTIFY_TIMEOUT_SECONDS precisa ser maior que zero")

    bind = environ["BIND"].strip()
    parse_bind(bind)

    debug = _flag(environ.get("DEBUG_MODE"), "false")
    log_level = environ.get("LOG_LEVEL", "DEBUG" if debug else "INFO").strip().upper()
    if log_level not in LOG_LEVELS:
        raise ConfigError(f"LOG_LEVEL inválido: {log_level!r} (esperado um de {', '.join(LOG_LEVELS)})")

    return Config(
        sentry_secret=environ["SENTRY_SECRET"],
        mattermost_base_url=_validate_base_url(environ["MATTERMOST_BASE_URL"].strip()),
        mattermost_token=environ["MATTERMOST_TOKEN"].strip(),
        mattermost_channel_id=environ["MATTERMOST_CHANNEL_ID"].strip(),
        bind=bind,
        notify_timeout=timeout,
        verify_tls=_flag(environ.get("MATTERMOST_VERIFY_TLS"), "true"),
        debug=debug,
        log_level=log_level,
        service_name=environ.get("SERVICE_NAME", DEFAULT_SERVICE_NAME).strip() or DEFAULT_SERVICE_NAME,
    )
