import os

# Variáveis obrigatórias (verificadas antes de abrir o listener)
REQUIRED_ENV_VARS = (
    "MATTERMOST_TOKEN",
    "MATTERMOST_CHANNEL_ID",
    "MATTERMOST_BASE_URL",
    "SENTRY_SECRET",
    "BIND",
)

# Caminho do .env (variáveis reais do processo têm precedência)
ENV_FILE = os.getenv("ENV_FILE", ".env")

DEFAULT_NOTIFY_TIMEOUT_SECONDS = "5"
DEFAULT_SERVICE_NAME = "sentry-mattermost"
LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# Protocolo do webhook do Sentry
SIGNATURE_HEADER = "sentry-hook-signature"
ALERT_PATH = "/alert"
ISSUE_CREATED_ACTION = "created"

# API do Mattermost
POSTS_ENDPOINT = "/api/v4/posts"
POST_CREATED_STATUS = 201
