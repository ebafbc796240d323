import json
import logging
from typing import Optional

from flask import Flask, Response, request
from werkzeug.exceptions import HTTPException

from .body import ActionKind, Body
from .config import Config
from .constants import ALERT_PATH
from .errors import AuthError, ExtractionError, NotifyError, ParseError
from .mattermost import MattermostClient
from .signature import verify_signature

logger = logging.getLogger(__name__)


def _text(status: int, text: str) -> Response:
    return Response(text, status=status, content_type="text/plain")


def ok() -> Response:
    return _text(200, "Ok")


def bad_request() -> Response:
    return _text(400, "Bad request")


def server_error() -> Response:
    return _text(500, "Internal server Error")


def parse_body(raw_body: bytes) -> Body:
    try:
        return Body(json.loads(raw_body.decode("utf-8", errors="replace")))
    except (ValueError, RecursionError) as exc:
        raise ParseError(exc)


def create_app(config: Config, notifier: Optional[MattermostClient] = None) -> Flask:
    app = Flask(__name__)
    app.config["BRIDGE_CONFIG"] = config

    # Cliente sem estado mutável, compartilhado entre as threads de request
    if notifier is None:
        notifier = MattermostClient(
            config.mattermost_base_url,
            config.mattermost_token,
            timeout=config.notify_timeout,
            verify_tls=config.verify_tls,
        )

    @app.route(ALERT_PATH, methods=['POST'], provide_automatic_options=False)
    def alert():
        try:
            raw_body = request.get_data(cache=False)
        except (HTTPException, OSError) as exc:
            logger.error(f"alert() falhou ao ler o corpo do request: {exc}")
            return server_error()

        try:
            verified = verify_signature(request.headers, raw_body, config.sentry_secret)
        except AuthError as exc:
            logger.error(f"verify_signature() falhou: {exc}")
            return server_error()
        if not verified:
            logger.error("verify_signature() falhou: assinatura não confere")
            return server_error()

        try:
            body = parse_body(raw_body)
        except ParseError as exc:
            logger.error(f"alert() falhou ao interpretar o corpo como json: {exc}")
            return bad_request()

        try:
            action = body.action()
        except ExtractionError as exc:
            logger.error(f"alert() falhou ao obter a ação do corpo: {exc}")
            return ok()

        if action.kind is ActionKind.UNKNOWN:
            logger.warning(f"Ação desconhecida: {action!r}")
            return ok()

        try:
            notifier.create_post(config.mattermost_channel_id, str(action))
            logger.debug(f"Post criado para {action!r}")
        except NotifyError as exc:
            logger.error(f"Falha ao criar post para a ação {action!r}: {exc}")

        return ok()

    @app.errorhandler(404)
    @app.errorhandler(405)
    def fallback(_exc):
        logger.warning(
            f"Recebido request {request.method} em {request.path}: headers={dict(request.headers)}"
        )
        return bad_request()

    return app
