import logging

from sentry_mattermost.config import load_config, load_env
from sentry_mattermost.controller import create_app
from sentry_mattermost.logging_config import setup_logging


load_env()
config = load_config()
setup_logging(config.log_level, config.service_name)
app = create_app(config)

if __name__ == '__main__':
    logging.getLogger(__name__).info(f"sentry-mattermost escutando em {config.bind}")
    # Um thread por conexão; use_reloader=False evita carregar a config duas vezes
    app.run(host=config.host, port=config.port, debug=config.debug, threaded=True, use_reloader=False)
