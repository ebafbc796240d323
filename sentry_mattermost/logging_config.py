import logging

from pythonjsonlogger.json import JsonFormatter

from .constants import DEFAULT_SERVICE_NAME


class ServiceNameFilter(logging.Filter):
    """Garante que todo registro carregue o nome do serviço."""

    def __init__(self, service_name: str) -> None:
        super().__init__()
        self.service_name = service_name

    def filter(self, record: logging.LogRecord) -> bool:
        if not hasattr(record, "service"):
            record.service = self.service_name
        return True


def setup_logging(level: str = "INFO", service_name: str = DEFAULT_SERVICE_NAME) -> None:
    """Configura o root logger para emitir JSON no stdout."""
    root = logging.getLogger()
    root.setLevel(level)

    handler = logging.StreamHandler()
    formatter = JsonFormatter(
        "%(asctime)s %(levelname)s %(name)s %(message)s %(service)s",
        rename_fields={"levelname": "level", "asctime": "time"},
    )
    handler.setFormatter(formatter)
    handler.addFilter(ServiceNameFilter(service_name))

    # Substitui handlers existentes para evitar logs duplicados
    root.handlers.clear()
    root.addHandler(handler)
    logging.captureWarnings(True)

    # Log de acesso do werkzeug passa a sair no mesmo formato
    werkzeug_logger = logging.getLogger("werkzeug")
    werkzeug_logger.handlers.clear()
    werkzeug_logger.propagate = True
