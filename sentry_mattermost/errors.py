from typing import Any, Optional


class BridgeError(Exception):
    """Erro base de todo o pipeline webhook -> Mattermost."""


class ConfigError(BridgeError):
    pass


# ---------- Autenticação ----------

class AuthError(BridgeError):
    pass


class MissingHeaderEntry(AuthError):
    def __init__(self, header: str):
        self.header = header
        super().__init__(f"missing header entry {header}")


class UnreadableHeader(AuthError):
    def __init__(self, header: str, cause: Optional[Exception] = None):
        self.header = header
        self.cause = cause
        super().__init__(f"failed to convert field {header}: {cause}")


class InvalidSecret(AuthError):
    def __init__(self):
        super().__init__("sentry secret is not valid")


# ---------- Parse / extração ----------

class ParseError(BridgeError):
    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"body is not valid json: {cause}")


class ExtractionError(BridgeError):
    pass


class MissingField(ExtractionError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"field {path} is missing")


class FieldType(ExtractionError):
    def __init__(self, path: str):
        self.path = path
        super().__init__(f"field {path} is of wrong type")


class NotAction(ExtractionError):
    def __init__(self, action: str):
        self.action = action
        super().__init__(f"action is not of type {action}")


# ---------- Notificação ----------

class NotifyError(BridgeError):
    pass


class PostFail(NotifyError):
    def __init__(self, status: int, message: Optional[str] = None):
        self.status = status
        self.message = message
        super().__init__(f"post failed with status {status}: {message}")


class TransportError(NotifyError):
    def __init__(self, cause: Any):
        self.cause = cause
        super().__init__(f"transport error: {cause}")
