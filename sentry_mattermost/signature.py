import hashlib
import hmac
from typing import Mapping, Optional, Union

from .constants import SIGNATURE_HEADER
from .errors import InvalidSecret, MissingHeaderEntry, UnreadableHeader


def _secret_bytes(secret: Union[str, bytes]) -> bytes:
    if isinstance(secret, str):
        secret = secret.encode("utf-8")
    if not secret:
        raise InvalidSecret()
    return secret


def compute_digest(raw_body: bytes, secret: Union[str, bytes]) -> str:
    """HMAC-SHA256 do corpo bruto, em hex minúsculo."""
    return hmac.new(_secret_bytes(secret), raw_body, hashlib.sha256).hexdigest()


def verify_signature(headers: Mapping[str, str], raw_body: bytes, secret: Union[str, bytes]) -> bool:
    """
    Confere o digest do header sentry-hook-signature contra o HMAC do corpo.

    Header ausente ou ilegível e segredo inválido levantam AuthError; só uma
    assinatura presente e diferente retorna False.
    """
    expected: Optional[str] = headers.get(SIGNATURE_HEADER)
    if expected is None:
        raise MissingHeaderEntry(SIGNATURE_HEADER)
    if isinstance(expected, bytes):
        try:
            expected = expected.decode("ascii")
        except UnicodeDecodeError as exc:
            raise UnreadableHeader(SIGNATURE_HEADER, exc)
    try:
        expected_ascii = expected.encode("ascii")
    except UnicodeEncodeError as exc:
        raise UnreadableHeader(SIGNATURE_HEADER, exc)

    computed = compute_digest(raw_body, secret)
    return hmac.compare_digest(expected_ascii, computed.encode("ascii"))
