import json
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

import requests
import urllib3

from .constants import POST_CREATED_STATUS, POSTS_ENDPOINT
from .errors import PostFail, TransportError

logger = logging.getLogger(__name__)


@dataclass
class MattermostResponse:
    status: int
    request: str
    headers: Dict[str, str] = field(default_factory=dict)
    body: Any = None

    @classmethod
    def from_requests(cls, request: str, resp: requests.Response) -> "MattermostResponse":
        try:
            body = resp.json()
        except ValueError as exc:
            # Resposta de erro sem JSON (ex.: HTML de um proxy reverso) segue
            # como status sem corpo; resposta de sucesso malformada é erro
            if resp.status_code < 400:
                raise TransportError(exc)
            body = None
        return cls(status=resp.status_code, request=request, headers=dict(resp.headers), body=body)

    def message(self) -> Optional[str]:
        if not isinstance(self.body, dict) or "message" not in self.body:
            return None
        msg = self.body["message"]
        return msg if isinstance(msg, str) else json.dumps(msg)


class MattermostClient:
    def __init__(self, base_url: str, token: str, timeout: float = 5.0, verify_tls: bool = True):
        self.base_url = base_url.rstrip('/')
        self.token = token
        self.timeout = timeout
        self.verify_tls = verify_tls

        # Suprime avisos de HTTPS inseguro quando a verificação TLS está desativada
        if not self.verify_tls:
            urllib3.disable_warnings(urllib3.exceptions.InsecureRequestWarning)
            logger.debug("Avisos de InsecureRequestWarning desabilitados (MATTERMOST_VERIFY_TLS=false)")

    def __repr__(self) -> str:
        return f"MattermostClient(base_url={self.base_url!r})"

    def url(self, endpoint: str) -> str:
        return f"{self.base_url}{endpoint}"

    def _headers(self) -> Dict[str, str]:
        return {
            "Authorization": f"Bearer {self.token}",
            "Accept": "application/json",
        }

    def _request(self, method: str, endpoint: str, payload: Optional[Dict] = None) -> MattermostResponse:
        try:
            resp = requests.request(
                method,
                self.url(endpoint),
                headers=self._headers(),
                json=payload,
                timeout=self.timeout,
                verify=self.verify_tls,
            )
        except requests.RequestException as exc:
            raise TransportError(exc)
        return MattermostResponse.from_requests(f"{method} {endpoint}", resp)

    def get(self, endpoint: str) -> MattermostResponse:
        return self._request("GET", endpoint)

    def post(self, endpoint: str, payload: Dict) -> MattermostResponse:
        return self._request("POST", endpoint, payload)

    def create_post(self, channel_id: str, message: str) -> None:
        """
        Cria um post no canal. Sucesso é somente o status 201; qualquer outro
        status vira PostFail com a mensagem do corpo, quando houver.
        """
        payload = {"channel_id": channel_id, "message": message}
        response = self.post(POSTS_ENDPOINT, payload)
        if response.status != POST_CREATED_STATUS:
            raise PostFail(response.status, response.message())
