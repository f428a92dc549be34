# orderhub/services/user_client.py
import requests
from pydantic import ValidationError
from requests import RequestException

from orderhub.domain.errors import DependencyError
from orderhub.domain.schemas import UserInfo
from orderhub.services.product_client import upstream_error
from orderhub.utils.retry import http_retry
from orderhub.utils.settings import USER_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)


class UserClient:
    """Resolves principals against the user directory."""

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or USER_SERVICE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def find_user_id_by_email(self, email: str) -> str | None:
        try:
            resp = self._get_by_email(email)
        except RequestException as e:
            raise upstream_error(f"look up user {email}", e) from e

        if resp is None:
            return None
        try:
            return UserInfo.model_validate(resp.json()).id
        except (ValueError, ValidationError) as e:
            raise DependencyError(f"Malformed user payload for {email}") from e

    @http_retry()
    def _get_by_email(self, email: str) -> requests.Response | None:
        url = f"{self.base_url}/users/email/{email}"
        logger.info(f"UserClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp
