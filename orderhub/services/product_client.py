# orderhub/services/product_client.py
import requests
from pydantic import ValidationError
from requests import RequestException

from orderhub.domain.errors import DependencyError
from orderhub.domain.schemas import ProductInfo
from orderhub.utils.retry import http_retry, connect_retry
from orderhub.utils.settings import PRODUCT_SERVICE_URL, HTTP_TIMEOUT_SECONDS
from orderhub.utils.logging import get_logger

logger = get_logger(__name__)


def upstream_error(action: str, exc: Exception) -> DependencyError:
    if isinstance(exc, requests.Timeout):
        return DependencyError(f"Timed out trying to {action}", timeout=True)
    return DependencyError(f"Failed to {action}: {exc}")


class ProductClient:
    """
    Synchronous client of the product catalog.

    Reads return None when the catalog answers 404. Every other failure,
    after retries, is raised as DependencyError.
    """

    def __init__(
        self,
        base_url: str | None = None,
        timeout: float = HTTP_TIMEOUT_SECONDS,
        session: requests.Session | None = None,
    ):
        self.base_url = (base_url or PRODUCT_SERVICE_URL).rstrip("/")
        self.timeout = timeout
        self.session = session or requests.Session()

    def fetch_product(self, product_id: str) -> ProductInfo | None:
        try:
            payload = self._get(f"/products/{product_id}")
        except RequestException as e:
            raise upstream_error(f"fetch product {product_id}", e) from e

        if payload is None:
            return None
        try:
            return ProductInfo.model_validate(payload.json())
        except (ValueError, ValidationError) as e:
            raise DependencyError(f"Malformed product payload for {product_id}") from e

    def fetch_seller_id(self, product_id: str) -> str | None:
        try:
            resp = self._get(f"/products/{product_id}/seller-id")
        except RequestException as e:
            raise upstream_error(f"fetch seller of product {product_id}", e) from e

        if resp is None:
            return None
        # plain text or a JSON encoded string
        if "json" in resp.headers.get("content-type", ""):
            try:
                seller_id = resp.json()
            except ValueError as e:
                raise DependencyError(f"Malformed seller id for product {product_id}") from e
        else:
            seller_id = resp.text.strip().strip('"')
        return str(seller_id) if seller_id else None

    def reduce_stock(self, product_id: str, quantity: int):
        self._stock_call(product_id, quantity, "reduce-stock", "reduce")

    def restore_stock(self, product_id: str, quantity: int):
        self._stock_call(product_id, quantity, "restore-stock", "restore")

    def _stock_call(self, product_id: str, quantity: int, endpoint: str, action: str):
        try:
            self._post(f"/products/{product_id}/{endpoint}", params={"quantity": quantity})
        except RequestException as e:
            raise upstream_error(f"{action} stock for product {product_id}", e) from e
        logger.info(f"Stock {action}d for product {product_id} by {quantity}")

    @http_retry()
    def _get(self, path: str) -> requests.Response | None:
        url = f"{self.base_url}{path}"
        logger.info(f"ProductClient GET {url}")

        resp = self.session.get(url, timeout=self.timeout)
        if resp.status_code == 404:
            return None
        resp.raise_for_status()
        return resp

    @connect_retry()
    def _post(self, path: str, params: dict) -> requests.Response:
        url = f"{self.base_url}{path}"
        logger.info(f"ProductClient POST {url} {params}")

        resp = self.session.post(url, params=params, timeout=self.timeout)
        resp.raise_for_status()
        return resp
