# orderhub/utils/retry.py
import requests
from tenacity import retry, stop_after_attempt, wait_exponential, retry_if_exception

from orderhub.utils.settings import HTTP_RETRY_ATTEMPTS


def _is_transient(exc: BaseException) -> bool:
    #5xx and transport errors only, a 4xx answer is final
    if isinstance(exc, requests.HTTPError):
        return exc.response is not None and exc.response.status_code >= 500
    return isinstance(exc, requests.RequestException)


def http_retry():
    """Retry for idempotent reads: transport errors and 5xx answers."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(HTTP_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception(_is_transient),
    )


def connect_retry():
    """Retry for non-idempotent calls: only when the request never left."""
    return retry(
        reraise=True,
        stop=stop_after_attempt(HTTP_RETRY_ATTEMPTS),
        wait=wait_exponential(multiplier=0.3, min=0.3, max=3),
        retry=retry_if_exception(lambda e: isinstance(e, requests.ConnectionError)),
    )
