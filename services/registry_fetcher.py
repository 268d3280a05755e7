"""
APNIC registry download

Issues the single GET request of a sync run and exposes the response body as
a stream of text lines.
"""

import contextlib
import requests
from config import Config
from errors import FetchError
from log_config import get_sync_logger

logger = get_sync_logger()


def fetch_registry(url, session=None, timeout=None):
    """
    Request the registry file and return the streaming response

    Args:
        url: Registry file URL
        session: Optional requests.Session (module-level requests is used otherwise)
        timeout: Request timeout in seconds (default: Config.HTTP_TIMEOUT)

    Returns:
        requests.Response opened with stream=True. The caller must close it.

    Raises:
        FetchError: connection failure, timeout or non-2xx status
    """
    http = session or requests
    if timeout is None:
        timeout = Config.HTTP_TIMEOUT

    try:
        response = http.get(url, stream=True, timeout=timeout)
    except requests.RequestException as e:
        logger.error(f"http get registry err: {url} - {str(e)}")
        raise FetchError(f"Failed to fetch registry {url}: {str(e)}", url=url) from e

    logger.info(f"http get resp code: {response.status_code}")

    if not 200 <= response.status_code < 300:
        response.close()
        logger.error(f"Registry request rejected: {url} - HTTP {response.status_code}")
        raise FetchError(
            f"Registry request to {url} returned HTTP {response.status_code}",
            url=url,
            status_code=response.status_code,
        )

    return response


@contextlib.contextmanager
def open_registry(url, session=None, timeout=None):
    """
    Yield the registry body as an iterator of text lines.

    The response is closed on every exit path, including a scan that stops
    before the end of the body.
    """
    response = fetch_registry(url, session=session, timeout=timeout)
    try:
        if not response.encoding:
            response.encoding = "utf-8"
        yield response.iter_lines(decode_unicode=True)
    finally:
        response.close()
