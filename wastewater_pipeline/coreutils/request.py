from urllib3.util.retry import Retry
import requests
from requests.adapters import HTTPAdapter

from .. import __version__

RETRY_STATUS_FORCELIST = [429, 500, 502, 503, 504]


def build_retry_strategy(max_retries: int = 0, backoff_factor: float = 2) -> Retry:
    """Retry strategy for the open-data API.

    POST is not retried by urllib3 by default, so it is allowed explicitly.
    raise_on_status=False hands the last response back to the caller once
    retries are exhausted so the status check happens in one place.
    """
    return Retry(
        total=max_retries,
        backoff_factor=backoff_factor,
        status_forcelist=RETRY_STATUS_FORCELIST,
        allowed_methods=frozenset({"GET", "POST"}),
        raise_on_status=False,
    )


def new_session(max_retries: int = 0) -> requests.Session:
    """Create a new requests session with retry strategy"""
    session = requests.Session()
    adapter = HTTPAdapter(max_retries=build_retry_strategy(max_retries))
    session.mount("http://", adapter)
    session.mount("https://", adapter)

    # Set default headers
    session.headers.update(
        {
            "User-Agent": f"berlin-wastewater-pipeline/{__version__}",
            "Accept": "application/json",
            "Content-Type": "application/json",
        }
    )

    return session
