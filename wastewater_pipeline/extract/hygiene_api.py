"""
Hygiene-Monitor API Client - Pure I/O Operations

This module handles the call to the hygiene-monitor open-data endpoint with
no business logic. Returns the raw record dicts from the response envelope.
"""

import requests
import time
from datetime import date
from typing import Any, Dict, List, Optional
import logging

from ..coreutils.config import DEFAULT_API_URL, DEFAULT_MAX_RETRIES, DEFAULT_TIMEOUT
from ..coreutils.logging import log_function_call
from ..coreutils.request import new_session
from ..coreutils.time import format_api_date
from ..errors import RemoteError

logger = logging.getLogger(__name__)

RESPONSE_ENVELOPE_KEY = "body"


class HygieneMonitorClient:
    """Pure API client for the COVID wastewater open-data endpoint"""

    def __init__(
        self,
        api_url: str = DEFAULT_API_URL,
        timeout: int = DEFAULT_TIMEOUT,
        max_retries: int = DEFAULT_MAX_RETRIES,
        session: Optional[requests.Session] = None,
    ):
        self.api_url = api_url
        self.timeout = timeout
        self.max_retries = max_retries
        self.session = session or new_session(max_retries=max_retries)

    @staticmethod
    def build_payload(start: date, end: date) -> Dict[str, str]:
        return {
            "extraction_date_start": format_api_date(start),
            "extraction_date_end": format_api_date(end),
        }

    def fetch_window(self, start: date, end: date) -> List[Dict[str, Any]]:
        """
        Fetch all records extracted between start and end (inclusive)

        Args:
            start: First extraction date of the window
            end: Last extraction date of the window

        Returns:
            List[Dict]: Raw records from the response 'body'

        Raises:
            RemoteError: On transport failure, non-2xx status or a payload
                without the expected envelope
        """
        log_function_call("fetch_window", start=start, end=end)
        payload = self.build_payload(start, end)
        logger.info(
            f"Fetching data from {payload['extraction_date_start']} "
            f"to {payload['extraction_date_end']}..."
        )
        start_time = time.time()

        try:
            response = self.session.post(
                self.api_url, json=payload, timeout=self.timeout
            )
        except requests.exceptions.RequestException as e:
            logger.error(f"Error fetching wastewater data: {e}")
            raise RemoteError(f"Request to {self.api_url} failed: {e}") from e

        if not response.ok:
            raise RemoteError(
                f"API request failed with status {response.status_code}: "
                f"{response.reason}",
                status_code=response.status_code,
            )

        try:
            data = response.json()
        except ValueError as e:
            raise RemoteError(
                f"Invalid JSON response from {self.api_url}: {e}",
                status_code=response.status_code,
            ) from e

        records = self.extract_records(data)
        elapsed = time.time() - start_time
        logger.info(
            f"Fetched {len(records)} records from {self.api_url}: {elapsed:.2f} seconds"
        )
        return records

    @staticmethod
    def extract_records(data: Any) -> List[Dict[str, Any]]:
        """Unwrap the {'body': [...]} envelope, raising RemoteError if it is missing"""
        if not isinstance(data, dict) or RESPONSE_ENVELOPE_KEY not in data:
            raise RemoteError(
                f"Unexpected API response format: '{RESPONSE_ENVELOPE_KEY}' property missing"
            )

        body = data[RESPONSE_ENVELOPE_KEY]
        if body is None:
            raise RemoteError(
                f"Unexpected API response format: '{RESPONSE_ENVELOPE_KEY}' is null"
            )
        if not isinstance(body, list):
            raise RemoteError(
                f"Unexpected API response format: '{RESPONSE_ENVELOPE_KEY}' is "
                f"{type(body).__name__}, expected a list"
            )
        return body


# Convenience function for direct use
def fetch_window(start: date, end: date) -> List[Dict[str, Any]]:
    """Convenience function to fetch one window with default settings"""
    client = HygieneMonitorClient()
    return client.fetch_window(start, end)
