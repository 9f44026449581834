"""Shared HTTP plumbing for address provider clients.

A provider turns one free-form address into a ranked list of
ProviderCandidate objects. The transport half (session, socket timeout,
status and JSON handling) lives here; the vendor half lives in subclasses.

Request URLs are logged without their query string: provider credentials and
the caller's address both travel as query parameters.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Dict, List, Optional

import requests

from address_validation.domain.models import ProviderCandidate
from address_validation.logging import get_logger

from .exceptions import (
    ProviderConfigurationError,
    ProviderHTTPError,
    ProviderRequestTimeoutError,
    ProviderResponseError,
)

logger = get_logger(__name__, component="provider")

DEFAULT_USER_AGENT = "AddressValidationService/1.0"
MAX_TIMEOUT_SECONDS = 300

# Worth retrying after the breaker's reset timeout
RETRYABLE_STATUS_CODES = frozenset({429, 500, 502, 503, 504})


class BaseProvider(ABC):
    """Abstract address lookup client backed by a requests.Session.

    Attributes:
        timeout: Socket timeout in seconds, applied to every request
        user_agent: User-Agent header sent with every request
    """

    PROVIDER_NAME = "base"

    def __init__(self, timeout: float = 10.0, user_agent: str = DEFAULT_USER_AGENT) -> None:
        """
        Raises:
            ProviderConfigurationError: If timeout is outside (0, 300] or user_agent is blank
        """
        if not 0 < timeout <= MAX_TIMEOUT_SECONDS:
            raise ProviderConfigurationError(
                f"Timeout must be greater than 0 and at most {MAX_TIMEOUT_SECONDS} seconds, "
                f"got: {timeout}"
            )
        if not user_agent or not user_agent.strip():
            raise ProviderConfigurationError("user_agent cannot be empty")

        self.timeout = timeout
        self.user_agent = user_agent.strip()

        self._session = requests.Session()
        self._session.headers["User-Agent"] = self.user_agent

    @property
    def name(self) -> str:
        return self.PROVIDER_NAME

    @abstractmethod
    def lookup(self, address: str) -> List[ProviderCandidate]:
        """Look up a free-form address.

        Args:
            address: Trimmed, non-empty address text

        Returns:
            Candidates ranked best first; an empty list when nothing matched.

        Raises:
            ProviderHTTPError: 4xx/5xx answer or no answer at all
            ProviderRequestTimeoutError: Socket timeout
            ProviderResponseError: Body was not JSON or had the wrong shape
        """

    def close(self) -> None:
        self._session.close()

    def _make_request(
        self,
        url: str,
        method: str = "GET",
        headers: Optional[Dict[str, str]] = None,
        params: Optional[Dict[str, str]] = None,
        json_data: Optional[Any] = None,
    ) -> Any:
        """Send one request and return the decoded JSON body.

        Args:
            url: Endpoint without query string
            method: HTTP method
            headers: Headers merged over the session defaults
            params: Query parameters
            json_data: JSON request body

        Raises:
            ProviderHTTPError: On 4xx/5xx status or connection failure
            ProviderRequestTimeoutError: On socket timeout
            ProviderResponseError: On a body that is not JSON
        """
        response = self._send(url, method, headers, params, json_data)
        self._raise_for_status(response, url)
        data = self._decode_json(response, url)

        logger.debug(
            "Provider answered",
            extra={
                "event": "provider.lookup.succeeded",
                "provider": self.name,
                "status_code": response.status_code,
                "url": url,
            },
        )
        return data

    def _send(
        self,
        url: str,
        method: str,
        headers: Optional[Dict[str, str]],
        params: Optional[Dict[str, str]],
        json_data: Optional[Any],
    ) -> requests.Response:
        logger.debug(
            f"{method} {url}",
            extra={
                "event": "provider.lookup.request",
                "provider": self.name,
                "method": method,
                "url": url,
                "timeout": self.timeout,
            },
        )

        try:
            return self._session.request(
                method=method,
                url=url,
                headers=headers,
                params=params,
                json=json_data,
                timeout=self.timeout,
            )
        except requests.exceptions.Timeout as e:
            logger.warning(
                f"No answer from {self.name} within {self.timeout}s",
                extra={
                    "event": "provider.lookup.retryable_error",
                    "provider": self.name,
                    "error_type": "Timeout",
                    "url": url,
                    "timeout": self.timeout,
                },
            )
            raise ProviderRequestTimeoutError(
                f"Request to {url} timed out after {self.timeout} seconds", url=url
            ) from e
        except requests.exceptions.RequestException as e:
            # str(e) can embed the full URL, so only the exception type is reported
            error_type = type(e).__name__
            logger.error(
                f"Request to {self.name} failed: {error_type}",
                extra={
                    "event": "provider.lookup.error",
                    "provider": self.name,
                    "error_type": error_type,
                    "url": url,
                },
            )
            raise ProviderHTTPError(
                f"Request to {url} failed: {error_type}", status_code=0, url=url
            ) from e

    def _raise_for_status(self, response: requests.Response, url: str) -> None:
        status_code = response.status_code
        if status_code < 400:
            return

        retryable = status_code in RETRYABLE_STATUS_CODES or status_code >= 500
        logger.log(
            logging.WARNING if retryable else logging.ERROR,
            f"{self.name} answered HTTP {status_code}",
            extra={
                "event": "provider.lookup.retryable_error" if retryable else "provider.lookup.error",
                "provider": self.name,
                "status_code": status_code,
                "url": url,
            },
        )
        raise ProviderHTTPError(
            f"HTTP {status_code}: {response.reason}", status_code=status_code, url=url
        )

    def _decode_json(self, response: requests.Response, url: str) -> Any:
        try:
            return response.json()
        except ValueError as e:
            # requests' JSONDecodeError subclasses ValueError
            logger.error(
                f"{self.name} returned a body that is not JSON",
                extra={
                    "event": "provider.lookup.error",
                    "provider": self.name,
                    "error_type": "JSONDecodeError",
                    "url": url,
                },
            )
            raise ProviderResponseError(f"Failed to parse JSON response from {url}: {e}") from e
