"""
HTTP Vision Model Base

Shared requests.Session handling and failure classification for
providers reached over plain HTTP (Gemini REST, Ollama).
"""

from typing import Any, Dict, Optional
import logging

import requests

from ...domain.ports.vision_model import VisionModelPort
from ...domain.exceptions import (
    AnalysisTimeoutError,
    ProviderError,
    TransportError,
)


logger = logging.getLogger(__name__)


class HttpVisionModel(VisionModelPort):
    """
    Base class for adapters that POST JSON to a provider endpoint.

    Subclasses build the payload and read the text out of the reply;
    this class owns the session and maps requests failures onto
    TransportError / ProviderError / AnalysisTimeoutError.
    """

    provider = "http"

    def __init__(self, base_url: str, timeout: float = 30.0, session: Optional[requests.Session] = None):
        self._base_url = base_url.rstrip("/")
        self._timeout = timeout
        self._session = session

        self.logger = logging.getLogger(f"{__name__}.{self.__class__.__name__}")

    @property
    def provider_name(self) -> str:
        return self.provider

    @property
    def timeout_seconds(self) -> float:
        return self._timeout

    def _init_session(self) -> None:
        """Initialize HTTP session."""
        self._session = requests.Session()
        self._session.headers.update({
            "Content-Type": "application/json",
        })

    def _post(self, path: str, payload: Dict[str, Any], headers: Optional[Dict[str, str]] = None) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON reply.

        Raises:
            AnalysisTimeoutError: The transport timed out
            TransportError: The provider could not be reached
            ProviderError: Non-2xx status or a body that is not JSON
        """
        if not self._session:
            self._init_session()

        url = f"{self._base_url}{path}"
        try:
            response = self._session.post(url, json=payload, headers=headers, timeout=self._timeout)
        except requests.Timeout:
            self.logger.error(f"{self.provider} request timed out after {self._timeout}s")
            raise AnalysisTimeoutError(self._timeout, details={"provider": self.provider})
        except requests.RequestException as e:
            self.logger.error(f"{self.provider} connection failed: {e}")
            raise TransportError(provider=self.provider, details={"reason": str(e)})

        if not response.ok:
            self.logger.error(f"{self.provider} returned HTTP {response.status_code}")
            raise ProviderError(
                status_code=response.status_code,
                provider=self.provider,
                provider_message=self._error_message(response),
            )

        try:
            return response.json()
        except ValueError:
            raise ProviderError(
                "Vision model provider returned a malformed response",
                status_code=response.status_code,
                provider=self.provider,
                provider_message=response.text,
            )

    @staticmethod
    def _error_message(response: requests.Response) -> str:
        try:
            body = response.json()
        except ValueError:
            return response.text
        error = body.get("error") if isinstance(body, dict) else None
        if isinstance(error, dict):
            return error.get("message") or str(error)
        if error:
            return str(error)
        return response.text
