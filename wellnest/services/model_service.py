"""
HTTP client for the external WellNest model service (EPDS scoring and
maternal health risk prediction).

A single POST per call with a hard timeout. Nothing is retried here: a
failed call is reported to the user, who decides whether to submit again.
"""
import logging
from typing import Any, Dict, Optional

import requests
from requests.exceptions import RequestException, Timeout

from wellnest.config import settings
from wellnest.errors import NetworkError, SchemaError, ScoringTimeoutError

logger = logging.getLogger(__name__)


class ModelServiceClient:
    """Client for interacting with the model service API"""

    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.SCORING_SERVICE_URL).rstrip("/")
        self.timeout = timeout if timeout is not None else settings.SCORING_TIMEOUT

    def post(self, endpoint: str, payload: Dict[str, Any]) -> Dict[str, Any]:
        """
        POST a JSON payload and return the decoded JSON object

        Raises:
            ScoringTimeoutError: If the service does not answer in time
            NetworkError: If the service cannot be reached
            SchemaError: On a non-2xx status or a body that is not a JSON object
        """
        url = f"{self.base_url}/{endpoint.lstrip('/')}"
        logger.info("POST %s", url)

        try:
            response = requests.post(
                url,
                json=payload,
                headers={"Accept": "application/json"},
                timeout=self.timeout,
            )
        except Timeout as e:
            logger.error("Model service timed out after %ss: %s", self.timeout, e)
            raise ScoringTimeoutError(
                "The assessment service took too long to respond. Please try again."
            ) from e
        except requests.ConnectionError as e:
            logger.error("Model service unreachable: %s", e)
            raise NetworkError("The assessment service is unreachable. Please try again.") from e
        except RequestException as e:
            logger.error("Model service request failed: %s", e)
            raise NetworkError("The assessment service request failed. Please try again.") from e

        if not response.ok:
            body = response.text[:200]
            logger.error("Model service responded with %s: %s", response.status_code, body)
            raise SchemaError(f"Assessment service responded with {response.status_code}")

        try:
            data = response.json()
        except ValueError as e:
            logger.error("Invalid JSON from model service: %s", response.text[:200])
            raise SchemaError("Invalid JSON response from assessment service") from e

        if not isinstance(data, dict):
            logger.error("Unexpected response body from model service: %r", data)
            raise SchemaError("Unexpected response structure from assessment service")

        return data
