# --- Standard library imports ---
import json
import time
import asyncio
from typing import Any, Optional
from urllib.parse import quote

# --- Third-party imports ---
import requests

# --- Project imports ---
from .config import Config
from .logger import get_logger
from .errors import StatusCheckError


class StatusCheckClient:
    """
    Base for the idempotent, parameterless status-check calls a
    StatusCache wraps.

    Subclasses provide `path` and `parse()`. Any request exception,
    non-2xx status or unusable body becomes a StatusCheckError.

    Retry policy:
        Network errors, 408 and 5xx are retried up to `retry_attempts`
        total attempts, waiting `retry_delay_s * attempt` between them.
        Other 4xx responses and bad payloads fail on the first attempt.
    """

    path: str = ""

    def __init__(
        self,
        base_url: Optional[str] = None,
        token: Optional[str] = None,
        timeout: float = Config.API_TIMEOUT,
        retry_attempts: int = Config.API_RETRY_ATTEMPTS,
        retry_delay_s: float = Config.API_RETRY_DELAY_S,
    ):
        self.logger = get_logger(self.__class__.__name__)

        # Configuration
        self.base_url = (base_url or Config.API_BASE_URL).rstrip("/")
        self.token = token if token is not None else Config.API_TOKEN
        self.timeout = timeout
        self.retry_attempts = max(1, retry_attempts)
        self.retry_delay_s = retry_delay_s

        self.headers = {"Accept": "application/json"}
        if self.token:
            self.headers["Authorization"] = f"Bearer {self.token}"

    @property
    def url(self) -> str:
        return f"{self.base_url}{self.path}"

    def check(self) -> bool:
        """
        Perform the blocking status check, retrying transient failures.

        Raises:
            StatusCheckError: on transport failure or unusable payload
        """
        url = self.url
        self.logger.debug(f"Initiating status check → {url}")

        for attempt in range(1, self.retry_attempts + 1):
            try:
                resp = self._get(url)
                break
            except StatusCheckError as e:
                if not e.retryable:
                    raise
                if attempt == self.retry_attempts:
                    self.logger.error(f"Max retry attempts reached ({attempt}/{self.retry_attempts}): {e}")
                    raise

                delay = self.retry_delay_s * attempt
                self.logger.warning(
                    f"Status check failed ({attempt}/{self.retry_attempts}), retrying in {delay:.1f}s: {e}"
                )
                time.sleep(delay)

        try:
            payload = resp.json()
        except ValueError as e:
            raise StatusCheckError(
                f"GET {url} succeeded but response was not valid JSON",
                status_code=resp.status_code,
            ) from e

        self.logger.debug(f"Live JSON received:\n{json.dumps(payload, indent=2)}")

        if not isinstance(payload, dict):
            raise StatusCheckError(
                f"GET {url} returned {type(payload).__name__}, expected an object",
                status_code=resp.status_code,
            )
        return self.parse(payload, resp.status_code)

    def _get(self, url: str) -> requests.Response:
        """Single GET; non-2xx and transport errors become StatusCheckError."""
        try:
            resp = requests.get(url, headers=self.headers, timeout=self.timeout)
            resp.raise_for_status()
        except requests.HTTPError as e:
            raise StatusCheckError(
                f"GET {url} returned HTTP {e.response.status_code}",
                status_code=e.response.status_code,
            ) from e
        except requests.RequestException as e:
            raise StatusCheckError(
                f"GET {url} failed ({e.__class__.__name__})"
            ) from e
        return resp

    def parse(self, payload: dict, status_code: int) -> bool:
        raise NotImplementedError

    async def fetch(self) -> bool:
        """
        Async entry point handed to StatusCache; the blocking request
        (retries included) runs on a worker thread.
        """
        return await asyncio.to_thread(self.check)


def _data_block(payload: dict, status_code: int) -> dict:
    data = payload.get("data")
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise StatusCheckError(
            f"Response data is {type(data).__name__}, expected an object",
            status_code=status_code,
        )
    return data


class AdminStatusClient(StatusCheckClient):
    """
    Checks whether the current session belongs to an admin.

    Payload: {"data": {"isAdmin": bool, "isAuthenticated": bool}}
    """

    path = "/api/auth/admin-status"

    def parse(self, payload: dict, status_code: int) -> bool:
        data = _data_block(payload, status_code)
        is_admin = bool(data.get("isAdmin", False))
        is_authenticated = bool(data.get("isAuthenticated", False))

        if is_admin and not is_authenticated:
            self.logger.warning("State conflict: user marked admin but not authenticated")

        return is_admin


class RedemptionValidationClient(StatusCheckClient):
    """
    Checks whether a redemption code is currently eligible.

    Payload: {"status": "success", "data": {"isValid": bool, "benefits": {...}}}
    The benefits of the last successful check are kept on `benefits`.
    """

    def __init__(self, code: str, **kwargs: Any):
        super().__init__(**kwargs)
        self.code = code.strip().upper()
        self.benefits: dict = {}

        if not self.code:
            raise ValueError("Redemption code must not be empty")

    @property
    def path(self) -> str:
        return f"/api/redemption/validate/{quote(self.code, safe='')}"

    def parse(self, payload: dict, status_code: int) -> bool:
        if payload.get("status") != "success":
            raise StatusCheckError(
                f"Validation failed: {payload.get('message', 'unexpected status')}",
                status_code=status_code,
            )

        data = _data_block(payload, status_code)
        eligible = bool(data.get("isValid", data.get("eligible", False)))
        benefits = data.get("benefits")
        self.benefits = benefits if isinstance(benefits, dict) else {}

        if not eligible:
            errors = data.get("errors") or []
            reason = errors[0].get("type") if isinstance(errors, list) and errors and isinstance(errors[0], dict) else None
            self.logger.info(f"Code {self.code[:4]}*** not eligible ({reason or 'INVALID_CODE'})")

        return eligible
