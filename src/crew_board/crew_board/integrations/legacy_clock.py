"""Client for the legacy spreadsheet clock-in/out endpoint.

This path writes to the spreadsheet only. Nothing here touches the
``attendance_records`` table and the two are not reconciled.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional

import requests

from ..core.constants import PHONE_SUFFIX_LENGTH, PIN_LENGTH
from ..core.exceptions import ExternalServiceError, ValidationError

logger = logging.getLogger(__name__)

LEGACY_CLOCK_ACTIONS = ("checkin", "checkout", "status")


@dataclass(frozen=True)
class LegacyClockResult:
    success: bool
    message: str


class LegacyClockClient:
    def __init__(self, url: str, *, timeout: float = 10, session: Optional[requests.Session] = None):
        self._url = url
        self._timeout = timeout
        self._session = session or requests.Session()

    def call(self, action: str, *, phone_suffix: str, pin: str) -> LegacyClockResult:
        if action not in LEGACY_CLOCK_ACTIONS:
            raise ValidationError(f"Unknown clock action: {action}")
        phone_suffix = (phone_suffix or "").strip()
        pin = (pin or "").strip()
        if len(phone_suffix) != PHONE_SUFFIX_LENGTH or len(pin) != PIN_LENGTH:
            raise ValidationError("Enter the last 4 phone digits and the 4-character PIN")
        if not self._url:
            raise ExternalServiceError("Legacy clock endpoint is not configured")

        params = {"action": action, "phoneSuffix": phone_suffix, "pin": pin}
        try:
            resp = self._session.get(self._url, params=params, timeout=self._timeout, allow_redirects=True)
            resp.raise_for_status()
            data = resp.json()
        except requests.Timeout:
            logger.warning("legacy clock %s timed out", action)
            raise ExternalServiceError("Clock server did not answer in time")
        except (requests.RequestException, ValueError) as e:
            logger.error("legacy clock %s failed: %s", action, e)
            raise ExternalServiceError("Could not reach the clock server")

        success = data.get("result") == "success"
        default = "Done" if success else "The clock server reported an error"
        return LegacyClockResult(success=success, message=data.get("message") or default)
