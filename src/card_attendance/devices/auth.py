from __future__ import annotations

import hmac
import logging
from functools import wraps
from typing import Optional

from flask import request

from ..common.responses import error_response
from ..core.constants import DEVICE_API_KEY_HEADER
from ..core.exceptions import AuthenticationError, ConfigurationError

logger = logging.getLogger(__name__)


class DeviceAuthenticator:
    """Gate for field devices: compares the presented shared secret.

    Pure check, no side effects. An unset server secret fails closed.
    """

    def __init__(self, secret: Optional[str]):
        self._secret = secret or ""

    def verify(self, presented: Optional[str]) -> None:
        if not self._secret:
            logger.error("DEVICE_API_KEY not configured; rejecting device request")
            raise ConfigurationError("Device authentication is not configured")
        if not presented or not hmac.compare_digest(presented.encode("utf-8"), self._secret.encode("utf-8")):
            logger.warning("Rejected device request with missing or invalid API key")
            raise AuthenticationError("Unauthorized device")


def device_required(authenticator: DeviceAuthenticator):
    """Decorator factory: run ``authenticator`` on the request header before the view."""

    def decorator(view):
        @wraps(view)
        def wrapper(*args, **kwargs):
            try:
                authenticator.verify(request.headers.get(DEVICE_API_KEY_HEADER))
            except (AuthenticationError, ConfigurationError) as e:
                return error_response(e)
            return view(*args, **kwargs)

        return wrapper

    return decorator
