"""
Payment Result Callback Verification

The bank posts asynchronous payment results to the notify endpoint. Its
callback signature scheme comes from the bank's merchant SDK, so
verification is a pluggable capability: deployments install a verifier
implementing the bank's scheme.
"""
import logging
from abc import ABC, abstractmethod
from typing import Mapping

logger = logging.getLogger(__name__)


class CallbackVerifier(ABC):
    """Decides whether a notification body is authentic."""

    @abstractmethod
    def verify(self, body: bytes, headers: Mapping[str, str]) -> bool:
        """Return True if the notification may be acknowledged."""


class InsecureCallbackVerifier(CallbackVerifier):
    """
    Placeholder used until a bank-specific verifier is installed.

    Accepts notifications only in insecure mode and logs them as
    unverified; rejects everything otherwise.
    """

    def __init__(self, insecure_mode: bool = False):
        self._insecure_mode = insecure_mode

    def verify(self, body: bytes, headers: Mapping[str, str]) -> bool:
        if self._insecure_mode:
            logger.warning("Accepting payment notification without signature verification (insecure mode)")
            return True
        logger.error("Rejecting payment notification: no callback verifier installed")
        return False
