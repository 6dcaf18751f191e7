"""
Request Signer

Serializes a field set deterministically and hands it to a pluggable
signing transform keyed by the merchant certificate.

The bank's certificate signature algorithm is supplied by the bank's
merchant SDK and is not implemented here. Deployments register a
SigningTransform; without one, requests can only go out unsigned, and
only when insecure mode is enabled.
"""
import json
import logging
from abc import ABC, abstractmethod
from pathlib import Path
from typing import Optional

from ..exceptions import SigningError
from ..models.credentials import MerchantCredential, MerchantCredentials
from ..models.results import FieldSet, SignedPayload

logger = logging.getLogger(__name__)

CONTENT_TYPE = "application/json"


def serialize_field_set(fields: FieldSet) -> bytes:
    """
    Canonical serialization of a field set.

    Keeps insertion order (the order the field mapper builds), compact
    separators, UTF-8 without ASCII escaping. Identical input always gives
    identical bytes.
    """
    return json.dumps(fields, ensure_ascii=False, separators=(',', ':')).encode('utf-8')


def load_certificate(credential: MerchantCredential) -> bytes:
    """
    Read the merchant certificate file.

    Raises:
        SigningError: If the file is missing or unreadable
    """
    try:
        return Path(credential.certificate_path).read_bytes()
    except OSError as e:
        raise SigningError(
            f"Merchant certificate unreadable: {credential.certificate_path}",
            details={"reason": e.strerror or str(e)}
        ) from e


class SigningTransform(ABC):
    """
    Bank-specified signing step.

    Receives the canonical bytes and the loaded certificate and returns
    the wire body to post.
    """

    @abstractmethod
    def sign(self, canonical: bytes, credential: MerchantCredential, certificate: bytes) -> bytes:
        """Return the signed request body."""


class RequestSigner:
    """
    Produces transport-ready payloads from field sets.

    The active certificate is read when the signer is built. A certificate
    that could not be read then is retried on each sign call.
    """

    def __init__(
        self,
        credentials: MerchantCredentials,
        transform: Optional[SigningTransform] = None,
        insecure_mode: bool = False,
        print_log: bool = False
    ):
        self._transform = transform
        self._insecure_mode = insecure_mode
        self._print_log = print_log
        self._credential = credentials.active_credential()
        self._certificate: Optional[bytes] = None

        if self._credential is not None:
            try:
                self._certificate = load_certificate(self._credential)
            except SigningError as e:
                logger.error(f"{e.message}: {e.details.get('reason')}")

    def sign(self, fields: FieldSet) -> SignedPayload:
        """
        Sign a field set with the active merchant certificate.

        Args:
            fields: Ordered wire fields from the field mapper

        Returns:
            SignedPayload ready for the transport

        Raises:
            SigningError: Certificate unreadable, transform failed, or no
                signing capability configured outside insecure mode
        """
        canonical = serialize_field_set(fields)

        if self._print_log:
            logger.debug(f"Request data: {canonical.decode('utf-8')}")

        credential = self._credential
        if credential is None:
            return self._unsigned(canonical, "no merchant certificate configured")

        if self._certificate is None:
            self._certificate = load_certificate(credential)
        certificate = self._certificate

        if self._transform is None:
            return self._unsigned(canonical, "no signing transform registered")

        try:
            body = self._transform.sign(canonical, credential, certificate)
        except SigningError:
            raise
        except Exception as e:
            logger.error(f"Signing transform failed: {type(e).__name__}")
            raise SigningError(f"Signing failed: {e}") from e

        return SignedPayload(body=body, content_type=CONTENT_TYPE, signed=True)

    def _unsigned(self, canonical: bytes, reason: str) -> SignedPayload:
        if not self._insecure_mode:
            raise SigningError(f"Cannot sign request: {reason}")
        logger.warning(f"Sending unsigned request ({reason}); insecure mode is enabled")
        return SignedPayload(body=canonical, content_type=CONTENT_TYPE, signed=False)
