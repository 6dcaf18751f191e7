"""
Payment Gateway Orchestrator

Runs each intent through map -> sign -> send -> normalize (-> WeChat SDK
derivation) and turns every failure into a result value carrying a
response code. Nothing is retried; an order whose outcome is unknown is
resolved with query_order.
"""
import logging
from datetime import datetime
from typing import Callable, Optional, Union

from ..exceptions import (
    GatewayError,
    SigningError,
    TransportError,
    ValidationError,
    SYSTEM_ERROR_CODE,
)
from ..models.credentials import MerchantCredentials
from ..models.intents import (
    EWalletPaymentIntent,
    OrderQuery,
    QRCodePaymentIntent,
    WalletSdkPaymentIntent,
)
from ..models.results import CanonicalResult, WalletSdkParameters
from .field_mapper import map_fields
from .response_parser import parse_response
from .signer import RequestSigner
from .transport import BankTransport
from .wallet_sdk import WalletSdkSigner

logger = logging.getLogger(__name__)

GenericIntent = Union[QRCodePaymentIntent, EWalletPaymentIntent]


def _require(value: Optional[str], name: str) -> None:
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} is required", details={"field": name})


def failure_result(error: GatewayError, order_no: Optional[str]) -> CanonicalResult:
    """Result-shaped failure for a locally raised gateway error."""
    if isinstance(error, TransportError):
        message = f"Network error: {error.message}"
    elif isinstance(error, SigningError):
        message = f"System error: {error.message}"
    else:
        message = error.message
    return CanonicalResult(response_code=error.error_code, response_message=message, order_no=order_no)


class PaymentGateway:
    """
    Sequences the pipeline for every transaction type.

    Holds only read-only collaborators, so one instance serves all
    concurrent requests.
    """

    def __init__(
        self,
        credentials: MerchantCredentials,
        signer: RequestSigner,
        transport: BankTransport,
        wallet_signer: WalletSdkSigner,
        now: Optional[Callable[[], datetime]] = None
    ):
        self._credentials = credentials
        self._signer = signer
        self._transport = transport
        self._wallet_signer = wallet_signer
        self._now = now

    async def _execute(self, intent: Union[GenericIntent, WalletSdkPaymentIntent, OrderQuery]) -> CanonicalResult:
        # Received -> Mapped -> Signed -> Sent -> Normalized
        try:
            _require(intent.order_no, "OrderNo")
            if not isinstance(intent, OrderQuery):
                _require(intent.order_amount, "OrderAmount")

            fields = map_fields(intent, self._credentials.merchant_id, now=self._now)
            payload = self._signer.sign(fields)
            raw_text = await self._transport.send(payload)
        except GatewayError as e:
            logger.error(f"{intent.trx_type} failed for {intent.order_no}: {e.error_code} {e.message}")
            return failure_result(e, intent.order_no)
        except Exception as e:
            logger.exception(f"Unexpected error processing {intent.trx_type} for {intent.order_no}")
            return CanonicalResult(
                response_code=SYSTEM_ERROR_CODE,
                response_message=f"System error: {e}",
                order_no=intent.order_no,
            )

        return parse_response(raw_text)

    async def process_payment(self, intent: GenericIntent) -> CanonicalResult:
        """
        Submit a QR code or e-wallet order.

        Returns:
            CanonicalResult; never raises for pipeline failures
        """
        logger.info(f"Processing payment: OrderNo={intent.order_no}, Amount={intent.order_amount}")
        result = await self._execute(intent)
        logger.info(f"Payment request completed: OrderNo={intent.order_no}, Response={result.response_code}")
        return result

    async def process_wallet_payment(self, intent: WalletSdkPaymentIntent) -> WalletSdkParameters:
        """
        Submit a WeChat in-app order and derive the SDK parameters.

        Returns:
            WalletSdkParameters; failure-shaped when the bank declines or
            derivation cannot complete
        """
        logger.info(
            f"Processing WeChat payment: OrderNo={intent.order_no}, "
            f"Amount={intent.order_amount}, OpenId={intent.open_id}"
        )
        result = await self._execute(intent)
        logger.info(f"WeChat payment request completed: OrderNo={intent.order_no}, ResponseCode={result.response_code}")

        if not result.is_success:
            return WalletSdkParameters.failure(
                result.response_code,
                result.response_message,
                order_no=intent.order_no,
            )

        try:
            return self._wallet_signer.derive(result, intent)
        except Exception as e:
            logger.exception(f"Unexpected error deriving WeChat SDK parameters for {intent.order_no}")
            return WalletSdkParameters.failure(SYSTEM_ERROR_CODE, f"System error: {e}", order_no=intent.order_no)

    async def query_order(self, order_no: str) -> CanonicalResult:
        """Look up an order's status at the bank."""
        logger.info(f"Querying order status: OrderNo={order_no}")
        return await self._execute(OrderQuery.model_construct(order_no=order_no))

