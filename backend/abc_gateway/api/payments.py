"""
Payment API Endpoints

Merchant-facing routes, one per channel, plus order query and the bank's
asynchronous result notification.

Every payment route answers 200 when the bank accepted the order and 400
with the same body shape otherwise.
"""
from datetime import datetime, timezone
import logging

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from ..models.intents import EWalletPaymentIntent, QRCodePaymentIntent, WalletSdkPaymentIntent
from ..models.results import CanonicalResult, WalletSdkParameters
from ..services.callbacks import CallbackVerifier
from ..services.payment_gateway import PaymentGateway

logger = logging.getLogger(__name__)

router = APIRouter()


def get_gateway(request: Request) -> PaymentGateway:
    return request.app.state.gateway


def get_callback_verifier(request: Request) -> CallbackVerifier:
    return request.app.state.callback_verifier


def _respond(result: BaseModel, ok: bool) -> JSONResponse:
    return JSONResponse(
        status_code=200 if ok else 400,
        content=result.model_dump(mode="json", by_alias=True),
    )


@router.post("/qrcode", response_model=CanonicalResult)
async def create_qrcode_payment(
    intent: QRCodePaymentIntent,
    gateway: PaymentGateway = Depends(get_gateway)
) -> JSONResponse:
    """
    Create a scan-to-pay order.

    Example:
        POST /api/payment/qrcode
        {"orderNo": "T1001", "orderAmount": "10000", "payQRCode": "134567..."}
    """
    logger.info(f"Received QR code payment request: OrderNo={intent.order_no}")
    result = await gateway.process_payment(intent)
    return _respond(result, result.is_success)


@router.post("/ewallet", response_model=CanonicalResult)
async def create_ewallet_payment(
    intent: EWalletPaymentIntent,
    gateway: PaymentGateway = Depends(get_gateway)
) -> JSONResponse:
    """Create a bank e-wallet order."""
    logger.info(f"Received e-wallet payment request: OrderNo={intent.order_no}")
    result = await gateway.process_payment(intent)
    return _respond(result, result.is_success)


@router.post("/wechat", response_model=WalletSdkParameters)
async def create_wechat_payment(
    intent: WalletSdkPaymentIntent,
    gateway: PaymentGateway = Depends(get_gateway)
) -> JSONResponse:
    """
    Create a WeChat in-app order and return the native SDK parameters.

    Flow:
        1. App calls this endpoint
        2. Bank creates the WeChat order and returns a prepay id
        3. Response carries appId, timeStamp, nonceStr, package, signType, paySign
        4. App opens the WeChat payment sheet with them
        5. Result arrives later on /api/payment/notify
    """
    logger.info(
        f"Received WeChat payment request: OrderNo={intent.order_no}, "
        f"Amount={intent.order_amount}, ClientIP={intent.client_ip}"
    )
    params = await gateway.process_wallet_payment(intent)
    return _respond(params, params.is_success)


@router.get("/query/{order_no}", response_model=CanonicalResult)
async def query_order(
    order_no: str,
    gateway: PaymentGateway = Depends(get_gateway)
) -> CanonicalResult:
    """Query an order's status; unknown outcomes after timeouts are resolved here."""
    logger.info(f"Querying order: OrderNo={order_no}")
    return await gateway.query_order(order_no)


@router.post("/notify")
async def payment_notify(
    request: Request,
    verifier: CallbackVerifier = Depends(get_callback_verifier)
) -> JSONResponse:
    """
    Bank payment result callback.

    Acknowledges with SUCCESS once the verifier accepts the body; the
    bank retries notifications answered with FAIL.
    """
    body = await request.body()
    logger.info(f"Received payment notification: {body.decode('utf-8', errors='replace')}")

    if not verifier.verify(body, request.headers):
        return JSONResponse(status_code=400, content={"success": False, "message": "FAIL"})

    return JSONResponse(status_code=200, content={"success": True, "message": "SUCCESS"})


@router.get("/health")
async def payment_health():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "service": "ABC Payment Gateway",
    }
