import json
from datetime import datetime
from typing import Callable, List, Optional

import httpx
import pytest

from abc_gateway.config import Settings
from abc_gateway.mocks.bank_platform import bank_handler
from abc_gateway.models.credentials import BankEndpoint, MerchantCredentials, WalletSdkConfig
from abc_gateway.services.payment_gateway import PaymentGateway
from abc_gateway.services.signer import RequestSigner
from abc_gateway.services.transport import BankTransport
from abc_gateway.services.wallet_sdk import WalletSdkSigner

MERCHANT_ID = "103881104410001"
FIXED_NOW = datetime(2025, 3, 14, 9, 26, 53)
FIXED_EPOCH = 1741915613.7


@pytest.fixture
def test_settings():
    """Insecure sandbox settings; nothing read from the environment file."""
    return Settings(
        _env_file=None,
        merchant_ids=[MERCHANT_ID, "103881104410002"],
        connect_method="https",
        server_name="pay.test.abchina.com",
        server_port=443,
        trx_url_path="/ebus/ReceiveMerchantTrxReqServlet",
        insecure_mode=True,
        wechat_app_id="wx8888888888888888",
        wechat_api_key="test_api_key",
    )


@pytest.fixture
def credentials(test_settings):
    return MerchantCredentials.from_settings(test_settings)


@pytest.fixture
def merchant_id() -> str:
    return MERCHANT_ID


@pytest.fixture
def fixed_epoch() -> float:
    return FIXED_EPOCH


@pytest.fixture
def recorded_requests() -> List[dict]:
    return []


@pytest.fixture
def outbound_requests() -> List[httpx.Request]:
    return []


def recording(
    handler: Callable[[httpx.Request], httpx.Response],
    sink: List[dict],
    outbound: Optional[List[httpx.Request]] = None
):
    """Wrap a MockTransport handler so every decoded request body (and optionally the request) is kept."""
    def _handler(request: httpx.Request) -> httpx.Response:
        sink.append(json.loads(request.content.decode("utf-8")))
        if outbound is not None:
            outbound.append(request)
        return handler(request)
    return _handler


@pytest.fixture
def make_gateway(test_settings, credentials, recorded_requests, outbound_requests):
    """Factory building a gateway whose bank is the given MockTransport handler."""
    def _make(handler=bank_handler, signer=None, wallet_config=None) -> PaymentGateway:
        client = httpx.AsyncClient(transport=httpx.MockTransport(recording(handler, recorded_requests, outbound_requests)))
        return PaymentGateway(
            credentials=credentials,
            signer=signer or RequestSigner(credentials, insecure_mode=True),
            transport=BankTransport(client, BankEndpoint.from_settings(test_settings)),
            wallet_signer=WalletSdkSigner(
                wallet_config or WalletSdkConfig.from_settings(test_settings),
                clock=lambda: FIXED_EPOCH,
            ),
            now=lambda: FIXED_NOW,
        )
    return _make
