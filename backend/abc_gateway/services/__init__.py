"""
Payment pipeline services.

Exports the orchestrator and a factory that wires it from settings.
"""
from typing import Optional

import httpx

from ..config import Settings
from ..models.credentials import BankEndpoint, MerchantCredentials, WalletSdkConfig
from .callbacks import CallbackVerifier, InsecureCallbackVerifier
from .payment_gateway import PaymentGateway
from .signer import RequestSigner, SigningTransform
from .transport import BankTransport
from .wallet_sdk import WalletSdkSigner


def build_gateway(
    settings: Settings,
    client: httpx.AsyncClient,
    transform: Optional[SigningTransform] = None
) -> PaymentGateway:
    """Wire a PaymentGateway from settings and a shared HTTP client."""
    credentials = MerchantCredentials.from_settings(settings)
    return PaymentGateway(
        credentials=credentials,
        signer=RequestSigner(
            credentials,
            transform=transform,
            insecure_mode=settings.insecure_mode,
            print_log=settings.print_log,
        ),
        transport=BankTransport(client, BankEndpoint.from_settings(settings)),
        wallet_signer=WalletSdkSigner(WalletSdkConfig.from_settings(settings)),
    )


__all__ = [
    "build_gateway",
    "BankTransport",
    "CallbackVerifier",
    "InsecureCallbackVerifier",
    "PaymentGateway",
    "RequestSigner",
    "SigningTransform",
    "WalletSdkSigner",
]
