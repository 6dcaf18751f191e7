"""
Models package for the ABC payment gateway.

Exports payment intents, pipeline results and configuration value objects.
"""
from .intents import (
    TRX_EWALLET,
    TRX_ORDER_QUERY,
    TRX_QRCODE,
    TRX_WALLET_SDK,
    EWalletPaymentIntent,
    GenericPaymentIntent,
    OrderQuery,
    PaymentIntent,
    QRCodePaymentIntent,
    WalletSdkPaymentIntent,
)
from .results import (
    SUCCESS_CODES,
    CanonicalResult,
    FieldSet,
    SignedPayload,
    WalletSdkParameters,
)
from .credentials import (
    BankEndpoint,
    MerchantCredential,
    MerchantCredentials,
    WalletSdkConfig,
)

__all__ = [
    "TRX_EWALLET",
    "TRX_ORDER_QUERY",
    "TRX_QRCODE",
    "TRX_WALLET_SDK",
    "EWalletPaymentIntent",
    "GenericPaymentIntent",
    "OrderQuery",
    "PaymentIntent",
    "QRCodePaymentIntent",
    "WalletSdkPaymentIntent",
    "SUCCESS_CODES",
    "CanonicalResult",
    "FieldSet",
    "SignedPayload",
    "WalletSdkParameters",
    "BankEndpoint",
    "MerchantCredential",
    "MerchantCredentials",
    "WalletSdkConfig",
]
