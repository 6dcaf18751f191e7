"""
Pydantic Payment Intent Models

One strict model per bank transaction type. Each model declares the wire
fields it contributes, in the order the bank expects them, so the field
mapper never has to guess which optional fields belong to which channel.
"""
from typing import Annotated, ClassVar, Literal, Optional, Tuple, Union
from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


# ==================== Transaction Types ====================

TRX_QRCODE = "UDCAppQRCodePayReq"
TRX_EWALLET = "EWalletPayReq"
TRX_WALLET_SDK = "WeChatAppPayReq"
TRX_ORDER_QUERY = "OrderQuery"

# (attribute name, wire field name)
WireFields = Tuple[Tuple[str, str], ...]


class _IntentBase(BaseModel):
    """Fields present on every transaction type."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="forbid",
        frozen=True,
    )

    order_no: str = Field(min_length=1, description="Merchant-unique order number")

    # Fields placed on the wire after TrxType/OrderNo/OrderAmount/MerchantID
    wire_fields: ClassVar[WireFields] = ()


class GenericPaymentIntent(_IntentBase):
    """Shared shape of the QR code and e-wallet channels."""

    order_amount: str = Field(min_length=1, description="Order amount in fen")
    order_desc: Optional[str] = None
    order_valid_time: Optional[str] = Field(None, description="yyyyMMddHHmmss")
    pay_qr_code: Optional[str] = Field(None, alias="payQRCode", description="Scanned WeChat/Alipay QR content")
    order_time: Optional[str] = Field(None, description="yyyyMMddHHmmss")
    order_abstract: Optional[str] = None
    result_notify_url: Optional[str] = Field(None, alias="resultNotifyURL")
    product_name: Optional[str] = None
    payment_type: Optional[str] = None
    payment_link_type: Optional[str] = None
    merchant_remarks: Optional[str] = None
    notify_type: Optional[str] = None
    token: Optional[str] = Field(None, description="E-wallet token")

    wire_fields: ClassVar[WireFields] = (
        ("order_desc", "OrderDesc"),
        ("order_valid_time", "OrderValidTime"),
        ("pay_qr_code", "PayQRCode"),
        ("order_time", "OrderTime"),
        ("order_abstract", "OrderAbstract"),
        ("result_notify_url", "ResultNotifyURL"),
        ("product_name", "ProductName"),
        ("payment_type", "PaymentType"),
        ("payment_link_type", "PaymentLinkType"),
        ("merchant_remarks", "MerchantRemarks"),
        ("notify_type", "NotifyType"),
        ("token", "Token"),
    )


class QRCodePaymentIntent(GenericPaymentIntent):
    """Scan-to-pay order."""
    trx_type: Literal["UDCAppQRCodePayReq"] = TRX_QRCODE


class EWalletPaymentIntent(GenericPaymentIntent):
    """Bank e-wallet order."""
    trx_type: Literal["EWalletPayReq"] = TRX_EWALLET


class WalletSdkPaymentIntent(_IntentBase):
    """
    WeChat in-app (native SDK) order.

    The bank returns a prepay id that the app needs, together with a
    second signature, to open the WeChat payment sheet.
    """
    trx_type: Literal["WeChatAppPayReq"] = TRX_WALLET_SDK
    order_amount: str = Field(min_length=1, description="Order amount in fen")
    order_time: Optional[str] = Field(None, description="yyyyMMddHHmmss")
    open_id: Optional[str] = None
    client_ip: Optional[str] = Field(None, alias="clientIP")
    scene_info: Optional[str] = None
    goods_id: Optional[str] = None
    goods_quantity: Optional[int] = Field(None, ge=0)
    attach: Optional[str] = None
    detail: Optional[str] = None
    order_desc: Optional[str] = None
    product_name: Optional[str] = None
    result_notify_url: Optional[str] = Field(None, alias="resultNotifyURL")
    order_valid_time: Optional[str] = Field(None, description="yyyyMMddHHmmss")

    wire_fields: ClassVar[WireFields] = (
        ("order_time", "OrderTime"),
        ("open_id", "OpenId"),
        ("client_ip", "ClientIP"),
        ("scene_info", "SceneInfo"),
        ("goods_id", "GoodsId"),
        ("goods_quantity", "GoodsQuantity"),
        ("attach", "Attach"),
        ("detail", "Detail"),
        ("order_desc", "OrderDesc"),
        ("product_name", "ProductName"),
        ("result_notify_url", "ResultNotifyURL"),
        ("order_valid_time", "OrderValidTime"),
    )


class OrderQuery(_IntentBase):
    """Order status lookup; carries no amount and no order time."""
    trx_type: Literal["OrderQuery"] = TRX_ORDER_QUERY


PaymentIntent = Annotated[
    Union[QRCodePaymentIntent, EWalletPaymentIntent, WalletSdkPaymentIntent, OrderQuery],
    Field(discriminator="trx_type"),
]
