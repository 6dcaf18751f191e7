import re
from datetime import datetime

import pytest
from pydantic import TypeAdapter, ValidationError

from abc_gateway.models.intents import (
    EWalletPaymentIntent,
    OrderQuery,
    PaymentIntent,
    QRCodePaymentIntent,
    WalletSdkPaymentIntent,
)
from abc_gateway.services.field_mapper import format_order_time, map_fields

MERCHANT_ID = "103881104410001"

WALLET_ONLY_FIELDS = {"OpenId", "ClientIP", "SceneInfo", "GoodsId", "GoodsQuantity", "Attach", "Detail"}

GENERIC_ORDER = [
    "TrxType", "OrderNo", "OrderAmount", "MerchantID", "OrderDesc", "OrderValidTime",
    "PayQRCode", "OrderTime", "OrderAbstract", "ResultNotifyURL", "ProductName",
    "PaymentType", "PaymentLinkType", "MerchantRemarks", "NotifyType", "Token",
]

WALLET_ORDER = [
    "TrxType", "OrderNo", "OrderAmount", "MerchantID", "OrderTime", "OpenId", "ClientIP",
    "SceneInfo", "GoodsId", "GoodsQuantity", "Attach", "Detail", "OrderDesc",
    "ProductName", "ResultNotifyURL", "OrderValidTime",
]


def fixed_clock():
    return datetime(2025, 1, 2, 3, 4, 5)


def test_qrcode_minimal_intent():
    fields = map_fields(QRCodePaymentIntent(order_no="T1001", order_amount="10000"), MERCHANT_ID)

    assert list(fields) == ["TrxType", "OrderNo", "OrderAmount", "MerchantID", "OrderTime"]
    assert fields["TrxType"] == "UDCAppQRCodePayReq"
    assert fields["OrderNo"] == "T1001"
    assert fields["OrderAmount"] == "10000"
    assert fields["MerchantID"] == MERCHANT_ID
    assert re.fullmatch(r"\d{14}", fields["OrderTime"])
    assert not WALLET_ONLY_FIELDS & set(fields)


def test_generic_intent_with_every_field_keeps_wire_order():
    intent = EWalletPaymentIntent(
        order_no="E2001",
        order_amount="2500",
        order_desc="Monthly plan",
        order_valid_time="20250102120000",
        pay_qr_code="134567890123456789",
        order_time="20250102110000",
        order_abstract="plan",
        result_notify_url="https://merchant.example.com/notify",
        product_name="Plan",
        payment_type="A",
        payment_link_type="1",
        merchant_remarks="vip",
        notify_type="1",
        token="tok-123",
    )

    fields = map_fields(intent, MERCHANT_ID)

    assert list(fields) == GENERIC_ORDER
    assert fields["TrxType"] == "EWalletPayReq"
    assert fields["OrderTime"] == "20250102110000"


def test_empty_optional_fields_are_omitted():
    intent = QRCodePaymentIntent(order_no="T1", order_amount="1", order_desc="", token="", product_name=None)

    fields = map_fields(intent, MERCHANT_ID, now=fixed_clock)

    assert "OrderDesc" not in fields
    assert "Token" not in fields
    assert "ProductName" not in fields
    assert all(value != "" for key, value in fields.items() if key != "MerchantID")


def test_order_time_uses_injected_clock():
    fields = map_fields(QRCodePaymentIntent(order_no="T1", order_amount="1"), MERCHANT_ID, now=fixed_clock)
    assert fields["OrderTime"] == "20250102030405"
    assert format_order_time(fixed_clock()) == "20250102030405"


def test_wallet_intent_fields_and_order():
    intent = WalletSdkPaymentIntent(
        order_no="W3001",
        order_amount="990",
        order_time="20250102110000",
        open_id="oUpF8uMuAJO_M2pxb1Q9zNjWeS6o",
        client_ip="10.0.0.8",
        scene_info='{"store_info":{"id":"1"}}',
        goods_id="G1",
        goods_quantity=0,
        attach="a",
        detail="d",
        order_desc="Coffee",
        product_name="Latte",
        result_notify_url="https://merchant.example.com/notify",
        order_valid_time="20250102120000",
    )

    fields = map_fields(intent, MERCHANT_ID)

    assert list(fields) == WALLET_ORDER
    assert fields["TrxType"] == "WeChatAppPayReq"
    assert fields["GoodsQuantity"] == "0"
    assert "PayQRCode" not in fields
    assert "Token" not in fields


def test_wallet_intent_minimal():
    fields = map_fields(WalletSdkPaymentIntent(order_no="W1", order_amount="1"), MERCHANT_ID, now=fixed_clock)
    assert list(fields) == ["TrxType", "OrderNo", "OrderAmount", "MerchantID", "OrderTime"]


def test_order_query_fields():
    fields = map_fields(OrderQuery(order_no="Q1"), MERCHANT_ID)
    assert fields == {"TrxType": "OrderQuery", "OrderNo": "Q1", "MerchantID": MERCHANT_ID}


def test_missing_merchant_id_sends_empty_value():
    fields = map_fields(QRCodePaymentIntent(order_no="T1", order_amount="1"), "", now=fixed_clock)
    assert fields["MerchantID"] == ""


def test_malformed_amount_is_forwarded_unchanged():
    fields = map_fields(QRCodePaymentIntent(order_no="T1", order_amount="12.5x"), MERCHANT_ID, now=fixed_clock)
    assert fields["OrderAmount"] == "12.5x"


def test_identical_intents_map_identically():
    intent = QRCodePaymentIntent(order_no="T1", order_amount="1", order_desc="x", token="t")
    assert list(map_fields(intent, MERCHANT_ID, now=fixed_clock).items()) == \
        list(map_fields(intent, MERCHANT_ID, now=fixed_clock).items())


class TestIntentModels:
    def test_camel_case_payload(self):
        intent = QRCodePaymentIntent.model_validate({
            "orderNo": "T1",
            "orderAmount": "100",
            "resultNotifyURL": "https://merchant.example.com/notify",
        })
        assert intent.result_notify_url == "https://merchant.example.com/notify"

    def test_wallet_fields_rejected_on_generic_channel(self):
        with pytest.raises(ValidationError):
            QRCodePaymentIntent(order_no="T1", order_amount="1", open_id="o1")

    def test_order_number_and_amount_required(self):
        with pytest.raises(ValidationError):
            QRCodePaymentIntent(order_no="", order_amount="1")
        with pytest.raises(ValidationError):
            WalletSdkPaymentIntent.model_validate({"orderNo": "W1"})

    def test_discriminated_union_selects_variant(self):
        adapter = TypeAdapter(PaymentIntent)
        intent = adapter.validate_python({
            "trxType": "WeChatAppPayReq",
            "orderNo": "W1",
            "orderAmount": "1",
            "clientIP": "10.0.0.1",
        })
        assert isinstance(intent, WalletSdkPaymentIntent)
        assert intent.client_ip == "10.0.0.1"

        query = adapter.validate_python({"trxType": "OrderQuery", "orderNo": "Q1"})
        assert isinstance(query, OrderQuery)
