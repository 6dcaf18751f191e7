"""
Mock Bank Platform

Simulates the bank's transaction endpoint for local development and tests.
Plugged into the shared httpx client through httpx.MockTransport when
sandbox mode is enabled, so the real transport code path is exercised.

Mock Behavior:
- Order numbers listed in DECLINE_ORDERS trigger a specific bank error
- Other orders are accepted; reply field names vary by transaction type
  the way the real platform's do (ResponseCode/ResponseMessage for pay
  requests, RspCode/RspMsg for queries)
- WeChatAppPayReq replies carry a prepay_id derived from the order number
"""
import hashlib
import json
from datetime import datetime
from typing import Any, Dict

import httpx


# Test order numbers that trigger specific bank errors
DECLINE_ORDERS = {
    "DECLINE": ("2001", "Insufficient balance"),
    "DECLINE_DUPLICATE": ("2002", "Duplicate order number"),
    "DECLINE_AMOUNT": ("2003", "Invalid order amount"),
}


def _trx_id(order_no: str) -> str:
    return f"ABC{hashlib.sha256(order_no.encode()).hexdigest()[:16].upper()}"


def handle_transaction(request_data: Dict[str, Any]) -> Dict[str, Any]:
    """
    Produce the bank reply for one request.

    Args:
        request_data: Decoded request field set

    Returns:
        Reply document, shaped per transaction type
    """
    trx_type = request_data.get("TrxType")
    order_no = request_data.get("OrderNo", "")

    if trx_type == "OrderQuery":
        return {
            "RspCode": "0000",
            "RspMsg": "Query succeeded",
            "OrderNo": order_no,
            "TrxId": _trx_id(order_no),
            "PayStatus": "01",
        }

    if order_no in DECLINE_ORDERS:
        code, message = DECLINE_ORDERS[order_no]
        return {"ResponseCode": code, "ResponseMessage": message, "OrderNo": order_no}

    amount = request_data.get("OrderAmount", "")
    if not amount.isdigit():
        code, message = DECLINE_ORDERS["DECLINE_AMOUNT"]
        return {"ResponseCode": code, "ResponseMessage": message, "OrderNo": order_no}

    reply = {
        "ResponseCode": "0000",
        "ResponseMessage": "Transaction accepted",
        "OrderNo": order_no,
        "TrxId": _trx_id(order_no),
        "HostDate": datetime.now().strftime("%Y%m%d"),
    }
    if trx_type == "WeChatAppPayReq":
        reply["prepay_id"] = f"wx{hashlib.md5(order_no.encode()).hexdigest()}"
    elif trx_type == "UDCAppQRCodePayReq":
        reply["PaymentURL"] = f"https://pay.abchina.com/qr/{_trx_id(order_no)}"
    return reply


def _bad_format() -> httpx.Response:
    return httpx.Response(200, text="<html>Bad request format</html>")


def bank_handler(request: httpx.Request) -> httpx.Response:
    """httpx.MockTransport handler emulating the bank endpoint."""
    try:
        request_data = json.loads(request.content.decode("utf-8"))
    except ValueError:
        return _bad_format()
    if not isinstance(request_data, dict):
        return _bad_format()
    return httpx.Response(200, json=handle_transaction(request_data))


def create_mock_transport() -> httpx.MockTransport:
    return httpx.MockTransport(bank_handler)
