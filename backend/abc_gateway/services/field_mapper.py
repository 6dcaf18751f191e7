"""
Transaction Field Mapper

Turns a payment intent into the flat, ordered field set the bank expects
for its transaction type.
"""
from datetime import datetime
from typing import Callable, Optional
import logging

from ..models.intents import PaymentIntent, OrderQuery
from ..models.results import FieldSet

logger = logging.getLogger(__name__)

ORDER_TIME_FORMAT = "%Y%m%d%H%M%S"


def format_order_time(moment: datetime) -> str:
    """Format a timestamp the way the bank expects (yyyyMMddHHmmss)."""
    return moment.strftime(ORDER_TIME_FORMAT)


def map_fields(
    intent: PaymentIntent,
    merchant_id: str,
    now: Optional[Callable[[], datetime]] = None
) -> FieldSet:
    """
    Build the wire field set for an intent.

    Args:
        intent: Any transaction-type intent model
        merchant_id: Active merchant id (first configured)
        now: Clock used when the intent has no order time

    Returns:
        Ordered mapping of wire field name to string value

    Empty or missing optional fields are left out entirely. Values are
    forwarded as given; the bank rejects malformed ones.
    """
    fields: FieldSet = {
        "TrxType": intent.trx_type,
        "OrderNo": intent.order_no,
    }

    if isinstance(intent, OrderQuery):
        fields["MerchantID"] = merchant_id
        return fields

    fields["OrderAmount"] = intent.order_amount
    fields["MerchantID"] = merchant_id

    for attr, wire_name in intent.wire_fields:
        value = getattr(intent, attr)
        if attr == "order_time" and not value:
            value = format_order_time((now or datetime.now)())
        if value is None or value == "":
            continue
        fields[wire_name] = str(value)

    if not merchant_id:
        logger.warning(f"No merchant id configured; sending empty MerchantID for {intent.order_no}")

    return fields
