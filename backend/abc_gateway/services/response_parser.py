"""
Response Normalizer

Reconciles the bank's reply, whose field names differ between transaction
types, into a CanonicalResult. Malformed replies become a parse-failure
result rather than an exception.
"""
import json
import logging
from typing import Any, Dict, Optional, Tuple

from ..exceptions import ParseError, PARSE_FAILURE_CODE, SYSTEM_ERROR_CODE
from ..models.results import CanonicalResult

logger = logging.getLogger(__name__)

UNKNOWN_RESPONSE_MESSAGE = "Unknown response"
PARSE_FAILURE_MESSAGE = "Response parse failed"

# Logical field -> wire names tried in order
RESPONSE_FIELD_ALIASES: Dict[str, Tuple[str, ...]] = {
    "response_code": ("ResponseCode", "RspCode"),
    "response_message": ("ResponseMessage", "RspMsg"),
    "order_no": ("OrderNo",),
    "trx_id": ("TrxId",),
    "pay_status": ("PayStatus",),
}

FIELD_DEFAULTS: Dict[str, Optional[str]] = {
    "response_code": SYSTEM_ERROR_CODE,
    "response_message": UNKNOWN_RESPONSE_MESSAGE,
}


def load_reply(raw_text: str) -> Dict[str, Any]:
    """
    Decode a reply body into a JSON object.

    Raises:
        ParseError: If the text is not JSON or not an object
    """
    try:
        document = json.loads(raw_text)
    except (TypeError, ValueError) as e:
        raise ParseError(f"Reply is not valid JSON: {e}") from e
    if not isinstance(document, dict):
        raise ParseError(f"Reply is a JSON {type(document).__name__}, expected an object")
    return document


def _first_present(document: Dict[str, Any], names: Tuple[str, ...]) -> Optional[str]:
    for name in names:
        value = document.get(name)
        if value is None:
            continue
        if isinstance(value, (dict, list)):
            return json.dumps(value, ensure_ascii=False)
        return str(value)
    return None


def parse_response(raw_text: str) -> CanonicalResult:
    """
    Normalize a bank reply.

    Args:
        raw_text: Reply body as received

    Returns:
        CanonicalResult; on malformed input the reserved parse-failure code
        with the raw text preserved
    """
    try:
        document = load_reply(raw_text)
    except ParseError as e:
        logger.error(f"Failed to parse bank response: {e.message}; body={raw_text!r}")
        return CanonicalResult(
            response_code=PARSE_FAILURE_CODE,
            response_message=PARSE_FAILURE_MESSAGE,
            raw_response=raw_text,
        )

    values = {}
    for field, names in RESPONSE_FIELD_ALIASES.items():
        value = _first_present(document, names)
        values[field] = value if value is not None else FIELD_DEFAULTS.get(field)

    return CanonicalResult(raw_response=raw_text, **values)
