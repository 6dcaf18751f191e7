"""
Pydantic Result Models

Normalized bank reply and the WeChat SDK parameter bundle returned to
merchant apps. Both are produced fresh per request and never mutated.
"""
from dataclasses import dataclass
from typing import Dict, Optional
from pydantic import BaseModel, ConfigDict, Field, computed_field
from pydantic.alias_generators import to_camel


SUCCESS_CODES = frozenset({"0000", "00"})

# Ordered wire field name -> value, as sent to the bank
FieldSet = Dict[str, str]


@dataclass(frozen=True)
class SignedPayload:
    """Wire-ready request body."""
    body: bytes
    content_type: str = "application/json"
    signed: bool = True


class CanonicalResult(BaseModel):
    """
    Bank reply reconciled into one shape for every transaction type.

    Success is decided by the response code alone.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    response_code: str
    response_message: str
    order_no: Optional[str] = None
    trx_id: Optional[str] = None
    pay_status: Optional[str] = None
    raw_response: Optional[str] = Field(None, description="Untouched reply text, kept for audit")

    @computed_field(alias="isSuccess")
    @property
    def is_success(self) -> bool:
        return self.response_code in SUCCESS_CODES


class WalletSdkParameters(BaseModel):
    """
    Parameters the app passes to the WeChat SDK (appId, timeStamp,
    nonceStr, package, signType, paySign) plus order echo fields.

    On failure only is_success, error_code, error_message and order_no
    are populated.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, frozen=True)

    app_id: Optional[str] = None
    time_stamp: Optional[str] = None
    nonce_str: Optional[str] = None
    package: Optional[str] = None
    sign_type: Optional[str] = None
    pay_sign: Optional[str] = None
    order_no: Optional[str] = None
    trx_id: Optional[str] = None
    amount: Optional[str] = None
    goods_description: Optional[str] = None
    is_success: bool = False
    error_code: Optional[str] = None
    error_message: Optional[str] = None

    @classmethod
    def failure(cls, error_code: str, error_message: str, order_no: Optional[str] = None) -> "WalletSdkParameters":
        return cls(
            is_success=False,
            error_code=error_code,
            error_message=error_message,
            order_no=order_no,
        )
