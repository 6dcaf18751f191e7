"""
WeChat SDK Parameter Service

Derives the parameter bundle a merchant app passes to the native WeChat
SDK (appId, timeStamp, nonceStr, package, signType, paySign) after the
bank has accepted a WeChatAppPayReq order.

The canonical string and digests are fixed by the WeChat client SDK's
verification routine; MD5 is its legacy default.
"""
import hashlib
import hmac
import logging
import secrets
import string
import time
from typing import Callable, Optional

from ..exceptions import ConfigurationError, GatewayError, PrepayTokenMissing
from ..models.credentials import WalletSdkConfig
from ..models.intents import WalletSdkPaymentIntent
from ..models.results import CanonicalResult, WalletSdkParameters
from .response_parser import load_reply

logger = logging.getLogger(__name__)

SIGN_TYPE_MD5 = "MD5"
SIGN_TYPE_HMAC_SHA256 = "HMAC-SHA256"
_SIGN_TYPE_ALIASES = {
    "MD5": SIGN_TYPE_MD5,
    "SHA256": SIGN_TYPE_HMAC_SHA256,
    "HMAC-SHA256": SIGN_TYPE_HMAC_SHA256,
    "SHA256-HMAC": SIGN_TYPE_HMAC_SHA256,
}

# Only honoured in insecure mode
DEFAULT_APP_ID = "wxdefault"
DEFAULT_API_KEY = "default_key"

DEFAULT_GOODS_DESCRIPTION = "Goods purchase"
PREPAY_ID_FIELD = "prepay_id"
NONCE_ALPHABET = string.ascii_lowercase + string.digits
NONCE_LENGTH = 32


def sign_type_tag(sign_type: Optional[str]) -> str:
    """The signType value as configured; MD5 when unset."""
    if not sign_type or not sign_type.strip():
        return SIGN_TYPE_MD5
    return sign_type.strip()


def resolve_sign_algorithm(sign_type: Optional[str]) -> str:
    """Map a configured sign type spelling onto the MD5 or HMAC-SHA256 digest."""
    if not sign_type or not sign_type.strip():
        return SIGN_TYPE_MD5
    try:
        return _SIGN_TYPE_ALIASES[sign_type.strip().upper()]
    except KeyError:
        raise ConfigurationError(f"Unsupported WeChat sign type: {sign_type}") from None


def generate_nonce() -> str:
    """32 characters drawn uniformly from [a-z0-9] with a CSPRNG."""
    return ''.join(secrets.choice(NONCE_ALPHABET) for _ in range(NONCE_LENGTH))


def build_sign_string(app_id: str, nonce_str: str, package: str, sign_type: str, time_stamp: str) -> str:
    """Canonical form, in the fixed order the WeChat SDK verifies."""
    return f"appId={app_id}&nonceStr={nonce_str}&package={package}&signType={sign_type}&timeStamp={time_stamp}"


def compute_pay_sign(
    app_id: str,
    nonce_str: str,
    package: str,
    sign_type: str,
    time_stamp: str,
    api_key: str = ""
) -> str:
    """
    Compute paySign as lowercase hex.

    HMAC-SHA256 is keyed by the API secret; MD5 is a plain digest of the
    canonical string. sign_type goes into the canonical string verbatim and
    any of its accepted spellings selects the digest.

    Raises:
        ConfigurationError: If sign_type is not a supported spelling
    """
    message = build_sign_string(app_id, nonce_str, package, sign_type, time_stamp).encode('utf-8')

    if resolve_sign_algorithm(sign_type) == SIGN_TYPE_HMAC_SHA256:
        return hmac.new(api_key.encode('utf-8'), message, hashlib.sha256).hexdigest()

    return hashlib.md5(message).hexdigest()


def extract_prepay_id(result: CanonicalResult) -> str:
    """
    Pull the prepay token out of a bank reply.

    Looks for prepay_id in the raw reply and falls back to the bank's
    transaction id.

    Raises:
        PrepayTokenMissing: If neither is available
    """
    if result.raw_response:
        try:
            prepay_id = load_reply(result.raw_response).get(PREPAY_ID_FIELD)
        except GatewayError as e:
            logger.error(f"Failed to read prepay_id from reply: {e.message}")
        else:
            if prepay_id:
                return str(prepay_id)

    if result.trx_id:
        return result.trx_id

    raise PrepayTokenMissing(
        "Payment system returned no usable payment identifier",
        details={"order_no": result.order_no}
    )


class WalletSdkSigner:
    """Builds signed WeChat SDK parameters from accepted wallet orders."""

    def __init__(
        self,
        config: WalletSdkConfig,
        clock: Callable[[], float] = time.time,
        nonce_factory: Callable[[], str] = generate_nonce
    ):
        self._config = config
        self._clock = clock
        self._nonce_factory = nonce_factory

    def _app_id(self) -> str:
        if self._config.app_id:
            return self._config.app_id
        if self._config.allow_insecure_defaults:
            logger.warning("WECHAT_APP_ID not set; using insecure default app id")
            return DEFAULT_APP_ID
        raise ConfigurationError("WeChat app id is not configured")

    def _api_key(self) -> str:
        if self._config.api_key is not None and self._config.api_key.get_secret_value():
            return self._config.api_key.get_secret_value()
        if self._config.allow_insecure_defaults:
            logger.warning("WECHAT_API_KEY not set; using insecure default API key")
            return DEFAULT_API_KEY
        raise ConfigurationError("WeChat API key is not configured")

    def derive(self, result: CanonicalResult, intent: WalletSdkPaymentIntent) -> WalletSdkParameters:
        """
        Derive SDK parameters for a successful wallet order.

        Args:
            result: Normalized bank reply (must be successful)
            intent: The original wallet intent, for the echoed fields

        Returns:
            Populated parameters, or a failure-shaped bundle carrying the
            error code when the prepay token or secrets are missing
        """
        try:
            prepay_id = extract_prepay_id(result)
            sign_type = sign_type_tag(self._config.sign_type)
            algorithm = resolve_sign_algorithm(sign_type)
            app_id = self._app_id()
            api_key = self._api_key() if algorithm == SIGN_TYPE_HMAC_SHA256 else ""
        except GatewayError as e:
            logger.error(f"WeChat SDK derivation failed for {intent.order_no}: {e.error_code} {e.message}")
            return WalletSdkParameters.failure(e.error_code, e.message, order_no=intent.order_no)

        time_stamp = str(int(self._clock()))
        nonce_str = self._nonce_factory()
        package = f"{PREPAY_ID_FIELD}={prepay_id}"
        pay_sign = compute_pay_sign(app_id, nonce_str, package, sign_type, time_stamp, api_key)

        return WalletSdkParameters(
            app_id=app_id,
            time_stamp=time_stamp,
            nonce_str=nonce_str,
            package=package,
            sign_type=sign_type,
            pay_sign=pay_sign,
            order_no=intent.order_no,
            trx_id=result.trx_id,
            amount=intent.order_amount,
            goods_description=intent.order_desc or intent.product_name or DEFAULT_GOODS_DESCRIPTION,
            is_success=True,
        )
