"""
Read-only configuration value objects handed to the pipeline.

Built once from Settings at startup; the pipeline never reads the
environment directly.
"""
from typing import Optional, Tuple
from pydantic import BaseModel, ConfigDict, SecretStr

from ..config import Settings


class MerchantCredential(BaseModel):
    """The single active merchant certificate."""

    model_config = ConfigDict(frozen=True)

    merchant_id: str
    certificate_path: str
    certificate_password: SecretStr


class MerchantCredentials(BaseModel):
    """Configured merchant ids and certificates; the first of each is active."""

    model_config = ConfigDict(frozen=True)

    merchant_ids: Tuple[str, ...] = ()
    certificate_paths: Tuple[str, ...] = ()
    certificate_passwords: Tuple[SecretStr, ...] = ()

    @classmethod
    def from_settings(cls, settings: Settings) -> "MerchantCredentials":
        return cls(
            merchant_ids=tuple(settings.merchant_ids),
            certificate_paths=tuple(settings.certificate_paths),
            certificate_passwords=tuple(settings.certificate_passwords),
        )

    @property
    def merchant_id(self) -> str:
        """First configured merchant id, or empty string."""
        return self.merchant_ids[0] if self.merchant_ids else ""

    def active_credential(self) -> Optional[MerchantCredential]:
        """Return the first certificate/password pair, or None if either list is empty."""
        if not self.certificate_paths or not self.certificate_passwords:
            return None
        return MerchantCredential(
            merchant_id=self.merchant_id,
            certificate_path=self.certificate_paths[0],
            certificate_password=self.certificate_passwords[0],
        )


class BankEndpoint(BaseModel):
    """Transaction endpoint of the bank platform."""

    model_config = ConfigDict(frozen=True)

    connect_method: str = "https"
    server_name: str
    server_port: int
    trx_url_path: str

    @classmethod
    def from_settings(cls, settings: Settings) -> "BankEndpoint":
        return cls(
            connect_method=settings.connect_method,
            server_name=settings.server_name,
            server_port=settings.server_port,
            trx_url_path=settings.trx_url_path,
        )

    @property
    def url(self) -> str:
        return f"{self.connect_method}://{self.server_name}:{self.server_port}{self.trx_url_path}"


class WalletSdkConfig(BaseModel):
    """WeChat SDK signing secrets; None means not configured."""

    model_config = ConfigDict(frozen=True)

    app_id: Optional[str] = None
    api_key: Optional[SecretStr] = None
    sign_type: str = "MD5"
    allow_insecure_defaults: bool = False

    @classmethod
    def from_settings(cls, settings: Settings) -> "WalletSdkConfig":
        return cls(
            app_id=settings.wechat_app_id or None,
            api_key=settings.wechat_api_key,
            sign_type=settings.wechat_sign_type,
            allow_insecure_defaults=settings.insecure_mode,
        )
