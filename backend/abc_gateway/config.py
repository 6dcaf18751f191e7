"""
Gateway Configuration Module

Loads merchant credentials, bank endpoint and wallet SDK secrets from
environment variables (or a .env file).
"""
from pydantic import SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict
from typing import List, Literal, Optional


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.

    Notes:
    - List values are read as JSON, e.g. MERCHANT_IDS='["103881104410001"]'
    - Only the first merchant id / certificate is active per request
    - insecure_mode enables the unsigned and default-secret paths; never
      enable it in production
    """

    # Merchant credentials
    merchant_ids: List[str] = []
    certificate_paths: List[str] = []
    certificate_passwords: List[SecretStr] = []

    # Bank endpoint
    connect_method: Literal["http", "https"] = "https"
    server_name: str = "pay.abchina.com"
    server_port: int = 443
    trx_url_path: str = "/ebus/ReceiveMerchantTrxReqServlet"
    request_timeout_seconds: float = 30.0

    # Behaviour flags
    print_log: bool = False
    insecure_mode: bool = False
    sandbox_mode: bool = False

    # Wallet SDK (WeChat in-app payment)
    wechat_app_id: Optional[str] = None
    wechat_api_key: Optional[SecretStr] = None
    wechat_sign_type: str = "MD5"

    # Service
    environment: str = "Production"
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR"] = "INFO"
    host: str = "0.0.0.0"
    port: int = 8000

    model_config = SettingsConfigDict(env_file=".env", case_sensitive=False)


# Global settings instance
settings = Settings()
