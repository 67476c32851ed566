from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Load .env file automatically
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # App settings
    APP_NAME: str = "Gateway Helpers"
    DEBUG: bool = False
    ENVIRONMENT: Literal["development", "test", "production"] = "development"
    LOG_LEVEL: str = "INFO"

    # Integration behaviour
    APPLICATION_ID: str = "ActiveMerchant"
    INTEGRATION_MODE: Literal["production", "test"] = "production"
    HTTP_TIMEOUT: float = 60.0

    # PxPay
    PXPAY_TOKEN_URL: str = "https://sec.paymentexpress.com/pxpay/pxaccess.aspx"
    PXPAY_SERVICE_URL: str = "https://sec.paymentexpress.com/pxpay/pxpay.aspx"

    # Klarna
    KLARNA_SERVICE_URL: str = "https://checkout.klarna.com/api/v1/checkout"
    KLARNA_TEST_SERVICE_URL: str = (
        "https://checkout.testdrive.klarna.com/api/v1/checkout"
    )

    # Observability (Optional)
    OTEL_SERVICE_NAME: str = "gateway-helpers"
    METRICS_ENABLED: bool = True

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")
