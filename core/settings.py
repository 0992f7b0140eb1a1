import os
from typing import Literal

from dotenv import load_dotenv
from pydantic import ConfigDict
from pydantic_settings import BaseSettings

# Load .env file automatically
load_dotenv()


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    # Stripe
    STRIPE_SECRET_KEY: str
    STRIPE_PUBLISHABLE_KEY: str = ""
    STRIPE_WEBHOOK_SECRET: str = ""
    STRIPE_API_VERSION: str | None = "2023-10-16"

    # Checkout page
    STATIC_DIR: str = "static"

    # Blockchain
    INFURA_ID: str = ""
    ETH_NETWORK: str = "mainnet"
    ETH_RPC_URL: str = ""
    CONTRACT_ADDRESS: str = ""

    # Price feed
    PRICE_FEED_URL: str = "https://api.coingecko.com/api/v3/simple/price"
    PRICE_FEED_TIMEOUT: float = 10.0

    # App settings
    APP_NAME: str = "Genesis Checkout"
    APP_URL: str = "https://genesis.re/"
    APP_VERSION: str = "1.1.0"
    ENVIRONMENT: Literal["development", "production", "test"] = "development"
    HOST: str = "0.0.0.0"
    PORT: int = 4242

    # Observability (Optional)
    DISABLE_TRACING: bool = False
    OTEL_SERVICE_NAME: str = "genesis-checkout"

    model_config = ConfigDict(env_file=".env", case_sensitive=True, extra="ignore")

    def __init__(self, **kwargs):
        if not (kwargs.get("STRIPE_SECRET_KEY") or os.getenv("STRIPE_SECRET_KEY")):
            raise RuntimeError(
                "STRIPE_SECRET_KEY not set; create .env or export the variable"
            )
        super().__init__(**kwargs)

    @property
    def eth_provider_url(self) -> str:
        """RPC endpoint for contract reads; empty when nothing is configured."""
        if self.ETH_RPC_URL:
            return self.ETH_RPC_URL
        if self.INFURA_ID:
            return f"https://{self.ETH_NETWORK}.infura.io/v3/{self.INFURA_ID}"
        return ""
