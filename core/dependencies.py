from fastapi import Depends

from core.settings import Settings
from payments.stripe_service import PaymentGateway, StripeGateway
from pricing.contract import ContractReader
from pricing.converter import PriceConverter
from pricing.pipeline import PricePipeline

# Settings singleton
_settings = None


def get_settings() -> Settings:
    """Dependency that provides application settings."""
    assert (
        _settings is not None
    ), "Settings not initialized. Make sure startup() was called."
    return _settings


def init_settings():
    """Initialize settings singleton."""
    global _settings
    _settings = Settings()


def clear_settings():
    """Clear settings singleton."""
    global _settings
    _settings = None


def get_payment_gateway(settings: Settings = Depends(get_settings)) -> PaymentGateway:
    return StripeGateway(settings)


def get_price_pipeline(settings: Settings = Depends(get_settings)) -> PricePipeline:
    return PricePipeline(ContractReader(settings), PriceConverter(settings))
