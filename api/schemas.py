"""
API Schemas Module

This module defines Pydantic models for response validation. Field names
are serialized in camelCase for the checkout page.
"""

from pydantic import BaseModel, ConfigDict, Field


class PublicConfig(BaseModel):
    publishable_key: str = Field(alias="publishableKey")

    model_config = ConfigDict(populate_by_name=True)


class IntentOut(BaseModel):
    client_secret: str = Field(alias="clientSecret")
    amount: int  # whole euros shown to the buyer

    model_config = ConfigDict(populate_by_name=True)


class ErrorDetail(BaseModel):
    message: str


class ErrorOut(BaseModel):
    error: ErrorDetail


class HealthOut(BaseModel):
    status: str
    app_name: str
    environment: str
