"""
Pydantic schemas for the storefront API.
"""

from __future__ import annotations

from typing import Literal, Union

from pydantic import BaseModel, ConfigDict, Field, StrictInt, StrictStr, confloat

FinitePrice = confloat(strict=True, allow_inf_nan=False)


class ProductPayload(BaseModel):
    """Admin-submitted product. Fields beyond name/price are kept as sent."""

    model_config = ConfigDict(extra="allow")

    name: StrictStr = Field(..., min_length=1)
    price: Union[StrictInt, FinitePrice]


class MessageResponse(BaseModel):
    message: str


class OrderCreatedResponse(BaseModel):
    message: str
    orderId: str


class HealthResponse(BaseModel):
    status: Literal["ok"]
    time: str
