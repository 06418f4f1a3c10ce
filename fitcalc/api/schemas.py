from typing import Any

from pydantic import BaseModel, Field


class CalculationRequest(BaseModel):
    calculationType: Any = Field(
        default=None,
        description="One of xy-position, position-simulator, seatpost, stack-reach, stem.",
    )
    data: Any = None


class CalculationResponse(BaseModel):
    success: bool
    result: Any | None = None
    error: str | None = None


class ComparisonDrawingRequest(BaseModel):
    data: dict[str, Any]
    width: int | None = Field(default=None, ge=50, le=4000)
    height: int | None = Field(default=None, ge=50, le=4000)


class SheetValuesSchema(BaseModel):
    values: list[list[Any]] = []


class SheetBikesResult(BaseModel):
    success: bool = True
    data: list[dict[str, Any]] = []
