import json

from fastapi import APIRouter, HTTPException, Request, Response
from fastapi.responses import JSONResponse
from loguru import logger
from pydantic import ValidationError

from fitcalc.api.schemas import CalculationRequest, CalculationResponse, ComparisonDrawingRequest
from fitcalc.config import settings
from fitcalc.core.constants import CalculationKind
from fitcalc.core.engine import (
    InvalidPayload,
    UnknownCalculationKind,
    XyPositionRequest,
    calculate,
    calculate_xy_position,
)
from fitcalc.utils.svg_renderer import generate_cockpit_svg

router = APIRouter()

# The body is parsed by hand so malformed requests still get the failure envelope
CALCULATION_REQUEST_BODY = {
    "requestBody": {"content": {"application/json": {"schema": CalculationRequest.model_json_schema()}}},
}


def _reject_constant(name: str):
    raise ValueError(f"Unsupported JSON constant: {name}")


def _failure(message: str) -> JSONResponse:
    return JSONResponse(status_code=500, content={"success": False, "error": message})


@router.post(
    "",
    response_model=CalculationResponse,
    response_model_exclude_unset=True,
    openapi_extra=CALCULATION_REQUEST_BODY,
)
async def run_calculation(request: Request):
    # An empty body counts as an empty request object
    body = await request.body() or b"{}"
    try:
        payload = CalculationRequest.model_validate(json.loads(body, parse_constant=_reject_constant))
    except (ValueError, ValidationError) as e:
        logger.error("Invalid calculation request: {}", e)
        return _failure("Invalid calculation request")

    try:
        result = calculate(payload.calculationType, payload.data)
    except (UnknownCalculationKind, InvalidPayload) as e:
        logger.error("Calculation error: {}", e)
        return _failure(str(e))

    return CalculationResponse(success=True, result=result)


@router.post("/{kind}/svg", response_class=Response)
def draw_comparison(kind: str, request: ComparisonDrawingRequest):
    if kind != CalculationKind.XY_POSITION:
        raise HTTPException(status_code=404, detail="Drawing is only available for xy-position")

    try:
        comparison = XyPositionRequest.from_data(request.data)
    except InvalidPayload as e:
        raise HTTPException(status_code=422, detail=str(e)) from e

    results = calculate_xy_position(comparison)["results"]
    target = None
    if comparison.target.reach or comparison.target.stack:
        target = (comparison.target.reach, comparison.target.stack)

    svg = generate_cockpit_svg(
        results,
        target=target,
        width=request.width or settings.svg_width,
        height=request.height or settings.svg_height,
    )
    logger.info("Rendered cockpit comparison for {} bikes", len(results))
    return Response(content=svg, media_type="image/svg+xml")
