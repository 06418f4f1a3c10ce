import math
from collections.abc import Callable, Mapping
from typing import Any

from loguru import logger
from pydantic import BaseModel, ConfigDict

from fitcalc.core import geometry
from fitcalc.core.constants import (
    PLACEHOLDER,
    PLACEHOLDER_MM,
    PLACEHOLDER_PADDED,
    ROAD_STEM_DEFAULTS,
    STEM_WIRE_FIELDS,
    ZERO_STEM_DEFAULTS,
    CalculationKind,
)
from fitcalc.core.models import (
    ComparisonTarget,
    FrameGeometry,
    Point2D,
    SaddleOffset,
    StemGeometry,
)
from fitcalc.core.utils import finite_or, is_blank, number_or, parse_number, round_half_up, signed_diff

# Single-stem calculators name the spacer field in the singular
CALCULATOR_STEM_FIELDS = {**STEM_WIRE_FIELDS, "spacer_height": "spacerHeight"}


class UnknownCalculationKind(ValueError):
    pass


class InvalidPayload(ValueError):
    pass


def resolve_stem(
    record: Mapping[str, Any],
    defaults: Mapping[str, float],
    field_names: Mapping[str, str] = STEM_WIRE_FIELDS,
) -> StemGeometry:
    """
    Fully populated stem from a wire record.

    A field that is absent, empty or not a number takes its default; an explicit
    zero is kept.
    """
    values = {}
    for name, default in defaults.items():
        raw = record.get(field_names[name])
        number = None if is_blank(raw) else parse_number(raw)
        values[name] = default if number is None else number
    return StemGeometry(**values)


def resolve_frame(record: Mapping[str, Any]) -> FrameGeometry:
    """Frame from a bike record; unreadable values become 0 and optional ones ``None``."""
    return FrameGeometry(
        reach=number_or(record.get("reach"), 0.0),
        stack=number_or(record.get("stack"), 0.0),
        head_tube_angle=number_or(record.get("hta"), 0.0),
        seat_tube_angle=parse_number(record.get("sta")) or None,
        seat_tube_length=parse_number(record.get("stl")) or None,
    )


def resolve_saddle(record: Mapping[str, Any]) -> SaddleOffset:
    return SaddleOffset(
        saddle_setback=number_or(record.get("saddleSetback"), 0.0),
        saddle_height=number_or(record.get("saddleHeight"), 0.0),
    )


def _plain(value: float) -> int | float:
    return int(value) if float(value).is_integer() else value


def _tenths(value: float | None) -> str | None:
    return None if value is None else f"{value:.1f}"


def _or_placeholder(value: Any) -> Any:
    return PLACEHOLDER if value is None else value


def _as_mapping(value: Any, message: str) -> Mapping[str, Any]:
    if value is None:
        return {}
    if not isinstance(value, Mapping):
        raise InvalidPayload(message)
    return value


class XyPositionRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    bikes: list[dict[str, Any]]
    target: ComparisonTarget

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "XyPositionRequest":
        bikes = data.get("bikes")
        if not isinstance(bikes, list) or not all(isinstance(bike, Mapping) for bike in bikes):
            raise InvalidPayload("Invalid bikes data")

        return cls(
            bikes=[dict(bike) for bike in bikes],
            target=ComparisonTarget(
                reach=number_or(data.get("targetReach"), 0.0),
                stack=number_or(data.get("targetStack"), 0.0),
                saddle_x=parse_number(data.get("targetSaddleX")),
                saddle_y=parse_number(data.get("targetSaddleY")),
            ),
        )


class PositionSimulatorRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    frame: FrameGeometry
    stem: StemGeometry
    saddle_x: float = 0.0
    saddle_y: float = 0.0
    target_handlebar_x: float | None = None
    target_handlebar_y: float | None = None
    handlebar_reach_used: float | None = None
    is_saddle_valid: bool = False

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "PositionSimulatorRequest":
        bike = _as_mapping(data.get("bike"), "Invalid bike data")
        return cls(
            frame=resolve_frame(bike),
            stem=resolve_stem(bike, ZERO_STEM_DEFAULTS),
            saddle_x=number_or(data.get("saddleX"), 0.0),
            saddle_y=number_or(data.get("saddleY"), 0.0),
            target_handlebar_x=parse_number(data.get("targetHandlebarX")) or None,
            target_handlebar_y=parse_number(data.get("targetHandlebarY")) or None,
            handlebar_reach_used=parse_number(data.get("handlebarReachUsed")) or None,
            is_saddle_valid=bool(data.get("isSaddleValid")),
        )


class SeatpostRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    saddle_x: float | None = None
    saddle_y: float | None = None
    seat_tube_angle: float | None = None
    seat_tube_length: float | None = None

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "SeatpostRequest":
        return cls(
            saddle_x=parse_number(data.get("saddleX")),
            saddle_y=parse_number(data.get("saddleY")),
            seat_tube_angle=parse_number(data.get("seatTubeAngle")) or None,
            seat_tube_length=parse_number(data.get("seatTubeLength")) or None,
        )


class StackReachRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    handlebar_x: float | None = None
    handlebar_y: float | None = None
    head_tube_angle: float | None = None
    stem: StemGeometry

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "StackReachRequest":
        return cls(
            handlebar_x=parse_number(data.get("handlebarX")) or None,
            handlebar_y=parse_number(data.get("handlebarY")) or None,
            head_tube_angle=parse_number(data.get("headTubeAngle")),
            stem=resolve_stem(data, ZERO_STEM_DEFAULTS, CALCULATOR_STEM_FIELDS),
        )


class StemRequest(BaseModel):
    model_config = ConfigDict(frozen=True)

    head_tube_angle: float | None = None
    stem: StemGeometry

    @classmethod
    def from_data(cls, data: Mapping[str, Any]) -> "StemRequest":
        return cls(
            head_tube_angle=parse_number(data.get("headTubeAngle")),
            stem=resolve_stem(data, ZERO_STEM_DEFAULTS, CALCULATOR_STEM_FIELDS),
        )


def calculate_xy_position(request: XyPositionRequest) -> dict[str, Any]:
    results = []
    for bike in request.bikes:
        position = geometry.compare_position(
            resolve_frame(bike),
            resolve_stem(bike, ROAD_STEM_DEFAULTS),
            resolve_saddle(bike),
            request.target,
        )
        seat_tube = position.seat_tube
        results.append(
            {
                **bike,
                "handlebarX": round_half_up(position.handlebar.x),
                "handlebarY": round_half_up(position.handlebar.y),
                "saddleX": round_half_up(position.saddle.x),
                "saddleY": round_half_up(position.saddle.y),
                "reachDiff": round_half_up(position.reach_diff),
                "stackDiff": round_half_up(position.stack_diff),
                "totalDiff": round_half_up(position.total_diff),
                "setbackVsSTA": seat_tube.setback_vs_sta if seat_tube else None,
                "effectiveSTA": seat_tube.effective_sta if seat_tube else None,
                "bbToSRC": seat_tube.bb_to_src if seat_tube else None,
                "bbToRail": seat_tube.bb_to_rail if seat_tube else None,
                "exposedSeatpost": seat_tube.exposed_seatpost if seat_tube else None,
                "visualCoords": {key: finite_or(value) for key, value in position.visual.model_dump().items()},
            }
        )
    return {"results": results}


def calculate_position_simulator(request: PositionSimulatorRequest) -> dict[str, Any]:
    result: dict[str, Any] = {
        "handlebarX": PLACEHOLDER_PADDED,
        "handlebarY": PLACEHOLDER_PADDED,
        "barReachNeeded": PLACEHOLDER_PADDED,
        "handlebarXDiff": "",
        "handlebarYDiff": "",
        "setbackVsSTA": PLACEHOLDER,
        "effectiveSTA": PLACEHOLDER,
        "bbToRail": PLACEHOLDER,
        "bbToSRC": PLACEHOLDER,
        "exposedSeatpost": PLACEHOLDER,
    }

    frame = request.frame
    if frame.reach and frame.stack and frame.head_tube_angle:
        handlebar = geometry.solve_handlebar_position(frame, request.stem)
        if handlebar is not None:
            handlebar_x, handlebar_y = int(handlebar.x), int(handlebar.y)
            result["handlebarX"] = handlebar_x
            result["handlebarY"] = handlebar_y

            target_x = request.target_handlebar_x
            target_y = request.target_handlebar_y
            if target_x and request.handlebar_reach_used:
                needed = target_x + request.handlebar_reach_used - handlebar_x
                result["barReachNeeded"] = _plain(needed) if math.isfinite(needed) else PLACEHOLDER_PADDED
            if target_x and math.isfinite(handlebar_x - target_x):
                result["handlebarXDiff"] = signed_diff(_plain(handlebar_x - target_x))
            if target_y and math.isfinite(handlebar_y - target_y):
                result["handlebarYDiff"] = signed_diff(_plain(handlebar_y - target_y))

    if (request.saddle_x != 0 or request.saddle_y != 0) and request.is_saddle_valid:
        metrics = geometry.seat_tube_metrics(
            request.saddle_x,
            request.saddle_y,
            frame.seat_tube_angle,
            frame.seat_tube_length,
        )
        for key, value in (
            ("effectiveSTA", _tenths(metrics.effective_sta)),
            ("bbToSRC", metrics.bb_to_src),
            ("setbackVsSTA", metrics.setback_vs_sta),
            ("bbToRail", metrics.bb_to_rail),
            ("exposedSeatpost", metrics.exposed_seatpost),
        ):
            if value is not None:
                result[key] = value

    return result


def calculate_seatpost(request: SeatpostRequest) -> dict[str, Any]:
    keys = ("setbackVsSTA", "effectiveSTA", "bbToRail", "bbToSRC", "exposedSeatpost")
    if request.saddle_x is None or not request.saddle_y:
        return dict.fromkeys(keys, PLACEHOLDER)

    metrics = geometry.seat_tube_metrics(
        request.saddle_x,
        request.saddle_y,
        request.seat_tube_angle,
        request.seat_tube_length,
        rail_fallback=True,
    )
    return {
        "setbackVsSTA": _or_placeholder(metrics.setback_vs_sta),
        "effectiveSTA": _or_placeholder(_tenths(metrics.effective_sta)),
        "bbToRail": _or_placeholder(metrics.bb_to_rail),
        "bbToSRC": _or_placeholder(metrics.bb_to_src),
        "exposedSeatpost": _or_placeholder(metrics.exposed_seatpost),
    }


def calculate_stack_reach(request: StackReachRequest) -> dict[str, Any]:
    if not request.handlebar_x or not request.handlebar_y or request.head_tube_angle is None:
        return {"frameReach": PLACEHOLDER_MM, "frameStack": PLACEHOLDER_MM}

    frame = geometry.invert_frame_coordinates(
        Point2D(x=request.handlebar_x, y=request.handlebar_y),
        request.head_tube_angle,
        request.stem,
    )
    frame_reach, frame_stack = round_half_up(frame.x), round_half_up(frame.y)
    if frame_reach is None or frame_stack is None:
        return {"frameReach": PLACEHOLDER_MM, "frameStack": PLACEHOLDER_MM}
    return {"frameReach": f"{frame_reach} mm", "frameStack": f"{frame_stack} mm"}


def calculate_stem(request: StemRequest) -> dict[str, Any]:
    if request.head_tube_angle is None:
        return {"effectiveReach": PLACEHOLDER, "effectiveStack": PLACEHOLDER}

    offset = geometry.stem_effective_offset(request.head_tube_angle, request.stem)
    return {
        "effectiveReach": finite_or(offset.x, PLACEHOLDER),
        "effectiveStack": finite_or(offset.y, PLACEHOLDER),
    }


CALCULATORS: dict[CalculationKind, tuple[Callable, Callable]] = {
    CalculationKind.XY_POSITION: (XyPositionRequest.from_data, calculate_xy_position),
    CalculationKind.POSITION_SIMULATOR: (PositionSimulatorRequest.from_data, calculate_position_simulator),
    CalculationKind.SEATPOST: (SeatpostRequest.from_data, calculate_seatpost),
    CalculationKind.STACK_REACH: (StackReachRequest.from_data, calculate_stack_reach),
    CalculationKind.STEM: (StemRequest.from_data, calculate_stem),
}


def parse_kind(calculation_type: Any) -> CalculationKind:
    try:
        return CalculationKind(calculation_type)
    except (TypeError, ValueError):
        raise UnknownCalculationKind("Unknown calculation type") from None


def calculate(calculation_type: Any, data: Mapping[str, Any] | None) -> dict[str, Any]:
    """Parse ``data`` into the request variant for ``calculation_type`` and run its calculator."""
    kind = parse_kind(calculation_type)
    parse, run = CALCULATORS[kind]

    logger.debug("Running {} calculation", kind.value)
    return run(parse(_as_mapping(data, "Invalid calculation data")))
