"""
Closed-form cockpit and saddle geometry.

Coordinates are in millimetres with the Bottom Bracket at the origin, X growing
forward (reach) and Y growing upward (stack). Angles enter in degrees measured
from horizontal and are converted to radians here; nothing in this module
rounds except where a function documents it.
"""

import math

from fitcalc.core.models import (
    ComparedPosition,
    ComparisonTarget,
    FrameGeometry,
    Point2D,
    SaddleOffset,
    SeatTubeMetrics,
    StemGeometry,
    VisualCoords,
)
from fitcalc.core.utils import round_half_up, round_tenth


def _head_tube_rad(head_tube_angle: float) -> float:
    return math.radians(180 - head_tube_angle)


def _stem_rad(head_tube_angle: float, stem_angle: float) -> float:
    return math.radians(90 - head_tube_angle + stem_angle)


def _stem_offset(head_tube_angle: float, stem: StemGeometry, mid_stack: float) -> Point2D:
    # Along the steerer to the stem centre, then along the stem to the bar clamp
    hta_rad = _head_tube_rad(head_tube_angle)
    stem_rad = _stem_rad(head_tube_angle, stem.stem_angle)

    stem_center_x = mid_stack * math.cos(hta_rad)
    stem_center_y = mid_stack * math.sin(hta_rad)
    clamp_x = stem.stem_length * math.cos(stem_rad)
    clamp_y = stem.stem_length * math.sin(stem_rad)

    return Point2D(x=stem_center_x + clamp_x, y=stem_center_y + clamp_y)


def cockpit_offset(head_tube_angle: float, stem: StemGeometry) -> Point2D:
    """Bar clamp position relative to the reach/stack datum, headset included."""
    mid_stack = stem.headset_height + stem.spacer_height + stem.stem_height / 2
    return _stem_offset(head_tube_angle, stem, mid_stack)


def is_solvable(frame: FrameGeometry) -> bool:
    return all(math.isfinite(v) for v in (frame.reach, frame.stack, frame.head_tube_angle))


def handlebar_point(frame: FrameGeometry, stem: StemGeometry) -> Point2D:
    """Unrounded handlebar position; callers compose on this and round at the end."""
    offset = cockpit_offset(frame.head_tube_angle, stem)
    return Point2D(x=frame.reach + offset.x, y=frame.stack + offset.y)


def solve_handlebar_position(frame: FrameGeometry, stem: StemGeometry) -> Point2D | None:
    """
    Handlebar clamp position for a frame and stem, rounded to the millimetre.

    Returns ``None`` when reach, stack or head-tube angle is not a finite number, or
    when the position itself overflows.
    """
    if not is_solvable(frame):
        return None
    point = handlebar_point(frame, stem)
    x, y = round_half_up(point.x), round_half_up(point.y)
    if x is None or y is None:
        return None
    return Point2D(x=x, y=y)


def saddle_point(frame: FrameGeometry, saddle: SaddleOffset) -> Point2D:
    return Point2D(x=frame.reach + saddle.saddle_setback, y=frame.stack + saddle.saddle_height)


def effective_seat_tube_angle(saddle_x: float, saddle_y: float) -> float:
    angle_from_vertical = math.degrees(math.atan2(saddle_x, saddle_y))
    return 90 - angle_from_vertical


def setback_vs_seat_tube(saddle_x: float, saddle_y: float, seat_tube_angle: float) -> int | None:
    seat_tube_x = saddle_y * math.tan(math.radians(90 - seat_tube_angle))
    return round_half_up(seat_tube_x - saddle_x)


def bb_to_saddle_rail_center(saddle_x: float, saddle_y: float) -> int | None:
    return round_half_up(math.hypot(saddle_x, saddle_y))


def bb_to_rail(saddle_y: float, seat_tube_angle: float) -> int | None:
    return round_half_up(saddle_y / math.sin(math.radians(180 - seat_tube_angle)))


def seat_tube_metrics(
    saddle_x: float,
    saddle_y: float,
    seat_tube_angle: float | None = None,
    seat_tube_length: float | None = None,
    rail_fallback: bool = False,
) -> SeatTubeMetrics:
    """
    Seat-tube metrics for a BB-relative saddle point.

    Effective STA and BB-to-SRC only need the point. Setback, BB-to-rail and exposed
    seatpost need the nominal seat-tube angle, exposed seatpost also the seat-tube
    length; each is left ``None`` on its own when its inputs are missing. With
    ``rail_fallback`` BB-to-rail falls back to BB-to-SRC instead.
    """
    bb_to_src = bb_to_saddle_rail_center(saddle_x, saddle_y)

    setback = None
    rail = bb_to_src if rail_fallback else None
    exposed = None
    if seat_tube_angle:
        setback = setback_vs_seat_tube(saddle_x, saddle_y, seat_tube_angle)
        rail = bb_to_rail(saddle_y, seat_tube_angle)
        if seat_tube_length and rail is not None:
            exposed = round_half_up(rail - seat_tube_length)

    return SeatTubeMetrics(
        effective_sta=round_tenth(effective_seat_tube_angle(saddle_x, saddle_y)),
        bb_to_src=bb_to_src,
        setback_vs_sta=setback,
        bb_to_rail=rail,
        exposed_seatpost=exposed,
    )


def invert_frame_coordinates(target: Point2D, head_tube_angle: float, stem: StemGeometry) -> Point2D:
    """Frame reach/stack that puts the bar clamp on ``target`` with this stem. Unrounded."""
    offset = cockpit_offset(head_tube_angle, stem)
    return Point2D(x=target.x - offset.x, y=target.y - offset.y)


def stem_effective_offset(head_tube_angle: float, stem: StemGeometry) -> Point2D:
    """Reach/stack added by spacers and stem alone. Headset height is not part of it."""
    mid_stack = stem.spacer_height + stem.stem_height / 2
    return _stem_offset(head_tube_angle, stem, mid_stack)


def visual_coords(frame: FrameGeometry, stem: StemGeometry) -> VisualCoords:
    hta_rad = _head_tube_rad(frame.head_tube_angle)
    stem_rad = _stem_rad(frame.head_tube_angle, stem.stem_angle)

    x0, y0 = frame.reach, frame.stack
    x1 = x0 + math.cos(hta_rad) * (stem.headset_height + stem.spacer_height)
    y1 = y0 + math.sin(hta_rad) * (stem.headset_height + stem.spacer_height)
    x2 = x1 + math.cos(hta_rad) * (stem.stem_height / 2)
    y2 = y1 + math.sin(hta_rad) * (stem.stem_height / 2)
    x3 = x2 + math.cos(stem_rad) * stem.stem_length
    y3 = y2 + math.sin(stem_rad) * stem.stem_length

    return VisualCoords(x0=x0, y0=y0, x1=x1, y1=y1, x2=x2, y2=y2, x3=x3, y3=y3)


def compare_position(
    frame: FrameGeometry,
    stem: StemGeometry,
    saddle: SaddleOffset,
    target: ComparisonTarget,
) -> ComparedPosition:
    """
    Position of one candidate bike against the rider's target.

    Seat-tube metrics use the target saddle point rather than the candidate's own
    saddle, i.e. "my current saddle position on this frame".
    """
    handlebar = handlebar_point(frame, stem)
    reach_diff = handlebar.x - target.reach
    stack_diff = handlebar.y - target.stack

    seat_tube = None
    if target.saddle_x and target.saddle_y and frame.seat_tube_angle:
        seat_tube = seat_tube_metrics(
            target.saddle_x,
            target.saddle_y,
            frame.seat_tube_angle,
            frame.seat_tube_length,
        )

    return ComparedPosition(
        handlebar=handlebar,
        saddle=saddle_point(frame, saddle),
        reach_diff=reach_diff,
        stack_diff=stack_diff,
        total_diff=abs(reach_diff) + abs(stack_diff),
        seat_tube=seat_tube,
        visual=visual_coords(frame, stem),
    )
