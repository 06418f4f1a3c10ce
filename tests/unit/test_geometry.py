import math

import pytest

from fitcalc.core import geometry
from fitcalc.core.models import ComparisonTarget, FrameGeometry, Point2D, SaddleOffset, StemGeometry

ROAD_STEM = StemGeometry(stem_length=100, stem_angle=-6, stem_height=40, spacer_height=20, headset_height=10)


@pytest.fixture
def frame():
    return FrameGeometry(reach=380, stack=560, head_tube_angle=73, seat_tube_angle=73.5, seat_tube_length=520)


def test_handlebar_position_regression(frame):
    assert geometry.solve_handlebar_position(frame, ROAD_STEM) == Point2D(x=464, y=627)


def test_handlebar_point_is_unrounded(frame):
    point = geometry.handlebar_point(frame, ROAD_STEM)
    assert point.x == pytest.approx(463.544, abs=1e-3)
    assert point.y == pytest.approx(626.896, abs=1e-3)


def test_handlebar_position_insufficient_data():
    frame = FrameGeometry(reach=float("nan"), stack=560, head_tube_angle=73)
    assert geometry.solve_handlebar_position(frame, ROAD_STEM) is None


@pytest.mark.parametrize("delta", [-50.0, 12.5, 200.0])
def test_handlebar_translation_equivariance(frame, delta):
    base = geometry.handlebar_point(frame, ROAD_STEM)
    shifted_frame = frame.model_copy(update={"reach": frame.reach + delta, "stack": frame.stack + delta})
    shifted = geometry.handlebar_point(shifted_frame, ROAD_STEM)
    assert shifted.x == pytest.approx(base.x + delta)
    assert shifted.y == pytest.approx(base.y + delta)


@pytest.mark.parametrize(
    "reach, stack, hta",
    [(380, 560, 73), (405.5, 612, 71.25), (450, 640, 66)],
)
def test_inverter_undoes_handlebar_solver(reach, stack, hta):
    frame = FrameGeometry(reach=reach, stack=stack, head_tube_angle=hta)
    stem = StemGeometry(stem_length=110, stem_angle=-17, stem_height=42, spacer_height=35, headset_height=8)

    handlebar = geometry.handlebar_point(frame, stem)
    recovered = geometry.invert_frame_coordinates(handlebar, hta, stem)

    assert recovered.x == pytest.approx(reach)
    assert recovered.y == pytest.approx(stack)


def test_stem_offset_excludes_headset():
    stem = StemGeometry(stem_length=100, stem_angle=-6, stem_height=40, spacer_height=20, headset_height=10)
    offset = geometry.stem_effective_offset(73, stem)
    assert offset.x == pytest.approx(86.468, abs=1e-3)
    assert offset.y == pytest.approx(57.333, abs=1e-3)

    taller_headset = stem.model_copy(update={"headset_height": 50})
    assert geometry.stem_effective_offset(73, taller_headset) == offset


def test_seat_tube_metrics_with_seat_tube():
    metrics = geometry.seat_tube_metrics(200, 700, seat_tube_angle=73.5, seat_tube_length=520)

    assert metrics.effective_sta == 74.1
    assert metrics.setback_vs_sta == 7
    assert metrics.bb_to_src == 728
    assert metrics.bb_to_rail == 730
    assert metrics.exposed_seatpost == 210


def test_seat_tube_metrics_are_gated_independently():
    no_length = geometry.seat_tube_metrics(200, 700, seat_tube_angle=73.5)
    assert no_length.bb_to_rail == 730
    assert no_length.exposed_seatpost is None

    no_angle = geometry.seat_tube_metrics(200, 700, seat_tube_length=520)
    assert no_angle.effective_sta == 74.1
    assert no_angle.bb_to_src == 728
    assert no_angle.setback_vs_sta is None
    assert no_angle.bb_to_rail is None
    assert no_angle.exposed_seatpost is None


def test_seat_tube_metrics_rail_fallback():
    metrics = geometry.seat_tube_metrics(0, 700, rail_fallback=True)
    assert metrics.effective_sta == 90.0
    assert metrics.bb_to_rail == metrics.bb_to_src == 700


def test_visual_coords_end_at_handlebar(frame):
    coords = geometry.visual_coords(frame, ROAD_STEM)
    handlebar = geometry.handlebar_point(frame, ROAD_STEM)

    assert (coords.x0, coords.y0) == (380, 560)
    assert coords.x3 == pytest.approx(handlebar.x)
    assert coords.y3 == pytest.approx(handlebar.y)
    # Top of spacers sits 30 mm up the steerer
    assert math.hypot(coords.x1 - coords.x0, coords.y1 - coords.y0) == pytest.approx(30)


def test_compare_position_uses_target_saddle(frame):
    saddle = SaddleOffset(saddle_setback=-170, saddle_height=150)
    target = ComparisonTarget(reach=460, stack=630, saddle_x=200, saddle_y=700)

    position = geometry.compare_position(frame, ROAD_STEM, saddle, target)

    assert position.saddle == Point2D(x=210, y=710)
    assert position.reach_diff == pytest.approx(3.544, abs=1e-3)
    assert position.stack_diff == pytest.approx(-3.104, abs=1e-3)
    assert position.total_diff == pytest.approx(abs(position.reach_diff) + abs(position.stack_diff))
    assert position.seat_tube.bb_to_src == 728


def test_compare_position_without_target_saddle(frame):
    position = geometry.compare_position(frame, ROAD_STEM, SaddleOffset(), ComparisonTarget(reach=460, stack=630))
    assert position.seat_tube is None


def test_handlebar_position_overflow():
    frame = FrameGeometry(reach=1.7e308, stack=560, head_tube_angle=73)
    long_stem = ROAD_STEM.model_copy(update={"stem_length": 1.7e308})

    assert geometry.solve_handlebar_position(frame, long_stem) is None


def test_seat_tube_metrics_overflowed_rail():
    metrics = geometry.seat_tube_metrics(0, 1.7e308, seat_tube_angle=45, seat_tube_length=500)

    assert metrics.effective_sta == 90.0
    assert metrics.setback_vs_sta is not None
    assert metrics.bb_to_rail is None
    assert metrics.exposed_seatpost is None
