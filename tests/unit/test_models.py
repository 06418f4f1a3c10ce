import pytest
from pydantic import ValidationError

from fitcalc.core.models import FrameGeometry, StemGeometry


def test_frame_geometry_optional_seat_tube():
    frame = FrameGeometry(reach=380, stack=560, head_tube_angle=73)
    assert frame.seat_tube_angle is None
    assert frame.seat_tube_length is None


def test_frame_geometry_is_frozen():
    frame = FrameGeometry(reach=380, stack=560, head_tube_angle=73)
    with pytest.raises(ValidationError):
        frame.reach = 400


def test_stem_geometry_requires_every_field():
    with pytest.raises(ValidationError):
        StemGeometry(stem_length=100, stem_angle=-6)
