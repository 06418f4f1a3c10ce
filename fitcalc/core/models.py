from pydantic import BaseModel, ConfigDict, Field


class FrameGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    reach: float = Field(
        description="Horizontal distance from the Bottom Bracket centre to the centre of the top of the head tube.",
    )
    stack: float = Field(
        description="Vertical distance from the Bottom Bracket centre to the centre of the top of the head tube.",
    )
    head_tube_angle: float = Field(description="Angle relative to horizontal, degrees.")
    seat_tube_angle: float | None = Field(default=None, description="Angle relative to horizontal, degrees.")
    seat_tube_length: float | None = None


class StemGeometry(BaseModel):
    model_config = ConfigDict(frozen=True)

    stem_length: float
    stem_angle: float = Field(description="Signed, degrees. Negative slopes down.")
    stem_height: float = Field(description="Stack height of the stem body clamp.")
    spacer_height: float
    headset_height: float


class SaddleOffset(BaseModel):
    model_config = ConfigDict(frozen=True)

    saddle_setback: float = 0.0
    saddle_height: float = 0.0


class Point2D(BaseModel):
    model_config = ConfigDict(frozen=True)

    x: float
    y: float


class SeatTubeMetrics(BaseModel):
    """Seat-tube metrics for one saddle point; ``None`` marks a metric that lacked its inputs."""

    model_config = ConfigDict(frozen=True)

    effective_sta: float | None
    bb_to_src: int | None
    setback_vs_sta: int | None = None
    bb_to_rail: int | None = None
    exposed_seatpost: int | None = None


class VisualCoords(BaseModel):
    model_config = ConfigDict(frozen=True)

    x0: float
    y0: float
    x1: float
    y1: float
    x2: float
    y2: float
    x3: float
    y3: float


class ComparisonTarget(BaseModel):
    model_config = ConfigDict(frozen=True)

    reach: float = 0.0
    stack: float = 0.0
    saddle_x: float | None = None
    saddle_y: float | None = None


class ComparedPosition(BaseModel):
    """Computed fields for one bike of a multi-bike comparison, before merging with the bike record."""

    model_config = ConfigDict(frozen=True)

    handlebar: Point2D
    saddle: Point2D
    reach_diff: float
    stack_diff: float
    total_diff: float
    seat_tube: SeatTubeMetrics | None = None
    visual: VisualCoords
