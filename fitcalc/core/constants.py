from enum import StrEnum


class CalculationKind(StrEnum):
    XY_POSITION = "xy-position"
    POSITION_SIMULATOR = "position-simulator"
    SEATPOST = "seatpost"
    STACK_REACH = "stack-reach"
    STEM = "stem"


PLACEHOLDER = "--"
PLACEHOLDER_MM = "-- mm"
# The position simulator pads its handlebar placeholders with a trailing space
PLACEHOLDER_PADDED = "-- "

# Typical road stem, used by the multi-bike comparison
ROAD_STEM_DEFAULTS = {
    "stem_length": 100.0,
    "stem_angle": -6.0,
    "spacer_height": 20.0,
    "stem_height": 40.0,
    "headset_height": 10.0,
}

# The position simulator starts from a bare steerer
ZERO_STEM_DEFAULTS = {
    "stem_length": 0.0,
    "stem_angle": 0.0,
    "spacer_height": 0.0,
    "stem_height": 0.0,
    "headset_height": 0.0,
}

# Wire names of the stem fields on a bike record
STEM_WIRE_FIELDS = {
    "stem_length": "stemLength",
    "stem_angle": "stemAngle",
    "spacer_height": "spacersHeight",
    "stem_height": "stemHeight",
    "headset_height": "headsetHeight",
}

SHEET_MATERIAL_ALIASES = {"frame_material", "material_type", "frame_material_type"}
