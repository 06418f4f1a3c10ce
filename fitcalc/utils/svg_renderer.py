import re
from dataclasses import dataclass
from typing import Any

import svgwrite

# --- Constants ---

TARGET_COLOR = "#ef4444"  # red-500
DATUM_COLOR = "#94a3b8"  # slate-400
STEM_STROKE_MM = 8
MARKER_RADIUS_MM = 6
MARGIN_PX = 10
SCALE = 2.0

PALETTE = [
    "#2563eb",  # blue-600
    "#16a34a",  # green-600
    "#d97706",  # amber-600
    "#9333ea",  # purple-600
    "#0d9488",  # teal-600
    "#db2777",  # pink-600
]

COLOR_MAP: dict[str, str] = {
    "black": "#000000",
    "white": "#ffffff",
    "red": "#ef4444",
    "blue": "#3b82f6",
    "green": "#22c55e",
    "gray": "#6b7280",
    "grey": "#6b7280",
    "silver": "#9ca3af",
    "gold": "#eab308",
    "orange": "#f97316",
    "yellow": "#facc15",
    "purple": "#a855f7",
    "pink": "#ec4899",
    "brown": "#92400e",
    "navy": "#1e3a8a",
    "teal": "#0d9488",
}

# --- Types ---


@dataclass
class CockpitTrace:
    label: str
    points: list[tuple[float, float]]
    color: str


# --- Helpers ---


def normalize_color(input_str: str | None, fallback: str) -> str:
    if not input_str:
        return fallback
    s = str(input_str).strip()

    hex_match = re.search(r"#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})", s)
    if hex_match:
        return hex_match.group(0)

    tokens = re.split(r"[\s,/\-]+", s.lower())
    for tok in tokens:
        if tok in COLOR_MAP:
            return COLOR_MAP[tok]

    return fallback


def traces_from_results(results: list[dict[str, Any]]) -> list[CockpitTrace]:
    traces = []
    for index, result in enumerate(results):
        coords = result["visualCoords"]
        points = [(coords[f"x{i}"], coords[f"y{i}"]) for i in range(4)]
        if any(v is None for pt in points for v in pt):
            continue
        label = result.get("label") or result.get("name") or result.get("id") or f"Bike {index + 1}"
        traces.append(
            CockpitTrace(
                label=str(label),
                points=points,
                color=normalize_color(result.get("color"), PALETTE[index % len(PALETTE)]),
            )
        )
    return traces


def generate_cockpit_svg(
    results: list[dict[str, Any]],
    target: tuple[float, float] | None = None,
    width: int | None = None,
    height: int | None = None,
) -> str:
    """
    Overlay of the steerer and stem of each compared bike, in BB-relative millimetres.

    ``results`` are multi-bike comparison results; only their ``visualCoords`` and the
    optional ``label``/``name``/``id`` and ``color`` fields are read.
    """
    traces = traces_from_results(results)

    # 1. ViewBox Calculation
    xs = [pt[0] for trace in traces for pt in trace.points]
    ys = [pt[1] for trace in traces for pt in trace.points]
    if target:
        xs.append(target[0])
        ys.append(target[1])
    if not xs:
        xs, ys = [0.0], [0.0]

    pad = MARKER_RADIUS_MM + STEM_STROKE_MM
    min_x, max_x = min(xs) - pad, max(xs) + pad
    min_y, max_y = min(ys) - pad, max(ys) + pad

    width_mm = max(max_x - min_x, 1)
    height_mm = max(max_y - min_y, 1)

    # Scale Logic
    current_scale = SCALE
    available_w = (width - 2 * MARGIN_PX) if width else 0
    available_h = (height - 2 * MARGIN_PX) if height else 0

    if width and height:
        current_scale = min(available_w / width_mm, available_h / height_mm)
    elif width:
        current_scale = available_w / width_mm
    elif height:
        current_scale = available_h / height_mm

    current_scale = max(current_scale, 0.01)

    svg_w = width if width else (width_mm * current_scale + 2 * MARGIN_PX)
    svg_h = height if height else (height_mm * current_scale + 2 * MARGIN_PX)

    # 2. Initialize SVG Drawing
    dwg = svgwrite.Drawing(size=(svg_w, svg_h), profile="tiny")
    dwg.viewbox(0, 0, svg_w, svg_h)

    offset_x = (svg_w - width_mm * current_scale - 2 * MARGIN_PX) / 2
    offset_y = (svg_h - height_mm * current_scale - 2 * MARGIN_PX) / 2
    tx = MARGIN_PX + offset_x - min_x * current_scale
    ty = MARGIN_PX + offset_y + max_y * current_scale

    def to_svg(pt: tuple[float, float]) -> tuple[float, float]:
        return (tx + pt[0] * current_scale, ty - pt[1] * current_scale)

    stroke_px = max(STEM_STROKE_MM * current_scale, 1.5)
    marker_px = max(MARKER_RADIUS_MM * current_scale, 2)

    # 3. Drawing Elements
    for index, trace in enumerate(traces):
        points = [to_svg(pt) for pt in trace.points]
        group = dwg.g(id=f"bike-{index + 1}")
        group.set_desc(title=trace.label)
        # Frame datum
        group.add(dwg.circle(center=points[0], r=marker_px / 2, fill=DATUM_COLOR))
        group.add(
            dwg.polyline(
                points=points,
                stroke=trace.color,
                stroke_width=stroke_px,
                stroke_linecap="round",
                stroke_linejoin="round",
                fill="none",
            )
        )
        # Bar clamp
        group.add(dwg.circle(center=points[-1], r=marker_px, stroke=trace.color, stroke_width=2, fill="none"))
        dwg.add(group)

    if target:
        cx, cy = to_svg(target)
        dwg.add(dwg.line(start=(cx - marker_px, cy), end=(cx + marker_px, cy), stroke=TARGET_COLOR, stroke_width=2))
        dwg.add(dwg.line(start=(cx, cy - marker_px), end=(cx, cy + marker_px), stroke=TARGET_COLOR, stroke_width=2))

    return dwg.tostring()
