"""SVG export of agent trajectories (origin -> destination segments)."""

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Sequence, Tuple, Union
from xml.sax.saxutils import quoteattr

import structlog

from .agents import Agent

logger = structlog.get_logger()

SVG_NS = "http://www.w3.org/2000/svg"


@dataclass
class ExportOptions:
    """Trajectory drawing style."""

    stroke: str = "black"
    stroke_width: float = 1
    padding: float = 0


def format_number(value: float) -> str:
    """Shortest text for a coordinate: whole numbers drop the trailing .0."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return repr(value)


def trajectory_bounds(agents: Sequence[Agent]) -> Tuple[float, float, float, float]:
    """(min_x, min_y, max_x, max_y) over every agent's fixed endpoints."""
    xs = [p[0] for a in agents for p in (a.origin_pos, a.target_pos)]
    ys = [p[1] for a in agents for p in (a.origin_pos, a.target_pos)]
    return min(xs), min(ys), max(xs), max(ys)


def export_trajectories_svg(
    agents: Sequence[Agent], options: Optional[ExportOptions] = None
) -> Optional[str]:
    """
    Serialize every agent's origin -> target segment as an SVG document.

    The viewport is the bounding box of all segment endpoints grown by
    options.padding. Returns None when there are no agents.
    """
    options = options or ExportOptions()

    if not agents:
        logger.warning("No agents to export")
        return None

    min_x, min_y, max_x, max_y = trajectory_bounds(agents)
    min_x -= options.padding
    min_y -= options.padding
    max_x += options.padding
    max_y += options.padding
    width = max_x - min_x
    height = max_y - min_y

    f = format_number
    stroke = quoteattr(options.stroke)
    lines = [
        '<?xml version="1.0" encoding="UTF-8" standalone="no"?>',
        f'<svg xmlns="{SVG_NS}" version="1.1" width="{f(width)}" height="{f(height)}" '
        f'viewBox="{f(min_x)} {f(min_y)} {f(width)} {f(height)}">',
    ]
    for a in agents:
        (x1, y1), (x2, y2) = a.origin_pos, a.target_pos
        lines.append(
            f'<line x1="{f(x1)}" y1="{f(y1)}" x2="{f(x2)}" y2="{f(y2)}" '
            f'stroke={stroke} stroke-width="{f(options.stroke_width)}" />'
        )
    lines.append("</svg>")

    logger.info("Trajectories exported", agents=len(agents), viewbox=(min_x, min_y, width, height))
    return "\n".join(lines)


def write_trajectories_svg(
    agents: Sequence[Agent],
    path: Union[str, Path],
    options: Optional[ExportOptions] = None,
) -> Optional[Path]:
    """Write the trajectory SVG to a file; returns None when there is nothing to write."""
    document = export_trajectories_svg(agents, options)
    if document is None:
        return None
    path = Path(path)
    path.write_text(document, encoding="utf-8")
    logger.info("SVG written", path=str(path))
    return path
