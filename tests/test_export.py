"""Tests for SVG trajectory export."""

import xml.etree.ElementTree as ET

from idp_flowmap.core.agents import make_agent
from idp_flowmap.core.export import (
    ExportOptions,
    export_trajectories_svg,
    format_number,
    trajectory_bounds,
    write_trajectories_svg,
)

SVG = "{http://www.w3.org/2000/svg}"


def two_agents():
    return [
        make_agent((0, 0), (10, 10), "A", "B"),
        make_agent((5, 5), (15, 15), "C", "D"),
    ]


class TestExport:
    """Test the exported document."""

    def test_viewbox_and_lines(self):
        document = export_trajectories_svg(two_agents())
        root = ET.fromstring(document.split("\n", 1)[1])

        assert root.tag == f"{SVG}svg"
        assert root.attrib["viewBox"] == "0 0 15 15"
        assert root.attrib["width"] == "15"
        assert root.attrib["height"] == "15"

        lines = root.findall(f"{SVG}line")
        assert len(lines) == 2
        assert [lines[0].attrib[k] for k in ("x1", "y1", "x2", "y2")] == ["0", "0", "10", "10"]
        assert [lines[1].attrib[k] for k in ("x1", "y1", "x2", "y2")] == ["5", "5", "15", "15"]
        assert lines[0].attrib["stroke"] == "black"
        assert lines[0].attrib["stroke-width"] == "1"

    def test_xml_declaration(self):
        document = export_trajectories_svg(two_agents())
        assert document.startswith('<?xml version="1.0" encoding="UTF-8" standalone="no"?>')

    def test_uses_fixed_endpoints_not_position(self):
        agents = two_agents()
        agents[0].x, agents[0].y = 100.0, 100.0
        assert trajectory_bounds(agents) == (0, 0, 15, 15)

    def test_padding_and_style(self):
        document = export_trajectories_svg(
            two_agents(), ExportOptions(stroke="#333", stroke_width=0.5, padding=2)
        )
        root = ET.fromstring(document.split("\n", 1)[1])

        assert root.attrib["viewBox"] == "-2 -2 19 19"
        assert root.find(f"{SVG}line").attrib["stroke"] == "#333"
        assert root.find(f"{SVG}line").attrib["stroke-width"] == "0.5"

    def test_no_agents(self):
        assert export_trajectories_svg([]) is None

    def test_format_number(self):
        assert format_number(0.0) == "0"
        assert format_number(-0.0) == "0"
        assert format_number(12.5) == "12.5"
        assert format_number(3) == "3"

    def test_write_file(self, tmp_path):
        path = write_trajectories_svg(two_agents(), tmp_path / "out.svg")
        assert path.read_text(encoding="utf-8").count("<line ") == 2

    def test_write_nothing_without_agents(self, tmp_path):
        assert write_trajectories_svg([], tmp_path / "out.svg") is None
        assert not (tmp_path / "out.svg").exists()
