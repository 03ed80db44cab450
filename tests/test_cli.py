"""Tests for the trajectory export command line."""

import json

import pytest

import export_trajectories


@pytest.fixture
def data_files(tmp_path, features, displacement_payload):
    boundary_path = tmp_path / "map.json"
    displacement_path = tmp_path / "data.json"
    boundary_path.write_text(json.dumps({"type": "FeatureCollection", "features": features}))
    displacement_path.write_text(json.dumps(displacement_payload))
    return boundary_path, displacement_path


class TestExportCommand:
    """Test argument parsing and the export run."""

    def test_parse_args(self):
        args = export_trajectories.parse_args(["--width", "640", "--seed", "3", "--output", "out.svg"])

        assert args.width == 640
        assert args.seed == 3
        assert args.output == "out.svg"

    def test_unknown_option(self):
        with pytest.raises(SystemExit):
            export_trajectories.parse_args(["--ticks", "10"])

    def test_writes_svg(self, data_files, tmp_path):
        boundary_path, displacement_path = data_files
        output = tmp_path / "trajectories.svg"
        code = export_trajectories.main(
            [
                "--boundaries", str(boundary_path),
                "--displacement", str(displacement_path),
                "--seed", "1",
                "--output", str(output),
            ]
        )

        assert code == 0
        assert output.read_text(encoding="utf-8").count("<line ") > 0

    def test_missing_data(self, tmp_path):
        code = export_trajectories.main(
            [
                "--boundaries", str(tmp_path / "missing.json"),
                "--displacement", str(tmp_path / "missing.json"),
                "--output", str(tmp_path / "out.svg"),
            ]
        )

        assert code == 1
        assert not (tmp_path / "out.svg").exists()
