"""
End-to-end tests for the ``cartonplan`` command line.

Run with:
    python -m pytest tests/test_cli.py -v
"""

import csv
import json

import pytest
import yaml

from runner.plan import EXIT_INPUT, EXIT_OK, build_parser, main


CUBES = [{"id": "cube", "length": 500, "width": 500, "height": 500,
          "quantity": 10, "weight": 10}]
CUBE_SPACE = {"length": 1000, "width": 1000, "height": 1000}


@pytest.fixture
def write_job(tmp_path):
    def _write(data, name="job.yaml"):
        path = tmp_path / name
        if name.endswith(".json"):
            path.write_text(json.dumps(data))
        else:
            path.write_text(yaml.safe_dump(data))
        return str(path)
    return _write


def run(argv, capsys):
    code = main(argv)
    captured = capsys.readouterr()
    return code, captured.out, captured.err


# ---------------------------------------------------------------------------
# 1. Sub-commands
# ---------------------------------------------------------------------------

class TestCommands:
    def test_tile(self, write_job, capsys):
        job = write_job({"carton": {"length": 100, "width": 100, "height": 100, "weight": 2},
                         "space": CUBE_SPACE, "allow_vertical_flip": False}, "tile.json")
        code, out, _ = run(["tile", job], capsys)
        assert code == EXIT_OK
        result = json.loads(out)
        assert result["space"] == "custom"
        assert result["tile"]["total"] == 1000
        assert result["summary"]["total_weight"] == 2000

    def test_tile_on_preset(self, write_job, capsys):
        job = write_job({"carton": {"length": 400, "width": 300, "height": 250},
                         "space": {"preset": "euro"}})
        code, out, _ = run(["tile", job], capsys)
        assert code == EXIT_OK
        assert json.loads(out)["space"].startswith("Euro Pallet")

    def test_pack_with_check_and_csv(self, write_job, tmp_path, capsys):
        job = write_job({"groups": CUBES, "container": dict(CUBE_SPACE, id="c1")})
        csv_path = tmp_path / "metrics.csv"
        code, out, _ = run(["pack", job, "--check", "--csv", str(csv_path)], capsys)
        assert code == EXIT_OK
        assert json.loads(out)["total_cartons"] == 8
        with csv_path.open(newline="") as f:
            rows = list(csv.DictReader(f))
        assert [r["container_id"] for r in rows] == ["c1"]

    def test_distribute_spread(self, write_job, capsys):
        containers = [dict(CUBE_SPACE, id=f"c{i}") for i in range(1, 4)]
        job = write_job({"groups": CUBES, "containers": containers})
        code, out, _ = run(["distribute", job, "--spread"], capsys)
        assert code == EXIT_OK
        result = json.loads(out)
        assert result["spread_evenly"] is True
        assert [c["total_cartons"] for c in result["containers"]] == [4, 3, 3]

    def test_recommend(self, write_job, capsys):
        job = write_job({"groups": CUBES,
                         "presets": [dict(CUBE_SPACE, label="Cube")]})
        code, out, _ = run(["recommend", job], capsys)
        assert code == EXIT_OK
        result = json.loads(out)
        assert [c["id"] for c in result["containers"]] == ["container-1", "container-2"]
        assert result["plan"]["unplaced"] == {"cube": 0}

    def test_general_with_algorithm_override(self, write_job, tmp_path, capsys):
        items = [{"id": f"i{n}", "length": 300, "width": 200, "height": 100}
                 for n in range(4)]
        job = write_job({"items": items, "container": CUBE_SPACE}, "general.json")
        out_path = tmp_path / "out" / "result.json"
        code, out, _ = run(["general", job, "--algorithm", "wall-building",
                            "-o", str(out_path)], capsys)
        assert code == EXIT_OK
        assert out == ""
        result = json.loads(out_path.read_text())
        assert result["algorithm"] == "wall_building"
        assert len(result["packed"]) == 4

    def test_verbose_prints_summary(self, write_job, capsys):
        job = write_job({"groups": CUBES, "container": CUBE_SPACE})
        code, out, err = run(["pack", job, "-v"], capsys)
        assert code == EXIT_OK
        assert "Plan: job" in err
        assert "STOPPED" in out


# ---------------------------------------------------------------------------
# 2. Errors
# ---------------------------------------------------------------------------

class TestErrors:
    def test_invalid_job(self, write_job, capsys):
        job = write_job({"container": CUBE_SPACE})
        code, _, err = run(["pack", job], capsys)
        assert code == EXIT_INPUT
        assert "Invalid job file" in err

    def test_extra_keys_rejected(self, write_job, capsys):
        job = write_job({"groups": CUBES, "container": CUBE_SPACE, "colour": "red"})
        assert run(["pack", job], capsys)[0] == EXIT_INPUT

    def test_missing_file(self, tmp_path, capsys):
        code, _, err = run(["tile", str(tmp_path / "nope.yaml")], capsys)
        assert code == EXIT_INPUT
        assert "Cannot read" in err

    def test_unparsable_file(self, tmp_path, capsys):
        path = tmp_path / "job.json"
        path.write_text("{not json")
        assert run(["tile", str(path)], capsys)[0] == EXIT_INPUT

    def test_unknown_preset(self, write_job, capsys):
        job = write_job({"carton": {"length": 1, "width": 1, "height": 1},
                         "space": {"preset": "moon base"}})
        code, _, err = run(["tile", job], capsys)
        assert code == EXIT_INPUT
        assert "Unknown preset" in err

    def test_unknown_algorithm(self, write_job, capsys):
        job = write_job({"items": [{"id": "a", "length": 1, "width": 1, "height": 1}],
                         "container": CUBE_SPACE, "algorithm": "tetris"})
        assert run(["general", job], capsys)[0] == EXIT_INPUT

    def test_bad_engine_config(self, write_job, tmp_path, capsys):
        config = tmp_path / "engine.yaml"
        config.write_text("resolution: 10\n")
        job = write_job({"groups": CUBES, "container": CUBE_SPACE})
        assert run(["pack", job, "--config", str(config)], capsys)[0] == EXIT_INPUT

    def test_method_choices(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["recommend", "job.yaml", "--method", "magic"])
