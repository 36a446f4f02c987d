import json
import os
import sys

import matplotlib
matplotlib.use("Agg")
sys.path.insert(0, os.path.abspath(os.path.join(os.path.dirname(__file__), "..", "src")))

import arcview

TRIANGLE = "M 0 0 L 10 0 L 10 10 Z"


def test_summary_for_path_data(capsys):
    assert arcview.main(["--svg-path", TRIANGLE, "--no-view"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Loaded segments: 3 (Line: 3)"
    assert out[1] == "Bounds: min=(0,0) max=(10,10)"
    assert out[2] == "Signed area (closed subpaths): 50"
    assert out[3] == "Path: M 0 0 L 10 0 L 10 10 L 0 0"


def test_transform_option(capsys):
    assert arcview.main(["--svg-path", "M 0 0 A 5 5 0 0 1 10 0", "--transform", "scale(2)", "--no-view"]) == 0
    out = capsys.readouterr().out.splitlines()
    assert out[0] == "Loaded segments: 1 (Arc: 1)"
    assert out[3] == "Path: M 0 0 A 10 10 0 0 1 20 0"


def test_json_export_and_reload(tmp_path, capsys):
    target = tmp_path / "out.json"
    assert arcview.main(["--svg-path", TRIANGLE, "--no-view", "--export-json", str(target)]) == 0
    assert len(json.loads(target.read_text(encoding="utf-8"))["segments"]) == 3
    capsys.readouterr()

    assert arcview.main(["--input", str(target), "--no-view"]) == 0
    assert capsys.readouterr().out.startswith("Loaded segments: 3")


def test_failures_return_nonzero(tmp_path, capsys):
    assert arcview.main(["--svg-path", TRIANGLE, "--transform", "spin(3)", "--no-view"]) == 1
    assert arcview.main(["--svg-path", "M 5 5", "--no-view"]) == 1
    assert arcview.main(["--input", str(tmp_path / "missing.svg"), "--no-view"]) == 1
    broken = tmp_path / "broken.svg"
    broken.write_text("<svg><path d=", encoding="utf-8")
    assert arcview.main(["--input", str(broken), "--no-view"]) == 1
    bad = tmp_path / "bad.json"
    bad.write_text("{}", encoding="utf-8")
    assert arcview.main(["--input", str(bad), "--no-view"]) == 1
    assert capsys.readouterr().out == ""
