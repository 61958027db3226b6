"""End-to-end tests for the command-line entry point."""

import numpy as np
import pytest
import requests

from poly_painter import image_io, main


@pytest.fixture
def source_path(tmp_path, gradient_image):
    path = str(tmp_path / "source.png")
    image_io.save_image(gradient_image, path)
    return path


def test_defaults():
    args = main.build_parser().parse_args([])
    cfg = main.config_from_args(args)
    assert args.cyclecount == 5000
    assert args.query == "blue"
    assert cfg.fill and cfg.stroke
    assert cfg.dest_width == 1920 and cfg.dest_height == 1080


def test_flags_map_to_config():
    args = main.build_parser().parse_args([
        "-W", "320", "-H", "200", "--strokeratio", "0.5", "--initialalpha", "2",
        "--strokereduction", "0.01", "--alphaincrease", "0.5",
        "--strokeinversionthreshold", "0.2", "-j", "10", "--min", "4", "--max", "6",
        "-r", "1.5", "-s", "Hexagon", "--nofill", "--nostroke",
    ])
    cfg = main.config_from_args(args)
    assert (cfg.dest_width, cfg.dest_height) == (320, 200)
    assert cfg.stroke_ratio == 0.5
    assert cfg.initial_alpha == 2.0
    assert cfg.stroke_reduction == 0.01
    assert cfg.alpha_increase == 0.5
    assert cfg.stroke_inversion_threshold == 0.2
    assert cfg.stroke_jitter == 10
    assert (cfg.min_edge_count, cfg.max_edge_count) == (4, 6)
    assert cfg.rotation_jitter == 1.5
    assert cfg.shape.value == "hexagon"
    assert not cfg.fill and not cfg.stroke


def test_run_from_file(tmp_path, source_path):
    out = str(tmp_path / "painted.png")
    code = main.main([
        "-i", source_path, "-o", out, "-W", "80", "-H", "60", "-j", "5",
        "--initialalpha", "20", "--cyclecount", "50", "--seed", "3",
    ])
    assert code == 0
    img = image_io.load_image(out)
    assert img.shape == (60, 80, 3)
    assert img.any()


def test_seed_makes_runs_identical(tmp_path, source_path):
    outs = []
    for name in ("a.png", "b.png"):
        out = str(tmp_path / name)
        argv = ["-i", source_path, "-o", out, "-W", "40", "-H", "30", "--cyclecount", "30",
                "--initialalpha", "30", "--seed", "99"]
        assert main.main(argv) == 0
        outs.append(image_io.load_image(out))
    assert np.array_equal(*outs)


def test_zero_cycles_writes_black_image(tmp_path, source_path):
    out = str(tmp_path / "black.png")
    assert main.main(["-i", source_path, "-o", out, "-W", "100", "-H", "100",
                      "-s", "circle", "--cyclecount", "0"]) == 0
    img = image_io.load_image(out)
    assert img.shape == (100, 100, 3)
    assert not img.any()


def test_default_output_name(tmp_path, source_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    assert main.main(["-i", source_path, "-W", "20", "-H", "20", "-s", "square",
                      "--cyclecount", "5"]) == 0
    written = list(tmp_path.glob("square_*.png"))
    assert len(written) == 1


def test_invalid_config_exit_code(tmp_path, source_path):
    assert main.main(["-i", source_path, "--min", "7", "--max", "4"]) == 2
    assert main.main(["-i", source_path, "-W", "0"]) == 2
    assert main.main(["-i", source_path, "-s", "star"]) == 2
    assert main.main(["-i", source_path, "--cyclecount", "-1"]) == 2
    assert main.main(["-i", source_path, "--initialalpha", "inf"]) == 2
    assert main.main(["-i", source_path, "-r", "nan"]) == 2


def test_missing_input_exit_code(tmp_path):
    assert main.main(["-i", str(tmp_path / "missing.png"), "--cyclecount", "1"]) == 1


def test_fetch_failure_exit_code(monkeypatch):
    def fail(*args, **kwargs):
        raise requests.ConnectionError("offline")

    monkeypatch.setattr(main, "fetch_random_image", fail)
    assert main.main(["--cyclecount", "1"]) == 1


def test_fetches_when_no_input(tmp_path, monkeypatch, gradient_image):
    requested = {}

    def fake_fetch(width, height, query):
        requested.update(width=width, height=height, query=query)
        return gradient_image

    monkeypatch.setattr(main, "fetch_random_image", fake_fetch)
    out = str(tmp_path / "fetched.png")
    assert main.main(["-o", out, "-W", "32", "-H", "24", "-q", "cats", "--cyclecount", "3"]) == 0
    assert requested == {"width": 32, "height": 24, "query": "cats"}


def test_write_failure_exit_code(tmp_path, source_path):
    out = str(tmp_path / "no" / "such" / "dir" / "out.png")
    assert main.main(["-i", source_path, "-o", out, "-W", "20", "-H", "20",
                      "--cyclecount", "2"]) == 1


def test_legacy_flag_spellings():
    args = main.build_parser().parse_args(["-w", "640", "--strokeinversiontreshold", "0.3"])
    cfg = main.config_from_args(args)
    assert cfg.dest_width == 640
    assert cfg.stroke_inversion_threshold == 0.3
