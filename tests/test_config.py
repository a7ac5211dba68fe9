from pathlib import Path

import pytest

from termbrot.config import (
    BenchmarkConfig,
    ViewerConfig,
    default_viewer_config,
    get_config_by_index,
    load_named_sweep_configs,
    load_sweep_configs,
    load_viewer_config,
    parse_viewport,
)

ROOT = Path(__file__).resolve().parents[1]


def test_defaults_build_default_camera():
    config = default_viewer_config()
    camera = config.make_camera()
    assert camera.center == (-0.5, 0.0)
    assert camera.scale == 0.05
    assert camera.max_iterations == 100
    assert camera.limits.zoom_factor == 0.8


def test_overrides_are_coerced():
    config = default_viewer_config(center=[0.1, -0.2], scale="0.01", workers="4")
    assert config.center == (0.1, -0.2)
    assert config.scale == 0.01
    assert config.workers == 4


@pytest.mark.parametrize(
    "overrides",
    [
        {"scale": 0.0},
        {"max_iterations": 0},
        {"zoom_factor": 2.0},
        {"ramp": "rainbow"},
        {"schedule": "mpi"},
        {"center": [1.0]},
        {"frobnicate": True},
    ],
)
def test_invalid_viewer_config(overrides):
    with pytest.raises(ValueError):
        default_viewer_config(**overrides)


def test_load_viewer_config(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text("center: [-0.75, 0.1]\nmax_iterations: 250\nramp: fire\nshow_status: false\n")
    config = load_viewer_config(path)
    assert config.center == (-0.75, 0.1)
    assert config.max_iterations == 250
    assert config.ramp == "fire"
    assert config.show_status is False
    assert config.scale == ViewerConfig().scale


def test_load_empty_viewer_config(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text("")
    assert load_viewer_config(path) == ViewerConfig()


def test_load_viewer_config_rejects_non_mapping(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text("- 1\n- 2\n")
    with pytest.raises(ValueError):
        load_viewer_config(path)


def test_shipped_viewer_config_loads():
    config = load_viewer_config(ROOT / "configs" / "viewer.yaml")
    assert config.render_settings().schedule == "dynamic"


def test_parse_viewport():
    assert parse_viewport("80x24") == (80, 24)
    assert parse_viewport(" 120 X 40 ") == (120, 40)


def test_sweep_expansion():
    configs = load_sweep_configs(Path(__file__).parent / "test_configs.yaml")
    assert len(configs) == 16
    assert {c.viewport for c in configs} == {"17x9", "64x21", "33x1", "1x7"}
    assert all(c.max_iterations == 80 and c.repeats == 1 for c in configs)
    assert {c.center for c in configs} == {(-0.5, 0.0), (-0.7453, 0.1127)}


def test_named_suites():
    suites = dict(load_named_sweep_configs(ROOT / "configs" / "benchmarks.yaml"))
    assert set(suites) == {"TESTS", "schedules", "chunks", "seahorse", "halfblock"}
    assert len(suites["TESTS"]) == 4
    assert len(suites["schedules"]) == 2 * 4 * 3
    assert [c.chunk_size for c in suites["chunks"]] == [1, 2, 4, 8, 16, 32]
    assert all(c.schedule == "dynamic" and c.workers == 4 for c in suites["chunks"])
    assert [c.halfblock for c in suites["halfblock"]] == [False, False, True, True]


def test_unknown_suite():
    with pytest.raises(ValueError, match="not found"):
        load_named_sweep_configs(ROOT / "configs" / "benchmarks.yaml", "nope")


def test_config_by_index(tmp_path):
    path = tmp_path / "sweep.yaml"
    path.write_text("sweep:\n  viewport: [80, 24]\n  max_iterations: [50, 100]\n")
    config = get_config_by_index(path, 1)
    assert (config.columns, config.rows, config.max_iterations) == (80, 24, 100)
    with pytest.raises(ValueError):
        get_config_by_index(path, 2)


def test_sweep_without_viewport_is_rejected(tmp_path):
    path = tmp_path / "sweep.yaml"
    path.write_text("sweep:\n  max_iterations: [50]\n")
    with pytest.raises(ValueError):
        load_sweep_configs(path)


def test_benchmark_run_name_and_dict():
    config = BenchmarkConfig(columns=80, rows=24, schedule="static", workers=2)
    assert config.run_name == "static_w2_c8_it100_80x24"
    assert config.to_dict()["columns"] == 80
    assert config.dims.shape == (24, 80)


def test_sweep_with_single_center_pair(tmp_path):
    path = tmp_path / "sweep.yaml"
    path.write_text("sweep:\n  viewport: \"20x10\"\n  center: [-0.5, 0.1]\n  max_iterations: [50, 60]\n")
    configs = load_sweep_configs(path)
    assert len(configs) == 2
    assert {c.center for c in configs} == {(-0.5, 0.1)}


def test_sweep_with_list_of_centers(tmp_path):
    path = tmp_path / "sweep.yaml"
    path.write_text("sweep:\n  viewport: \"20x10\"\n  center: [[-0.5, 0.1], [0.25, 0.0]]\n")
    assert [c.center for c in load_sweep_configs(path)] == [(-0.5, 0.1), (0.25, 0.0)]


@pytest.mark.parametrize("center", [0.5, [0.5], [1, 2, 3], ["a", "b"], None])
def test_bad_center_is_a_value_error(center):
    with pytest.raises(ValueError, match="center"):
        default_viewer_config(center=center)


def test_scalar_center_in_viewer_yaml(tmp_path):
    path = tmp_path / "viewer.yaml"
    path.write_text("center: 0.5\n")
    with pytest.raises(ValueError, match="center"):
        load_viewer_config(path)


def test_scalar_center_in_sweep_defaults(tmp_path):
    path = tmp_path / "sweep.yaml"
    path.write_text("defaults:\n  center: 0.5\nsweep:\n  viewport: \"20x10\"\n")
    with pytest.raises(ValueError, match="center"):
        load_sweep_configs(path)


def test_non_numeric_option_is_a_value_error():
    with pytest.raises(ValueError, match="scale"):
        default_viewer_config(scale=None)
    with pytest.raises(ValueError, match="workers"):
        default_viewer_config(workers="four")


def test_halfblock_reaches_render_settings():
    assert default_viewer_config(halfblock=True).render_settings().halfblock is True
    config = BenchmarkConfig(columns=80, rows=24, halfblock=True)
    assert config.render_settings().halfblock is True
    assert config.run_name == "serial_w1_c8_it100_80x24_hb"
