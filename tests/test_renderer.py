"""Frames, ramps and the default-view scenario."""

import numpy as np
import pytest

from termbrot.camera import CameraState, ViewportDimensions
from termbrot.frame import StyledCell
from termbrot.baseline import compute_escape_grid
from termbrot.palette import HALF_BLOCK, RAMPS, get_ramp, histogram_intensity, linear_intensity, shade
from termbrot.renderer import RenderSettings, render

DIMS = ViewportDimensions(rows=24, columns=80)


def _nearest_cell(camera, dims, target):
    cells = ((r, c) for r in range(dims.rows) for c in range(dims.columns))
    return min(cells, key=lambda rc: abs(camera.to_complex(rc[0], rc[1], dims) - target))


@pytest.mark.parametrize("shape", [(24, 80), (1, 1), (7, 3), (0, 0), (0, 80), (24, 0)])
def test_frame_shape_matches_viewport(shape):
    dims = ViewportDimensions(*shape)
    frame = render(CameraState(), dims)
    assert frame.shape == shape
    assert frame.symbols.shape == shape
    assert frame.colors.shape == shape
    assert len(frame.lines()) == shape[0]
    assert all(len(line) == shape[1] for line in frame.lines())


def test_empty_frame():
    frame = render(CameraState(), ViewportDimensions(0, 0))
    assert frame.is_empty
    assert list(frame) == []
    assert frame.escaped_fraction() == 0.0


def test_default_view_scenario():
    camera = CameraState()
    frame = render(camera, DIMS)

    origin = _nearest_cell(camera, DIMS, 0j)
    assert frame.iterations[origin] == camera.max_iterations

    outside = _nearest_cell(camera, DIMS, 2.5 + 0j)
    assert frame.iterations[outside] <= 5


@pytest.mark.parametrize("ramp", sorted(RAMPS))
@pytest.mark.parametrize("normalization", ["linear", "histogram"])
def test_interior_uses_inside_cell(ramp, normalization):
    camera = CameraState()
    frame = render(camera, DIMS, RenderSettings(ramp=ramp, normalization=normalization))
    inside = frame.iterations == camera.max_iterations
    assert inside.any() and (~inside).any()
    assert set(frame.symbols[inside].tolist()) == {RAMPS[ramp].inside_symbol}
    assert set(frame.colors[inside].tolist()) == {RAMPS[ramp].inside_color}


def test_cell_and_rows():
    camera = CameraState()
    frame = render(camera, DIMS)
    row = DIMS.rows // 2
    cells = frame.row_cells(row)
    assert len(cells) == DIMS.columns
    assert cells[0] == frame.cell(row, 0)
    assert isinstance(cells[0], StyledCell)
    assert [len(r) for r in frame] == [DIMS.columns] * DIMS.rows


@pytest.mark.parametrize("schedule", ["serial", "static", "dynamic", "parallel"])
def test_render_is_schedule_independent(schedule):
    camera = CameraState.from_center((-0.75, 0.1), 0.002, 200)
    reference = render(camera, DIMS)
    frame = render(camera, DIMS, RenderSettings(schedule=schedule, workers=3, chunk_size=5))
    np.testing.assert_array_equal(frame.iterations, reference.iterations)
    np.testing.assert_array_equal(frame.symbols, reference.symbols)
    np.testing.assert_array_equal(frame.colors, reference.colors)


def test_render_records_timing():
    frame = render(CameraState(), DIMS)
    assert set(frame.timing) == {"compute", "shade", "total"}
    assert frame.timing["total"] >= frame.timing["compute"] >= 0.0


def test_linear_ramp_is_monotonic():
    ramp = get_ramp("classic")
    iterations = np.arange(0, 100, dtype=np.uint32).reshape(1, -1)
    symbols, colors = shade(iterations, 100, ramp, "linear")
    order = [ramp.symbols.index(s) for s in symbols[0]]
    assert order == sorted(order)
    assert order[0] == 0 and order[-1] == len(ramp) - 1
    assert list(colors[0]) == [ramp.colors[i] for i in order]


def test_histogram_intensity_is_monotonic_in_count():
    rng = np.random.default_rng(7)
    iterations = rng.integers(1, 60, size=(12, 30)).astype(np.uint32)
    iterations[0, :5] = 60
    intensity = histogram_intensity(iterations, 60)

    escaped = iterations < 60
    pairs = sorted(zip(iterations[escaped].tolist(), intensity[escaped].tolist()))
    values = [value for _, value in pairs]
    assert values == sorted(values)
    assert 0.0 <= min(values) and max(values) < 1.0


def test_histogram_intensity_without_escapes():
    iterations = np.full((3, 4), 20, dtype=np.uint32)
    assert not histogram_intensity(iterations, 20).any()


def test_linear_intensity_range():
    iterations = np.array([[1, 50, 99]], dtype=np.uint32)
    np.testing.assert_allclose(linear_intensity(iterations, 100), [[0.01, 0.5, 0.99]])


def test_shading_is_deterministic():
    camera = CameraState()
    first = render(camera, DIMS, RenderSettings(normalization="histogram"))
    second = render(camera, DIMS, RenderSettings(normalization="histogram"))
    np.testing.assert_array_equal(first.symbols, second.symbols)
    np.testing.assert_array_equal(first.colors, second.colors)


@pytest.mark.parametrize(
    "kwargs",
    [{"ramp": "rainbow"}, {"normalization": "log"}, {"schedule": "mpi"}, {"chunk_size": 0}, {"workers": 0}],
)
def test_invalid_render_settings(kwargs):
    with pytest.raises(ValueError):
        RenderSettings(**kwargs)


@pytest.mark.parametrize("shape", [(24, 80), (7, 3), (1, 1), (0, 0), (0, 80), (24, 0)])
def test_halfblock_frame_shape(shape):
    dims = ViewportDimensions(*shape)
    frame = render(CameraState(), dims, RenderSettings(halfblock=True))
    assert frame.halfblock
    assert frame.shape == shape
    assert frame.symbols.shape == frame.colors.shape == frame.background.shape == shape
    assert frame.samples.shape == (2 * shape[0], shape[1])
    assert set(frame.symbols.ravel().tolist()) <= {HALF_BLOCK}
    assert len(frame.lines()) == shape[0]


def test_halfblock_samples_sit_at_half_rows():
    camera = CameraState.from_center((-0.75, 0.1), 0.01, 120)
    frame = render(camera, DIMS, RenderSettings(halfblock=True))

    # Top samples share the plain render's rows (even row count).
    np.testing.assert_array_equal(frame.iterations, render(camera, DIMS).iterations)

    sample_dims = ViewportDimensions(rows=2 * DIMS.rows, columns=DIMS.columns)
    expected = compute_escape_grid(camera.subsampled(2), sample_dims)
    np.testing.assert_array_equal(frame.samples, expected)
    np.testing.assert_array_equal(frame.iterations, expected[0::2])


def test_halfblock_colors_split_top_and_bottom():
    camera = CameraState()
    frame = render(camera, DIMS, RenderSettings(halfblock=True, ramp="ocean", normalization="histogram"))
    _, colors = shade(frame.samples, camera.max_iterations, get_ramp("ocean"), "histogram")
    np.testing.assert_array_equal(frame.colors, colors[0::2])
    np.testing.assert_array_equal(frame.background, colors[1::2])

    row = DIMS.rows // 2
    cell = frame.cell(row, 0)
    assert cell == StyledCell(HALF_BLOCK, int(colors[2 * row, 0]), int(colors[2 * row + 1, 0]))
    assert render(camera, DIMS).cell(row, 0).background is None


@pytest.mark.parametrize("schedule", ["static", "dynamic", "parallel"])
def test_halfblock_is_schedule_independent(schedule):
    camera = CameraState.from_center((-0.75, 0.1), 0.002, 200)
    reference = render(camera, DIMS, RenderSettings(halfblock=True))
    frame = render(camera, DIMS, RenderSettings(halfblock=True, schedule=schedule, workers=3, chunk_size=5))
    np.testing.assert_array_equal(frame.samples, reference.samples)
    np.testing.assert_array_equal(frame.background, reference.background)
