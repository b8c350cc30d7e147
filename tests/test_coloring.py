import numpy as np
import pytest

from fractl import ConfigurationError
from fractl.rendering.coloring import Gradient, apply_color_map, get_gradient, list_gradients


def test_grayscale_endpoints_and_midpoint():
    gradient = get_gradient('grayscale')
    assert gradient(0.0) == (0, 0, 0)
    assert gradient(1.0) == (255, 255, 255)
    assert gradient(0.5) == (128, 128, 128)


def test_inverted_grayscale():
    gradient = get_gradient('inverted_grayscale')
    assert gradient(0.0) == (255, 255, 255)
    assert gradient(1.0) == (0, 0, 0)


def test_positions_are_clamped():
    gradient = get_gradient('grayscale')
    assert gradient(-3.0) == gradient(0.0)
    assert gradient(7.0) == gradient(1.0)


def test_multi_stop_interpolation():
    gradient = Gradient([(1.0, 0.0, 0.0), (0.0, 1.0, 0.0), (0.0, 0.0, 1.0)])
    assert gradient(0.5) == (0, 255, 0)
    assert gradient(0.25) == (128, 128, 0)
    assert gradient(1.0) == (0, 0, 255)


@pytest.mark.parametrize("name", list_gradients())
def test_named_gradients_produce_byte_triples(name):
    gradient = get_gradient(name)
    for t in np.linspace(0.0, 1.0, 11):
        color = gradient(t)
        assert len(color) == 3
        assert all(isinstance(c, int) and 0 <= c <= 255 for c in color)


def test_gradient_names_are_case_insensitive():
    assert get_gradient(' Inferno ')(0.3) == get_gradient('inferno')(0.3)


def test_unknown_gradient():
    with pytest.raises(ConfigurationError, match="Please choose one of"):
        get_gradient('sepia')


@pytest.mark.parametrize("colors", [
    [(0.0, 0.0, 0.0)],
    [(0.0, 0.0), (1.0, 1.0)],
    [(0.0, 0.0, 0.0), (1.5, 0.0, 0.0)],
])
def test_invalid_gradient_stops(colors):
    with pytest.raises(ConfigurationError):
        Gradient(colors)


def test_apply_color_map_evaluates_each_count_once():
    calls = []

    def color_map(t):
        calls.append(t)
        return (int(t * 100), 0, 255)

    counts = np.array([[0, 5, 10], [10, 5, 5]], dtype=np.int64)
    pixels = apply_color_map(counts, 10, color_map)

    assert sorted(calls) == [0.0, 0.5, 1.0]
    assert pixels.shape == (2, 3, 3)
    assert pixels.dtype == np.uint8
    assert pixels[0].tolist() == [[0, 0, 255], [50, 0, 255], [100, 0, 255]]
    assert pixels[1].tolist() == [[100, 0, 255], [50, 0, 255], [50, 0, 255]]


def test_apply_color_map_on_empty_band():
    pixels = apply_color_map(np.empty((0, 4), dtype=np.int64), 10, lambda t: (0, 0, 0))
    assert pixels.shape == (0, 4, 3)


def test_apply_color_map_requires_triples():
    with pytest.raises(ValueError):
        apply_color_map(np.array([[1, 2]]), 2, lambda t: (0, 0))
