import numpy as np
import pygame
import pytest

from config import ConfigurationError
from particle import SegmentBatch
from visualization import TrailCanvas, stroke_style


@pytest.fixture
def canvas():
    pygame.init()
    return TrailCanvas(100, 100)


def _batch(starts, ends, opacity=255, weight=1.0):
    return SegmentBatch(np.array(starts, dtype=float), np.array(ends, dtype=float), opacity, weight)


def _rgb(surface, x, y):
    return tuple(surface.get_at((x, y)))[:3]


@pytest.mark.parametrize("opacity,weight,expected", [
    (10, 0.3, (1, 3)),
    (100, 2.6, (3, 100)),
    (255, 10.0, (10, 255)),
    (1, 0.1, (1, 1)),
    (200, 1.0, (1, 200)),
])
def test_stroke_style(opacity, weight, expected):
    assert stroke_style(opacity, weight) == expected


def test_canvas_starts_white(canvas):
    assert _rgb(canvas.surface, 50, 50) == (255, 255, 255)


def test_opaque_line_is_drawn(canvas):
    drawn = canvas.draw_segments(_batch([[10, 50]], [[90, 50]]))
    assert drawn == 1
    assert _rgb(canvas.surface, 50, 50) == (0, 0, 0)
    assert _rgb(canvas.surface, 50, 20) == (255, 255, 255)


def test_translucent_line_blends(canvas):
    canvas.draw_segments(_batch([[10, 50]], [[90, 50]], opacity=128))
    r, g, b = _rgb(canvas.surface, 50, 50)
    assert 100 < r < 160
    assert r == g == b


def test_zero_length_segments_are_skipped(canvas):
    drawn = canvas.draw_segments(_batch([[40, 40], [10, 10]], [[40, 40], [10, 30]]))
    assert drawn == 1
    assert _rgb(canvas.surface, 40, 40) == (255, 255, 255)


def test_trails_accumulate_across_frames(canvas):
    canvas.draw_segments(_batch([[10, 20]], [[90, 20]]))
    canvas.draw_segments(_batch([[10, 70]], [[90, 70]]))
    assert _rgb(canvas.surface, 50, 20) == (0, 0, 0)
    assert _rgb(canvas.surface, 50, 70) == (0, 0, 0)


def test_clear_restores_background(canvas):
    canvas.draw_segments(_batch([[10, 50]], [[90, 50]]))
    canvas.clear()
    assert _rgb(canvas.surface, 50, 50) == (255, 255, 255)


def test_resize(canvas):
    canvas.resize(60, 40)
    assert canvas.surface.get_size() == (60, 40)
    assert canvas.stroke_layer.get_size() == (60, 40)


def test_invalid_canvas_size():
    with pytest.raises(ConfigurationError):
        TrailCanvas(0, 10)
