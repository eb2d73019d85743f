# export.py
"""
Snapshot export for the accumulated flow-field artwork.

PNG snapshots are a raster copy of the persistent trail canvas. SVG
snapshots are a vector rendition rebuilt from the segments recorded
since the current generation began.
"""
import logging
import os
import numpy as np
import pygame
import svgwrite
from typing import List, Optional, Tuple

from constants import BACKGROUND_COLOR, STROKE_COLOR, PNG_FILENAME, SVG_FILENAME, SVG_MAX_SEGMENTS
from particle import SegmentBatch

# --- Data Contracts ---
#
# class SegmentRecorder:
#   - record(self, batch: SegmentBatch) -> None:
#     - Stores the non-zero-length segments of one tick until
#       `max_segments` is reached; afterwards records nothing and warns once.
#   - clear(self) -> None: Forgets everything (new generation).
#
# export_png(surface: pygame.Surface, path: str) -> str
# export_svg(recorder, width, height, path) -> str
# export_snapshot(fmt, surface, recorder, directory) -> str:
#   - fmt is "png" or "svg"; anything else raises ValueError.
#   - Outputs: the path written.

SUPPORTED_FORMATS = ('png', 'svg')


class SegmentRecorder:
    """
    Bounded in-memory log of emitted segments, grouped per tick.
    """
    def __init__(self, max_segments: int = SVG_MAX_SEGMENTS):
        self.max_segments = max_segments
        self.chunks: List[Tuple[np.ndarray, np.ndarray, int, float]] = []
        self.segment_count = 0
        self.full = False

    def record(self, batch: SegmentBatch) -> None:
        if self.full:
            return
        moving = np.any(batch.starts != batch.ends, axis=1)
        starts = batch.starts[moving]
        ends = batch.ends[moving]

        room = self.max_segments - self.segment_count
        if starts.shape[0] > room:
            starts, ends = starts[:room], ends[:room]
            self.full = True
            logging.warning(
                f"Segment recorder reached its limit of {self.max_segments} segments. "
                "Later strokes will be missing from SVG exports."
            )
        if starts.shape[0]:
            self.chunks.append((starts, ends, batch.opacity, batch.weight))
            self.segment_count += starts.shape[0]

    def clear(self) -> None:
        self.chunks = []
        self.segment_count = 0
        self.full = False


def _ensure_parent(path: str) -> None:
    parent = os.path.dirname(path)
    if parent:
        os.makedirs(parent, exist_ok=True)


def export_png(surface: pygame.Surface, path: str = PNG_FILENAME) -> str:
    """Saves the trail canvas as a raster image."""
    _ensure_parent(path)
    pygame.image.save(surface, path)
    logging.info(f"PNG snapshot saved to {path}.")
    return path


def export_svg(recorder: SegmentRecorder, width: int, height: int,
               path: str = SVG_FILENAME) -> str:
    """Writes the recorded segments as SVG line elements."""
    _ensure_parent(path)
    # Attribute validation is far too slow for hundreds of thousands of lines.
    drawing = svgwrite.Drawing(path, size=(width, height), debug=False)
    drawing.add(drawing.rect(insert=(0, 0), size=("100%", "100%"),
                             fill=svgwrite.rgb(*BACKGROUND_COLOR)))

    stroke = svgwrite.rgb(*STROKE_COLOR)
    for starts, ends, opacity, weight in recorder.chunks:
        group = drawing.g(
            stroke=stroke,
            stroke_width=weight,
            stroke_opacity=round(opacity / 255.0, 4),
            stroke_linecap='round',
            fill='none'
        )
        for (x1, y1), (x2, y2) in zip(starts.round(2).tolist(), ends.round(2).tolist()):
            group.add(drawing.line(start=(x1, y1), end=(x2, y2)))
        drawing.add(group)

    drawing.save()
    logging.info(f"SVG snapshot with {recorder.segment_count} segments saved to {path}.")
    return path


def export_snapshot(fmt: str, surface: pygame.Surface,
                    recorder: Optional[SegmentRecorder] = None,
                    directory: str = ".") -> str:
    """
    Exports the current artwork in the host-selected format.
    """
    fmt = fmt.lower()
    if fmt not in SUPPORTED_FORMATS:
        raise ValueError(f"Unsupported export format '{fmt}'. Expected one of {SUPPORTED_FORMATS}.")

    if fmt == 'png':
        return export_png(surface, os.path.join(directory, PNG_FILENAME))

    if recorder is None:
        raise ValueError("SVG export needs a SegmentRecorder.")
    width, height = surface.get_size()
    return export_svg(recorder, width, height, os.path.join(directory, SVG_FILENAME))
