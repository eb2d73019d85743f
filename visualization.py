# visualization.py
"""
Handles the rendering of the flow field using Pygame.

The TrailCanvas is the persistent framebuffer: it is never cleared
between frames, so the per-tick segments accumulate into trails. The
Visualizer owns the window, translates keyboard, mouse and resize events
into simulation commands, and overlays a small parameter panel.
"""
import logging
import pygame
import numpy as np
from typing import List, Optional, Tuple

from constants import (
    BACKGROUND_COLOR, STROKE_COLOR, FPS, WINDOW_CAPTION, MAX_CANVAS_SIZE, WINDOW_BACKGROUND_COLOR,
    HUD_BACKGROUND_COLOR, HUD_TEXT_COLOR, HUD_KEY_COLOR, HUD_PADDING
)
from config import ConfigurationError, validate_canvas_size
from export import SegmentRecorder, export_snapshot
from particle import SegmentBatch

# Forward reference for type hinting to avoid circular import
from typing import TYPE_CHECKING
if TYPE_CHECKING:
    from simulation import Simulation


# --- Data Contracts ---
#
# class TrailCanvas:
#   - __init__(self, width: int, height: int):
#     - Side Effects: Creates an opaque surface filled with the background
#       colour and a transparent stroke layer of the same size.
#   - draw_segments(self, batch: SegmentBatch) -> int:
#     - Draws every non-zero-length segment, returns how many were drawn.
#     - Never reads pixels back and never clears previous frames.
#   - clear(self) / resize(self, width, height)
#
# class Visualizer:
#   - __init__(self, width: int, height: int, recorder: SegmentRecorder, ...):
#     - Side Effects: Initializes Pygame and opens a resizable window.
#   - draw(self, simulation: "Simulation", batch: Optional[SegmentBatch]) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Composites the batch, handles events (which may
#       pause, regenerate, resize or export) and flips the display.

KEY_HELP = "Space pause  R new  S png  V svg  H hud  Esc quit"


def stroke_style(opacity: int, weight: float) -> Tuple[int, int]:
    """
    Maps a stroke opacity and fractional weight to (line width, alpha).

    Pygame lines have integer widths, so weights below one pixel are
    drawn one pixel wide with the alpha scaled down by the weight.
    """
    width = max(1, int(round(weight)))
    alpha = int(round(opacity * min(weight, 1.0)))
    return width, max(1, min(255, alpha))


class TrailCanvas:
    """
    Persistent framebuffer that accumulates particle trails.
    """
    def __init__(self, width: int, height: int):
        self.width, self.height = validate_canvas_size(width, height)
        self.surface = pygame.Surface((self.width, self.height))
        # Each tick is drawn here first, then alpha-blended onto the canvas.
        self.stroke_layer = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.clear()

    def clear(self) -> None:
        self.surface.fill(BACKGROUND_COLOR)

    def resize(self, width: int, height: int) -> None:
        self.width, self.height = validate_canvas_size(width, height)
        self.surface = pygame.Surface((self.width, self.height))
        self.stroke_layer = pygame.Surface((self.width, self.height), pygame.SRCALPHA)
        self.clear()
        logging.info(f"Trail canvas resized to {self.width}x{self.height} and cleared.")

    def draw_segments(self, batch: SegmentBatch) -> int:
        line_width, alpha = stroke_style(batch.opacity, batch.weight)
        color = (STROKE_COLOR[0], STROKE_COLOR[1], STROKE_COLOR[2], alpha)

        moving = np.any(batch.starts != batch.ends, axis=1)
        starts = batch.starts[moving].tolist()
        ends = batch.ends[moving].tolist()

        self.stroke_layer.fill((0, 0, 0, 0))
        for start, end in zip(starts, ends):
            pygame.draw.line(self.stroke_layer, color, start, end, line_width)
        self.surface.blit(self.stroke_layer, (0, 0))
        return len(starts)


class Visualizer:
    """
    Renders the trail canvas in a window and provides keyboard controls.
    """
    def __init__(self, width: int, height: int, recorder: SegmentRecorder,
                 show_hud: bool = True, fps: int = FPS, export_dir: str = "."):
        pygame.init()
        pygame.font.init()

        self.screen = pygame.display.set_mode((width, height), pygame.RESIZABLE)
        pygame.display.set_caption(WINDOW_CAPTION)
        self.clock = pygame.time.Clock()
        self.fps = fps

        self.canvas = TrailCanvas(width, height)
        self.recorder = recorder
        self.show_hud = show_hud
        self.export_dir = export_dir

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _canvas_offset(self) -> Tuple[int, int]:
        screen_w, screen_h = self.screen.get_size()
        return ((screen_w - self.canvas.width) // 2, (screen_h - self.canvas.height) // 2)

    def _regenerate(self, simulation: "Simulation") -> None:
        seed = simulation.regenerate()
        self.canvas.clear()
        self.recorder.clear()
        logging.info(f"Canvas regenerated by user with seed {seed}.")

    def _resize(self, simulation: "Simulation", window_w: int, window_h: int) -> None:
        size = min(window_w, window_h, MAX_CANVAS_SIZE)
        try:
            simulation.resize(size, size, respawn=True)
        except ConfigurationError:
            logging.warning(f"Ignoring resize to unusable window size {window_w}x{window_h}.")
            return
        self.screen = pygame.display.get_surface()
        self.canvas.resize(size, size)
        self.recorder.clear()

    def _export(self, fmt: str) -> None:
        try:
            export_snapshot(fmt, self.canvas.surface, self.recorder, self.export_dir)
        except (OSError, pygame.error) as e:
            logging.error(f"Could not export {fmt.upper()} snapshot: {e}")

    def handle_events(self, simulation: "Simulation") -> bool:
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                elif event.key == pygame.K_SPACE:
                    simulation.pause_resume()
                elif event.key == pygame.K_r:
                    self._regenerate(simulation)
                elif event.key == pygame.K_s:
                    self._export('png')
                elif event.key == pygame.K_v:
                    self._export('svg')
                elif event.key == pygame.K_h:
                    self.show_hud = not self.show_hud

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                off_x, off_y = self._canvas_offset()
                mx, my = event.pos
                if 0 < mx - off_x < self.canvas.width and 0 < my - off_y < self.canvas.height:
                    self._regenerate(simulation)

            if event.type == pygame.VIDEORESIZE:
                self._resize(simulation, event.w, event.h)
        return True

    def _draw_hud(self, simulation: "Simulation") -> None:
        """Renders the current parameters in a translucent box."""
        config = simulation.config
        rows: List[Tuple[str, str]] = [
            ("Seed", str(config.seed)),
            ("Particles", str(config.particle_count)),
            ("Opacity", str(config.opacity)),
            ("Weight", f"{config.stroke_weight:.2f}"),
            ("Frame", str(simulation.frame)),
            ("Status", "running" if simulation.running else "paused"),
        ]
        line_height = self.font_main.get_linesize()
        key_width = max(self.font_main_bold.size(key)[0] for key, _ in rows)
        help_surf = self.font_main.render(KEY_HELP, True, HUD_KEY_COLOR)

        box_w = max(key_width + 120, help_surf.get_width()) + HUD_PADDING * 2
        box_h = line_height * (len(rows) + 1) + HUD_PADDING * 2
        box = pygame.Surface((box_w, box_h), pygame.SRCALPHA)
        box.fill(HUD_BACKGROUND_COLOR)

        y = HUD_PADDING
        for key, value in rows:
            box.blit(self.font_main_bold.render(key, True, HUD_KEY_COLOR), (HUD_PADDING, y))
            box.blit(self.font_main.render(value, True, HUD_TEXT_COLOR), (HUD_PADDING + key_width + 12, y))
            y += line_height
        box.blit(help_surf, (HUD_PADDING, y))
        self.screen.blit(box, (HUD_PADDING, HUD_PADDING))

    def draw(self, simulation: "Simulation", batch: Optional[SegmentBatch]) -> bool:
        """
        Composites one frame and handles events.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        # 1. Accumulate this tick's strokes; the canvas is never faded
        if batch is not None:
            self.canvas.draw_segments(batch)

        # 2. Events may clear the canvas, so they come after the strokes
        if not self.handle_events(simulation):
            return False

        # 3. Blit the canvas centered in the window, then the HUD on top
        self.screen.fill(WINDOW_BACKGROUND_COLOR)
        self.screen.blit(self.canvas.surface, self._canvas_offset())
        if self.show_hud:
            self._draw_hud(simulation)

        pygame.display.flip()
        self.clock.tick(self.fps)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
