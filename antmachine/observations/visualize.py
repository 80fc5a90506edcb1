"""
observations/visualize.py

Watch the trail form.

A frame is a fixed-resolution RGBA grid: dark ground, grey scent
fading with its power, white ants on top.

Inspired by:
- Framebuffer pixel plotting
- Nature documentaries
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Optional, TYPE_CHECKING
import logging

import numpy as np

from antmachine.environments.world import WorldSnapshot

if TYPE_CHECKING:
    from antmachine.services.runner import SimulationRunner

logger = logging.getLogger(__name__)

BACKGROUND = (0x00, 0x00, 0x00, 0xFF)
ANT_COLOR = (0xFF, 0xFF, 0xFF, 0xFF)


@dataclass
class FrameConfig:
    """Pixel grid the unit square is mapped onto."""
    width: int = 256
    height: int = 256
    pheromone_scale: float = 128.0   # Grey level of a full-power pheromone
    mirror_x: bool = True            # Column 0 is x = 1


def _to_pixels(
    positions: np.ndarray,
    config: FrameConfig
) -> tuple[np.ndarray, np.ndarray, np.ndarray]:
    """
    Map unit-square positions to (rows, cols, visible mask).

    Points that fall outside the grid are masked out, not clamped.
    """
    if len(positions) == 0:
        empty = np.zeros(0, dtype=np.int64)
        return empty, empty, np.zeros(0, dtype=bool)

    xs = positions[:, 0] * config.width
    if config.mirror_x:
        xs = config.width - xs
    ys = positions[:, 1] * config.height

    finite = np.isfinite(xs) & np.isfinite(ys)
    cols = np.zeros(len(xs), dtype=np.int64)
    rows = np.zeros(len(ys), dtype=np.int64)
    # Truncate toward zero, as an integer cast does
    cols[finite] = np.trunc(xs[finite]).astype(np.int64)
    rows[finite] = np.trunc(ys[finite]).astype(np.int64)

    visible = (
        finite
        & (xs >= 0) & (ys >= 0)
        & (cols < config.width) & (rows < config.height)
    )
    return rows, cols, visible


def render_frame(
    snapshot: WorldSnapshot,
    config: Optional[FrameConfig] = None
) -> np.ndarray:
    """
    Paint a snapshot into a (height, width, 4) uint8 RGBA array.

    Pheromones first, ants last, so ants are always visible.
    """
    config = config or FrameConfig()
    if config.width <= 0 or config.height <= 0:
        raise ValueError(
            f"Frame size must be positive, got {config.width}x{config.height}"
        )

    frame = np.empty((config.height, config.width, 4), dtype=np.uint8)
    frame[:, :] = BACKGROUND

    rows, cols, visible = _to_pixels(snapshot.pheromone_positions, config)
    grey = np.clip(snapshot.pheromone_powers * config.pheromone_scale, 0, 255).astype(np.uint8)
    frame[rows[visible], cols[visible], 0] = grey[visible]
    frame[rows[visible], cols[visible], 1] = grey[visible]
    frame[rows[visible], cols[visible], 2] = grey[visible]

    rows, cols, visible = _to_pixels(snapshot.ant_positions, config)
    frame[rows[visible], cols[visible]] = ANT_COLOR

    return frame


def save_frame(
    snapshot: WorldSnapshot,
    path: str,
    config: Optional[FrameConfig] = None
) -> np.ndarray:
    """Render a snapshot and write it to path as an image at frame resolution."""
    import matplotlib.pyplot as plt

    frame = render_frame(snapshot, config)
    plt.imsave(path, frame)
    logger.info(f"Saved tick {snapshot.time} frame to {path}")
    return frame


class WorldVisualizer:
    """
    Shows frames in a matplotlib window.

    Reads only snapshots, so it never sees a world mid-tick.
    """

    def __init__(
        self,
        runner: SimulationRunner,
        frame_config: Optional[FrameConfig] = None,
        figsize: tuple = (8, 8)
    ):
        self.runner = runner
        self.frame_config = frame_config or FrameConfig()
        self.figsize = figsize

        # Lazy import matplotlib
        self._plt = None
        self._fig = None
        self._ax = None
        self._image = None

    def _setup_plot(self):
        """Initialize matplotlib figure."""
        import matplotlib.pyplot as plt
        self._plt = plt

        self._fig, self._ax = plt.subplots(figsize=self.figsize)
        self._ax.set_axis_off()
        self._fig.patch.set_facecolor('black')
        if self._fig.canvas.manager is not None:
            self._fig.canvas.manager.set_window_title("Ants!")

    def render(self) -> np.ndarray:
        """Draw the latest snapshot and return the frame shown."""
        if self._plt is None:
            self._setup_plot()

        snapshot = self.runner.snapshot()
        frame = render_frame(snapshot, self.frame_config)

        if self._image is None:
            self._image = self._ax.imshow(frame, interpolation='nearest')
        else:
            self._image.set_data(frame)

        self._ax.set_title(
            f"Tick: {snapshot.time} | Ants: {snapshot.num_ants} | "
            f"Pheromones: {snapshot.num_pheromones}",
            color='white', fontsize=12
        )

        self._plt.pause(0.001)
        return frame

    def close(self) -> None:
        """Close the visualization."""
        if self._plt is not None:
            self._plt.close(self._fig)


def animate(
    runner: SimulationRunner,
    frames: Optional[int] = None,
    frame_config: Optional[FrameConfig] = None
) -> None:
    """
    Tick in the background and draw frames until frames are drawn or the window closes.

    frames=None keeps drawing while the figure is open.
    """
    viz = WorldVisualizer(runner, frame_config)
    runner.start()

    try:
        drawn = 0
        while frames is None or drawn < frames:
            viz.render()
            drawn += 1
            if not viz._plt.fignum_exists(viz._fig.number):
                logger.info("Window closed")
                break

    finally:
        runner.stop()
        viz.close()
