"""
Turning world snapshots into pictures.
"""

from .visualize import FrameConfig, WorldVisualizer, animate, render_frame, save_frame

__all__ = ["FrameConfig", "WorldVisualizer", "animate", "render_frame", "save_frame"]
