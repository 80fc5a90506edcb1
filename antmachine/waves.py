"""
waves.py

Waves from an ever-rising value: feed it a clock, get a pulse.
"""

import numpy as np


def saw(state: float, phase: float, length: float, amplitude: float, absolute: bool = True) -> float:
    """
    Wave value at state, shifted by phase, repeating every length.

    absolute=True ranges over [0, amplitude];
    absolute=False ranges over [-amplitude/4, amplitude/4], centered on zero.
    A zero length gives NaN rather than an error.
    """
    with np.errstate(divide="ignore", invalid="ignore"):
        shifted = np.float64(state) + np.float64(phase)
        position = np.fmod(shifted, np.float64(length)) / np.float64(length)
    value = abs(position - 0.5) * 2
    if absolute:
        return float(value * amplitude)
    return float((value - 0.5) * (amplitude / 2))
