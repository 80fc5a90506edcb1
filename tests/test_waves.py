"""
Tests for waves.py
"""

import math

import pytest

from antmachine.waves import saw


class TestSaw:
    """Tests for saw."""

    def test_absolute_peaks_and_trough(self):
        assert saw(0.0, 0.0, 1.0, 1.0) == pytest.approx(1.0)
        assert saw(0.5, 0.0, 1.0, 1.0) == pytest.approx(0.0)
        assert saw(0.25, 0.0, 1.0, 2.0) == pytest.approx(1.0)

    def test_absolute_range(self):
        for i in range(100):
            value = saw(i * 0.37, 0.0, 3.0, 5.0, absolute=True)
            assert 0.0 <= value <= 5.0

    def test_bipolar(self):
        assert saw(0.0, 0.0, 1.0, 4.0, absolute=False) == pytest.approx(1.0)
        assert saw(0.5, 0.0, 1.0, 4.0, absolute=False) == pytest.approx(-1.0)
        assert saw(0.25, 0.0, 1.0, 4.0, absolute=False) == pytest.approx(0.0)

    def test_phase_shifts(self):
        assert saw(0.0, 0.5, 1.0, 1.0) == pytest.approx(saw(0.5, 0.0, 1.0, 1.0))

    def test_periodic(self):
        assert saw(2.3, 0.0, 1.0, 1.0) == pytest.approx(saw(0.3, 0.0, 1.0, 1.0))

    def test_negative_state_truncates_toward_zero(self):
        """fmod keeps the sign of the dividend."""
        assert saw(-0.25, 0.0, 1.0, 1.0) == pytest.approx(1.5)

    def test_zero_length_is_nan(self):
        assert math.isnan(saw(1.0, 0.0, 0.0, 1.0))
        assert math.isnan(saw(1.0, 0.0, 0.0, 1.0, absolute=False))

    def test_returns_plain_float(self):
        assert type(saw(0.3, 0.0, 1.0, 1.0)) is float
