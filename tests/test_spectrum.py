"""
Unit tests for the single-sided spectrum.

Tests verify:
- Bin count and frequency axis for even and odd lengths
- DC and Nyquist bins are not doubled, all others are
- Reconstruction of the time signal for even and odd lengths
- Axis handling for multichannel signals
- Optional plotting
"""

import matplotlib.pyplot as plt
import numpy as np
import pytest

from wfs_toolbox import InvalidArgumentError, WFSConfig
from wfs_toolbox.analysis import signal_from_spectrum, spectrum_from_signal


def full_spectrum(amplitude, phase, n):
    """Double-sided DFT rebuilt from a single-sided spectrum."""
    half = amplitude * n
    half[1 : (n + 1) // 2] /= 2
    positive = half * np.exp(1j * phase)
    mirrored = np.conj(positive[1 : (n + 1) // 2][::-1])
    return np.concatenate([positive, mirrored])


class TestSpectrumBins:
    """Tests for the frequency axis and amplitude scaling."""

    @pytest.mark.parametrize("n,bins", [(8, 5), (9, 5), (1, 1), (2, 2)])
    def test_number_of_bins(self, n, bins):
        """Test N//2 + 1 bins, Nyquist included for even N."""
        amplitude, phase, f = spectrum_from_signal(np.ones(n), WFSConfig())
        assert amplitude.shape == phase.shape == f.shape == (bins,)

    def test_frequency_axis(self):
        """Test bins are spaced by fs/N."""
        conf = WFSConfig(fs=48000)
        _, _, f = spectrum_from_signal(np.zeros(480), conf)
        assert f[0] == 0
        assert f[1] == pytest.approx(100.0)
        assert f[-1] == pytest.approx(24000.0)

    def test_dc_is_not_doubled(self):
        """Test a constant signal has its value at DC."""
        amplitude, _, _ = spectrum_from_signal(np.full(16, 2.0))
        assert amplitude[0] == pytest.approx(2.0)
        np.testing.assert_allclose(amplitude[1:], 0.0, atol=1e-12)

    def test_sine_amplitude_and_phase(self):
        """Test a sine on a bin has unit amplitude and -pi/2 phase."""
        n, k = 64, 5
        s = np.sin(2 * np.pi * k * np.arange(n) / n)
        amplitude, phase, _ = spectrum_from_signal(s)
        assert amplitude[k] == pytest.approx(1.0)
        assert phase[k] == pytest.approx(-np.pi / 2)

    def test_nyquist_is_not_doubled(self):
        """Test an alternating signal has unit amplitude at Nyquist."""
        s = np.tile([1.0, -1.0], 8)
        amplitude, _, _ = spectrum_from_signal(s)
        assert amplitude[-1] == pytest.approx(1.0)


class TestSpectrumRoundTrip:
    """Tests for reconstructing the signal."""

    @pytest.mark.parametrize("n", [64, 65, 2, 3])
    def test_double_sided_reconstruction(self, n):
        """Test the mirrored spectrum inverse-transforms to the signal."""
        s = np.random.default_rng(n).standard_normal(n)
        amplitude, phase, _ = spectrum_from_signal(s)
        rebuilt = np.fft.ifft(full_spectrum(amplitude, phase, n))
        np.testing.assert_allclose(rebuilt.real, s, atol=1e-12)
        np.testing.assert_allclose(rebuilt.imag, 0.0, atol=1e-12)

    @pytest.mark.parametrize("n", [100, 101])
    def test_signal_from_spectrum(self, n):
        """Test signal_from_spectrum inverts spectrum_from_signal."""
        s = np.random.default_rng(7).standard_normal((n, 3))
        amplitude, phase, _ = spectrum_from_signal(s, axis=0)
        rebuilt = signal_from_spectrum(amplitude, phase, n, axis=0)
        np.testing.assert_allclose(rebuilt, s, atol=1e-12)

    def test_bin_mismatch_raises(self):
        """Test the signal length must match the number of bins."""
        amplitude, phase, _ = spectrum_from_signal(np.ones(10))
        with pytest.raises(InvalidArgumentError, match="frequency bins"):
            signal_from_spectrum(amplitude, phase, 12)

    def test_shape_mismatch_raises(self):
        """Test amplitude and phase must have the same shape."""
        with pytest.raises(InvalidArgumentError, match="differ"):
            signal_from_spectrum(np.ones(5), np.ones(4), 8)


class TestSpectrumAxis:
    """Tests for multichannel signals."""

    def test_axis_is_restored(self):
        """Test the frequency axis replaces the time axis in place."""
        s = np.random.default_rng(3).standard_normal((4, 50, 2))
        amplitude, phase, _ = spectrum_from_signal(s, axis=1)
        assert amplitude.shape == phase.shape == (4, 26, 2)
        single, _, _ = spectrum_from_signal(s[2, :, 1])
        np.testing.assert_allclose(amplitude[2, :, 1], single)

    def test_transposed_input(self):
        """Test axis=1 on the transpose matches axis=0."""
        s = np.random.default_rng(4).standard_normal((64, 3))
        a0, p0, _ = spectrum_from_signal(s, axis=0)
        a1, p1, _ = spectrum_from_signal(s.T, axis=1)
        np.testing.assert_allclose(a1, a0.T)
        np.testing.assert_allclose(p1, p0.T)

    def test_default_axis_skips_singletons(self):
        """Test the first non-singleton axis is the default time axis."""
        amplitude, _, f = spectrum_from_signal(np.ones((1, 64)))
        assert amplitude.shape == (1, 33)
        assert f.shape == (33,)

    def test_negative_axis(self):
        """Test negative axes count from the end."""
        amplitude, _, _ = spectrum_from_signal(np.ones((3, 20)), axis=-1)
        assert amplitude.shape == (3, 11)

    @pytest.mark.parametrize("axis", [2, -3])
    def test_invalid_axis_raises(self, axis):
        """Test axes outside the signal rank are rejected."""
        with pytest.raises(InvalidArgumentError, match="out of range"):
            spectrum_from_signal(np.ones((3, 20)), axis=axis)

    def test_empty_signal_raises(self):
        """Test an empty signal is rejected."""
        with pytest.raises(InvalidArgumentError, match="non-empty"):
            spectrum_from_signal(np.array([]))


class TestSpectrumPlot:
    """Tests for the diagnostic plot."""

    def test_plot_option(self):
        """Test plot=True draws a figure and still returns the spectrum."""
        amplitude, _, _ = spectrum_from_signal(np.r_[1.0, np.zeros(63)], plot=True)
        assert amplitude.shape == (33,)
        assert len(plt.get_fignums()) == 1

    def test_useplot_config(self):
        """Test conf.useplot enables the plot."""
        spectrum_from_signal(np.ones(32), WFSConfig(useplot=True))
        assert len(plt.get_fignums()) == 1

    def test_no_plot_by_default(self):
        """Test nothing is drawn unless requested."""
        spectrum_from_signal(np.ones(32))
        assert plt.get_fignums() == []
