"""
Unit tests for the 2.5D WFS driving functions.

Tests verify:
- Plane wave weights follow the angle between wave and loudspeaker normal
- Point source delays are symmetric and minimal at the nearest loudspeaker
- Focused sources share the point source weights with negated delays
- Unknown source types and coincident sources are rejected
- Driving signal matrix layout, zero baseline and relative timing
- Threaded and sequential computation agree
"""

import numpy as np
import pytest

from wfs_toolbox import (
    FocusedSource,
    InvalidArgumentError,
    InvalidSourceTypeError,
    NumericDegeneracyError,
    PlaneWave,
    PointSource,
    SecondarySourceConfig,
    WFSConfig,
    driving_function_imp_wfs_25d,
    driving_parameters,
    secondary_source_positions,
)


def g0(x0, conf):
    return np.sqrt(2 * np.pi * np.linalg.norm(np.asarray(conf.xref) - x0.positions, axis=1))


class TestPlaneWaveParameters:
    """Tests for plane wave delays and weights."""

    def test_aligned_weight_is_2g0(self, conf, linear_array):
        """Test a wave travelling along the normals gets weight 2*g0."""
        weights, delays = driving_parameters(linear_array, PlaneWave((0, -1, 0)), conf)
        np.testing.assert_allclose(weights, 2 * g0(linear_array, conf))
        np.testing.assert_allclose(delays, 0.0)

    def test_weight_decreases_with_angle(self, conf, linear_array):
        """Test weights fall monotonically from 0 to 90 degrees."""
        angles = np.radians(np.arange(0, 91, 15))
        weights = np.array(
            [
                driving_parameters(
                    linear_array, PlaneWave((np.sin(a), -np.cos(a), 0)), conf
                )[0]
                for a in angles
            ]
        )
        assert np.all(np.diff(weights, axis=0) < 0)
        np.testing.assert_allclose(weights[-1], 0.0, atol=1e-12)
        np.testing.assert_allclose(
            weights, 2 * np.cos(angles)[:, np.newaxis] * g0(linear_array, conf)
        )

    def test_delay_is_projection_on_direction(self, conf, linear_array):
        """Test delays are <n_pw, x0> / c."""
        direction = np.array([1.0, -1.0, 0.0]) / np.sqrt(2)
        _, delays = driving_parameters(linear_array, PlaneWave(direction), conf)
        np.testing.assert_allclose(delays, linear_array.positions @ direction / conf.c)

    def test_parameters_are_read_only(self, conf, linear_array):
        """Test returned arrays cannot be modified."""
        weights, delays = driving_parameters(linear_array, PlaneWave((0, -1, 0)), conf)
        with pytest.raises(ValueError):
            weights[0] = 1.0
        with pytest.raises(ValueError):
            delays[0] = 1.0


class TestPointSourceParameters:
    """Tests for point and focused source delays and weights."""

    def test_delays_symmetric_about_axis(self, conf):
        """Test delays mirror around the array centre."""
        x0 = secondary_source_positions(1.2, conf)
        assert len(x0) == 9
        _, delays = driving_parameters(x0, PointSource((0, 1, 0)), conf)
        np.testing.assert_allclose(delays, delays[::-1])
        assert np.argmin(delays) == 4
        assert delays[4] == pytest.approx(1.0 / conf.c)

    def test_weight_formula(self, conf, linear_array):
        """Test weights against g0/(2*pi) * <x0 - xs, n0> * r^(-3/2)."""
        xs = np.array([0.3, 1.5, 0.0])
        weights, delays = driving_parameters(linear_array, PointSource(xs), conf)
        diff = linear_array.positions - xs
        r = np.linalg.norm(diff, axis=1)
        projection = np.sum(diff * linear_array.directions, axis=1)
        expected = g0(linear_array, conf) / (2 * np.pi) * projection * r**-1.5
        np.testing.assert_allclose(weights, expected)
        np.testing.assert_allclose(delays, r / conf.c)
        assert np.all(weights > 0)

    def test_focused_negates_point_delays(self, conf, linear_array):
        """Test focused delays are -point delays with identical weights."""
        xs = (0.2, 0.8, 0.0)
        w_ps, d_ps = driving_parameters(linear_array, PointSource(xs), conf)
        w_fs, d_fs = driving_parameters(linear_array, FocusedSource(xs), conf)
        np.testing.assert_array_equal(w_fs, w_ps)
        np.testing.assert_array_equal(d_fs, -d_ps)

    @pytest.mark.parametrize("source_class", [PointSource, FocusedSource])
    def test_coincident_source_raises(self, conf, linear_array, source_class):
        """Test r = 0 is reported with the loudspeaker index."""
        source = source_class(linear_array.positions[3])
        with pytest.raises(NumericDegeneracyError, match="coincides") as exc_info:
            driving_parameters(linear_array, source, conf)
        assert exc_info.value.index == 3
        assert isinstance(exc_info.value, ArithmeticError)


class TestSourceTypeValidation:
    """Tests for unknown virtual source tags."""

    def test_unknown_tag_raises(self, conf, linear_array):
        """Test 'xx' is rejected and named in the error."""
        with pytest.raises(InvalidSourceTypeError, match="'xx'") as exc_info:
            driving_function_imp_wfs_25d(linear_array, (0, 1, 0), "xx", conf)
        assert exc_info.value.source_type == "xx"

    def test_non_source_object_raises(self, conf, linear_array):
        """Test driving_parameters only accepts virtual source variants."""
        with pytest.raises(InvalidSourceTypeError):
            driving_parameters(linear_array, "ps", conf)

    def test_missing_position_raises(self, conf, linear_array):
        """Test a tag without position is rejected."""
        with pytest.raises(InvalidArgumentError, match="needs a position"):
            driving_function_imp_wfs_25d(linear_array, None, "ps", conf)


class TestDrivingSignals:
    """Tests for the driving signal matrix."""

    def test_end_to_end_delays_grow_with_distance(self, conf, linear_array):
        """Test 8 loudspeakers and a source at (0, 0, 1): delays follow the distance."""
        assert len(linear_array) == 8
        d, weights, delays = driving_function_imp_wfs_25d(
            linear_array, (0, 0, 1), "ps", conf
        )
        distance = np.abs(linear_array.positions[:, 0])
        order = np.argsort(distance, kind="stable")
        assert np.all(np.diff(delays[order]) >= 0)
        np.testing.assert_allclose(delays, np.sqrt(distance**2 + 1) / conf.c)
        assert d.shape[1] == 8

    def test_no_sample_before_zero_baseline(self, conf, linear_array):
        """Test every column is silent before its shift and starts with its weight."""
        d, weights, delays = driving_function_imp_wfs_25d(
            linear_array, (0, 1, 0), "ps", conf
        )
        shifts = np.floor((delays.max() - delays) * conf.fs + 0.5).astype(int)
        for i, shift in enumerate(shifts):
            assert np.all(d[:shift, i] == 0)
            assert d[shift, i] == pytest.approx(weights[i])
        # The latest loudspeaker carries no extra shift
        assert shifts[np.argmax(delays)] == 0

    def test_matrix_layout(self, conf, linear_array):
        """Test one column per loudspeaker and room for the largest shift."""
        d, _, delays = driving_function_imp_wfs_25d(linear_array, (0, 1, 0), "ps", conf)
        spread = (delays.max() - delays.min()) * conf.fs
        assert d.shape == (int(np.ceil(spread)) + 2, len(linear_array))

    def test_constant_delay_offset_keeps_signals(self, conf):
        """Test shifting all delays by a constant leaves the driving signals unchanged."""
        shifted_conf = conf.replace(
            secondary_sources=SecondarySourceConfig(center=(0.0, -0.5, 0.0)),
            xref=(0.0, -2.5, 0.0),
        )
        x0 = secondary_source_positions(1.05, conf)
        x0_shifted = secondary_source_positions(1.05, shifted_conf)
        direction = (0.6, -0.8, 0.0)

        d, w, delays = driving_function_imp_wfs_25d(x0, direction, "pw", conf)
        d2, w2, delays2 = driving_function_imp_wfs_25d(
            x0_shifted, direction, "pw", shifted_conf
        )

        np.testing.assert_allclose(delays2 - delays, 0.4 / conf.c)
        np.testing.assert_allclose(w2, w)
        np.testing.assert_allclose(d2, d)

    @pytest.mark.parametrize("method", ["integer", "lagrange", "sinc"])
    def test_threads_match_sequential(self, conf, linear_array, method):
        """Test the threaded computation keeps the column order."""
        conf = conf.replace(fracdelay_method=method)
        sequential = driving_function_imp_wfs_25d(linear_array, (0.3, 1, 0), "ps", conf)
        threaded = driving_function_imp_wfs_25d(
            linear_array, (0.3, 1, 0), "ps", conf, workers=4
        )
        np.testing.assert_array_equal(threaded.d, sequential.d)

    @pytest.mark.parametrize("method", ["lagrange", "sinc"])
    def test_fractional_columns_keep_their_weight(self, conf, method):
        """Test every column sums to its weight for small fractional shifts."""
        conf = conf.replace(fracdelay_method=method)
        x0 = secondary_source_positions(3.0, conf)
        angle = np.radians(5)
        d, weights, delays = driving_function_imp_wfs_25d(
            x0, (np.sin(angle), -np.cos(angle), 0), "pw", conf
        )
        shifts = (delays.max() - delays) * conf.fs
        assert np.any((shifts > 0) & (shifts < 4) & (shifts % 1 != 0))
        np.testing.assert_allclose(d.sum(axis=0), weights)

    def test_fractional_columns_share_latency(self, conf, linear_array):
        """Test Lagrange columns are centred at their shift plus the filter latency."""
        from wfs_toolbox.dsp import filter_latency

        conf = conf.replace(fracdelay_method="lagrange")
        d, weights, delays = driving_function_imp_wfs_25d(
            linear_array, (0.3, 1, 0), "ps", conf
        )
        shifts = (delays.max() - delays) * conf.fs
        centroids = np.arange(len(d)) @ d / d.sum(axis=0)
        np.testing.assert_allclose(centroids, shifts + filter_latency(conf))

    def test_invalid_workers_raises(self, conf, linear_array):
        """Test workers must be positive."""
        with pytest.raises(InvalidArgumentError, match="workers"):
            driving_function_imp_wfs_25d(linear_array, (0, 1, 0), "ps", conf, workers=0)

    def test_empty_array_raises(self, conf, linear_array):
        """Test an array without loudspeakers is rejected."""
        empty = linear_array[np.zeros(len(linear_array), dtype=bool)]
        with pytest.raises(InvalidArgumentError, match="empty"):
            driving_function_imp_wfs_25d(empty, (0, 1, 0), "ps", conf)

    def test_prefilter_prototype(self, conf, linear_array):
        """Test the pre-equalization filter starts the latest column."""
        from wfs_toolbox import wfs_prefilter

        conf = conf.replace(usehpre=True)
        d, weights, delays = driving_function_imp_wfs_25d(
            linear_array, (0, -1, 0), "pw", conf
        )
        hpre = wfs_prefilter(conf)
        np.testing.assert_allclose(d[: len(hpre), 0], weights[0] * hpre)
        assert d.shape[0] == len(hpre) + 1

    def test_short_zero_padding_warns(self, conf, linear_array):
        """Test a fixed padding shorter than the delay spread warns."""
        conf = conf.replace(zero_padding=0)
        with pytest.warns(UserWarning, match="zero_padding"):
            driving_function_imp_wfs_25d(linear_array, (0, 1, 0), "ps", conf)

    def test_fixed_zero_padding_sets_length(self, conf, linear_array):
        """Test a fixed padding defines the number of samples."""
        conf = conf.replace(zero_padding=500)
        d, _, _ = driving_function_imp_wfs_25d(linear_array, (0, 1, 0), "ps", conf)
        assert d.shape == (501, len(linear_array))
