"""
Unit tests for envelope-tracking data models.

Tests Waveform, DetroughConfiguration, LookUpTable, TrackerConfiguration and
TrackerScalingResult, including validation on construction.
"""

import math

import numpy as np
import pytest

from envelope_tracking.error_handling import ConfigurationError, DomainError
from envelope_tracking.models import (
    ENVELOPE_RUNTIME_SCALING_DB,
    DetroughConfiguration,
    DetroughType,
    LookUpTable,
    TrackerConfiguration,
    TrackerScalingResult,
    Waveform,
)
from envelope_tracking.validation import ValidationError


def make_waveform(**overrides) -> Waveform:
    params = dict(
        name="LTE20",
        data=np.array([0.5 + 0.5j, 1.0 + 0.0j, 0.0 - 0.25j, 0.0 + 0.0j]),
        sample_rate=30.72e6,
        signal_bandwidth=18e6,
        papr_db=8.5,
        burst_length=1e-3,
        idle_duration_present=True,
        runtime_scaling_db=-1.5,
        script="script LTE20Script\n  generate LTE20\nend script",
    )
    params.update(overrides)
    return Waveform(**params)


class TestWaveform:
    """Test cases for Waveform."""

    def test_valid_waveform(self):
        """Test creation of a valid waveform."""
        waveform = make_waveform()

        assert waveform.num_samples == 4
        assert waveform.data.dtype == np.complex128
        assert waveform.duration == pytest.approx(4 / 30.72e6)

    def test_data_is_copied(self):
        """Test that the waveform owns its sample buffer."""
        data = np.array([1.0 + 0j, 0.5 + 0j])
        waveform = Waveform(name="wfm", data=data, sample_rate=1e6)

        data[0] = 0.0

        assert waveform.data[0] == 1.0 + 0j

    def test_equality_compares_samples(self):
        """Test that waveforms compare by value, including the sample buffer."""
        assert make_waveform() == make_waveform()
        assert make_waveform() != make_waveform(data=np.array([1.0, 0.5, 0.25, 0.0]))
        assert make_waveform() != make_waveform(papr_db=None)
        assert make_waveform() != "LTE20"

    def test_real_data_is_promoted(self):
        """Test that real-valued samples become complex with zero imaginary part."""
        waveform = Waveform(name="wfm", data=[1.0, 2.0], sample_rate=1e6)

        assert np.iscomplexobj(waveform.data)
        np.testing.assert_array_equal(waveform.data.imag, [0.0, 0.0])

    def test_defaults_leave_metadata_undefined(self):
        """Test that optional metadata defaults to undefined."""
        waveform = Waveform(name="wfm", data=[1.0], sample_rate=1e6)

        assert waveform.signal_bandwidth is None
        assert waveform.papr_db is None
        assert waveform.burst_length is None
        assert waveform.script is None
        assert waveform.idle_duration_present is False

    @pytest.mark.parametrize(
        "overrides,match",
        [
            ({"data": np.array([])}, "at least one sample"),
            ({"data": np.ones((2, 2))}, "1-dimensional"),
            ({"data": np.array([1.0, np.nan])}, "finite"),
            ({"sample_rate": 0.0}, "sample_rate must be positive"),
            ({"sample_rate": -1.0}, "sample_rate must be positive"),
            ({"name": ""}, "name"),
            ({"papr_db": float("inf")}, "papr_db must be finite"),
            ({"script": 42}, "script"),
            ({"idle_duration_present": "yes"}, "idle_duration_present"),
        ],
    )
    def test_invalid_waveform(self, overrides, match):
        """Test that invalid waveforms are rejected."""
        with pytest.raises(ValidationError, match=match):
            make_waveform(**overrides)

    def test_non_numeric_data(self):
        """Test that non-numeric samples are rejected as configuration errors."""
        with pytest.raises(ConfigurationError, match="numeric"):
            make_waveform(data=["a", "b"])

    def test_magnitudes_and_peak(self):
        """Test magnitude helpers."""
        waveform = Waveform(name="wfm", data=[3 + 4j, 0.6 + 0.8j], sample_rate=1e6)

        np.testing.assert_allclose(waveform.magnitudes(), [5.0, 1.0])
        assert waveform.peak_magnitude() == pytest.approx(5.0)

    def test_measured_papr(self):
        """Test PAPR measurement of known buffers."""
        constant = Waveform(name="cw", data=np.exp(1j * np.linspace(0, 6, 64)), sample_rate=1e6)
        pulse = Waveform(name="pulse", data=[1.0, 0.0, 0.0, 0.0], sample_rate=1e6)

        assert constant.measured_papr_db() == pytest.approx(0.0, abs=1e-12)
        assert pulse.measured_papr_db() == pytest.approx(10 * math.log10(4))

    def test_measured_papr_of_silence(self):
        """Test that PAPR of an all-zero buffer is a domain error."""
        waveform = Waveform(name="silence", data=np.zeros(8), sample_rate=1e6)

        with pytest.raises(DomainError, match="zero average power"):
            waveform.measured_papr_db()

    def test_normalized(self):
        """Test peak normalization."""
        waveform = make_waveform(data=[2.0 + 0j, 0.0 + 1.0j, -4.0 + 0j])

        normalized = waveform.normalized()

        assert normalized.peak_magnitude() == pytest.approx(1.0)
        np.testing.assert_allclose(normalized.data, [0.5, 0.25j, -1.0])
        assert normalized.name == waveform.name
        np.testing.assert_array_equal(waveform.data, [2.0, 1.0j, -4.0])

    def test_normalized_all_zero(self):
        """Test that an all-zero buffer cannot be normalized."""
        with pytest.raises(DomainError):
            make_waveform(data=np.zeros(4)).normalized()

    def test_with_data(self):
        """Test replacing the sample buffer while keeping metadata."""
        waveform = make_waveform()

        replaced = waveform.with_data([1.0, 2.0])

        assert replaced.num_samples == 2
        assert replaced.papr_db == waveform.papr_db
        assert replaced.script == waveform.script
        assert waveform.num_samples == 4

    def test_derive_envelope(self):
        """Test the metadata convention of derived envelopes."""
        waveform = make_waveform()

        envelope = waveform.derive_envelope(np.array([1.0, 2.0, 3.0, 4.0]))

        assert envelope.name == "LTE20Envelope"
        assert envelope.sample_rate == waveform.sample_rate
        assert envelope.signal_bandwidth == pytest.approx(0.8 * waveform.sample_rate)
        assert envelope.papr_db is None
        assert envelope.burst_length is None
        assert envelope.idle_duration_present is True
        assert envelope.runtime_scaling_db == pytest.approx(10 * math.log10(0.9))
        assert envelope.runtime_scaling_db == ENVELOPE_RUNTIME_SCALING_DB
        np.testing.assert_array_equal(envelope.data.real, [1.0, 2.0, 3.0, 4.0])
        np.testing.assert_array_equal(envelope.data.imag, np.zeros(4))

    def test_derive_envelope_rekeys_script(self):
        """Test that every reference to the source name in the script is renamed."""
        waveform = make_waveform()

        envelope = waveform.derive_envelope(np.ones(4))

        assert envelope.script == (
            "script LTE20EnvelopeScript\n  generate LTE20Envelope\nend script"
        )
        assert waveform.script == "script LTE20Script\n  generate LTE20\nend script"

    def test_derive_envelope_without_script(self):
        """Test that a missing script stays missing."""
        envelope = make_waveform(script=None).derive_envelope(np.ones(4))

        assert envelope.script is None


class TestDetroughConfiguration:
    """Test cases for DetroughConfiguration."""

    def test_defaults(self):
        """Test documented default values."""
        config = DetroughConfiguration.default()

        assert config.detrough_type == DetroughType.EXPONENTIAL
        assert config.minimum_voltage == 1.5
        assert config.maximum_voltage == 3.5
        assert config.exponent == 1.2
        assert config.detrough_ratio == pytest.approx(1.5 / 3.5)

    @pytest.mark.parametrize(
        "value,expected",
        [
            ("exponential", DetroughType.EXPONENTIAL),
            ("Cosine", DetroughType.COSINE),
            (" POWER ", DetroughType.POWER),
            (DetroughType.COSINE, DetroughType.COSINE),
        ],
    )
    def test_type_coercion(self, value, expected):
        """Test that type names are coerced to DetroughType."""
        config = DetroughConfiguration(detrough_type=value)

        assert config.detrough_type == expected

    @pytest.mark.parametrize("value", ["triangle", "", 3, None])
    def test_unsupported_type(self, value):
        """Test that unknown detrough types are rejected at construction."""
        with pytest.raises(ConfigurationError, match="not supported"):
            DetroughConfiguration(detrough_type=value)

    @pytest.mark.parametrize(
        "minimum,maximum",
        [(3.5, 3.5), (4.0, 3.5), (0.0, 3.5), (-1.0, 3.5), (1.0, float("nan"))],
    )
    def test_invalid_voltages(self, minimum, maximum):
        """Test voltage range validation."""
        with pytest.raises(ConfigurationError):
            DetroughConfiguration(minimum_voltage=minimum, maximum_voltage=maximum)

    def test_power_requires_positive_exponent(self):
        """Test that the power curve needs a positive exponent."""
        with pytest.raises(ConfigurationError, match="exponent must be positive"):
            DetroughConfiguration(detrough_type=DetroughType.POWER, exponent=0.0)

    def test_exponent_ignored_by_other_types(self):
        """Test that a non-positive exponent is allowed when unused."""
        config = DetroughConfiguration(detrough_type=DetroughType.COSINE, exponent=-1.0)

        assert config.exponent == -1.0


class TestLookUpTable:
    """Test cases for LookUpTable."""

    def test_valid_table(self):
        """Test creation of a valid, unsorted table."""
        lut = LookUpTable(dut_input_power_dbm=[10, -10, 0], supply_voltage=[4.0, 1.0, 2.0])

        assert lut.size == 3
        assert lut.dut_input_power_dbm.dtype == np.float64

    def test_columns_are_copied(self):
        """Test that the table owns its columns."""
        power = np.array([0.0, 10.0])
        lut = LookUpTable(dut_input_power_dbm=power, supply_voltage=np.array([1.0, 2.0]))

        power[0] = 99.0

        assert lut.dut_input_power_dbm[0] == 0.0

    def test_equality_compares_columns(self):
        """Test that tables compare by value."""
        lut = LookUpTable(dut_input_power_dbm=[0.0, 10.0], supply_voltage=[1.0, 2.0])

        assert lut == LookUpTable(dut_input_power_dbm=[0.0, 10.0], supply_voltage=[1.0, 2.0])
        assert lut != LookUpTable(dut_input_power_dbm=[0.0, 10.0], supply_voltage=[1.0, 2.5])

    def test_mismatched_lengths(self):
        """Test columns of different lengths."""
        with pytest.raises(ConfigurationError, match="differ in length"):
            LookUpTable(dut_input_power_dbm=[0, 1, 2], supply_voltage=[1, 2])

    def test_too_short(self):
        """Test a single-point table."""
        with pytest.raises(ConfigurationError, match="at least 2 points"):
            LookUpTable(dut_input_power_dbm=[0.0], supply_voltage=[1.0])

    def test_non_finite(self):
        """Test non-finite table values."""
        with pytest.raises(ConfigurationError, match="finite"):
            LookUpTable(dut_input_power_dbm=[0.0, np.inf], supply_voltage=[1.0, 2.0])


class TestTrackerConfiguration:
    """Test cases for TrackerConfiguration."""

    def test_defaults(self):
        """Test documented default values."""
        config = TrackerConfiguration.default()

        assert config.input_impedance == 1e6
        assert config.common_mode_offset == 1.0
        assert config.gain == 2.5
        assert config.output_offset == 2.55

    @pytest.mark.parametrize("gain", [0.0, -2.5])
    def test_non_positive_gain(self, gain):
        """Test that non-positive gain is rejected."""
        with pytest.raises(ConfigurationError, match="gain must be positive"):
            TrackerConfiguration(gain=gain)

    def test_non_positive_impedance(self):
        """Test that non-positive input impedance is rejected."""
        with pytest.raises(ConfigurationError, match="input_impedance"):
            TrackerConfiguration(input_impedance=0.0)

    def test_boolean_is_not_a_number(self):
        """Test that booleans are not accepted as numeric parameters."""
        with pytest.raises(ConfigurationError, match="must be a number"):
            TrackerConfiguration(output_offset=True)


class TestTrackerScalingResult:
    """Test cases for TrackerScalingResult."""

    def test_unpacks_to_triple(self):
        """Test tuple-style unpacking of the result."""
        waveform = Waveform(name="env", data=[0.5, -0.5], sample_rate=1e6)
        result = TrackerScalingResult(
            corrected_waveform=waveform,
            normalized_waveform=waveform,
            output_level_vpp=1.0,
            output_offset=0.0,
            absolute_peak=0.5,
            dc_offset=0.0,
            half_span=0.5,
        )

        corrected, level, offset = result

        assert corrected is waveform
        assert level == 1.0
        assert offset == 0.0
        assert result.metadata == {}

    def test_equality_compares_waveforms(self):
        """Test that results holding equal waveforms compare equal."""
        waveform = Waveform(name="env", data=[0.5, -0.5], sample_rate=1e6)
        params = dict(
            normalized_waveform=waveform,
            output_level_vpp=1.0,
            output_offset=0.0,
            absolute_peak=0.5,
            dc_offset=0.0,
            half_span=0.5,
        )

        assert TrackerScalingResult(corrected_waveform=waveform, **params) == TrackerScalingResult(
            corrected_waveform=waveform.with_data([0.5, -0.5]), **params
        )
