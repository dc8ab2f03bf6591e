"""
Input validation for envelope-tracking waveforms and configuration objects.

All checks run eagerly, before any sample buffer is touched, so that a
synthesis call either fails up front or produces a complete output.
"""

import math
from typing import TYPE_CHECKING, Optional

import numpy as np

from .error_handling import ConfigurationError

if TYPE_CHECKING:
    from .models import DetroughConfiguration, LookUpTable, TrackerConfiguration, Waveform


class ValidationError(ConfigurationError):
    """Custom exception for parameter validation errors."""

    pass


def _is_number(value) -> bool:
    return isinstance(value, (int, float, np.integer, np.floating)) and not isinstance(
        value, bool
    )


class ConfigValidator:
    """Validator class for waveforms and synthesis configuration."""

    MIN_LUT_POINTS = 2

    @classmethod
    def validate_waveform(cls, waveform: "Waveform") -> None:
        """Validate waveform samples and metadata.

        Args:
            waveform: Waveform instance to validate

        Raises:
            ValidationError: If any field is invalid
        """
        if not isinstance(waveform.name, str) or not waveform.name:
            raise ValidationError("name must be a non-empty string", "name")

        data = waveform.data
        if not isinstance(data, np.ndarray):
            raise ValidationError("data must be a numpy array", "data")
        if data.ndim != 1:
            raise ValidationError("data must be 1-dimensional", "data")
        if data.size == 0:
            raise ValidationError("data must contain at least one sample", "data")
        if not np.all(np.isfinite(data)):
            raise ValidationError("data must contain only finite samples", "data")

        cls._validate_positive(waveform.sample_rate, "sample_rate")
        cls._validate_optional_finite(waveform.signal_bandwidth, "signal_bandwidth")
        cls._validate_optional_finite(waveform.papr_db, "papr_db")
        cls._validate_optional_finite(waveform.burst_length, "burst_length")
        cls._validate_finite(waveform.runtime_scaling_db, "runtime_scaling_db")

        if not isinstance(waveform.idle_duration_present, (bool, np.bool_)):
            raise ValidationError("idle_duration_present must be a boolean", "idle_duration_present")
        if waveform.script is not None and not isinstance(waveform.script, str):
            raise ValidationError("script must be a string or None", "script")

    @classmethod
    def validate_detrough_config(cls, config: "DetroughConfiguration") -> None:
        """Validate detrough companding parameters.

        Args:
            config: DetroughConfiguration instance to validate

        Raises:
            ValidationError: If any parameter is invalid
        """
        from .models import DetroughType

        cls._validate_positive(config.minimum_voltage, "minimum_voltage")
        cls._validate_positive(config.maximum_voltage, "maximum_voltage")
        if config.minimum_voltage >= config.maximum_voltage:
            raise ValidationError(
                f"minimum_voltage ({config.minimum_voltage} V) must be less than "
                f"maximum_voltage ({config.maximum_voltage} V)",
                "minimum_voltage",
            )

        cls._validate_finite(config.exponent, "exponent")
        if config.detrough_type == DetroughType.POWER and config.exponent <= 0:
            raise ValidationError("exponent must be positive for power detrough", "exponent")

    @classmethod
    def validate_lookup_table(cls, lut: "LookUpTable") -> None:
        """Validate a measured power/voltage characteristic.

        Args:
            lut: LookUpTable instance to validate

        Raises:
            ValidationError: If the table cannot be interpolated
        """
        for label, values in (
            ("dut_input_power_dbm", lut.dut_input_power_dbm),
            ("supply_voltage", lut.supply_voltage),
        ):
            if values.ndim != 1:
                raise ValidationError(f"{label} must be 1-dimensional", label)
            if not np.all(np.isfinite(values)):
                raise ValidationError(f"{label} must contain only finite values", label)

        if lut.dut_input_power_dbm.size != lut.supply_voltage.size:
            raise ValidationError(
                f"Lookup table columns differ in length: "
                f"{lut.dut_input_power_dbm.size} power points vs "
                f"{lut.supply_voltage.size} voltage points",
                "supply_voltage",
            )
        if lut.dut_input_power_dbm.size < cls.MIN_LUT_POINTS:
            raise ValidationError(
                f"Lookup table needs at least {cls.MIN_LUT_POINTS} points, "
                f"got {lut.dut_input_power_dbm.size}",
                "dut_input_power_dbm",
            )

    @classmethod
    def validate_tracker_config(cls, config: "TrackerConfiguration") -> None:
        """Validate tracker transfer characteristic.

        Args:
            config: TrackerConfiguration instance to validate

        Raises:
            ValidationError: If any parameter is invalid
        """
        cls._validate_positive(config.input_impedance, "input_impedance")
        cls._validate_positive(config.gain, "gain")
        cls._validate_finite(config.common_mode_offset, "common_mode_offset")
        cls._validate_finite(config.output_offset, "output_offset")

    @classmethod
    def validate_dut_input_power(cls, dut_input_power_dbm: float) -> None:
        """Validate the DUT average input power used to scale a waveform."""
        cls._validate_finite(dut_input_power_dbm, "dut_input_power_dbm")

    @staticmethod
    def _validate_finite(value, name: str) -> None:
        if not _is_number(value):
            raise ValidationError(f"{name} must be a number", name)
        if not math.isfinite(value):
            raise ValidationError(f"{name} must be finite", name)

    @classmethod
    def _validate_positive(cls, value, name: str) -> None:
        cls._validate_finite(value, name)
        if value <= 0:
            raise ValidationError(f"{name} must be positive", name)

    @classmethod
    def _validate_optional_finite(cls, value: Optional[float], name: str) -> None:
        if value is not None:
            cls._validate_finite(value, name)
