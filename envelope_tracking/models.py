"""
Core data models for envelope-tracking waveform synthesis.

This module defines the waveform container and the configuration value
objects consumed by the synthesizers. All of them validate themselves on
construction and own copies of any array they are given.
"""

import dataclasses
import math
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Union

import numpy as np

from .error_handling import ConfigurationError, DomainError

# Envelope waveform conventions
ENVELOPE_NAME_SUFFIX = "Envelope"
ENVELOPE_BANDWIDTH_FACTOR = 0.8
ENVELOPE_RUNTIME_HEADROOM = 0.9
ENVELOPE_RUNTIME_SCALING_DB = 10 * math.log10(ENVELOPE_RUNTIME_HEADROOM)


def _fields_equal(a, b) -> bool:
    """Field-wise dataclass equality that compares ndarray fields element-wise."""
    if type(a) is not type(b):
        return NotImplemented
    for f in dataclasses.fields(a):
        left = getattr(a, f.name)
        right = getattr(b, f.name)
        if isinstance(left, np.ndarray) or isinstance(right, np.ndarray):
            if not np.array_equal(left, right):
                return False
        elif left != right:
            return False
    return True


def _as_sample_array(data) -> np.ndarray:
    from .validation import ValidationError

    try:
        return np.array(data, dtype=np.complex128, copy=True)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"data must be numeric: {e}", "data") from e


def _as_float_array(values, name: str) -> np.ndarray:
    from .validation import ValidationError

    try:
        return np.array(values, dtype=np.float64, copy=True)
    except (TypeError, ValueError) as e:
        raise ValidationError(f"{name} must be numeric: {e}", name) from e


@dataclass(eq=False)
class Waveform:
    """Complex baseband waveform with generation metadata.

    Optional metadata uses ``None`` for "not meaningful for this waveform",
    e.g. the PAPR of an envelope signal.

    Attributes:
        name: Identifying name, also referenced from the playback script
        data: Complex IQ samples (copied on construction)
        sample_rate: Sample rate in Hz
        signal_bandwidth: Occupied signal bandwidth in Hz
        papr_db: Peak-to-average power ratio in dB
        burst_length: Burst duration in seconds
        idle_duration_present: Whether the buffer contains zero-power regions
        runtime_scaling_db: Scaling applied by the generator at runtime, in dB
        script: Playback script describing burst timing
    """

    name: str
    data: np.ndarray
    sample_rate: float
    signal_bandwidth: Optional[float] = None
    papr_db: Optional[float] = None
    burst_length: Optional[float] = None
    idle_duration_present: bool = False
    runtime_scaling_db: float = 0.0
    script: Optional[str] = None

    def __post_init__(self):
        """Copy the sample buffer and validate after initialization."""
        from .validation import ConfigValidator

        self.data = _as_sample_array(self.data)
        ConfigValidator.validate_waveform(self)

    __eq__ = _fields_equal

    @property
    def num_samples(self) -> int:
        """Number of samples in the buffer."""
        return self.data.size

    @property
    def duration(self) -> float:
        """Buffer duration in seconds."""
        return self.num_samples / self.sample_rate

    def magnitudes(self) -> np.ndarray:
        """Instantaneous magnitude of every sample."""
        return np.abs(self.data)

    def peak_magnitude(self) -> float:
        return float(np.max(self.magnitudes()))

    def measured_papr_db(self) -> float:
        """Measure the peak-to-average power ratio of the sample buffer.

        Returns:
            PAPR in dB

        Raises:
            DomainError: If the buffer carries no power
        """
        power = self.data.real**2 + self.data.imag**2
        average = float(np.mean(power))
        if average == 0.0:
            raise DomainError(
                f"Waveform '{self.name}' has zero average power; PAPR is undefined",
                "measured_papr_db",
            )
        return 10 * math.log10(float(np.max(power)) / average)

    def normalized(self) -> "Waveform":
        """Return a copy scaled so its peak magnitude is exactly 1.

        Raises:
            DomainError: If every sample is zero
        """
        peak = self.peak_magnitude()
        if peak == 0.0:
            raise DomainError(
                f"Waveform '{self.name}' is all zeros and cannot be normalized", "normalized"
            )
        return self.with_data(self.data / peak)

    def with_data(self, data) -> "Waveform":
        """Return a copy of this waveform carrying a different sample buffer."""
        return dataclasses.replace(self, data=data)

    def derive_envelope(self, samples: np.ndarray) -> "Waveform":
        """Build an envelope waveform derived from this one.

        The envelope keeps the sample rate and idle flag, reports a bandwidth of
        80% of the sample rate, leaves PAPR and burst length undefined, applies
        10% runtime headroom and is renamed with the ``Envelope`` suffix. Every
        reference to the source name in the playback script is re-keyed.

        Args:
            samples: Real-valued envelope samples, one per source sample

        Returns:
            New envelope Waveform
        """
        envelope_name = self.name + ENVELOPE_NAME_SUFFIX
        script = self.script.replace(self.name, envelope_name) if self.script is not None else None

        return Waveform(
            name=envelope_name,
            data=np.asarray(samples, dtype=np.float64),
            sample_rate=self.sample_rate,
            signal_bandwidth=ENVELOPE_BANDWIDTH_FACTOR * self.sample_rate,
            papr_db=None,
            burst_length=None,
            idle_duration_present=self.idle_duration_present,
            runtime_scaling_db=ENVELOPE_RUNTIME_SCALING_DB,
            script=script,
        )


class DetroughType(Enum):
    """Companding curve used to lift the envelope out of its trough."""

    EXPONENTIAL = "exponential"
    COSINE = "cosine"
    POWER = "power"

    @classmethod
    def from_value(cls, value: Union["DetroughType", str]) -> "DetroughType":
        """Coerce an enum member or a case-insensitive name into a DetroughType.

        Raises:
            ConfigurationError: If the value names no supported type
        """
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            try:
                return cls(value.strip().lower())
            except ValueError:
                pass
        supported = ", ".join(member.value for member in cls)
        raise ConfigurationError(
            f"Detrough type {value!r} not supported. Supported: {supported}", "detrough_type"
        )


@dataclass
class DetroughConfiguration:
    """Parameters of the analytic detrough envelope.

    Attributes:
        detrough_type: Companding curve
        minimum_voltage: Supply voltage at zero input magnitude in V
        maximum_voltage: Supply voltage at peak input magnitude in V
        exponent: Exponent of the power curve
    """

    detrough_type: DetroughType = DetroughType.EXPONENTIAL
    minimum_voltage: float = 1.5
    maximum_voltage: float = 3.5
    exponent: float = 1.2

    def __post_init__(self):
        """Validate detrough parameters after initialization."""
        from .validation import ConfigValidator

        self.detrough_type = DetroughType.from_value(self.detrough_type)
        ConfigValidator.validate_detrough_config(self)

    @classmethod
    def default(cls) -> "DetroughConfiguration":
        """Exponential detrough between 1.5 V and 3.5 V."""
        return cls()

    @property
    def detrough_ratio(self) -> float:
        """Ratio of minimum to maximum voltage."""
        return self.minimum_voltage / self.maximum_voltage


@dataclass(eq=False)
class LookUpTable:
    """Measured supply voltage required at each DUT input power.

    Attributes:
        dut_input_power_dbm: DUT input power points in dBm, in any order
        supply_voltage: Supply voltage for each power point in V
    """

    dut_input_power_dbm: np.ndarray
    supply_voltage: np.ndarray

    def __post_init__(self):
        """Copy the table columns and validate after initialization."""
        from .validation import ConfigValidator

        self.dut_input_power_dbm = _as_float_array(self.dut_input_power_dbm, "dut_input_power_dbm")
        self.supply_voltage = _as_float_array(self.supply_voltage, "supply_voltage")
        ConfigValidator.validate_lookup_table(self)

    __eq__ = _fields_equal

    @property
    def size(self) -> int:
        """Number of points in the table."""
        return self.dut_input_power_dbm.size


@dataclass
class TrackerConfiguration:
    """Transfer characteristic of the envelope tracker amplifier.

    Attributes:
        input_impedance: Tracker input impedance in ohms
        common_mode_offset: Common-mode offset at the tracker input in V
        gain: Tracker voltage gain in V/V
        output_offset: Tracker output offset in V
    """

    input_impedance: float = 1e6
    common_mode_offset: float = 1.0
    gain: float = 2.5
    output_offset: float = 2.55

    def __post_init__(self):
        """Validate tracker parameters after initialization."""
        from .validation import ConfigValidator

        ConfigValidator.validate_tracker_config(self)

    @classmethod
    def default(cls) -> "TrackerConfiguration":
        """1 MOhm input, 1 V common mode, 2.5 V/V gain, 2.55 V output offset."""
        return cls()


@dataclass
class TrackerScalingResult:
    """Outcome of scaling an envelope for the tracker input.

    Attributes:
        corrected_waveform: Gain/offset corrected envelope, as seen at the
            output of the envelope generator
        normalized_waveform: Corrected envelope divided by its absolute peak,
            within [-1, 1]; this is the buffer handed to the generator
        output_level_vpp: Generator output level, peak-to-peak volts
        output_offset: Generator DC offset in V
        absolute_peak: Peak magnitude of the corrected envelope measured from 0 V
        dc_offset: Mid-point of the corrected envelope in V
        half_span: Half of the corrected envelope's max-min excursion in V
        metadata: Tracker parameters the result was computed with
    """

    corrected_waveform: Waveform
    normalized_waveform: Waveform
    output_level_vpp: float
    output_offset: float
    absolute_peak: float
    dc_offset: float
    half_span: float
    metadata: dict = field(default_factory=dict)

    def __iter__(self) -> Iterator:
        """Unpack as ``(corrected_waveform, output_level_vpp, output_offset)``."""
        return iter((self.corrected_waveform, self.output_level_vpp, self.output_offset))
