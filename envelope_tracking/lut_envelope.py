"""
Lookup-table envelope synthesis.

Scales an IQ waveform to the DUT's average input power, converts it to an
instantaneous power trace and maps every sample through a measured
supply-voltage vs. input-power characteristic.

Power conventions: across 100 ohms P_dBW = 20 log10(V) - 20, so
P_dBm = 20 log10(V) + 10. Referenced to 1 ohm, P_dBW = 20 log10(V), hence
converting dBm to dBW(1 ohm) subtracts 10 dB.
"""

import logging

import numpy as np

from .error_handling import ConfigurationError
from .interpolation import Interpolator
from .models import LookUpTable, Waveform
from .validation import ConfigValidator

logger = logging.getLogger(__name__)

DBM_TO_DBW_ONE_OHM = 10.0


def dbm_to_watts_one_ohm(power_dbm) -> np.ndarray:
    """Convert dBm to linear watts referenced to 1 ohm."""
    return np.power(10.0, (np.asarray(power_dbm, dtype=np.float64) - DBM_TO_DBW_ONE_OHM) / 10.0)


class LutEnvelopeSynthesizer:
    """Envelope synthesizer driven by a measured lookup table."""

    def __init__(self, lookup_table: LookUpTable, dut_input_power_dbm: float):
        """Initialize LUT synthesizer.

        Args:
            lookup_table: Measured supply voltage vs. DUT input power
            dut_input_power_dbm: Average DUT input power in dBm

        Raises:
            ConfigurationError: If the DUT power is not finite
        """
        ConfigValidator.validate_dut_input_power(dut_input_power_dbm)

        self.lookup_table = lookup_table
        self.dut_input_power_dbm = float(dut_input_power_dbm)
        self._interpolator = Interpolator(
            dbm_to_watts_one_ohm(lookup_table.dut_input_power_dbm), lookup_table.supply_voltage
        )

        logger.debug(
            f"LutEnvelopeSynthesizer initialized: {lookup_table.size} points, "
            f"DUT input power {self.dut_input_power_dbm} dBm"
        )

    def iq_scale(self, source: Waveform) -> float:
        """Scale factor giving the source an average power of the DUT input power.

        The waveform's PAPR is undone first so that its peak sits at 0 dBW(1 ohm),
        then the target average power in dBW(1 ohm) is applied.

        Raises:
            ConfigurationError: If the source PAPR is undefined
        """
        if source.papr_db is None:
            raise ConfigurationError(
                f"Waveform '{source.name}' has no PAPR; it is required to scale to DUT power",
                "papr_db",
            )
        return 10.0 ** (source.papr_db / 20.0) * 10.0 ** (
            (self.dut_input_power_dbm - DBM_TO_DBW_ONE_OHM) / 20.0
        )

    def power_trace(self, source: Waveform) -> np.ndarray:
        """Instantaneous power of the scaled source in watts (1 ohm).

        Args:
            source: Source waveform

        Returns:
            Per-sample power array
        """
        iq = source.data * self.iq_scale(source)
        return iq.real**2 + iq.imag**2

    def synthesize(self, source: Waveform) -> Waveform:
        """Create the LUT envelope of a source waveform.

        Args:
            source: Source waveform with defined PAPR

        Returns:
            New envelope Waveform with one real sample per source sample
        """
        power = self.power_trace(source)
        envelope = self._interpolator(power)

        logger.debug(
            f"Synthesized LUT envelope for '{source.name}': {envelope.size} samples, "
            f"power range [{power.min():.4e}, {power.max():.4e}] W, "
            f"voltage range [{envelope.min():.4f}, {envelope.max():.4f}] V"
        )

        return source.derive_envelope(envelope)


def synthesize_lut_envelope(
    source: Waveform, lookup_table: LookUpTable, dut_input_power_dbm: float
) -> Waveform:
    """Create an envelope waveform from a measured lookup table.

    Args:
        source: Source waveform
        lookup_table: Measured supply voltage vs. DUT input power
        dut_input_power_dbm: Average DUT input power in dBm

    Returns:
        New envelope Waveform
    """
    return LutEnvelopeSynthesizer(lookup_table, dut_input_power_dbm).synthesize(source)
