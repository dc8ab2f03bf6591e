"""
Analytic detrough envelope synthesis.

Maps the normalized instantaneous magnitude of an IQ waveform onto a supply
voltage envelope through a monotone companding curve that keeps the tracker
away from its low-voltage trough. Each curve is renormalized by its own value
at full scale so the envelope peaks at exactly the maximum voltage.
"""

import logging
import math
from typing import Optional

import numpy as np

from .models import DetroughConfiguration, DetroughType, Waveform

logger = logging.getLogger(__name__)

# Tolerance on the source peak magnitude before warning that it is not normalized
PEAK_MAGNITUDE_TOLERANCE = 1e-3


class DetroughSynthesizer:
    """Envelope synthesizer for the exponential, cosine and power detrough curves.

    Formulas, with ``d = minimum_voltage / maximum_voltage`` and ``m`` the
    sample magnitude:

    - exponential: ``m + d * exp(-m / d)``
    - cosine: ``1 - (1 - d) * cos(m * k)`` with ``k = 1 - (1 - d) * cos(pi / 2)``
    - power: ``(1 - d) + m**exponent * (1 - d)``
    """

    def __init__(self, detrough_config: Optional[DetroughConfiguration] = None):
        """Initialize detrough synthesizer.

        Args:
            detrough_config: Companding parameters (defaults if None)
        """
        self.detrough_config = detrough_config or DetroughConfiguration.default()
        self._ratio = self.detrough_config.detrough_ratio
        self._cosine_scale = 1 - (1 - self._ratio) * math.cos(math.pi / 2)
        self._full_scale = float(self._curve(np.array([1.0]))[0])

        logger.debug(
            f"DetroughSynthesizer initialized: type={self.detrough_config.detrough_type.value}, "
            f"ratio={self._ratio:.4f}, full_scale={self._full_scale:.6f}"
        )

    def _curve(self, magnitude: np.ndarray) -> np.ndarray:
        d = self._ratio
        detrough_type = self.detrough_config.detrough_type

        if detrough_type == DetroughType.EXPONENTIAL:
            return magnitude + d * np.exp(-magnitude / d)
        if detrough_type == DetroughType.COSINE:
            return 1 - (1 - d) * np.cos(magnitude * self._cosine_scale)
        if detrough_type == DetroughType.POWER:
            return (1 - d) + np.power(magnitude, self.detrough_config.exponent) * (1 - d)
        raise AssertionError(f"Unhandled detrough type {detrough_type}")

    def companding_curve(self, magnitude) -> np.ndarray:
        """Envelope voltage for the given normalized magnitudes.

        Args:
            magnitude: Normalized magnitudes in [0, 1]

        Returns:
            Supply voltages, equal to ``maximum_voltage`` at magnitude 1
        """
        magnitude = np.asarray(magnitude, dtype=np.float64)
        return self.detrough_config.maximum_voltage * self._curve(magnitude) / self._full_scale

    def synthesize(self, source: Waveform) -> Waveform:
        """Create the detrough envelope of a normalized source waveform.

        Args:
            source: Waveform whose peak magnitude is 1

        Returns:
            New envelope Waveform with one real sample per source sample
        """
        magnitude = source.magnitudes()

        peak = float(np.max(magnitude))
        if abs(peak - 1.0) > PEAK_MAGNITUDE_TOLERANCE:
            logger.warning(
                f"Waveform '{source.name}' peak magnitude is {peak:.4f}, not 1; "
                f"envelope will not peak at {self.detrough_config.maximum_voltage} V"
            )

        envelope = self.companding_curve(magnitude)

        logger.debug(
            f"Synthesized {self.detrough_config.detrough_type.value} detrough envelope for "
            f"'{source.name}': {envelope.size} samples, "
            f"range [{envelope.min():.4f}, {envelope.max():.4f}] V"
        )

        return source.derive_envelope(envelope)


def synthesize_detrough_envelope(
    source: Waveform, detrough_config: DetroughConfiguration
) -> Waveform:
    """Create a detrough envelope waveform.

    Args:
        source: Normalized source waveform
        detrough_config: Companding parameters

    Returns:
        New envelope Waveform
    """
    return DetroughSynthesizer(detrough_config).synthesize(source)
