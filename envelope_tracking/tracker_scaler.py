"""
Tracker output scaling.

Pre-distorts a raw envelope for the tracker's gain and output offset, and
derives the output level and DC offset to program on the envelope generator
so that the corrected signal is neither clipped nor under-driven.
"""

import logging
from typing import Optional

import numpy as np

from .error_handling import DomainError
from .models import TrackerConfiguration, TrackerScalingResult, Waveform

logger = logging.getLogger(__name__)


class TrackerOutputScaler:
    """Scales envelope waveforms into the tracker input voltage domain."""

    def __init__(self, tracker_config: Optional[TrackerConfiguration] = None):
        """Initialize tracker output scaler.

        Args:
            tracker_config: Tracker transfer characteristic (defaults if None)
        """
        self.tracker_config = tracker_config or TrackerConfiguration.default()

    def correct(self, envelope: np.ndarray) -> np.ndarray:
        """Undo the tracker's output offset and gain.

        Args:
            envelope: Envelope voltages wanted at the tracker output

        Returns:
            Voltages to drive into the tracker input
        """
        return (envelope - self.tracker_config.output_offset) / self.tracker_config.gain

    def scale(self, envelope_waveform: Waveform) -> TrackerScalingResult:
        """Scale an envelope waveform for the tracker.

        The generator output level is set to twice the absolute peak of the
        corrected envelope (a peak-to-peak quantity) and the generator DC offset
        to zero; any DC component stays in the digital samples since a
        hardware offset would only clip the waveform further.

        Args:
            envelope_waveform: Raw envelope, real-valued volts

        Returns:
            TrackerScalingResult with the corrected and normalized waveforms

        Raises:
            DomainError: If the corrected envelope is identically zero
        """
        corrected = self.correct(envelope_waveform.data.real)

        maximum = float(np.max(corrected))
        minimum = float(np.min(corrected))
        half_span = (maximum - minimum) / 2
        dc_offset = minimum + half_span
        absolute_peak = abs(dc_offset) + half_span

        if absolute_peak == 0.0:
            raise DomainError(
                f"Corrected envelope of '{envelope_waveform.name}' is identically zero; "
                f"it cannot be normalized",
                "scale_for_tracker",
            )

        normalized = np.clip(corrected / absolute_peak, -1.0, 1.0)

        logger.debug(
            f"Scaled envelope '{envelope_waveform.name}' for tracker: "
            f"absolute peak {absolute_peak:.4f} V, DC offset {dc_offset:.4f} V, "
            f"output level {2 * absolute_peak:.4f} Vpp"
        )

        return TrackerScalingResult(
            corrected_waveform=envelope_waveform.with_data(corrected),
            normalized_waveform=envelope_waveform.with_data(normalized),
            output_level_vpp=2 * absolute_peak,
            output_offset=0.0,
            absolute_peak=absolute_peak,
            dc_offset=dc_offset,
            half_span=half_span,
            metadata={
                "gain": self.tracker_config.gain,
                "output_offset": self.tracker_config.output_offset,
                "input_impedance": self.tracker_config.input_impedance,
                "common_mode_offset": self.tracker_config.common_mode_offset,
            },
        )


def scale_for_tracker(
    envelope_waveform: Waveform, tracker_config: TrackerConfiguration
) -> TrackerScalingResult:
    """Scale an envelope waveform for the tracker.

    The result unpacks as ``(corrected_waveform, output_level_vpp, output_offset)``.

    Args:
        envelope_waveform: Raw envelope waveform
        tracker_config: Tracker transfer characteristic

    Returns:
        TrackerScalingResult
    """
    return TrackerOutputScaler(tracker_config).scale(envelope_waveform)
