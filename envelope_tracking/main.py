"""
Main interface and high-level API for envelope-tracking waveform synthesis.

This module ties configuration, synthesis and tracker scaling together for
callers that drive an envelope generator: it builds envelopes with either
the analytic detrough curves or a measured lookup table, scales them for the
tracker and records any failure for diagnostics.
"""

import logging
from typing import Any, Dict, Optional

import numpy as np

from .config_manager import ConfigurationManager, get_config
from .detrough import DetroughSynthesizer
from .error_handling import ErrorHandler, create_error_context
from .lut_envelope import LutEnvelopeSynthesizer
from .models import (
    DetroughConfiguration,
    LookUpTable,
    TrackerConfiguration,
    TrackerScalingResult,
    Waveform,
)
from .tracker_scaler import TrackerOutputScaler

logger = logging.getLogger(__name__)


class EnvelopeTrackingGenerator:
    """Main interface for envelope waveform synthesis.

    Detrough and tracker parameters come from the configuration file unless
    given explicitly. Failures are recorded with the generator's error
    handler and re-raised unchanged.
    """

    def __init__(
        self,
        config_file: Optional[str] = None,
        detrough_config: Optional[DetroughConfiguration] = None,
        tracker_config: Optional[TrackerConfiguration] = None,
        create_default_config: bool = True,
    ):
        """Initialize the envelope tracking generator.

        Args:
            config_file: Path to configuration file (uses config.toml if None)
            detrough_config: Detrough parameters (loads from config if None)
            tracker_config: Tracker parameters (loads from config if None)
            create_default_config: Create default config file if it doesn't exist

        Raises:
            ConfigurationError: If configuration cannot be loaded
        """
        self._error_handler = ErrorHandler()

        try:
            self.config_manager: ConfigurationManager = get_config(
                config_file, create_default_config
            )
            self.detrough_config = (
                detrough_config or self.config_manager.create_detrough_config_object()
            )
            self.tracker_config = (
                tracker_config or self.config_manager.create_tracker_config_object()
            )
            self.default_dut_input_power_dbm = self.config_manager.get_lut_config()[
                "dut_input_power_dbm"
            ]
        except Exception as e:
            context = create_error_context("system_initialization", "EnvelopeTrackingGenerator")
            self._error_handler.handle_error(e, context)
            raise

        logger.info(
            f"EnvelopeTrackingGenerator initialized: "
            f"detrough={self.detrough_config.detrough_type.value}, "
            f"tracker gain={self.tracker_config.gain} V/V"
        )

    def create_detrough_envelope(
        self, source: Waveform, detrough_config: Optional[DetroughConfiguration] = None
    ) -> Waveform:
        """Create a detrough envelope of a normalized waveform.

        Args:
            source: Source waveform with peak magnitude 1
            detrough_config: Detrough parameters (uses the generator's if None)

        Returns:
            Envelope Waveform
        """
        detrough_config = detrough_config or self.detrough_config
        try:
            envelope = DetroughSynthesizer(detrough_config).synthesize(source)
        except Exception as e:
            context = create_error_context(
                "create_detrough_envelope",
                "DetroughSynthesizer",
                waveform=source.name,
                detrough_type=detrough_config.detrough_type.value,
            )
            self._error_handler.handle_error(e, context)
            raise

        logger.info(f"Created detrough envelope '{envelope.name}' ({envelope.num_samples} samples)")
        return envelope

    def create_lut_envelope(
        self,
        source: Waveform,
        lookup_table: LookUpTable,
        dut_input_power_dbm: Optional[float] = None,
    ) -> Waveform:
        """Create an envelope from a measured lookup table.

        Args:
            source: Source waveform with defined PAPR
            lookup_table: Measured supply voltage vs. DUT input power
            dut_input_power_dbm: Average DUT input power (uses config if None)

        Returns:
            Envelope Waveform
        """
        if dut_input_power_dbm is None:
            dut_input_power_dbm = self.default_dut_input_power_dbm

        try:
            envelope = LutEnvelopeSynthesizer(lookup_table, dut_input_power_dbm).synthesize(source)
        except Exception as e:
            context = create_error_context(
                "create_lut_envelope",
                "LutEnvelopeSynthesizer",
                waveform=source.name,
                lut_points=lookup_table.size,
                dut_input_power_dbm=dut_input_power_dbm,
            )
            self._error_handler.handle_error(e, context)
            raise

        logger.info(f"Created LUT envelope '{envelope.name}' ({envelope.num_samples} samples)")
        return envelope

    def scale_envelope(
        self, envelope: Waveform, tracker_config: Optional[TrackerConfiguration] = None
    ) -> TrackerScalingResult:
        """Scale an envelope for the tracker input.

        Args:
            envelope: Raw envelope waveform
            tracker_config: Tracker parameters (uses the generator's if None)

        Returns:
            TrackerScalingResult
        """
        tracker_config = tracker_config or self.tracker_config
        try:
            result = TrackerOutputScaler(tracker_config).scale(envelope)
        except Exception as e:
            context = create_error_context(
                "scale_envelope",
                "TrackerOutputScaler",
                waveform=envelope.name,
                gain=tracker_config.gain,
                output_offset=tracker_config.output_offset,
            )
            self._error_handler.handle_error(e, context)
            raise

        logger.info(
            f"Scaled envelope '{envelope.name}': output level {result.output_level_vpp:.4f} Vpp"
        )
        return result

    def generate_tracker_waveform(
        self,
        source: Waveform,
        lookup_table: Optional[LookUpTable] = None,
        dut_input_power_dbm: Optional[float] = None,
    ) -> TrackerScalingResult:
        """Synthesize an envelope and scale it for the tracker in one step.

        Uses the lookup table when one is given, the detrough curve otherwise.

        Args:
            source: Source waveform
            lookup_table: Measured characteristic for the LUT path
            dut_input_power_dbm: Average DUT input power for the LUT path

        Returns:
            TrackerScalingResult of the synthesized envelope
        """
        if lookup_table is not None:
            envelope = self.create_lut_envelope(source, lookup_table, dut_input_power_dbm)
        else:
            envelope = self.create_detrough_envelope(source)
        return self.scale_envelope(envelope)

    def get_system_info(self) -> Dict[str, Any]:
        """Get information about the generator configuration.

        Returns:
            Dictionary with configuration and error statistics
        """
        return {
            "config_file": self.config_manager.config_file,
            "detrough": {
                "type": self.detrough_config.detrough_type.value,
                "minimum_voltage": self.detrough_config.minimum_voltage,
                "maximum_voltage": self.detrough_config.maximum_voltage,
                "exponent": self.detrough_config.exponent,
            },
            "tracker": {
                "input_impedance": self.tracker_config.input_impedance,
                "common_mode_offset": self.tracker_config.common_mode_offset,
                "gain": self.tracker_config.gain,
                "output_offset": self.tracker_config.output_offset,
            },
            "dut_input_power_dbm": self.default_dut_input_power_dbm,
            "numpy_version": np.__version__,
            "error_statistics": self._error_handler.get_error_statistics(),
        }

    def validate_configuration(self) -> Dict[str, Any]:
        """Check the detrough and tracker parameters in use.

        Returns:
            Dictionary with ``valid`` flag, ``warnings`` and ``detrough_ratio``
        """
        warnings = []
        ratio = self.detrough_config.detrough_ratio

        if ratio > 0.9:
            warnings.append(
                f"Detrough ratio {ratio:.3f} leaves little envelope swing; "
                f"minimum voltage is close to maximum"
            )
        if self.tracker_config.gain < 1.0:
            warnings.append(
                f"Tracker gain {self.tracker_config.gain} V/V attenuates; "
                f"generator output level will exceed the envelope swing"
            )

        top = (self.detrough_config.maximum_voltage - self.tracker_config.output_offset) / (
            self.tracker_config.gain
        )
        bottom = (self.detrough_config.minimum_voltage - self.tracker_config.output_offset) / (
            self.tracker_config.gain
        )
        if top <= 0 and bottom <= 0:
            warnings.append(
                "Tracker output offset exceeds the detrough voltage range; "
                "corrected envelope is entirely negative"
            )

        return {"valid": True, "warnings": warnings, "detrough_ratio": ratio}

    def get_diagnostic_report(self, include_traceback: bool = False) -> str:
        """Render the diagnostic report of recorded failures."""
        return self._error_handler.generate_diagnostic_report(include_traceback)

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        if exc_type is not None:
            logger.debug(f"EnvelopeTrackingGenerator exiting after {exc_type.__name__}")

    def __repr__(self) -> str:
        """String representation of EnvelopeTrackingGenerator."""
        return (
            f"EnvelopeTrackingGenerator(detrough={self.detrough_config.detrough_type.value}, "
            f"tracker_gain={self.tracker_config.gain}, "
            f"config='{self.config_manager.config_file}')"
        )


# Convenience functions for quick access
def create_generator(config_file: Optional[str] = None, **kwargs) -> EnvelopeTrackingGenerator:
    """Create an EnvelopeTrackingGenerator with default settings.

    Args:
        config_file: Path to configuration file
        **kwargs: Additional arguments passed to EnvelopeTrackingGenerator

    Returns:
        Initialized EnvelopeTrackingGenerator instance
    """
    return EnvelopeTrackingGenerator(config_file=config_file, **kwargs)


def quick_detrough_envelope(
    source: Waveform, config_file: Optional[str] = None
) -> TrackerScalingResult:
    """Synthesize and scale a detrough envelope with configured settings.

    Args:
        source: Normalized source waveform
        config_file: Path to configuration file

    Returns:
        TrackerScalingResult of the envelope
    """
    with create_generator(config_file) as generator:
        return generator.generate_tracker_waveform(source)


def quick_lut_envelope(
    source: Waveform,
    lookup_table: LookUpTable,
    dut_input_power_dbm: Optional[float] = None,
    config_file: Optional[str] = None,
) -> TrackerScalingResult:
    """Synthesize and scale a LUT envelope with configured settings.

    Args:
        source: Source waveform with defined PAPR
        lookup_table: Measured supply voltage vs. DUT input power
        dut_input_power_dbm: Average DUT input power (uses config if None)
        config_file: Path to configuration file

    Returns:
        TrackerScalingResult of the envelope
    """
    with create_generator(config_file) as generator:
        return generator.generate_tracker_waveform(source, lookup_table, dut_input_power_dbm)
