"""
Envelope Tracking Waveform Synthesis Package

Derives supply-modulation envelope waveforms from complex baseband waveforms,
either through analytic detrough companding or a measured lookup table, and
scales them for the envelope tracker's input.
"""

from .config_manager import ConfigurationManager, get_config
from .detrough import DetroughSynthesizer, synthesize_detrough_envelope
from .error_handling import (
    ConfigurationError,
    DomainError,
    EnvelopeTrackingError,
    ErrorHandler,
)
from .interpolation import Interpolator, linear_interpolation_1d
from .lut_envelope import LutEnvelopeSynthesizer, dbm_to_watts_one_ohm, synthesize_lut_envelope
from .main import (
    EnvelopeTrackingGenerator,
    create_generator,
    quick_detrough_envelope,
    quick_lut_envelope,
)
from .models import (
    DetroughConfiguration,
    DetroughType,
    LookUpTable,
    TrackerConfiguration,
    TrackerScalingResult,
    Waveform,
)
from .tracker_scaler import TrackerOutputScaler, scale_for_tracker
from .validation import ConfigValidator, ValidationError
from .visualization import EnvelopeVisualizer

__version__ = "0.1.0"
__all__ = [
    # Core data models
    "Waveform",
    "DetroughType",
    "DetroughConfiguration",
    "LookUpTable",
    "TrackerConfiguration",
    "TrackerScalingResult",
    # Validation, configuration and errors
    "ConfigValidator",
    "ValidationError",
    "ConfigurationManager",
    "get_config",
    "EnvelopeTrackingError",
    "ConfigurationError",
    "DomainError",
    "ErrorHandler",
    # Synthesis components
    "Interpolator",
    "linear_interpolation_1d",
    "DetroughSynthesizer",
    "synthesize_detrough_envelope",
    "LutEnvelopeSynthesizer",
    "synthesize_lut_envelope",
    "dbm_to_watts_one_ohm",
    "TrackerOutputScaler",
    "scale_for_tracker",
    # Visualization
    "EnvelopeVisualizer",
    # Main interface (primary API)
    "EnvelopeTrackingGenerator",
    "create_generator",
    "quick_detrough_envelope",
    "quick_lut_envelope",
]
