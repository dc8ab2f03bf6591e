"""
Configuration management using Dynaconf for centralized parameter handling.

This module loads detrough, tracker and lookup-table parameters from a TOML
file and builds the corresponding configuration objects from them.
"""

import logging
import math
from pathlib import Path
from typing import Any, Dict, List, Optional

from dynaconf import Dynaconf

from .error_handling import ConfigurationError
from .models import DetroughConfiguration, TrackerConfiguration

logger = logging.getLogger(__name__)

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_CONFIG = """# Envelope Tracking Configuration
# Parameters for envelope waveform synthesis and tracker output scaling

[detrough]
# Companding curve: "exponential", "cosine" or "power"
type = "exponential"
minimum_voltage = 1.5  # V
maximum_voltage = 3.5  # V
exponent = 1.2  # power curve only

[tracker]
# Transfer characteristic of the envelope tracker amplifier
input_impedance = 1000000.0  # ohms
common_mode_offset = 1.0  # V
gain = 2.5  # V/V
output_offset = 2.55  # V

[lut]
# Average DUT input power used to scale waveforms before the table lookup
dut_input_power_dbm = 0.0

[logging]
level = "INFO"  # DEBUG, INFO, WARNING, ERROR, CRITICAL
"""


class ConfigurationManager:
    """Centralized configuration manager using Dynaconf.

    Values missing from the file fall back to the documented defaults of
    DetroughConfiguration and TrackerConfiguration.
    """

    def __init__(self, config_file: Optional[str] = None, create_default: bool = True):
        """Initialize configuration manager.

        Args:
            config_file: Path to configuration file (defaults to config.toml)
            create_default: Whether to create default config if file doesn't exist

        Raises:
            ConfigurationError: If the file cannot be loaded or holds invalid values
        """
        self.config_file = str(config_file or "config.toml")
        self.config_path = Path(self.config_file)

        if not self.config_path.exists() and create_default:
            self._create_default_config()

        try:
            self.settings = Dynaconf(
                settings_files=[self.config_file],
                environments=False,
                load_dotenv=True,
                envvar_prefix="ENVELOPE",
            )
        except Exception as e:
            raise ConfigurationError(f"Failed to load configuration: {e}") from e

        self._validate_configuration()

        logger.info(f"Configuration loaded from {self.config_file}")

    def _create_default_config(self) -> None:
        """Create a default configuration file."""
        self.config_path.parent.mkdir(parents=True, exist_ok=True)
        with open(self.config_path, "w") as f:
            f.write(DEFAULT_CONFIG)

        logger.info(f"Created default configuration file: {self.config_file}")

    def _validate_configuration(self) -> None:
        """Validate configuration parameters, reporting every problem at once."""
        errors: List[str] = []

        try:
            self.create_detrough_config_object()
        except (ConfigurationError, TypeError, ValueError) as e:
            errors.append(f"detrough: {e}")

        try:
            self.create_tracker_config_object()
        except (ConfigurationError, TypeError, ValueError) as e:
            errors.append(f"tracker: {e}")

        try:
            lut = self.get_lut_config()
            if not math.isfinite(lut["dut_input_power_dbm"]):
                errors.append("lut.dut_input_power_dbm must be finite")
        except (TypeError, ValueError) as e:
            errors.append(f"Error validating lut configuration: {e}")

        level = self.get_logging_config()["level"]
        if level not in LOG_LEVELS:
            errors.append(f"logging.level must be one of {', '.join(LOG_LEVELS)}, got {level!r}")

        if errors:
            error_msg = "Configuration validation failed:\n" + "\n".join(
                f"  - {error}" for error in errors
            )
            raise ConfigurationError(error_msg)

    def get_detrough_config(self) -> Dict[str, Any]:
        """Get detrough configuration parameters.

        Returns:
            Dictionary with detrough configuration
        """
        return {
            "detrough_type": str(self.settings.get("detrough.type", "exponential")),
            "minimum_voltage": float(self.settings.get("detrough.minimum_voltage", 1.5)),
            "maximum_voltage": float(self.settings.get("detrough.maximum_voltage", 3.5)),
            "exponent": float(self.settings.get("detrough.exponent", 1.2)),
        }

    def get_tracker_config(self) -> Dict[str, Any]:
        """Get tracker configuration parameters.

        Returns:
            Dictionary with tracker configuration
        """
        return {
            "input_impedance": float(self.settings.get("tracker.input_impedance", 1e6)),
            "common_mode_offset": float(self.settings.get("tracker.common_mode_offset", 1.0)),
            "gain": float(self.settings.get("tracker.gain", 2.5)),
            "output_offset": float(self.settings.get("tracker.output_offset", 2.55)),
        }

    def get_lut_config(self) -> Dict[str, Any]:
        """Get lookup-table envelope parameters.

        Returns:
            Dictionary with lookup-table configuration
        """
        return {
            "dut_input_power_dbm": float(self.settings.get("lut.dut_input_power_dbm", 0.0)),
        }

    def get_logging_config(self) -> Dict[str, Any]:
        """Get logging configuration parameters.

        Returns:
            Dictionary with logging configuration
        """
        return {
            "level": str(self.settings.get("logging.level", "INFO")).upper(),
        }

    def get(self, key: str, default: Any = None) -> Any:
        """Get a configuration value by key.

        Args:
            key: Configuration key (supports dot notation, e.g., 'tracker.gain')
            default: Default value if key is not found

        Returns:
            Configuration value
        """
        return self.settings.get(key, default)

    def set(self, key: str, value: Any) -> None:
        """Set a configuration value.

        Args:
            key: Configuration key (supports dot notation)
            value: Value to set
        """
        self.settings.set(key, value)

    def reload(self) -> None:
        """Reload configuration from file."""
        try:
            self.settings.reload()
        except Exception as e:
            raise ConfigurationError(f"Failed to reload configuration: {e}") from e
        self._validate_configuration()
        logger.info("Configuration reloaded successfully")

    def to_dict(self) -> Dict[str, Any]:
        """Convert configuration to dictionary.

        Returns:
            Dictionary representation of configuration
        """
        return {
            "detrough": self.get_detrough_config(),
            "tracker": self.get_tracker_config(),
            "lut": self.get_lut_config(),
            "logging": self.get_logging_config(),
        }

    def create_detrough_config_object(self) -> DetroughConfiguration:
        """Create DetroughConfiguration object from configuration.

        Returns:
            DetroughConfiguration instance
        """
        return DetroughConfiguration(**self.get_detrough_config())

    def create_tracker_config_object(self) -> TrackerConfiguration:
        """Create TrackerConfiguration object from configuration.

        Returns:
            TrackerConfiguration instance
        """
        return TrackerConfiguration(**self.get_tracker_config())

    def __repr__(self) -> str:
        """String representation of ConfigurationManager."""
        return f"ConfigurationManager(config_file='{self.config_file}')"


# Global configuration instance
_global_config: Optional[ConfigurationManager] = None


def get_config(
    config_file: Optional[str] = None, create_default: bool = True
) -> ConfigurationManager:
    """Get global configuration instance.

    Args:
        config_file: Path to configuration file
        create_default: Whether to create default config if file doesn't exist

    Returns:
        ConfigurationManager instance
    """
    global _global_config

    if _global_config is None or config_file is not None:
        _global_config = ConfigurationManager(config_file, create_default)

    return _global_config


def reload_config() -> None:
    """Reload global configuration."""
    if _global_config is not None:
        _global_config.reload()


def reset_config() -> None:
    """Reset global configuration (force reload on next access)."""
    global _global_config
    _global_config = None
