#!/usr/bin/env python3
"""
Error handling demonstration.

Shows configuration errors raised before synthesis, domain errors raised
during scaling, and the diagnostic report of recorded failures.

Run with: uv run python examples/error_handling_demo.py
"""

import numpy as np

from envelope_tracking import (
    ConfigurationError,
    DetroughConfiguration,
    DomainError,
    EnvelopeTrackingGenerator,
    LookUpTable,
    TrackerConfiguration,
    Waveform,
)


def main():
    """Main demonstration function."""
    print("=" * 60)
    print("ENVELOPE TRACKING - ERROR HANDLING")
    print("=" * 60)

    print("\n1. Configuration errors:")
    for label, build in [
        ("unknown detrough type", lambda: DetroughConfiguration(detrough_type="triangle")),
        ("inverted voltages", lambda: DetroughConfiguration(minimum_voltage=4.0)),
        ("zero tracker gain", lambda: TrackerConfiguration(gain=0.0)),
        ("one-point table", lambda: LookUpTable([0.0], [1.0])),
    ]:
        try:
            build()
        except ConfigurationError as e:
            print(f"  {label}: {e}")

    print("\n2. Domain errors:")
    generator = EnvelopeTrackingGenerator(
        tracker_config=TrackerConfiguration(gain=1.0, output_offset=0.0)
    )
    silent = Waveform(name="Silent", data=np.zeros(64), sample_rate=1e6)
    try:
        generator.scale_envelope(silent)
    except DomainError as e:
        print(f"  scale_envelope: {e}")

    print("\n3. Diagnostic report:")
    print(generator.get_diagnostic_report())


if __name__ == "__main__":
    main()
