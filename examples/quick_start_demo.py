#!/usr/bin/env python3
"""
Quick start demonstration of envelope-tracking waveform synthesis.

Builds a detrough envelope and a LUT envelope from a synthetic OFDM-like
waveform and scales both for the tracker.

Run with: uv run python examples/quick_start_demo.py
"""

import logging

import numpy as np

from envelope_tracking import (
    EnvelopeTrackingGenerator,
    LookUpTable,
    Waveform,
    get_config,
    quick_detrough_envelope,
)


def make_source_waveform() -> Waveform:
    """Gaussian IQ noise standing in for an OFDM waveform, normalized to peak 1."""
    rng = np.random.default_rng(2024)
    data = rng.normal(size=20000) + 1j * rng.normal(size=20000)
    waveform = Waveform(
        name="OFDM",
        data=data,
        sample_rate=30.72e6,
        signal_bandwidth=20e6,
        script="script OFDMScript\n  repeat forever\n    generate OFDM\n  end repeat\nend script",
    ).normalized()
    waveform.papr_db = waveform.measured_papr_db()
    return waveform


def quick_start_example():
    """Demonstrate the quickest way to use the system."""
    print("Envelope Tracking - Quick Start")
    print("=" * 50)

    source = make_source_waveform()
    print(f"Source '{source.name}': {source.num_samples} samples, PAPR {source.papr_db:.2f} dB")

    print("\n1. Using convenience functions:")
    result = quick_detrough_envelope(source)
    print(f"  Envelope '{result.corrected_waveform.name}'")
    print(f"  Output level: {result.output_level_vpp:.4f} Vpp")
    print(f"  Output offset: {result.output_offset:.1f} V")

    print("\n2. Using main interface:")
    lut = LookUpTable(
        dut_input_power_dbm=[-20.0, -10.0, -5.0, 0.0, 5.0, 10.0],
        supply_voltage=[1.5, 1.6, 1.9, 2.4, 3.1, 4.0],
    )
    with EnvelopeTrackingGenerator() as generator:
        envelope = generator.create_lut_envelope(source, lut, dut_input_power_dbm=0.0)
        print(
            f"  LUT envelope range: "
            f"[{envelope.data.real.min():.3f}, {envelope.data.real.max():.3f}] V"
        )
        scaled = generator.scale_envelope(envelope)
        print(f"  Absolute peak at tracker input: {scaled.absolute_peak:.4f} V")
        print(f"  Script: {scaled.corrected_waveform.script!r}")

    print("\nQuick start completed.")


if __name__ == "__main__":
    logging.basicConfig(
        level=get_config().get_logging_config()["level"],
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    quick_start_example()
