#!/usr/bin/env python3
"""
Detrough envelope demonstration.

Compares the exponential, cosine and power companding curves and plots the
transfer curve of each.

Run with: uv run python examples/detrough_demo.py
"""

import matplotlib

matplotlib.use("Agg")

import numpy as np  # noqa: E402

from envelope_tracking import (  # noqa: E402
    DetroughConfiguration,
    DetroughSynthesizer,
    DetroughType,
    EnvelopeVisualizer,
    Waveform,
)


def main():
    """Main demonstration function."""
    print("=" * 60)
    print("ENVELOPE TRACKING - DETROUGH CURVES")
    print("=" * 60)

    magnitude = np.linspace(0.0, 1.0, 11)
    source = Waveform(name="Ramp", data=magnitude.astype(complex), sample_rate=1e6)
    visualizer = EnvelopeVisualizer()

    print(f"{'|IQ|':>6}" + "".join(f"{t.value:>14}" for t in DetroughType))
    curves = {}
    for detrough_type in DetroughType:
        config = DetroughConfiguration(
            detrough_type=detrough_type, minimum_voltage=1.5, maximum_voltage=3.5, exponent=1.2
        )
        curves[detrough_type] = DetroughSynthesizer(config).synthesize(source)

    for i, m in enumerate(magnitude):
        row = "".join(f"{curves[t].data.real[i]:>14.4f}" for t in DetroughType)
        print(f"{m:>6.2f}{row}")

    for detrough_type, envelope in curves.items():
        fig = visualizer.plot_transfer_curve(source, envelope, title=detrough_type.value)
        filename = f"detrough_{detrough_type.value}.png"
        fig.savefig(filename, dpi=100)
        print(f"Saved {filename}")


if __name__ == "__main__":
    main()
