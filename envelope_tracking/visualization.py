"""
Plots for inspecting synthesized envelopes and tracker scaling.

Every method returns a matplotlib Figure and leaves saving or showing it
to the caller.
"""

from typing import Optional

import matplotlib.pyplot as plt
import numpy as np
from matplotlib.figure import Figure

from .models import TrackerScalingResult, Waveform


class EnvelopeVisualizer:
    """Visualization tools for envelope-tracking waveforms."""

    def __init__(self, max_points: int = 20000):
        """Initialize the envelope visualizer.

        Args:
            max_points: Samples beyond this count are decimated before plotting
        """
        if max_points < 2:
            raise ValueError("max_points must be at least 2")
        self.max_points = max_points

    def _decimation(self, num_samples: int) -> int:
        return max(1, int(np.ceil(num_samples / self.max_points)))

    def plot_transfer_curve(
        self,
        source: Waveform,
        envelope: Waveform,
        title: Optional[str] = None,
    ) -> Figure:
        """Scatter envelope voltage against source IQ magnitude.

        Args:
            source: Source waveform
            envelope: Envelope synthesized from ``source``
            title: Plot title

        Returns:
            Matplotlib Figure object
        """
        if source.num_samples != envelope.num_samples:
            raise ValueError(
                f"Source and envelope differ in length: "
                f"{source.num_samples} vs {envelope.num_samples}"
            )

        step = self._decimation(source.num_samples)
        fig, ax = plt.subplots(figsize=(8, 6))
        ax.plot(
            source.magnitudes()[::step],
            envelope.data.real[::step],
            ".",
            markersize=2,
            alpha=0.5,
        )
        ax.set_xlabel("IQ Magnitude")
        ax.set_ylabel("Supply Voltage (V)")
        ax.set_title(title or f"{envelope.name} - Transfer Curve")
        ax.grid(True, alpha=0.3)
        fig.tight_layout()

        return fig

    def plot_envelope(
        self,
        source: Waveform,
        envelope: Waveform,
        title: Optional[str] = None,
    ) -> Figure:
        """Plot source magnitude and envelope voltage against time.

        Args:
            source: Source waveform
            envelope: Envelope synthesized from ``source``
            title: Plot title

        Returns:
            Matplotlib Figure object
        """
        step = self._decimation(source.num_samples)
        time_axis = np.arange(source.num_samples)[::step] / source.sample_rate

        fig, axes = plt.subplots(2, 1, figsize=(12, 6), sharex=True)

        axes[0].plot(time_axis, source.magnitudes()[::step], label=source.name, alpha=0.7)
        axes[0].set_ylabel("IQ Magnitude")
        axes[0].legend()
        axes[0].grid(True, alpha=0.3)

        axes[1].plot(time_axis, envelope.data.real[::step], label=envelope.name, alpha=0.7)
        axes[1].set_xlabel("Time (s)")
        axes[1].set_ylabel("Supply Voltage (V)")
        axes[1].legend()
        axes[1].grid(True, alpha=0.3)

        fig.suptitle(title or f"{envelope.name} - Time Domain")
        fig.tight_layout()

        return fig

    def plot_tracker_scaling(
        self,
        result: TrackerScalingResult,
        title: Optional[str] = None,
    ) -> Figure:
        """Plot the corrected and normalized envelopes of a tracker scaling.

        Args:
            result: Output of the tracker output scaler
            title: Plot title

        Returns:
            Matplotlib Figure object
        """
        corrected = result.corrected_waveform
        step = self._decimation(corrected.num_samples)
        time_axis = np.arange(corrected.num_samples)[::step] / corrected.sample_rate

        fig, axes = plt.subplots(2, 1, figsize=(12, 6), sharex=True)

        axes[0].plot(time_axis, corrected.data.real[::step], alpha=0.7)
        axes[0].axhline(result.dc_offset, color="gray", linestyle="--", label="DC offset")
        axes[0].axhline(result.absolute_peak, color="red", linestyle=":", label="Absolute peak")
        axes[0].axhline(-result.absolute_peak, color="red", linestyle=":")
        axes[0].set_ylabel("Tracker Input (V)")
        axes[0].legend()
        axes[0].grid(True, alpha=0.3)

        axes[1].plot(time_axis, result.normalized_waveform.data.real[::step], alpha=0.7)
        axes[1].set_ylim(-1.1, 1.1)
        axes[1].set_xlabel("Time (s)")
        axes[1].set_ylabel("Normalized")
        axes[1].grid(True, alpha=0.3)

        fig.suptitle(
            title or f"{corrected.name} - Output Level {result.output_level_vpp:.3f} Vpp"
        )
        fig.tight_layout()

        return fig
