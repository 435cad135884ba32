"""Averaging of two-channel ADC readings and their mapping to light settings."""

from __future__ import annotations

from collections.abc import Iterable

CONVERSIONS_PER_AVERAGE = 250
SAMPLES_PER_CONVERSION = 10

MIN_TEMPERATURE = 2500
MAX_TEMPERATURE = 6500
_LOW_SNAP = 2550
_HIGH_SNAP = 6450


def brightness_from_raw(raw: int) -> int:
    """Map an averaged channel-1 reading to a brightness level."""
    return int(raw / 37.0) & 0xFFFF


def temperature_from_raw(raw: int) -> int:
    """Map an averaged channel-0 reading to a colour temperature in kelvin."""
    scaled = int(((raw - 35.0) / 3659.0) * 4000.0 + 2500.0)
    if scaled < _LOW_SNAP:
        return MIN_TEMPERATURE
    if scaled > _HIGH_SNAP:
        return MAX_TEMPERATURE
    return scaled


class SampleAverager:
    """Accumulates conversion frames and publishes per-channel averages."""

    def __init__(self) -> None:
        self.ch0_avg = 0
        self.ch1_avg = 0
        self._ch0_sum = 0
        self._ch1_sum = 0
        self._conversions = 0

    def add_conversion(self, samples: Iterable[tuple[int, int]]) -> tuple[int, int] | None:
        """Add one frame of (channel 0, channel 1) samples.

        Returns the new averages when a full averaging window completes,
        otherwise None.
        """
        frame = list(samples)
        if len(frame) != SAMPLES_PER_CONVERSION:
            raise ValueError(
                f"a conversion holds {SAMPLES_PER_CONVERSION} samples, got {len(frame)}"
            )
        for ch0, ch1 in frame:
            self._ch0_sum += ch0 & 0xFFFF
            self._ch1_sum += ch1 & 0xFFFF
        self._conversions += 1

        if self._conversions != CONVERSIONS_PER_AVERAGE - 1:
            return None

        divisor = SAMPLES_PER_CONVERSION * CONVERSIONS_PER_AVERAGE
        self.ch0_avg = (self._ch0_sum // divisor) & 0xFFFF
        self.ch1_avg = (self._ch1_sum // divisor) & 0xFFFF
        self._ch0_sum = 0
        self._ch1_sum = 0
        self._conversions = 0
        return self.ch0_avg, self.ch1_avg

    @property
    def brightness(self) -> int:
        """Brightness derived from the latest channel-1 average."""
        return brightness_from_raw(self.ch1_avg)

    @property
    def temperature(self) -> int:
        """Colour temperature derived from the latest channel-0 average."""
        return temperature_from_raw(self.ch0_avg)