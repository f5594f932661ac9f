from __future__ import annotations

import math
from typing import Tuple

import numpy as np


def clamp_pan(value: float) -> float:
    """Clamp a pan value into [-1.0, 1.0]; NaN is treated as center."""
    value = float(value)
    if math.isnan(value):
        return 0.0
    return max(-1.0, min(1.0, value))


class StereoPanner:
    """
    Single stereo-pan node between a decoded source and the output sink.

    Uses the same equal-power law as the Web Audio StereoPannerNode, so a
    clip panned here sounds the way it did in the browser client. The pan is
    fixed for the lifetime of the node.
    """

    def __init__(self, pan: float = 0.0) -> None:
        self.pan = clamp_pan(pan)

    def gains(self) -> Tuple[float, float]:
        """Left/right gains applied to a mono source."""
        x = (self.pan + 1.0) / 2.0
        return math.cos(x * math.pi / 2.0), math.sin(x * math.pi / 2.0)

    def process(self, samples: np.ndarray) -> np.ndarray:
        """
        Render samples of shape (frames,) or (frames, channels) to a
        (frames, 2) float32 array.
        """
        samples = np.asarray(samples, dtype=np.float32)
        if samples.ndim == 1:
            samples = samples[:, np.newaxis]
        if samples.shape[1] > 2:
            samples = samples.mean(axis=1, keepdims=True)

        if samples.shape[1] == 1:
            left_gain, right_gain = self.gains()
            mono = samples[:, 0]
            out = np.stack([mono * left_gain, mono * right_gain], axis=1)
            return np.ascontiguousarray(out, dtype=np.float32)

        left = samples[:, 0]
        right = samples[:, 1]
        if self.pan <= 0.0:
            x = (self.pan + 1.0) * math.pi / 2.0
            out_left = left + right * math.cos(x)
            out_right = right * math.sin(x)
        else:
            x = self.pan * math.pi / 2.0
            out_left = left * math.cos(x)
            out_right = right + left * math.sin(x)
        out = np.stack([out_left, out_right], axis=1)
        return np.ascontiguousarray(out, dtype=np.float32)
