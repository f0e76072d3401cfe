"""
Temporal keypoint smoothing.

Three interchangeable strategies behind one interface:
1. Windowed mean: average of the last W raw samples per joint. Latency of up
   to W-1 frames, robust to single-frame outliers.
2. Exponential moving average: one decayed estimate per joint,
   estimate' = estimate + alpha * (raw - estimate). Lower latency.
3. Savitzky-Golay: polynomial fit over the last W samples. Preserves
   peaks and valleys (lockout, bottom of a squat) without EMA's phase lag.
   Falls back to EMA until the window is full.

History is keyed by joint name and created lazily. A joint seen for the
first time passes through unchanged. Call reset() when switching exercises
so stale positions never leak into an unrelated recording.
"""

from abc import ABC, abstractmethod
from collections import deque
from typing import Deque, Dict, Tuple

import numpy as np
from scipy.signal import savgol_filter

from formcoach.cv.keypoints import Keypoint, KeypointFrame

MIN_ALPHA = 0.1
MAX_ALPHA = 0.9


def _clamp_alpha(alpha: float) -> float:
    return max(MIN_ALPHA, min(MAX_ALPHA, alpha))


class KeypointSmoother(ABC):
    """Common contract: smooth(frame) -> frame, reset()."""

    @abstractmethod
    def smooth(self, frame: KeypointFrame) -> KeypointFrame:
        """Return a new frame with smoothed coordinates and scores."""

    @abstractmethod
    def reset(self):
        """Clear all per-joint history."""

    @property
    @abstractmethod
    def tracked_joints(self) -> int:
        """Number of joint names with history."""


class WindowedMeanSmoother(KeypointSmoother):
    """Arithmetic mean of the last `window_size` samples per joint."""

    def __init__(self, window_size: int = 5):
        if window_size < 1:
            raise ValueError(f"window_size must be >= 1, got {window_size}")
        self.window_size = window_size
        self.history: Dict[str, Deque[Tuple[float, float, float]]] = {}

    def smooth(self, frame: KeypointFrame) -> KeypointFrame:
        smoothed = []
        for kp in frame.keypoints:
            if kp.name not in self.history:
                self.history[kp.name] = deque(maxlen=self.window_size)
            window = self.history[kp.name]
            window.append((kp.x, kp.y, kp.score))

            mean_x, mean_y, mean_score = np.asarray(window, dtype=float).mean(axis=0)
            smoothed.append(Keypoint(
                name=kp.name,
                x=float(mean_x),
                y=float(mean_y),
                score=float(mean_score),
            ))
        return frame.with_keypoints(smoothed)

    def reset(self):
        self.history.clear()

    @property
    def tracked_joints(self) -> int:
        return len(self.history)


class EMASmoother(KeypointSmoother):
    """Exponential moving average, alpha clamped to [0.1, 0.9]."""

    def __init__(self, alpha: float = 0.3):
        self.alpha = _clamp_alpha(alpha)
        self.estimates: Dict[str, Tuple[float, float, float]] = {}

    def smooth(self, frame: KeypointFrame) -> KeypointFrame:
        smoothed = []
        for kp in frame.keypoints:
            previous = self.estimates.get(kp.name)
            if previous is None:
                self.estimates[kp.name] = (kp.x, kp.y, kp.score)
                smoothed.append(kp)
                continue

            prev_x, prev_y, prev_score = previous
            x = prev_x + self.alpha * (kp.x - prev_x)
            y = prev_y + self.alpha * (kp.y - prev_y)
            score = prev_score + self.alpha * (kp.score - prev_score)
            self.estimates[kp.name] = (x, y, score)
            smoothed.append(Keypoint(name=kp.name, x=x, y=y, score=score))
        return frame.with_keypoints(smoothed)

    def set_alpha(self, alpha: float):
        self.alpha = _clamp_alpha(alpha)

    def reset(self):
        self.estimates.clear()

    @property
    def tracked_joints(self) -> int:
        return len(self.estimates)


class SavitzkyGolaySmoother(KeypointSmoother):
    """
    Savitzky-Golay smoothing over the last `window_size` samples.

    The window must be odd and larger than the polynomial order. Until a
    joint has a full window the EMA estimate is used instead.
    """

    def __init__(self, window_size: int = 7, poly_order: int = 2, alpha: float = 0.3):
        if window_size % 2 == 0:
            window_size += 1
        if window_size <= poly_order:
            raise ValueError(
                f"window_size ({window_size}) must be greater than poly_order ({poly_order})"
            )
        self.window_size = window_size
        self.poly_order = poly_order
        self.history: Dict[str, Deque[Tuple[float, float, float]]] = {}
        self._ema = EMASmoother(alpha)

    def smooth(self, frame: KeypointFrame) -> KeypointFrame:
        ema_frame = self._ema.smooth(frame)
        smoothed = []
        for kp, ema_kp in zip(frame.keypoints, ema_frame.keypoints):
            if kp.name not in self.history:
                self.history[kp.name] = deque(maxlen=self.window_size)
            window = self.history[kp.name]
            window.append((kp.x, kp.y, kp.score))

            if len(window) < self.window_size:
                smoothed.append(ema_kp)
                continue

            samples = np.asarray(window, dtype=float)
            xs = savgol_filter(samples[:, 0], self.window_size, self.poly_order)
            ys = savgol_filter(samples[:, 1], self.window_size, self.poly_order)
            smoothed.append(Keypoint(
                name=kp.name,
                x=float(xs[-1]),
                y=float(ys[-1]),
                score=float(samples[:, 2].mean()),
            ))
        return frame.with_keypoints(smoothed)

    def reset(self):
        self.history.clear()
        self._ema.reset()

    @property
    def tracked_joints(self) -> int:
        return len(self.history)


SMOOTHING_STRATEGIES = ("window", "ema", "savgol")


def create_smoother(
    strategy: str = "window",
    window_size: int = 5,
    alpha: float = 0.3,
    poly_order: int = 2,
) -> KeypointSmoother:
    """
    Factory function for smoothers.

    Args:
        strategy: "window", "ema" or "savgol"
        window_size: Samples per joint for the window and savgol strategies
        alpha: EMA factor (also the savgol warm-up fallback)
        poly_order: Savitzky-Golay polynomial order
    """
    if strategy == "window":
        return WindowedMeanSmoother(window_size)
    elif strategy == "ema":
        return EMASmoother(alpha)
    elif strategy == "savgol":
        return SavitzkyGolaySmoother(window_size, poly_order, alpha)
    raise ValueError(f"Unsupported smoothing strategy: {strategy}")
