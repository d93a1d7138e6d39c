# src/pitch_detect/__init__.py
# =========================================================
# pitch_detect 模块对外接口
# =========================================================

from .transforms import FrequencyBucket, transform, estimate_spectral
from .correlation import correlation, suppress_zero_lag_peak, estimate_autocorrelation
from .pitch_units import PITCH_NAMES, hz_to_midi, hz_to_pitch, hz_to_cents_error
from .detector import DetectorConfig, PitchReading, estimate_fundamental, detect_pitch, detect_from_audio, detect_all

__all__ = [
    "FrequencyBucket",
    "transform",
    "estimate_spectral",
    "correlation",
    "suppress_zero_lag_peak",
    "estimate_autocorrelation",
    "PITCH_NAMES",
    "hz_to_midi",
    "hz_to_pitch",
    "hz_to_cents_error",
    "DetectorConfig",
    "PitchReading",
    "estimate_fundamental",
    "detect_pitch",
    "detect_from_audio",
    "detect_all",
]
