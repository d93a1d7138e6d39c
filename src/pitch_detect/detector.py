# src/pitch_detect/detector.py
# =========================================================
# 音高检测入口
#
# 把三件事串起来：
#   采样缓冲 -> 基频（频谱法 或 自相关法）-> 音名 + cents 偏差
#
# 两个估计器互相独立，可以只跑一个，也可以都跑做对照
# =========================================================

from __future__ import annotations

import logging
from dataclasses import dataclass, asdict
from typing import Dict, Any, Optional, Sequence, Tuple

import numpy as np

from .config import FRAME_SIZE, METHOD_AUTOCORRELATION, METHOD_SPECTRAL, METHODS
from .correlation import estimate_autocorrelation
from .io_audio import take_buffer
from .pitch_units import hz_to_cents_error, hz_to_pitch
from .transforms import estimate_spectral, transform

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class DetectorConfig:
    method: str = METHOD_AUTOCORRELATION
    frame_size: int = FRAME_SIZE  # 从长音频里截取的缓冲长度


@dataclass(frozen=True)
class PitchReading:
    method: str
    frequency_hz: float
    pitch: str
    cents_error: float  # nan 表示低于可命名范围

    def to_dict(self) -> Dict[str, Any]:
        return asdict(self)


def estimate_fundamental(
    samples: Sequence[float],
    sample_rate: float,
    method: str = METHOD_AUTOCORRELATION,
) -> Optional[float]:
    """按 method 选择估计器，返回基频（Hz）或 None"""
    if method == METHOD_SPECTRAL:
        return estimate_spectral(transform(samples, sample_rate))
    if method == METHOD_AUTOCORRELATION:
        return estimate_autocorrelation(samples, sample_rate)
    raise ValueError(f"Unknown method '{method}'，可选：{', '.join(METHODS)}")


def detect_pitch(
    samples: Sequence[float],
    sample_rate: float,
    cfg: DetectorConfig = DetectorConfig(),
) -> Optional[PitchReading]:
    """
    一次完整检测：基频 -> 音名 + cents
    没有可信基频时返回 None
    """
    f0 = estimate_fundamental(samples, sample_rate, cfg.method)
    if f0 is None:
        logger.debug("%s: no fundamental found", cfg.method)
        return None

    reading = PitchReading(
        method=cfg.method,
        frequency_hz=f0,
        pitch=hz_to_pitch(f0),
        cents_error=hz_to_cents_error(f0),
    )
    logger.debug("%s: %.2f Hz -> %s", cfg.method, f0, reading.pitch)
    return reading


def detect_from_audio(
    y: np.ndarray,
    sr: int,
    cfg: DetectorConfig = DetectorConfig(),
    offset_sec: float = 0.0,
) -> Tuple[np.ndarray, Optional[PitchReading]]:
    """
    从整段音频的 offset_sec 处截取 cfg.frame_size 个点再检测
    返回 (分析缓冲, 检测结果)
    """
    buf = take_buffer(y, sr, frame_size=cfg.frame_size, offset_sec=offset_sec)
    return buf, detect_pitch(buf, sr, cfg)


def detect_all(samples: Sequence[float], sample_rate: float) -> Dict[str, Optional[PitchReading]]:
    """两种方法都跑一遍，方便对照"""
    return {
        method: detect_pitch(samples, sample_rate, DetectorConfig(method=method))
        for method in METHODS
    }
