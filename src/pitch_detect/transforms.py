# src/pitch_detect/transforms.py
# =========================================================
# 频域转换 + 频谱基频估计
#
# 做的事情：
# 1) 把一段固定长度的采样（时域）变成一串“频率桶”（频域）
# 2) 在频率桶里挑出最强的“显著”桶，把它的中心频率当作基频
#
# 说明：
# - 不加窗、不降噪：输入是什么就算什么
# - 桶的 intensity 是 FFT 输出的原始分量（实部或虚部），不是幅度
#   这会丢掉相位信息，但下游的选峰逻辑就是按这个值设计的
# =========================================================

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Sequence, Tuple

import numpy as np

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FrequencyBucket:
    """一个频率桶：[min_freq, max_freq) 区间 + 该区间的强度"""
    min_freq: float
    max_freq: float
    intensity: float

    @property
    def ave_freq(self) -> float:
        return (self.min_freq + self.max_freq) / 2.0


def check_buffer(samples: Sequence[float], sample_rate: float) -> np.ndarray:
    x = np.asarray(samples, dtype=float)
    if x.ndim != 1 or x.size == 0:
        raise ValueError(f"采样缓冲必须是非空的一维序列，当前 shape={x.shape}")
    if not sample_rate > 0:
        raise ValueError(f"采样率必须 > 0，当前为 {sample_rate}")
    return x


def packed_real_fft(x: np.ndarray) -> np.ndarray:
    """
    实数 FFT，按“打包格式”输出，长度与输入相同：
      [Re X0, Re X(N/2), Re X1, Im X1, Re X2, Im X2, ...]
    N 为奇数时没有 Nyquist 项：
      [Re X0, Re X1, Im X1, ...]

    这样第 i 个输出值大约落在 i * sr / (2N) 的频率上，
    正好对应频率桶的划分方式。
    """
    n = len(x)
    spec = np.fft.rfft(x)
    out = np.empty(n, dtype=float)
    out[0] = spec[0].real

    if n % 2 == 0:
        if n >= 2:
            out[1] = spec[n // 2].real
        pairs = spec[1:n // 2]
        out[2::2] = pairs.real
        out[3::2] = pairs.imag
    else:
        pairs = spec[1:(n + 1) // 2]
        out[1::2] = pairs.real
        out[2::2] = pairs.imag

    return out


def transform(samples: Sequence[float], sample_rate: float) -> Tuple[FrequencyBucket, ...]:
    """
    时域采样 -> 频率桶序列

    - 先减去均值（去直流），避免 0Hz 处出现假的尖峰
    - 桶宽 = sample_rate / (2N)，N 个桶覆盖 [0, sample_rate/2)
    """
    x = check_buffer(samples, sample_rate)
    frames = len(x)

    centered = x - np.mean(x)
    intensities = packed_real_fft(centered)

    resolution = sample_rate / 2.0 / frames

    return tuple(
        FrequencyBucket(
            min_freq=index * resolution,
            max_freq=(index + 1) * resolution,
            intensity=float(value),
        )
        for index, value in enumerate(intensities)
    )


def estimate_spectral(spectrum: Sequence[FrequencyBucket]) -> Optional[float]:
    """
    在频率桶里找基频（Hz），没有显著桶时返回 None

    步骤：
    1) 只看 intensity > 0 的桶
    2) 平均值 = 正桶强度之和 / 全部桶数（注意分母是全部桶数）
    3) 比平均值大的正桶 = 显著桶
    4) 显著桶里强度最大的那个（并列取频率最低的）
    """
    if len(spectrum) == 0:
        return None

    positive = [b for b in spectrum if b.intensity > 0]
    average = sum(b.intensity for b in positive) / len(spectrum)
    significant = [b for b in positive if b.intensity > average]

    if not significant:
        logger.debug("没有显著频率桶（%d 个桶，%d 个正桶）", len(spectrum), len(positive))
        return None

    # max 遇到并列时保留第一个，即频率最低的
    best = max(significant, key=lambda b: b.intensity)
    return best.ave_freq
