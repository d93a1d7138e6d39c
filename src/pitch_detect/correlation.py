# -*- coding: utf-8 -*-
"""
自相关法估计基频（Hz）。
直接在原始采样上算，不依赖频域转换。
"""

from __future__ import annotations

import logging
from typing import Optional, Sequence

import numpy as np

from .transforms import check_buffer

logger = logging.getLogger(__name__)


def correlation(samples: Sequence[float]) -> np.ndarray:
    """
    自相关曲线（不归一化，不去直流）：
      c[L] = sum_{i=0}^{N-L-1} x[i] * x[i+L],  L = 0..N-1
    滞后越大，参与求和的点越少。
    """
    x = np.asarray(samples, dtype=float)
    if x.ndim != 1 or x.size == 0:
        raise ValueError(f"采样缓冲必须是非空的一维序列，当前 shape={x.shape}")

    corr = np.correlate(x, x, mode="full")
    return corr[len(x) - 1:]  # 从 lag=0 开始


def suppress_zero_lag_peak(curve: np.ndarray) -> np.ndarray:
    """
    去掉 lag=0 处的“自己和自己”的峰：
    从 lag=1 往后走，只要曲线没有上升，就把前一个点清零；
    第一次上升时停下（后面就是朝真正周期峰爬坡的部分）。

    返回新数组，不改输入。
    """
    c = np.array(curve, dtype=float)
    if c.size < 2:
        return c

    rising = np.flatnonzero(c[:-1] < c[1:])
    cut = int(rising[0]) if rising.size > 0 else c.size - 1
    c[:cut] = 0.0
    return c


def peak_lag(curve: np.ndarray) -> int:
    """
    全局最大值所在的 lag；初始候选为 (0, 0.0)，只有严格更大才替换。
    整条曲线都 <= 0 时返回 0。
    """
    if len(curve) == 0:
        return 0
    i = int(np.argmax(curve))
    if not curve[i] > 0.0:
        return 0
    return i


def estimate_autocorrelation(samples: Sequence[float], sample_rate: float) -> Optional[float]:
    """
    输入：一段固定长度的采样 + 采样率
    输出：
      f0_hz: 基频（Hz）
      None : 找不到周期峰（例如静音），不会返回 inf / nan
    """
    x = check_buffer(samples, sample_rate)

    corr = suppress_zero_lag_peak(correlation(x))
    lag = peak_lag(corr)

    if lag == 0:
        logger.debug("自相关没有找到 lag>0 的峰（N=%d）", len(x))
        return None

    period = lag / sample_rate
    return 1.0 / period
