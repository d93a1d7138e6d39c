# src/pitch_detect/report.py
# =========================================================
# 检测结果输出（JSON + 图）
#
# 图只用于“看一眼缓冲里发生了什么”：
#   上：波形（示波器视图）
#   中：频率桶强度
#   下：去掉 lag=0 峰之后的自相关曲线
# 图中文字全部使用英文（避免字体问题）
# =========================================================

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, Any, Optional, Sequence

import numpy as np
import matplotlib.pyplot as plt

from .transforms import FrequencyBucket


def save_reading_json(out_path: str | Path, payload: Dict[str, Any]) -> None:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)
    with open(out_path, "w", encoding="utf-8") as f:
        json.dump(payload, f, ensure_ascii=False, indent=2)


def save_analysis_figure(
    out_path: str | Path,
    samples: np.ndarray,
    sr: int,
    spectrum: Sequence[FrequencyBucket],
    corr_curve: np.ndarray,
    title: str,
    f0_hz: Optional[float] = None,
) -> None:
    out_path = Path(out_path)
    out_path.parent.mkdir(parents=True, exist_ok=True)

    t_ms = np.arange(len(samples)) * 1000.0 / sr
    freqs = np.array([b.ave_freq for b in spectrum])
    intensity = np.array([b.intensity for b in spectrum])
    lags = np.arange(len(corr_curve))

    fig, axes = plt.subplots(3, 1, figsize=(10, 9))

    axes[0].plot(t_ms, samples, linewidth=1)
    axes[0].set_xlabel("Time (ms)")
    axes[0].set_ylabel("Amplitude")
    axes[0].set_title(title)

    axes[1].plot(freqs, intensity, linewidth=1)
    axes[1].axhline(0, linewidth=1)
    axes[1].set_xlabel("Frequency (Hz)")
    axes[1].set_ylabel("Bucket intensity")

    axes[2].plot(lags, corr_curve, linewidth=1)
    axes[2].set_xlabel("Lag (samples)")
    axes[2].set_ylabel("Autocorrelation")

    # 标出基频位置（频谱上是频率，自相关上是周期对应的 lag）
    if f0_hz is not None and f0_hz > 0:
        axes[1].axvline(f0_hz, linestyle="--", linewidth=1, color="red", label=f"F0 {f0_hz:.1f} Hz")
        axes[1].legend(loc="upper right")
        axes[2].axvline(sr / f0_hz, linestyle="--", linewidth=1, color="red")

    fig.tight_layout()
    fig.savefig(out_path, dpi=150)
    plt.close(fig)
