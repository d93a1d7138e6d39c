# src/pitch_detect/io_audio.py
# ============================================
# 音频输入
#
# 职责边界：
# 1. 读取音频文件 -> 单声道 float32 数组（soundfile 读，librosa 重采样）
# 2. 从整段音频里截出一段固定长度的分析缓冲
# 3. 不做任何音高估计
# ============================================

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Optional, Tuple

import numpy as np
import librosa
import soundfile as sf

from .config import FRAME_SIZE, SAMPLE_RATE


@dataclass(frozen=True)
class AudioConfig:
    """
    音频读取配置
    """
    sr: Optional[int] = SAMPLE_RATE  # 目标采样率（Hz），None 表示保持原采样率
    channel: Optional[int] = None    # 多声道时取哪一路，None 表示各声道取平均
    normalize: bool = True           # 是否按峰值归一化到 [-1, 1]


def load_audio(
    path: str | Path,
    cfg: AudioConfig = AudioConfig()
) -> Tuple[np.ndarray, int]:
    """
    返回:
      y: np.ndarray, float32 单声道
      sr: 采样率
    """
    path = Path(path)
    if not path.exists():
        raise FileNotFoundError(f"音频文件不存在: {path}")

    # always_2d：单声道也是 (frames, 1)，后面统一处理
    data, sr = sf.read(path.as_posix(), dtype="float32", always_2d=True)
    if data.size == 0:
        raise ValueError(f"读取到空音频: {path}")

    if cfg.channel is None:
        y = data.mean(axis=1)
    else:
        if not 0 <= cfg.channel < data.shape[1]:
            raise ValueError(f"声道 {cfg.channel} 不存在（共 {data.shape[1]} 路）: {path}")
        y = data[:, cfg.channel]

    if cfg.sr is not None and sr != cfg.sr:
        y = librosa.resample(y, orig_sr=sr, target_sr=cfg.sr)
        sr = cfg.sr

    y = y.astype(np.float32)

    if cfg.normalize:
        peak = float(np.max(np.abs(y)))
        if peak > 0:
            y = y / peak

    return y, int(sr)


def take_buffer(
    y: np.ndarray,
    sr: int,
    frame_size: int = FRAME_SIZE,
    offset_sec: float = 0.0,
) -> np.ndarray:
    """
    从 offset_sec 开始截取 frame_size 个采样点
    不够长就在尾部补零
    """
    if frame_size <= 0:
        raise ValueError(f"frame_size 必须 > 0，当前为 {frame_size}")
    if offset_sec < 0:
        raise ValueError(f"offset_sec 不能为负，当前为 {offset_sec}")
    if y.size == 0:
        raise ValueError("音频为空，无法截取缓冲")

    start = int(round(offset_sec * sr))
    if start >= len(y):
        raise ValueError(f"offset {offset_sec}s 超出音频长度 {len(y) / sr:.3f}s")

    buf = np.asarray(y[start:start + frame_size], dtype=np.float64)
    if len(buf) < frame_size:
        buf = np.pad(buf, (0, frame_size - len(buf)), mode="constant")
    return buf
