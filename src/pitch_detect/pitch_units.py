# -*- coding: utf-8 -*-
"""
音高单位换算工具：
- 频率(Hz) ↔ MIDI
- 频率(Hz) → 音名 + 八度 + cents 偏差（十二平均律，A4 = 440Hz）
"""

from __future__ import annotations

import math

import numpy as np

from .config import A4_HZ, A4_MIDI

PITCH_NAMES = ("C", "C#", "D", "Eb", "E", "F", "F#", "G", "G#", "A", "Bb", "B")

BELOW_RANGE = "< C1"


def _round_half_away(x: float) -> int:
    """四舍五入（.5 远离 0），不用 Python 的银行家舍入"""
    # 不写成 floor(x + 0.5)：0.49999999999999994 + 0.5 会进位成 1.0
    whole = math.floor(abs(x))
    if abs(x) - whole >= 0.5:
        whole += 1
    return int(math.copysign(whole, x))


def _trunc_div(a: int, b: int) -> int:
    """向 0 取整的整数除法（Python 的 // 是向下取整）"""
    q = abs(a) // b
    return q if a >= 0 else -q


def hz_to_midi(f_hz: float) -> float:
    """
    把频率(Hz)转换为 MIDI 数值（可以是小数）
    参考：A4 = 440Hz 对应 MIDI=69
    """
    if not np.isfinite(f_hz) or f_hz <= 0:
        return float("nan")
    return A4_MIDI + 12.0 * math.log2(f_hz / A4_HZ)


def midi_to_hz(m: float) -> float:
    return A4_HZ * (2.0 ** ((m - A4_MIDI) / 12.0))


def _octave(midi_int: int) -> int:
    # MIDI 0 是 C-1
    return _trunc_div(midi_int, len(PITCH_NAMES)) - 1


def _cents(midi: float) -> int:
    """离最近半音的偏差，取值 [-50, 50)"""
    cents = int(math.fmod(_round_half_away(midi * 100.0), 100))
    if cents >= 50:
        cents -= 100
    return cents


def hz_to_pitch(hz: float) -> str:
    """
    频率 -> "音名八度 ±cents"，例如 440 -> "A4 +0"
    八度 < 0 时返回 "< C1"
    """
    if not np.isfinite(hz) or hz <= 0:
        raise ValueError(f"频率必须是正数，当前为 {hz}")

    midi = hz_to_midi(hz)
    rounded = _round_half_away(midi)

    octave = _octave(rounded)
    if octave < 0:
        return BELOW_RANGE

    name = PITCH_NAMES[rounded % len(PITCH_NAMES)]
    return f"{name}{octave} {_cents(midi):+d}"


def hz_to_cents_error(hz: float) -> float:
    """
    cents 偏差（与 hz_to_pitch 标签里的数字一致）
    >0 表示偏高，<0 表示偏低；无效频率或低于 C0 时返回 nan
    """
    if not np.isfinite(hz) or hz <= 0:
        return float("nan")

    midi = hz_to_midi(hz)
    if _octave(_round_half_away(midi)) < 0:
        return float("nan")
    return float(_cents(midi))
