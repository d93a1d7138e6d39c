"""
频域转换与频谱基频估计的测试
"""

import pytest
import numpy as np
import sys
import os

# 为测试添加src到路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pitch_detect.transforms import FrequencyBucket, transform, estimate_spectral, packed_real_fft

SAMPLE_RATE = 44100.0
FRAMES = 512


def frequency_resolution():
    return SAMPLE_RATE / 2.0 / FRAMES


def sample_sinusoid(amplitude, frequency, phase=0.0):
    t = np.arange(FRAMES) / SAMPLE_RATE
    return amplitude * np.sin(2 * np.pi * frequency * t + phase)


def test_spectral_on_sine_wave():
    """纯正弦波（A4）：误差在一个桶宽以内"""
    frequency = 440.0
    samples = sample_sinusoid(1.0, frequency)

    fundamental = estimate_spectral(transform(samples, SAMPLE_RATE))

    assert fundamental is not None
    assert abs(fundamental - frequency) < frequency_resolution()


def test_spectral_on_two_sine_waves():
    """440Hz(幅度2) + 880Hz(幅度1)：应该得到 440 而不是 880"""
    samples = sample_sinusoid(2.0, 440.0) + sample_sinusoid(1.0, 880.0)

    fundamental = estimate_spectral(transform(samples, SAMPLE_RATE))

    assert fundamental is not None
    assert abs(fundamental - 440.0) < frequency_resolution()


def test_transform_is_idempotent():
    samples = sample_sinusoid(1.0, 440.0) + 0.3
    a = transform(samples, SAMPLE_RATE)
    b = transform(samples, SAMPLE_RATE)
    assert a == b


def test_bucket_tiling():
    """桶首尾相接，从 0Hz 开始，覆盖到 Nyquist"""
    spectrum = transform(sample_sinusoid(1.0, 440.0), SAMPLE_RATE)

    assert len(spectrum) == FRAMES
    assert spectrum[0].min_freq == 0
    for left, right in zip(spectrum[:-1], spectrum[1:]):
        assert left.max_freq == right.min_freq
        assert left.min_freq < left.max_freq
    assert spectrum[-1].max_freq == pytest.approx(SAMPLE_RATE / 2)


def test_dc_is_removed():
    """直流偏置被去掉后，0Hz 桶接近 0"""
    spectrum = transform(sample_sinusoid(1.0, 440.0) + 5.0, SAMPLE_RATE)
    assert abs(spectrum[0].intensity) < 1e-9


def test_bin_centered_cosine_lands_in_real_slot():
    """正好落在第 k 个 FFT 频点的余弦：能量在第 2k 个桶（实部），幅度 N/2"""
    k = 8
    frequency = k * SAMPLE_RATE / FRAMES
    t = np.arange(FRAMES) / SAMPLE_RATE
    samples = np.cos(2 * np.pi * frequency * t)

    spectrum = transform(samples, SAMPLE_RATE)

    assert spectrum[2 * k].intensity == pytest.approx(FRAMES / 2, rel=1e-6)
    assert abs(spectrum[2 * k + 1].intensity) < 1e-6
    assert estimate_spectral(spectrum) == pytest.approx(spectrum[2 * k].ave_freq)
    assert abs(estimate_spectral(spectrum) - frequency) < frequency_resolution()


def test_packed_layout_odd_length():
    """奇数长度：没有 Nyquist 项，输出长度不变"""
    x = np.array([1.0, -2.0, 0.5, 3.0, -1.0])
    packed = packed_real_fft(x)
    spec = np.fft.rfft(x)

    assert packed.shape == x.shape
    assert packed[0] == pytest.approx(spec[0].real)
    assert packed[1] == pytest.approx(spec[1].real)
    assert packed[2] == pytest.approx(spec[1].imag)
    assert packed[3] == pytest.approx(spec[2].real)
    assert packed[4] == pytest.approx(spec[2].imag)


def test_all_zero_buffer_has_no_fundamental():
    spectrum = transform(np.zeros(FRAMES), SAMPLE_RATE)
    assert estimate_spectral(spectrum) is None


def test_empty_spectrum_has_no_fundamental():
    assert estimate_spectral([]) is None


def test_negative_and_flat_spectra_have_no_fundamental():
    negative = [FrequencyBucket(i, i + 1, -1.0) for i in range(4)]
    flat = [FrequencyBucket(i, i + 1, 1.0) for i in range(4)]
    assert estimate_spectral(negative) is None
    assert estimate_spectral(flat) is None


def test_average_uses_total_bucket_count():
    """平均值除以全部桶数：[2, 2, 0, 0] 的平均是 1，所以两个 2 都算显著"""
    spectrum = [
        FrequencyBucket(0.0, 1.0, 2.0),
        FrequencyBucket(1.0, 2.0, 2.0),
        FrequencyBucket(2.0, 3.0, 0.0),
        FrequencyBucket(3.0, 4.0, 0.0),
    ]
    # 并列时取频率最低的
    assert estimate_spectral(spectrum) == 0.5


def test_ave_freq():
    assert FrequencyBucket(100.0, 200.0, 1.0).ave_freq == 150.0


def test_transform_rejects_bad_input():
    with pytest.raises(ValueError):
        transform([], SAMPLE_RATE)
    with pytest.raises(ValueError):
        transform([0.1, 0.2], 0.0)
    with pytest.raises(ValueError):
        transform([0.1, 0.2], -44100.0)
