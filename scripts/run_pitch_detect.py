# scripts/run_pitch_detect.py
# =========================================================
# 单段缓冲音高检测入口脚本
#
# 用法：
#   python scripts/run_pitch_detect.py --audio data/example/a4.wav
#   python scripts/run_pitch_detect.py --audio a4.wav --method both --offset 0.5 --figure
#
# 输出：
#   outputs/reports/{stem}.pitch.json
#   outputs/figures/{stem}.pitch.png   （加 --figure 时）
# =========================================================

from __future__ import annotations

import argparse
import logging
import math
import os
import sys
from datetime import datetime
from pathlib import Path

# 将src目录添加到Python路径
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..', 'src'))

from pitch_detect.config import FIGURES_DIR, FRAME_SIZE, METHODS, REPORTS_DIR
from pitch_detect.correlation import correlation, suppress_zero_lag_peak
from pitch_detect.detector import DetectorConfig, detect_from_audio
from pitch_detect.io_audio import AudioConfig, load_audio
from pitch_detect.report import save_analysis_figure, save_reading_json
from pitch_detect.transforms import transform


def main(argv=None):
    parser = argparse.ArgumentParser(description="Fundamental frequency + pitch name for one audio buffer")
    parser.add_argument("--audio", type=str, required=True, help="Path to audio file")
    parser.add_argument("--method", type=str, default="autocorrelation",
                        choices=list(METHODS) + ["both"], help="Estimator to run")
    parser.add_argument("--offset", type=float, default=0.0, help="Buffer start (seconds)")
    parser.add_argument("--frame-size", type=int, default=FRAME_SIZE, help="Buffer length (samples)")
    parser.add_argument("--figure", action="store_true", help="Save waveform / spectrum / correlation figure")
    parser.add_argument("--out-dir", type=str, default=None, help="Override output root")
    parser.add_argument("--verbose", action="store_true", help="Debug logging")
    args = parser.parse_args(argv)

    logging.basicConfig(
        level=logging.DEBUG if args.verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )

    audio_path = Path(args.audio)
    if not audio_path.exists():
        raise FileNotFoundError(f"Audio file not found: {audio_path}")

    methods = list(METHODS) if args.method == "both" else [args.method]
    cfgs = [DetectorConfig(method=m, frame_size=args.frame_size) for m in methods]

    # 1) 读音频
    y, sr = load_audio(audio_path, AudioConfig())

    # 2) 截取缓冲 + 估计（每个方法截的是同一段）
    readings = {}
    for cfg in cfgs:
        buf, readings[cfg.method] = detect_from_audio(y, sr, cfg, offset_sec=args.offset)

    print("\n========== Pitch Detection ==========")
    print(f"Audio file        : {audio_path.name}")
    print(f"Sample rate (Hz)  : {sr}")
    print(f"Buffer            : {args.frame_size} samples @ {args.offset:.3f}s")
    print("-------------------------------------")
    for method, r in readings.items():
        if r is None:
            print(f"{method:<17} : no fundamental found")
        else:
            cents = "n/a" if math.isnan(r.cents_error) else f"{r.cents_error:+.0f} cents"
            print(f"{method:<17} : {r.frequency_hz:8.2f} Hz  {r.pitch:<10} ({cents})")
    print("=====================================\n")

    # 3) JSON
    reports_dir = Path(args.out_dir) / "reports" if args.out_dir else Path(REPORTS_DIR)
    figures_dir = Path(args.out_dir) / "figures" if args.out_dir else Path(FIGURES_DIR)

    payload = {
        "meta": {
            "audio_file": audio_path.name,
            "sample_rate_hz": sr,
            "frame_size": args.frame_size,
            "offset_sec": args.offset,
            "evaluated_at": datetime.now().isoformat(),
        },
        "readings": {
            # nan 不是合法 JSON，换成 None
            m: None if r is None else {
                **r.to_dict(),
                "cents_error": None if math.isnan(r.cents_error) else r.cents_error,
            }
            for m, r in readings.items()
        },
    }
    json_path = reports_dir / f"{audio_path.stem}.pitch.json"
    save_reading_json(json_path, payload)
    print(f"[JSON SAVED] {json_path.as_posix()}")

    # 4) 图
    if args.figure:
        first = next((r for r in readings.values() if r is not None), None)
        fig_path = figures_dir / f"{audio_path.stem}.pitch.png"
        save_analysis_figure(
            fig_path,
            samples=buf,
            sr=sr,
            spectrum=transform(buf, sr),
            corr_curve=suppress_zero_lag_peak(correlation(buf)),
            title=f"Pitch buffer - {audio_path.name}",
            f0_hz=None if first is None else first.frequency_hz,
        )
        print(f"[FIG SAVED] {fig_path.as_posix()}")

    return readings


if __name__ == "__main__":
    main()
