"""
音高检测默认配置
"""

# 音频设置
SAMPLE_RATE = 44100
FRAME_SIZE = 512  # 单次分析的固定缓冲长度（采样点）

# 十二平均律基准：A4 = 440Hz = MIDI 69
A4_HZ = 440.0
A4_MIDI = 69

# 估计方法
METHOD_SPECTRAL = "spectral"
METHOD_AUTOCORRELATION = "autocorrelation"
METHODS = (METHOD_SPECTRAL, METHOD_AUTOCORRELATION)

# 文件路径
OUTPUT_DIR = "outputs"
REPORTS_DIR = "outputs/reports"
FIGURES_DIR = "outputs/figures"
