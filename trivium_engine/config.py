import logging
import os

# 密钥与IV
KEY_BYTES = 10
IV_BYTES = 10
KEY_BITS = KEY_BYTES * 8
IV_BITS = IV_BYTES * 8

# 三个寄存器宽度，总共288位
S1_WIDTH = 93
S2_WIDTH = 84
S3_WIDTH = 111
STATE_BITS = S1_WIDTH + S2_WIDTH + S3_WIDTH

# 空转轮数 4*288，算法常量，不可配置
WARMUP_ROUNDS = 4 * STATE_BITS

# 测试向量输出
DEFAULT_OFFSETS = (0, 448, 131008)
BLOCK_LENGTH = 64
ROW_BYTES = 16

# 日志
LOG_FORMAT = '%(asctime)s - %(levelname)s - %(message)s'
LOG_LEVEL = os.environ.get("TRIVIUM_LOG_LEVEL", "INFO").upper()


def configure_logging(level=None):
    """配置根日志，只由命令行入口调用"""
    if level is None:
        level = LOG_LEVEL
    if isinstance(level, str):
        level = logging.getLevelName(level)
        if not isinstance(level, int):
            level = logging.INFO
    logging.basicConfig(level=level, format=LOG_FORMAT)
    logging.getLogger().setLevel(level)
    return level
