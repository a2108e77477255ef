"""
ECRYPT 测试向量

内置 ECRYPT 流密码项目中 Trivium 的五组 (key, iv)，并按 ECRYPT 的文本格式
打印密钥流的指定字节区间（默认 0、448、131008 起的各64字节，每行16字节）。
"""
import logging
import re

from .config import BLOCK_LENGTH, DEFAULT_OFFSETS, ROW_BYTES
from .trivium import Trivium

logger = logging.getLogger(__name__)

ECRYPT_VECTORS = (
    (bytes.fromhex("80000000000000000000"), bytes.fromhex("00000000000000000000")),
    (bytes.fromhex("00000000000000000000"), bytes.fromhex("00000000000000000000")),
    (bytes.fromhex("00000000000000000000"), bytes.fromhex("80000000000000000000")),
    (bytes.fromhex("0053A6F94C9FF24598EB"), bytes.fromhex("0D74DB42A91077DE45AC")),
    (bytes.fromhex("0558ABFE51A4F74A9DF0"), bytes.fromhex("167DE44BB21980E74EB5")),
)

LABEL_WIDTH = 12
_HEX_RE = re.compile(r'^[0-9a-fA-F]*$')


def hex_bytes(data):
    """字节转为空格分隔的小写两位十六进制"""
    return " ".join(f"{b:02x}" for b in bytes(data))


def parse_hex(text):
    """
    解析十六进制字符串

    允许空格、冒号分隔和 0x 前缀，大小写均可。
    """
    cleaned = text.strip()
    if cleaned[:2].lower() == "0x":
        cleaned = cleaned[2:]
    cleaned = re.sub(r'[\s:]', '', cleaned)
    if not _HEX_RE.match(cleaned):
        raise ValueError(f"不是十六进制字符串: {text!r}")
    if len(cleaned) % 2:
        raise ValueError(f"十六进制位数为奇数: {text!r}")
    return bytes.fromhex(cleaned)


def extract_ranges(engine, offsets=DEFAULT_OFFSETS, length=BLOCK_LENGTH):
    """
    从密钥流中取出若干区间

    密钥流只能向前读取，所以 offsets 必须递增且区间不能重叠。

    返回:
    {offset: bytes}
    """
    length = int(length)
    if length < 0:
        raise ValueError(f"长度不能为负数，实际为{length}")
    blocks = {}
    position = 0
    for offset in offsets:
        offset = int(offset)
        if offset < position:
            raise ValueError(f"偏移必须递增且区间不能重叠: {tuple(offsets)}")
        engine.skip(offset - position)
        blocks[offset] = bytes(engine.keystream(length))
        position = offset + length
    return blocks


def format_rows(label, data):
    """第一行带标签，后续每行缩进对齐，每行 ROW_BYTES 个字节"""
    data = bytes(data)
    head = f"{label:<{LABEL_WIDTH}}="
    if not data:
        return [head]
    lines = []
    for start in range(0, len(data), ROW_BYTES):
        prefix = head if start == 0 else " " * len(head)
        lines.append(f"{prefix} {hex_bytes(data[start:start + ROW_BYTES])}")
    return lines


def format_vector(key, iv, blocks):
    """按 ECRYPT 格式输出一组测试向量，末尾带一个空行"""
    lines = [f"{'key':<{LABEL_WIDTH}}= {hex_bytes(key)}",
             f"{'iv':<{LABEL_WIDTH}}= {hex_bytes(iv)}"]
    for offset, data in blocks.items():
        lines.extend(format_rows(f"data+{offset:<6d}", data))
    lines.append("")
    return "\n".join(lines) + "\n"


def compute_vector(key, iv, offsets=DEFAULT_OFFSETS, length=BLOCK_LENGTH):
    engine = Trivium(key, iv)
    return extract_ranges(engine, offsets, length)


def run_vectors(vectors=ECRYPT_VECTORS, offsets=DEFAULT_OFFSETS, length=BLOCK_LENGTH):
    """对每组 (key, iv) 生成密钥流并拼接成完整报告"""
    report = []
    for i, (key, iv) in enumerate(vectors):
        logger.info(f"测试向量 {i + 1}/{len(vectors)}: key={key.hex()} iv={iv.hex()}")
        blocks = compute_vector(key, iv, offsets, length)
        report.append(format_vector(key, iv, blocks))
    return "".join(report)
