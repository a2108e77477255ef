import argparse
import logging
import sys
from contextlib import ExitStack

from .config import BLOCK_LENGTH, DEFAULT_OFFSETS, configure_logging
from .errors import TriviumError
from .trivium import Trivium
from .vectors import ECRYPT_VECTORS, format_rows, parse_hex, run_vectors

logger = logging.getLogger(__name__)

CHUNK_SIZE = 4096


def build_parser():
    parser = argparse.ArgumentParser(
        prog="trivium-engine",
        description="Trivium 密钥流生成与 ECRYPT 测试向量",
    )
    verbosity = parser.add_mutually_exclusive_group()
    verbosity.add_argument("-v", "--verbose", action="store_true", help="输出调试日志")
    verbosity.add_argument("-q", "--quiet", action="store_true", help="只输出警告和错误")
    sub = parser.add_subparsers(dest="command", required=True)

    p_vec = sub.add_parser("vectors", help="打印内置 ECRYPT 测试向量的密钥流")
    p_vec.add_argument("--offset", type=int, action="append", dest="offsets",
                       help="字节偏移，可重复；默认 0, 448, 131008")
    p_vec.add_argument("--length", type=int, default=BLOCK_LENGTH, help="每段字节数")

    p_ks = sub.add_parser("keystream", help="打印指定 key/iv 的密钥流")
    p_ks.add_argument("--key", required=True, type=parse_hex, help="10字节密钥（十六进制）")
    p_ks.add_argument("--iv", required=True, type=parse_hex, help="10字节IV（十六进制）")
    p_ks.add_argument("--offset", type=int, default=0, help="起始字节偏移")
    p_ks.add_argument("--length", type=int, default=BLOCK_LENGTH, help="输出字节数")
    p_ks.add_argument("--bit-order", choices=("lsb", "msb"), default="lsb",
                      help="字节内位序，默认 lsb（ECRYPT约定）")

    p_xor = sub.add_parser("xor", help="用密钥流加密/解密文件")
    p_xor.add_argument("--key", required=True, type=parse_hex, help="10字节密钥（十六进制）")
    p_xor.add_argument("--iv", required=True, type=parse_hex, help="10字节IV（十六进制）")
    p_xor.add_argument("input", help="输入文件，- 表示标准输入")
    p_xor.add_argument("output", help="输出文件，- 表示标准输出")
    return parser


def cmd_vectors(args):
    offsets = sorted(args.offsets) if args.offsets else DEFAULT_OFFSETS
    sys.stdout.write(run_vectors(ECRYPT_VECTORS, offsets, args.length))


def cmd_keystream(args):
    if args.offset < 0 or args.length < 0:
        raise ValueError("偏移和长度不能为负数")
    engine = Trivium(args.key, args.iv)
    engine.skip(args.offset)
    data = bytes(engine.keystream(args.length, bit_order=args.bit_order))
    for line in format_rows(f"data+{args.offset:<6d}", data):
        print(line)


def _open_binary(stack, path, mode):
    if path == "-":
        stream = sys.stdin if "r" in mode else sys.stdout
        return stream.buffer
    return stack.enter_context(open(path, mode))


def cmd_xor(args):
    engine = Trivium(args.key, args.iv)
    total = 0
    with ExitStack() as stack:
        src = _open_binary(stack, args.input, "rb")
        dst = _open_binary(stack, args.output, "wb")
        while True:
            chunk = src.read(CHUNK_SIZE)
            if not chunk:
                break
            dst.write(engine.xor_keystream(chunk))
            total += len(chunk)
        dst.flush()
    logger.info(f"已处理 {total} 字节")


COMMANDS = {
    "vectors": cmd_vectors,
    "keystream": cmd_keystream,
    "xor": cmd_xor,
}


def main(argv=None):
    args = build_parser().parse_args(argv)
    if args.verbose:
        configure_logging(logging.DEBUG)
    elif args.quiet:
        configure_logging(logging.WARNING)
    else:
        configure_logging()

    try:
        COMMANDS[args.command](args)
    except (TriviumError, ValueError, OSError) as e:
        logger.error(f"执行失败: {e}")
        return 1
    return 0


if __name__ == "__main__":
    sys.exit(main())
