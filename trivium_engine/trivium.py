import logging

import numpy as np

from .base import KeystreamGenerator
from .config import IV_BYTES, KEY_BYTES, S1_WIDTH, S2_WIDTH, S3_WIDTH, WARMUP_ROUNDS
from .errors import InvalidInputLength
from .registers import ShiftRegister

logger = logging.getLogger(__name__)

# step() 读取的全部位置（0基下标）
S1_TAPS = (65, 68, 90, 91, 92)
S2_TAPS = (68, 77, 81, 82, 83)
S3_TAPS = (65, 86, 108, 109, 110)


def _check_taps():
    for name, taps, width in (("s1", S1_TAPS, S1_WIDTH),
                              ("s2", S2_TAPS, S2_WIDTH),
                              ("s3", S3_TAPS, S3_WIDTH)):
        if min(taps) < 0 or max(taps) >= width:
            raise RuntimeError(f"{name}的抽头位置超出{width}位寄存器")


_check_taps()


def _as_bytes(name, value, expected):
    """把 bytes/bytearray/整数序列/np.uint8 数组统一成 bytes 并检查长度"""
    if isinstance(value, (bytes, bytearray, memoryview)):
        data = bytes(value)
    else:
        arr = np.asarray(value)
        if arr.ndim != 1 or (arr.size and not np.issubdtype(arr.dtype, np.integer)):
            raise TypeError(f"{name}必须是字节串或字节值序列")
        if arr.size and (arr.min() < 0 or arr.max() > 255):
            raise ValueError(f"{name}包含0..255以外的值")
        data = arr.astype(np.uint8).tobytes()
    if len(data) != expected:
        raise InvalidInputLength(name, len(data), expected)
    return data


def _load_bits(data):
    """
    字节到寄存器位置的映射（ECRYPT API版本）

    第 p 个字节的第 k 位（最低位为第0位）写到位置 79 - 8*p - k：
    第一个字节的最低位在位置79，最后一个字节的最高位在位置0。
    """
    bits = np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder='little')
    return bits[::-1]


class Trivium(KeystreamGenerator):
    """
    Trivium流密码

    内部状态由三个移位寄存器组成：
    - s1: 93位，装载密钥
    - s2: 84位，装载IV
    - s3: 111位，最后三位置1

    构造时完成装载和 4*288 轮空转，之后每次 step() 输出一位密钥流。
    """

    def __init__(self, key, iv, register_cls=ShiftRegister):
        key = _as_bytes("key", key, KEY_BYTES)
        iv = _as_bytes("iv", iv, IV_BYTES)

        self._s1 = register_cls(S1_WIDTH)
        self._s2 = register_cls(S2_WIDTH)
        self._s3 = register_cls(S3_WIDTH)
        self._load_state(key, iv)

        # 空转1152轮，丢弃输出
        for _ in range(WARMUP_ROUNDS):
            self.step()
        logger.debug(f"Trivium 初始化完成，空转 {WARMUP_ROUNDS} 轮，寄存器类型 {register_cls.__name__}")

    def _load_state(self, key, iv):
        # s1: 密钥 + 13个0
        self._s1.load(_load_bits(key))
        # s2: IV + 4个0
        self._s2.load(_load_bits(iv))
        # s3: 108个0 + 3个1
        self._s3.load(np.zeros(S3_WIDTH, dtype=np.uint8))
        self._s3[108] = self._s3[109] = self._s3[110] = 1

    @property
    def s1(self):
        return self._s1.to_array()

    @property
    def s2(self):
        return self._s2.to_array()

    @property
    def s3(self):
        return self._s3.to_array()

    def step(self):
        s1, s2, s3 = self._s1, self._s2, self._s3

        t1 = s1[65] ^ s1[92]
        t2 = s2[68] ^ s2[83]
        t3 = s3[65] ^ s3[110]

        # 输出位用的是反馈之前的 t1, t2, t3
        z = t1 ^ t2 ^ t3

        t1 ^= (s1[90] & s1[91]) ^ s2[77]
        t2 ^= (s2[81] & s2[82]) ^ s3[86]
        t3 ^= (s3[108] & s3[109]) ^ s1[68]

        # 交叉反馈: s1 <- t3, s2 <- t1, s3 <- t2
        s1.shift_in(t3)
        s2.shift_in(t1)
        s3.shift_in(t2)

        return z

    def copy(self):
        """返回状态相同、互不影响的新实例"""
        other = object.__new__(type(self))
        other._s1 = self._s1.copy()
        other._s2 = self._s2.copy()
        other._s3 = self._s3.copy()
        return other


def initialize(key, iv, register_cls=ShiftRegister):
    """用10字节密钥和10字节IV创建并预热 Trivium 实例"""
    return Trivium(key, iv, register_cls=register_cls)


def encrypt(data, key, iv):
    """
    加密函数

    Args:
        data: 明文字节
        key: 10字节密钥
        iv: 10字节IV

    Returns:
        密文字节（与密钥流逐字节异或）
    """
    return Trivium(key, iv).xor_keystream(data)


def decrypt(data, key, iv):
    """解密函数，流密码的解密与加密相同"""
    return encrypt(data, key, iv)


__all__ = ["Trivium", "initialize", "encrypt", "decrypt", "S1_TAPS", "S2_TAPS", "S3_TAPS"]
