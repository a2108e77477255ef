from abc import ABC, abstractmethod

import numpy as np

BIT_ORDERS = ("lsb", "msb")


class KeystreamGenerator(ABC):
    """
    按位输出的密钥流生成器基类

    子类只需要实现 step()，每次返回一个输出位（0或1）并更新内部状态。
    字节打包、惰性字节流、异或加解密都在这里基于 step() 实现。
    """

    @abstractmethod
    def step(self):
        """输出一位并推进一个时钟"""

    def keystream_byte(self, bit_order="lsb"):
        """
        调用8次 step() 组成一个字节

        参数:
        bit_order: "lsb" 第一位放最低位（ECRYPT约定，默认）；
                   "msb" 第一位放最高位，只在显式指定时使用
        """
        if bit_order == "lsb":
            byte = 0
            for k in range(8):
                byte |= self.step() << k
            return byte
        if bit_order == "msb":
            byte = 0
            for _ in range(8):
                byte = (byte << 1) | self.step()
            return byte
        raise ValueError(f"bit_order只能是{BIT_ORDERS}之一，实际为{bit_order!r}")

    def keystream(self, n, bit_order="lsb"):
        """
        惰性生成 n 个密钥流字节

        只能向前读取；同一个实例继续读取就是继续原来的流。n 为0时不推进状态。
        """
        n = int(n)
        if n < 0:
            raise ValueError(f"密钥流长度不能为负数，实际为{n}")
        if bit_order not in BIT_ORDERS:
            raise ValueError(f"bit_order只能是{BIT_ORDERS}之一，实际为{bit_order!r}")
        return self._iter_bytes(n, bit_order)

    def _iter_bytes(self, n, bit_order):
        for _ in range(n):
            yield self.keystream_byte(bit_order)

    def keystream_bits(self, length):
        """生成指定长度的密钥流（比特数组，np.uint8）"""
        length = int(length)
        if length < 0:
            raise ValueError(f"密钥流长度不能为负数，实际为{length}")
        keystream = np.zeros(length, dtype=np.uint8)
        for i in range(length):
            keystream[i] = self.step()
        return keystream

    def skip(self, n_bytes):
        """丢弃 n_bytes 个字节的密钥流"""
        n_bytes = int(n_bytes)
        if n_bytes < 0:
            raise ValueError(f"跳过的字节数不能为负数，实际为{n_bytes}")
        for _ in range(n_bytes * 8):
            self.step()

    def xor_keystream(self, data):
        """把 data 与接下来的 len(data) 个密钥流字节异或"""
        data = bytes(data)
        keystream = np.fromiter(self.keystream(len(data)), dtype=np.uint8, count=len(data))
        return np.bitwise_xor(np.frombuffer(data, dtype=np.uint8), keystream).tobytes()
