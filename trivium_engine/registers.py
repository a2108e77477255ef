"""
移位寄存器

两种实现，接口相同：
- ShiftRegister: 逐位移动，和参考实现完全一致
- WindowRegister: 不移动数据，只移动起点（环形窗口），用于差分测试

逻辑下标0是最新的位。shift_in 把下标 i 的位移到 i+1，丢弃最高位，并把新位写到下标0。
"""
import numpy as np


class ShiftRegister:
    """逐位移位的寄存器，位存放在 np.uint8 数组中"""

    def __init__(self, width):
        self.width = int(width)
        self.bits = np.zeros(self.width, dtype=np.uint8)

    def _check(self, index):
        if not 0 <= index < self.width:
            raise IndexError(f"寄存器下标{index}越界，范围为0..{self.width - 1}")

    def __len__(self):
        return self.width

    def __getitem__(self, index):
        self._check(index)
        return int(self.bits[index])

    def __setitem__(self, index, bit):
        self._check(index)
        self.bits[index] = int(bit) & 1

    def shift_in(self, bit):
        # numpy 对重叠切片赋值会先做拷贝
        self.bits[1:] = self.bits[:-1]
        self.bits[0] = int(bit) & 1

    def load(self, bits):
        """从下标0开始写入 bits，其余位清零"""
        bits = np.asarray(bits, dtype=np.uint8)
        if bits.size > self.width:
            raise IndexError(f"{bits.size}位无法装入{self.width}位寄存器")
        self.bits[:] = 0
        self.bits[:bits.size] = bits & 1

    def to_array(self):
        """按逻辑顺序返回位数组的拷贝"""
        return self.bits.copy()

    def copy(self):
        other = type(self)(self.width)
        other.bits = self.bits.copy()
        return other


class WindowRegister(ShiftRegister):
    """
    环形窗口寄存器

    逻辑下标 i 对应物理位置 (head + i) % width。移位时 head 减一，
    新的 head 正好指向被丢弃的最高位，直接覆盖即可。
    """

    def __init__(self, width):
        super().__init__(width)
        self.head = 0

    def _pos(self, index):
        self._check(index)
        return (self.head + index) % self.width

    def __getitem__(self, index):
        return int(self.bits[self._pos(index)])

    def __setitem__(self, index, bit):
        self.bits[self._pos(index)] = int(bit) & 1

    def load(self, bits):
        self.head = 0
        super().load(bits)

    def shift_in(self, bit):
        self.head = (self.head - 1) % self.width
        self.bits[self.head] = int(bit) & 1

    def to_array(self):
        return np.roll(self.bits, -self.head)

    def copy(self):
        other = super().copy()
        other.head = self.head
        return other
