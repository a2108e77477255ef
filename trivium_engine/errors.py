class TriviumError(Exception):
    """Trivium引擎的异常基类"""


class InvalidInputLength(TriviumError, ValueError):
    """
    密钥或IV长度错误

    Trivium只接受10字节（80位）的密钥和IV，其他长度在构造引擎之前直接拒绝，
    不会返回初始化了一半的状态。
    """

    def __init__(self, name, actual, expected=10):
        self.name = name
        self.actual = actual
        self.expected = expected
        super().__init__(
            f"{name}必须为{expected}字节（{expected * 8}位），实际为{actual}字节"
        )
