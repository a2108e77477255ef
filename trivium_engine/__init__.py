"""
trivium_engine 包

Trivium 流密码（80位密钥、80位IV）的密钥流生成器，以及 ECRYPT 测试向量工具。
"""
from .base import KeystreamGenerator
from .errors import InvalidInputLength, TriviumError
from .registers import ShiftRegister, WindowRegister
from .trivium import Trivium, decrypt, encrypt, initialize
from .vectors import ECRYPT_VECTORS, run_vectors

__version__ = "1.0.0"
__all__ = [
    "KeystreamGenerator",
    "InvalidInputLength",
    "TriviumError",
    "ShiftRegister",
    "WindowRegister",
    "Trivium",
    "initialize",
    "encrypt",
    "decrypt",
    "ECRYPT_VECTORS",
    "run_vectors",
]
