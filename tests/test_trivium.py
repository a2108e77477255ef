import numpy as np
import pytest

import trivium_engine.trivium as trivium_module
from trivium_engine import InvalidInputLength, ShiftRegister, Trivium, WindowRegister, decrypt, encrypt, initialize
from trivium_engine.trivium import S1_TAPS, S2_TAPS, S3_TAPS

KEY = bytes.fromhex("0053a6f94c9ff24598eb")
IV = bytes.fromhex("0d74db42a91077de45ac")
ZERO = bytes(10)


class CountingTrivium(Trivium):
    calls = 0

    def step(self):
        type(self).calls += 1
        return super().step()


class RecordingRegister(ShiftRegister):
    """记录 step() 读取过的下标"""

    def __init__(self, width):
        super().__init__(width)
        self.seen = set()

    def __getitem__(self, index):
        self.seen.add(index)
        return super().__getitem__(index)


def _state(engine):
    return engine.s1, engine.s2, engine.s3


@pytest.mark.parametrize("key, iv, name, actual", [
    (bytes(9), ZERO, "key", 9),
    (bytes(11), ZERO, "key", 11),
    (ZERO, b"", "iv", 0),
    (ZERO, bytes(16), "iv", 16),
])
def test_invalid_length(key, iv, name, actual):
    with pytest.raises(InvalidInputLength) as excinfo:
        initialize(key, iv)
    err = excinfo.value
    assert isinstance(err, ValueError)
    assert (err.name, err.actual, err.expected) == (name, actual, 10)
    assert f"{name}必须为10字节" in str(err)


def test_rejects_non_byte_input():
    with pytest.raises(TypeError):
        Trivium("0123456789", ZERO)
    with pytest.raises(ValueError):
        Trivium([256] + [0] * 9, ZERO)


def test_accepts_byte_sequences():
    expected = bytes(Trivium(KEY, IV).keystream(16))
    assert bytes(Trivium(bytearray(KEY), list(IV)).keystream(16)) == expected
    assert bytes(Trivium(np.frombuffer(KEY, dtype=np.uint8), memoryview(IV)).keystream(16)) == expected


def test_key_and_iv_loading(monkeypatch):
    monkeypatch.setattr(trivium_module, "WARMUP_ROUNDS", 0)
    key = bytes([0x01] + [0] * 8 + [0x80])
    iv = bytes([0x02] + [0] * 9)
    engine = Trivium(key, iv)
    s1, s2, s3 = _state(engine)

    assert s1.shape == (93,) and s2.shape == (84,) and s3.shape == (111,)
    # 第一个字节的最低位 -> 79，最后一个字节的最高位 -> 0
    assert np.flatnonzero(s1).tolist() == [0, 79]
    # 第一个字节的第1位 -> 78
    assert np.flatnonzero(s2).tolist() == [78]
    assert np.flatnonzero(s3).tolist() == [108, 109, 110]


def test_key_bit_mapping_matches_formula(monkeypatch):
    monkeypatch.setattr(trivium_module, "WARMUP_ROUNDS", 0)
    s1 = Trivium(KEY, IV).s1
    for p in range(10):
        for k in range(8):
            assert s1[79 - 8 * p - k] == (KEY[p] >> k) & 1
    assert not s1[80:].any()


def test_warmup_runs_1152_steps():
    CountingTrivium.calls = 0
    CountingTrivium(ZERO, ZERO)
    assert CountingTrivium.calls == 4 * 288


def test_zero_key_and_iv_are_diffused():
    s1, s2, s3 = _state(Trivium(ZERO, ZERO))
    assert s1.any() and s2.any()
    assert np.flatnonzero(s3).tolist() != [108, 109, 110]


def test_step_only_reads_declared_taps():
    engine = Trivium(KEY, IV, register_cls=RecordingRegister)
    for reg in (engine._s1, engine._s2, engine._s3):
        reg.seen.clear()
    engine.step()
    assert tuple(sorted(engine._s1.seen)) == S1_TAPS
    assert tuple(sorted(engine._s2.seen)) == S2_TAPS
    assert tuple(sorted(engine._s3.seen)) == S3_TAPS


def test_tap_tables_fit_register_widths():
    assert max(S1_TAPS) <= 92
    assert max(S2_TAPS) <= 83
    assert max(S3_TAPS) <= 110


def test_step_returns_single_bits():
    engine = Trivium(KEY, IV)
    bits = {engine.step() for _ in range(200)}
    assert bits == {0, 1}


def test_known_answer_prefix():
    engine = initialize(bytes.fromhex("80000000000000000000"), ZERO)
    assert bytes(engine.keystream(8)).hex() == "38eb86ff730d7a9c"


def test_determinism():
    a = bytes(initialize(KEY, IV).keystream(128))
    b = bytes(initialize(KEY, IV).keystream(128))
    assert a == b


@pytest.mark.parametrize("n, m", [(0, 1), (1, 1), (7, 64), (16, 100)])
def test_prefix_consistency(n, m):
    short = bytes(initialize(KEY, IV).keystream(n))
    long = bytes(initialize(KEY, IV).keystream(m))
    assert long[:n] == short


def test_keystream_continues_on_same_engine():
    engine = initialize(KEY, IV)
    joined = bytes(engine.keystream(10)) + bytes(engine.keystream(22))
    assert joined == bytes(initialize(KEY, IV).keystream(32))


def test_keystream_byte_packs_lsb_first():
    engine = Trivium(KEY, IV)
    twin = engine.copy()
    for _ in range(16):
        bits = [twin.step() for _ in range(8)]
        assert engine.keystream_byte() == sum(b << i for i, b in enumerate(bits))


def test_msb_bit_order_is_explicit_flag():
    lsb = bytes(Trivium(KEY, IV).keystream(32))
    msb = bytes(Trivium(KEY, IV).keystream(32, bit_order="msb"))
    assert msb == bytes(int(f"{b:08b}"[::-1], 2) for b in lsb)
    assert msb != lsb


def test_invalid_bit_order():
    engine = Trivium(KEY, IV)
    with pytest.raises(ValueError):
        engine.keystream_byte(bit_order="big")
    with pytest.raises(ValueError):
        engine.keystream(4, bit_order="big")


def test_keystream_bits_match_bytes():
    bits = Trivium(KEY, IV).keystream_bits(128)
    data = bytes(Trivium(KEY, IV).keystream(16))
    assert bits.dtype == np.uint8
    np.testing.assert_array_equal(bits, np.unpackbits(np.frombuffer(data, dtype=np.uint8), bitorder='little'))


def test_zero_length_keystream_leaves_state():
    engine = Trivium(KEY, IV)
    before = _state(engine)
    assert list(engine.keystream(0)) == []
    engine.keystream(5)  # 未迭代，不推进
    for old, new in zip(before, _state(engine)):
        np.testing.assert_array_equal(old, new)


def test_negative_length():
    engine = Trivium(KEY, IV)
    with pytest.raises(ValueError):
        engine.keystream(-1)
    with pytest.raises(ValueError):
        engine.keystream_bits(-8)
    with pytest.raises(ValueError):
        engine.skip(-1)


def test_skip_discards_bytes():
    engine = Trivium(KEY, IV)
    engine.skip(5)
    assert bytes(engine.keystream(11)) == bytes(Trivium(KEY, IV).keystream(16))[5:]


def test_copy_is_independent():
    engine = Trivium(KEY, IV)
    twin = engine.copy()
    before = _state(twin)
    bytes(engine.keystream(4))
    for old, new in zip(before, _state(twin)):
        np.testing.assert_array_equal(old, new)
    assert bytes(twin.keystream(4)) == bytes(Trivium(KEY, IV).keystream(4))


def test_register_properties_are_copies():
    engine = Trivium(KEY, IV)
    s1 = engine.s1
    s1[:] = 0
    assert engine.s1.any()


def test_window_registers_match_literal_shift():
    literal = Trivium(KEY, IV)
    window = Trivium(KEY, IV, register_cls=WindowRegister)
    assert bytes(literal.keystream(256)) == bytes(window.keystream(256))
    for a, b in zip(_state(literal), _state(window)):
        np.testing.assert_array_equal(a, b)


def test_window_copy_matches_literal():
    window = Trivium(ZERO, ZERO, register_cls=WindowRegister)
    twin = window.copy()
    assert bytes(twin.keystream(32)) == bytes(Trivium(ZERO, ZERO).keystream(32))


def test_encrypt_decrypt_round_trip():
    plaintext = "Hello, Trivium!".encode('utf-8')
    ciphertext = encrypt(plaintext, KEY, IV)
    assert ciphertext != plaintext
    assert len(ciphertext) == len(plaintext)
    assert decrypt(ciphertext, KEY, IV) == plaintext


def test_encrypt_zeros_yields_keystream():
    assert encrypt(bytes(32), KEY, IV) == bytes(initialize(KEY, IV).keystream(32))
    assert encrypt(b"", KEY, IV) == b""
