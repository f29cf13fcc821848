import pytest

from paysplit.prg import FixedKeyPrgStream, PrgSeed

AES_ZERO_KEY_ZERO_BLOCK = bytes.fromhex("66e94bd4ef8a2c3b884cfa59ca342b2e")


def _seed(fill):
    return PrgSeed(bytes([fill]) * 16)


def test_seed_length_is_checked():
    with pytest.raises(ValueError):
        PrgSeed(b"short")


def test_xor_identities():
    s = _seed(0x5A)
    assert s ^ PrgSeed.zero() == s
    assert s ^ s == PrgSeed.zero()


def test_random_seeds_have_key_size():
    assert len(PrgSeed.random().key) == 16


def test_fixed_stream_zero_counter_block():
    stream = FixedKeyPrgStream()
    stream.set_key(bytes(16))
    assert stream.fill_bytes(16) == AES_ZERO_KEY_ZERO_BLOCK


def test_fixed_stream_chunking_is_consistent():
    key = bytes(range(16))
    big = FixedKeyPrgStream()
    big.set_key(key)
    whole = big.fill_bytes(200)
    small = FixedKeyPrgStream()
    small.set_key(key)
    pieces = b"".join(small.fill_bytes(n) for n in (5, 11, 16, 40, 128))
    assert whole == pieces


def test_fixed_stream_skip_block_matches_reading():
    key = bytes(range(16, 32))
    a = FixedKeyPrgStream()
    a.set_key(key)
    a.skip_block()
    skipped = a.fill_bytes(16)
    b = FixedKeyPrgStream()
    b.set_key(key)
    b.fill_bytes(16)
    assert skipped == b.fill_bytes(16)


def test_fixed_stream_counter_steps_upper_half():
    low = bytes(range(8))
    a = FixedKeyPrgStream()
    a.set_key(low + (5).to_bytes(8, "little"))
    a.skip_block()
    b = FixedKeyPrgStream()
    b.set_key(low + (6).to_bytes(8, "little"))
    assert a.fill_bytes(16) == b.fill_bytes(16)


def test_fixed_stream_counter_wraps_without_carry():
    low = bytes(8)
    a = FixedKeyPrgStream()
    a.set_key(low + (2**64 - 1).to_bytes(8, "little"))
    a.skip_block()
    b = FixedKeyPrgStream()
    b.set_key(bytes(16))
    assert a.fill_bytes(16) == b.fill_bytes(16) == AES_ZERO_KEY_ZERO_BLOCK


def test_fixed_stream_rejects_bad_input():
    stream = FixedKeyPrgStream()
    with pytest.raises(ValueError):
        stream.set_key(b"abc")
    with pytest.raises(ValueError):
        stream.fill_bytes(-1)


def test_expand_is_deterministic_and_bits_set():
    s = _seed(0x42)
    out1 = s.expand()
    out2 = s.expand()
    assert out1 == out2
    assert out1.bits == (True, True)
    assert out1.seeds[0] != out1.seeds[1]


def test_expand_ignores_low_two_bits():
    base = bytes(range(1, 16))
    assert PrgSeed(bytes([0x03]) + base).expand() == PrgSeed(bytes([0x00]) + base).expand()


def test_expand_dir_single_sides():
    s = _seed(0x17)
    full = s.expand()
    left = s.expand_dir(True, False)
    right = s.expand_dir(False, True)
    assert left.seeds == (full.seeds[0], PrgSeed.zero())
    assert right.seeds == (PrgSeed.zero(), full.seeds[1])


def test_convert_seed_and_word_follow_stream():
    s = _seed(0x99)
    out = s.convert(lambda rng: rng.fill_bytes(4))
    reference = FixedKeyPrgStream()
    reference.set_key(s.key)
    data = reference.fill_bytes(20)
    assert out.seed == PrgSeed(data[:16])
    assert out.word == data[16:]


def test_prg_stream_is_deterministic_and_resumable():
    s = _seed(0x33)
    whole = s.to_rng().fill_bytes(50)
    rng = s.to_rng()
    pieces = rng.fill_bytes(10) + rng.fill_bytes(22) + rng.fill_bytes(18)
    assert whole == pieces
    assert len(whole) == 50


def test_prg_stream_zero_key_first_block():
    assert PrgSeed.zero().to_rng().fill_bytes(16) == AES_ZERO_KEY_ZERO_BLOCK


def test_prg_stream_rejects_negative():
    with pytest.raises(ValueError):
        PrgSeed.zero().to_rng().fill_bytes(-3)