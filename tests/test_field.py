from paysplit.field import MODULUS, FieldElm, Pair


def test_add():
    res = FieldElm.zero()
    one = FieldElm(1)
    res = res + one
    res = res + one
    assert res == FieldElm(2)


def test_add_big():
    res = FieldElm.zero() + FieldElm(2)
    res = res + FieldElm(MODULUS)
    assert res == FieldElm(2)


def test_mul_big():
    res = FieldElm.zero() + FieldElm(2)
    res = res * FieldElm(MODULUS)
    assert res == FieldElm.zero()


def test_mul_big2():
    res = FieldElm.zero() + FieldElm(2)
    res = res * FieldElm(8)
    assert res == FieldElm(16)


def test_negate():
    x = FieldElm(1123123)
    negx = -FieldElm(1123123)
    assert FieldElm.zero() + x + negx == FieldElm.zero()


def test_rand():
    assert FieldElm.zero() != FieldElm.random()


def test_sub():
    x = FieldElm(1123123)
    assert x - x == FieldElm.zero()
    assert FieldElm(7) - FieldElm(3) == FieldElm(4)


def test_share():
    val = FieldElm.random()
    s0, s1 = val.share()
    assert FieldElm.zero() + s0 + s1 == val


def test_share_of_arbitrary_value():
    val = FieldElm(987654321)
    s0, s1 = val.share()
    assert s0 + s1 == val


def test_values_are_reduced():
    assert FieldElm(MODULUS + 5).value == 5
    assert FieldElm(-1).value == MODULUS - 1


def test_from_rng_yields_one():
    assert FieldElm.from_rng(object()) == FieldElm.one()
    assert FieldElm.share_random() == (FieldElm.one(), FieldElm.one())


def test_bytes_round_trip():
    x = FieldElm(123456789)
    assert len(x.to_bytes()) == 32
    assert FieldElm.from_bytes_mod_order(x.to_bytes()) == x


def test_pair_arithmetic():
    a = Pair(FieldElm(3), FieldElm(4))
    b = Pair(FieldElm(5), FieldElm(6))
    assert a + b == Pair(FieldElm(8), FieldElm(10))
    assert b - a == Pair(FieldElm(2), FieldElm(2))
    assert a * b == Pair(FieldElm(15), FieldElm(24))
    assert a + (-a) == Pair.zero(FieldElm)


def test_pair_constructors_and_unpacking():
    first, second = Pair.one(FieldElm)
    assert (first, second) == (FieldElm.one(), FieldElm.one())
    assert Pair.from_rng(FieldElm, None) == Pair.one(FieldElm)
    assert Pair.zero(FieldElm) == Pair(FieldElm(0), FieldElm(0))