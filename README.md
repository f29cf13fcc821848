# paysplit

Cryptographic building blocks for a payment-splitting scheme in which two
servers hold secret-shared data. Everything is a library: the modules
compute keys, shares, sketches, proofs and credentials in memory.

## Modules

- `paysplit.bits`: `u32_to_bits(nbits, value)` gives the lowest `nbits`
  bits, least significant first (`nbits` from 0 to 32, else `ValueError`).
  `my_u32_to_bits(nbits, value)` gives bits `nbits-2 .. 0` most significant
  first followed by `False`. `string_to_bits` turns the UTF-8 bytes of a
  string into bits, each byte least significant bit first, and
  `bits_to_string` reverses it (the bit count must be a multiple of 8).
- `paysplit.field`: `FieldElm`, an immutable element of the scalar field of
  ristretto255 (`MODULUS`), with `+`, `-`, `*`, unary `-`,
  `from_bytes_mod_order` and `to_bytes`. `FieldElm.from_rng` always yields
  one and ignores the stream, so `random()` and `share_random()` return ones
  and `share()` returns `(1, value - 1)`; the two shares always sum to the
  value. `Pair` combines two elements componentwise.
- `paysplit.prg`: `PrgSeed`, a 16-byte seed with `^`, `expand`,
  `expand_dir`, `convert` and `to_rng`. Expansion uses
  `FixedKeyPrgStream`, the stream `AES_0(ctr) XOR ctr` under the all-zero
  AES key, one per thread. `to_rng` returns a `PrgStream`, AES-128 in
  counter mode with a little-endian counter from zero.
- `paysplit.dpf`: all-prefix distributed point functions. `DPFKey.gen`
  builds two keys for a path of bits with one value per level but the last;
  `eval`, `eval_bit`, `eval_bit_last` walk a key down the tree;
  `eval_all` and `eval_all_settle` return the words of every node at depth
  `DPF_DOMAIN - 2` (8) and `SETTLE_DOMAIN - 2` (6), which needs keys of at
  least 9 and 7 levels.
- `paysplit.mpc`: Beaver triples (`TripleShare.new`) and `MulState`, which
  runs the `cor_share` / `cor` / `out_share` / `verify` exchange that checks
  a sum of products on shared values is zero (`TRIPLES_PER_LEVEL` = 7).
- `paysplit.sketch`: `SketchDPFKey`, a DPF key over `(x, k*x)` pairs
  together with shares of the MAC key `k`, of `k*k`, of the payload and of
  its square, and seven Beaver triples; `sketch_at` and `sketch_at_last`
  produce a `SketchOutput` from a stream of coefficients.
- `paysplit.ristretto`: `RistrettoPoint` with `identity`, `basepoint`,
  `hash_from_bytes` (SHA-512 and Elligator), `compress`, `decompress`
  (raises `ValueError` on a bad encoding), `+`, `-` and multiplication by
  an `int` or `FieldElm`; `random_scalar` and `scalar_from_bytes_mod_order`.
- `paysplit.zkproof`: a hash-based `Transcript`, `Statement` for
  conjunctions of linear equations between named points, and
  `CompactProof`. `Statement.verify` raises `ProofError` on failure.
- `paysplit.ggm`: keyed-verification credentials with algebraic MACs.
  `Issuer(n)` holds a private key for `n` attributes; `request_blind124_5`,
  `Issuer.issue_blind124_5` and `verify_blind124_5` issue a credential on a
  blinded attribute 1 and a visible attribute 3; `show_blind345_5` and
  `Issuer.verify_blind345_5` present it, revealing attribute 1 and
  committing to attribute 3.

## Installation

```
pip install .
```

## Example: bits

```python
from paysplit.bits import bits_to_string, string_to_bits, u32_to_bits

assert u32_to_bits(2, 1) == [True, False]
assert bits_to_string(string_to_bits("abc")) == "abc"
```

## Example: a DPF

```python
from paysplit.bits import u32_to_bits
from paysplit.dpf import DPFKey
from paysplit.field import FieldElm

alpha = u32_to_bits(4, 5)
values = [FieldElm.one()] * (len(alpha) - 1)
key0, key1 = DPFKey.gen(alpha, values, FieldElm.one())

words0, last0 = key0.eval(alpha)
words1, last1 = key1.eval(alpha)
assert len(words0) == len(alpha) - 1
```

## Example: issuing and showing a credential

```python
from paysplit.ggm import (
    Issuer,
    request_blind124_5,
    show_blind345_5,
    verify_blind124_5,
)
from paysplit.ristretto import random_scalar

issuer = Issuer(5)
m = [random_scalar() for _ in range(5)]
req, state = request_blind124_5(*m)
resp = issuer.issue_blind124_5(req)
cred = verify_blind124_5(state, resp, issuer.pubkey)

z3, showmsg = show_blind345_5(cred, issuer.pubkey)
point, verified = issuer.verify_blind345_5(showmsg)
assert verified.m1 == m[0]
```

A proof that does not check raises `paysplit.zkproof.ProofError`.

## What the package does not do

There are no servers, no commands, no network protocol and no storage of
balances or keys. The package supplies the computations; moving messages
between clients and servers and keeping a database is left to the caller.

## Running the tests

```
pip install ".[test]"
pytest
```