"""Building blocks for private payment splitting: bits, field, PRGs, DPFs, MPC checks, sketches and credentials."""

__version__ = "0.1.0"

__all__ = ["bits", "field", "prg", "dpf", "mpc", "sketch", "ristretto", "zkproof", "ggm"]