"""
Fee Kernel - canonical fixed-point core

Deterministic primitives for contract cost/fee computation:
- Exact money (minor units) and rate (parts-per-million) parsing
- A single half-away-from-zero rounding rule
- Versioned canonical input/output documents (CDIO/CDOO v1.1)
- Typed exceptions and structured JSON logging
"""

__version__ = "1.1.0"
