"""Utility modules for the fee kernel."""

from fee_kernel.utils.hashing import (
    canonicalize_json,
    hash_payload,
    short_fingerprint,
)

__all__ = [
    "canonicalize_json",
    "hash_payload",
    "short_fingerprint",
]
