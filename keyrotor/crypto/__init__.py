"""Payload codec and key material."""

from .obfuscator import encode, decode, try_decode, xor_bytes, DecodeError
from .key_material import KeyMaterial, generate_fragment, FRAGMENT_ALPHABET

__all__ = [
    "encode",
    "decode",
    "try_decode",
    "xor_bytes",
    "DecodeError",
    "KeyMaterial",
    "generate_fragment",
    "FRAGMENT_ALPHABET",
]
