"""
Payload obfuscation codec.

SECURITY NOTE: This module provides basic XOR obfuscation of the published
payload. This is NOT cryptographically secure and can be reverse-engineered.
It exists only to make casual inspection of the payload non-trivial.

An artifact has two layers: the payload (itself base64 text) is XOR'd with
the cycled key bytes, and the result is base64-encoded again.
"""

import base64
import binascii
import re
from typing import Optional, Union

_BASE64_TEXT = re.compile(r'[A-Za-z0-9+/=]+')
_WHITESPACE = re.compile(r'\s+')


class DecodeError(ValueError):
    """Artifact could not be decoded into a valid payload with the given key."""
    pass


def xor_bytes(data: Union[bytes, bytearray], key: str) -> bytes:
    """
    XOR encrypt/decrypt data with a key.

    Args:
        data: Bytes to encrypt/decrypt
        key: String key to use for XOR operation (repeats if shorter than data)

    Returns:
        XOR'd bytes

    Raises:
        ValueError: If key is empty
    """
    key_bytes = key.encode("utf-8")
    if not key_bytes:
        raise ValueError("XOR key must not be empty")
    return bytes(b ^ key_bytes[i % len(key_bytes)] for i, b in enumerate(data))


def encode(payload: str, key: str) -> str:
    """
    Obfuscate a base64 payload into an artifact.

    Args:
        payload: Payload text (base64 of the JSON document)
        key: Full key (secret fragment + rotating fragment)

    Returns:
        Artifact as base64 text
    """
    xored = xor_bytes(payload.encode("utf-8"), key)
    return base64.b64encode(xored).decode("ascii")


def decode(artifact: str, key: str) -> str:
    """
    Recover the payload from an artifact.

    The XOR output is mapped byte-for-character (latin-1), not decoded as
    UTF-8: the recovered text must itself be base64, and any byte outside
    that alphabet means the key was wrong. The inner base64 must be padded,
    and the document it encodes must be UTF-8 text.

    Args:
        artifact: Artifact text, possibly containing incidental whitespace
        key: Full key (secret fragment + rotating fragment)

    Returns:
        Payload base64 text

    Raises:
        DecodeError: If any layer fails to decode or validate
    """
    outer = _WHITESPACE.sub('', artifact)
    try:
        outer_bytes = base64.b64decode(outer, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"artifact is not valid base64: {e}")

    payload = xor_bytes(outer_bytes, key).decode("latin-1")

    if not _BASE64_TEXT.fullmatch(payload):
        raise DecodeError("recovered text contains non-base64 characters")

    try:
        document = base64.b64decode(payload, validate=True)
    except (binascii.Error, ValueError) as e:
        raise DecodeError(f"recovered text is not valid base64: {e}")

    # A near-miss key can still yield valid base64; the document must be text
    try:
        document.decode("utf-8")
    except UnicodeDecodeError as e:
        raise DecodeError(f"recovered payload is not UTF-8 text: {e}")

    return payload


def try_decode(artifact: Optional[str], key: Optional[str]) -> Optional[str]:
    """Decode, returning None instead of raising when the key doesn't fit."""
    if not artifact or not key:
        return None
    try:
        return decode(artifact, key)
    except DecodeError:
        return None
