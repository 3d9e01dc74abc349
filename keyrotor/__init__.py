"""
keyrotor - Rotating obfuscation key publisher

Recovers an obfuscated JSON payload with the current or previous key
fragment, re-encodes it under a freshly generated fragment, publishes a
dated snapshot plus a stable alias, and retires snapshots past retention.
"""

__version__ = "0.3.0"
__author__ = "jbruns"
