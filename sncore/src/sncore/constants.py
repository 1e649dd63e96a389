"""
Chain-level constants shared by all storenet components.
"""

from __future__ import annotations

# Size in bytes of every hash-derived identifier (block ids, output ids,
# unlock hashes)
HASH_SIZE = 32

# Length of a hex-encoded hash
HASH_HEX_LENGTH = 2 * HASH_SIZE
