"""
Hash calculator for percentage bucketing.

Maps an identifier to a bucket in [0, buckets). The mapping for a given
(identifier, algorithm, seed) never changes: rollouts stay stable across
processes, hosts and releases.
"""

import hashlib
import zlib
from typing import Any

from .interfaces import BUCKET_COUNT, HashAlgorithm


class HashCalculator:
    """
    Consistent hash bucketing.

    Usage:
        calculator = HashCalculator()
        bucket = calculator.calculate_bucket("user-123")            # crc32
        bucket = calculator.calculate_bucket("user-123", "md5", seed="exp-2025")

    A seed re-randomizes an experiment without changing user IDs.
    """

    def calculate_bucket(
        self,
        identifier: str,
        algorithm: HashAlgorithm | str | Any = HashAlgorithm.CRC32,
        seed: str = "",
        buckets: int = BUCKET_COUNT,
    ) -> int:
        """
        Calculate the bucket for an identifier.

        Args:
            identifier: User/session identifier
            algorithm: Hash algorithm, unknown values fall back to crc32
            seed: Prefix mixed into the hash input
            buckets: Number of buckets

        Returns:
            Bucket number in [0, buckets)
        """
        data = f"{seed}{identifier}".encode("utf-8")
        algorithm = HashAlgorithm.resolve(algorithm)

        if algorithm is HashAlgorithm.MD5:
            value = self._digest_prefix(hashlib.md5(data, usedforsecurity=False).hexdigest())
        elif algorithm is HashAlgorithm.SHA256:
            value = self._digest_prefix(hashlib.sha256(data).hexdigest())
        else:
            value = zlib.crc32(data) & 0xFFFFFFFF

        return value % buckets

    @staticmethod
    def _digest_prefix(hex_digest: str) -> int:
        """First 32 bits of a hex digest as an unsigned integer."""
        return int(hex_digest[:8], 16)
