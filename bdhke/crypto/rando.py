"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-20, The Decred developers
See LICENSE for details
"""

import os

from bdhke import BDHKEError
from bdhke.util.encode import ByteArray


MinSeedBytes = 16  # 128 bits
MaxSeedBytes = 64  # 512 bits


def checkSeedLength(length):
    """
    Check that seed length is correct.

    Args:
        length int: the seed length to be checked.

    Raises:
        BDHKEError if length is not between MinSeedBytes and MaxSeedBytes
        included.
    """
    if length < MinSeedBytes or length > MaxSeedBytes:
        raise BDHKEError(f"Invalid seed length {length}")


def generateSeed(length=MaxSeedBytes):
    """
    Generate a cryptographically-strong random seed.

    Returns:
        bytes: a random bytes object of the given length.

    Raises:
        BDHKEError if length is not between MinSeedBytes and MaxSeedBytes
        included.
    """
    checkSeedLength(length)
    return os.urandom(length)


def randScalar(n):
    """
    A uniformly distributed scalar in [1, n-1], using the procedure given in
    [NSA] A.2.1. Eight extra bytes of seed keep the modulo bias negligible.

    Args:
        n (int): The group order.

    Returns:
        int: The scalar.
    """
    seedLen = max((n.bit_length() + 7) // 8 + 8, MinSeedBytes)
    b = ByteArray(generateSeed(seedLen))
    return b.int() % (n - 1) + 1
