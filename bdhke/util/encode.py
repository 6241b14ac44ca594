"""
Copyright (c) 2020, Brian Stafford
Copyright (c) 2020, the Decred developers
See LICENSE for details

A class that wraps bytearray and provides some convenient conversions for
scalars, coordinates and hashes.
"""

from bdhke import BDHKEError


def intToBytes(i, length=None, byteorder="big"):
    """
    Encodes a non-negative integer to bytes.

    Args:
        i (int): The integer.
        length (int): optional. Zero-pad the result to this length. By default
            the shortest encoding is used.
        byteorder (str): "big" or "little".

    Returns:
        bytearray: The encoded integer.
    """
    if i < 0:
        raise BDHKEError(f"cannot encode negative integer {i}")
    if length is None:
        length = max((i.bit_length() + 7) // 8, 1)
    try:
        return bytearray(i.to_bytes(length, byteorder=byteorder))
    except OverflowError:
        raise BDHKEError(f"integer too large for {length} bytes")


def intFromBytes(b, byteorder="big"):
    """
    Decodes a non-negative integer from bytes.

    Args:
        b (bytes-like): The encoded integer.
        byteorder (str): "big" or "little".

    Returns:
        int: The decoded integer.
    """
    return int.from_bytes(b, byteorder)


def decodeBA(b, copy=False):
    """
    Decode into a bytearray.

    Args:
        b (str, bytes-like, ByteArray, int, list(int)): The value to decode to
            a bytearray. Strings are interpreted as hexadecimal. Integers are
            minimally encoded to an unsigned integer.

    Returns:
        bytearray: The decoded bytes.
    """
    if isinstance(b, ByteArray):
        return bytearray(b.b) if copy else b.b
    if isinstance(b, bytearray):
        return bytearray(b) if copy else b
    if isinstance(b, bytes):
        return bytearray(b)
    if isinstance(b, int):
        return intToBytes(b)
    if isinstance(b, str):
        return bytearray.fromhex(b)
    if hasattr(b, "__iter__"):
        return bytearray(b)
    raise TypeError("decodeBA: unknown type %s" % type(b))


class ByteArray:
    """
    ByteArray is a bytearray manager. An integer argument to the constructor
    results in the shortest big-endian representation of the integer, where
    for bytearray an int argument results in a zero-valued bytearray of said
    length. Use the `length` keyword to left-pad with zeros, which is how
    32-byte scalars and coordinates are produced.
    """

    def __init__(self, b=b"", copy=True, length=None):
        """
        Set copy to False if you want to share the memory with another
        bytearray/ByteArray. If the type of b is not bytearray or ByteArray,
        copy has no effect.
        """
        if length is not None:
            if isinstance(b, int):
                self.b = intToBytes(b, length=length)
                return
            raw = decodeBA(b)
            if len(raw) > length:
                raise BDHKEError("value %d bytes > length %d" % (len(raw), length))
            self.b = bytearray(length - len(raw)) + raw
        else:
            self.b = decodeBA(b, copy=copy)

    def __eq__(self, a):
        try:
            return self.b == decodeBA(a)
        except (TypeError, ValueError, BDHKEError):
            return False

    def __ne__(self, a):
        return not self.__eq__(a)

    def __repr__(self):
        return "ByteArray(" + self.hex() + ")"

    def __len__(self):
        return len(self.b)

    def __add__(self, a):
        """Concatenate the bytes and return a new ByteArray."""
        return ByteArray(self.b + decodeBA(a))

    def __getitem__(self, k):
        if isinstance(k, slice):
            return ByteArray(self.b[k.start : k.stop : k.step], copy=False)
        return self.b[k]

    def __setitem__(self, i, v):
        self.b[i] = v

    def __hash__(self):
        """Enables ByteArray to be a dict key."""
        return hash(bytes(self.b))

    def hex(self):
        """
        A hexadecimal string representation of the bytes.

        Returns:
            str: The hex bytes.
        """
        return self.b.hex()

    def zero(self):
        """
        Sets the bytes of the underlying bytearray to zero, so that key
        material does not wait on the garbage collector.
        """
        for i in range(len(self.b)):
            self.b[i] = 0

    def iszero(self):
        """
        True if all bytes are zero.
        """
        return all(v == 0 for v in self.b)

    def int(self):
        """The bytes as a big-endian integer."""
        return intFromBytes(self.b)

    def bytes(self):
        """The bytes as Python `bytes`."""
        return bytes(self.b)

    def littleEndian(self):
        """A copy of the ByteArray, reversed."""
        return ByteArray(bytearray(reversed(self.b)))

    def copy(self):
        """A copy of the ByteArray."""
        return ByteArray(self.b)
