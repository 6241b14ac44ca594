"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Blind Diffie-Hellman Key Exchange (BDHKE) over secp256k1.

Mint:
    K = k*G

Wallet:
    Y = hashToCurve(secret)
    r = random blinding factor
    B_ = Y + r*G

Mint:
    C_ = k*B_
      (= k*Y + k*r*G)

Wallet:
    C = C_ - r*K
      (= k*Y + k*r*G - r*k*G)
      (= k*Y)

Verifier:
    k*hashToCurve(secret) == C

The mint never sees Y, and the wallet never learns k. Signatures created before
the hash-to-curve map gained its domain separator are still accepted by
`verify`, which falls back to the legacy map.
"""

import hashlib

from bdhke import BDHKEError, NoValidPointFound
from bdhke.crypto.secp256k1.curve import (
    PUBKEY_COMPRESSED,
    PrivateKey,
    PublicKey,
    curve as Curve,
    generateKey,
)
from bdhke.util import helpers
from bdhke.util.encode import ByteArray, intToBytes


log = helpers.getLogger("BDHKE")

# DOMAIN_SEPARATOR is prepended to messages before hashing to the curve.
# bytes.fromhex("536563703235366b315f48617368546f43757276655f43617368755f")
DOMAIN_SEPARATOR = b"Secp256k1_HashToCurve_Cashu_"

# MAX_HASH_ITERATIONS bounds the hashToCurve counter search. Each attempt
# succeeds with probability about 1/2.
MAX_HASH_ITERATIONS = 2 ** 16

# COUNTER_LEN is the size of the little-endian hashToCurve counter.
COUNTER_LEN = 4


def messageBytes(message):
    """
    Normalize a secret to bytes. Strings are UTF-8 encoded.

    Args:
        message (str or bytes-like): The secret.

    Returns:
        bytes: The secret bytes.

    Raises:
        TypeError: The secret is not a string or a byte string.
    """
    if isinstance(message, str):
        return message.encode("utf-8")
    if isinstance(message, ByteArray):
        return message.bytes()
    if isinstance(message, (bytes, bytearray)):
        return bytes(message)
    raise TypeError(f"secret must be str or bytes-like, not {type(message).__name__}")


def scalarInt(k):
    """
    The integer value of a private scalar.

    Args:
        k (PrivateKey or int): The scalar.

    Returns:
        int: The scalar, in [1, N-1].

    Raises:
        BDHKEError: The scalar is zero or not reduced modulo the group order.
    """
    if isinstance(k, PrivateKey):
        k = k.int()
    if not 0 < k < Curve.N:
        raise BDHKEError("scalar out of range")
    return k


def pointMult(point, k):
    """
    k*point as a new PublicKey.

    Raises:
        BDHKEError: The product is the point at infinity.
    """
    x, y = Curve.scalarMult(point.x, point.y, k)
    if x == 0 and y == 0:
        raise BDHKEError("scalar multiplication produced the point at infinity")
    return PublicKey(Curve, x, y)


def pointAdd(p1, p2):
    """
    p1 + p2 as a new PublicKey.

    Raises:
        BDHKEError: The sum is the point at infinity.
    """
    x, y = Curve.add(p1.x, p1.y, p2.x, p2.y)
    if x == 0 and y == 0:
        raise BDHKEError("point addition produced the point at infinity")
    return PublicKey(Curve, x, y)


def pointNeg(point):
    """
    -point as a new PublicKey.
    """
    x, y = Curve.negate(point.x, point.y)
    return PublicKey(Curve, x, y)


def parseEvenPoint(xBytes):
    """
    Parse the 32-byte x coordinate as a compressed point with even y.

    Raises:
        BDHKEError: x is not the coordinate of a point on the curve.
    """
    return Curve.parsePubKey(bytes((PUBKEY_COMPRESSED,)) + xBytes)


def hashToCurve(message):
    """
    Generates a secp256k1 point from a message.

    The message is hashed with the domain separator, and an increasing uint32
    counter (little endian) is appended to the hash and hashed again until the
    result is the x coordinate of a point on the curve. The point with the even
    y coordinate is always chosen.

    The chance of finding a valid point is 50% for every iteration. The maximum
    number of iterations is 2**16.

    Args:
        message (bytes-like): The message.

    Returns:
        PublicKey: The point.

    Raises:
        NoValidPointFound: No valid point after MAX_HASH_ITERATIONS attempts.
            This should never happen in practice.
    """
    msgToHash = hashlib.sha256(DOMAIN_SEPARATOR + messageBytes(message)).digest()
    for counter in range(MAX_HASH_ITERATIONS):
        c = intToBytes(counter, length=COUNTER_LEN, byteorder="little")
        h = hashlib.sha256(msgToHash + c).digest()
        try:
            point = parseEvenPoint(h)
        except BDHKEError:
            continue
        log.debug("hashToCurve found a point at counter %d", counter)
        return point
    raise NoValidPointFound(MAX_HASH_ITERATIONS)


def legacyHashToCurve(message, maxIterations=None):
    """
    Deprecated. Generates a point from the message hash and checks if the point
    lies on the curve. If it does not, iteratively tries to compute a new point
    from the hash. There is no domain separator.

    Only used to check signatures that were issued before hashToCurve. With the
    default maxIterations of None the loop is unbounded, so it must not be fed
    untrusted input on a latency-critical path without a cap.

    Args:
        message (bytes-like): The message.
        maxIterations (int): optional. Give up after this many attempts.

    Returns:
        PublicKey: The point.

    Raises:
        NoValidPointFound: maxIterations was reached.
    """
    msgToHash = messageBytes(message)
    attempts = 0
    while maxIterations is None or attempts < maxIterations:
        h = hashlib.sha256(msgToHash).digest()
        attempts += 1
        try:
            return parseEvenPoint(h)
        except BDHKEError:
            msgToHash = h
    raise NoValidPointFound(attempts)


def _blind(Y, r):
    if r is None:
        r = generateKey()
    rInt = scalarInt(r)
    rG = r.pub if isinstance(r, PrivateKey) else Curve.publicKey(rInt)
    return pointAdd(Y, rG), r


def blindMessage(secret, r=None):
    """
    B_ = Y + r*G

    Args:
        secret (str or bytes-like): The token secret.
        r (PrivateKey or int): optional. The blinding factor. A random one is
            generated if not provided.

    Returns:
        PublicKey: The blinded message B_.
        PrivateKey or int: The blinding factor, r.

    Raises:
        NoValidPointFound: hashToCurve failed.
    """
    return _blind(hashToCurve(secret), r)


def blindMessageDeprecated(secret, r=None, maxIterations=None):
    """
    B_ = Y + r*G, with Y from legacyHashToCurve.

    Args:
        secret (str or bytes-like): The token secret.
        r (PrivateKey or int): optional. The blinding factor.
        maxIterations (int): optional. Passed to legacyHashToCurve.

    Returns:
        PublicKey: The blinded message B_.
        PrivateKey or int: The blinding factor, r.
    """
    return _blind(legacyHashToCurve(secret, maxIterations), r)


def signBlindedMessage(B_, k):
    """
    C_ = k*B_

    Args:
        B_ (PublicKey): The blinded message.
        k (PrivateKey or int): The mint's private key.

    Returns:
        PublicKey: The blinded signature C_.
    """
    return pointMult(B_, scalarInt(k))


def unblindSignature(C_, r, K):
    """
    C = C_ - r*K

    Args:
        C_ (PublicKey): The blinded signature.
        r (PrivateKey or int): The blinding factor used in blindMessage.
        K (PublicKey): The mint's public key, k*G.

    Returns:
        PublicKey: The unblinded signature C.
    """
    rNeg = Curve.N - scalarInt(r)
    return pointAdd(C_, pointMult(K, rNeg))


class Verification:
    """
    The outcome of verifyDetailed. path is PRIMARY or LEGACY for a valid
    signature and None otherwise. reasons lists why each attempted path
    failed.
    """

    PRIMARY = "primary"
    LEGACY = "legacy"

    def __init__(self, path=None, reasons=None):
        self.path = path
        self.reasons = reasons if reasons is not None else []

    @property
    def valid(self):
        return self.path is not None

    def __bool__(self):
        return self.valid

    def __repr__(self):
        return f"Verification(path={self.path!r}, reasons={self.reasons!r})"


def _checkSignature(Y, k, C):
    return pointMult(Y, k) == C


def _verifyPrimary(msg, k, C, reasons):
    try:
        Y = hashToCurve(msg)
    except NoValidPointFound as e:
        reasons.append(f"{Verification.PRIMARY}: {e}")
        return False
    if not _checkSignature(Y, k, C):
        reasons.append(f"{Verification.PRIMARY}: signature mismatch")
        return False
    return True


def _verifyLegacy(msg, k, C, reasons, maxIterations):
    try:
        Y = legacyHashToCurve(msg, maxIterations)
    except NoValidPointFound as e:
        reasons.append(f"{Verification.LEGACY}: {e}")
        return False
    if not _checkSignature(Y, k, C):
        reasons.append(f"{Verification.LEGACY}: signature mismatch")
        return False
    return True


def verifyDetailed(secret, k, C, legacyLimit=None):
    """
    Check k*hashToCurve(secret) == C, falling back to legacyHashToCurve, and
    report which path matched.

    Args:
        secret (str or bytes-like): The disclosed token secret.
        k (PrivateKey or int): The mint's private key.
        C (PublicKey): The unblinded signature.
        legacyLimit (int): optional. Iteration cap for the legacy path.

    Returns:
        Verification: The result.

    Raises:
        BDHKEError: k is not a valid scalar.
    """
    msg = messageBytes(secret)
    kInt = scalarInt(k)
    reasons = []
    if _verifyPrimary(msg, kInt, C, reasons):
        log.debug("signature verified with hashToCurve")
        return Verification(Verification.PRIMARY, reasons)
    if _verifyLegacy(msg, kInt, C, reasons, legacyLimit):
        log.info("signature verified with deprecated legacyHashToCurve")
        return Verification(Verification.LEGACY, reasons)
    return Verification(None, reasons)


def verify(secret, k, C, legacyLimit=None):
    """
    k*hashToCurve(secret) == C, with a fallback to legacyHashToCurve for
    signatures issued before domain separation.

    Hash failures and mismatches on either path all produce False. Use
    verifyDetailed to find out why.

    Args:
        secret (str or bytes-like): The disclosed token secret.
        k (PrivateKey or int): The mint's private key.
        C (PublicKey): The unblinded signature.
        legacyLimit (int): optional. Iteration cap for the legacy path.

    Returns:
        bool: True if the signature is valid.
    """
    return verifyDetailed(secret, k, C, legacyLimit).valid
