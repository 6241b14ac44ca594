"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

Discrete log equality (DLEQ) proofs for BDHKE. A proof shows that the k in
K = k*G is the same k used in C_ = k*B_, without revealing k.

Mint (after computing C_):
    p = random nonce
    R1 = p*G
    R2 = p*B_
    e = hashE(R1, R2, K, C_)
    s = p + e*k
    return e, s

Wallet:
    R1 = s*G - e*K
    R2 = s*B_ - e*C_
    e == hashE(R1, R2, K, C_)

A third party holding (secret, r, C, e, s, K) can rebuild B_ and C_ and run
the same check.
"""

import hashlib

from bdhke import BDHKEError
from bdhke.crypto import rando
from bdhke.crypto.b_dhke import (
    hashToCurve,
    pointAdd,
    pointMult,
    pointNeg,
    scalarInt,
)
from bdhke.crypto.secp256k1.curve import COORDINATE_LEN, PublicKey, curve as Curve
from bdhke.util import helpers
from bdhke.util.encode import ByteArray


log = helpers.getLogger("DLEQ")

# The generator point.
G = PublicKey(Curve, Curve.Gx, Curve.Gy)


def hashE(*points):
    """
    The challenge hash. SHA-256 of the concatenated hex-encoded uncompressed
    points.

    Args:
        *points (PublicKey): The points.

    Returns:
        ByteArray: The 32-byte hash.
    """
    e = "".join(p.serializeUncompressed().hex() for p in points)
    return ByteArray(hashlib.sha256(e.encode("utf-8")).digest())


def proveDLEQ(B_, k, p=None):
    """
    Create a DLEQ proof for C_ = k*B_.

    Args:
        B_ (PublicKey): The blinded message.
        k (PrivateKey or int): The mint's private key.
        p (int): optional. The nonce. Only pass one for deterministic tests.

    Returns:
        ByteArray: e, the challenge.
        ByteArray: s, the response.
    """
    k = scalarInt(k)
    p = rando.randScalar(Curve.N) if p is None else scalarInt(p)
    R1 = Curve.publicKey(p)
    R2 = pointMult(B_, p)
    C_ = pointMult(B_, k)
    K = Curve.publicKey(k)
    e = hashE(R1, R2, K, C_)
    s = (p + e.int() * k) % Curve.N
    return e, ByteArray(s, length=COORDINATE_LEN)


def verifyDLEQ(B_, C_, e, s, K):
    """
    Check a DLEQ proof from the mint.

    Args:
        B_ (PublicKey): The blinded message.
        C_ (PublicKey): The blinded signature.
        e (bytes-like): The challenge.
        s (bytes-like): The response.
        K (PublicKey): The mint's public key.

    Returns:
        bool: True if the proof is valid.
    """
    e, s = ByteArray(e), ByteArray(s)
    try:
        R1 = pointAdd(pointMult(G, s.int()), pointNeg(pointMult(K, e.int())))
        R2 = pointAdd(pointMult(B_, s.int()), pointNeg(pointMult(C_, e.int())))
    except BDHKEError as err:
        log.debug("rejecting DLEQ proof: %s", err)
        return False
    return e == hashE(R1, R2, K, C_)


def verifyUnblindedDLEQ(secret, r, C, e, s, K):
    """
    Check a DLEQ proof given the unblinded signature and the blinding factor,
    as a third party receiving a token would.

    Args:
        secret (str or bytes-like): The token secret.
        r (PrivateKey or int): The blinding factor.
        C (PublicKey): The unblinded signature.
        e (bytes-like): The challenge.
        s (bytes-like): The response.
        K (PublicKey): The mint's public key.

    Returns:
        bool: True if the proof is valid.
    """
    r = scalarInt(r)
    try:
        Y = hashToCurve(secret)
        C_ = pointAdd(C, pointMult(K, r))
        B_ = pointAdd(Y, pointMult(G, r))
    except BDHKEError as err:
        log.debug("rejecting unblinded DLEQ proof: %s", err)
        return False
    return verifyDLEQ(B_, C_, e, s, K)
