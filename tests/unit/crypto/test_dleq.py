"""
Copyright (c) 2020, the Decred developers
See LICENSE for details
"""

import hashlib

from bdhke.crypto.b_dhke import (
    blindMessage,
    signBlindedMessage,
    unblindSignature,
)
from bdhke.crypto.dleq import hashE, proveDLEQ, verifyDLEQ, verifyUnblindedDLEQ
from bdhke.crypto.secp256k1.curve import curve, privKeyFromInt
from bdhke.util.encode import ByteArray


MINT_KEY = privKeyFromInt(
    0x0F1E2D3C4B5A69788796A5B4C3D2E1F00112233445566778899AABBCCDDEEFF0
)


def test_hashE():
    G = curve.publicKey(1)
    G2 = curve.publicKey(2)
    e = hashE(G, G2)
    want = hashlib.sha256(
        (
            G.serializeUncompressed().hex() + G2.serializeUncompressed().hex()
        ).encode("utf-8")
    ).digest()
    assert e == want
    assert len(e) == 32
    assert hashE(G2, G) != e


def test_DLEQ():
    secret = "dleq secret"
    K = MINT_KEY.pub
    B_, r = blindMessage(secret)
    C_ = signBlindedMessage(B_, MINT_KEY)
    e, s = proveDLEQ(B_, MINT_KEY)
    assert isinstance(e, ByteArray)
    assert len(s) == 32
    assert verifyDLEQ(B_, C_, e, s, K)
    # Bytes and hex inputs are accepted.
    assert verifyDLEQ(B_, C_, e.bytes(), s.hex(), K)

    # A third party with the unblinded signature and r.
    C = unblindSignature(C_, r, K)
    assert verifyUnblindedDLEQ(secret, r, C, e, s, K)
    assert not verifyUnblindedDLEQ("other secret", r, C, e, s, K)

    # Wrong mint key.
    otherKey = privKeyFromInt(MINT_KEY.int() + 1)
    assert not verifyDLEQ(B_, C_, e, s, otherKey.pub)

    # C_ signed by a different key than K.
    assert not verifyDLEQ(B_, signBlindedMessage(B_, otherKey), e, s, K)

    # Tampered response.
    badS = ByteArray((s.int() + 1) % curve.N, length=32)
    assert not verifyDLEQ(B_, C_, e, badS, K)

    # Tampered challenge.
    badE = e.copy()
    badE[0] ^= 0x01
    assert not verifyDLEQ(B_, C_, badE, s, K)


def test_DLEQ_deterministic():
    B_, _ = blindMessage("fixed", r=3)
    e1, s1 = proveDLEQ(B_, MINT_KEY, p=12345)
    e2, s2 = proveDLEQ(B_, MINT_KEY, p=12345)
    assert e1 == e2
    assert s1 == s2
    assert s1.int() == (12345 + e1.int() * MINT_KEY.int()) % curve.N

    e3, s3 = proveDLEQ(B_, MINT_KEY, p=54321)
    assert e3 != e1
    assert verifyDLEQ(B_, signBlindedMessage(B_, MINT_KEY), e3, s3, MINT_KEY.pub)


def test_DLEQ_degenerate():
    B_, _ = blindMessage("degenerate", r=3)
    C_ = signBlindedMessage(B_, MINT_KEY)
    e, _ = proveDLEQ(B_, MINT_KEY)
    # A zero response makes s*G the point at infinity.
    assert not verifyDLEQ(B_, C_, e, ByteArray(0, length=32), MINT_KEY.pub)
