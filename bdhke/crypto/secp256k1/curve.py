"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, The Decred developers
See LICENSE for details

Pure Python secp256k1 curve implementation, modeled on the Decred dcrd golang
version but working directly on Python integers.

References:
  [SECG]: Recommended Elliptic Curve Domain Parameters
    https://www.secg.org/sec2-v2.pdf

  [GECC]: Guide to Elliptic Curve Cryptography (Hankerson, Menezes, Vanstone)

  [SEC1] Elliptic Curve Cryptography
    https://www.secg.org/sec1-v2.pdf

  [ANSI X9.62-1998] Public Key Cryptography For The Financial Services
    Industry: The Elliptic Curve Digital Signature Algorithm (ECDSA)

Group operations are performed using Jacobian coordinates. For a given
(x, y) position on the curve, the Jacobian coordinates are (x1, y1, z1)
where x = x1/z1^2 and y = y1/z1^3. A z value of zero is the point at
infinity. In affine coordinates, the point at infinity is written (0, 0),
which is not on the curve since 7 is not a square root of zero.
"""

from bdhke import BDHKEError
from bdhke.crypto import rando
from bdhke.util.encode import ByteArray


COORDINATE_LEN = 32
PUBKEY_COMPRESSED_LEN = COORDINATE_LEN + 1
PUBKEY_LEN = 65
PUBKEY_COMPRESSED = 0x02  # 0x02 y_bit + x coord
PUBKEY_UNCOMPRESSED = 0x04  # 0x04 x coord + y coord


def isEven(i):
    return i % 2 == 0


def fromHex(hx):
    return int(hx, 16)


def NAF(k):
    """
    NAF takes a non-negative integer k and returns its Non-Adjacent Form as a
    list of digits in {-1, 0, 1}, most significant first. This is algorithm
    3.30 from [GECC].

    No two adjacent digits are non-zero, so on average only 1/3rd of the
    digits require a point addition. A run of 1s in the binary form is
    replaced using the identity
    2^n + 2^(n-1) + ... + 2^(n-k) = 2^(n+1) - 2^(n-k),
    which is why the result can be one digit longer than k's bit length.
    """
    digits = []
    while k > 0:
        if k & 1:
            # 1 when k = 1 (mod 4), -1 when k = 3 (mod 4).
            d = 2 - (k & 3)
            k -= d
        else:
            d = 0
        digits.append(d)
        k >>= 1
    digits.reverse()
    return digits


class PublicKey:
    """
    PublicKey is an affine point on secp256k1. It is treated as an immutable
    value: curve operations always return new instances. Methods to serialize
    in both uncompressed and compressed SEC (Standards for Efficient
    Cryptography) formats are included.
    """

    def __init__(self, curve, x, y):
        """
        Since this accepts arbitrary x and y coordinates, it allows creation
        of public keys that are not valid points on the secp256k1 curve. Use
        Curve.parsePubKey for untrusted input.
        """
        self.curve = curve
        self.x = x
        self.y = y

    def serializeCompressed(self):
        """
        serializeCompressed serializes a public key in the 33-byte compressed
        format.

        Returns:
            ByteArray: The parity prefix followed by the x coordinate.
        """
        fmt = PUBKEY_COMPRESSED
        if not isEven(self.y):
            fmt |= 0x1
        b = ByteArray(fmt) + ByteArray(self.x, length=COORDINATE_LEN)
        if len(b) != PUBKEY_COMPRESSED_LEN:
            raise BDHKEError("invalid compressed pubkey length %d" % len(b))
        return b

    def serializeUncompressed(self):
        """
        serializeUncompressed serializes a public key in a 65-byte uncompressed
        format.
        """
        b = ByteArray(PUBKEY_UNCOMPRESSED)
        b += ByteArray(self.x, length=COORDINATE_LEN)
        b += ByteArray(self.y, length=COORDINATE_LEN)
        return b

    def __eq__(self, other):
        """
        A PublicKey is equivalent to another if they both have the same X and
        Y coordinate.
        """
        if not isinstance(other, PublicKey):
            return NotImplemented
        return (self.x == other.x) and (self.y == other.y)

    def __hash__(self):
        return hash((self.x, self.y))

    def __repr__(self):
        return "PublicKey(" + self.serializeCompressed().hex() + ")"


class PrivateKey:
    """
    PrivateKey stores a secp256k1 private key and its corresponding public key.
    """

    def __init__(self, curve, k, x, y):
        self.key = k
        self.pub = PublicKey(curve, x, y)

    def int(self):
        """The scalar as an integer."""
        return self.key.int()


class Curve:
    def __init__(self):
        bitSize = 256
        p = fromHex("FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEFFFFFC2F")
        self.P = p
        self.N = fromHex(
            "FFFFFFFFFFFFFFFFFFFFFFFFFFFFFFFEBAAEDCE6AF48A03BBFD25E8CD0364141"
        )
        self.B = 7
        self.Gx = fromHex(
            "79BE667EF9DCBBAC55A06295CE870B07029BFCDB2DCE28D959F2815B16F81798"
        )
        self.Gy = fromHex(
            "483ADA7726A3C4655DA4FBFC0E1108A8FD17B448A68554199C47D08FFB10D4B8"
        )
        self.BitSize = bitSize
        self.H = 1
        # p = 3 (mod 4), so a square root of a is a^((p+1)/4).
        self.q = (p + 1) // 4
        # Next 6 constants are from Hal Finney's bitcointalk.org post:
        # https://bitcointalk.org/index.php?topic=3238.msg45565#msg45565
        # May he rest in peace.
        self.lambda_ = fromHex(
            "5363AD4CC05C30E0A5261C028812645A122E22EA20816678DF02967C1B23BD72"
        )
        self.beta = fromHex(
            "7AE96A2B657C07106E64479EAC3434E99CF0497512F58995C1396C28719501EE"
        )
        self.a1 = fromHex("3086D221A7D46BCDE86C90E49284EB15")
        self.b1 = fromHex("-E4437ED6010E88286F547FA90ABFE4C3")
        self.a2 = fromHex("114CA50F7A8E2F3F657C1108D9D44CFD8")
        self.b2 = fromHex("3086D221A7D46BCDE86C90E49284EB15")

    def scalarBaseMult(self, k):
        """
        scalarBaseMult returns k*G where G is the base point of the group and k
        is an integer.
        """
        return self.scalarMult(self.Gx, self.Gy, k)

    def splitK(self, k):
        """
        Args:
            k (int): An integer modulo the curve order.

        splitK returns a balanced length-two representation of k, so that
        k = k1 + k2 * lambda (mod n). This is algorithm 3.74 from [GECC].

        No matter what c1 and c2 are, the final equation will hold. c1 and c2
        are chosen to minimize max(|k1|, |k2|).
        """
        # c1 = round(b2 * k / n) from step 4.
        # Rounding isn't really necessary and costs too much, hence skipped.
        c1 = (self.b2 * k) // self.N
        # c2 = round(b1 * k / n) from step 4 (sign reversed to optimize one
        # step).
        c2 = (self.b1 * k) // self.N
        # k1 = k - c1 * a1 - c2 * a2 from step 5 (note c2's sign is reversed).
        k1 = k - c1 * self.a1 + c2 * self.a2
        # k2 = - c1 * b1 - c2 * b2 from step 5 (note c2's sign is reversed).
        k2 = c2 * self.b2 - c1 * self.b1
        return k1, k2

    def scalarMult(self, Bx, By, k):
        """
        scalarMult returns k*(Bx, By). The result is (0, 0) if k is a multiple
        of the group order. Not constant time.
        """
        if Bx == 0 and By == 0:
            return 0, 0
        P = self.P
        # Decompose k into k1 and k2 in order to halve the number of doublings.
        # See Algorithm 3.74 in [GECC].
        k1, k2 = self.splitK(k % self.N)

        # The main equation here to remember is:
        #   k * P = k1 * P + k2 * ϕ(P)
        # where ϕ(x, y) = (βx, y).
        p1x, p1y = Bx, By
        p2x, p2y = self.beta * Bx % P, By

        # -k * P is the same thing as k * -P, and -P(x, y) = P(x, -y).
        if k1 < 0:
            k1 = -k1
            p1y = (P - p1y) % P
        if k2 < 0:
            k2 = -k2
            p2y = (P - p2y) % P
        p1yNeg = (P - p1y) % P
        p2yNeg = (P - p2y) % P

        k1NAF = NAF(k1)
        k2NAF = NAF(k2)
        m = max(len(k1NAF), len(k2NAF))
        # Left-to-right, so pad the front with 0s.
        k1NAF = [0] * (m - len(k1NAF)) + k1NAF
        k2NAF = [0] * (m - len(k2NAF)) + k2NAF

        # Add left-to-right using the NAF optimization. See algorithm 3.77
        # from [GECC].
        qx, qy, qz = 0, 0, 0
        for d1, d2 in zip(k1NAF, k2NAF):
            qx, qy, qz = self.doubleJacobian(qx, qy, qz)
            if d1 == 1:
                qx, qy, qz = self.addJacobian(qx, qy, qz, p1x, p1y, 1)
            elif d1 == -1:
                qx, qy, qz = self.addJacobian(qx, qy, qz, p1x, p1yNeg, 1)
            if d2 == 1:
                qx, qy, qz = self.addJacobian(qx, qy, qz, p2x, p2y, 1)
            elif d2 == -1:
                qx, qy, qz = self.addJacobian(qx, qy, qz, p2x, p2yNeg, 1)

        return self.jacobianToAffine(qx, qy, qz)

    def publicKey(self, k):
        """
        Create a public key from integer private key k.
        """
        x, y = self.scalarBaseMult(k)
        return PublicKey(self, x, y)

    def parsePubKey(self, pubKeyB):
        """
        parsePubKey parses a secp256k1 public key encoded according to the
        format specified by ANSI X9.62-1998, which means it is also compatible
        with the SEC (Standards for Efficient Cryptography) specification which
        is a subset of the former.  In other words, it supports the
        uncompressed and compressed formats as follows:

        Compressed:
          <format byte = 0x02/0x03><32-byte X coordinate>
        Uncompressed:
          <format byte = 0x04><32-byte X coordinate><32-byte Y coordinate>

        It does not support the hybrid format, however.

        Raises:
            BDHKEError: The encoding is malformed or the point is not on the
                curve.
        """
        pubKeyB = ByteArray(pubKeyB).bytes()
        if len(pubKeyB) == 0:
            raise BDHKEError("empty pubkey")

        fmt = pubKeyB[0]
        ybit = (fmt & 0x1) == 0x1
        fmt &= 0xFF ^ 0x01

        ifunc = lambda b: int.from_bytes(b, byteorder="big")

        pkLen = len(pubKeyB)
        if pkLen == PUBKEY_LEN:
            if PUBKEY_UNCOMPRESSED != fmt:
                raise BDHKEError("invalid magic in pubkey: %d" % pubKeyB[0])
            x = ifunc(pubKeyB[1:33])
            y = ifunc(pubKeyB[33:])
            if x >= self.P:
                raise BDHKEError("pubkey X parameter is >= to P")
            if y >= self.P:
                raise BDHKEError("pubkey Y parameter is >= to P")

        elif pkLen == PUBKEY_COMPRESSED_LEN:
            # format is 0x2 | solution, <X coordinate>
            # solution determines which solution of the curve we use.
            # / y^2 = x^3 + Curve.B
            if PUBKEY_COMPRESSED != fmt:
                raise BDHKEError("invalid magic in compressed pubkey: %d" % pubKeyB[0])
            x = ifunc(pubKeyB[1:33])
            if x >= self.P:
                raise BDHKEError("pubkey X parameter is >= to P")
            y = self.decompressPoint(x, ybit)
        else:
            raise BDHKEError("invalid pub key length %d" % len(pubKeyB))

        if not self.isAffineOnCurve(x, y):
            raise BDHKEError("pubkey [%d, %d] isn't on secp256k1 curve" % (x, y))
        return PublicKey(self, x, y)

    def decompressPoint(self, x, ybit):
        """
        decompressPoint decompresses a point on the given curve given
        the X point and the solution to use. The candidate y is only a true
        square root when x^3 + B is a quadratic residue, so the caller must
        still check that the point is on the curve.
        """
        # Y = +-sqrt(x^3 + B)
        x3 = (pow(x, 3, self.P) + self.B) % self.P
        y = pow(x3, self.q, self.P)

        if ybit == isEven(y):
            y = self.P - y
        if ybit == isEven(y):
            raise BDHKEError("ybit doesn't match oddness")
        return y

    def addJacobian(self, x1, y1, z1, x2, y2, z2):
        """
        addJacobian adds the Jacobian points (x1, y1, z1) and (x2, y2, z2)
        without any assumptions about the z values and returns the sum as a
        Jacobian point.
        """
        # A point at infinity is the identity according to the group law for
        # elliptic curve cryptography.  Thus, ∞ + P = P and P + ∞ = P.
        if z1 == 0:
            return x2, y2, z2
        if z2 == 0:
            return x1, y1, z1

        # http://hyperelliptic.org/EFD/g1p/auto-shortw-jacobian-0.html#addition-add-2007-bl
        # Z1Z1 = Z1^2, Z2Z2 = Z2^2, U1 = X1*Z2Z2, U2 = X2*Z1Z1, S1 = Y1*Z2*Z2Z2
        # S2 = Y2*Z1*Z1Z1, H = U2-U1, I = (2*H)^2, J = H*I, r = 2*(S2-S1)
        # V = U1*I
        # X3 = r^2-J-2*V, Y3 = r*(V-X3)-2*S1*J, Z3 = ((Z1+Z2)^2-Z1Z1-Z2Z2)*H
        P = self.P
        z1z1 = z1 * z1 % P
        z2z2 = z2 * z2 % P
        u1 = x1 * z2z2 % P
        u2 = x2 * z1z1 % P
        s1 = y1 * z2 * z2z2 % P
        s2 = y2 * z1 * z1z1 % P

        # When the x coordinates are the same for two points on the curve, the
        # y coordinates either must be the same, in which case it is point
        # doubling, or they are opposite and the result is the point at
        # infinity.
        if u1 == u2:
            if s1 == s2:
                return self.doubleJacobian(x1, y1, z1)
            return 0, 0, 0

        h = (u2 - u1) % P
        i = 4 * h * h % P
        j = h * i % P
        r = 2 * (s2 - s1) % P
        v = u1 * i % P
        x3 = (r * r - j - 2 * v) % P
        y3 = (r * (v - x3) - 2 * s1 * j) % P
        z3 = ((z1 + z2) * (z1 + z2) - z1z1 - z2z2) * h % P
        return x3, y3, z3

    def doubleJacobian(self, x1, y1, z1):
        """
        doubleJacobian doubles the Jacobian point (x1, y1, z1).
        """
        # Doubling a point at infinity is still infinity.
        if y1 == 0 or z1 == 0:
            return 0, 0, 0

        # http://hyperelliptic.org/EFD/g1p/auto-shortw-jacobian-0.html#doubling-dbl-2009-l
        # A = X1^2, B = Y1^2, C = B^2, D = 2*((X1+B)^2-A-C)
        # E = 3*A, F = E^2, X3 = F-2*D, Y3 = E*(D-X3)-8*C
        # Z3 = 2*Y1*Z1
        P = self.P
        a = x1 * x1 % P
        b = y1 * y1 % P
        c = b * b % P
        d = 2 * ((x1 + b) * (x1 + b) - a - c) % P
        e = 3 * a % P
        f = e * e % P
        x3 = (f - 2 * d) % P
        y3 = (e * (d - x3) - 8 * c) % P
        z3 = 2 * y1 * z1 % P
        return x3, y3, z3

    def jacobianToAffine(self, x, y, z):
        """
        jacobianToAffine converts the Jacobian point (x, y, z) to affine
        integers. The point at infinity converts to (0, 0).
        """
        if z == 0:
            return 0, 0
        P = self.P
        zInv = pow(z, P - 2, P)  # Fermat: z^(p-2) = z^-1 (mod p)
        zInv2 = zInv * zInv % P
        return x * zInv2 % P, y * zInv2 * zInv % P

    def add(self, x1, y1, x2, y2):
        """
        add returns the sum of (x1,y1) and (x2,y2).
        """
        # A point at infinity is the identity according to the group law for
        # elliptic curve cryptography.  Thus, ∞ + P = P and P + ∞ = P.
        if x1 == 0 and y1 == 0:
            return x2, y2
        if x2 == 0 and y2 == 0:
            return x1, y1
        x3, y3, z3 = self.addJacobian(x1, y1, 1, x2, y2, 1)
        return self.jacobianToAffine(x3, y3, z3)

    def negate(self, x, y):
        """
        negate returns -(x, y), the reflection across the x axis.
        """
        return x, (self.P - y) % self.P

    def isAffineOnCurve(self, x, y):
        """
        isAffineOnCurve returns boolean if the point (x,y) is on the
        secp256k1 curve.
        """
        # y² = x³ + b
        y2 = y * y % self.P
        x3 = (pow(x, 3, self.P) + self.B) % self.P
        return y2 == x3


# curve is a global instance of the KoblitzCurve that implements the curve
# parameters.
curve = Curve()


def privKeyFromInt(k):
    """
    privKeyFromInt creates a PrivateKey for the secp256k1 curve from an
    integer scalar.

    Args:
        k (int): The private scalar. Must be in [1, N-1].

    Returns:
        PrivateKey: The private key structure.
    """
    if not 0 < k < curve.N:
        raise BDHKEError("private key scalar out of range")
    x, y = curve.scalarBaseMult(k)
    return PrivateKey(curve, ByteArray(k, length=COORDINATE_LEN), x, y)


def privKeyFromBytes(pk):
    """
    privKeyFromBytes creates a PrivateKey for the secp256k1 curve based on
    the provided big-endian byte-encoding.

    Args:
        pk (bytes-like): The private key bytes.

    Returns:
        PrivateKey: The private key structure.
    """
    if len(pk) != COORDINATE_LEN:
        raise BDHKEError("private key must be %d bytes" % COORDINATE_LEN)
    return privKeyFromInt(ByteArray(pk).int())


def generateKey():
    """
    generateKey generates a public and private key pair.
    """
    return privKeyFromInt(rando.randScalar(curve.N))
