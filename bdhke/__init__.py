"""
Copyright (c) 2019-2020, the Decred developers
See LICENSE for details
"""


class BDHKEError(Exception):
    pass


class NoValidPointFound(BDHKEError):
    """
    Raised when a hash-to-curve search runs out of attempts without landing on
    a valid secp256k1 point.
    """

    def __init__(self, attempts):
        super().__init__(f"no valid point found after {attempts} attempts")
        self.attempts = attempts
