"""
Copyright (c) 2020, the Decred developers
See LICENSE for details

The bdhke command. Checks an unblinded signature against a token secret with
the mint's private key, as a mint does on redemption.

    bdhke [--hex] [--loglevel LEVEL] [--legacylimit N] secret key signature
"""

import argparse
import os
import sys

from bdhke import BDHKEError, config
from bdhke.crypto import b_dhke
from bdhke.crypto.secp256k1.curve import curve as Curve, privKeyFromBytes
from bdhke.util import helpers
from bdhke.util.encode import ByteArray


LOG_FILE_NAME = "bdhke.log"


def initLogging(cfg, dataDir):
    """
    Initialize logging for the command.

    Args:
        cfg (BDHKEConfig): The loaded configuration.
        dataDir (str): The data directory. Logs go in its logs subdirectory.

    Returns:
        logging.Logger: The application logger.
    """
    logDir = os.path.join(dataDir, "logs")
    helpers.mkdir(logDir)
    cfg.prepareLogging(os.path.join(logDir, LOG_FILE_NAME))
    log = helpers.getLogger("APP")
    log.debug(f"configuration file at {cfg.path}")
    return log


def makeParser():
    parser = argparse.ArgumentParser(
        prog="bdhke",
        description="Verify an unblinded ecash signature.",
        epilog=(
            "--loglevel and --legacylimit are also accepted, and override "
            f"the settings in {config.CONFIG_NAME}."
        ),
    )
    parser.add_argument("secret", help="the token secret")
    parser.add_argument("key", help="the mint's 32-byte private key, hex")
    parser.add_argument("signature", help="the unblinded signature C, hex")
    parser.add_argument(
        "--hex", action="store_true", help="the secret is hex-encoded bytes"
    )
    return parser


def parseInputs(parser, args):
    """
    Decode the command-line values. Bad input exits through the parser.

    Returns:
        bytes or str: The secret.
        PrivateKey: The mint's private key.
        PublicKey: The signature.
    """
    try:
        secret = ByteArray(args.secret).bytes() if args.hex else args.secret
        k = privKeyFromBytes(ByteArray(args.key))
        C = Curve.parsePubKey(ByteArray(args.signature))
    except (ValueError, BDHKEError) as e:
        parser.error(str(e))
    return secret, k, C


def main(argv=None, dataDir=config.DATA_DIR):
    """
    Run the bdhke command.

    Returns:
        int: The exit code. 0 for a valid signature, 1 otherwise.
    """
    cfg = config.load(dataDir, argv)
    log = initLogging(cfg, dataDir)
    parser = makeParser()
    args = parser.parse_args(cfg.extraArgs)
    secret, k, C = parseInputs(parser, args)
    res = b_dhke.verifyDetailed(secret, k, C, legacyLimit=cfg.legacyHashLimit)
    if res.valid:
        print(f"valid ({res.path})")
        return 0
    log.info("signature rejected: %s", "; ".join(res.reasons))
    print("invalid")
    for reason in res.reasons:
        print(f"  {reason}")
    return 1


if __name__ == "__main__":
    sys.exit(main())
