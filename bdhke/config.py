"""
Copyright (c) 2019, Brian Stafford
Copyright (c) 2019-2020, the Decred developers
See LICENSE for details

Configuration settings for bdhke.
"""

import argparse
import logging
import os
import sys

from appdirs import AppDirs

from bdhke.util import helpers


# The data directory in an OS-appropriate location.
_ad = AppDirs("bdhke", False)
DATA_DIR = _ad.user_data_dir

# The master configuration file name.
CONFIG_NAME = "bdhke.conf"

# Settings file keys.
LOG_LEVEL_KEY = "loglevel"
LEGACY_LIMIT_KEY = "legacyhashlimit"

logLevelMap = {
    "critical": logging.CRITICAL,
    "error": logging.ERROR,
    "warning": logging.WARNING,
    "info": logging.INFO,
    "debug": logging.DEBUG,
    "notset": logging.NOTSET,
    "0": logging.NOTSET,
}

log = helpers.getLogger("CONFIG")


def logLvl(s):
    """
    Get the log level from the map.

    Args:
        s (str): A string which is a key for the logLevelMap. Case-insensitive.
    """
    return logLevelMap[s.lower()]


def parseLogLevels(specifier):
    """
    Parse a log level specifier. The specifier is either a single level, e.g.
    "debug", or comma-separated module:level pairs, e.g. "BDHKE:debug,CONFIG:warning".

    Args:
        specifier (str): The level specifier.

    Returns:
        int or None: The default level, if one was specified.
        dict: Module name -> level.
    """
    if any(ch in specifier for ch in (",", ":")):
        pairs = (s.split(":") for s in specifier.split(","))
        return None, {k: logLvl(v) for k, v in pairs}
    return logLvl(specifier), {}


def positiveInt(s):
    """
    argparse type for a strictly positive integer.
    """
    v = int(s)
    if v <= 0:
        raise argparse.ArgumentTypeError(f"{s} is not a positive integer")
    return v


class CmdArgs:
    """
    CmdArgs are command-line configuration options. Arguments it does not
    recognize are kept in `extra` for the application.
    """

    def __init__(self, argv=None):
        self.logLevel = None
        self.moduleLevels = {}
        parser = argparse.ArgumentParser(add_help=False)
        parser.add_argument("--loglevel")
        parser.add_argument(
            "--legacylimit",
            type=positiveInt,
            help="cap on legacy hash-to-curve iterations (unbounded by default)",
        )
        args, self.extra = parser.parse_known_args(argv)
        self.legacyHashLimit = args.legacylimit
        if args.loglevel:
            try:
                self.logLevel, self.moduleLevels = parseLogLevels(args.loglevel)
            except (KeyError, ValueError):
                sys.exit(f"malformed loglevel specifier: {args.loglevel}")


class BDHKEConfig:
    """
    BDHKEConfig is the configuration settings. The configuration file is JSON
    formatted. Command-line arguments override the file.
    """

    def __init__(self, dataDir=DATA_DIR, argv=None):
        helpers.mkdir(dataDir)
        self.path = os.path.join(dataDir, CONFIG_NAME)
        self.file = helpers.fetchSettingsFile(self.path)
        args = CmdArgs(argv)
        self.extraArgs = args.extra

        self.logLevel = logging.INFO
        self.moduleLevels = {}
        fileLevels = self.file.get(LOG_LEVEL_KEY)
        if fileLevels:
            try:
                lvl, self.moduleLevels = parseLogLevels(fileLevels)
            except (KeyError, ValueError):
                log.error("malformed loglevel in %s: %r", self.path, fileLevels)
            else:
                if lvl is not None:
                    self.logLevel = lvl
        if args.logLevel is not None:
            self.logLevel = args.logLevel
        self.moduleLevels.update(args.moduleLevels)

        self.legacyHashLimit = self.file.get(LEGACY_LIMIT_KEY)
        if args.legacyHashLimit is not None:
            self.legacyHashLimit = args.legacyHashLimit
        if self.legacyHashLimit is not None:
            if not isinstance(self.legacyHashLimit, int) or self.legacyHashLimit <= 0:
                log.error(
                    "ignoring invalid %s in %s: %r",
                    LEGACY_LIMIT_KEY,
                    self.path,
                    self.legacyHashLimit,
                )
                self.legacyHashLimit = None

    def set(self, k, v):
        """
        Set the configuration option. The configuration is not saved, so `save`
        should be called separately.

        Args:
            k (str): The setting key.
            v (JSON-encodable): The value.
        """
        self.file[k] = v

    def get(self, *keys):
        """
        Retrieve the setting at the provided key path. Multiple keys can be
        provided, with each successive key being retrieved from the previous
        key's value.

        Args:
            *keys (str): Recursive key list.

        Returns:
            mixed: The configuration value.
        """
        d = self.file
        rVal = None
        for k in keys:
            if not isinstance(d, dict) or k not in d:
                return None
            rVal = d[k]
            d = rVal
        return rVal

    def save(self):
        """
        Save the file.
        """
        helpers.saveJSON(self.path, self.file, indent=4, sort_keys=True)

    def prepareLogging(self, filepath=None):
        """
        Apply the configured log levels.

        Args:
            filepath (str): optional. The rotating log file.
        """
        helpers.prepareLogging(
            filepath, logLvl=self.logLevel, lvlMap=self.moduleLevels
        )


bdhkeConfig = None


def load(dataDir=DATA_DIR, argv=None):
    """
    Load and return the current configuration.

    The configuration is only loaded once. Successive calls to the modular `load`
    function will return the same instance.

    Returns:
        BDHKEConfig: The current configuration.
    """
    global bdhkeConfig
    if not bdhkeConfig:
        bdhkeConfig = BDHKEConfig(dataDir, argv)
    return bdhkeConfig
