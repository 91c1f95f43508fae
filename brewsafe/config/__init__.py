# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.config
    :platform: Unix
    :synopsis: Configuration values

The configuration is built once at process start and handed to every
component.  Without a configuration file the defaults below are used
unchanged.
"""

__all__ = [
    "cfgdefs",
    "config",
    "load"
]

import copy
import logging
import os
import yaml

from ..exceptions import ConfigError


CONFIG_ENV = "BREWSAFE_CONFIG"
LOGLEVEL_ENV = "BREWSAFE_LOGLEVEL"

cfgdefs = {
    # the service account
    "account": "_brew",
    "realname": "Homebrew",
    "placeholderhome": "/var/empty",
    "placeholdershell": "/usr/bin/false",
    "maxid": 500,

    # managed trees, the anchor is read to learn the current owner
    "home": "/usr/local/Homebrew",
    "homeanchor": ".git",
    "homegroup": "admin",
    "cache": "/Library/Caches/Homebrew",
    "cacheanchor": "downloads",
    "cachegroup": "staff",
    "logdir": "/var/log/homebrew",
    "repository": "https://github.com/Homebrew/brew",

    # external commands
    "brew": "/usr/local/bin/brew",
    "sudo": "/usr/bin/sudo",
    "dscl": "/usr/bin/dscl",
    "git": "/usr/bin/git",

    # environment handed to sandboxed commands
    "homeenv": "HOME",
    "logenv": "HOMEBREW_LOGS",

    # brew sub-verbs which do not need to run as the service account
    "safeverbs": [
        "--cache", "--cellar", "--env", "--prefix", "--repository", "--version",
        "commands", "config", "deps", "desc", "help", "home", "info", "leaves",
        "list", "log", "options", "outdated", "search", "uses"
    ],

    "log": None,
    "loglevel": "WARNING",
    "logconfig": None
}


class config(object):
    """\
    A read only set of configuration values, each available as an
    attribute.  Each value must have the type of its default, keys
    defaulting to None take a string.
    """
    def __init__(self, **overrides):
        unknown = sorted(set(overrides) - set(cfgdefs))
        if unknown:
            raise ConfigError("unknown configuration keys: {k}".format(k=", ".join(unknown)))

        for (key, value) in sorted(overrides.items()):
            _check(key, value)

        values = copy.deepcopy(cfgdefs)
        values.update(copy.deepcopy(overrides))
        object.__setattr__(self, "_values", values)


    def __getattr__(self, name):
        if name.startswith("_"):
            raise AttributeError(name)
        try:
            return(self._values[name])
        except KeyError:
            raise AttributeError(name)


    def __setattr__(self, name, value):
        raise AttributeError("configuration is read only")


    def __repr__(self):
        return("{m}.{n}({v!r})".format(m=self.__class__.__module__, n=self.__class__.__name__, v=self._values))


    def asdict(self):
        return(copy.deepcopy(self._values))



def _check(key, value):
    default = cfgdefs[key]
    if default is None:
        valid = value is None or isinstance(value, str)
        expected = "a string"
    elif isinstance(default, list):
        valid = isinstance(value, list) and all(isinstance(v, str) for v in value)
        expected = "a list of strings"
    else:
        # bool is an int, so compare the types exactly
        valid = type(value) is type(default)
        expected = "of type {t}".format(t=type(default).__name__)

    if not valid:
        raise ConfigError("configuration key {k} must be {e}, not {v!r}".format(k=key, e=expected, v=value))


def load(path=None):
    """\
    Build the configuration from the defaults, overridden by the YAML
    file at path (or named by $BREWSAFE_CONFIG) and then by
    $BREWSAFE_LOGLEVEL.
    """
    logger = logging.getLogger(__name__)

    if path is None:
        path = os.environ.get(CONFIG_ENV)

    ymlcfg = {}
    if path:
        logger.debug("Loading configuration from {f}".format(f=path))
        try:
            with open(path, "rb") as ymlcfgfp:
                ymlcfg = yaml.safe_load(ymlcfgfp)
        except (OSError, yaml.YAMLError) as exc:
            raise ConfigError("cannot load configuration file {f}: {e}".format(f=path, e=exc)) from exc

        if ymlcfg is None:
            ymlcfg = {}
        if not isinstance(ymlcfg, dict):
            raise ConfigError("configuration file {f} is not a mapping".format(f=path))

        badkeys = [repr(k) for k in ymlcfg if not isinstance(k, str)]
        if badkeys:
            raise ConfigError("configuration file {f} has keys which are not strings: {k}".format(f=path, k=", ".join(badkeys)))

    if os.environ.get(LOGLEVEL_ENV):
        ymlcfg["loglevel"] = os.environ[LOGLEVEL_ENV]

    return(config(**ymlcfg))
