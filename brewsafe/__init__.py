# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe
    :platform: Unix
    :synopsis: Run Homebrew as an unprivileged service account

"""

__all__ = []

__all__.append("accounts")
__all__.append("config")
__all__.append("doctor")
__all__.append("execute")
__all__.append("filesystem")
__all__.append("identity")

__version__ = "0.1"

import argparse
import logging
import logging.config
import sys
import yaml

from . import accounts
from . import config
from . import doctor
from . import execute
from . import filesystem
from . import helpers
from . import identity
from .exceptions import *
from .filesystem import migrate


class _argparser(argparse.ArgumentParser):
    """\
    An ArgumentParser which raises UsageError rather than exiting.
    """
    def error(self, message):
        raise UsageError(message)



def _setuplogging(cfg):
    """\
    Set up the root logger, from a dictConfig YAML file if one is
    configured.
    """
    if cfg.logconfig:
        with open(cfg.logconfig, "rb") as logcfgfp:
            logging.config.dictConfig(yaml.safe_load(logcfgfp))
        return

    logger = logging.getLogger()
    logger.setLevel(cfg.loglevel.upper())
    if logger.handlers:
        return

    formatter = logging.Formatter("%(asctime)s: [%(levelname)s]%(name)s - %(message)s")
    if cfg.log:
        file_log_handler = logging.FileHandler(cfg.log)
        file_log_handler.setFormatter(formatter)
        logger.addHandler(file_log_handler)

    stderr_log_handler = logging.StreamHandler()
    stderr_log_handler.setFormatter(formatter)
    logger.addHandler(stderr_log_handler)


def _install(cfg, ids, cmdline):
    _adduser(cfg, ids, cmdline)
    _mkdirs(cfg, ids, cmdline)
    return(_clone(cfg, ids, cmdline))


def _switch(cfg, ids, cmdline):
    _adduser(cfg, ids, cmdline)
    _mklogdir(cfg, ids, cmdline)
    return(_migrate(cfg, ids, cmdline))


def _brew(cfg, ids, cmdline):
    return(execute.executor(cfg, ids).brew(cmdline.args))


def _do(cfg, ids, cmdline):
    return(execute.executor(cfg, ids).run_sandboxed([cmdline.command] + cmdline.args))


def _do_internal(cfg, ids, cmdline):
    return(execute.executor(cfg, ids).run_internal([cmdline.command] + cmdline.args))


def _doctor(cfg, ids, cmdline):
    return(doctor.doctor(cfg, ids).run())


def _info(cfg, ids, cmdline):
    return(doctor.doctor(cfg, ids).info())


def _adduser(cfg, ids, cmdline):
    accounts.provisioner(cfg, ids).create_account()
    return(0)


def _deluser(cfg, ids, cmdline):
    accounts.provisioner(cfg, ids).delete_account()
    return(0)


def _mkdirs(cfg, ids, cmdline):
    prep = filesystem.preparer(cfg, ids)
    prep.ensure_home()
    prep.ensure_log_dir()
    return(0)


def _mklogdir(cfg, ids, cmdline):
    filesystem.preparer(cfg, ids).ensure_log_dir()
    return(0)


def _clone(cfg, ids, cmdline):
    return(execute.executor(cfg, ids).clone())


def _migrate(cfg, ids, cmdline):
    migrate.migrator(cfg, ids).migrate()
    return(0)


def _unmigrate(cfg, ids, cmdline):
    migrate.migrator(cfg, ids).unmigrate(cmdline.username)
    return(0)


def _no_args(ap):
    pass


def _command_args(ap):
    ap.add_argument("command")
    ap.add_argument("args", nargs=argparse.REMAINDER)


def _internal_args(ap):
    for key in execute.SANDBOXKEYS:
        ap.add_argument("--"+key, metavar=key.upper(), action="store", dest=key, default=None)
    _command_args(ap)


def _username_args(ap):
    ap.add_argument("username")


# verb: (handler, function adding the verb's arguments to a parser)
#
# brew passes every argument on untouched, including leading options, so
# it is not given a parser of its own
VERBS = {
    "brew": (_brew, None),
    "do": (_do, _command_args),
    "_do": (_do_internal, _internal_args),
    "install": (_install, _no_args),
    "switch": (_switch, _no_args),
    "doctor": (_doctor, _no_args),
    "info": (_info, _no_args),
    "adduser": (_adduser, _no_args),
    "deluser": (_deluser, _no_args),
    "mkdirs": (_mkdirs, _no_args),
    "mklogdir": (_mklogdir, _no_args),
    "clone": (_clone, _no_args),
    "migrate": (_migrate, _no_args),
    "unmigrate": (_unmigrate, _username_args)
}


def _parse(argv):
    """\
    Split argv into the verb and a namespace of its arguments.
    """
    mainap = _argparser(prog="brewsafe", add_help=False, allow_abbrev=False)
    mainap.add_argument("verb", choices=sorted(VERBS))
    mainap.add_argument("args", nargs=argparse.REMAINDER)
    cmdline = mainap.parse_args(argv)

    (_, addargs) = VERBS[cmdline.verb]
    if addargs is None:
        return((cmdline.verb, argparse.Namespace(args=cmdline.args)))

    verbap = _argparser(prog="brewsafe "+cmdline.verb, add_help=False, allow_abbrev=False)
    addargs(verbap)
    return((cmdline.verb, verbap.parse_args(cmdline.args)))


def main(argv=None, cfg=None, ids=None):
    """\
    The main function, dispatch the verb in argv[0] and return the exit
    status.
    """
    if argv is None:
        argv = sys.argv[1:]

    # Process the command line
    try:
        (verb, cmdline) = _parse(argv)
    except UsageError as exc:
        sys.stderr.write("error: {e}\n".format(e=exc))
        sys.stderr.write(helpers.usage())
        return(1)

    # Load the configuration, _do is handed the values it needs by the
    # process which started it
    try:
        if cfg is None:
            cfg = config.load()
        overrides = {}
        for key in execute.SANDBOXKEYS:
            if getattr(cmdline, key, None) is not None:
                overrides[key] = getattr(cmdline, key)
        if overrides:
            cfg = config.config(**dict(cfg.asdict(), **overrides))
        _setuplogging(cfg)
    except (ConfigError, OSError, ValueError, yaml.YAMLError) as exc:
        print("error: {e}".format(e=exc), file=sys.stderr)
        return(1)

    logger = logging.getLogger(__name__)

    if ids is None:
        ids = identity.identities()

    (handler, _) = VERBS[verb]
    logger.debug("Dispatching {v} with arguments {a}".format(v=verb, a=vars(cmdline)))
    try:
        return(handler(cfg, ids, cmdline))
    except (BrewSafeBaseError, OSError) as exc:
        logger.error("{v}: {e}".format(v=verb, e=exc))
        return(1)
