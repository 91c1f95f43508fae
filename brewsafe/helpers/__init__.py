# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.helpers
    :platform: Unix
    :synopsis: Helper functions

"""

__all__ = [
    "isroot",
    "requireroot",
    "run",
    "call",
    "usage"
]

import logging
import os
import subprocess
import tabulate
from mako.template import Template

from ..exceptions import *


USAGE = Template("""\
usage: ${prog} VERB [ARGS...]

${verbs}
""")

VERBS = [
    ("brew ARGS...", "run brew, as the service account unless the sub-verb is safe"),
    ("do ARGS...", "run a command as the service account"),
    ("install", "adduser, mkdirs and clone"),
    ("switch", "adduser, mklogdir and migrate an existing installation"),
    ("doctor", "check the installation"),
    ("info", "show ownership of the managed directories"),
    ("adduser", "create the service account"),
    ("deluser", "delete the service account"),
    ("mkdirs", "create the home and log directories"),
    ("mklogdir", "create the log directory"),
    ("clone", "clone the repository into the home directory"),
    ("migrate", "give the managed directories to the service account"),
    ("unmigrate USERNAME", "give the managed directories back to USERNAME")
]


def isroot():
    return(os.geteuid() == 0)


def requireroot(operation):
    """\
    Raise PrivilegeRequiredError unless running as root.
    """
    if not isroot():
        raise PrivilegeRequiredError(operation)


def run(cmd):
    """\
    Run a command which must succeed, raising ExternalCommandError
    if it does not.
    """
    logger = logging.getLogger(__name__)
    logger.debug("Executing command: {cmd}".format(cmd=cmd))
    try:
        subprocess.check_call(cmd)
    except subprocess.CalledProcessError as exc:
        raise ExternalCommandError(cmd, exc.returncode) from exc


def call(cmd, **kw):
    """\
    Run a command and return its exit status.  A command which cannot be
    found gives 127 and one killed by a signal gives 128 plus the signal
    number, as a shell would.
    """
    logger = logging.getLogger(__name__)
    logger.debug("Executing command: {cmd} ({kw})".format(cmd=cmd, kw=kw))
    try:
        returncode = subprocess.call(cmd, **kw)
    except FileNotFoundError:
        logger.error("{c}: command not found".format(c=cmd[0]))
        return(127)

    if returncode < 0:
        logger.debug("{c}: killed by signal {s}".format(c=cmd[0], s=-returncode))
        return(128 - returncode)
    return(returncode)


def usage(prog="brewsafe"):
    verbs = tabulate.tabulate(VERBS, tablefmt="plain", stralign="left")
    return(USAGE.render(prog=prog, verbs=verbs))
