# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.execute
    :platform: Unix
    :synopsis: Run commands as the service account

A sandboxed command is run in two steps.  The invoking user's process
re-runs this tool through sudo as the service account with the internal
``_do`` verb, that process then runs the real command with a private
temporary home directory which only lasts as long as the command.
"""

__all__ = [
    "SANDBOXKEYS",
    "executor",
    "searchable"
]

import logging
import os
import shutil
import stat
import sys
import tempfile

from .. import helpers


# configuration handed on to the _do process, sudo does not pass on the
# environment the configuration was loaded from
SANDBOXKEYS = [
    "logdir",
    "homeenv",
    "logenv",
    "loglevel"
]


def searchable(path, uid, gids):
    """\
    Check whether uid, with membership of gids, can reach path.  Each
    directory from / down to path needs the execute bit for whichever of
    user, group or other applies.
    """
    if uid == 0:
        return(True)

    path = os.path.abspath(path)
    parts = [os.sep]
    for part in path.split(os.sep):
        if part:
            parts.append(os.path.join(parts[-1], part))

    for p in parts:
        try:
            st = os.stat(p)
        except OSError:
            return(False)
        if st.st_uid == uid:
            bit = stat.S_IXUSR
        elif st.st_gid in gids:
            bit = stat.S_IXGRP
        else:
            bit = stat.S_IXOTH
        if not st.st_mode & bit:
            return(False)

    return(True)



class executor(object):
    def __init__(self, cfg, ids, call=helpers.call):
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__)
        self._cfg = cfg
        self._ids = ids
        self._call = call


    def _workdir(self):
        """\
        The current directory if the service account can use it,
        otherwise /.
        """
        try:
            cwd = os.getcwd()
        except OSError:
            return(os.sep)

        (uid, found) = self._ids.lookup_user(self._cfg.account)
        if found and searchable(cwd, uid, self._ids.user_groups(self._cfg.account)):
            return(cwd)

        self._logger.info("{a} cannot use {d}, running in /".format(a=self._cfg.account, d=cwd))
        return(os.sep)


    def _sudo(self, *args):
        return([self._cfg.sudo, "-u", self._cfg.account, "--"] + list(args))


    def run_sandboxed(self, args):
        """\
        Run args as the service account through the _do verb.
        """
        cmd = [sys.executable, "-m", "brewsafe", "_do"]
        for key in SANDBOXKEYS:
            cmd.append("--{k}={v}".format(k=key, v=getattr(self._cfg, key)))
        cmd = self._sudo(*(cmd + list(args)))
        return(self._call(cmd, cwd=self._workdir()))


    def run_internal(self, args):
        """\
        Run args with a temporary home directory which is removed
        afterwards whatever the outcome.
        """
        env = dict(os.environ)
        tdir = tempfile.mkdtemp(prefix="brewsafe.")
        try:
            self._logger.debug("Using temporary home {d}".format(d=tdir))
            env[self._cfg.homeenv] = tdir
            env[self._cfg.logenv] = self._cfg.logdir
            return(self._call(list(args), env=env))
        finally:
            if os.path.isdir(tdir):
                shutil.rmtree(tdir)


    def run_direct(self, args):
        """\
        Run args as the invoking user.
        """
        return(self._call(list(args)))


    def brew(self, args):
        """\
        Run brew, directly for the sub-verbs which only read state and as
        the service account for everything else.
        """
        cmd = [self._cfg.brew] + list(args)
        if not args or args[0] in self._cfg.safeverbs:
            return(self.run_direct(cmd))
        return(self.run_sandboxed(cmd))


    def clone(self):
        """\
        Clone the repository into the home directory as the service
        account.
        """
        cmd = self._sudo(self._cfg.git, "clone", self._cfg.repository, self._cfg.home)
        return(self._call(cmd, cwd=os.sep))
