# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.filesystem
    :platform: Unix
    :synopsis: Directories owned by the service account

"""

__all__ = [
    "preparer",
    "migrate"
]

import logging
import os
import stat

from .. import helpers
from ..exceptions import *


LOGDIR_MODE = stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH


class preparer(object):
    def __init__(self, cfg, ids):
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__)
        self._cfg = cfg
        self._ids = ids


    def _accountuid(self):
        (uid, found) = self._ids.lookup_user(self._cfg.account)
        if not found:
            raise UnknownIdentityError("user", self._cfg.account)
        return(uid)


    def ensure_home(self):
        """\
        Create the home directory if it is missing and give it to the
        service account.  The group is left alone.
        """
        helpers.requireroot("mkdirs")
        uid = self._accountuid()

        if not os.path.isdir(self._cfg.home):
            self._logger.info("Creating {p}".format(p=self._cfg.home))
            os.makedirs(self._cfg.home)
        os.chown(self._cfg.home, uid, -1)


    def ensure_log_dir(self):
        """\
        Create the log directory.  An existing directory is an error, it
        may be left over from an earlier installation.
        """
        helpers.requireroot("mklogdir")
        uid = self._accountuid()

        self._logger.info("Creating {p}".format(p=self._cfg.logdir))
        os.makedirs(self._cfg.logdir)
        os.chown(self._cfg.logdir, uid, -1)
        os.chmod(self._cfg.logdir, LOGDIR_MODE)
