# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.accounts
    :platform: macOS
    :synopsis: Service account provisioning

The service account is made of a group record and a user record in the
local directory service, both created and removed with dscl.  A failed
dscl command stops the operation where it is, nothing is rolled back.
"""

__all__ = [
    "provisioner"
]

import logging

from .. import helpers
from ..exceptions import *
from ..identity import find_unused_id


# Attributes which would otherwise permit a login to the account
LOGIN_ATTRIBUTES = ["AuthenticationAuthority", "PasswordPolicyOptions"]


class provisioner(object):
    def __init__(self, cfg, ids, run=helpers.run):
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__)
        self._cfg = cfg
        self._ids = ids
        self._run = run


    @property
    def _group(self):
        return("/Groups/{n}".format(n=self._cfg.account))


    @property
    def _user(self):
        return("/Users/{n}".format(n=self._cfg.account))


    def _dscl(self, *args):
        self._run([self._cfg.dscl, "."] + [str(a) for a in args])


    def create_account(self):
        """\
        Create the group and user records for the service account, the
        uid and gid share the same number.  Returns that number.
        """
        helpers.requireroot("adduser")

        (_, found) = self._ids.lookup_user(self._cfg.account)
        if found:
            raise AccountExistsError(self._cfg.account)

        acctid = find_unused_id(self._ids, self._cfg.maxid)
        if acctid is None:
            raise NoFreeIdError(self._cfg.maxid)

        self._logger.info("Creating account {n} with uid/gid {i}".format(n=self._cfg.account, i=acctid))

        self._dscl("-create", self._group)
        self._dscl("-create", self._group, "Password", "*")
        self._dscl("-create", self._group, "PrimaryGroupID", acctid)
        self._dscl("-create", self._group, "RealName", self._cfg.realname)

        self._dscl("-create", self._user)
        self._dscl("-create", self._user, "NFSHomeDirectory", self._cfg.placeholderhome)
        self._dscl("-create", self._user, "Password", "*")
        self._dscl("-create", self._user, "PrimaryGroupID", acctid)
        self._dscl("-create", self._user, "RealName", self._cfg.realname)
        self._dscl("-create", self._user, "UniqueID", acctid)
        self._dscl("-create", self._user, "UserShell", self._cfg.placeholdershell)

        for attr in LOGIN_ATTRIBUTES:
            self._dscl("-delete", self._user, attr)

        return(acctid)


    def delete_account(self):
        """\
        Delete the group then the user record.
        """
        helpers.requireroot("deluser")

        self._logger.info("Deleting account {n}".format(n=self._cfg.account))
        self._dscl("-delete", self._group)
        self._dscl("-delete", self._user)
