# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.identity
    :platform: Unix
    :synopsis: User and group lookups

A record which does not exist is an ordinary answer here, not an error.
Only a failure to query the identity database propagates.
"""

__all__ = [
    "identities",
    "find_unused_id"
]

import grp
import logging
import os
import pwd


class identities(object):
    def __init__(self):
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__)


    def lookup_user(self, name):
        """\
        Return (uid, found) for the user name.
        """
        try:
            return((pwd.getpwnam(name).pw_uid, True))
        except KeyError:
            self._logger.debug("No user named {n}".format(n=name))
            return((None, False))


    def lookup_group(self, name):
        """\
        Return (gid, found) for the group name.
        """
        try:
            return((grp.getgrnam(name).gr_gid, True))
        except KeyError:
            self._logger.debug("No group named {n}".format(n=name))
            return((None, False))


    def lookup_user_by_id(self, uid):
        try:
            pwd.getpwuid(uid)
        except KeyError:
            return(False)
        return(True)


    def lookup_group_by_id(self, gid):
        try:
            grp.getgrgid(gid)
        except KeyError:
            return(False)
        return(True)


    def user_groups(self, name):
        """\
        The primary and supplementary gids of the user, empty if the user
        does not exist.
        """
        try:
            pw = pwd.getpwnam(name)
        except KeyError:
            return([])
        return(os.getgrouplist(pw.pw_name, pw.pw_gid))


    def user_name(self, uid):
        try:
            return(pwd.getpwuid(uid).pw_name)
        except KeyError:
            return(str(uid))


    def group_name(self, gid):
        try:
            return(grp.getgrgid(gid).gr_name)
        except KeyError:
            return(str(gid))



def find_unused_id(ids, maximum):
    """\
    Find the highest id at or below maximum which is neither a uid nor a
    gid so that one number serves for both.  None if every candidate is
    claimed.

    :param ids: The identity database to search.
    :type ids: brewsafe.identity.identities.
    :param maximum: The first id to try, the scan runs down to 1.
    :type maximum: int.
    """
    logger = logging.getLogger(__name__)

    for candidate in range(maximum, 0, -1):
        if ids.lookup_user_by_id(candidate) or ids.lookup_group_by_id(candidate):
            continue
        logger.debug("Found unused id {i}".format(i=candidate))
        return(candidate)

    logger.warning("No unused id between 1 and {m}".format(m=maximum))
    return(None)
