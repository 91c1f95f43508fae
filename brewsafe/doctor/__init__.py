# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.doctor
    :platform: Unix
    :synopsis: Installation checks

"""

__all__ = [
    "doctor"
]

import logging
import os
import stat
import sys
import tabulate


class doctor(object):
    """\
    Run every check and report all of the failures together.
    """
    def __init__(self, cfg, ids):
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__)
        self._cfg = cfg
        self._ids = ids


    def _owned(self, path, uid, required=True):
        try:
            st = os.stat(path)
        except FileNotFoundError:
            if required:
                return("{p} does not exist".format(p=path))
            return(None)

        if st.st_uid != uid:
            return("{p} is owned by {o}, not {a}".format(p=path, o=self._ids.user_name(st.st_uid), a=self._cfg.account))
        return(None)


    def checks(self):
        """\
        Return a list of problems, empty if there are none.
        """
        (uid, found) = self._ids.lookup_user(self._cfg.account)
        if not found:
            # nothing else can be checked without the account
            return(["owner not present: user {a} does not exist".format(a=self._cfg.account)])

        problems = [
            self._owned(self._cfg.home, uid),
            self._owned(self._cfg.logdir, uid),
            self._owned(self._cfg.cache, uid, required=False)
        ]
        return([p for p in problems if p is not None])


    def run(self, out=None):
        if out is None:
            out = sys.stdout

        problems = self.checks()
        for problem in problems:
            print(problem, file=out)

        self._logger.debug("{n} problems found".format(n=len(problems)))
        return(1 if problems else 0)


    def info(self, out=None):
        """\
        Print the owner, group and mode of each managed directory.
        """
        if out is None:
            out = sys.stdout

        table = []
        for path in [self._cfg.home, self._cfg.cache, self._cfg.logdir]:
            try:
                st = os.lstat(path)
            except FileNotFoundError:
                table.append([path, "missing", "", ""])
                continue
            table.append([
                path,
                self._ids.user_name(st.st_uid),
                self._ids.group_name(st.st_gid),
                stat.filemode(st.st_mode)
            ])

        print(tabulate.tabulate(table, ["path", "owner", "group", "mode"], tablefmt="plain", stralign="left"), file=out)
        return(0)
