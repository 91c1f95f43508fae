# -*- coding: utf-8 -*-
"""\
.. module:: brewsafe.filesystem.migrate
    :platform: Unix
    :synopsis: Move the managed trees between owners

The owner of a tree is learnt from an anchor path inside it before
anything is changed.  The walk then only reassigns entries which still
carry that owner, so entries already moved (or belonging to somebody
else entirely) are left as they are and an interrupted walk can be run
again over the same tree.
"""

__all__ = [
    "treeowner",
    "migrator"
]

import logging
import os
import stat

from .. import helpers
from ..exceptions import *


# Modes for the root of each tree once the walk is complete
ACTIVE_MODE = stat.S_IRWXU | stat.S_IRGRP | stat.S_IXGRP | stat.S_IROTH | stat.S_IXOTH
REVERTED_MODE = stat.S_IRWXU | stat.S_IRWXG | stat.S_IROTH | stat.S_IXOTH


def _raise(exc):
    raise exc



class treeowner(object):
    """\
    One managed tree.
    """
    def __init__(self, root, anchor, group):
        """\
        The constructor.

        :param root: The top of the tree.
        :type root: str.
        :param anchor: A path relative to root which shows the current owner.
        :type anchor: str.
        :param group: The group name the tree is given to.
        :type group: str.
        """
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__+":"+root)
        self._root = root
        self._anchor = anchor
        self._group = group


    def __str__(self):
        return("{m}.{n}: {p}".format(m=self.__class__.__module__, n=self.__class__.__name__, p=self._root))


    @property
    def root(self):
        return(self._root)


    @property
    def group(self):
        return(self._group)


    def _owner(self, path):
        st = os.lstat(path)
        return((st.st_uid, st.st_gid))


    def _chown(self, path, uid, gid):
        os.lchown(path, uid, gid)


    def _chmod(self, path, mode):
        os.chmod(path, mode)


    def exists(self):
        return(os.path.lexists(self._root))


    def anchorowner(self):
        """\
        The (uid, gid) of the anchor path.
        """
        owner = self._owner(os.path.join(self._root, self._anchor))
        self._logger.debug("Anchor {a} is owned by {o}".format(a=self._anchor, o=owner))
        return(owner)


    def _walk(self):
        yield self._root
        for (dirpath, dirnames, filenames) in os.walk(self._root, onerror=_raise):
            for name in dirnames + filenames:
                yield os.path.join(dirpath, name)


    def reown(self, fromowner, uid, gid):
        """\
        Give (uid, gid) to the root of the tree and to every entry owned
        by fromowner.  Symbolic links are changed themselves, their
        targets are not followed.  Returns the number of entries changed.
        """
        changed = 0
        for path in self._walk():
            owner = self._owner(path)
            if owner == (uid, gid):
                continue
            if path == self._root or owner == fromowner:
                self._chown(path, uid, gid)
                changed += 1

        self._logger.info("Changed ownership of {c} entries to {u}:{g}".format(c=changed, u=uid, g=gid))
        return(changed)


    def setroot(self, mode, uid=-1):
        """\
        Set the mode of the tree root, and its owner if uid is given.
        """
        if uid != -1:
            self._chown(self._root, uid, -1)
        self._chmod(self._root, mode)



class migrator(object):
    """\
    Move the home and cache trees between the service account and a
    normal user.
    """
    def __init__(self, cfg, ids, trees=None):
        self._logger = logging.getLogger(self.__class__.__module__+"."+self.__class__.__name__)
        self._cfg = cfg
        self._ids = ids
        if trees is None:
            trees = [
                treeowner(cfg.home, cfg.homeanchor, cfg.homegroup),
                treeowner(cfg.cache, cfg.cacheanchor, cfg.cachegroup)
            ]
        self._trees = trees


    def _uid(self, name):
        (uid, found) = self._ids.lookup_user(name)
        if not found:
            raise UnknownIdentityError("user", name)
        return(uid)


    def _gid(self, name):
        (gid, found) = self._ids.lookup_group(name)
        if not found:
            raise UnknownIdentityError("group", name)
        return(gid)


    def _transfer(self, name, uid):
        trees = []
        for tree in self._trees:
            if tree.exists():
                trees.append(tree)
            else:
                self._logger.warning("{p} does not exist, skipping".format(p=tree.root))

        # Every anchor is read and checked before any tree is touched
        anchors = [tree.anchorowner() for tree in trees]
        gids = [self._gid(tree.group) for tree in trees]

        migrated = [tree.root for (tree, owner) in zip(trees, anchors) if owner[0] == uid]
        if migrated:
            raise AlreadyMigratedError(name, migrated)

        for (tree, owner, gid) in zip(trees, anchors, gids):
            self._logger.info("Moving {p} from {f} to {n}".format(p=tree.root, f=owner, n=name))
            tree.reown(owner, uid, gid)

        return(trees)


    def migrate(self):
        """\
        Give the trees to the service account.
        """
        helpers.requireroot("migrate")
        uid = self._uid(self._cfg.account)

        for tree in self._transfer(self._cfg.account, uid):
            tree.setroot(ACTIVE_MODE)


    def unmigrate(self, username):
        """\
        Give the trees back to username, the roots go to root and become
        group writable.
        """
        helpers.requireroot("unmigrate")
        uid = self._uid(username)

        for tree in self._transfer(username, uid):
            tree.setroot(REVERTED_MODE, uid=0)
