# -*- coding: utf-8 -*-
"""\

.. module:: brewsafe.exceptions
    :platform: Unix
    :synopsis: Exceptions

"""

__all__ = [
    "BrewSafeBaseError",
    "ConfigError",
    "UsageError",
    "PrivilegeRequiredError",
    "UnknownIdentityError",
    "AccountExistsError",
    "NoFreeIdError",
    "AlreadyMigratedError",
    "ExternalCommandError"
]


class BrewSafeBaseError(Exception):
    """\
    The brewsafe Base Error.
    """


class ConfigError(BrewSafeBaseError):
    """\
    Raised when the configuration file cannot be used.
    """


class UsageError(BrewSafeBaseError):
    """\
    Raised when the command line does not name a verb and its arguments.
    """


class PrivilegeRequiredError(BrewSafeBaseError):
    """\
    Raised before any mutation is attempted when an operation needs root.
    """
    def __init__(self, operation):
        BrewSafeBaseError.__init__(self, "{op} requires root privileges".format(op=operation))
        self.operation = operation


class UnknownIdentityError(BrewSafeBaseError):
    """\
    Raised when a user or group name that must exist does not resolve.
    """
    def __init__(self, kind, name):
        BrewSafeBaseError.__init__(self, "no such {k}: {n}".format(k=kind, n=name))
        self.kind = kind
        self.name = name


class AccountExistsError(BrewSafeBaseError):
    """\
    Raised if the service account user record already resolves.
    """
    def __init__(self, name):
        BrewSafeBaseError.__init__(self, "account {n} already exists".format(n=name))
        self.name = name


class NoFreeIdError(BrewSafeBaseError):
    """\
    Raised when every id in the scanned range is claimed by a user or a group.
    """
    def __init__(self, maximum):
        BrewSafeBaseError.__init__(self, "no unused uid/gid between 1 and {m}".format(m=maximum))
        self.maximum = maximum


class AlreadyMigratedError(BrewSafeBaseError):
    """\
    Raised if a managed tree is already owned by the requested owner.  No
    filesystem change has been made when this is raised.
    """
    def __init__(self, owner, paths):
        BrewSafeBaseError.__init__(self, "already owned by {o}: {p}".format(o=owner, p=", ".join(paths)))
        self.owner = owner
        self.paths = paths


class ExternalCommandError(BrewSafeBaseError):
    """\
    Raised when a wrapped external command exits non-zero.
    """
    def __init__(self, cmd, returncode):
        BrewSafeBaseError.__init__(self, "command failed with exit code {rc}: {cmd}".format(rc=returncode, cmd=" ".join(cmd)))
        self.cmd = cmd
        self.returncode = returncode
