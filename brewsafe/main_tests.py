#!/usr/bin/env python3
# -*- coding: utf-8 -*-

import contextlib
import io
import logging
import os
import tempfile
import unittest
from unittest import mock

import brewsafe
from brewsafe import execute
from brewsafe.config import config
from brewsafe.identity.identity_tests import fakeidentities


def suite():
    mainTS = unittest.TestSuite()
    mainTS.addTest(unittest.defaultTestLoader.loadTestsFromTestCase(DispatchUT))
    mainTS.addTest(unittest.defaultTestLoader.loadTestsFromTestCase(EndToEndUT))

    return(mainTS)



class DispatchUT(unittest.TestCase):
    def setUp(self):
        self.cfg = config()
        self.ids = fakeidentities()


    def _main(self, *argv):
        (out, err) = (io.StringIO(), io.StringIO())
        with contextlib.redirect_stdout(out), contextlib.redirect_stderr(err):
            rc = brewsafe.main(list(argv), cfg=self.cfg, ids=self.ids)
        return((rc, out.getvalue(), err.getvalue()))


    def test_usage(self):
        for argv in [(), ("frobnicate",), ("unmigrate",), ("unmigrate", "a", "b"), ("do",), ("_do",), ("doctor", "extra")]:
            (rc, out, err) = self._main(*argv)
            self.assertEqual(rc, 1, argv)
            self.assertIn("usage: brewsafe VERB", err)
            self.assertIn("unmigrate USERNAME", err)
            self.assertEqual(out, "")


    def test_exit_status_propagated(self):
        (rc, _, _) = self._main("_do", "sh", "-c", "exit 7")
        self.assertEqual(rc, 7)


    def test_error_exit_status(self):
        with mock.patch("os.geteuid", return_value=501):
            for verb in ["adduser", "deluser", "mkdirs", "mklogdir", "migrate", "install", "switch"]:
                (rc, _, _) = self._main(verb)
                self.assertEqual(rc, 1, verb)

            (rc, _, _) = self._main("unmigrate", "alice")
            self.assertEqual(rc, 1)


    def test_handlers(self):
        calls = []
        with mock.patch.dict(brewsafe.VERBS, {"migrate": (lambda cfg, ids, cmdline: calls.append(vars(cmdline)) or 9, brewsafe._no_args)}):
            (rc, _, _) = self._main("migrate")
        self.assertEqual(rc, 9)
        self.assertEqual(calls, [{}])


    def _record(self, verb, *argv):
        calls = []
        (_, addargs) = brewsafe.VERBS[verb]
        with mock.patch.dict(brewsafe.VERBS, {verb: (lambda cfg, ids, cmdline: calls.append((cfg, cmdline)) or 0, addargs)}):
            (rc, _, err) = self._main(verb, *argv)
        self.assertEqual(rc, 0, err)
        return(calls[0])


    def test_brew_arguments_untouched(self):
        (_, cmdline) = self._record("brew", "--prefix", "-v", "--logdir")
        self.assertEqual(cmdline.args, ["--prefix", "-v", "--logdir"])

        (_, cmdline) = self._record("brew")
        self.assertEqual(cmdline.args, [])


    def test_do_arguments(self):
        (_, cmdline) = self._record("do", "ls", "-l", "--logdir", "/tmp")
        self.assertEqual(cmdline.command, "ls")
        self.assertEqual(cmdline.args, ["-l", "--logdir", "/tmp"])


    def test_unmigrate_username(self):
        (_, cmdline) = self._record("unmigrate", "alice")
        self.assertEqual(cmdline.username, "alice")


    def test_internal_configuration(self):
        root = logging.getLogger()
        self.addCleanup(root.setLevel, root.level)

        (cfg, cmdline) = self._record("_do", "--logdir=/opt/logs", "--homeenv=HOME", "--logenv=LOGS", "--loglevel=ERROR", "sh", "-c", "true")
        self.assertEqual(cfg.logdir, "/opt/logs")
        self.assertEqual(cfg.logenv, "LOGS")
        self.assertEqual(cfg.loglevel, "ERROR")
        self.assertEqual(cfg.account, self.cfg.account)
        self.assertEqual((cmdline.command, cmdline.args), ("sh", ["-c", "true"]))

        # without the options the configuration is used as it is
        (cfg, cmdline) = self._record("_do", "true")
        self.assertIs(cfg, self.cfg)


    def test_sandboxed_configuration_reaches_child(self):
        # the arguments given to sudo are the ones _do is started with
        cfg = config(logdir="/opt/logs", logenv="LOGS")
        calls = []
        exe = execute.executor(cfg, fakeidentities(users={"_brew": 54321}), call=lambda cmd, **kw: calls.append(cmd) or 0)
        with mock.patch("os.getcwd", return_value="/"):
            exe.run_sandboxed(["true"])
        childargv = calls[0][calls[0].index("_do"):]

        self.cfg = config()
        (childcfg, cmdline) = self._record(*childargv)
        self.assertEqual(childcfg.logdir, "/opt/logs")
        self.assertEqual(childcfg.logenv, "LOGS")
        self.assertEqual(cmdline.command, "true")


    def test_bad_loglevel(self):
        with tempfile.NamedTemporaryFile("wt", suffix=".yml") as fp:
            fp.write("loglevel: 5\n")
            fp.flush()
            with mock.patch.dict(os.environ, {"BREWSAFE_CONFIG": fp.name, "BREWSAFE_LOGLEVEL": ""}):
                err = io.StringIO()
                with contextlib.redirect_stderr(err):
                    self.assertEqual(brewsafe.main(["doctor"], ids=self.ids), 1)
        self.assertIn("loglevel", err.getvalue())


    def test_bad_config(self):
        with tempfile.NamedTemporaryFile("wt", suffix=".yml") as fp:
            fp.write("nosuchkey: 1\n")
            fp.flush()
            with mock.patch.dict(os.environ, {"BREWSAFE_CONFIG": fp.name}):
                err = io.StringIO()
                with contextlib.redirect_stderr(err):
                    self.assertEqual(brewsafe.main(["doctor"], ids=self.ids), 1)
        self.assertIn("nosuchkey", err.getvalue())



class EndToEndUT(unittest.TestCase):
    """\
    doctor, adduser, mkdirs, doctor against a fake directory service.
    """
    def setUp(self):
        self.tdir = tempfile.TemporaryDirectory()
        self.addCleanup(self.tdir.cleanup)

        self.cfg = config(
            home=os.path.join(self.tdir.name, "Homebrew"),
            cache=os.path.join(self.tdir.name, "Caches"),
            logdir=os.path.join(self.tdir.name, "log")
        )
        self.ids = fakeidentities(users={"root": 0}, groups={"wheel": 0})
        self.dscl = []

        for (target, kw) in [
            ("os.geteuid", {"return_value": 0}),
            ("os.chown", {}),
            ("subprocess.check_call", {"side_effect": self._dscl})
        ]:
            patcher = mock.patch(target, **kw)
            patcher.start()
            self.addCleanup(patcher.stop)


    def _dscl(self, cmd):
        self.dscl.append(cmd)
        # the fake directory service gives the account the uid running the
        # tests so that the ownership checks agree with the real filesystem
        if cmd[2:5] == ["-create", "/Users/_brew", "UniqueID"]:
            self.ids.users["_brew"] = os.getuid()
        return(0)


    def _main(self, *argv):
        out = io.StringIO()
        with contextlib.redirect_stdout(out):
            rc = brewsafe.main(list(argv), cfg=self.cfg, ids=self.ids)
        return((rc, out.getvalue()))


    def test_doctor_after_setup(self):
        (rc, out) = self._main("doctor")
        self.assertEqual(rc, 1)
        self.assertEqual(len(out.splitlines()), 1)
        self.assertIn("owner not present", out)

        self.assertEqual(self._main("adduser"), (0, ""))
        self.assertEqual(len(self.dscl), 13)
        self.assertEqual(self._main("mkdirs"), (0, ""))

        self.assertEqual(self._main("doctor"), (0, ""))


    def test_adduser_twice(self):
        self.assertEqual(self._main("adduser")[0], 0)
        self.assertEqual(self._main("adduser")[0], 1)
        self.assertEqual(len(self.dscl), 13)


    def test_mklogdir_twice(self):
        self._main("adduser")
        self.assertEqual(self._main("mklogdir")[0], 0)
        self.assertEqual(self._main("mklogdir")[0], 1)


    def test_dscl_failure(self):
        with mock.patch("subprocess.check_call", side_effect=OSError(2, "No such file or directory")):
            self.assertEqual(self._main("adduser")[0], 1)



if __name__ == "__main__":
    runner = unittest.TextTestRunner()
    runner.run(suite())
