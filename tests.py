#!/usr/bin/env python3

""":"
python3 "${0}" "${@}"
":"""

import sys
import unittest

from brewsafe._tests import suite as brewsafe_suite


if __name__ == "__main__":
    runner = unittest.TextTestRunner()
    result = runner.run(brewsafe_suite())
    sys.exit(0 if result.wasSuccessful() else 1)
