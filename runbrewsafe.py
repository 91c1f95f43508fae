#!/usr/bin/env python3

"""

.. module:: brewsafe
   :platform: Unix
   :synopsis: The main executable

"""

import sys

import brewsafe

if __name__ == "__main__":
    sys.exit(brewsafe.main())
