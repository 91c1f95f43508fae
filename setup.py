# -*- coding: utf-8 -*-
import re
import setuptools


def read__version__():
    """\
    If we don't have all modules for the program available during the build
    we can't complete all the imports.  Instead search for the version
    string by parsing the text.
    """
    with open("brewsafe/__init__.py", "rt") as initfp:
        return(re.search(r'^__version__ = "([^"]+)"', initfp.read(), re.MULTILINE).group(1))



setuptools.setup(
    zip_safe=False,
    name="brewsafe",
    version=read__version__(),
    description="Run Homebrew as an unprivileged service account",
    license="Proprietary",
#   Any external package dependencies should be listed
    install_requires=[
        "Mako",
        "PyYAML",
        "tabulate"
    ],
    extras_require={
        "test": ["pytest"]
    },
    packages=setuptools.find_packages(include=["brewsafe", "brewsafe.*"]),
    include_package_data=True,
    entry_points={
        "console_scripts": [
            "brewsafe = brewsafe:main"
        ]
    },
    classifiers=[
        "Natural Language :: English",
        "Intended Audience :: System Administrators",
        "Environment :: Console",
        "Operating System :: MacOS :: MacOS X",
        "Programming Language :: Python :: 3"
    ],
)
