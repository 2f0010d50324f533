#! /usr/bin/env python3

from setuptools import setup, find_packages

import mwrest

setup(
    name = "mediawiki-rest",
    version = mwrest.__version__,
    url = mwrest.__url__,
    packages = find_packages(include=["mwrest", "mwrest.*"]),
    python_requires = ">=3.11",
    install_requires = [
        "httpx",
        "truststore",
        "mwparserfromhell",
        "colorlog",
    ],
    extras_require = {
        "test": [
            "pytest",
            "pytest-httpx",
            "pytest-mock",
        ],
    },
    scripts = [
        "fetch-page.py",
        "edit-page.py",
        "transform.py",
    ],
)
