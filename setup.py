"""
Build script for `ethereum-transactions`. Metadata lives in `setup.cfg`.
"""

import pathlib

import setuptools

README = pathlib.Path(__file__).parent.resolve() / "README.md"

setuptools.setup(
    long_description=README.read_text(encoding="utf-8"),
    long_description_content_type="text/markdown",
)
