"""
Build script for chaindom.

Set CHAINDOM_USE_MYPYC=1 to compile the chain and serializer with mypyc:

    CHAINDOM_USE_MYPYC=1 pip install .[mypyc]
"""

import os

from setuptools import setup

# nodes.py and dom.py stay interpreted: the mount gate wraps methods and dom.py subclasses MutableMapping
MYPYC_MODULES = [
    "src/chaindom/chain.py",
    "src/chaindom/serialize.py",
]


def compiled_extensions() -> list:
    if os.environ.get("CHAINDOM_USE_MYPYC", "0") != "1":
        return []
    from mypyc.build import mypycify

    return mypycify(MYPYC_MODULES, opt_level=os.environ.get("MYPYC_OPT_LEVEL", "3"))


if __name__ == "__main__":
    setup(ext_modules=compiled_extensions())
