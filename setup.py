"""pwcrypt setup script"""
#=========================================================
#init script env - ensure cwd = root of source dir
#=========================================================
import os
root_dir = os.path.abspath(os.path.join(__file__,".."))
os.chdir(root_dir)

#=========================================================
#imports
#=========================================================
import re

from setuptools import setup

#=========================================================
#version string
#=========================================================
with open(os.path.join(root_dir, "pwcrypt", "__init__.py")) as vh:
    VERSION = re.search(r'^__version__\s*=\s*"(.*?)"\s*$', vh.read(), re.M).group(1)

#=========================================================
#static text
#=========================================================
SUMMARY = "pure-python implementations of the unix crypt(3) password hashes"

DESCRIPTION = """\
pwcrypt provides pure-python implementations of the password hashes
understood by the various unix ``crypt(3)`` libraries: traditional DES-Crypt,
BSDi-Crypt, MD5-Crypt (and Apache's APR1 variant), NetBSD's SHA1-Crypt,
SHA256-Crypt, SHA512-Crypt and BCrypt.

It also offers a ``crypt()`` work-alike which detects the algorithm from
the configuration string, for verifying hashes found in ``/etc/shadow``
or ``.htpasswd`` files on any platform.
"""

KEYWORDS = "password secret hash security crypt des-crypt bsdi-crypt md5-crypt apr1 sha1-crypt sha256-crypt sha512-crypt bcrypt"

#=========================================================
#config setup
#=========================================================
config = dict(
    #package info
    packages = [
        "pwcrypt",
            "pwcrypt.handlers",
            "pwcrypt.tests",
            "pwcrypt.utils",
        ],
    zip_safe=True,
    python_requires=">=3.7",

    #metadata
    name = "pwcrypt",
    version = VERSION,
    license = "BSD",

    description = SUMMARY,
    long_description = DESCRIPTION,
    keywords = KEYWORDS,
    classifiers = [
        "Development Status :: 5 - Production/Stable",
        "Intended Audience :: Developers",
        "License :: OSI Approved :: BSD License",
        "Natural Language :: English",
        "Operating System :: OS Independent",
        "Programming Language :: Python :: 3",
        "Topic :: Security :: Cryptography",
        "Topic :: Software Development :: Libraries",
    ],

    extras_require = {
        "test": ["pytest"],
    },
)
#=========================================================
#build
#=========================================================
setup(**config)

#=========================================================
#EOF
#=========================================================
