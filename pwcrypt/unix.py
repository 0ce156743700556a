"""pwcrypt.unix - crypt(3) work-alike, with algorithm detection

This module routes a hash string to the handler which understands it,
using the ident prefix at the start of the string. Strings without a
``$``-prefix are taken to be traditional DES crypt, if they have the
right length & alphabet for it::

    >>> from pwcrypt import unix
    >>> unix.crypt("password", "$1$5pZSV9va")
    '$1$5pZSV9va$azfrPr6af3Fc7dLblQXVa0'
    >>> unix.verify("test", "aZGJuE6EXrjEE")
    True
"""
#=========================================================
#imports
#=========================================================
#core
import re
import logging; log = logging.getLogger(__name__)
#site
#libs
from pwcrypt.exc import UnknownAlgorithm
from pwcrypt.registry import get_crypt_handler
from pwcrypt.utils.handlers import to_unicode_for_parse
#pkg
#local
__all__ = [
    "identify",
    "crypt",
    "verify",
    "hash",
]

#=========================================================
#dispatch table
#=========================================================

#: (prefix, handler name) pairs, checked in order.
#: longer prefixes must come before any prefix they start with.
_prefix_table = sorted([
    ("$apr1$", "apr1_crypt"),
    ("$sha1$", "sha1_crypt"),
    ("$2a$", "bcrypt"),
    ("$2b$", "bcrypt"),
    ("$2y$", "bcrypt"),
    ("$1$", "md5_crypt"),
    ("$5$", "sha256_crypt"),
    ("$6$", "sha512_crypt"),
    ("_", "bsdi_crypt"),
], key=lambda item: -len(item[0]))

#: untagged hash (13 chars) or setting string (2 chars) of traditional des-crypt
_des_regex = re.compile("^[./0-9A-Za-z]{2}([./0-9A-Za-z]{11})?$")

#: name of handler used by hash() when none is given
default_scheme = "sha512_crypt"

#=========================================================
#frontend
#=========================================================
def identify(hash):
    """return the handler which should be used for the specified hash.

    :arg hash: hash or configuration string (unicode or bytes)

    :raises TypeError: if hash is not a string.
    :raises MalformedHash: if hash is empty or contains non-ascii bytes.
    :raises UnknownAlgorithm: if no known algorithm matches the hash.

    :returns: handler class (e.g. :class:`~pwcrypt.handlers.bcrypt.bcrypt`)
    """
    hash = to_unicode_for_parse(hash)
    for prefix, name in _prefix_table:
        if hash.startswith(prefix):
            log.debug("identified hash by prefix %r: %s", prefix, name)
            return get_crypt_handler(name)
    if _des_regex.match(hash):
        log.debug("identified untagged hash as unix_crypt")
        return get_crypt_handler("unix_crypt")
    raise UnknownAlgorithm("unrecognized hash format")

def crypt(secret, config):
    """work-alike of the C library's :func:`!crypt` function.

    :arg secret: password (unicode, encoded as utf-8; or bytes)
    :arg config:
        configuration string, or existing hash; the algorithm,
        salt and rounds are all taken from it.

    :raises UnknownAlgorithm: if the config's algorithm isn't recognized.
    :raises MalformedHash: if the config can't be parsed by its handler.

    :returns: the resulting hash, as a native string
    """
    if config is None:
        raise TypeError("no config string specified")
    return identify(config).genhash(secret, config)

def verify(secret, hash):
    """verify password against a hash, detecting the hash's algorithm.

    :returns:
        ``True`` if the password matches, ``False`` if it doesn't.

    :raises UnknownAlgorithm: if the hash's algorithm isn't recognized.
    :raises MalformedHash: if the hash can't be parsed by its handler.
    """
    if hash is None:
        raise TypeError("no hash specified")
    return identify(hash).verify(secret, hash)

def hash(secret, scheme=None, **settings):
    """hash password using the specified scheme (``sha512_crypt`` by default),
    passing any keywords along to the handler's :meth:`hash` method.

    :raises KeyError: if the scheme isn't known.
    """
    if scheme is None:
        scheme = default_scheme
    handler = get_crypt_handler(scheme)
    return handler.hash(secret, **settings)

#=========================================================
#eof
#=========================================================
