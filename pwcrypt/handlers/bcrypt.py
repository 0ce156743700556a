"""pwcrypt.handlers.bcrypt - bcrypt password hash

The digest is computed by the pure-python EksBlowfish implementation
in :mod:`pwcrypt.utils.blowfish`.

.. note::

    the ``$2a$``, ``$2b$`` and ``$2y$`` idents all name the same
    algorithm. they were introduced to flag hashes produced by C
    implementations with bugs in handling 8-bit chars (``$2x$``, crypt_blowfish)
    or passwords longer than 255 bytes (``$2a$``, OpenBSD). neither bug
    can occur here, so all three verify identically, and a hash keeps the
    ident it was created with.
"""
#=========================================================
#imports
#=========================================================
#core
import re
import logging; log = logging.getLogger(__name__)
from warnings import warn
#site
#libs
from pwcrypt import exc
from pwcrypt.exc import PwcryptHashWarning
from pwcrypt.utils import bcrypt64
from pwcrypt.utils.blowfish import raw_bcrypt
import pwcrypt.utils.handlers as uh
#pkg
#local
__all__ = [
    "bcrypt",
]

#=========================================================
#constants
#=========================================================
IDENT_2A = "$2a$"
IDENT_2B = "$2b$"
IDENT_2Y = "$2y$"

_rounds_regex = re.compile("^[0-9]{2}$")

#=========================================================
#handler
#=========================================================
class bcrypt(uh.HasManyIdents, uh.HasRounds, uh.HasSalt, uh.GenericHandler):
    """This class implements the BCrypt password hash, and follows the password-hash api.

    It supports a fixed-length salt, and a variable number of rounds.

    The :meth:`hash` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, one will be autogenerated (this is recommended).
        If specified, it must be 22 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    :param rounds:
        Optional number of rounds to use.
        Defaults to 8, must be between 4 and 31, inclusive.
        This value is logarithmic, the actual number of iterations used will be :samp:`2**{rounds}`.

    :param ident:
        selects the ident to use when creating the hash:
        ``"2b"`` (the default), ``"2a"`` or ``"2y"``.
        The full prefix (e.g. ``"$2y$"``) is also accepted.

    Since bcrypt uses the password as a C string, passwords containing
    NUL bytes are rejected; only the first 72 bytes are significant.
    """

    #=========================================================
    #class attrs
    #=========================================================
    #--GenericHandler--
    name = "bcrypt"
    setting_kwds = ("salt", "rounds", "ident")
    checksum_size = 31
    checksum_chars = uh.BCRYPT64_CHARS

    #--HasManyIdents--
    default_ident = IDENT_2B
    ident_values = (IDENT_2A, IDENT_2B, IDENT_2Y)
    ident_aliases = {"2a": IDENT_2A, "2b": IDENT_2B, "2y": IDENT_2Y}

    #--HasSalt--
    min_salt_size = max_salt_size = 22
    salt_chars = uh.BCRYPT64_CHARS

    #--HasRounds--
    default_rounds = 8 # pure-python implementation, so lower than C defaults
    min_rounds = 4 # minimum from bcrypt specification
    max_rounds = 31 # 32-bit integer limit (since real_rounds=1<<rounds)
    rounds_cost = "log2"

    #=========================================================
    #formatting
    #=========================================================
    #FORMAT: ident + 2 digit cost + "$" + 22 chars salt + 31 chars checksum

    @classmethod
    def from_string(cls, hash, strict=False):
        ident, tail = cls._parse_ident(hash)
        rounds, sep, data = tail.partition("$")
        if not sep or not _rounds_regex.match(rounds):
            raise exc.MalformedHashError(cls, "bad rounds field")
        if len(data) == 22:
            salt, chk = data, None
        elif len(data) == 53:
            salt, chk = data[:22], data[22:]
        else:
            raise exc.MalformedHashError(cls, "wrong size for salt + checksum")
        return cls._from_parsed(strict,
            ident=ident,
            rounds=int(rounds),
            salt=salt,
            checksum=chk,
        )

    def to_string(self):
        return "%s%02d$%s%s" % (self.ident, self.rounds, self.salt,
                                 self.checksum or "")

    #=========================================================
    #salt helpers
    #=========================================================
    def _norm_salt(self, salt, **kwds):
        salt = super(bcrypt, self)._norm_salt(salt, **kwds)
        # the last salt char only carries 2 bits, the other 4 must be zero.
        # C implementations ignore them, so setting strings get them cleared.
        changed, salt = bcrypt64.check_repair_unused(salt)
        if changed:
            if not self.relaxed:
                raise exc.InvalidConfig("bcrypt salt has non-zero padding bits")
            warn("encountered a bcrypt salt with incorrectly set padding bits; "
                 "the padding bits have been cleared", PwcryptHashWarning)
        return salt

    def _generate_salt(self, salt_size):
        salt = super(bcrypt, self)._generate_salt(salt_size)
        if salt_size == self.max_salt_size:
            # any other size gets rejected by _norm_salt()
            salt = bcrypt64.check_repair_unused(salt)[1]
        return salt

    #=========================================================
    #backend
    #=========================================================
    def _calc_checksum(self, secret):
        if b"\x00" in secret:
            raise exc.NullPasswordError(self)
        ident = self.ident.strip("$")
        result = raw_bcrypt(secret, ident, self.salt.encode("ascii"), self.rounds)
        return result.decode("ascii")

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#eof
#=========================================================
