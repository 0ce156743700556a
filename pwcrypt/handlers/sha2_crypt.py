"""pwcrypt.handlers.sha2_crypt - SHA256-Crypt / SHA512-Crypt

Both hashes follow Ulrich Drepper's "Unix crypt using SHA-256 and SHA-512"
specification, as implemented by glibc. They differ only in the digest
used, the ident, and the byte order used when encoding the checksum.
"""
#=========================================================
#imports
#=========================================================
#core
from hashlib import sha256, sha512
import re
import logging; log = logging.getLogger(__name__)
#site
#libs
from pwcrypt import exc
from pwcrypt.utils import h64, repeat_string
import pwcrypt.utils.handlers as uh
#pkg
#local
__all__ = [
    "sha256_crypt",
    "sha512_crypt",
]

#=========================================================
#pure-python implementation
#=========================================================

#: rounds value assumed when a hash has no "rounds=" field
IMPLICIT_ROUNDS = 5000

def raw_sha2_crypt(secret, salt, rounds, digest):
    """perform raw sha256-crypt / sha512-crypt calculation

    :arg secret: password, as bytes
    :arg salt: salt string, as unicode (at most 16 chars)
    :arg rounds: number of rounds (already validated)
    :arg digest: hashlib constructor (``sha256`` or ``sha512``)

    :returns: raw digest bytes
    """
    salt = salt.encode("ascii")
    assert len(salt) <= 16
    size = len(secret)

    # digest B: password + salt + password
    alt = digest(secret + salt + secret).digest()

    # digest A: password + salt + len(password) bytes of B,
    # then for each bit of len(password), B if set, else the password.
    ctx = digest(secret + salt)
    ctx.update(repeat_string(alt, size))
    idx = size
    while idx:
        ctx.update(alt if idx & 1 else secret)
        idx >>= 1
    result = ctx.digest()

    # byte sequence P: digest of password repeated len(password) times,
    # stretched/truncated to len(password)
    p_bytes = repeat_string(digest(secret * size).digest(), size)

    # byte sequence S: digest of salt repeated 16+A[0] times,
    # stretched/truncated to len(salt)
    s_bytes = repeat_string(digest(salt * (16 + result[0])).digest(),
                            len(salt))

    # digest C, recomputed once per round. for round i, the input is:
    #   P if i is odd, else previous result
    #   S, unless i is multiple of 3
    #   P, unless i is multiple of 7
    #   previous result if i is odd, else P
    for i in range(rounds):
        ctx = digest(p_bytes if i & 1 else result)
        if i % 3:
            ctx.update(s_bytes)
        if i % 7:
            ctx.update(p_bytes)
        ctx.update(result if i & 1 else p_bytes)
        result = ctx.digest()

    return result

#=========================================================
#handlers
#=========================================================
class _SHA2_Common(uh.HasRounds, uh.HasSalt, uh.GenericHandler):
    "class containing common code shared by sha256_crypt & sha512_crypt"
    #=========================================================
    #class attrs
    #=========================================================
    #--GenericHandler--
    # name, ident, checksum_size in subclass
    setting_kwds = ("salt", "salt_size", "rounds")
    checksum_chars = uh.H64_CHARS

    #--HasSalt--
    min_salt_size = 0
    max_salt_size = 16
    salt_chars = uh.H64_CHARS

    #--HasRounds--
    default_rounds = IMPLICIT_ROUNDS
    min_rounds = 1000
    max_rounds = 999999999
    rounds_cost = "linear"

    #--this class--
    _digest = None # hashlib constructor
    _chk_offsets = None # checksum byte transposition
    _hash_regex = None # set by subclass

    #=========================================================
    #init
    #=========================================================
    def __init__(self, implicit_rounds=None, **kwds):
        # when set, the rounds field is omitted from the rendered hash
        # if rounds == 5000. glibc treats "$5$salt" and
        # "$5$rounds=5000$salt" as distinct strings, so from_string()
        # clears it for the latter, and both are preserved.
        if implicit_rounds is None:
            implicit_rounds = True
        self.implicit_rounds = implicit_rounds
        super(_SHA2_Common, self).__init__(**kwds)

    #=========================================================
    #parsing
    #=========================================================
    @classmethod
    def from_string(cls, hash, strict=False):
        hash = uh.to_unicode_for_parse(hash, cls)
        if not hash.startswith(cls.ident):
            raise exc.InvalidHashError(cls)
        m = cls._hash_regex.match(hash)
        if not m:
            raise exc.MalformedHashError(cls)
        rounds, salt, chk = m.group("rounds", "salt", "chk")
        if rounds is None:
            implicit_rounds = True
            rounds = IMPLICIT_ROUNDS
        else:
            implicit_rounds = False
            rounds = uh.parse_int(rounds, cls)
        # NOTE: unless strict, config strings are parsed relaxed, since glibc
        # clamps the rounds value & truncates the salt of setting strings.
        return cls._from_parsed(strict,
            implicit_rounds=implicit_rounds,
            rounds=rounds,
            salt=salt,
            checksum=chk or None,
        )

    def to_string(self):
        chk = self.checksum or ""
        rounds = self.rounds
        if rounds == IMPLICIT_ROUNDS and self.implicit_rounds:
            hash = "%s%s$%s" % (self.ident, self.salt, chk)
        else:
            hash = "%srounds=%d$%s$%s" % (self.ident, rounds, self.salt, chk)
        if not chk:
            hash = hash[:-1]
        return hash

    #=========================================================
    #backend
    #=========================================================
    def _calc_checksum(self, secret):
        result = raw_sha2_crypt(secret, self.salt, self.rounds, self._digest)
        return h64.encode_transposed_bytes(result, self._chk_offsets).decode("ascii")

    #=========================================================
    #eoc
    #=========================================================

class sha256_crypt(_SHA2_Common):
    """This class implements the SHA256-Crypt password hash, and follows the password-hash api.

    It supports a variable-length salt, and a variable number of rounds.

    The :meth:`hash` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, one will be autogenerated (this is recommended).
        If specified, it must be 0-16 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    :param salt_size:
        Optional number of characters to use when autogenerating new salts.
        Defaults to 16, but can be any value between 0 and 16.

    :param rounds:
        Optional number of rounds to use.
        Defaults to 5000, must be between 1000 and 999999999, inclusive.
        The ``rounds=`` field is only written to the hash if this value
        differs from the default.
    """
    name = "sha256_crypt"
    ident = "$5$"
    checksum_size = 43

    _digest = sha256

    _hash_regex = re.compile("""
        ^
        \\$5\\$
        (rounds=(?P<rounds>[0-9]+)\\$)?
        (?P<salt>[^$]*)
        (\\$(?P<chk>[^$]*))?
        $
        """, re.X)

    _chk_offsets = (
        20, 10, 0,
        11, 1,  21,
        2,  22, 12,
        23, 13, 3,
        14, 4,  24,
        5,  25, 15,
        26, 16, 6,
        17, 7,  27,
        8,  28, 18,
        29, 19, 9,
        30, 31,
    )

class sha512_crypt(_SHA2_Common):
    """This class implements the SHA512-Crypt password hash, and follows the password-hash api.

    It accepts the same keywords as :class:`sha256_crypt`,
    with the same limits and defaults.
    """
    name = "sha512_crypt"
    ident = "$6$"
    checksum_size = 86

    _digest = sha512

    _hash_regex = re.compile("""
        ^
        \\$6\\$
        (rounds=(?P<rounds>[0-9]+)\\$)?
        (?P<salt>[^$]*)
        (\\$(?P<chk>[^$]*))?
        $
        """, re.X)

    _chk_offsets = (
        42, 21, 0,
        1,  43, 22,
        23, 2,  44,
        45, 24, 3,
        4,  46, 25,
        26, 5,  47,
        48, 27, 6,
        7,  49, 28,
        29, 8,  50,
        51, 30, 9,
        10, 52, 31,
        32, 11, 53,
        54, 33, 12,
        13, 55, 34,
        35, 14, 56,
        57, 36, 15,
        16, 58, 37,
        38, 17, 59,
        60, 39, 18,
        19, 61, 40,
        41, 20, 62,
        63,
    )

#=========================================================
#eof
#=========================================================
