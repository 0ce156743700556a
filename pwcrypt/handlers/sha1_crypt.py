"""pwcrypt.handlers.sha1_crypt - NetBSD's HMAC-SHA1 based crypt"""
#=========================================================
#imports
#=========================================================
#core
from hashlib import sha1
import hmac
import logging; log = logging.getLogger(__name__)
#site
#libs
from pwcrypt.utils import h64, rng
import pwcrypt.utils.handlers as uh
#pkg
#local
__all__ = [
    "sha1_crypt",
]

#=========================================================
#sha1-crypt
#=========================================================
class sha1_crypt(uh.HasRounds, uh.HasSalt, uh.GenericHandler):
    """This class implements the SHA1-Crypt password hash used by NetBSD,
    and follows the password-hash api.

    It supports a variable-length salt, and a variable number of rounds.

    The :meth:`hash` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, an 8 character one will be autogenerated (this is recommended).
        If specified, it must be 0-64 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    :param salt_size:
        Optional number of characters to use when autogenerating new salts.
        Defaults to 8, but can be any value between 0 and 64.

    :param rounds:
        Optional number of rounds to use.
        If not specified, NetBSD's policy is followed: a value a little
        below 24680 is picked at random, so hashes of the same password
        don't share a rounds count.
        If specified, must be between 1 and 4294967295, inclusive.
    """

    #=========================================================
    #class attrs
    #=========================================================
    #--GenericHandler--
    name = "sha1_crypt"
    setting_kwds = ("salt", "salt_size", "rounds")
    ident = "$sha1$"
    checksum_size = 28
    checksum_chars = uh.H64_CHARS

    #--HasSalt--
    default_salt_size = 8
    min_salt_size = 0
    max_salt_size = 64
    salt_chars = uh.H64_CHARS

    #--HasRounds--
    default_rounds = 24680
    min_rounds = 1
    max_rounds = 4294967295 # 32-bit integer limit
    rounds_cost = "linear"

    #=========================================================
    #formatting
    #=========================================================
    #FORMAT: $sha1$<rounds>$<salt>$<28 chars checksum>

    @classmethod
    def from_string(cls, hash, strict=False):
        rounds, salt, chk = uh.parse_mc3(hash, cls.ident, cls)
        return cls._from_parsed(strict,
            rounds=uh.parse_int(rounds, cls),
            salt=salt,
            checksum=chk,
        )

    def to_string(self):
        return uh.render_mc3(self.ident, self.rounds, self.salt, self.checksum)

    @classmethod
    def _generate_rounds(cls):
        # netbsd varies the count downward by up to 25%,
        # so the default never exceeds default_rounds.
        ceiling = cls.default_rounds
        return ceiling - rng.randrange(ceiling // 4)

    #=========================================================
    #backend
    #=========================================================
    _chk_offsets = [
        2,1,0,
        5,4,3,
        8,7,6,
        11,10,9,
        14,13,12,
        17,16,15,
        0,19,18,
    ]

    def _calc_checksum(self, secret):
        rounds = self.rounds
        # NOTE: the magic string is mixed in as "salt$sha1$rounds"
        result = ("%s$sha1$%s" % (self.salt, rounds)).encode("ascii")
        for _ in range(rounds):
            result = hmac.new(secret, result, sha1).digest()
        return h64.encode_transposed_bytes(result, self._chk_offsets).decode("ascii")

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#eof
#=========================================================
