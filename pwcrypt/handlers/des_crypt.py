"""pwcrypt.handlers.des_crypt - traditional unix (DES) crypt and the BSDi variant

.. note::

    both hashes restrict salt characters to the hash64 charset,
    and require the exact salt size. C implementations vary in how they
    treat other characters / sizes:

    * glibc maps out-of-charset salt chars through an arithmetic formula,
      and echoes them back in the output;
    * netbsd & openbsd treat them as zero, and may read past the end
      of a short salt string.

    since none of these behaviors produce hashes which verify portably,
    such salts are rejected here.

    both hashes read the password as a C string, so a password
    containing NUL is rejected rather than silently truncated.
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
from pwcrypt.utils import h64, h64big
from pwcrypt.utils.des import mdes_encrypt_int_block
import pwcrypt.utils.handlers as uh
#pkg
#local
__all__ = [
    "unix_crypt",
    "bsdi_crypt",
]

#=========================================================
#pure-python implementation
#=========================================================
def _crypt_secret_to_key(secret):
    """convert lower 7 bits of first 8 bytes of secret -> 56-bit des key,
    padded out to 64 bits (parity bit position left empty)"""
    return sum((c & 0x7f) << (57-8*i) for i, c in enumerate(secret[:8]))

def raw_unix_crypt(secret, salt):
    """calculate unix_crypt checksum.

    :arg secret: password as bytes (no NUL chars)
    :arg salt: 2 char salt string
    :returns: 11 char checksum string
    """
    assert len(salt) == 2
    salt_value = h64.decode_int12(salt.encode("ascii"))

    # key comes from first 8 bytes, anything after is ignored
    key_value = _crypt_secret_to_key(secret)

    # 25 salted encryptions of an all-zero block
    result = mdes_encrypt_int_block(key_value, 0, salt_value, 25)
    return h64big.encode_int64(result).decode("ascii")

def raw_bsdi_crypt(secret, rounds, salt):
    """calculate bsdi_crypt checksum.

    :arg secret: password as bytes (no NUL chars)
    :arg rounds: number of rounds
    :arg salt: 4 char salt string
    :returns: 11 char checksum string
    """
    salt_value = h64.decode_int24(salt.encode("ascii"))

    # fold the rest of the password into the key, 8 bytes at a time,
    # by encrypting the current key with itself.
    key_value = _crypt_secret_to_key(secret)
    idx = 8
    end = len(secret)
    while idx < end:
        next_idx = idx + 8
        key_value = mdes_encrypt_int_block(key_value, key_value) ^ \
                    _crypt_secret_to_key(secret[idx:next_idx])
        idx = next_idx

    result = mdes_encrypt_int_block(key_value, 0, salt_value, rounds)
    return h64big.encode_int64(result).decode("ascii")

#=========================================================
#handlers
#=========================================================
class unix_crypt(uh.HasSalt, uh.GenericHandler):
    """This class implements the traditional DES-based unix crypt(3),
    and follows the password-hash api.

    It supports a fixed-length salt.

    The :meth:`hash` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, one will be autogenerated (this is recommended).
        If specified, it must be 2 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    Only the first 8 bytes of the password are significant.
    """
    #=========================================================
    #class attrs
    #=========================================================
    #--GenericHandler--
    name = "unix_crypt"
    setting_kwds = ("salt",)
    checksum_size = 11
    checksum_chars = uh.H64_CHARS

    #--HasSalt--
    min_salt_size = max_salt_size = 2
    salt_chars = uh.H64_CHARS

    #=========================================================
    #formatting
    #=========================================================
    #FORMAT: 2 chars of H64-encoded salt + 11 chars of H64-encoded checksum

    _hash_regex = re.compile("""
        ^
        (?P<salt>[./a-z0-9]{2})
        (?P<chk>[./a-z0-9]{11})?
        $""", re.X|re.I)

    @classmethod
    def identify(cls, hash):
        return uh.identify_regexp(hash, cls._hash_regex)

    @classmethod
    def from_string(cls, hash, strict=False):
        hash = uh.to_unicode_for_parse(hash, cls)
        m = cls._hash_regex.match(hash)
        if not m:
            raise exc.InvalidHashError(cls)
        salt, chk = m.group("salt", "chk")
        return cls._from_parsed(strict, salt=salt, checksum=chk)

    def to_string(self):
        return "%s%s" % (self.salt, self.checksum or "")

    #=========================================================
    #backend
    #=========================================================
    def _calc_checksum(self, secret):
        if b"\x00" in secret:
            raise exc.NullPasswordError(self)
        return raw_unix_crypt(secret, self.salt)

    #=========================================================
    #eoc
    #=========================================================

class bsdi_crypt(uh.HasRounds, uh.HasSalt, uh.GenericHandler):
    """This class implements the BSDi-Crypt password hash, and follows the password-hash api.

    It supports a fixed-length salt, and a variable number of rounds.

    The :meth:`hash` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, one will be autogenerated (this is recommended).
        If specified, it must be 4 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    :param rounds:
        Optional number of rounds to use.
        Defaults to 7250, must be between 1 and 16777215, inclusive.
        Even values are accepted, but explicitly requesting one for a
        new hash issues a :exc:`~pwcrypt.exc.PwcryptSecurityWarning`,
        since they may reveal weak DES keys. (The default is kept at
        the BSD value for compatibility.)

    Unlike :class:`unix_crypt`, all bytes of the password are significant.
    """
    #=========================================================
    #class attrs
    #=========================================================
    #--GenericHandler--
    name = "bsdi_crypt"
    setting_kwds = ("salt", "rounds")
    checksum_size = 11
    checksum_chars = uh.H64_CHARS

    #--HasSalt--
    min_salt_size = max_salt_size = 4
    salt_chars = uh.H64_CHARS

    #--HasRounds--
    # NOTE: default matches netbsd & openbsd's login.conf
    default_rounds = 7250
    min_rounds = 1
    max_rounds = 16777215 # (1<<24)-1
    rounds_cost = "linear"

    #=========================================================
    #formatting
    #=========================================================
    #FORMAT: "_" + 4 chars rounds + 4 chars salt + 11 chars checksum

    ident = "_"

    _hash_regex = re.compile("""
        ^
        _
        (?P<rounds>[./a-z0-9]{4})
        (?P<salt>[./a-z0-9]{4})
        (?P<chk>[./a-z0-9]{11})?
        $""", re.X|re.I)

    @classmethod
    def from_string(cls, hash, strict=False):
        hash = uh.to_unicode_for_parse(hash, cls)
        m = cls._hash_regex.match(hash)
        if not m:
            if hash.startswith(cls.ident):
                raise exc.MalformedHashError(cls)
            raise exc.InvalidHashError(cls)
        rounds, salt, chk = m.group("rounds", "salt", "chk")
        return cls._from_parsed(strict,
            rounds=h64.decode_int24(rounds.encode("ascii")),
            salt=salt,
            checksum=chk,
        )

    def to_string(self):
        return "_%s%s%s" % (h64.encode_int24(self.rounds).decode("ascii"),
                             self.salt, self.checksum or "")

    def _norm_rounds(self, rounds):
        explicit = rounds is not None
        rounds = super(bsdi_crypt, self)._norm_rounds(rounds)
        if explicit and self.use_defaults and not rounds & 1:
            warn("bsdi_crypt rounds should be odd, "
                 "as even rounds may reveal weak DES keys",
                 exc.PwcryptSecurityWarning)
        return rounds

    #=========================================================
    #backend
    #=========================================================
    def _calc_checksum(self, secret):
        if b"\x00" in secret:
            raise exc.NullPasswordError(self)
        return raw_bsdi_crypt(secret, self.rounds, self.salt)

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#eof
#=========================================================
