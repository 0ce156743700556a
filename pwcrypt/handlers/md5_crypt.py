"""pwcrypt.handlers.md5_crypt - md5-crypt algorithm, and the apache variant"""
#=========================================================
#imports
#=========================================================
#core
from hashlib import md5
import logging; log = logging.getLogger(__name__)
#site
#libs
from pwcrypt.utils import h64, repeat_string
import pwcrypt.utils.handlers as uh
#pkg
#local
__all__ = [
    "md5_crypt",
    "apr1_crypt",
]

#=========================================================
#pure-python implementation
#=========================================================

#: order in which digest bytes are fed to the h64 encoder
_chk_offsets = (
    12, 6, 0,
    13, 7, 1,
    14, 8, 2,
    15, 9, 3,
    5, 10, 4,
    11,
)

def raw_md5_crypt(secret, salt, magic):
    """perform raw md5-crypt calculation

    :arg secret:
        password, as bytes

    :arg salt:
        salt portion of hash, as unicode (max 8 chars)

    :arg magic:
        the hash's ident (``$1$`` or ``$apr1$``) as bytes;
        it's the only input which differs between the two variants.

    :returns:
        encoded checksum as unicode
    """
    salt = salt.encode("ascii")
    assert len(salt) <= 8

    # alternate digest: md5(password + salt + password)
    alt = md5(secret + salt + secret).digest()

    # primary digest: password + magic + salt, then len(password)
    # bytes of the alternate digest.
    ctx = md5(secret + magic + salt)
    if secret:
        ctx.update(repeat_string(alt, len(secret)))

    # then one byte for every bit of len(password): NUL for set bits,
    # first char of password for clear bits. (the reference code
    # meant to use alt[0], but had already zeroed that buffer; every
    # implementation since has had to copy this.)
    first = secret[:1]
    idx = len(secret)
    while idx:
        ctx.update(b"\x00" if idx & 1 else first)
        idx >>= 1
    result = ctx.digest()

    # 1000 rounds of re-mixing the digest with the password & salt.
    # for round i, digest is taken over:
    #   password if i is odd, else previous result
    #   salt, unless i is multiple of 3
    #   password, unless i is multiple of 7
    #   previous result if i is odd, else password
    for i in range(1000):
        ctx = md5(secret if i & 1 else result)
        if i % 3:
            ctx.update(salt)
        if i % 7:
            ctx.update(secret)
        ctx.update(result if i & 1 else secret)
        result = ctx.digest()

    return h64.encode_transposed_bytes(result, _chk_offsets).decode("ascii")

#=========================================================
#handlers
#=========================================================
class _Md5Common(uh.HasSalt, uh.GenericHandler):
    "common code for md5_crypt and apr1_crypt"
    #=========================================================
    #algorithm information
    #=========================================================
    #--GenericHandler--
    #name & ident in subclass
    setting_kwds = ("salt", "salt_size")
    checksum_size = 22
    checksum_chars = uh.H64_CHARS

    #--HasSalt--
    min_salt_size = 0
    max_salt_size = 8
    salt_chars = uh.H64_CHARS

    #=========================================================
    #formatting
    #=========================================================
    #FORMAT: ident + 0-8 chars salt + "$" + 22 chars checksum

    @classmethod
    def from_string(cls, hash, strict=False):
        salt, chk = uh.parse_mc2(hash, cls.ident, cls)
        return cls._from_parsed(strict, salt=salt, checksum=chk)

    def to_string(self):
        return uh.render_mc2(self.ident, self.salt, self.checksum)

    #=========================================================
    #primary interface
    #=========================================================
    def _calc_checksum(self, secret):
        return raw_md5_crypt(secret, self.salt, self.ident.encode("ascii"))

    #=========================================================
    #eoc
    #=========================================================

class md5_crypt(_Md5Common):
    """This class implements the MD5-Crypt password hash (Poul-Henning Kamp's ``$1$`` format),
    and follows the password-hash api.

    It supports a variable-length salt.

    The :meth:`hash` and :meth:`genconfig` methods accept the following optional keywords:

    :param salt:
        Optional salt string.
        If not specified, one will be autogenerated (this is recommended).
        If specified, it must be 0-8 characters, drawn from the regexp range ``[./0-9A-Za-z]``.

    :param salt_size:
        Optional number of characters to use when autogenerating new salts.
        Defaults to 8, but can be any value between 0 and 8.
    """
    name = "md5_crypt"
    ident = "$1$"

class apr1_crypt(_Md5Common):
    """This class implements the Apache variant of MD5-Crypt used in ``.htpasswd`` files,
    and follows the password-hash api.

    It is identical to :class:`md5_crypt` apart from its ``$apr1$`` ident,
    which is mixed into the digest as well as prefixed to the hash.
    It accepts the same keywords.
    """
    name = "apr1_crypt"
    ident = "$apr1$"

#=========================================================
#eof
#=========================================================
