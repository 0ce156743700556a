"""pwcrypt utility functions"""
#=================================================================================
#imports
#=================================================================================
#core
import logging; log = logging.getLogger(__name__)
import random
#site
#pkg
from pwcrypt.exc import ExpectedStringError, InvalidEncoding, PasswordSizeError
#local
__all__ = [
    #decorators
    "classproperty",

    #tests
    'is_crypt_handler',

    #bytes<->unicode
    'to_bytes',
    'to_secret',

    # string manipulation
    'consteq',
    'repeat_string',

    # base64 helpers
    "HASH64_CHARS", "BCRYPT_CHARS",
    "Base64Engine", "h64", "h64big", "bcrypt64",

    #random
    'rng',
    'getrandstr',

    #constants
    'MAX_PASSWORD_SIZE',
    'unix_crypt_schemes',
]

#=================================================================================
#constants
#=================================================================================

#: list of names of hashes found in unix crypt implementations,
#: strongest first.
unix_crypt_schemes = [
    "sha512_crypt", "sha256_crypt",
    "sha1_crypt", "bcrypt",
    "md5_crypt", "apr1_crypt",
    "bsdi_crypt", "unix_crypt",
    ]

#: maximum password size (in bytes) accepted by any handler
MAX_PASSWORD_SIZE = 4096

#=================================================================================
#decorators and meta helpers
#=================================================================================
class classproperty(object):
    """Function decorator which acts like a combination of classmethod+property (limited to read-only properties)"""

    def __init__(self, func):
        self.__func__ = func

    def __get__(self, obj, cls):
        return self.__func__(cls)

def is_crypt_handler(obj):
    "check if object follows the :ref:`password-hash-api`"
    return all(hasattr(obj, name) for name in (
        "name",
        "setting_kwds",
        "genconfig", "genhash",
        "verify", "identify",
        "hash", "hash_with",
        ))

#=================================================================================
#unicode / bytes helpers
#=================================================================================
def to_bytes(source, encoding="utf-8", errname="value"):
    """helper to normalize input to bytes.

    :arg source: source bytes/unicode to process.
    :arg encoding: encoding used to convert unicode strings.
    :param errname: optional name of variable/noun to reference when raising errors

    :raises TypeError: if source is not unicode or bytes.

    :returns: bytes object
    """
    if isinstance(source, bytes):
        return source
    elif isinstance(source, str):
        return source.encode(encoding)
    else:
        raise ExpectedStringError(source, errname)

def to_secret(secret):
    """normalize password to bytes, enforcing :data:`MAX_PASSWORD_SIZE`.

    unicode passwords are encoded using utf-8.
    """
    secret = to_bytes(secret, "utf-8", "secret")
    if len(secret) > MAX_PASSWORD_SIZE:
        raise PasswordSizeError()
    return secret

#=================================================================================
#string helpers
#=================================================================================
def consteq(left, right):
    """check two strings/bytes for equality, taking constant time relative
    to the size of the righthand input.

    The purpose of this function is to aid in preventing timing attacks
    during digest comparisons: the loop always runs ``len(right)``
    iterations, and accumulates differences rather than exiting early.
    """
    # validate types
    if isinstance(left, str):
        if not isinstance(right, str):
            raise TypeError("inputs must be both unicode or bytes")
        is_bytes = False
    elif isinstance(left, bytes):
        if not isinstance(right, bytes):
            raise TypeError("inputs must be both unicode or bytes")
        is_bytes = True
    else:
        raise TypeError("inputs must be both unicode or bytes")

    # do size comparison.
    # NOTE: the double-if construction below performs the same number of
    # operations (including branches) whether or not the sizes match.
    same = (len(left) == len(right))
    if same:
        # sizes match, so compare left against right.
        tmp = left
        result = 0
    if not same:
        # sizes differ: force a mismatch, but still run 'len(right)'
        # iterations by comparing right against itself.
        tmp = right
        result = 1

    # run constant-time string comparision
    if is_bytes:
        for l,r in zip(tmp, right):
            result |= l ^ r
    else:
        for l,r in zip(tmp, right):
            result |= ord(l) ^ ord(r)
    return result == 0

def repeat_string(source, size):
    "repeat or truncate <source> string, so it has length <size>"
    cur = len(source)
    if size > cur:
        mult = (size+cur-1)//cur
        return (source*mult)[:size]
    else:
        return source[:size]

#=================================================================================
# base64-variant encoding
#=================================================================================

class Base64Engine(object):
    """provides routines for encoding/decoding base64 data using
    arbitrary character mappings, selectable endianness, etc.

    Raw Bytes <-> Encoded Bytes
    ===========================
    .. automethod:: encode_bytes
    .. automethod:: decode_bytes
    .. automethod:: encode_transposed_bytes
    .. automethod:: decode_transposed_bytes

    Integers <-> Encoded Bytes
    ==========================
    .. automethod:: decode_int12

    .. automethod:: encode_int24
    .. automethod:: decode_int24

    .. automethod:: encode_int64
    .. automethod:: decode_int64

    Informational Attributes
    ========================
    .. attribute:: charmap
        unicode string containing list of characters used in encoding;
        position in string matches 6bit value of character.

    .. attribute:: bytemap
        bytes version of :attr:`charmap`

    .. attribute:: big
        boolean flag indicating this using big-endian encoding.

    All decoding methods raise :exc:`~pwcrypt.exc.InvalidEncoding`
    for characters outside the charmap, or for impossible lengths.
    """

    #=============================================================
    # instance attrs
    #=============================================================
    # public config
    bytemap = None # charmap as bytes
    big = None # little or big endian

    # filled in by init based on charmap.
    # encode: maps 6bit value -> byte value, decode: the reverse.
    _encode64 = None
    _decode64 = None

    # helpers filled in by init based on endianness
    _encode_bytes = None
    _decode_bytes = None

    #=============================================================
    # init
    #=============================================================
    def __init__(self, charmap, big=False):
        # validate charmap, generate encode64/decode64 helper functions.
        if isinstance(charmap, str):
            charmap = charmap.encode("latin-1")
        elif not isinstance(charmap, bytes):
            raise ExpectedStringError(charmap, "charmap")
        if len(charmap) != 64:
            raise ValueError("charmap must be 64 characters in length")
        if len(set(charmap)) != 64:
            raise ValueError("charmap must not contain duplicate characters")
        self.bytemap = charmap
        self._encode64 = charmap.__getitem__
        lookup = dict((value, idx) for idx, value in enumerate(charmap))
        self._decode64 = lookup.__getitem__

        # validate big, set appropriate helper functions.
        self.big = big
        if big:
            self._encode_bytes = self._encode_bytes_big
            self._decode_bytes = self._decode_bytes_big
        else:
            self._encode_bytes = self._encode_bytes_little
            self._decode_bytes = self._decode_bytes_little

    @property
    def charmap(self):
        "charmap as unicode"
        return self.bytemap.decode("latin-1")

    def __repr__(self):
        return "<Base64Engine charmap=%r big=%r>" % (self.charmap, self.big)

    #=============================================================
    # encoding byte strings
    #=============================================================
    def encode_bytes(self, source):
        """encode bytes to engine's specific base64 variant.
        :arg source: byte string to encode.
        :returns: byte string containing encoded data.
        """
        if not isinstance(source, bytes):
            raise TypeError("source must be bytes, not %s" % (type(source),))
        chunks, tail = divmod(len(source), 3)
        next_value = iter(source).__next__
        gen = self._encode_bytes(next_value, chunks, tail)
        return bytes(map(self._encode64, gen))

    def _encode_bytes_little(self, next_value, chunks, tail):
        "helper used by encode_bytes() to handle little-endian encoding"
        #
        # output bit layout:
        #
        # first byte:   v1 543210
        #
        # second byte:  v1 ....76
        #              +v2 3210..
        #
        # third byte:   v2 ..7654
        #              +v3 10....
        #
        # fourth byte:  v3 765432
        #
        idx = 0
        while idx < chunks:
            v1 = next_value()
            v2 = next_value()
            v3 = next_value()
            yield v1 & 0x3f
            yield ((v2 & 0x0f)<<2)|(v1>>6)
            yield ((v3 & 0x03)<<4)|(v2>>4)
            yield v3>>2
            idx += 1
        if tail:
            v1 = next_value()
            if tail == 1:
                # note: 4 msb of last byte are padding
                yield v1 & 0x3f
                yield v1>>6
            else:
                assert tail == 2
                # note: 2 msb of last byte are padding
                v2 = next_value()
                yield v1 & 0x3f
                yield ((v2 & 0x0f)<<2)|(v1>>6)
                yield v2>>4

    def _encode_bytes_big(self, next_value, chunks, tail):
        "helper used by encode_bytes() to handle big-endian encoding"
        #
        # output bit layout:
        #
        # first byte:   v1 765432
        #
        # second byte:  v1 10....
        #              +v2 ..7654
        #
        # third byte:   v2 3210..
        #              +v3 ....76
        #
        # fourth byte:  v3 543210
        #
        idx = 0
        while idx < chunks:
            v1 = next_value()
            v2 = next_value()
            v3 = next_value()
            yield v1>>2
            yield ((v1&0x03)<<4)|(v2>>4)
            yield ((v2&0x0f)<<2)|(v3>>6)
            yield v3 & 0x3f
            idx += 1
        if tail:
            v1 = next_value()
            if tail == 1:
                # note: 4 lsb of last byte are padding
                yield v1>>2
                yield (v1&0x03)<<4
            else:
                assert tail == 2
                # note: 2 lsb of last byte are padding
                v2 = next_value()
                yield v1>>2
                yield ((v1&0x03)<<4)|(v2>>4)
                yield ((v2&0x0f)<<2)

    #=============================================================
    # decoding byte strings
    #=============================================================

    def decode_bytes(self, source):
        """decode bytes from engine's specific base64 variant.
        :arg source: byte string to decode.
        :returns: byte string containing decoded data.
        """
        if not isinstance(source, bytes):
            raise TypeError("source must be bytes, not %s" % (type(source),))
        chunks, tail = divmod(len(source), 4)
        if tail == 1:
            #only 6 bits left, can't encode a whole byte!
            raise InvalidEncoding("input string length cannot be == 1 mod 4")
        next_value = map(self._decode64, source).__next__
        try:
            return bytes(self._decode_bytes(next_value, chunks, tail))
        except KeyError as err:
            raise InvalidEncoding("invalid character: %r" %
                                  (chr(err.args[0]),))

    def _decode_bytes_little(self, next_value, chunks, tail):
        "helper used by decode_bytes() to handle little-endian encoding"
        #
        # input bit layout:
        #
        # first byte:   v1 ..543210
        #              +v2 10......
        #
        # second byte:  v2 ....5432
        #              +v3 3210....
        #
        # third byte:   v3 ......54
        #              +v4 543210..
        #
        idx = 0
        while idx < chunks:
            v1 = next_value()
            v2 = next_value()
            v3 = next_value()
            v4 = next_value()
            yield v1 | ((v2 & 0x3) << 6)
            yield (v2>>2) | ((v3 & 0xF) << 4)
            yield (v3>>4) | (v4<<2)
            idx += 1
        if tail:
            # tail is 2 or 3
            v1 = next_value()
            v2 = next_value()
            yield v1 | ((v2 & 0x3) << 6)
            #NOTE: if tail == 2, 4 msb of v2 are ignored (should be 0)
            if tail == 3:
                #NOTE: 2 msb of v3 are ignored (should be 0)
                v3 = next_value()
                yield (v2>>2) | ((v3 & 0xF) << 4)

    def _decode_bytes_big(self, next_value, chunks, tail):
        "helper used by decode_bytes() to handle big-endian encoding"
        #
        # input bit layout:
        #
        # first byte:   v1 543210..
        #              +v2 ......54
        #
        # second byte:  v2 3210....
        #              +v3 ....5432
        #
        # third byte:   v3 10......
        #              +v4 ..543210
        #
        idx = 0
        while idx < chunks:
            v1 = next_value()
            v2 = next_value()
            v3 = next_value()
            v4 = next_value()
            yield ((v1<<2) | (v2>>4)) & 0xFF
            yield ((v2&0xF)<<4) | (v3>>2)
            yield ((v3&0x3)<<6) | v4
            idx += 1
        if tail:
            # tail is 2 or 3
            v1 = next_value()
            v2 = next_value()
            yield ((v1<<2) | (v2>>4)) & 0xFF
            #NOTE: if tail == 2, 4 lsb of v2 are ignored (should be 0)
            if tail == 3:
                #NOTE: 2 lsb of v3 are ignored (should be 0)
                v3 = next_value()
                yield ((v2&0xF)<<4) | (v3>>2)

    #=============================================================
    # padding bits
    #=============================================================
    def _padding_mask(self, size):
        "return bitmask of unused bits in last char of an encoded string"
        tail = size & 3
        if tail == 2:
            return 0xF if self.big else 0x3C
        elif tail == 3:
            return 0x3 if self.big else 0x30
        elif tail == 0:
            return 0
        else:
            raise InvalidEncoding("source length must != 1 mod 4")

    def check_repair_unused(self, source):
        """helper to detect & clear invalid unused bits in last character.

        :arg source:
            encoded data (as unicode string).

        :returns:
            tuple of ``(True, result)`` if string was repaired,
            else ``(False, source)``.
        """
        mask = self._padding_mask(len(source))
        if not mask:
            return False, source
        charmap = self.charmap
        idx = charmap.find(source[-1])
        if idx < 0:
            raise InvalidEncoding("invalid character: %r" % (source[-1],))
        if not idx & mask:
            return False, source
        return True, source[:-1] + charmap[idx & ~mask]

    #=============================================================
    # transposed encoding/decoding
    #=============================================================
    def encode_transposed_bytes(self, source, offsets):
        "encode byte string, first transposing source using offset list"
        if not isinstance(source, bytes):
            raise TypeError("source must be bytes, not %s" % (type(source),))
        tmp = bytes(source[off] for off in offsets)
        return self.encode_bytes(tmp)

    def decode_transposed_bytes(self, source, offsets):
        "decode byte string, then reverse transposition described by offset list"
        # NOTE: if transposition does not use all bytes of source,
        # the original can't be recovered, and bytes() will throw
        # an error because 1+ values in <buf> will be None.
        tmp = self.decode_bytes(source)
        buf = [None] * len(offsets)
        for off, char in zip(offsets, tmp):
            buf[off] = char
        return bytes(buf)

    #=============================================================
    # integer decoding helpers - mainly used by des_crypt family
    #=============================================================
    def _decode_int(self, source, bits):
        """decode base64 string -> integer

        :arg source: base64 string to decode.
        :arg bits: number of bits in resulting integer.

        :raises InvalidEncoding:
            * if the string contains invalid base64 characters.
            * if the string is not exactly ``int(ceil(bits/6))`` in length.

        :returns:
            a integer in the range ``0 <= n < 2**bits``
        """
        if not isinstance(source, bytes):
            raise TypeError("source must be bytes, not %s" % (type(source),))
        big = self.big
        pad = -bits % 6
        chars = (bits+pad)//6
        if len(source) != chars:
            raise InvalidEncoding("source must be %d chars" % (chars,))
        decode = self._decode64
        out = 0
        try:
            for c in source if big else reversed(source):
                out = (out<<6) + decode(c)
        except KeyError:
            raise InvalidEncoding("invalid character in string: %r" % (chr(c),))
        if pad:
            # strip padding bits
            if big:
                out >>= pad
            else:
                out &= (1<<bits)-1
        return out

    def decode_int12(self, source):
        "decodes 2 char string -> 12-bit integer"
        return self._decode_int(source, 12)

    def decode_int24(self, source):
        "decodes 4 char string -> 24-bit integer"
        return self._decode_int(source, 24)

    def decode_int64(self, source):
        """decode 11 char base64 string -> 64-bit integer

        this format is used primarily by des-crypt & variants to encode
        the DES output value used as a checksum.
        """
        return self._decode_int(source, 64)

    #=============================================================
    # integer encoding helpers - mainly used by des_crypt family
    #=============================================================
    def _encode_int(self, value, bits):
        """encode integer into base64 format

        :arg value: non-negative integer to encode
        :arg bits: number of bits to encode

        :returns:
            a string of length ``int(ceil(bits/6.0))``.
        """
        if value < 0 or value >> bits:
            raise ValueError("value out of range")
        pad = -bits % 6
        bits += pad
        if self.big:
            itr = range(bits-6, -6, -6)
            # shift to add lsb padding.
            value <<= pad
        else:
            itr = range(0, bits, 6)
            # padding is msb, so no change needed.
        return bytes(self._encode64((value>>off) & 0x3f) for off in itr)

    def encode_int24(self, value):
        "encodes 24-bit integer -> 4 char string"
        return self._encode_int(value, 24)

    def encode_int64(self, value):
        """encode 64-bit integer -> 11 char base64 string

        this format is used primarily by des-crypt & variants to encode
        the DES output value used as a checksum.
        """
        return self._encode_int(value, 64)

    #=============================================================
    # eof
    #=============================================================

# common charmaps
HASH64_CHARS = "./0123456789ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz"
BCRYPT_CHARS = "./ABCDEFGHIJKLMNOPQRSTUVWXYZabcdefghijklmnopqrstuvwxyz0123456789"

# common variants
h64 = Base64Engine(HASH64_CHARS)
h64big = Base64Engine(HASH64_CHARS, big=True)
bcrypt64 = Base64Engine(BCRYPT_CHARS, big=True)

#=================================================================================
#randomness
#=================================================================================

#NOTE: salts are drawn from the os-provided csprng (os.urandom),
# since predictable salts would let an attacker precompute tables.
rng = random.SystemRandom()

def getrandstr(rng, charset, count):
    """return string containing *count* number of chars/bytes, whose elements are drawn from specified charset, using specified rng"""
    #check alphabet & count
    if count < 0:
        raise ValueError("count must be >= 0")
    letters = len(charset)
    if letters == 0:
        raise ValueError("alphabet must not be empty")
    if letters == 1:
        return charset * count

    #get random value, and write out to buffer
    def helper():
        value = rng.randrange(0, letters**count)
        i = 0
        while i < count:
            yield charset[value % letters]
            value //= letters
            i += 1

    if isinstance(charset, str):
        return "".join(helper())
    else:
        return bytes(helper())

#=================================================================================
#eof
#=================================================================================
