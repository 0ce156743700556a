"""pwcrypt.utils.blowfish - pure-python blowfish & eks-blowfish, as used by bcrypt

Blowfish's initial P-array and S-boxes are defined as the fractional
hexadecimal digits of pi; rather than embedding 4168 constants,
they're computed once when this module is first imported
(see :func:`_pi_words`), and checked against a few published values.

The bcrypt-specific parts follow the OpenBSD implementation:

* :meth:`BlowfishEngine.eks_salted_expand` is ``Blowfish_expandstate()``
* :meth:`BlowfishEngine.eks_repeated_expand` is the ``2**cost`` loop
  of ``Blowfish_expand0state()`` calls
* :func:`raw_bcrypt` is ``bcrypt_hashpass()`` minus the string formatting
"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
import struct
#site
#pkg
from pwcrypt.utils import bcrypt64
#local
__all__ = [
    "BlowfishEngine",
    "raw_bcrypt",
]

#=========================================================
#blowfish constants
#=========================================================
def _arctan_inv(x, unity):
    "fixed-point arctan(1/x), scaled by *unity*"
    total = power = unity // x
    x2 = x * x
    divisor = 1
    sign = 1
    while power:
        power //= x2
        divisor += 2
        sign = -sign
        total += sign * (power // divisor)
    return total

def _pi_words(count):
    """return the first *count* 32-bit words of pi's fractional part.

    pi is computed in fixed point using Machin's formula,
    ``pi = 16*atan(1/5) - 4*atan(1/239)``, with guard bits
    to absorb the truncation error of each series term.
    """
    bits = count * 32
    guard = 64
    unity = 1 << (bits + guard)
    pi = 16 * _arctan_inv(5, unity) - 4 * _arctan_inv(239, unity)
    frac = (pi - 3 * unity) >> guard
    return [(frac >> (bits - 32 * (idx + 1))) & 0xffffffff
            for idx in range(count)]

def _init_constants():
    words = _pi_words(18 + 4 * 256)
    p = words[:18]
    s = [words[18 + 256 * idx:18 + 256 * (idx + 1)] for idx in range(4)]
    # spot check against values published with the algorithm
    assert p[0] == 0x243f6a88 and p[17] == 0x8979fb1b, "bad P-array"
    assert s[0][0] == 0xd1310ba6 and s[3][255] == 0x3ac372e6, "bad S-boxes"
    return p, s

#: initial P-array & S-boxes
BLOWFISH_P, BLOWFISH_S = _init_constants()

#: magic plaintext encrypted by bcrypt
BCRYPT_CDATA = struct.unpack(">6I", b"OrpheanBeholderScryDoubt")

#: number of bytes of key material used by bcrypt
BCRYPT_KEY_SIZE = 72

#=========================================================
#blowfish engine
#=========================================================
class BlowfishEngine(object):
    """blowfish cipher state, with the expansion routines needed by bcrypt.

    a fresh engine starts from the pi-derived initial state;
    all methods modify the instance's own copy of the P-array and S-boxes.
    """

    def __init__(self):
        self.P = list(BLOWFISH_P)
        self.S = [list(box) for box in BLOWFISH_S]

    #=========================================================
    # helpers
    #=========================================================
    @staticmethod
    def key_to_words(data, size=18):
        """convert data to tuple of <size> 4-byte integers, repeating
        or truncating data as needed to reach specified size"""
        assert isinstance(data, bytes)
        dlen = len(data)
        if not dlen:
            # return all zeros - original C code would just read the NUL after the password, so mimicing that behavior
            return [0]*size

        # repeat data until it fills up 4*size bytes
        data = data * ((4*size+dlen-1)//dlen)
        data = data[:4*size]

        # unpack data into list of 4-byte integers
        return list(struct.unpack(">%dI" % (size,), data))

    #=========================================================
    # blowfish routines
    #=========================================================
    def encipher(self, l, r):
        "blowfish encipher a single 64-bit block presented as 2 32-bit integers"
        P = self.P
        S0, S1, S2, S3 = self.S
        l ^= P[0]
        for i in range(1, 17, 2):
            r ^= ((((S0[l >> 24] + S1[(l >> 16) & 0xff]) ^
                    S2[(l >> 8) & 0xff]) + S3[l & 0xff]) & 0xffffffff) ^ P[i]
            l ^= ((((S0[r >> 24] + S1[(r >> 16) & 0xff]) ^
                    S2[(r >> 8) & 0xff]) + S3[r & 0xff]) & 0xffffffff) ^ P[i+1]
        return r ^ P[17], l

    def expand(self, key_words):
        "perform stock Blowfish keyschedule setup"
        assert len(key_words) >= 18, "key_words must be at least as large as P"
        P = self.P
        for i in range(18):
            P[i] ^= key_words[i]
        encipher = self.encipher
        l = r = 0
        for i in range(0, 18, 2):
            l, r = P[i], P[i+1] = encipher(l, r)
        for box in self.S:
            for i in range(0, 256, 2):
                l, r = box[i], box[i+1] = encipher(l, r)

    #=========================================================
    # eks-blowfish routines
    #=========================================================
    def eks_salted_expand(self, key_words, salt_words):
        "perform EKS' salted version of Blowfish keyschedule setup"
        # NOTE: this is the same as expand(), except for the addition
        #       of the operations involving *salt_words*.
        assert len(key_words) >= 18, "key_words must be at least as large as P"
        salt_size = len(salt_words)
        assert salt_size, "salt_words must not be empty"
        assert not salt_size & 1, "salt_words must have even length"
        P = self.P
        for i in range(18):
            P[i] ^= key_words[i]
        encipher = self.encipher
        s = 0
        l = r = 0
        for i in range(0, 18, 2):
            l ^= salt_words[s]
            r ^= salt_words[s+1]
            s = (s + 2) % salt_size
            l, r = P[i], P[i+1] = encipher(l, r)
        for box in self.S:
            for i in range(0, 256, 2):
                l ^= salt_words[s]
                r ^= salt_words[s+1]
                s = (s + 2) % salt_size
                l, r = box[i], box[i+1] = encipher(l, r)

    def eks_repeated_expand(self, key_words, salt_words, rounds):
        "perform rounds stage of EKS keyschedule setup"
        expand = self.expand
        for _ in range(rounds):
            expand(key_words)
            expand(salt_words)

    def repeat_encipher(self, l, r, count):
        "repeatedly apply encipher operation to a block"
        encipher = self.encipher
        for _ in range(count):
            l, r = encipher(l, r)
        return l, r

#=========================================================
#bcrypt
#=========================================================
def raw_bcrypt(password, ident, salt, log_rounds):
    """perform central password hashing step in bcrypt scheme.

    :param password: the password to hash, as bytes (without NUL characters)
    :param ident: identifier w/ minor version (e.g. ``2b``, ``2y``)
    :param salt: the 22 char bcrypt64-encoded salt string (as bytes)
    :param log_rounds: the log2 of the number of rounds (as int)
    :returns: bcrypt64-encoded checksum, as 31 bytes
    """
    #===================================================================
    # parse inputs
    #===================================================================

    # the $2a$, $2b$, and $2y$ variants differ only in how a few broken
    # C implementations handled lengths > 255 or 8-bit chars; with the
    # 72 byte cap applied below, all three hash identically.
    if not isinstance(password, bytes):
        raise TypeError("password must be bytes, not %s" % (type(password),))
    if ident not in ("2a", "2b", "2y"):
        raise ValueError("unsupported bcrypt ident: %r" % (ident,))

    # decode & validate salt
    if not isinstance(salt, bytes):
        raise TypeError("salt must be bytes, not %s" % (type(salt),))
    salt = bcrypt64.decode_bytes(salt)
    if len(salt) < 16:
        raise ValueError("Missing salt bytes")
    elif len(salt) > 16:
        salt = salt[:16]

    # prepare password: C string w/ trailing NUL, capped at 72 bytes
    password = (password + b"\x00")[:BCRYPT_KEY_SIZE]

    # validate rounds
    if log_rounds < 4 or log_rounds > 31:
        raise ValueError("Bad number of rounds")

    #===================================================================
    #
    # run EKS-Blowfish algorithm
    #
    # This uses the "enhanced key schedule" step described by
    # Provos and Mazieres in "A Future-Adaptable Password Scheme"
    # http://www.openbsd.org/papers/bcrypt-paper.ps
    #
    #===================================================================

    engine = BlowfishEngine()

    # convert password & salt into list of 18 32-bit integers (72 bytes total).
    pass_words = engine.key_to_words(password)
    salt_words = engine.key_to_words(salt)

    # truncate salt_words to original 16 byte salt, or loop won't wrap
    # correctly when passed to .eks_salted_expand()
    salt_words16 = salt_words[:4]

    # do EKS key schedule setup
    engine.eks_salted_expand(pass_words, salt_words16)

    # apply password & salt keys to key schedule a bunch more times.
    engine.eks_repeated_expand(pass_words, salt_words, 1 << log_rounds)

    # encipher constant data, and encode to bytes as digest.
    data = list(BCRYPT_CDATA)
    i = 0
    while i < 6:
        data[i], data[i+1] = engine.repeat_encipher(data[i], data[i+1], 64)
        i += 2
    raw = struct.pack(">6I", *data)[:-1]
    return bcrypt64.encode_bytes(raw)

#=========================================================
#eof
#=========================================================
