"""pwcrypt.utils.des -- DES block cipher, with the crypt(3) salt modification

This module contains a table-driven implementation of the DES block cipher,
operating on 64-bit integers. It also implements the modification used by
the unix crypt(3) family, where a 24-bit salt swaps bits between the two
halves of the expansion (E) box output, so every salt yields a
structurally different cipher.

Only encryption is implemented, since that's all the crypt(3) algorithms need.

All permutation tables below use the DES convention of numbering bits
from 1, starting at the most significant bit. At import, they're compiled
into per-byte lookup tables, so each permutation costs a handful of
table lookups rather than a loop over every bit.
"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
#site
#pkg
from pwcrypt.utils import to_bytes
#local
__all__ = [
    "expand_des_key",
    "des_encrypt_block",
    "des_encrypt_int_block",
    "mdes_encrypt_int_block",
]

#=========================================================
#standard DES tables
#=========================================================

#: initial permutation (64 -> 64 bits)
IP = (
    58, 50, 42, 34, 26, 18, 10,  2,
    60, 52, 44, 36, 28, 20, 12,  4,
    62, 54, 46, 38, 30, 22, 14,  6,
    64, 56, 48, 40, 32, 24, 16,  8,
    57, 49, 41, 33, 25, 17,  9,  1,
    59, 51, 43, 35, 27, 19, 11,  3,
    61, 53, 45, 37, 29, 21, 13,  5,
    63, 55, 47, 39, 31, 23, 15,  7,
)

#: permuted choice 1 (64 -> 56 bits); parity bits 8,16..64 are dropped.
PC1 = (
    # C half
    57, 49, 41, 33, 25, 17,  9,  1, 58, 50, 42, 34, 26, 18,
    10,  2, 59, 51, 43, 35, 27, 19, 11,  3, 60, 52, 44, 36,
    # D half
    63, 55, 47, 39, 31, 23, 15,  7, 62, 54, 46, 38, 30, 22,
    14,  6, 61, 53, 45, 37, 29, 21, 13,  5, 28, 20, 12,  4,
)

#: permuted choice 2 (56 -> 48 bits)
PC2 = (
    14, 17, 11, 24,  1,  5,  3, 28, 15,  6, 21, 10,
    23, 19, 12,  4, 26,  8, 16,  7, 27, 20, 13,  2,
    41, 52, 31, 37, 47, 55, 30, 40, 51, 45, 33, 48,
    44, 49, 39, 56, 34, 53, 46, 42, 50, 36, 29, 32,
)

#: left rotations applied to C & D before each round
KEY_SHIFTS = (1, 1, 2, 2, 2, 2, 2, 2, 1, 2, 2, 2, 2, 2, 2, 1)

#: expansion box (32 -> 48 bits)
E = (
    32,  1,  2,  3,  4,  5,  4,  5,  6,  7,  8,  9,
     8,  9, 10, 11, 12, 13, 12, 13, 14, 15, 16, 17,
    16, 17, 18, 19, 20, 21, 20, 21, 22, 23, 24, 25,
    24, 25, 26, 27, 28, 29, 28, 29, 30, 31, 32,  1,
)

#: substitution boxes; each is 4 rows of 16, indexed by (row, col)
SBOXES = (
    (14,  4, 13,  1,  2, 15, 11,  8,  3, 10,  6, 12,  5,  9,  0,  7,
      0, 15,  7,  4, 14,  2, 13,  1, 10,  6, 12, 11,  9,  5,  3,  8,
      4,  1, 14,  8, 13,  6,  2, 11, 15, 12,  9,  7,  3, 10,  5,  0,
     15, 12,  8,  2,  4,  9,  1,  7,  5, 11,  3, 14, 10,  0,  6, 13),

    (15,  1,  8, 14,  6, 11,  3,  4,  9,  7,  2, 13, 12,  0,  5, 10,
      3, 13,  4,  7, 15,  2,  8, 14, 12,  0,  1, 10,  6,  9, 11,  5,
      0, 14,  7, 11, 10,  4, 13,  1,  5,  8, 12,  6,  9,  3,  2, 15,
     13,  8, 10,  1,  3, 15,  4,  2, 11,  6,  7, 12,  0,  5, 14,  9),

    (10,  0,  9, 14,  6,  3, 15,  5,  1, 13, 12,  7, 11,  4,  2,  8,
     13,  7,  0,  9,  3,  4,  6, 10,  2,  8,  5, 14, 12, 11, 15,  1,
     13,  6,  4,  9,  8, 15,  3,  0, 11,  1,  2, 12,  5, 10, 14,  7,
      1, 10, 13,  0,  6,  9,  8,  7,  4, 15, 14,  3, 11,  5,  2, 12),

    ( 7, 13, 14,  3,  0,  6,  9, 10,  1,  2,  8,  5, 11, 12,  4, 15,
     13,  8, 11,  5,  6, 15,  0,  3,  4,  7,  2, 12,  1, 10, 14,  9,
     10,  6,  9,  0, 12, 11,  7, 13, 15,  1,  3, 14,  5,  2,  8,  4,
      3, 15,  0,  6, 10,  1, 13,  8,  9,  4,  5, 11, 12,  7,  2, 14),

    ( 2, 12,  4,  1,  7, 10, 11,  6,  8,  5,  3, 15, 13,  0, 14,  9,
     14, 11,  2, 12,  4,  7, 13,  1,  5,  0, 15, 10,  3,  9,  8,  6,
      4,  2,  1, 11, 10, 13,  7,  8, 15,  9, 12,  5,  6,  3,  0, 14,
     11,  8, 12,  7,  1, 14,  2, 13,  6, 15,  0,  9, 10,  4,  5,  3),

    (12,  1, 10, 15,  9,  2,  6,  8,  0, 13,  3,  4, 14,  7,  5, 11,
     10, 15,  4,  2,  7, 12,  9,  5,  6,  1, 13, 14,  0, 11,  3,  8,
      9, 14, 15,  5,  2,  8, 12,  3,  7,  0,  4, 10,  1, 13, 11,  6,
      4,  3,  2, 12,  9,  5, 15, 10, 11, 14,  1,  7,  6,  0,  8, 13),

    ( 4, 11,  2, 14, 15,  0,  8, 13,  3, 12,  9,  7,  5, 10,  6,  1,
     13,  0, 11,  7,  4,  9,  1, 10, 14,  3,  5, 12,  2, 15,  8,  6,
      1,  4, 11, 13, 12,  3,  7, 14, 10, 15,  6,  8,  0,  5,  9,  2,
      6, 11, 13,  8,  1,  4, 10,  7,  9,  5,  0, 15, 14,  2,  3, 12),

    (13,  2,  8,  4,  6, 15, 11,  1, 10,  9,  3, 14,  5,  0, 12,  7,
      1, 15, 13,  8, 10,  3,  7,  4, 12,  5,  6, 11,  0, 14,  9,  2,
      7, 11,  4,  1,  9, 12, 14,  2,  0,  6, 10, 13, 15,  3,  5,  8,
      2,  1, 14,  7,  4, 10,  8, 13, 15, 12,  9,  0,  3,  5,  6, 11),
)

#: permutation applied to the s-box output (32 -> 32 bits)
P = (
    16,  7, 20, 21, 29, 12, 28, 17,  1, 15, 23, 26,  5, 18, 31, 10,
     2,  8, 24, 14, 32, 27,  3,  9, 19, 13, 30,  6, 22, 11,  4, 25,
)

#=========================================================
#table compilation
#=========================================================
def _invert_permutation(table):
    "return inverse of a permutation table which uses every input bit once"
    out = [0] * len(table)
    for idx, pos in enumerate(table):
        out[pos-1] = idx+1
    return tuple(out)

#: final permutation (inverse of IP)
FP = _invert_permutation(IP)

def _permute(value, table, in_bits):
    "apply permutation table to integer (bit by bit); used to build lookup tables"
    out = 0
    for pos in table:
        out = (out << 1) | ((value >> (in_bits - pos)) & 1)
    return out

def _compile_byte_tables(table, in_bits):
    """compile permutation table into a list of per-byte lookup tables.

    ``result[i][v]`` holds the output bits contributed when the i'th byte
    (counting from the most significant) of the input has value ``v``,
    so the full permutation is the OR of one lookup per input byte.
    """
    out_bits = len(table)
    # mask of output bits fed by each (1-based) input bit
    masks = [0] * (in_bits+1)
    for idx, pos in enumerate(table):
        masks[pos] |= 1 << (out_bits - 1 - idx)
    tables = []
    for byte in range(in_bits // 8):
        base = byte * 8
        row = []
        for value in range(256):
            acc = 0
            for bit in range(8):
                if value & (0x80 >> bit):
                    acc |= masks[base + bit + 1]
            row.append(acc)
        tables.append(row)
    return tables

def _compile_sp_tables():
    """combine each s-box with the P permutation.

    ``result[i][x]`` is the P-permuted contribution of s-box i
    for 6-bit input ``x``, so f() is the OR of 8 lookups.
    """
    tables = []
    for idx, sbox in enumerate(SBOXES):
        shift = 4 * (7 - idx)
        row = []
        for x in range(64):
            # outer bits select the row, inner 4 bits the column
            value = sbox[(x & 0x20) | ((x & 0x01) << 4) | ((x & 0x1E) >> 1)]
            row.append(_permute(value << shift, P, 32))
        tables.append(row)
    return tables

(IP0, IP1, IP2, IP3, IP4, IP5, IP6, IP7) = _compile_byte_tables(IP, 64)
(FP0, FP1, FP2, FP3, FP4, FP5, FP6, FP7) = _compile_byte_tables(FP, 64)
(E0, E1, E2, E3) = _compile_byte_tables(E, 32)
(SP0, SP1, SP2, SP3, SP4, SP5, SP6, SP7) = _compile_sp_tables()

INT_24_MASK = 0xffffff
INT_56_MASK = 0xffffffffffffff
INT_64_MASK = 0xffffffffffffffff

def _ip(value):
    return (IP0[value >> 56] | IP1[(value >> 48) & 0xff] |
            IP2[(value >> 40) & 0xff] | IP3[(value >> 32) & 0xff] |
            IP4[(value >> 24) & 0xff] | IP5[(value >> 16) & 0xff] |
            IP6[(value >> 8) & 0xff] | IP7[value & 0xff])

def _fp(value):
    return (FP0[value >> 56] | FP1[(value >> 48) & 0xff] |
            FP2[(value >> 40) & 0xff] | FP3[(value >> 32) & 0xff] |
            FP4[(value >> 24) & 0xff] | FP5[(value >> 16) & 0xff] |
            FP6[(value >> 8) & 0xff] | FP7[value & 0xff])

#=========================================================
#key schedule
#=========================================================
def _rotl28(value, count):
    return ((value << count) | (value >> (28 - count))) & 0xfffffff

def _key_schedule(key):
    "generate the 16 48-bit round keys for a 64-bit key"
    cd = _permute(key, PC1, 64)
    c, d = cd >> 28, cd & 0xfffffff
    out = []
    for shift in KEY_SHIFTS:
        c = _rotl28(c, shift)
        d = _rotl28(d, shift)
        out.append(_permute((c << 28) | d, PC2, 56))
    return out

#=========================================================
#salt helpers
#=========================================================
def _salt_to_mask(salt):
    """convert crypt(3) salt to the mask of E-box bits it swaps.

    salt bit 0 controls the most significant bit of each 24-bit half,
    bit 23 the least significant.
    """
    mask = 0
    for idx in range(24):
        if salt & (1 << idx):
            mask |= 1 << (23 - idx)
    return mask

#=========================================================
#public api
#=========================================================
def expand_des_key(key):
    "convert 7 byte key to 8 byte DES key, inserting (ignored) parity bits"
    if isinstance(key, bytes):
        if len(key) != 7:
            raise ValueError("key must be 7 bytes in size")
        key = int.from_bytes(key, "big")
        return expand_des_key(key).to_bytes(8, "big")
    elif not isinstance(key, int):
        raise TypeError("key must be bytes or int")
    if key < 0 or key > INT_56_MASK:
        raise ValueError("key must be 56-bit non-negative integer")
    # spread each 7-bit group across a byte, leaving the low bit as parity.
    return sum(((key >> (7 * idx)) & 0x7f) << (8 * idx + 1)
               for idx in range(8))

def des_encrypt_block(key, input, salt=0, rounds=1):
    """encrypt single block of data using DES, operates on 8-byte strings.

    :arg key:
        DES key as 7 byte string, or 8 byte string with parity bits
        (parity bit values are ignored).

    :arg input:
        plaintext block to encrypt, as 8 byte string.

    :arg salt:
        Optional 24-bit integer used to mutate the E-box.
        This defaults to ``0`` (no mutation).

    :arg rounds:
        Optional number of rounds of to apply the DES key schedule.
        This defaults to ``1``.

    :returns:
        resulting 8-byte ciphertext block.
    """
    key = to_bytes(key, errname="key")
    if len(key) == 7:
        key = expand_des_key(key)
    elif len(key) != 8:
        raise ValueError("key must be 7 or 8 bytes")
    input = to_bytes(input, errname="input")
    if len(input) != 8:
        raise ValueError("input block must be 8 bytes")
    result = des_encrypt_int_block(int.from_bytes(key, "big"),
                                   int.from_bytes(input, "big"),
                                   salt, rounds)
    return result.to_bytes(8, "big")

def des_encrypt_int_block(key, input, salt=0, rounds=1):
    """encrypt single block of data using DES, operates on 64-bit integers.

    this function is essentially the same as :func:`des_encrypt_block`,
    except that it operates on integers, and will NOT automatically
    expand 56-bit keys if provided (since there's no way to detect them).

    :arg key:
        DES key as 64-bit integer (the parity bits are ignored).

    :arg input:
        input block as 64-bit integer

    :arg salt:
        optional 24-bit integer used to mutate the E-box.
        this defaults to ``0`` (no mutation).

    :arg rounds:
        optional number of times to encrypt the block.
        this defaults to ``1``.

    :returns:
        resulting ciphertext as 64-bit integer.
    """
    # validate & unpack key
    if key < 0 or key > INT_64_MASK:
        raise ValueError("key must be 64-bit non-negative integer")
    if input < 0 or input > INT_64_MASK:
        raise ValueError("input must be 64-bit non-negative integer")
    if salt < 0 or salt > INT_24_MASK:
        raise ValueError("salt must be 24-bit non-negative integer")
    if rounds < 1:
        raise ValueError("rounds must be positive integer")
    return mdes_encrypt_int_block(key, input, salt, rounds)

def mdes_encrypt_int_block(key, input, salt=0, rounds=1):
    """encrypt block using the crypt(3) variant of DES.

    this is :func:`des_encrypt_int_block` without the argument checks;
    the (salted) block is encrypted *rounds* times in succession, and
    the final result returned.
    """
    keys = _key_schedule(key)
    mask = _salt_to_mask(salt)

    # the final permutation of one pass and the initial permutation of
    # the next cancel out, so they're only applied at the very ends.
    block = _ip(input)
    l = block >> 32
    r = block & 0xffffffff
    for _ in range(rounds):
        for k in keys:
            # expand r to 48 bits, apply salt swap, mix in round key
            e = E0[r >> 24] | E1[(r >> 16) & 0xff] | E2[(r >> 8) & 0xff] | E3[r & 0xff]
            t = ((e >> 24) ^ e) & mask
            x = e ^ t ^ (t << 24) ^ k
            l, r = r, l ^ (SP0[x >> 42] | SP1[(x >> 36) & 0x3f] |
                           SP2[(x >> 30) & 0x3f] | SP3[(x >> 24) & 0x3f] |
                           SP4[(x >> 18) & 0x3f] | SP5[(x >> 12) & 0x3f] |
                           SP6[(x >> 6) & 0x3f] | SP7[x & 0x3f])
        # undo the final round's swap
        l, r = r, l
    return _fp((l << 32) | r)

#=========================================================
#eof
#=========================================================
