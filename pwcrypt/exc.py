"""pwcrypt.exc -- exceptions & warnings raised by pwcrypt"""
#==========================================================================
# exceptions
#==========================================================================
class InvalidConfig(ValueError):
    """Error raised when a caller-supplied setting (salt, rounds, ident)
    is outside the range or character set allowed by a hash.

    It is raised before any hashing work is done, and the offending value
    is never silently clamped. Settings parsed out of a bare configuration
    string are the one exception: see :exc:`PwcryptHashWarning`.
    """

class MalformedHash(ValueError):
    """Error raised when a hash string was recognized by a handler
    (or by :mod:`pwcrypt.unix`) but could not be parsed: wrong length,
    characters outside the hash's alphabet, out-of-range rounds,
    or a missing digest.

    ``verify()`` raises this instead of returning ``False``,
    so callers can tell a wrong password from a corrupt hash.
    """

class UnknownAlgorithm(ValueError):
    """Error raised by :mod:`pwcrypt.unix` when a hash string
    doesn't match the prefix of any known algorithm."""

class InvalidEncoding(ValueError):
    """Error raised by :class:`~pwcrypt.utils.Base64Engine` when decoding
    input containing characters outside the engine's alphabet,
    or whose length can't be produced by the encoder."""

class PasswordSizeError(ValueError):
    """Error raised if the password provided exceeds the limit set by pwcrypt.

    Many password hashes take proportionately larger amounts of
    time and/or memory depending on the size of the password provided.
    Because of this, pwcrypt rejects passwords larger than
    :data:`pwcrypt.utils.MAX_PASSWORD_SIZE` bytes.
    """
    def __init__(self):
        ValueError.__init__(self, "password exceeds maximum allowed size")

class NullPasswordError(ValueError):
    """Error raised if a hash which treats the password as a C string
    (des-crypt family, bcrypt) is given a password containing a NUL byte.

    The C implementations would silently stop reading at the NUL,
    so everything after it would be ignored.
    """
    def __init__(self, handler=None):
        ValueError.__init__(self, "%s does not allow NUL bytes in password" %
                            _get_name(handler))

#==========================================================================
# warnings
#==========================================================================
class PwcryptWarning(UserWarning):
    """base class for pwcrypt's user warnings"""

class PwcryptHashWarning(PwcryptWarning):
    """Warning issued when a configuration string contained a value
    which had to be corrected before it could be used.

    This occurs when a setting string passed to ``genhash()`` / ``crypt()``
    contains a rounds value outside the hash's limits (it's clamped,
    as glibc does), an overlong salt (it's truncated),
    or non-zero padding bits in a bcrypt salt (they're cleared).
    """

class PwcryptSecurityWarning(PwcryptWarning):
    """Special warning issued when pwcrypt is asked to generate a hash
    using a setting known to weaken it (such as an even number of
    bsdi_crypt rounds)."""

#==========================================================================
# error constructors
#
# note: these functions are used by the handlers to build common
# error messages. they return the exception rather than raising it,
# so the raise statement stays visible at the call site.
#==========================================================================

def _get_name(handler):
    return handler.name if handler else "<unnamed>"

#----------------------------------------------------------------
# hash/verify parameter errors
#----------------------------------------------------------------
def type_name(value):
    "return pretty-printed string containing name of value's type"
    cls = value.__class__
    if cls.__module__ and cls.__module__ not in ["__builtin__", "builtins"]:
        return "%s.%s" % (cls.__module__, cls.__name__)
    elif value is None:
        return 'None'
    else:
        return cls.__name__

def ExpectedTypeError(value, expected, param):
    "error message when param was supposed to be one type, but found another"
    # NOTE: value is never displayed, since it may sometimes be a password.
    name = type_name(value)
    return TypeError("%s must be %s, not %s" % (param, expected, name))

def ExpectedStringError(value, param):
    "error message when param was supposed to be unicode or bytes"
    return ExpectedTypeError(value, "unicode or bytes", param)

def MissingDigestError(handler=None):
    "raised when verify() method gets passed config string instead of hash"
    name = _get_name(handler)
    return MalformedHash("expected %s hash, got %s config string instead" %
                         (name, name))

#----------------------------------------------------------------
# errors when parsing hashes
#----------------------------------------------------------------
def InvalidHashError(handler=None):
    "error raised if unrecognized hash provided to handler"
    return MalformedHash("not a valid %s hash" % _get_name(handler))

def MalformedHashError(handler=None, reason=None):
    "error raised if recognized-but-malformed hash provided to handler"
    text = "malformed %s hash" % _get_name(handler)
    if reason:
        text = "%s (%s)" % (text, reason)
    return MalformedHash(text)

def ZeroPaddedRoundsError(handler=None):
    "error raised if hash was recognized but contained zero-padded rounds field"
    return MalformedHashError(handler, "zero-padded rounds")

#----------------------------------------------------------------
# settings / hash component errors
#----------------------------------------------------------------
def ChecksumSizeError(handler):
    "error raised if hash was recognized, but checksum was wrong size"
    return MalformedHash("checksum wrong size (%s checksum must be "
                         "exactly %d chars)" % (handler.name,
                                                handler.checksum_size))

#==========================================================================
# eof
#==========================================================================
