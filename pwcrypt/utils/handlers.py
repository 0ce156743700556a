"""pwcrypt.utils.handlers - framework for implementing password hash handlers"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
from warnings import warn
#site
#libs
from pwcrypt import exc
from pwcrypt.exc import InvalidConfig, PwcryptHashWarning
from pwcrypt.utils import classproperty, consteq, getrandstr, rng, \
                          to_secret, HASH64_CHARS, BCRYPT_CHARS
#pkg
#local
__all__ = [
    # settings bundle
    'HashConfig',

    #framework for implementing handlers
    'GenericHandler',
        'HasManyIdents',
        'HasSalt',
        'HasRounds',

    # parsing helpers
    'parse_mc2',
    'parse_mc3',
    'render_mc2',
    'render_mc3',
]

#=========================================================
#constants
#=========================================================

# common salt_chars & checksum_chars values
H64_CHARS = HASH64_CHARS
BCRYPT64_CHARS = BCRYPT_CHARS

#=========================================================
#identify & parsing helpers
#=========================================================
def to_unicode_for_identify(hash):
    """convert hash to unicode for identify() method.

    :raises TypeError: if hash is not unicode or bytes.
    :returns: unicode string, or ``None`` if bytes weren't ascii.
    """
    if isinstance(hash, str):
        return hash
    elif isinstance(hash, bytes):
        try:
            return hash.decode("ascii")
        except UnicodeDecodeError:
            return None
    else:
        raise exc.ExpectedStringError(hash, "hash")

def to_unicode_for_parse(hash, handler=None):
    """convert hash to unicode for from_string() method.

    :raises TypeError: if hash is not unicode or bytes.
    :raises MalformedHash: if hash is empty, or bytes weren't ascii.
    """
    if isinstance(hash, bytes):
        try:
            hash = hash.decode("ascii")
        except UnicodeDecodeError:
            raise exc.MalformedHashError(handler, "non-ascii bytes")
    elif not isinstance(hash, str):
        raise exc.ExpectedStringError(hash, "hash")
    if not hash:
        raise exc.InvalidHashError(handler)
    return hash

def identify_regexp(hash, pat):
    "identify() helper for matching regexp"
    hash = to_unicode_for_identify(hash)
    return bool(hash) and pat.match(hash) is not None

def parse_mc2(hash, prefix, handler=None, sep="$"):
    "parse hash using 2-part modular crypt format"
    #eg: MD5-Crypt: $1$salt[$checksum]
    hash = to_unicode_for_parse(hash, handler)
    if not hash.startswith(prefix):
        raise exc.InvalidHashError(handler)
    parts = hash[len(prefix):].split(sep)
    if len(parts) == 2:
        salt, chk = parts
        return salt, chk or None
    elif len(parts) == 1:
        return parts[0], None
    else:
        raise exc.MalformedHashError(handler)

def parse_mc3(hash, prefix, handler=None, sep="$"):
    "parse hash using 3-part modular crypt format"
    #eg: SHA1-Crypt: $sha1$rounds$salt[$checksum]
    hash = to_unicode_for_parse(hash, handler)
    if not hash.startswith(prefix):
        raise exc.InvalidHashError(handler)
    parts = hash[len(prefix):].split(sep)
    if len(parts) == 3:
        rounds, salt, chk = parts
        return rounds, salt, chk or None
    elif len(parts) == 2:
        rounds, salt = parts
        return rounds, salt, None
    else:
        raise exc.MalformedHashError(handler)

def parse_int(value, handler=None, param="rounds"):
    "parse decimal integer field, rejecting zero-padded and non-digit values"
    if value.startswith("0") and value != "0":
        raise exc.ZeroPaddedRoundsError(handler)
    if not value.isdigit() or not value.isascii():
        raise exc.MalformedHashError(handler, "bad %s field" % (param,))
    return int(value)

def render_mc2(ident, salt, checksum, sep="$"):
    "format hash using 2-part modular crypt format; inverse of parse_mc2"
    if checksum:
        return "%s%s%s%s" % (ident, salt, sep, checksum)
    else:
        return "%s%s" % (ident, salt)

def render_mc3(ident, rounds, salt, checksum, sep="$"):
    "format hash using 3-part modular crypt format; inverse of parse_mc3"
    if checksum:
        return "%s%s%s%s%s%s" % (ident, rounds, sep, salt, sep, checksum)
    else:
        return "%s%s%s%s" % (ident, rounds, sep, salt)

#=====================================================
#HashConfig
#=====================================================
class HashConfig(object):
    """bundle of settings used to create a new hash via ``hash_with()``.

    Every attribute is optional; any left as ``None`` is filled in
    by the handler (random salt, default rounds, default ident).

    :param salt: salt string, drawn from the handler's salt alphabet.
    :param rounds: rounds / cost value.
    :param ident: identifier prefix (or alias) for handlers with several.
    :param salt_size: size of salt to generate, if *salt* isn't given.
    """
    __slots__ = ("salt", "rounds", "ident", "salt_size")

    def __init__(self, salt=None, rounds=None, ident=None, salt_size=None):
        self.salt = salt
        self.rounds = rounds
        self.ident = ident
        self.salt_size = salt_size

    def to_settings(self):
        "return dict of the settings which were specified"
        return dict((key, getattr(self, key)) for key in self.__slots__
                    if getattr(self, key) is not None)

    def __repr__(self):
        args = ", ".join("%s=%r" % item for item in
                         sorted(self.to_settings().items()))
        return "HashConfig(%s)" % (args,)

    def __eq__(self, other):
        if not isinstance(other, HashConfig):
            return NotImplemented
        return self.to_settings() == other.to_settings()

    def __ne__(self, other):
        result = self.__eq__(other)
        return result if result is NotImplemented else not result

    __hash__ = None

#=====================================================
#GenericHandler
#=====================================================
class GenericHandler(object):
    """helper class for implementing hash handlers.

    :param checksum:
        this should contain the digest portion of a
        parsed hash (mainly provided when the constructor is called
        by :meth:`from_string()`).
        defaults to ``None``.

    :param use_defaults:
        If ``False`` (the default), a :exc:`TypeError` should be thrown
        if any settings required by the handler were not explicitly provided.

        If ``True``, the handler should attempt to provide a default for any
        missing values. This means generate missing salts, fill in default
        cost parameters, etc.

        This is typically only set to ``True`` when the constructor
        is called by :meth:`hash` or :meth:`genconfig`.

    :param relaxed:
        If ``False`` (the default), a :exc:`~pwcrypt.exc.InvalidConfig`
        should be thrown if any settings are out of bounds or otherwise invalid.

        If ``True``, they should be corrected if possible, and a
        :exc:`~pwcrypt.exc.PwcryptHashWarning` issued.
        If not possible, only then should an error be raised.
        (e.g. under ``relaxed=True``, rounds values will be clamped
        to min/max rounds).

        This is only set by :meth:`from_string` when parsing a configuration
        string (no digest) for :meth:`genhash`, since crypt(3) implementations
        are tolerant of incorrect values in those.
        :meth:`hash_with` always parses strictly.

    Class Attributes
    ================

    .. attribute:: ident

        [optional]
        If this attribute is filled in, the default :meth:`identify` method will use
        it as a identifying prefix that can be used to recognize instances of this handler's
        hash. Filling this out is recommended for speed.

    .. attribute:: checksum_size

        [optional]
        Specifies the number of characters that should be expected in the checksum string.
        If omitted, no check will be performed.

    .. attribute:: checksum_chars

        [optional]
        A string listing all the characters allowed in the checksum string.
        If omitted, no check will be performed.

    Instance Attributes
    ===================
    .. attribute:: checksum

        The checksum string as provided by the constructor (after passing it
        through :meth:`_norm_checksum`).

    Required Class Methods
    ======================
    The following methods must be provided by handler subclass:

    .. automethod:: from_string
    .. automethod:: to_string
    .. automethod:: _calc_checksum

    Default Class Methods
    =====================
    The following methods provide generally useful default behaviors,
    though they may be overridden if the hash subclass needs to:

    .. automethod:: _norm_checksum

    .. automethod:: genconfig
    .. automethod:: genhash
    .. automethod:: identify
    .. automethod:: hash
    .. automethod:: hash_with
    .. automethod:: verify

    Verify Policy
    =============
    :meth:`verify` returns ``False`` only when the hash was parsed
    successfully and the digest doesn't match.
    Anything which can't be parsed raises :exc:`~pwcrypt.exc.MalformedHash`,
    and non-string hashes raise :exc:`TypeError`.
    """

    #=====================================================
    #class attr
    #=====================================================
    name = None # required - handler name
    setting_kwds = ()

    ident = None #identifier prefix if known

    checksum_size = None #if specified, _norm_checksum will require this length
    checksum_chars = None #if specified, _norm_checksum() will validate this

    #=====================================================
    #instance attrs
    #=====================================================
    checksum = None # stores checksum

    #=====================================================
    #init
    #=====================================================
    def __init__(self, checksum=None, use_defaults=False, relaxed=False,
                 **kwds):
        self.use_defaults = use_defaults
        self.relaxed = relaxed
        super(GenericHandler, self).__init__(**kwds)
        self.checksum = self._norm_checksum(checksum)

    def _norm_checksum(self, checksum):
        """validates checksum keyword against class requirements,
        returns normalized version of checksum.
        """
        if checksum is None:
            return None

        # normalize to unicode
        if isinstance(checksum, bytes):
            checksum = checksum.decode('ascii')

        # check size
        cc = self.checksum_size
        if cc and len(checksum) != cc:
            raise exc.ChecksumSizeError(self)

        # check charset
        cs = self.checksum_chars
        if cs:
            bad = set(checksum)
            bad.difference_update(cs)
            if bad:
                raise exc.MalformedHashError(self,
                    "invalid characters in checksum: %r" %
                    ("".join(sorted(bad)),))

        return checksum

    #=====================================================
    #password hash api - formatting interface
    #=====================================================
    @classmethod
    def identify(cls, hash):
        #NOTE: subclasses may wish to use faster / simpler identify,
        # and raise errors only when an invalid (but identifiable) string is parsed
        hash = to_unicode_for_identify(hash)
        if not hash:
            return False
        ident = cls.ident
        if ident:
            return hash.startswith(ident)
        # don't have that, so fall back to trying to parse hash
        # (inefficient for these purposes)
        try:
            cls.from_string(hash)
            return True
        except ValueError:
            return False

    @classmethod
    def from_string(cls, hash, strict=False): #pragma: no cover
        """return parsed instance from hash/configuration string

        :param strict:
            if ``True``, configuration strings are validated the same
            way as explicit settings, instead of being parsed in relaxed mode.

        :raises MalformedHash: if hash is incorrectly formatted

        :returns:
            hash parsed into components,
            for formatting / calculating checksum.
        """
        raise NotImplementedError("%s must implement from_string()" % (cls,))

    @classmethod
    def _from_parsed(cls, strict=False, **kwds):
        """helper for from_string(): construct instance from parsed components.

        configuration strings (no checksum) are parsed in relaxed mode,
        unless *strict* is set; any setting that's still invalid is
        reported as a malformed hash. under *strict*, invalid settings
        raise :exc:`~pwcrypt.exc.InvalidConfig` unchanged.
        """
        if strict:
            return cls(relaxed=False, **kwds)
        kwds.setdefault("relaxed", not kwds.get("checksum"))
        try:
            return cls(**kwds)
        except InvalidConfig as err:
            raise exc.MalformedHashError(cls, str(err))

    def to_string(self): #pragma: no cover
        """render instance to hash or configuration string

        :returns:
            if :attr:`checksum` is set, should return full hash string.
            if not, should return abbreviated configuration string.
        """
        raise NotImplementedError("%s must implement to_string()" % (type(self),))

    #=========================================================
    #'crypt-style' interface (default implementation)
    #=========================================================
    @classmethod
    def genconfig(cls, **settings):
        "return configuration string encoding settings for hash"
        return cls(use_defaults=True, **settings).to_string()

    @classmethod
    def genhash(cls, secret, config):
        "generate hash for secret, using settings from configuration or hash string"
        return cls._hash_from_string(secret, config, False)

    @classmethod
    def _hash_from_string(cls, secret, config, strict):
        "helper for genhash() & hash_with(): parse config string, then hash secret"
        secret = to_secret(secret)
        if config is None:
            raise TypeError("no config string specified")
        self = cls.from_string(config, strict=strict)
        self.checksum = self._calc_checksum(secret)
        return self.to_string()

    def _calc_checksum(self, secret): #pragma: no cover
        "given secret (as bytes); calculate and return encoded checksum portion of hash string, taking config from object state"
        raise NotImplementedError("%s must implement _calc_checksum()" % (self.__class__,))

    #=========================================================
    #'application' interface (default implementation)
    #=========================================================
    @classmethod
    def hash(cls, secret, **settings):
        "hash secret, using default values for any settings not specified"
        secret = to_secret(secret)
        self = cls(use_defaults=True, **settings)
        self.checksum = self._calc_checksum(secret)
        return self.to_string()

    @classmethod
    def hash_with(cls, secret, config):
        """hash secret using an explicit configuration.

        :arg config:
            a :class:`HashConfig` instance, a dict of settings,
            or a configuration / hash string (as accepted by :meth:`genhash`,
            but parsed strictly: out of range values are never clamped).

        :raises InvalidConfig:
            if the config names a setting the handler doesn't support,
            or a value outside the handler's limits.
        """
        if isinstance(config, (str, bytes)):
            return cls._hash_from_string(secret, config, True)
        if isinstance(config, HashConfig):
            settings = config.to_settings()
        elif isinstance(config, dict):
            settings = dict(config)
        else:
            raise exc.ExpectedTypeError(config, "HashConfig, dict, or str",
                                        "config")
        for key in settings:
            if key not in cls.setting_kwds and key != "salt_size":
                raise InvalidConfig("%s does not support the %r setting" %
                                    (cls.name, key))
        if "salt_size" in settings and "salt" not in cls.setting_kwds:
            raise InvalidConfig("%s does not support the 'salt_size' setting"
                                % (cls.name,))
        return cls.hash(secret, **settings)

    @classmethod
    def verify(cls, secret, hash):
        "verify secret against hash, returns ``True`` if correct"
        secret = to_secret(secret)
        if hash is None:
            raise TypeError("no hash specified")
        self = cls.from_string(hash)
        chk = self.checksum
        if chk is None:
            raise exc.MissingDigestError(cls)
        return consteq(self._calc_checksum(secret), chk)

    #=========================================================
    #eoc
    #=========================================================

#=====================================================
#GenericHandler mixin classes
#=====================================================
class HasManyIdents(GenericHandler):
    """mixin for hashes which use multiple prefix identifiers

    For the hashes which may use multiple identifier prefixes,
    this mixin adds an ``ident`` keyword to constructor.
    Any value provided is passed through the :meth:`_norm_ident` method,
    which takes care of validating the identifier,
    as well as allowing aliases for easier specification
    of the identifiers by the user.
    """

    #=========================================================
    #class attrs
    #=========================================================
    default_ident = None #: should be unicode
    ident_values = None #: should be list of unicode strings
    ident_aliases = None #: should be dict of unicode -> unicode

    #=========================================================
    #instance attrs
    #=========================================================
    ident = None

    #=========================================================
    #init
    #=========================================================
    def __init__(self, ident=None, **kwds):
        super(HasManyIdents, self).__init__(**kwds)
        self.ident = self._norm_ident(ident)

    def _norm_ident(self, ident):
        # fill in default identifier
        if ident is None:
            if not self.use_defaults:
                raise TypeError("no ident specified")
            ident = self.default_ident
            assert ident is not None, "class must define default_ident"

        # handle unicode
        if isinstance(ident, bytes):
            ident = ident.decode('ascii')
        elif not isinstance(ident, str):
            raise exc.ExpectedStringError(ident, "ident")

        # check if identifier is valid
        iv = self.ident_values
        if ident in iv:
            return ident

        # resolve aliases, and recheck against ident_values
        ia = self.ident_aliases
        if ia:
            value = ia.get(ident)
            if value in iv:
                return value

        # failure!
        raise InvalidConfig("invalid %s ident: %r" % (self.name, ident))

    #=========================================================
    #password hash api
    #=========================================================
    @classmethod
    def identify(cls, hash):
        hash = to_unicode_for_identify(hash)
        return bool(hash) and hash.startswith(tuple(cls.ident_values))

    @classmethod
    def _parse_ident(cls, hash):
        """extract ident prefix from hash, helper for subclasses' from_string()

        :returns: ``(ident, remainder)``
        """
        hash = to_unicode_for_parse(hash, cls)
        for ident in cls.ident_values:
            if hash.startswith(ident):
                return ident, hash[len(ident):]
        raise exc.InvalidHashError(cls)

    #=========================================================
    #eoc
    #=========================================================

class HasSalt(GenericHandler):
    """mixin for validating salts.

    This :class:`GenericHandler` mixin adds a ``salt`` keyword to the class constuctor;
    any value provided is passed through the :meth:`_norm_salt` method,
    which takes care of validating salt length and content,
    as well as generating new salts if one it not provided.

    :param salt: optional salt string
    :param salt_size: optional size of salt (only used if no salt provided); defaults to :attr:`default_salt_size`.

    Class Attributes
    ================
    In order for :meth:`!_norm_salt` to do it's job, the following
    attributes must be provided by the handler subclass:

    .. attribute:: min_salt_size

        [required]
        The minimum number of characters allowed in a salt string.
        An :exc:`InvalidConfig` will be throw if the salt is too small.

    .. attribute:: max_salt_size

        [required]
        The maximum number of characters allowed in a salt string.
        An :exc:`InvalidConfig` will be throw if the salt is too large,
        unless ``relaxed=True`` (configuration strings), in which case
        it's truncated and a warning issued.

    .. attribute:: default_salt_size

        [optional]
        If no salt is provided, this should specify the size of the salt
        that will be generated by :meth:`_generate_salt`.
        If this is not specified, it will default to :attr:`max_salt_size`.

    .. attribute:: salt_chars

        [required]
        A string containing all the characters which are allowed in the salt string.
        An :exc:`InvalidConfig` will be throw if any other characters are encountered.

    .. attribute:: default_salt_chars

        [optional]
        This attribute controls the set of characters use to generate
        *new* salt strings. By default, it mirrors :attr:`salt_chars`.

    Instance Attributes
    ===================
    .. attribute:: salt

        This instance attribute will be filled in with the salt provided
        to the constructor (as adapted by :meth:`_norm_salt`)
    """
    #=========================================================
    #class attrs
    #=========================================================
    min_salt_size = None
    max_salt_size = None
    salt_chars = None

    @classproperty
    def default_salt_size(cls):
        "default salt chars (defaults to max_salt_size if not specified by subclass)"
        return cls.max_salt_size

    @classproperty
    def default_salt_chars(cls):
        "required - set of characters used to generate *new* salt strings (defaults to salt_chars)"
        return cls.salt_chars

    #=========================================================
    #instance attrs
    #=========================================================
    salt = None

    #=========================================================
    #init
    #=========================================================
    def __init__(self, salt=None, salt_size=None, **kwds):
        super(HasSalt, self).__init__(**kwds)
        self.salt = self._norm_salt(salt, salt_size=salt_size)

    def _norm_salt(self, salt, salt_size=None):
        """helper to normalize & validate user-provided salt string

        If no salt provided, a random salt is generated
        using :attr:`default_salt_size` and :attr:`default_salt_chars`.

        :arg salt: salt string or ``None``
        :param salt_size: optionally specified size of autogenerated salt

        :raises TypeError:
            If salt not provided and ``use_defaults=False``.

        :raises InvalidConfig:

            * if salt contains chars that aren't in :attr:`salt_chars`.
            * if salt contains less than :attr:`min_salt_size` characters.
            * if ``relaxed=False`` and salt has more than :attr:`max_salt_size`
              characters (if ``relaxed=True``, the salt is truncated
              and a warning is issued instead).

        :returns:
            normalized or generated salt
        """
        # generate new salt if none provided
        if salt is None:
            if not self.use_defaults:
                raise TypeError("no salt specified")
            if salt_size is None:
                salt_size = self.default_salt_size
            elif not isinstance(salt_size, int) or isinstance(salt_size, bool):
                raise exc.ExpectedTypeError(salt_size, "int", "salt_size")
            if salt_size < 0:
                raise InvalidConfig("salt_size must be >= 0")
            salt = self._generate_salt(salt_size)

        # check type
        if not isinstance(salt, str):
            if isinstance(salt, bytes):
                try:
                    salt = salt.decode("ascii")
                except UnicodeDecodeError:
                    raise InvalidConfig("invalid characters in %s salt" %
                                        (self.name,))
            else:
                raise exc.ExpectedStringError(salt, "salt")

        # check charset
        sc = self.salt_chars
        if sc is not None:
            bad = set(salt)
            bad.difference_update(sc)
            if bad:
                raise InvalidConfig("invalid characters in %s salt: %r" %
                                    (self.name, "".join(sorted(bad))))

        # check min size
        mn = self.min_salt_size
        if mn and len(salt) < mn:
            msg = "salt too small (%s requires %s %d chars)" % (self.name,
                        "exactly" if mn == self.max_salt_size else ">=", mn)
            raise InvalidConfig(msg)

        # check max size
        mx = self.max_salt_size
        if mx is not None and len(salt) > mx:
            msg = "salt too large (%s requires %s %d chars)" % (self.name,
                        "exactly" if mx == mn else "<=", mx)
            if self.relaxed:
                warn(msg, PwcryptHashWarning)
                salt = salt[:mx]
            else:
                raise InvalidConfig(msg)

        return salt

    def _generate_salt(self, salt_size):
        """helper method for _norm_salt(); generates a new random salt string.
        :arg salt_size: salt size to generate
        """
        return getrandstr(rng, self.default_salt_chars, salt_size)

    #=========================================================
    #eoc
    #=========================================================

class HasRounds(GenericHandler):
    """mixin for validating rounds parameter

    This :class:`GenericHandler` mixin adds a ``rounds`` keyword to the class constuctor;
    any value provided is passed through the :meth:`_norm_rounds` method,
    which takes care of validating the number of rounds.

    :param rounds: optional number of rounds hash should use

    Class Attributes
    ================
    In order for :meth:`!_norm_rounds` to do it's job, the following
    attributes must be provided by the handler subclass:

    .. attribute:: min_rounds

        The minimum number of rounds allowed.
        An :exc:`InvalidConfig` will be thrown if the rounds value is too small,
        unless ``relaxed=True``, in which case it's clamped with a warning.
        Defaults to ``0``.

    .. attribute:: max_rounds

        [required]
        The maximum number of rounds allowed.
        Handled the same way as :attr:`min_rounds`.

    .. attribute:: default_rounds

        [required]
        If no rounds value is provided to constructor, this value will be used.

    .. attribute:: rounds_cost

        [required]
        The ``rounds`` parameter typically encodes a cpu-time cost
        for calculating a hash. This should be set to ``"linear"``
        (the default) or ``"log2"``, depending on how the rounds value relates
        to the actual amount of time that will be required.

    Instance Attributes
    ===================
    .. attribute:: rounds

        This instance attribute will be filled in with the rounds value provided
        to the constructor (as adapted by :meth:`_norm_rounds`)
    """
    #=========================================================
    #class attrs
    #=========================================================
    min_rounds = 0
    max_rounds = None
    default_rounds = None
    rounds_cost = "linear" # default to the common case

    #=========================================================
    #instance attrs
    #=========================================================
    rounds = None

    #=========================================================
    #init
    #=========================================================
    def __init__(self, rounds=None, **kwds):
        super(HasRounds, self).__init__(**kwds)
        self.rounds = self._norm_rounds(rounds)

    def _norm_rounds(self, rounds):
        """helper routine for normalizing rounds

        :arg rounds: rounds integer or ``None``

        :raises TypeError:
            * if rounds is ``None`` and ``use_defaults=False``.
            * if rounds is not an integer.

        :raises InvalidConfig:
            * if rounds is outside bounds of :attr:`min_rounds`
              and :attr:`max_rounds`, and ``relaxed=False``.

        if rounds are outside bounds and ``relaxed=True``,
        rounds are clipped as appropriate, but a warning is issued.

        :returns:
            normalized rounds value
        """
        # fill in default
        if rounds is None:
            if not self.use_defaults:
                raise TypeError("no rounds specified")
            rounds = self._generate_rounds()

        # check type
        if not isinstance(rounds, int) or isinstance(rounds, bool):
            raise exc.ExpectedTypeError(rounds, "integer", "rounds")

        # check bounds
        mn = self.min_rounds
        if rounds < mn:
            msg = "rounds too low (%s requires >= %d rounds)"  % (self.name, mn)
            if self.relaxed:
                warn(msg, PwcryptHashWarning)
                rounds = mn
            else:
                raise InvalidConfig(msg)

        mx = self.max_rounds
        if mx and rounds > mx:
            msg = "rounds too high (%s requires <= %d rounds)"  % (self.name, mx)
            if self.relaxed:
                warn(msg, PwcryptHashWarning)
                rounds = mx
            else:
                raise InvalidConfig(msg)

        return rounds

    @classmethod
    def _generate_rounds(cls):
        "return rounds value to use when none is specified"
        rounds = cls.default_rounds
        if rounds is None:
            raise TypeError("%s rounds value must be specified explicitly"
                            % (cls.name,))
        return rounds

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
# eof
#=========================================================
