"""helpers for pwcrypt unittests"""
#=========================================================
#imports
#=========================================================
#core
import logging; log = logging.getLogger(__name__)
import re
import sys
import unittest
import warnings
from warnings import catch_warnings
#site
#pkg
from pwcrypt import exc
from pwcrypt.exc import InvalidConfig, MalformedHash, PasswordSizeError, \
                        PwcryptHashWarning
from pwcrypt.utils import classproperty, rng, repeat_string, MAX_PASSWORD_SIZE
import pwcrypt.utils.handlers as uh
#local
__all__ = [
    'TestCase',
    'HandlerCase',
    'reset_warnings',
]

#=========================================================
#custom test base
#=========================================================
class TestCase(unittest.TestCase):
    """pwcrypt-specific test case class

    this class adds a number of features to the standard TestCase...
    * common prefix for all test descriptions
    * resets warnings filter & registry for every test
    * tweaks to message formatting
    * __msg__ kwd added to assertRaises()
    * methods for matching against warnings
    """
    #====================================================================
    # add various custom features
    #====================================================================

    #----------------------------------------------------------------
    # make it easy for test cases to add common prefix to shortDescription
    #----------------------------------------------------------------

    # string prepended to all tests in TestCase
    descriptionPrefix = None

    def shortDescription(self):
        "wrap shortDescription() method to prepend descriptionPrefix"
        desc = super(TestCase, self).shortDescription()
        prefix = self.descriptionPrefix
        if prefix:
            desc = "%s: %s" % (prefix, desc or str(self))
        return desc

    #----------------------------------------------------------------
    # hack things so unittest & pytest both skip subclasses who have
    # "__unittest_skip=True" set, or whose names start with "_"
    #----------------------------------------------------------------
    @classproperty
    def __unittest_skip__(cls):
        name = cls.__name__
        return name.startswith("_") or \
               getattr(cls, "_%s__unittest_skip" % name, False)

    @classproperty
    def __test__(cls):
        # pytest checks this attr when collecting
        return not cls.__unittest_skip__

    # flag to skip *this* class
    __unittest_skip = True

    #----------------------------------------------------------------
    # reset warning filters & registry before each test
    #----------------------------------------------------------------

    # flag to enable this feature
    resetWarningState = True

    def setUp(self):
        super(TestCase, self).setUp()
        self.setUpWarnings()

    def setUpWarnings(self):
        if self.resetWarningState:
            ctx = reset_warnings()
            ctx.__enter__()
            self.addCleanup(ctx.__exit__)

    #----------------------------------------------------------------
    # tweak message formatting so longMessage mode is only enabled
    # if msg ends with ":", and turn on longMessage by default.
    #----------------------------------------------------------------
    longMessage = True

    def _formatMessage(self, msg, std):
        if self.longMessage and msg and msg.rstrip().endswith(":"):
            return '%s %s' % (msg.rstrip(), std)
        else:
            return msg or std

    #----------------------------------------------------------------
    # override assertRaises() to support '__msg__' keyword
    #----------------------------------------------------------------
    def assertRaises(self, _exc_type, _callable=None, *args, **kwds):
        msg = kwds.pop("__msg__", None)
        if _callable is None:
            return super(TestCase, self).assertRaises(_exc_type, *args, **kwds)
        try:
            result = _callable(*args, **kwds)
        except _exc_type:
            return
        std = "function returned %r, expected it to raise %r" % (result,
                                                                 _exc_type)
        raise self.failureException(self._formatMessage(msg, std))

    #============================================================
    # custom methods for matching warnings
    #============================================================
    def assertWarning(self, warning, message_re=None, message=None,
                      category=None, msg=None):
        "check if WarningMessage instance (as returned by catch_warnings) matches parameters"
        if hasattr(warning, "category"):
            # resolve WarningMessage -> Warning
            warning = warning.message
        if message:
            self.assertEqual(str(warning), message, msg)
        if message_re:
            self.assertRegex(str(warning), message_re, msg)
        if category:
            self.assertIsInstance(warning, category, msg)

    def assertWarningList(self, wlist, desc=None, msg=None):
        """check that warning list (e.g. from catch_warnings) matches pattern"""
        if not isinstance(desc, (list,tuple)):
            desc = [] if desc is None else [desc]
        for idx, entry in enumerate(desc):
            if isinstance(entry, str):
                entry = dict(message_re=entry)
            elif isinstance(entry, type) and issubclass(entry, Warning):
                entry = dict(category=entry)
            elif not isinstance(entry, dict):
                raise TypeError("entry must be str, warning, or dict")
            try:
                data = wlist[idx]
            except IndexError:
                break
            self.assertWarning(data, msg=msg, **entry)
        else:
            if len(wlist) == len(desc):
                return
        std = "expected %d warnings, found %d: wlist=%s desc=%r" % \
                (len(desc), len(wlist), self._formatWarningList(wlist), desc)
        raise self.failureException(self._formatMessage(msg, std))

    def consumeWarningList(self, wlist, *args, **kwds):
        """assertWarningList() variant that clears list afterwards"""
        self.assertWarningList(wlist, *args, **kwds)
        del wlist[:]

    def _formatWarningList(self, wlist):
        return "[%s]" % ", ".join("<%s %r>" % (type(entry.message).__name__,
                                              str(entry.message))
                                  for entry in wlist)

    #============================================================
    #eoc
    #============================================================

#=========================================================
#handler test base
#=========================================================

#: list of rounds_cost constants
rounds_cost_values = [ "linear", "log2" ]

def has_rounds_info(handler):
    "check if handler provides the optional rounds information attributes"
    return 'rounds' in handler.setting_kwds and getattr(handler, "min_rounds", None) is not None

def has_salt_info(handler):
    "check if handler provides the optional salt information attributes"
    return 'salt' in handler.setting_kwds and getattr(handler, "min_salt_size", None) is not None

class HandlerCase(TestCase):
    """base class for testing password hash handlers (pwcrypt.utils.handlers subclasses)

    In order to use this to test a handler,
    create a subclass with the attributes listed below filled in,
    and run the subclass via unittest / pytest.
    """
    #=========================================================
    # attrs to be filled in by subclass for testing specific handler
    #=========================================================

    #--------------------------------------------------
    # handler setup
    #--------------------------------------------------

    # specify handler object here (required)
    handler = None

    # settings passed to every hash() call made by the generic tests,
    # mainly used to keep rounds low for the expensive hashes
    fast_settings = {}

    #--------------------------------------------------
    # test vectors
    #--------------------------------------------------

    # list of (secret, hash) tuples which are known to be correct
    known_correct_hashes = []

    # list of (config, secret, hash) tuples are known to be correct
    known_correct_configs = []

    # list of (alt_hash, secret, hash) tuples, where alt_hash is a hash
    # using an alternate representation that should be recognized and verify
    # correctly, but should be corrected to match hash when passed through
    # genhash()
    known_alternate_hashes = []

    # hashes so malformed they aren't even identified properly
    known_unidentified_hashes = []

    # hashes which are identifiable but malformed - they should identify()
    # as True, but cause MalformedHash when passed to genhash/verify.
    known_malformed_hashes = []

    # list of (handler name, hash) pairs for other algorithm's hashes that
    # handler shouldn't identify as belonging to it.
    # (if handler name in list, that entry is checked as a valid hash instead)
    known_other_hashes = [
        ('unix_crypt', '6f8c114b58f2c'),
        ('bsdi_crypt', '_J9..CCCCXBrJUJV154M'),
        ('md5_crypt', '$1$dOHYPKoP$tnxS1T8Q6VVn3kpV8cN6o.'),
        ('bcrypt', '$2a$05$CCCCCCCCCCCCCCCCCCCCC.E5YPO9kmyuRGyh0XouQYb4YMJKvyOeW'),
        ('sha512_crypt', "$6$rounds=123456$asaltof16chars..$BtCwjqMJGx5hrJhZywW"
         "vt0RLE8uZ4oPwcelCjmw2kSYu.Ec6ycULevoBK25fs2xXgMNrCzIMVcgEJAstJeonj1"),
    ]

    # passwords used to test basic hash behavior - generally
    # don't need to be overidden.
    stock_passwords = [
        "test",
        "€¥$",
        b'\xe2\x82\xac\xc2\xa5$'
    ]

    #--------------------------------------------------
    # option flags
    #--------------------------------------------------

    # maximum number of chars which hash will include in digest.
    # ``None`` (the default) indicates the hash uses ALL of the password.
    secret_size = None

    # whether the hash rejects passwords containing NUL bytes
    secret_rejects_null = False

    #=========================================================
    # alg interface helpers - allows subclass to overide how
    # default tests invoke the handler
    #=========================================================
    def do_hash(self, secret, **kwds):
        "call handler's hash method with specified options"
        settings = dict(self.fast_settings)
        settings.update(kwds)
        return self.handler.hash(secret, **settings)

    def do_hash_with(self, secret, config):
        "call handler's hash_with method"
        return self.handler.hash_with(secret, config)

    def do_verify(self, secret, hash):
        "call handler's verify method"
        return self.handler.verify(secret, hash)

    def do_identify(self, hash):
        "call handler's identify method"
        return self.handler.identify(hash)

    def do_genconfig(self, **kwds):
        "call handler's genconfig method with specified options"
        return self.handler.genconfig(**kwds)

    def do_genhash(self, secret, config):
        "call handler's genhash method"
        return self.handler.genhash(secret, config)

    #=========================================================
    # support
    #=========================================================
    @classmethod
    def iter_known_hashes(cls):
        "iterate through known (secret, hash) pairs"
        for secret, hash in cls.known_correct_hashes:
            yield secret, hash
        for config, secret, hash in cls.known_correct_configs:
            yield secret, hash
        for alt, secret, hash in cls.known_alternate_hashes:
            yield secret, hash

    def get_sample_hash(self):
        "test random sample secret/hash pair"
        known = list(self.iter_known_hashes())
        return rng.choice(known)

    def check_verify(self, secret, hash, msg=None, negate=False):
        "helper to check verify() outcome"
        result = self.do_verify(secret, hash)
        self.assertTrue(result is True or result is False,
                        "verify() returned non-boolean value: %r" % (result,))
        if negate:
            if not result:
                return
            if not msg:
                msg = ("verify incorrectly returned True: secret=%r, hash=%r" %
                       (secret, hash))
            raise self.failureException(msg)
        else:
            if result:
                return
            if not msg:
                msg = "verify failed: secret=%r, hash=%r" % (secret, hash)
            raise self.failureException(msg)

    def check_returned_native_str(self, result, func_name):
        self.assertIsInstance(result, str,
            "%s() failed to return native string: %r" % (func_name, result,))

    #=========================================================
    # internal class attrs
    #=========================================================
    __unittest_skip = True

    @property
    def descriptionPrefix(self):
        return self.handler.name

    #=========================================================
    # basic tests
    #=========================================================
    def test_01_required_attributes(self):
        "validate required attributes"
        handler = self.handler
        def ga(name):
            return getattr(handler, name, None)

        #
        # name should be a str, and valid
        #
        name = ga("name")
        self.assertTrue(name, "name not defined:")
        self.assertIsInstance(name, str, "name must be native str")
        self.assertTrue(name.lower() == name, "name not lower-case:")
        self.assertTrue(re.match("^[a-z0-9_]+$", name),
                        "name must be alphanum + underscore: %r" % (name,))

        #
        # setting_kwds should be a tuple
        #
        settings = ga("setting_kwds")
        self.assertIsInstance(settings, tuple, "setting_kwds must be a tuple:")

    def test_02_config_workflow(self):
        """test basic config-string workflow

        this tests that genconfig() returns the expected types,
        and that identify() and genhash() handle the result correctly.
        """
        config = self.do_genconfig(**self.fast_settings)
        self.check_returned_native_str(config, "genconfig")

        # genhash() should always accept genconfig()'s output
        result = self.do_genhash('stub', config)
        self.check_returned_native_str(result, "genhash")

        # verify() should never accept config strings
        self.assertRaises(MalformedHash, self.do_verify, 'stub', config,
            __msg__="verify() failed to reject genconfig() output: %r" %
            (config,))

        # identify() should positively identify config strings
        self.assertTrue(self.do_identify(config),
            "identify() failed to identify genconfig() output: %r" %
            (config,))

    def test_03_hash_workflow(self):
        """test basic hash-string workflow.

        this tests that hash()'s hashes are accepted
        by verify() and identify(), and regenerated correctly by genhash().
        the test is run against a couple of different stock passwords.
        """
        wrong_secret = 'stub'
        for secret in self.stock_passwords:

            # hash() should generate native str hash
            result = self.do_hash(secret)
            self.check_returned_native_str(result, "hash")

            # verify() should work only against secret
            self.check_verify(secret, result)
            self.check_verify(wrong_secret, result, negate=True)

            # genhash() should reproduce original hash
            other = self.do_genhash(secret, result)
            self.check_returned_native_str(other, "genhash")
            self.assertEqual(other, result, "genhash() failed to reproduce "
                             "hash: secret=%r hash=%r: result=%r" %
                             (secret, result, other))

            # genhash() should NOT reproduce original hash for wrong password
            other = self.do_genhash(wrong_secret, result)
            self.assertNotEqual(other, result, "genhash() duplicated "
                             "hash: secret=%r hash=%r wrong_secret=%r: result=%r" %
                             (secret, result, wrong_secret, other))

            # identify() should positively identify hash
            self.assertTrue(self.do_identify(result))

    def test_04_hash_types(self):
        "test hashes can be unicode or bytes"
        result = self.do_hash(b'stub')
        self.check_returned_native_str(result, "hash")

        raw = result.encode("ascii")
        self.check_verify('stub', raw)
        self.check_verify(b'stub', raw)

        other = self.do_genhash(b'stub', raw)
        self.check_returned_native_str(other, "genhash")
        self.assertEqual(other, result)

        self.assertTrue(self.do_identify(raw))

    def test_05_hash_with(self):
        "test hash_with() accepts HashConfig, dict & config strings"
        handler = self.handler
        settings = dict(self.fast_settings)
        config = self.do_genconfig(**settings)

        # config string: same as genhash()
        result = self.do_hash_with('stub', config)
        self.check_returned_native_str(result, "hash_with")
        self.assertEqual(result, self.do_genhash('stub', config))
        self.check_verify('stub', result)

        # HashConfig / dict built from the parsed config should agree
        parsed = handler.from_string(config)
        for key in ("salt", "rounds", "ident"):
            if key in handler.setting_kwds:
                settings[key] = getattr(parsed, key)
        for cfg in [uh.HashConfig(**settings), settings]:
            other = self.do_hash_with('stub', cfg)
            self.check_verify('stub', other)
            self.assertEqual(handler.from_string(other).checksum,
                             handler.from_string(result).checksum)

        # unsupported settings are rejected
        unsupported = [key for key in ("rounds", "ident")
                       if key not in handler.setting_kwds]
        for key in unsupported:
            self.assertRaises(InvalidConfig, self.do_hash_with, 'stub',
                              {key: 1 if key == "rounds" else "$x$"})
        self.assertRaises(InvalidConfig, self.do_hash_with, 'stub',
                          dict(bogus=1))

        # other types are rejected
        self.assertRaises(TypeError, self.do_hash_with, 'stub', 1)

    #==============================================================
    # salts
    #==============================================================
    def require_salt(self):
        if 'salt' not in self.handler.setting_kwds:
            raise self.skipTest("handler doesn't have salt")

    def require_salt_info(self):
        self.require_salt()
        if not has_salt_info(self.handler):
            raise self.skipTest("handler doesn't provide salt info")

    def prepare_salt(self, salt):
        "hook for handlers which restrict salt values beyond salt_chars"
        return salt

    def test_10_optional_salt_attributes(self):
        "validate optional salt attributes"
        self.require_salt_info()

        AssertionError = self.failureException
        cls = self.handler

        #check max_salt_size
        if cls.max_salt_size < 1:
            raise AssertionError("max_salt_chars must be >= 1")

        #check min_salt_size
        if cls.min_salt_size < 0:
            raise AssertionError("min_salt_chars must be >= 0")
        if cls.min_salt_size > cls.max_salt_size:
            raise AssertionError("min_salt_chars must be <= max_salt_chars")

        #check default_salt_size
        if cls.default_salt_size < cls.min_salt_size:
            raise AssertionError("default_salt_size must be >= min_salt_size")
        if cls.default_salt_size > cls.max_salt_size:
            raise AssertionError("default_salt_size must be <= max_salt_size")

        #check default_salt_chars is subset of salt_chars
        for c in cls.default_salt_chars:
            if c not in cls.salt_chars:
                raise AssertionError("default_salt_chars must be subset of salt_chars: %r not in salt_chars" % (c,))

    def test_11_unique_salt(self):
        "test hash() / genconfig() creates new salt each time"
        self.require_salt()
        # odds of two identical salts are at most 1 in 4096 (unix_crypt),
        # so a handful of samples rules out false positives.
        samples = 3
        def sampler(func):
            value1 = func()
            for i in range(samples):
                value2 = func()
                if value1 != value2:
                    return
            raise self.failureException("failed to find different salt after "
                                        "%d samples" % (samples,))
        sampler(lambda: self.do_genconfig(**self.fast_settings))
        sampler(lambda: self.do_hash("stub"))

    def test_12_min_salt_size(self):
        "test hash() / genconfig() honors min_salt_size"
        self.require_salt_info()

        handler = self.handler
        salt_char = handler.salt_chars[0:1]
        min_size = handler.min_salt_size

        # check min is accepted
        s1 = salt_char * min_size
        self.do_genconfig(salt=s1)
        self.do_hash('stub', salt_size=min_size)

        # check min-1 is rejected
        if min_size > 0:
            self.assertRaises(InvalidConfig, self.do_genconfig,
                              salt=s1[:-1])
        self.assertRaises(InvalidConfig, self.do_hash, 'stub',
                          salt_size=min_size-1)

    def test_13_max_salt_size(self):
        "test hash() / genconfig() honors max_salt_size"
        self.require_salt_info()

        handler = self.handler
        max_size = handler.max_salt_size
        salt_char = handler.salt_chars[0:1]

        # check max size is accepted
        s1 = salt_char * max_size
        c1 = self.do_genconfig(salt=s1)
        self.do_hash('stub', salt_size=max_size)

        # check max size + 1 is rejected
        s2 = s1 + salt_char
        self.assertRaises(InvalidConfig, self.do_genconfig, salt=s2)
        self.assertRaises(InvalidConfig, self.do_hash, 'stub',
                          salt_size=max_size+1)

        # should truncate too-large salt in relaxed mode
        # (compared by salt, since some handlers vary their default rounds)
        def get_salt(config):
            return handler.from_string(config).salt
        with catch_warnings(record=True) as wlog:
            warnings.simplefilter("always")
            c2 = self.do_genconfig(salt=s2, relaxed=True)
        self.consumeWarningList(wlog, PwcryptHashWarning)
        self.assertEqual(get_salt(c2), get_salt(c1))

        # if min_salt supports it, check smaller than mx is NOT truncated
        if handler.min_salt_size < max_size:
            c3 = self.do_genconfig(salt=s1[:-1])
            self.assertNotEqual(get_salt(c3), get_salt(c1))

    def test_14_salt_chars(self):
        "test genconfig() honors salt_chars"
        self.require_salt_info()

        handler = self.handler
        mx = handler.max_salt_size
        mn = handler.min_salt_size
        cs = handler.salt_chars

        # make sure all listed chars are accepted
        chunk = mx
        for i in range(0, len(cs), chunk):
            salt = cs[i:i+chunk]
            if len(salt) < mn:
                salt = (salt*(mn//len(salt)+1))[:chunk]
            self.do_genconfig(salt=self.prepare_salt(salt))

        # check some invalid salt chars, make sure they're rejected
        chunk = max(mn, 1)
        for c in '\x00\xff$:':
            self.assertRaises(InvalidConfig, self.do_genconfig, salt=c*chunk,
                              __msg__="invalid salt char %r:" % (c,))

    def test_15_salt_type(self):
        "test non-string salt values"
        self.require_salt()

        # should always throw error for random class.
        class fake(object):
            pass
        self.assertRaises(TypeError, self.do_hash, 'stub', salt=fake())

        # ascii bytes should be treated same as unicode
        handler = self.handler
        salt = self.prepare_salt(handler.salt_chars[-1:] * handler.default_salt_size)
        c1 = self.do_genconfig(salt=salt.encode("ascii"))
        c2 = self.do_genconfig(salt=salt)
        self.assertEqual(handler.from_string(c1).salt,
                         handler.from_string(c2).salt)

    #==============================================================
    # rounds
    #==============================================================
    def require_rounds_info(self):
        if not has_rounds_info(self.handler):
            raise self.skipTest("handler lacks rounds attributes")

    def test_20_optional_rounds_attributes(self):
        "validate optional rounds attributes"
        self.require_rounds_info()

        cls = self.handler
        AssertionError = self.failureException

        #check max_rounds
        if cls.max_rounds is None:
            raise AssertionError("max_rounds not specified")
        if cls.max_rounds < 1:
            raise AssertionError("max_rounds must be >= 1")

        #check min_rounds
        if cls.min_rounds < 0:
            raise AssertionError("min_rounds must be >= 0")
        if cls.min_rounds > cls.max_rounds:
            raise AssertionError("min_rounds must be <= max_rounds")

        #check default_rounds
        if cls.default_rounds is not None:
            if cls.default_rounds < cls.min_rounds:
                raise AssertionError("default_rounds must be >= min_rounds")
            if cls.default_rounds > cls.max_rounds:
                raise AssertionError("default_rounds must be <= max_rounds")

        #check rounds_cost
        if cls.rounds_cost not in rounds_cost_values:
            raise AssertionError("unknown rounds cost constant: %r" % (cls.rounds_cost,))

    def test_21_rounds_limits(self):
        "test hash() / genconfig() honors rounds limits"
        self.require_rounds_info()
        handler = self.handler
        min_rounds = handler.min_rounds
        max_rounds = handler.max_rounds

        # check min is accepted
        self.do_genconfig(rounds=min_rounds)
        self.do_hash('stub', rounds=min_rounds)

        # check min-1 is rejected
        self.assertRaises(InvalidConfig, self.do_genconfig, rounds=min_rounds-1)
        self.assertRaises(InvalidConfig, self.do_hash, 'stub',
                          rounds=min_rounds-1)

        # check max is accepted (only as a config, hashing may be too slow)
        config = self.do_genconfig(rounds=max_rounds)
        self.assertEqual(handler.from_string(config).rounds, max_rounds)

        # check max+1 is rejected
        self.assertRaises(InvalidConfig, self.do_genconfig,
                          rounds=max_rounds+1)
        self.assertRaises(InvalidConfig, self.do_hash, 'stub',
                          rounds=max_rounds+1)

        # check relaxed mode clips min-1 & max+1
        with catch_warnings(record=True) as wlog:
            warnings.simplefilter("always")
            self.assertEqual(handler(use_defaults=True, relaxed=True,
                                     rounds=min_rounds-1).rounds, min_rounds)
            self.assertEqual(handler(use_defaults=True, relaxed=True,
                                     rounds=max_rounds+1).rounds, max_rounds)
        self.consumeWarningList(wlog, [PwcryptHashWarning]*2)

        # check non-integer rounds are rejected
        self.assertRaises(TypeError, self.do_genconfig, rounds="5")
        self.assertRaises(TypeError, self.do_genconfig, rounds=True)

    #==============================================================
    # idents
    #==============================================================
    def test_30_HasManyIdents(self):
        "validate HasManyIdents configuration"
        cls = self.handler
        if not issubclass(cls, uh.HasManyIdents):
            raise self.skipTest("handler doesn't derive from HasManyIdents")

        # check settings
        self.assertTrue('ident' in cls.setting_kwds)

        # check ident_values list
        for value in cls.ident_values:
            self.assertIsInstance(value, str,
                                  "cls.ident_values must be unicode:")
        self.assertTrue(len(cls.ident_values)>1,
                        "cls.ident_values must have 2+ elements:")

        # check default_ident value
        self.assertTrue(cls.default_ident in cls.ident_values,
                        "cls.default_ident must specify member of cls.ident_values")

        # check optional aliases list
        if cls.ident_aliases:
            for alias, ident in cls.ident_aliases.items():
                self.assertTrue(ident in cls.ident_values,
                                "cls.ident_aliases must map to cls.ident_values members: %r" % (ident,))

        # check constructor validates ident correctly.
        hash = self.get_sample_hash()[1]
        parsed = cls.from_string(hash)
        kwds = dict(checksum=parsed.checksum)
        for key in ("salt", "rounds"):
            if key in cls.setting_kwds:
                kwds[key] = getattr(parsed, key)

        # ... accepts good ident
        cls(ident=cls.default_ident, **kwds)

        # ... requires ident w/o defaults
        self.assertRaises(TypeError, cls, **kwds)

        # ... supplies default ident
        self.assertEqual(cls(use_defaults=True, **kwds).ident,
                         cls.default_ident)

        # ... rejects bad ident
        self.assertRaises(InvalidConfig, cls, ident='xXx', **kwds)

        # ... every ident can be used to create a hash
        for ident in cls.ident_values:
            result = self.do_hash('stub', ident=ident)
            self.assertTrue(result.startswith(ident))
            self.check_verify('stub', result)

    #==============================================================
    # passwords
    #==============================================================
    def test_60_secret_size(self):
        "test password size limits"
        sc = self.secret_size
        base = "too many secrets" # 16 chars
        alt = 'x' # char that's not in base string
        if sc is not None:
            # hash only counts the first <sc> characters; eg: bcrypt, unix_crypt

            # create & hash string that's exactly sc+1 chars
            secret = repeat_string(base, sc+1)
            hash = self.do_hash(secret)

            # check sc value isn't too large by verifying that sc-1'th char
            # affects hash
            secret2 = secret[:-2] + alt + secret[-1]
            self.assertFalse(self.do_verify(secret2, hash),
                            "secret_size value is too large")

            # check sc value isn't too small by verifying adding sc'th char
            # *doesn't* affect hash
            secret3 = secret[:-1] + alt
            self.assertTrue(self.do_verify(secret3, hash),
                            "secret_size value is too small")

        else:
            # hash counts all characters; e.g. md5-crypt

            # NOTE: this doesn't do an exhaustive search to verify algorithm
            # doesn't have some cutoff point, it just tries
            # 1024-character string, and alters the last char.
            secret = base * 64
            hash = self.do_hash(secret)
            secret2 = secret[:-1] + alt
            self.assertFalse(self.do_verify(secret2, hash),
                             "full password not used in digest")

    def test_61_secret_case_sensitive(self):
        "test password case sensitivity"
        h1 = self.do_hash('test')
        self.assertFalse(self.do_verify('TEST', h1),
                         "verify() should be case sensitive")
        h2 = self.do_genhash('TEST', h1)
        self.assertNotEqual(h2, h1, "genhash() should be case sensitive")

    def test_62_secret_border(self):
        "test non-string passwords are rejected"
        hash = self.get_sample_hash()[1]

        # secret=None
        self.assertRaises(TypeError, self.do_hash, None)
        self.assertRaises(TypeError, self.do_genhash, None, hash)
        self.assertRaises(TypeError, self.do_verify, None, hash)

        # secret=int (picked as example of entirely wrong class)
        self.assertRaises(TypeError, self.do_hash, 1)
        self.assertRaises(TypeError, self.do_genhash, 1, hash)
        self.assertRaises(TypeError, self.do_verify, 1, hash)

    def test_63_large_secret(self):
        "test MAX_PASSWORD_SIZE is enforced"
        secret = '.' * (1+MAX_PASSWORD_SIZE)
        hash = self.get_sample_hash()[1]
        self.assertRaises(PasswordSizeError, self.do_genhash, secret, hash)
        self.assertRaises(PasswordSizeError, self.do_hash, secret)
        self.assertRaises(PasswordSizeError, self.do_verify, secret, hash)

    def test_64_null_secret(self):
        "test passwords containing NUL bytes"
        if self.secret_rejects_null:
            hash = self.get_sample_hash()[1]
            self.assertRaises(exc.NullPasswordError, self.do_hash, "a\x00b")
            self.assertRaises(exc.NullPasswordError, self.do_verify,
                              b"a\x00b", hash)
        else:
            hash = self.do_hash("a\x00b")
            self.check_verify("a\x00b", hash)
            self.check_verify("a", hash, negate=True)
            self.check_verify("a\x00c", hash, negate=True)

    #==============================================================
    # check identify(), verify(), genhash() against test vectors
    #==============================================================
    def test_70_hashes(self):
        "test known hashes"
        # sanity check
        self.assertTrue(self.known_correct_hashes or self.known_correct_configs,
                        "test must set at least one of 'known_correct_hashes' "
                        "or 'known_correct_configs'")

        # run through known secret/hash pairs
        for secret, hash in self.iter_known_hashes():

            # hash should be positively identified by handler
            self.assertTrue(self.do_identify(hash),
                "identify() failed to identify hash: %r" % (hash,))

            # secret should verify successfully against hash
            self.check_verify(secret, hash, "verify() of known hash failed: "
                              "secret=%r, hash=%r" % (secret, hash))

            # genhash() should reproduce same hash
            result = self.do_genhash(secret, hash)
            self.assertIsInstance(result, str,
                "genhash() failed to return native string: %r" % (result,))
            self.assertEqual(result, hash,  "genhash() failed to reproduce "
                "known hash: secret=%r, hash=%r: result=%r" %
                (secret, hash, result))

            # parsing then rendering should reproduce hash exactly
            self.assertEqual(self.handler.from_string(hash).to_string(), hash)

    def test_71_alternates(self):
        "test known alternate hashes"
        if not self.known_alternate_hashes:
            raise self.skipTest("no alternate hashes provided")

        for alt, secret, hash in self.known_alternate_hashes:

            # hash should be positively identified by handler
            self.assertTrue(self.do_identify(hash),
                "identify() failed to identify alternate hash: %r" %
                (hash,))

            # secret should verify successfully against hash
            self.check_verify(secret, alt, "verify() of known alternate hash "
                              "failed: secret=%r, hash=%r" % (secret, alt))

            # genhash() should reproduce canonical hash
            result = self.do_genhash(secret, alt)
            self.assertEqual(result, hash,  "genhash() failed to normalize "
                "known alternate hash: secret=%r, alt=%r, hash=%r: "
                "result=%r" % (secret, alt, hash, result))

    def test_72_configs(self):
        "test known config strings"
        if not self.known_correct_configs:
            raise self.skipTest("no config strings provided")

        for config, secret, hash in self.known_correct_configs:

            # config should be positively identified by handler
            self.assertTrue(self.do_identify(config),
                "identify() failed to identify known config string: %r" %
                (config,))

            # verify() should throw error for config strings.
            self.assertRaises(MalformedHash, self.do_verify, secret, config,
                __msg__="verify() failed to reject config string: %r" %
                (config,))

            # genhash() should reproduce hash from config.
            result = self.do_genhash(secret, config)
            self.assertIsInstance(result, str,
                "genhash() failed to return native string: %r" % (result,))
            self.assertEqual(result, hash,  "genhash() failed to reproduce "
                "known hash from config: secret=%r, config=%r, hash=%r: "
                "result=%r" % (secret, config, hash, result))

    def test_73_unidentified(self):
        "test known unidentifiably-mangled strings"
        if not self.known_unidentified_hashes:
            raise self.skipTest("no unidentified hashes provided")
        for hash in self.known_unidentified_hashes:

            # identify() should reject these
            self.assertFalse(self.do_identify(hash),
                "identify() incorrectly identified known unidentifiable "
                "hash: %r" % (hash,))

            # verify() should throw error
            self.assertRaises(MalformedHash, self.do_verify, 'stub', hash,
                __msg__= "verify() failed to throw error for unidentifiable "
                "hash: %r" % (hash,))

            # genhash() should throw error
            self.assertRaises(MalformedHash, self.do_genhash, 'stub', hash,
                __msg__= "genhash() failed to throw error for unidentifiable "
                "hash: %r" % (hash,))

    def test_74_malformed(self):
        "test known identifiable-but-malformed strings"
        if not self.known_malformed_hashes:
            raise self.skipTest("no malformed hashes provided")
        for hash in self.known_malformed_hashes:

            # identify() should accept these
            self.assertTrue(self.do_identify(hash),
                "identify() failed to identify known malformed "
                "hash: %r" % (hash,))

            # verify() should throw error, never return False
            self.assertRaises(MalformedHash, self.do_verify, 'stub', hash,
                __msg__= "verify() failed to throw error for malformed "
                "hash: %r" % (hash,))

            # genhash() should throw error
            self.assertRaises(MalformedHash, self.do_genhash, 'stub', hash,
                __msg__= "genhash() failed to throw error for malformed "
                "hash: %r" % (hash,))

    def test_75_foreign(self):
        "test known foreign hashes"
        for name, hash in self.known_other_hashes:
            if name == self.handler.name:
                # identify should accept these
                self.assertTrue(self.do_identify(hash),
                    "identify() failed to identify known hash: %r" % (hash,))

                # verify & genhash should NOT throw error
                self.check_verify('stub', hash, negate=True)
                result = self.do_genhash('stub', hash)
                self.check_returned_native_str(result, "genhash")

            else:
                # identify should reject these
                self.assertFalse(self.do_identify(hash),
                    "identify() incorrectly identified hash belonging to "
                    "%s: %r" % (name, hash))

                # verify should throw error
                self.assertRaises(MalformedHash, self.do_verify, 'stub', hash,
                    __msg__= "verify() failed to throw error for hash "
                    "belonging to %s: %r" % (name, hash,))

                # genhash() should throw error
                self.assertRaises(MalformedHash, self.do_genhash, 'stub', hash,
                    __msg__= "genhash() failed to throw error for hash "
                    "belonging to %s: %r" % (name, hash))

    def test_76_hash_border(self):
        "test non-string hashes are rejected"
        #
        # test hash=None is rejected
        #
        self.assertRaises(TypeError, self.do_identify, None)
        self.assertRaises(TypeError, self.do_verify, 'stub', None)
        self.assertRaises(TypeError, self.do_genhash, 'stub', None)

        #
        # test hash=int is rejected (picked as example of entirely wrong type)
        #
        self.assertRaises(TypeError, self.do_identify, 1)
        self.assertRaises(TypeError, self.do_verify, 'stub', 1)
        self.assertRaises(TypeError, self.do_genhash, 'stub', 1)

        #
        # test hash='' is rejected
        #
        for hash in ['', b'']:
            self.assertFalse(self.do_identify(hash),
                "identify() incorrectly identified empty hash")
            self.assertRaises(MalformedHash, self.do_verify, 'stub', hash,
                __msg__="verify() failed to reject empty hash")
            self.assertRaises(MalformedHash, self.do_genhash, 'stub', hash,
                __msg__="genhash() failed to reject empty hash")

        #
        # test identify doesn't throw decoding errors on 8-bit input
        #
        self.do_identify('\xe2\x82\xac\xc2\xa5$')
        self.do_identify(b'abc\x91\x00')

    #=========================================================
    #eoc
    #=========================================================

#=========================================================
#warnings helpers
#=========================================================
class reset_warnings(catch_warnings):
    "catch_warnings() wrapper which clears warning registry & filters"
    def __init__(self, reset_filter="always", reset_registry=".*", **kwds):
        super(reset_warnings, self).__init__(**kwds)
        self._reset_filter = reset_filter
        self._reset_registry = re.compile(reset_registry) if reset_registry else None

    def __enter__(self):
        # let parent class archive filter state
        ret = super(reset_warnings, self).__enter__()

        # reset the filter to list everything
        if self._reset_filter:
            warnings.resetwarnings()
            warnings.simplefilter(self._reset_filter)

        # archive and clear the __warningregistry__ key for all modules
        # that match the 'reset' pattern.
        pattern = self._reset_registry
        if pattern:
            orig = self._orig_registry = {}
            for name, mod in list(sys.modules.items()):
                if pattern.match(name):
                    reg = getattr(mod, "__warningregistry__", None)
                    if reg:
                        orig[name] = reg.copy()
                        reg.clear()
        return ret

    def __exit__(self, *exc_info):
        # restore warning registry for all modules
        pattern = self._reset_registry
        if pattern:
            for name, content in self._orig_registry.items():
                mod = sys.modules.get(name)
                if mod is None:
                    continue
                reg = getattr(mod, "__warningregistry__", None)
                if reg is None:
                    setattr(mod, "__warningregistry__", content)
                else:
                    reg.clear()
                    reg.update(content)
        super(reset_warnings, self).__exit__(*exc_info)

#=========================================================
#eof
#=========================================================
