"""pwcrypt.registry - name -> handler lookup for the crypt(3) hashes"""
#=========================================================
#imports
#=========================================================
#core
from importlib import import_module
import re
import logging; log = logging.getLogger(__name__)
#site
#libs
from pwcrypt.utils import is_crypt_handler
#pkg
#local
__all__ = [
    "register_crypt_handler_path",
    "register_crypt_handler",
    "get_crypt_handler",
    "list_crypt_handlers",
    "has_crypt_handler",
]

#=========================================================
#registry proxy object
#=========================================================
class PwcryptRegistryProxy(object):
    """proxy module pwcrypt.hash

    this module is in fact an object which lazy-loads
    the requested password hash handler on first attribute access,
    by way of :func:`pwcrypt.registry.get_crypt_handler`.
    """
    __name__ = "pwcrypt.hash"
    __package__ = None

    def __getattr__(self, attr):
        if attr.startswith("_"):
            raise AttributeError("missing attribute: %r" % (attr,))
        handler = get_crypt_handler(attr, None)
        if handler is None:
            raise AttributeError("unknown password hash: %r" % (attr,))
        return handler

    def __setattr__(self, attr, value):
        if attr.startswith("_"):
            # import machinery sets __loader__, __spec__, etc
            object.__setattr__(self, attr, value)
        else:
            register_crypt_handler(value, name=attr)

    def __repr__(self):
        return "<proxy module 'pwcrypt.hash'>"

    def __dir__(self):
        # include handlers which haven't been loaded yet
        attrs = set(dir(self.__class__))
        attrs.update(self.__dict__)
        attrs.update(_handler_locations)
        return sorted(attrs)

#: singleton instance, available publically as 'pwcrypt.hash'
_proxy = PwcryptRegistryProxy()

#==========================================================
#internal registry state
#==========================================================

#: dict mapping name -> loaded handler. shares the proxy's dict,
#: so loaded handlers show up as plain attributes of pwcrypt.hash
_handlers = _proxy.__dict__

#: dict mapping name -> (module path, attribute) for handlers
#: which haven't been imported yet
_handler_locations = {
    "apr1_crypt":       ("pwcrypt.handlers.md5_crypt",   "apr1_crypt"),
    "bcrypt":           ("pwcrypt.handlers.bcrypt",      "bcrypt"),
    "bsdi_crypt":       ("pwcrypt.handlers.des_crypt",   "bsdi_crypt"),
    "md5_crypt":        ("pwcrypt.handlers.md5_crypt",   "md5_crypt"),
    "sha1_crypt":       ("pwcrypt.handlers.sha1_crypt",  "sha1_crypt"),
    "sha256_crypt":     ("pwcrypt.handlers.sha2_crypt",  "sha256_crypt"),
    "sha512_crypt":     ("pwcrypt.handlers.sha2_crypt",  "sha512_crypt"),
    "unix_crypt":       ("pwcrypt.handlers.des_crypt",   "unix_crypt"),
}

#: regexp handler names must match
_name_re = re.compile("^[a-z][_a-z0-9]{2,}$")

#: sentinel for get_crypt_handler()
_UNSET = object()

#==========================================================
#registry frontend functions
#==========================================================
def register_crypt_handler_path(name, path):
    """register location to lazy-load handler from when requested.

    :arg name: name of handler
    :arg path:
        module import path. the module should contain a handler
        called :samp:`{name}`; alternately the path may be given as
        :samp:`{module}:{attribute}` to load a differently named object.
    """
    if ':' in path:
        modname, modattr = path.split(":")
    else:
        modname, modattr = path, name
    _handler_locations[name] = (modname, modattr)

def register_crypt_handler(handler, force=False, name=None):
    """register password hash handler, so it will be returned
    by :func:`get_crypt_handler` (and :mod:`pwcrypt.hash`).

    :arg handler: the password hash handler to register
    :param force: override an existing handler with the same name
    :param name:
        [internal kwd] if specified, ensures ``handler.name``
        matches this value, or raises :exc:`ValueError`.

    :raises TypeError:
        if the object does not appear to be a valid handler.

    :raises ValueError:
        if the handler's name is invalid.

    :raises KeyError:
        if a different handler was already registered under
        the same name, and ``force=True`` was not specified.
    """
    if not is_crypt_handler(handler):
        raise TypeError("object does not appear to be a crypt handler: %r" % (handler,))

    if name:
        if name != handler.name:
            raise ValueError("handlers must be stored only under their own name")
    else:
        name = handler.name

    if not name:
        raise ValueError("name is null: %r" % (name,))
    if not _name_re.match(name):
        raise ValueError("invalid characters in name (must be 3+ characters, "
                         "begin with a-z, and contain only underscore, "
                         "a-z, 0-9): %r" % (name,))
    if '__' in name:
        raise ValueError("name may not contain double-underscores: %r" % (name,))

    other = _handlers.get(name)
    if other:
        if other is handler:
            return
        if force:
            log.warning("overriding previous handler registered to name %r: %r",
                        name, other)
        else:
            raise KeyError("a handler has already registered for the name %r: "
                           "%r (use force=True to override)" % (name, other))

    _handlers[name] = handler
    log.info("registered crypt handler %r: %r", name, handler)

def get_crypt_handler(name, default=_UNSET):
    """return handler for specified password hash scheme,
    importing it first if it hasn't been loaded yet.

    :arg name: name of handler to return
    :param default: value to return if no handler with that name is known.

    :raises KeyError: if no handler matches, and no default was specified.
    """
    if name.startswith("_"):
        # reserved for the proxy's module attributes
        raise ValueError("invalid handler name: %r" % (name,))
    handler = _handlers.get(name)
    if handler:
        return handler

    route = _handler_locations.get(name)
    if route:
        modname, modattr = route
        # import errors propagate: they indicate a broken install,
        # or a bad path given to register_crypt_handler_path()
        mod = import_module(modname)
        handler = getattr(mod, modattr)
        register_crypt_handler(handler, name=name)
        return handler

    if default is _UNSET:
        raise KeyError("no crypt handler found for algorithm: %r" % (name,))
    return default

def list_crypt_handlers(loaded_only=False):
    """return sorted list of all known crypt handler names.

    :param loaded_only: if ``True``, only returns names of handlers which have actually been loaded.
    """
    names = set(name for name in _handlers if not name.startswith("_"))
    if not loaded_only:
        names.update(_handler_locations)
    return sorted(names)

def has_crypt_handler(name, loaded_only=False):
    """check if handler name is known, without loading it.

    :param loaded_only: if ``True``, only report handlers which have been loaded.
    """
    if name.startswith("_"):
        return False
    return name in _handlers or (not loaded_only and name in _handler_locations)

#=========================================================
# eof
#=========================================================
