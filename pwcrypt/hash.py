"""pwcrypt.hash stub

NOTE:
  this module does not contain any hashes itself.
  importing it replaces it (in sys.modules) with the proxy object
  from pwcrypt.registry, which lazy-loads handlers as they're requested.

  the handler implementations live in the pwcrypt.handlers subpackage.
"""
#=========================================================
#import special proxy object as 'pwcrypt.hash' module
#=========================================================
from pwcrypt.registry import _proxy
import sys
sys.modules['pwcrypt.hash'] = _proxy
del sys, _proxy

#=========================================================
#eoc
#=========================================================
