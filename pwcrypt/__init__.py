"""pwcrypt - pure-python implementations of the unix crypt(3) password hashes"""

__version__ = "1.0"
