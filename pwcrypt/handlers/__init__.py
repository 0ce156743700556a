"""pwcrypt.handlers -- holds implementations of the crypt(3) password hashes"""
