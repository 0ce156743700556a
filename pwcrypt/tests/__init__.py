"""pwcrypt tests"""
