"""
Cryptographic primitives used to hash and sign transactions.
"""
