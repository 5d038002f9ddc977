"""
Core domain types, numerical primitives and the matrix inversion primitive.

This module contains the foundational building blocks that are independent
of the caching layer (src.cache).
"""
