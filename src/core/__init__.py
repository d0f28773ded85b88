"""
Core domain models, mathematical primitives, and contracts.

This module contains the foundational building blocks of the pricing engine
that are independent of payment providers and application plumbing.
"""
