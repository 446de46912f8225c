"""
Helper tools to test the operators which use the finalizer guards.

This module is a part of the package's public interface.
"""
from fingard._kits.memstores import MemoryStore

__all__ = [
    'MemoryStore',
]
