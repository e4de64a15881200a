"""
Scene module

Wraps a linework dataset and lazily builds its merged line network
"""

from .scene import Scene

__all__ = ["Scene"]
