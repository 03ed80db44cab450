"""
Input data loading.
"""

from .loader import load_boundaries, load_displacement, parse_boundaries

__all__ = ['load_boundaries', 'load_displacement', 'parse_boundaries']
