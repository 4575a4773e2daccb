"""
Persistence submodule: the line codec and the on-disk text store.
"""

from .codec import encode, decode, escape_text, unescape_text
from .io import TextStore, atomic_write_text

__all__ = [
    'encode',
    'decode',
    'escape_text',
    'unescape_text',
    'TextStore',
    'atomic_write_text',
]
