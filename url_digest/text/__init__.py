"""
Text preparation: normalization, sentence segmentation and chunking.
"""

from .chunker import chunk, chunk_text
from .normalize import normalize, truncate
from .sentences import split_sentences, split_units

__all__ = [
    "normalize",
    "truncate",
    "split_units",
    "split_sentences",
    "chunk",
    "chunk_text",
]
