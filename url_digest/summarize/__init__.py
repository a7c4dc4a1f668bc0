"""
Offline summarization.
"""

from .extractive import lead_sentences, score_sentences, summarize_extractive

__all__ = ["summarize_extractive", "score_sentences", "lead_sentences"]
