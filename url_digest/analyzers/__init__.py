"""Summarization and translation stages of the digest pipeline."""

from .summarizer import ArticleSummarizer
from .translator import SummaryTranslator, base_language

__all__ = ["ArticleSummarizer", "SummaryTranslator", "base_language"]
