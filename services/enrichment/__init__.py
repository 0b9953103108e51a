# -*- coding: utf-8 -*-
"""
Company data enrichment services
"""
from .summarizer import OpenAISummarizer, Summarizer, build_summarizer

__all__ = [
    "OpenAISummarizer",
    "Summarizer",
    "build_summarizer",
]
