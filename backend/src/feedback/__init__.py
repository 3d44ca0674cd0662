"""Feedback module for match corrections

This module handles:
- The sku_match_correction table
- Append-only correction sinks plugged into the matcher
"""

from .models import MatchCorrection
from .services import InMemoryCorrectionSink, SqlCorrectionSink

__all__ = [
    "MatchCorrection",
    "InMemoryCorrectionSink",
    "SqlCorrectionSink",
]
