"""
Shelfwise

Recommendations, similar readers and summaries from a reader's book history.
"""

__version__ = "0.1.0"
