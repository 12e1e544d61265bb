"""
Processing-method identification and quality scoring for Angelica sinensis samples.
"""

from herbdash.services import identify, score_quality, initialize

__all__ = ['identify', 'score_quality', 'initialize']
