"""
Classifier implementations, one instance per modality.
"""

from .base import BaseClassifier
from .ensemble_classifier import EnsembleClassifier
from .similarity_classifier import SimilarityClassifier

__all__ = [
    'BaseClassifier',
    'EnsembleClassifier',
    'SimilarityClassifier',
]
