"""
LLM Package
Recovers shape-checked JSON from language-model responses.
"""

from .models import (
    AnalysisResult,
    ExtractionErrorKind,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    ShapeDescriptor,
    ShapeDescriptorError,
    ShapeKind,
)
from .utils.result_parser import ResultParser, extract
from .base_extractor import BaseExtractor

__all__ = [
    'AnalysisResult', 'ExtractionErrorKind', 'ExtractionFailure', 'ExtractionResult',
    'ExtractionSuccess', 'ShapeDescriptor', 'ShapeDescriptorError', 'ShapeKind',
    'ResultParser', 'extract', 'BaseExtractor'
]
