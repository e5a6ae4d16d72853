"""
Result Parser Module
Recovers JSON values of an expected shape from free-form LLM responses.
"""

import json
from typing import Any, List, Optional, Tuple

from ..models import (
    SNIPPET_LENGTH,
    ExtractionErrorKind,
    ExtractionFailure,
    ExtractionResult,
    ExtractionSuccess,
    ShapeDescriptor,
)

FENCE_MARKERS = ("```json", "```")

# Later stages win when reporting why every candidate failed
_REASON_RANK = {
    ExtractionErrorKind.NO_JSON_FOUND: 0,
    ExtractionErrorKind.SYNTAX_ERROR: 1,
    ExtractionErrorKind.SHAPE_MISMATCH: 2,
    ExtractionErrorKind.MISSING_REQUIRED_FIELDS: 3,
}


def _reject_constant(name: str):
    raise ValueError(f"Non-standard JSON constant: {name}")


class ResultParser:
    """Parses and validates LLM API responses."""

    @staticmethod
    def extract(raw_text: Optional[str], shape: ShapeDescriptor) -> ExtractionResult:
        """Recover a value of ``shape`` from raw model output.

        Tries, in order: the whole trimmed text, the text with markdown
        fences removed, and the span from the first opening delimiter to
        the last closing delimiter of the shape's kind. The first candidate
        that parses and validates wins.

        Args:
            raw_text: Full response content from a text-generation call
            shape: Expected top-level kind and required-field contract

        Returns:
            ExtractionResult: ExtractionSuccess with the value, or
            ExtractionFailure with a reason and a bounded snippet

        Raises:
            TypeError: If raw_text is not a string or shape is not a
                ShapeDescriptor
        """
        if not isinstance(shape, ShapeDescriptor):
            raise TypeError(f"shape must be a ShapeDescriptor, got {type(shape).__name__}")
        if raw_text is None:
            raw_text = ""
        if not isinstance(raw_text, str):
            raise TypeError(f"raw_text must be a string, got {type(raw_text).__name__}")

        trimmed = raw_text.strip()
        if not trimmed:
            return ExtractionFailure(ExtractionErrorKind.NO_JSON_FOUND, "")

        reason = ExtractionErrorKind.NO_JSON_FOUND
        for candidate in ResultParser._candidates(trimmed, shape):
            outcome = ResultParser._try_candidate(candidate, shape)
            if isinstance(outcome, ExtractionSuccess):
                return outcome
            if _REASON_RANK[outcome] > _REASON_RANK[reason]:
                reason = outcome

        return ExtractionFailure(reason, raw_text[:SNIPPET_LENGTH])

    @staticmethod
    def strip_fences(text: str) -> str:
        """Remove every markdown fence marker and trim the result."""
        for marker in FENCE_MARKERS:
            text = text.replace(marker, "")
        return text.strip()

    @staticmethod
    def bracket_span(text: str, shape: ShapeDescriptor) -> Optional[str]:
        """Slice from the first opening to the last closing delimiter.

        Returns None when either delimiter is absent or the closing one does
        not come after the opening one.
        """
        opening, closing = shape.delimiters
        start = text.find(opening)
        end = text.rfind(closing)
        if start == -1 or end == -1 or end <= start:
            return None
        return text[start:end + 1]

    @staticmethod
    def missing_fields(value: Any, shape: ShapeDescriptor) -> List[str]:
        """List what keeps an already kind-checked value from matching ``shape``.

        For arrays, each failing element contributes ``[index]`` entries.
        """
        if shape.element_shape is None:
            return [name for name in shape.required if name not in value]

        problems = []
        element_shape = shape.element_shape
        for index, element in enumerate(value):
            if not element_shape.matches_kind(element):
                problems.append(f"[{index}]")
                continue
            problems.extend(
                f"[{index}].{name}" for name in ResultParser.missing_fields(element, element_shape)
            )
        return problems

    @staticmethod
    def _candidates(trimmed: str, shape: ShapeDescriptor):
        yield trimmed

        stripped = ResultParser.strip_fences(trimmed)
        if stripped != trimmed:
            yield stripped

        span = ResultParser.bracket_span(stripped, shape)
        if span is not None and span != stripped:
            yield span

    @staticmethod
    def _try_candidate(candidate: str, shape: ShapeDescriptor):
        parsed, ok = ResultParser._loads(candidate)
        if not ok:
            # Only a located bracket span counts as found-but-broken JSON
            if ResultParser.bracket_span(candidate, shape) is None:
                return ExtractionErrorKind.NO_JSON_FOUND
            return ExtractionErrorKind.SYNTAX_ERROR
        # Bare scalars carry no object or array at all
        if not isinstance(parsed, (dict, list)):
            return ExtractionErrorKind.NO_JSON_FOUND
        if not shape.matches_kind(parsed):
            return ExtractionErrorKind.SHAPE_MISMATCH
        if ResultParser.missing_fields(parsed, shape):
            return ExtractionErrorKind.MISSING_REQUIRED_FIELDS
        return ExtractionSuccess(parsed)

    @staticmethod
    def _loads(text: str) -> Tuple[Any, bool]:
        try:
            return json.loads(text, parse_constant=_reject_constant), True
        except (ValueError, RecursionError):
            return None, False


def extract(raw_text: Optional[str], shape: ShapeDescriptor) -> ExtractionResult:
    """Module-level shortcut for :meth:`ResultParser.extract`."""
    return ResultParser.extract(raw_text, shape)
