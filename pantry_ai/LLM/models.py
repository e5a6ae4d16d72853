"""
LLM Extraction Models

Defines the shape descriptors and result types used when recovering
structured data from model output.
"""

from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Dict, Optional, Tuple, Union

# Failure snippets keep only this many leading characters of the raw text
SNIPPET_LENGTH = 200


class ShapeDescriptorError(ValueError):
    """Raised when a ShapeDescriptor is built with an invalid contract."""


class ShapeKind(str, Enum):
    """Top-level JSON kind a caller expects."""

    OBJECT = "object"
    ARRAY = "array"


class ExtractionErrorKind(str, Enum):
    """Why an extraction could not produce a value."""

    NO_JSON_FOUND = "no_json_found"
    SYNTAX_ERROR = "syntax_error"
    SHAPE_MISMATCH = "shape_mismatch"
    MISSING_REQUIRED_FIELDS = "missing_required_fields"


@dataclass(frozen=True)
class ShapeDescriptor:
    """
    Describes the JSON value a caller expects back from a model.

    Object shapes may list required top-level keys. Array shapes must carry
    an element shape that every element is validated against.
    """

    kind: ShapeKind
    required: Tuple[str, ...] = ()
    element_shape: Optional["ShapeDescriptor"] = None

    def __post_init__(self):
        try:
            kind = ShapeKind(self.kind)
        except ValueError:
            raise ShapeDescriptorError(f"Unknown shape kind: {self.kind!r}")
        object.__setattr__(self, "kind", kind)

        if isinstance(self.required, str):
            raise ShapeDescriptorError("required must be a sequence of field names, not a string")
        required = tuple(self.required or ())
        object.__setattr__(self, "required", required)

        for name in required:
            if not isinstance(name, str) or not name:
                raise ShapeDescriptorError(f"Invalid required field name: {name!r}")
        if len(set(required)) != len(required):
            raise ShapeDescriptorError(f"Duplicate required field names: {list(required)}")

        if kind is ShapeKind.ARRAY:
            if self.element_shape is None:
                raise ShapeDescriptorError("Array shapes need an element_shape")
            if not isinstance(self.element_shape, ShapeDescriptor):
                raise ShapeDescriptorError("element_shape must be a ShapeDescriptor")
            if required:
                raise ShapeDescriptorError("Array shapes cannot declare required fields")
        elif self.element_shape is not None:
            raise ShapeDescriptorError("Object shapes cannot declare an element_shape")

    @classmethod
    def object(cls, *required: str) -> "ShapeDescriptor":
        """Build an object shape requiring the given top-level keys."""
        return cls(kind=ShapeKind.OBJECT, required=required)

    @classmethod
    def array_of(cls, element_shape: "ShapeDescriptor") -> "ShapeDescriptor":
        """Build an array shape whose elements match ``element_shape``."""
        return cls(kind=ShapeKind.ARRAY, element_shape=element_shape)

    @property
    def delimiters(self) -> Tuple[str, str]:
        """Opening and closing characters of this shape's JSON kind."""
        return ("{", "}") if self.kind is ShapeKind.OBJECT else ("[", "]")

    def matches_kind(self, value: Any) -> bool:
        if self.kind is ShapeKind.OBJECT:
            return isinstance(value, dict)
        return isinstance(value, list)

    def to_json_schema(self) -> Dict[str, Any]:
        """Render a minimal JSON Schema for structured-output requests."""
        if self.kind is ShapeKind.ARRAY:
            return {"type": "array", "items": self.element_shape.to_json_schema()}
        schema: Dict[str, Any] = {"type": "object"}
        if self.required:
            schema["properties"] = {name: {} for name in self.required}
            schema["required"] = list(self.required)
        return schema


@dataclass(frozen=True)
class ExtractionSuccess:
    """A parsed value that conforms to the requested shape."""

    value: Any
    successful: bool = field(default=True, init=False)


@dataclass(frozen=True)
class ExtractionFailure:
    """
    No conforming value could be recovered.

    ``snippet`` is a bounded prefix of the raw text, kept for diagnostics.
    """

    reason: ExtractionErrorKind
    snippet: str
    successful: bool = field(default=False, init=False)


ExtractionResult = Union[ExtractionSuccess, ExtractionFailure]


@dataclass
class AnalysisResult:
    """
    Represents the outcome of a handler-level operation.

    Mirrors the ``{success, data, error, message}`` bodies returned to end
    callers; ``reason`` keeps the low-level extraction reason for logs.
    """

    successful: bool
    data: Any = None
    error: Optional[str] = None
    message: Optional[str] = None
    reason: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        body: Dict[str, Any] = {"success": self.successful}
        if self.successful:
            body["data"] = self.data
        else:
            body["error"] = self.error
            if self.message:
                body["message"] = self.message
        return body
