# apidiff/core/__init__.py

from .models import (
    Accessibility,
    ApiElementType,
    ChangeKind,
    ChangeShape,
    ComparisonResult,
    Difference,
    Element,
    ElementKind,
    Parameter,
    Severity,
)

from .exceptions import (
    ApiDiffError,
    ConfigurationError,
    ConfigurationValidationError,
    ReportError,
    ResultInvariantError,
    SnapshotError,
    handle_exception,
)


__all__ = [
    # models
    "Accessibility",
    "ApiElementType",
    "ChangeKind",
    "ChangeShape",
    "ComparisonResult",
    "Difference",
    "Element",
    "ElementKind",
    "Parameter",
    "Severity",

    # exceptions
    "ApiDiffError",
    "ConfigurationError",
    "ConfigurationValidationError",
    "ReportError",
    "ResultInvariantError",
    "SnapshotError",
    "handle_exception",
]
