"""
Typed Exception Hierarchy for the Fee Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Every failure in the fee kernel is a validation failure on a single field,
a malformed document, or a misuse of the scenario store. Callers (the
envelope store, the command line, a display layer) need to react by type
and show the offending field, never by parsing message text:

    try:
        cdoo = compute(cdio)
    except OutOfRangeError as e:
        highlight(e.field)                  # Structured data
        api_response(code=e.code)           # Machine-readable

Every class carries a ``code`` class attribute and stores its context as
attributes so the structured log formatter can emit them.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    FeeKernelError (base)
    |
    +-- ValidationError
    |   +-- InvalidMoneyError
    |   +-- InvalidRateError
    |   +-- OutOfRangeError
    |   +-- InvalidContractTypeError
    |
    +-- DocumentError
    |   +-- UnsupportedDocumentVersionError
    |   +-- MissingFieldError
    |
    +-- ScenarioError
    |   +-- SlotNotFoundError
    |   +-- BaselineSlotError
    |   +-- UnknownViewFieldError
    |
    +-- CatalogError
        +-- UnknownMetricError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category     | Code                          | When Raised
-------------|-------------------------------|-----------------------------------
Validation   | INVALID_MONEY                 | Money text is not a decimal number
             | INVALID_RATE                  | Rate text is not a decimal number
             | OUT_OF_RANGE                  | Rate outside [0, 1] or money < 0
             | INVALID_CONTRACT_TYPE         | Contract type not CPFF or TM
-------------|-------------------------------|-----------------------------------
Document     | UNSUPPORTED_DOCUMENT_VERSION  | cdio_version / cdoo_version != 1.1
             | MISSING_FIELD                 | Required key absent from a document
-------------|-------------------------------|-----------------------------------
Scenario     | SLOT_NOT_FOUND                | Slot not present in the store
             | BASELINE_SLOT                 | Adding or removing the baseline slot
             | UNKNOWN_VIEW_FIELD            | Patch names a field the view lacks
-------------|-------------------------------|-----------------------------------
Catalog      | UNKNOWN_METRIC                | Metric id not in the catalog

===============================================================================
"""

from typing import Any


class FeeKernelError(Exception):
    """
    Base exception for all fee kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "FEE_KERNEL_ERROR"


# Validation exceptions


class ValidationError(FeeKernelError):
    """Base exception for single-field input validation failures."""

    code: str = "VALIDATION_ERROR"

    def __init__(self, field: str, message: str):
        self.field = field
        super().__init__(message)


class InvalidMoneyError(ValidationError):
    """Money text could not be parsed into minor units."""

    code: str = "INVALID_MONEY"

    def __init__(self, field: str, value: Any):
        self.value = str(value)
        super().__init__(field, f"Invalid money for {field}: {value!r}")


class InvalidRateError(ValidationError):
    """Rate text could not be parsed into parts-per-million."""

    code: str = "INVALID_RATE"

    def __init__(self, field: str, value: Any):
        self.value = str(value)
        super().__init__(field, f"Invalid rate for {field}: {value!r}")


class OutOfRangeError(ValidationError):
    """
    A parsed value is outside its permitted range.

    Rates must lie in [0, 1] (0%-100%); money must be non-negative.
    """

    code: str = "OUT_OF_RANGE"

    def __init__(
        self,
        field: str,
        label: str,
        value: str,
        constraint: str,
    ):
        self.label = label
        self.value = value
        self.constraint = constraint
        super().__init__(field, f"{label} must be {constraint}")


class InvalidContractTypeError(ValidationError):
    """Contract type is not one of the supported types."""

    code: str = "INVALID_CONTRACT_TYPE"

    def __init__(self, value: Any, allowed: tuple[str, ...]):
        self.value = str(value)
        self.allowed = allowed
        super().__init__(
            "contract_type",
            f"Invalid contract type {value!r}; expected one of {', '.join(allowed)}",
        )


# Document exceptions


class DocumentError(FeeKernelError):
    """Base exception for malformed canonical documents."""

    code: str = "DOCUMENT_ERROR"


class UnsupportedDocumentVersionError(DocumentError):
    """Document version tag is not supported by this engine."""

    code: str = "UNSUPPORTED_DOCUMENT_VERSION"

    def __init__(self, document: str, version: Any, supported: str):
        self.document = document
        self.version = str(version)
        self.supported = supported
        super().__init__(
            f"Unsupported {document} version {version!r} (supported: {supported})"
        )


class MissingFieldError(DocumentError):
    """A required key is absent from a document."""

    code: str = "MISSING_FIELD"

    def __init__(self, document: str, path: str):
        self.document = document
        self.path = path
        super().__init__(f"{document} is missing required field: {path}")


# Scenario store exceptions


class ScenarioError(FeeKernelError):
    """Base exception for scenario envelope store misuse."""

    code: str = "SCENARIO_ERROR"


class SlotNotFoundError(ScenarioError):
    """The requested slot has no envelope."""

    code: str = "SLOT_NOT_FOUND"

    def __init__(self, slot: str):
        self.slot = slot
        super().__init__(f"Scenario {slot} does not exist")


class BaselineSlotError(ScenarioError):
    """The baseline slot cannot be added or removed."""

    code: str = "BASELINE_SLOT"

    def __init__(self, slot: str, action: str):
        self.slot = slot
        self.action = action
        super().__init__(f"Cannot {action} baseline scenario {slot}")


class UnknownViewFieldError(ScenarioError):
    """A view patch names fields that the scenario view does not have."""

    code: str = "UNKNOWN_VIEW_FIELD"

    def __init__(self, fields: tuple[str, ...]):
        self.fields = fields
        super().__init__(f"Unknown scenario view field(s): {', '.join(fields)}")


# Catalog exceptions


class CatalogError(FeeKernelError):
    """Base exception for metric catalog and layout errors."""

    code: str = "CATALOG_ERROR"


class UnknownMetricError(CatalogError):
    """Metric id is not registered in the catalog."""

    code: str = "UNKNOWN_METRIC"

    def __init__(self, metric_id: str):
        self.metric_id = metric_id
        super().__init__(f"Unknown metric: {metric_id}")
