"""
Typed Exception Hierarchy for the QA Kernel.

===============================================================================
WHY TYPED EXCEPTIONS
===============================================================================

Callers of the compliance core (approval dialogs, batch jobs, admin screens)
must react to failures by type, not by parsing message strings:

  1. Every error has a TYPED exception class (catch by type, not message)
  2. Every exception has a CODE attribute (machine-readable, API-safe)
  3. Exceptions carry structured DATA (not just a message string)

Example:
    try:
        summary = check_service.evaluate_material(material_id)
    except EntityNotFoundError as e:
        api_response(code=e.code, entity_id=e.entity_id)

===============================================================================
WHAT IS *NOT* AN EXCEPTION
===============================================================================

Data-shape problems never raise.  A malformed expiry date, a null optional
relation, a missing setting row or an unknown check key all degrade to a
documented outcome (treat-as-absent, default value, permissive pass).  A
failing work-queue signal source is caught at the source boundary and
contributes zero items.  Only genuine infrastructure errors and programming
errors propagate.

===============================================================================
EXCEPTION HIERARCHY
===============================================================================

    QAKernelError (base)
    |
    +-- ConfigurationError
    |   +-- CatalogueError
    |   +-- InvalidTierError
    |
    +-- CheckDefinitionError
    |   +-- CheckDefinitionNotFoundError
    |   +-- DuplicateCheckKeyError
    |
    +-- EntityError
    |   +-- EntityNotFoundError
    |
    +-- WorkQueueError
        +-- UnknownWorkQueueSourceError

===============================================================================
ERROR CODES - QUICK REFERENCE
===============================================================================

Category        | Code                        | When Raised
----------------|-----------------------------|-----------------------------------------
Configuration   | CATALOGUE_ERROR             | Default catalogue YAML is malformed
                | INVALID_TIER                | Tier not critical/important/recommended
----------------|-----------------------------|-----------------------------------------
Definitions     | CHECK_DEFINITION_NOT_FOUND  | Admin action on an unknown check key
                | DUPLICATE_CHECK_KEY         | Catalogue lists the same key twice
----------------|-----------------------------|-----------------------------------------
Entity          | ENTITY_NOT_FOUND            | Context requested for unknown entity
----------------|-----------------------------|-----------------------------------------
Work queue      | UNKNOWN_WORK_QUEUE_SOURCE   | Caller asked for a source that does
                |                             | not exist
"""


class QAKernelError(Exception):
    """
    Base exception for all QA kernel errors.

    All subclasses must have a `code` class attribute for machine-readable
    error identification.
    """

    code: str = "QA_KERNEL_ERROR"


# Configuration exceptions


class ConfigurationError(QAKernelError):
    """Base exception for configuration errors."""

    code: str = "CONFIGURATION_ERROR"


class CatalogueError(ConfigurationError):
    """The default check/settings catalogue could not be parsed."""

    code: str = "CATALOGUE_ERROR"

    def __init__(self, source: str, reason: str):
        self.source = source
        self.reason = reason
        super().__init__(f"Invalid catalogue {source}: {reason}")


class InvalidTierError(ConfigurationError):
    """A check definition names a tier outside the fixed set."""

    code: str = "INVALID_TIER"

    def __init__(self, check_key: str, tier: str):
        self.check_key = check_key
        self.tier = tier
        super().__init__(
            f"Check {check_key} has invalid tier {tier!r}: "
            "expected critical, important or recommended"
        )


# Check definition exceptions


class CheckDefinitionError(QAKernelError):
    """Base exception for check definition errors."""

    code: str = "CHECK_DEFINITION_ERROR"


class CheckDefinitionNotFoundError(CheckDefinitionError):
    """No check definition exists with the given key."""

    code: str = "CHECK_DEFINITION_NOT_FOUND"

    def __init__(self, check_key: str):
        self.check_key = check_key
        super().__init__(f"Check definition not found: {check_key}")


class DuplicateCheckKeyError(CheckDefinitionError):
    """The same check key was declared more than once."""

    code: str = "DUPLICATE_CHECK_KEY"

    def __init__(self, check_key: str):
        self.check_key = check_key
        super().__init__(f"Duplicate check key: {check_key}")


# Entity exceptions


class EntityError(QAKernelError):
    """Base exception for entity lookup errors."""

    code: str = "ENTITY_ERROR"


class EntityNotFoundError(EntityError):
    """The entity whose context was requested does not exist."""

    code: str = "ENTITY_NOT_FOUND"

    def __init__(self, entity_type: str, entity_id: str):
        self.entity_type = entity_type
        self.entity_id = entity_id
        super().__init__(f"{entity_type} not found: {entity_id}")


# Work queue exceptions


class WorkQueueError(QAKernelError):
    """Base exception for work queue errors."""

    code: str = "WORK_QUEUE_ERROR"


class UnknownWorkQueueSourceError(WorkQueueError):
    """A caller named a signal source that is not registered."""

    code: str = "UNKNOWN_WORK_QUEUE_SOURCE"

    def __init__(self, source: str, available: list[str]):
        self.source = source
        self.available = available
        super().__init__(
            f"Unknown work queue source {source!r}. Available: {available}"
        )
