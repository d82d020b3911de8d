"""Error kinds raised by the record store and the analytics operations."""

type EntityKey = int | str


class PeopleAnalyticsError(Exception):
    """Base class for all people-pipeline errors."""


class NotFound(PeopleAnalyticsError, LookupError):
    """A referenced employee, department or review does not exist."""

    def __init__(self, entity: str, key: EntityKey):
        self.entity = entity
        self.key = key
        super().__init__(f"{entity} not found: {key!r}")


class InvalidArgument(PeopleAnalyticsError, ValueError):
    """Input rejected before any mutation took place."""


class CycleDetected(PeopleAnalyticsError):
    """The manager-reference graph contains a cycle."""

    def __init__(self, cycle: list[EntityKey]):
        self.cycle = cycle
        chain = " -> ".join(str(k) for k in cycle)
        super().__init__(f"Manager reference cycle detected: {chain}")


class ReferentialIntegrityViolation(PeopleAnalyticsError):
    """A write would leave a dangling foreign reference."""

    def __init__(self, entity: str, field: str, key: EntityKey):
        self.entity = entity
        self.field = field
        self.key = key
        super().__init__(f"{entity}.{field} references missing record {key!r}")


class TransactionRequired(PeopleAnalyticsError, RuntimeError):
    """An operation that must share the caller's store transaction ran outside one."""
