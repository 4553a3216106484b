"""Exceptions raised while dispatching lifecycle batches."""


class DispatchError(Exception):
    """Base class for lifecycle engine errors."""


class StoreError(DispatchError):
    """A store call failed (timeout, lost connection, rejected write)."""


class DuplicateNotificationError(DispatchError):
    """A notification with the same (related entity, kind) already exists."""

    def __init__(self, related_entity_id: str, kind):
        self.related_entity_id = related_entity_id
        self.kind = kind
        super().__init__(f"Notification {kind} already exists for {related_entity_id}")


class ContractViolationError(DispatchError):
    """A candidate returned by a store query does not satisfy that query."""
