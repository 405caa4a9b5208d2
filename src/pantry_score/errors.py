"""Typed errors raised by the scoring engine."""

from uuid import UUID


class PantryScoreError(Exception):
    """Base class for engine errors."""


class InventoryNotFound(PantryScoreError):
    """Raised when a user has no inventory record."""

    def __init__(self, user_id: UUID) -> None:
        self.user_id = user_id
        super().__init__(f"Inventory not found for user {user_id}")


class ValidationError(PantryScoreError):
    """Raised when product input fails validation."""


class MissingFieldError(ValidationError):
    """A required product field is missing or empty."""

    def __init__(self, fields: list[str]) -> None:
        self.fields = fields
        super().__init__(f"Missing required fields: {', '.join(fields)}")


class InvalidStatusError(ValidationError):
    """The status is not one of the known product statuses."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid status: {value!r}")


class InvalidTransitionError(InvalidStatusError):
    """The product cannot move from its current status to the requested one."""

    def __init__(self, current: object, requested: object) -> None:
        self.current = current
        self.value = requested
        ValidationError.__init__(
            self, f"Cannot change status from {current!r} to {requested!r}"
        )


class InvalidDateError(ValidationError):
    """The expiry date could not be parsed."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Invalid date format: {value!r}")


class InvalidQuantityError(ValidationError):
    """The quantity is not a positive number."""

    def __init__(self, value: object) -> None:
        self.value = value
        super().__init__(f"Quantity must be a positive number: {value!r}")


class NotFoundOrForbidden(PantryScoreError):
    """The product does not exist or belongs to another user."""

    def __init__(self, product_id: UUID) -> None:
        self.product_id = product_id
        super().__init__("Product not found or access denied")


class PersistenceError(PantryScoreError):
    """A storage operation failed."""
