"""
Error types raised by the goal store.

The API layer maps each one to a status code in a single place
(see ``ascend.main``), so routes never translate errors themselves.
"""


class GoalStoreError(Exception):
    """Base class for everything the goal store raises."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class GoalNotFoundError(GoalStoreError):
    """Raised when a goal id does not exist."""

    status_code = 404

    def __init__(self, goal_id: str):
        super().__init__(f"Goal not found: {goal_id}")
        self.goal_id = goal_id


class GoalValidationError(GoalStoreError):
    """Raised when a write violates a table constraint (bad parent, progress range, missing title)."""

    status_code = 400


class StorageError(GoalStoreError):
    """Raised for connectivity and other database failures."""

    status_code = 500
