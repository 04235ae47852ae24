"""
Engine Errors
Raised only for caller misuse; malformed or missing data never raises.
"""


class CareEngineError(Exception):
    """Base class for timeline engine errors"""


class ItemNotFoundError(CareEngineError, LookupError):
    """The store has no scheduled item with the given id"""

    def __init__(self, item_id: str):
        super().__init__(f"Scheduled item {item_id} not found")
        self.item_id = item_id


class CompletionConflictError(CareEngineError):
    """The item changed between the read and the write of a completion"""

    def __init__(self, item_id: str, message: str):
        super().__init__(message)
        self.item_id = item_id


class NothingToUndoError(CareEngineError):
    """undo() was called with no pending completion to reverse"""


class InvalidLookbackError(CareEngineError, ValueError):
    """Adherence lookback must be a positive number of days"""
