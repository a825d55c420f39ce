"""
Purpose:
- Domain exceptions raised by services and translated to JSON envelopes by the routes.
- Remote-call failures are NOT here: those are stored on the item as strings.
"""

class SnapCaptionError(Exception):
    status_code = 400

class ItemNotFound(SnapCaptionError):
    status_code = 404

    def __init__(self, item_id: str):
        super().__init__(f"Item not found: {item_id}")
        self.item_id = item_id

class EmptyCollection(SnapCaptionError):
    pass

class BulkError(SnapCaptionError):
    pass

class NothingToExport(SnapCaptionError):
    pass

class CameraError(SnapCaptionError):
    """Camera acquisition/capture failure carrying a user-facing message."""

    def __init__(self, message: str, category: str = "other"):
        super().__init__(message)
        self.category = category

class InvalidTransition(SnapCaptionError):
    status_code = 409
