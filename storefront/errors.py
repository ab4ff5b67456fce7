class StorefrontError(Exception):
    """Base class for errors the API turns into a JSON error body."""

    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationError(StorefrontError):
    """A request body is missing required fields or carries bad values."""

    status_code = 400


class StoreError(StorefrontError):
    """The document store could not be reached or failed a read/write."""

    status_code = 500
