class NetworkError(Exception):
    """A request failed in transport or came back with a non-2xx status."""

    def __init__(self, message: str, status_code=None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
