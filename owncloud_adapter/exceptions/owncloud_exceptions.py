class OwnCloudError(Exception):
    """Base exception for OwnCloud adapter errors"""

    def __init__(self, message: str, details: dict = None) -> None:
        self.message = message
        self.details = details or {}
        super().__init__(self.message)


class OcsConfigurationError(OwnCloudError):
    """Raised when the OCS configuration is missing or invalid"""

    def __init__(
        self,
        message: str = "Not presented OCS configuration",
        details: dict = None,
    ) -> None:
        super().__init__(message, details)


class TransportError(OwnCloudError):
    """Raised when an HTTP request could not be completed at the network level"""

    def __init__(
        self,
        message: str,
        method: str = None,
        url: str = None,
        details: dict = None,
    ) -> None:
        super().__init__(message, details)
        self.method = method
        self.url = url


class ResponseParseError(OwnCloudError):
    """Raised when a non-empty response body is not well-formed XML"""

    def __init__(self, message: str, diagnostic: str = None, details: dict = None) -> None:
        super().__init__(message, details)
        self.diagnostic = diagnostic


class ResourceNotFoundError(OwnCloudError):
    """Raised by the WebDAV client when the server answers 404"""

    def __init__(
        self,
        message: str = "Resource not found",
        path: str = None,
        details: dict = None,
    ) -> None:
        super().__init__(message, details)
        self.path = path
