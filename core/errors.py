"""Error types shared by the store, fetcher and service layers"""


class DomainValidationError(Exception):
    """Domain validation error for service layer"""
    def __init__(self, message: str, code: str = "VALIDATION_FAILED"):
        self.message = message
        self.code = code
        super().__init__(message)


class NotFoundError(Exception):
    """Requested record does not exist"""
    def __init__(self, message: str, code: str = "NOT_FOUND"):
        self.message = message
        self.code = code
        super().__init__(message)


class DependencyError(Exception):
    """Dependency error for external service failures"""
    def __init__(self, message: str, code: str = "DEPENDENCY_UNAVAILABLE"):
        self.message = message
        self.code = code
        super().__init__(message)


class UpstreamUnavailable(DependencyError):
    """Video store or metadata API failed; the whole operation fails"""
    def __init__(self, message: str, code: str = "UPSTREAM_UNAVAILABLE"):
        super().__init__(message, code)
