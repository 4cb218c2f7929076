class NotFoundException(Exception):
    """Exception raised when a requested resource is not found."""

    def __init__(self, message: str = "Resource not found"):
        super().__init__(message)


class ConflictException(Exception):
    """Exception raised when a resource is not in a state that allows the operation."""

    def __init__(self, message: str = "Resource is in a conflicting state"):
        super().__init__(message)


class UnauthorizedException(Exception):
    """Exception raised when the request carries no known user."""

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class LLMResponseException(Exception):
    """Exception raised when the language model returns something we cannot use."""

    def __init__(self, message: str = "Unusable response from the language model"):
        super().__init__(message)
