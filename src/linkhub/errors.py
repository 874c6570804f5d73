class LinkHubError(Exception):
    """Base exception for linkhub clients"""

    pass


class ConfigurationError(LinkHubError, ValueError):
    """Raised when a client is constructed with an invalid configuration"""

    def __init__(self, message: str, field: str | None = None):
        self.field = field
        super().__init__(message)


class RequestFailedError(LinkHubError):
    """Raised when the transport fails (network error, timeout)"""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        super().__init__(f"{method} {url} failed: {reason}")


class InvalidRequestError(LinkHubError):
    """Raised when a request cannot be built (unencodable body, invalid URL)"""

    def __init__(self, method: str, url: str, reason: str):
        self.method = method
        self.url = url
        super().__init__(f"Cannot build {method} {url} request: {reason}")


class ResponseDecodeError(LinkHubError):
    """Raised when a response body cannot be decoded into the result type"""

    def __init__(self, url: str, status_code: int, reason: str):
        self.url = url
        self.status_code = status_code
        super().__init__(f"Failed to decode response from {url} (status {status_code}): {reason}")


class GraphQLError(LinkHubError):
    """Base exception for GraphQL failures"""

    pass


class GraphQLOperationError(GraphQLError):
    """Raised when a GraphQL query or mutation fails, wraps the underlying cause"""

    def __init__(self, cause: Exception):
        self.cause = cause
        super().__init__(f"graphql operation failed: {cause}")


class GraphQLStatusError(GraphQLError):
    """Raised when the GraphQL endpoint answers with a non-200 status"""

    def __init__(self, status_code: int, body: str):
        self.status_code = status_code
        self.body = body
        super().__init__(f"non-200 OK status code: {status_code} body: {body!r}")


class GraphQLResponseError(GraphQLError):
    """Raised when the GraphQL response carries errors or lacks data"""

    def __init__(self, message: str, errors: list | None = None):
        self.errors = errors or []
        super().__init__(message)
