"""
Errors raised by jwt provider resources and the lifecycle host.
Each carries the schema attribute involved (if any) and the HTTP status the API maps it to.
"""


class ProviderError(Exception):
    """Base class. Messages are surfaced verbatim to the caller; never include secret material."""

    status_code = 400
    error = "provider_error"

    def __init__(self, message: str, attribute: str | None = None):
        super().__init__(message)
        self.message = message
        self.attribute = attribute

    def to_detail(self) -> dict:
        return {"error": self.error, "error_description": self.message}


class InvalidAttribute(ProviderError):
    error = "invalid_attribute"


class UnsupportedAlgorithm(ProviderError):
    error = "unsupported_algorithm"


class MalformedClaims(ProviderError):
    error = "malformed_claims"


class MalformedSecret(ProviderError):
    error = "malformed_secret"


class SigningFailure(ProviderError):
    status_code = 500
    error = "signing_failure"


class InvalidAddress(ProviderError):
    error = "invalid_address"


class UnknownResourceType(ProviderError):
    status_code = 404
    error = "unknown_resource_type"


class ResourceNotFound(ProviderError):
    status_code = 404
    error = "resource_not_found"
