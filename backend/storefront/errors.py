"""Exceptions raised by the stores and the gateway wrapper."""


class StorefrontError(Exception):
    """Base class for storefront failures."""


class GatewayError(StorefrontError):
    """A Supabase table read or write failed."""

    def __init__(self, operation: str, cause: Exception | str):
        self.operation = operation
        self.cause = cause
        super().__init__(f"{operation}: {cause}")


class UploadError(StorefrontError):
    """Object storage rejected an upload."""


class AuthenticationError(StorefrontError):
    """Sign-in failed or an access token could not be validated."""


class NotFoundError(StorefrontError):
    """No product with the requested identifier is held in the catalog."""
