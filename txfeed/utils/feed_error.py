"""
Custom error types for live feed operations.
"""

class FeedError(Exception):
    """Base class for feed errors."""
    pass

class FeedUnavailableError(FeedError):
    """Raised when an operation needs the live feed and it is not ready."""
    pass

class FeedConnectionError(FeedError):
    """Raised when the RPC endpoint cannot be reached or answers with an error."""
    pass

class InvalidCredentialsError(FeedError):
    """Raised when the configured signing key is malformed."""
    pass

# Public exports
__all__ = [
    'FeedError',
    'FeedUnavailableError',
    'FeedConnectionError',
    'InvalidCredentialsError',
]
