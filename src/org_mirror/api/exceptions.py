"""GitHub API exceptions."""

from typing import Optional


SSO_HINT = (
    'Check that the token has the required scopes (repo, read:org) and that it '
    'is authorized for SAML single sign-on in this organization'
)


class GitHubAPIError(Exception):
    """Base exception for GitHub API errors."""

    kind = 'unexpected'

    def __init__(
        self,
        message: str,
        status_code: Optional[int] = None,
        response_data: Optional[dict] = None,
    ):
        """Initialize GitHub API error.

        Args:
            message: Error message
            status_code: HTTP status code (None for network errors)
            response_data: Response data from API
        """
        super().__init__(message)
        self.status_code = status_code
        self.response_data = response_data


class GitHubAuthenticationError(GitHubAPIError):
    """Authentication error with GitHub API."""

    kind = 'unauthorized'


class GitHubPermissionError(GitHubAPIError):
    """Permission denied, usually missing scopes or SSO authorization."""

    kind = 'forbidden'


class GitHubRateLimitError(GitHubAPIError):
    """Rate limit exceeded error."""

    kind = 'rate_limited'

    def __init__(self, message: str, retry_after: int = 60, **kwargs):
        """Initialize rate limit error.

        Args:
            message: Error message
            retry_after: Seconds to wait before retry
            **kwargs: Additional arguments for base class
        """
        super().__init__(message, **kwargs)
        self.retry_after = retry_after


class GitHubNotFoundError(GitHubAPIError):
    """Resource not found error."""

    kind = 'not_found'


class GitHubValidationError(GitHubAPIError):
    """Resource already exists or the request failed validation (HTTP 422)."""

    kind = 'already_exists'
