"""GitHub REST API client implementation."""

import time
from typing import Any, Dict, List, Optional
from urllib.parse import urljoin

import requests
from loguru import logger
from pydantic import BaseModel

from ..config.config import GitHubInstanceConfig
from .exceptions import (
    SSO_HINT,
    GitHubAPIError,
    GitHubAuthenticationError,
    GitHubNotFoundError,
    GitHubPermissionError,
    GitHubRateLimitError,
    GitHubValidationError,
)
from .rate_limiter import RateLimiter


class APIResponse(BaseModel):
    """Standard API response wrapper."""

    status_code: int
    data: Any
    headers: Dict[str, str]
    success: bool


def _retry_after(headers) -> int:
    """Seconds to wait before retrying a rate limited request.

    Retry-After may be delta-seconds or an HTTP date; anything but a plain
    number falls back to the quota reset time, then to 60 seconds.
    """
    retry_after = str(headers.get('Retry-After', '')).strip()
    if retry_after.isdigit():
        return int(retry_after)

    reset = str(headers.get('X-RateLimit-Reset', '')).strip()
    if reset.isdigit():
        return max(0, int(int(reset) - time.time()))

    return 60


class GitHubClient:
    """GitHub REST API client bound to one token."""

    def __init__(self, config: GitHubInstanceConfig):
        """Initialize GitHub client.

        Args:
            config: Source or destination configuration
        """
        if not config.token:
            raise GitHubAuthenticationError('No authentication token provided')

        self.config = config
        self.base_url = config.api_url.rstrip('/')
        self.session = requests.Session()
        self.rate_limiter = RateLimiter(
            requests_per_second=config.rate_limit_per_second,
            min_remaining=config.rate_limit_min_remaining,
            max_wait=config.rate_limit_max_wait,
        )

        self.session.headers.update(
            {
                'Authorization': f'Bearer {config.token}',
                'Accept': 'application/vnd.github+json',
                'X-GitHub-Api-Version': config.api_version,
                'User-Agent': 'org-mirror/0.1.0',
            }
        )

        logger.debug(f'Initialized GitHub client for {self.base_url}')

    def _build_url(self, endpoint: str) -> str:
        """Build full API URL from endpoint.

        Args:
            endpoint: API endpoint path

        Returns:
            Full API URL
        """
        return urljoin(self.base_url + '/', endpoint.lstrip('/'))

    def _handle_response(self, response: requests.Response) -> APIResponse:
        """Handle API response and convert to standard format.

        Args:
            response: Raw HTTP response

        Returns:
            Standardized API response

        Raises:
            GitHubAPIError: For various API errors
        """
        headers = dict(response.headers)
        status = response.status_code

        if status >= 400:
            try:
                error_data = response.json()
                message = error_data.get('message', f'HTTP {status}')
            except (ValueError, AttributeError):
                error_data = None
                message = f'HTTP {status}: {response.text}'

            # GitHub reports an exhausted quota as 403 with a zero remaining count
            if status == 429 or (
                status == 403 and response.headers.get('X-RateLimit-Remaining') == '0'
            ):
                retry_after = _retry_after(response.headers)
                raise GitHubRateLimitError(
                    f'Rate limit exceeded. Retry after {retry_after} seconds',
                    retry_after=retry_after,
                    status_code=status,
                    response_data=error_data,
                )

            if status == 401:
                raise GitHubAuthenticationError(
                    f'Authentication failed: {message}',
                    status_code=status,
                    response_data=error_data,
                )

            if status == 403:
                raise GitHubPermissionError(
                    f'Forbidden: {message}. {SSO_HINT}',
                    status_code=status,
                    response_data=error_data,
                )

            if status == 404:
                raise GitHubNotFoundError(
                    'Resource not found', status_code=status, response_data=error_data
                )

            if status == 422:
                raise GitHubValidationError(
                    f'Already exists or validation failed: {message}',
                    status_code=status,
                    response_data=error_data,
                )

            raise GitHubAPIError(
                f'API request failed: {message}',
                status_code=status,
                response_data=error_data,
            )

        try:
            data = response.json() if response.content else None
        except ValueError:
            data = response.text

        return APIResponse(
            status_code=status,
            data=data,
            headers=headers,
            success=200 <= status < 300,
        )

    def request(
        self,
        method: str,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
    ) -> APIResponse:
        """Make an API request.

        Args:
            method: HTTP method
            endpoint: API endpoint
            params: Query parameters
            data: JSON request body

        Returns:
            API response
        """
        url = self._build_url(endpoint)
        self.rate_limiter.acquire()

        try:
            response = self.session.request(
                method,
                url,
                params=params,
                json=data,
                timeout=self.config.timeout,
            )
        except requests.RequestException as e:
            logger.error(f'Network error during {method} {endpoint}: {e}')
            raise GitHubAPIError(f'Network error: {e}')

        self.rate_limiter.observe(response.headers)
        return self._handle_response(response)

    def get(
        self, endpoint: str, params: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make GET request."""
        return self.request('GET', endpoint, params=params)

    def post(
        self, endpoint: str, data: Optional[Dict[str, Any]] = None
    ) -> APIResponse:
        """Make POST request."""
        return self.request('POST', endpoint, data=data)

    def get_paginated(
        self,
        endpoint: str,
        params: Optional[Dict[str, Any]] = None,
        per_page: int = 100,
    ) -> List[Dict[str, Any]]:
        """Get all pages of a paginated endpoint.

        Pages are requested from 1 upwards; the first page holding fewer
        than ``per_page`` items is the last one. A full page always causes
        another request, so a listing whose size is an exact multiple of
        ``per_page`` ends with an empty page.

        Args:
            endpoint: API endpoint
            params: Query parameters
            per_page: Items per page

        Returns:
            List of all items from all pages
        """
        all_items: List[Dict[str, Any]] = []
        page = 1
        query = dict(params or {})
        query['per_page'] = per_page

        while True:
            query['page'] = page
            response = self.get(endpoint, params=dict(query))

            items = response.data if response.data is not None else []
            if not isinstance(items, list):
                raise GitHubAPIError(
                    f'Expected a list from {endpoint}, got {type(items).__name__}',
                    status_code=response.status_code,
                )

            all_items.extend(items)

            if len(items) < per_page:
                break

            page += 1

        logger.debug(f'Retrieved {len(all_items)} items from {endpoint} in {page} pages')
        return all_items

    def test_connection(self) -> bool:
        """Test that the token is accepted.

        Returns:
            True if connection successful, False otherwise
        """
        try:
            response = self.get('/user')
            return response.success
        except GitHubAPIError as e:
            logger.error(f'Connection test failed for {self.base_url}: {e}')
            return False

    def close(self):
        """Close the client session."""
        self.session.close()
        logger.debug('GitHub client session closed')

    def __enter__(self):
        """Context manager entry."""
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        """Context manager exit."""
        self.close()


class GitHubClientFactory:
    """Factory for creating GitHub API clients."""

    @staticmethod
    def create_client(config: GitHubInstanceConfig) -> GitHubClient:
        """Create GitHub client from configuration.

        Args:
            config: Source or destination configuration

        Returns:
            Configured GitHub client
        """
        return GitHubClient(config)
