"""Credential handling for git transport URLs."""

import re
from urllib.parse import urlsplit, urlunsplit

TOKEN_USER = 'x-access-token'
MASK = '***'

_URL_CREDENTIALS = re.compile(r'(?P<scheme>[a-zA-Z][a-zA-Z0-9+.-]*://)[^/@\s]+@')
_BEARER = re.compile(r'(?i)(bearer\s+)[^\s\'"]+')


def authenticated_url(url: str, token: str) -> str:
    """Embed a token into an HTTPS git URL.

    ``https://github.com/org/repo.git`` becomes
    ``https://x-access-token:<token>@github.com/org/repo.git``. Any existing
    user info is replaced.

    Raises:
        ValueError: If the URL is not http(s)
    """
    parts = urlsplit(url)
    if parts.scheme not in ('http', 'https'):
        raise ValueError(f'Only http(s) git URLs can carry a token: {mask_credentials(url)}')

    host = parts.netloc.rsplit('@', 1)[-1]
    return urlunsplit(
        (parts.scheme, f'{TOKEN_USER}:{token}@{host}', parts.path, parts.query, '')
    )


def mask_credentials(text: str) -> str:
    """Replace user info in URLs and bearer tokens with a mask."""
    if not text:
        return text
    text = _URL_CREDENTIALS.sub(lambda m: f"{m.group('scheme')}{MASK}@", text)
    return _BEARER.sub(lambda m: f'{m.group(1)}{MASK}', text)
