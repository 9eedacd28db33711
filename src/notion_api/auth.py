"""Authentication module for loading the Notion integration token.

The token is read from the NOTION_TOKEN environment variable (a .env file is
loaded with python-dotenv) unless one is passed in explicitly, e.g. from the
site configuration file.
"""

import os
from typing import NamedTuple, Optional

from dotenv import load_dotenv

from .errors import InvalidCredentialsError

NOTION_API_URL = "https://api.notion.com/v1"


class Credentials(NamedTuple):
    """Notion API credentials."""
    url: str
    token: str


class Authenticator:
    """Loads and validates the Notion integration token.

    The token is never logged.

    Example:
        >>> auth = Authenticator()
        >>> creds = auth.get_credentials()
        >>> print(f"Connecting to {creds.url}")
    """

    def __init__(self, token: Optional[str] = None, url: str = NOTION_API_URL):
        """Initialize the authenticator.

        Args:
            token: Explicit token; takes precedence over NOTION_TOKEN
            url: Base URL of the Notion API
        """
        load_dotenv()
        self._token = token
        self._url = url

    def get_credentials(self) -> Credentials:
        """Get the Notion credentials.

        Returns:
            Credentials: A named tuple containing url and token

        Raises:
            InvalidCredentialsError: If no token is configured
        """
        token = self._token or os.getenv('NOTION_TOKEN')
        if not token:
            raise InvalidCredentialsError(endpoint=self._url)
        return Credentials(url=self._url, token=token)
