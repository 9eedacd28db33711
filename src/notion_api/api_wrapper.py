"""API wrapper for the Notion REST API.

This module wraps a requests session and provides error translation from
HTTP exceptions to our typed exception hierarchy. It integrates with the
retry logic for handling rate limits and resolves all pagination so callers
always receive complete result lists.
"""

import logging
import re
from typing import Any, Dict, List, Optional

import requests
from requests.exceptions import ConnectionError, HTTPError, Timeout

from .auth import Authenticator
from .errors import (
    APIAccessError,
    APIUnreachableError,
    InvalidCredentialsError,
    PageNotFoundError,
)
from .retry_logic import retry_on_rate_limit

logger = logging.getLogger(__name__)

NOTION_VERSION = "2022-06-28"
PAGE_SIZE = 100


class NotionAPI:
    """Thin wrapper around the Notion REST API with error translation.

    This class:
    1. Handles authentication using the Authenticator
    2. Translates HTTP errors to typed exceptions
    3. Integrates retry logic for 429 rate limits
    4. Follows cursor pagination for database queries and block children

    Example:
        >>> api = NotionAPI(Authenticator())
        >>> rows = api.query_database("0123456789abcdef0123456789abcdef")
        >>> tree = api.get_block_tree(rows[0]["id"])
    """

    def __init__(self, authenticator: Authenticator, timeout: int = 30):
        """Initialize the API wrapper.

        Args:
            authenticator: Authenticator instance for loading credentials
            timeout: Request timeout in seconds
        """
        self._authenticator = authenticator
        self._timeout = timeout
        self._session: Optional[requests.Session] = None

    def _get_session(self) -> requests.Session:
        """Get or create the authenticated session.

        Raises:
            InvalidCredentialsError: If no token is configured
        """
        if self._session is None:
            creds = self._authenticator.get_credentials()
            session = requests.Session()
            session.headers.update({
                "Authorization": f"Bearer {creds.token}",
                "Notion-Version": NOTION_VERSION,
                "Content-Type": "application/json",
            })
            self._session = session
        return self._session

    def _sanitize_credentials(self, text: str) -> str:
        """Sanitize error messages to prevent token leakage.

        Example:
            >>> api._sanitize_credentials("Bearer secret_abc123 rejected")
            'Bearer ***REDACTED*** rejected'
        """
        if not text:
            return text

        sanitized = re.sub(
            r'Authorization:\s*[^\n\r]+',
            'Authorization: ***REDACTED***',
            text,
            flags=re.IGNORECASE
        )
        sanitized = re.sub(
            r'Bearer\s+[^\s\n\r]+',
            'Bearer ***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        # Internal integration tokens: secret_... and ntn_...
        sanitized = re.sub(
            r'\b(secret|ntn)_[A-Za-z0-9]{8,}\b',
            '***REDACTED***',
            sanitized
        )
        sanitized = re.sub(
            r'(token)["\']?\s*[:=]\s*["\']?([^"\'\s&]+)',
            r'\1=***REDACTED***',
            sanitized,
            flags=re.IGNORECASE
        )
        return sanitized

    def _translate_error(self, exception: Exception, operation: str, object_id: str = "unknown") -> Exception:
        """Translate HTTP exceptions to typed Notion exceptions.

        Args:
            exception: The original exception from requests
            operation: Description of the operation that failed (for logging)
            object_id: Id of the page, block or database being accessed

        Returns:
            Exception: Translated exception (one of our typed exceptions)
        """
        endpoint = self._authenticator.get_credentials().url

        if isinstance(exception, (Timeout, ConnectionError)):
            return APIUnreachableError(endpoint=endpoint)

        status_code = getattr(getattr(exception, 'response', None), 'status_code', None)
        if status_code == 401:
            return InvalidCredentialsError(endpoint=endpoint)
        if status_code == 404:
            return PageNotFoundError(object_id=object_id)
        if status_code in (502, 503, 504):
            return APIUnreachableError(endpoint=endpoint)

        safe_error_msg = self._sanitize_credentials(str(exception))
        logger.error(f"API operation failed: {operation} - {safe_error_msg}")
        if status_code == 403:
            return APIAccessError(
                f"Notion API denied access during {operation}; "
                f"is the integration shared with the database?"
            )
        return APIAccessError(f"Notion API failure during {operation}")

    def _request(self, method: str, path: str, operation: str, object_id: str,
                 payload: Optional[Dict[str, Any]] = None,
                 params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        """Send one API request with retries and error translation."""
        url = f"{self._authenticator.get_credentials().url}/{path}"

        def _send():
            response = self._get_session().request(
                method, url, json=payload, params=params, timeout=self._timeout
            )
            response.raise_for_status()
            return response.json()

        try:
            return retry_on_rate_limit(_send)
        except (HTTPError, Timeout, ConnectionError) as e:
            raise self._translate_error(e, operation, object_id) from e

    def query_database(self, database_id: str) -> List[Dict[str, Any]]:
        """Fetch every row (page object) of a database.

        Args:
            database_id: Notion database id

        Returns:
            List of page objects in API order

        Raises:
            InvalidCredentialsError: If the token is invalid
            PageNotFoundError: If the database doesn't exist or isn't shared
            APIUnreachableError: If API is unreachable
            APIAccessError: If API access fails after retries
        """
        results: List[Dict[str, Any]] = []
        cursor = None
        while True:
            payload: Dict[str, Any] = {"page_size": PAGE_SIZE}
            if cursor:
                payload["start_cursor"] = cursor
            data = self._request(
                "POST", f"databases/{database_id}/query",
                f"query_database({database_id})", database_id, payload=payload,
            )
            results.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
        logger.info(f"Fetched {len(results)} row(s) from database {database_id}")
        return results

    def get_block_children(self, block_id: str) -> List[Dict[str, Any]]:
        """Fetch all direct children of a block or page.

        Args:
            block_id: Block or page id

        Returns:
            List of block objects in authoring order
        """
        results: List[Dict[str, Any]] = []
        cursor = None
        while True:
            params: Dict[str, Any] = {"page_size": PAGE_SIZE}
            if cursor:
                params["start_cursor"] = cursor
            data = self._request(
                "GET", f"blocks/{block_id}/children",
                f"get_block_children({block_id})", block_id, params=params,
            )
            results.extend(data.get("results", []))
            cursor = data.get("next_cursor")
            if not data.get("has_more") or not cursor:
                break
        return results

    def get_block_tree(self, page_id: str) -> List[Dict[str, Any]]:
        """Fetch the complete block tree of a page.

        Blocks flagged ``has_children`` get their children attached under the
        ``children`` key. The descent uses an explicit work list, so deep
        nesting cannot exhaust the interpreter stack.

        Args:
            page_id: Notion page id

        Returns:
            Root blocks of the page with nested children attached
        """
        roots = self.get_block_children(page_id)
        pending = [b for b in roots if b.get("has_children")]
        fetched = 0
        while pending:
            block = pending.pop()
            children = self.get_block_children(block["id"])
            block["children"] = children
            fetched += 1
            pending.extend(c for c in children if c.get("has_children"))
        logger.debug(f"Fetched block tree of {page_id} ({fetched} nested level request(s))")
        return roots
