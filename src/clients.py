"""
REST API client for Cloud Functions (v1 API).

The v1 API only reports 1st-gen functions. Functions deployed with --gen2
by the deploy command are not visible to describe/list.
"""

import logging
from typing import Dict, Iterator, List, Optional

import google.auth
import requests
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import AuthorizedSession

logger = logging.getLogger(__name__)

API_BASE = "https://cloudfunctions.googleapis.com/v1"


class CloudFunctionsRestClient:
    """REST client for the Cloud Functions v1 API.

    Use as a context manager so the underlying HTTP session is released
    when the command finishes.
    """

    def __init__(self, project_id: str, timeout_s: int = 60):
        """
        Initialize the Cloud Functions REST client.

        Credentials are resolved through Application Default Credentials,
        which honours GOOGLE_APPLICATION_CREDENTIALS.

        Args:
            project_id: GCP project ID
            timeout_s: Request timeout in seconds

        Raises:
            RuntimeError: If credentials cannot be loaded
        """
        self.project_id = project_id
        self.timeout_s = timeout_s

        try:
            creds, _ = google.auth.default(
                scopes=["https://www.googleapis.com/auth/cloud-platform"]
            )
        except GoogleAuthError as e:
            raise RuntimeError(f"Failed to create client: {e}") from e
        self.session = AuthorizedSession(creds)

    def __enter__(self) -> "CloudFunctionsRestClient":
        return self

    def __exit__(self, exc_type, exc, tb) -> None:
        self.close()

    def close(self) -> None:
        """Release the HTTP session."""
        self.session.close()

    def _url(self, path: str) -> str:
        """Construct full API URL from path."""
        return f"{API_BASE}/{path.lstrip('/')}"

    def _get(self, url: str, params: Optional[Dict] = None) -> requests.Response:
        """
        Execute a single GET request. Transport failures are not retried.

        Raises:
            RuntimeError: If the request could not be sent
        """
        logger.debug(f"GET {url} params={params or {}}")
        try:
            return self.session.get(url, params=params, timeout=self.timeout_s)
        except (requests.RequestException, GoogleAuthError) as e:
            raise RuntimeError(f"Request to {url} failed: {e}") from e

    def _json(self, resp: requests.Response) -> Dict:
        """
        Decode a JSON response body.

        Raises:
            RuntimeError: If the body is not valid JSON
        """
        try:
            return resp.json()
        except ValueError as e:
            raise RuntimeError(
                f"Malformed response from {resp.url}: {resp.text[:200]}"
            ) from e

    def get_function(self, function_name: str) -> Dict:
        """
        Get details of a specific function.

        Args:
            function_name: Full function resource name

        Returns:
            Function resource as dictionary

        Raises:
            RuntimeError: If API call fails
        """
        resp = self._get(self._url(function_name))
        if resp.status_code != 200:
            raise RuntimeError(
                f"Failed to get function ({resp.status_code}): {resp.text}"
            )
        return self._json(resp)

    def iter_functions(self, parent: str) -> Iterator[Dict]:
        """
        Iterate over all functions under a project/location, page by page.

        Pages are fetched lazily as the iterator is consumed; the iterator
        is exhausted once the last page has been yielded.

        Args:
            parent: projects/<project>/locations/<region>

        Yields:
            Function resources as dictionaries

        Raises:
            RuntimeError: If any page request fails
        """
        url = self._url(f"{parent}/functions")
        page_token: Optional[str] = None

        while True:
            params = {}
            if page_token:
                params["pageToken"] = page_token

            resp = self._get(url, params=params)
            if resp.status_code != 200:
                raise RuntimeError(
                    f"Failed to list functions ({resp.status_code}): {resp.text}"
                )

            data = self._json(resp)
            for item in data.get("functions", []):
                yield item

            page_token = data.get("nextPageToken")
            if not page_token:
                break

    def list_functions(self, parent: str) -> List[Dict]:
        """Return every function under parent."""
        return list(self.iter_functions(parent))
