"""Access token providers.

By default the token of the active ``gcloud`` user is used. With
``--use-service-account`` Application Default Credentials are used instead,
which requires the ``adc`` extra (``google-auth``).
"""

from __future__ import annotations

import logging
import shutil
import subprocess
from collections.abc import Callable
from typing import Any

from .exceptions import AuthenticationError

logger = logging.getLogger(__name__)

CLOUD_PLATFORM_SCOPE = "https://www.googleapis.com/auth/cloud-platform"

TokenProvider = Callable[[], str]


class GcloudTokenProvider:
    """Fetch a user access token with ``gcloud auth print-access-token``."""

    def __init__(self, gcloud: str | None = None, timeout: float = 30.0) -> None:
        self._gcloud = gcloud
        self._timeout = timeout

    def __call__(self) -> str:
        gcloud = self._gcloud or shutil.which("gcloud")
        if gcloud is None:
            raise AuthenticationError(
                "gcloud CLI not found on PATH. Install the Google Cloud SDK and run "
                "'gcloud auth login', or use --use-service-account"
            )
        try:
            result = subprocess.run(
                [gcloud, "auth", "print-access-token"],
                capture_output=True,
                text=True,
                timeout=self._timeout,
            )
        except (OSError, subprocess.TimeoutExpired) as e:
            raise AuthenticationError(f"Failed to run gcloud: {e}") from e

        if result.returncode != 0:
            raise AuthenticationError(
                f"gcloud auth print-access-token failed: {result.stderr.strip()}"
            )
        token = result.stdout.strip()
        if not token:
            raise AuthenticationError("gcloud returned an empty access token")
        return token


class ADCTokenProvider:
    """
    Application Default Credentials via google-auth.

    Credentials are refreshed only when missing or expired.
    """

    def __init__(self, scopes: list[str] | None = None) -> None:
        """
        Raises:
            ImportError: If google-auth is not installed
        """
        try:
            import google.auth
            import google.auth.exceptions
            import google.auth.transport.requests

            self._google_auth = google.auth
            self._request_factory = google.auth.transport.requests.Request
        except ImportError as e:
            raise ImportError(
                "google-auth is required for --use-service-account. "
                "Install with: pip install 'gemctl[adc]'"
            ) from e

        self._scopes = scopes or [CLOUD_PLATFORM_SCOPE]
        self._credentials: Any = None

    def __call__(self) -> str:
        if self._credentials is None:
            try:
                self._credentials, _ = self._google_auth.default(scopes=self._scopes)
            except self._google_auth.exceptions.DefaultCredentialsError as e:
                raise AuthenticationError(f"No Application Default Credentials: {e}") from e

        if not self._credentials.valid:
            logger.debug("Refreshing Application Default Credentials")
            try:
                self._credentials.refresh(self._request_factory())
            except self._google_auth.exceptions.RefreshError as e:
                raise AuthenticationError(f"Failed to refresh credentials: {e}") from e
        return str(self._credentials.token)


def default_token_provider(use_service_account: bool = False) -> TokenProvider:
    """Pick the provider matching ``ClientConfig.use_service_account``."""
    if use_service_account:
        return ADCTokenProvider()
    return GcloudTokenProvider()
