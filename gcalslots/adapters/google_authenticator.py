"""
Google Calendar authentication using the OAuth installed-app flow.
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from google.auth.exceptions import GoogleAuthError, RefreshError
from google.auth.transport.requests import AuthorizedSession, Request
from google.oauth2.credentials import Credentials
from google_auth_oauthlib.flow import InstalledAppFlow
from rich.console import Console

from ..domain.exceptions import AuthenticationError

logger = logging.getLogger(__name__)

console = Console(stderr=True)


class GoogleAuthenticator:
    """
    Handles authentication with the Google Calendar API.

    This flow is ideal for CLI applications:
    1. App starts a temporary local web server
    2. User signs in with Google in the browser
    3. Google redirects back to the local server with an authorization code
    4. App exchanges the code for access and refresh tokens
    5. Tokens are cached so later runs only refresh silently
    """

    # Read-only access is all the views and the slot search need
    SCOPES = ["https://www.googleapis.com/auth/calendar.readonly"]

    def __init__(
        self,
        client_secrets_file: Path | None = None,
        credentials_dir: Path | None = None,
        token_file: Path | None = None,
    ):
        """
        Initialize the authenticator.

        Args:
            client_secrets_file: OAuth client secrets downloaded from Google Cloud
            credentials_dir: Directory searched for client_secret*.json when no
                explicit file is configured
            token_file: Optional path to the token cache file
        """
        self.client_secrets_file = client_secrets_file
        self.credentials_dir = credentials_dir or Path.cwd()
        self.token_file = token_file or Path.home() / ".gcalslots_token.json"

    def find_client_secrets(self) -> Path:
        """
        Locate the OAuth client secrets file.

        Raises:
            AuthenticationError: If no client secrets file can be found
        """
        if self.client_secrets_file is not None:
            if not self.client_secrets_file.exists():
                raise AuthenticationError(
                    f"Client secrets file not found: {self.client_secrets_file}"
                )
            return self.client_secrets_file

        candidates = sorted(self.credentials_dir.glob("client_secret*.json"))
        if not candidates:
            raise AuthenticationError(
                f"No credentials file found. Please place your client_secret*.json "
                f"file in {self.credentials_dir}"
            )
        return candidates[0]

    def _load_cached_credentials(self) -> Optional[Credentials]:
        if not self.token_file.exists():
            return None

        try:
            return Credentials.from_authorized_user_file(str(self.token_file), self.SCOPES)
        except (OSError, ValueError) as exc:
            logger.warning("Could not load token cache %s: %s", self.token_file, exc)
            return None

    def _save_credentials(self, credentials: Credentials) -> None:
        try:
            self.token_file.parent.mkdir(parents=True, exist_ok=True)
            with open(self.token_file, "w", encoding="utf-8") as file_handle:
                file_handle.write(credentials.to_json())
            # Set restrictive permissions (owner only)
            self.token_file.chmod(0o600)
        except OSError as exc:
            logger.warning("Could not save token cache to %s: %s", self.token_file, exc)

    def get_credentials(self, force_refresh: bool = False) -> Credentials:
        """
        Get valid credentials, using the cache or requesting new ones.

        Args:
            force_refresh: Force authentication even if a cached token exists

        Returns:
            Google OAuth credentials

        Raises:
            AuthenticationError: If authentication fails
        """
        if not force_refresh:
            credentials = self._load_cached_credentials()

            if credentials and credentials.valid:
                return credentials

            if credentials and credentials.expired and credentials.refresh_token:
                try:
                    credentials.refresh(Request())
                except RefreshError as exc:
                    # Revoked or expired refresh token, fall through to a new sign-in
                    logger.warning("Token refresh failed, re-authenticating: %s", exc)
                else:
                    self._save_credentials(credentials)
                    return credentials

        return self._authenticate_installed_app_flow()

    def _authenticate_installed_app_flow(self) -> Credentials:
        """
        Perform the installed-app flow in the user's browser.

        Raises:
            AuthenticationError: If authentication fails
        """
        secrets_file = self.find_client_secrets()

        console.print("\n[bold cyan]🔐 Google Authentication Required[/bold cyan]")
        console.print("You need to sign in to access calendar information.\n")
        console.print("[dim]A browser window will open. Waiting for authentication...[/dim]\n")

        try:
            flow = InstalledAppFlow.from_client_secrets_file(str(secrets_file), self.SCOPES)
            credentials = flow.run_local_server(port=0)
        except (GoogleAuthError, ValueError, OSError) as exc:
            raise AuthenticationError(f"Authentication failed: {exc}") from exc

        console.print("[bold green]✓ Authentication successful![/bold green]\n")

        self._save_credentials(credentials)

        return credentials

    def authorized_session(self, force_refresh: bool = False) -> AuthorizedSession:
        """Return a requests session that signs every call with valid credentials."""
        return AuthorizedSession(self.get_credentials(force_refresh=force_refresh))

    def clear_cache(self) -> None:
        """Clear the token cache (force re-authentication next time)."""
        if self.token_file.exists():
            self.token_file.unlink()
        logger.info("Removed token cache %s", self.token_file)
