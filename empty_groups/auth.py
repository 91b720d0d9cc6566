"""
Google Workspace Authentication Module

Loads the credentials provided by the host environment and builds the
Google API service objects used by the directory, sheet and email clients.
"""

import os
import logging
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Tuple

import google.auth
import google.auth.exceptions
import google.auth.transport.requests
import requests
from dotenv import load_dotenv
from google.oauth2 import service_account
from googleapiclient.discovery import build


logger = logging.getLogger(__name__)

SCOPES = (
    "https://www.googleapis.com/auth/admin.directory.group",
    "https://www.googleapis.com/auth/admin.directory.customer.readonly",
    "https://www.googleapis.com/auth/spreadsheets",
    "https://www.googleapis.com/auth/gmail.send",
)


@dataclass
class AuthConfig:
    """Configuration for Google Workspace authentication."""
    credentials_file: Optional[str] = None
    delegated_admin: Optional[str] = None
    scopes: Tuple[str, ...] = field(default=SCOPES)


class GoogleWorkspaceAuth:
    """
    Google Workspace credential holder.

    Credentials are either a service account key file (optionally impersonating
    an administrator through domain-wide delegation) or the application default
    credentials of the host.
    """

    def __init__(self, config: AuthConfig):
        """
        Initialize the authentication handler.

        Args:
            config: Authentication configuration
        """
        self.config = config
        self._credentials = None
        self._services: Dict[Tuple[str, str], Any] = {}
        self._validate_config()

    def _validate_config(self) -> None:
        """Validate the authentication configuration."""
        if self.config.credentials_file is not None and not self.config.credentials_file.strip():
            raise ValueError("Credentials file path cannot be empty or whitespace")

        if self.config.delegated_admin is not None and '@' not in self.config.delegated_admin:
            raise ValueError(f"Delegated admin must be an email address: {self.config.delegated_admin}")

        if not self.config.scopes:
            raise ValueError("At least one OAuth scope is required")

    def get_credentials(self):
        """
        Get (and cache) the Google credentials.

        Returns:
            google.auth credentials object
        """
        if self._credentials is None:
            if self.config.credentials_file:
                logger.debug(f"Loading service account credentials from {self.config.credentials_file}")
                self._credentials = service_account.Credentials.from_service_account_file(
                    self.config.credentials_file,
                    scopes=list(self.config.scopes),
                    subject=self.config.delegated_admin,
                )
            else:
                logger.debug("Using application default credentials")
                self._credentials, _ = google.auth.default(scopes=list(self.config.scopes))

        return self._credentials

    def get_service(self, name: str, version: str):
        """
        Build (and cache) a Google API service.

        Args:
            name: API name, e.g. 'admin', 'sheets', 'gmail'
            version: API version, e.g. 'directory_v1'

        Returns:
            googleapiclient Resource
        """
        key = (name, version)
        if key not in self._services:
            self._services[key] = build(
                name, version, credentials=self.get_credentials(), cache_discovery=False
            )
        return self._services[key]

    def validate_credentials(self) -> bool:
        """
        Validate the credentials by refreshing an access token.

        Returns:
            True if the credentials are usable, False otherwise
        """
        try:
            credentials = self.get_credentials()
            credentials.refresh(google.auth.transport.requests.Request())
            logger.info("Google credentials validation successful")
            return True

        except google.auth.exceptions.DefaultCredentialsError as e:
            logger.error(f"No Google credentials available: {e}")
            return False
        except google.auth.exceptions.RefreshError as e:
            logger.error(f"Google credentials validation failed: {e}")
            return False
        except (google.auth.exceptions.TransportError, requests.exceptions.RequestException) as e:
            logger.error(f"Error validating Google credentials: {e}")
            return False


class AuthManager:
    """
    High-level authentication manager that reads the host environment.
    """

    @staticmethod
    def from_environment() -> GoogleWorkspaceAuth:
        """
        Create authentication from environment variables.

        GOOGLE_APPLICATION_CREDENTIALS points to a service account key file and
        WORKSPACE_ADMIN_EMAIL names the administrator to impersonate.

        Returns:
            Configured GoogleWorkspaceAuth instance
        """
        # Load environment variables from .env file if it exists
        load_dotenv()

        credentials_file = os.getenv("GOOGLE_APPLICATION_CREDENTIALS") or None
        delegated_admin = os.getenv("WORKSPACE_ADMIN_EMAIL") or None

        if credentials_file and not os.path.exists(credentials_file):
            raise ValueError(
                f"GOOGLE_APPLICATION_CREDENTIALS points to a missing file: {credentials_file}"
            )

        config = AuthConfig(
            credentials_file=credentials_file,
            delegated_admin=delegated_admin
        )

        return GoogleWorkspaceAuth(config)
