"""
GCE Ops - Authentication

Resolves Application Default Credentials and the target project, and builds
the Compute Engine v1 client every command talks to.
"""

import os

import google.auth
from google.auth.exceptions import DefaultCredentialsError, RefreshError
from google.auth.transport.requests import Request
from googleapiclient import discovery
import googleapiclient.http
import google_auth_httplib2
import httplib2

from gce_ops.core.exceptions import AuthenticationError, ConfigurationError
from gce_ops.core.config import VERSION
from gce_ops.utils.logger import get_logger

LOGIN_FIX = "gcloud auth application-default login"

# Checked in order when neither the caller nor the credentials name a project
PROJECT_ENV_VARS = ('GOOGLE_CLOUD_PROJECT', 'CLOUDSDK_CORE_PROJECT')


def user_agent() -> str:
    return f'gce_ops-{VERSION}'


def build_compute_client(credentials):
    """
    Build a Compute Engine v1 client whose requests carry the gce_ops user agent.

    Each request gets its own AuthorizedHttp since httplib2.Http is not
    thread-safe.
    """

    def _request_builder(http, *args, **kwargs):
        headers = kwargs.setdefault('headers', {})
        headers['user-agent'] = user_agent()
        auth_http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
        return googleapiclient.http.HttpRequest(auth_http, *args, **kwargs)

    return discovery.build(
        'compute',
        'v1',
        credentials=credentials,
        cache_discovery=False,
        requestBuilder=_request_builder
    )


class AuthManager:
    """
    Loads credentials once and hands out a cached Compute client.

    Usage:
        compute, project = AuthManager(logger).get_client('my-project')
    """

    def __init__(self, logger=None, environ=None):
        self.logger = logger or get_logger()
        self.environ = os.environ if environ is None else environ
        self._credentials = None
        self._default_project = None
        self._compute = None

    def load_credentials(self):
        """
        Load Application Default Credentials, refreshing them if expired.

        Returns:
            tuple: (credentials, project_id or None)

        Raises:
            AuthenticationError: No credentials, or an expired token that cannot be refreshed
        """
        if self._credentials is not None:
            return self._credentials, self._default_project

        try:
            credentials, project = google.auth.default()
        except DefaultCredentialsError:
            raise AuthenticationError(
                "No credentials found. You need to authenticate first.",
                fix=LOGIN_FIX
            )

        if getattr(credentials, 'expired', False):
            if not getattr(credentials, 'refresh_token', None):
                raise AuthenticationError("Credentials have expired", fix=LOGIN_FIX)
            self.logger.debug("Refreshing expired credentials...")
            try:
                credentials.refresh(Request())
            except RefreshError as e:
                raise AuthenticationError(
                    f"Credentials expired and refresh failed: {e}",
                    fix=LOGIN_FIX
                ) from e

        self._credentials, self._default_project = credentials, project
        return credentials, project

    def resolve_project(self, project=None):
        """
        Pick the project to operate on.

        An explicit project wins, then the one attached to the credentials,
        then the environment.

        Raises:
            ConfigurationError: If no project can be found
        """
        if project:
            return project

        _, default_project = self.load_credentials()
        if default_project:
            return default_project

        for name in PROJECT_ENV_VARS:
            if self.environ.get(name):
                self.logger.debug(f"Using project from ${name}")
                return self.environ[name]

        raise ConfigurationError(
            "No project specified and none found in credentials or environment",
            fix="pass --project or run: gcloud config set project PROJECT_ID"
        )

    def get_client(self, project=None):
        """
        Return (compute_client, project_id), building the client on first use.

        Raises:
            AuthenticationError: If credentials are missing or the client cannot be built
            ConfigurationError: If no project can be resolved
        """
        credentials, _ = self.load_credentials()
        project = self.resolve_project(project)

        if self._compute is None:
            try:
                self._compute = build_compute_client(credentials)
            except (httplib2.HttpLib2Error, OSError) as e:
                raise AuthenticationError(f"Failed to create Compute API client: {e}") from e

        return self._compute, project
