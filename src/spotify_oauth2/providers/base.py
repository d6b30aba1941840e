"""Base OAuth2 provider and resource owner interfaces."""

import json
import logging
import secrets
from abc import ABC, abstractmethod
from typing import Any, Mapping
from urllib.parse import parse_qsl, urlencode

import httpx

from ..config import DEFAULT_TIMEOUT
from ..models import AccessToken

logger = logging.getLogger(__name__)

# Grant type -> parameters the caller must supply
GRANTS: dict[str, tuple[str, ...]] = {
    "authorization_code": ("code",),
    "refresh_token": ("refresh_token",),
    "client_credentials": (),
    "password": ("username", "password"),
}


class IdentityProviderError(Exception):
    """Error response from the identity provider."""

    def __init__(self, message: str, status_code: int, response_body: Any = None):
        super().__init__(message)
        self.message = message
        self.status_code = status_code
        self.response_body = response_body


class ResourceOwner(ABC):
    """Authenticated user as described by a provider."""

    @property
    @abstractmethod
    def id(self) -> str | None:
        """Provider-specific user ID."""
        pass

    @abstractmethod
    def to_dict(self) -> dict[str, Any]:
        """Return all of the owner details available."""
        pass


class OAuthProvider(ABC):
    """
    Abstract base class for OAuth2 providers.

    Handles the authorization code flow plumbing (authorization URL and
    state, token exchange, authenticated profile fetch, response decoding).
    Subclasses supply endpoints, scopes, error detection and the resource
    owner type.
    """

    scope_separator: str = ","

    def __init__(
        self,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        http_client: httpx.Client | None = None,
        timeout: float = DEFAULT_TIMEOUT,
    ):
        """
        Initialize OAuth provider.

        Args:
            client_id: OAuth client ID from provider
            client_secret: OAuth client secret from provider
            redirect_uri: Callback URL for OAuth flow
            http_client: Client used for token and profile requests
            timeout: Request timeout when no client is supplied; a client
                created here is closed by close()
        """
        self.client_id = client_id
        self.client_secret = client_secret
        self.redirect_uri = redirect_uri
        self._owns_client = http_client is None
        self._http_client = http_client or httpx.Client(timeout=timeout)
        self._state: str | None = None

    @property
    @abstractmethod
    def base_authorization_url(self) -> str:
        """Provider's authorization endpoint."""
        pass

    @abstractmethod
    def base_access_token_url(self, params: Mapping[str, Any]) -> str:
        """Provider's token exchange endpoint."""
        pass

    @abstractmethod
    def resource_owner_details_url(self, token: AccessToken) -> str:
        """Provider's user info endpoint."""
        pass

    @property
    @abstractmethod
    def default_scopes(self) -> list[str]:
        """Scopes requested when the caller supplies none."""
        pass

    @abstractmethod
    def check_response(self, response: httpx.Response, data: Any) -> None:
        """
        Raise if the response signals an error.

        Raises:
            IdentityProviderError: If the provider reported a failure
        """
        pass

    @abstractmethod
    def create_resource_owner(self, data: dict[str, Any], token: AccessToken) -> ResourceOwner:
        """Wrap decoded user details in the provider's resource owner type."""
        pass

    @property
    def http_client(self) -> httpx.Client:
        return self._http_client

    def set_http_client(self, client: httpx.Client) -> None:
        if self._owns_client:
            self._http_client.close()
        self._owns_client = False
        self._http_client = client

    def close(self) -> None:
        """Close the HTTP client if this provider created it."""
        if self._owns_client:
            self._http_client.close()

    def __enter__(self) -> "OAuthProvider":
        return self

    def __exit__(self, *exc_info: Any) -> None:
        self.close()

    def get_state(self) -> str | None:
        """Return the state generated by the last authorization URL."""
        return self._state

    def get_authorization_url(self, options: Mapping[str, Any] | None = None) -> str:
        """
        Generate the authorization URL for the OAuth flow.

        Args:
            options: Query overrides; ``scope`` may be a list, anything
                unrecognized is passed through as-is

        Returns:
            Authorization URL to redirect the user to
        """
        params = self._authorization_parameters(dict(options or {}))
        base = self.base_authorization_url
        separator = "&" if "?" in base else "?"
        return f"{base}{separator}{urlencode(params)}"

    def _authorization_parameters(self, options: dict[str, Any]) -> dict[str, Any]:
        if not options.get("state"):
            options["state"] = self._random_state()

        if not options.get("scope"):
            options["scope"] = self.default_scopes

        options.setdefault("response_type", "code")
        options.setdefault("approval_prompt", "auto")

        if isinstance(options["scope"], (list, tuple)):
            options["scope"] = self.scope_separator.join(options["scope"])

        # Stored for CSRF validation of the callback
        self._state = options["state"]

        options.setdefault("redirect_uri", self.redirect_uri)
        options["client_id"] = self.client_id

        return {k: v for k, v in options.items() if v is not None}

    def _random_state(self) -> str:
        return secrets.token_hex(16)

    def get_access_token(self, grant: str, **options: Any) -> AccessToken:
        """
        Request an access token from the token endpoint.

        Args:
            grant: Grant type, e.g. "authorization_code"
            options: Grant parameters, e.g. code="..."

        Returns:
            The issued access token

        Raises:
            ValueError: If the grant is unknown or a required parameter is missing
            IdentityProviderError: If the provider rejects the request
        """
        if grant not in GRANTS:
            raise ValueError(f"Unsupported grant: {grant}")
        for name in GRANTS[grant]:
            if not options.get(name):
                raise ValueError(f'Required parameter not passed: "{name}"')

        params = {
            "client_id": self.client_id,
            "client_secret": self.client_secret,
            "redirect_uri": self.redirect_uri,
            "grant_type": grant,
            **options,
        }

        request = self._http_client.build_request(
            "POST",
            self.base_access_token_url(params),
            data=params,
            headers=self.get_headers(),
        )
        return AccessToken.from_response(self._get_parsed_mapping(request))

    def get_resource_owner(self, token: AccessToken) -> ResourceOwner:
        """
        Fetch user information using the access token.

        Args:
            token: Access token from get_access_token()

        Returns:
            Provider-specific resource owner
        """
        request = self.get_authenticated_request("GET", self.resource_owner_details_url(token), token)
        return self.create_resource_owner(self._get_parsed_mapping(request), token)

    def get_authorization_headers(self, token: AccessToken | str | None = None) -> dict[str, str]:
        return {}

    def get_headers(self, token: AccessToken | str | None = None) -> dict[str, str]:
        headers = {"Accept": "application/json"}
        if token is not None:
            headers.update(self.get_authorization_headers(token))
        return headers

    def get_authenticated_request(
        self, method: str, url: str, token: AccessToken | str, **kwargs: Any
    ) -> httpx.Request:
        """Build a request carrying the token's authorization headers."""
        headers = {**self.get_headers(token), **kwargs.pop("headers", {})}
        return self._http_client.build_request(method, url, headers=headers, **kwargs)

    def get_parsed_response(self, request: httpx.Request) -> Any:
        """Send a request and return the decoded, error-checked body."""
        return self._send(request)[1]

    def _get_parsed_mapping(self, request: httpx.Request) -> dict[str, Any]:
        response, data = self._send(request)
        if not isinstance(data, Mapping):
            raise IdentityProviderError(
                "Invalid response received from Authorization Server. Expected JSON.",
                status_code=response.status_code,
                response_body=data,
            )
        return dict(data)

    def _send(self, request: httpx.Request) -> tuple[httpx.Response, Any]:
        logger.debug(f"{request.method} {request.url}")
        response = self._http_client.send(request)
        data = self.parse_response(response)
        self.check_response(response, data)
        return response, data

    def parse_response(self, response: httpx.Response) -> Any:
        """
        Decode a response body according to its content type.

        Returns:
            A dict for JSON objects and form-encoded bodies, other JSON
            values as-is, or the raw text when the body is not JSON

        Raises:
            IdentityProviderError: If a JSON body cannot be decoded
        """
        content = response.text
        content_type = response.headers.get("content-type", "").lower()

        if "urlencoded" in content_type:
            return dict(parse_qsl(content, keep_blank_values=True))

        try:
            return json.loads(content)
        except ValueError as e:
            if response.status_code >= 500:
                raise IdentityProviderError(
                    "An OAuth server error was encountered that did not contain a JSON body",
                    status_code=response.status_code,
                    response_body=content,
                ) from e
            if "json" in content_type:
                raise IdentityProviderError(
                    f"Failed to parse JSON response: {e}",
                    status_code=response.status_code,
                    response_body=content,
                ) from e
            return content
