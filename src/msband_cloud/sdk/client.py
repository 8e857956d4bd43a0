"""
Microsoft Band cloud HTTP client.

Handles request construction, authorized transport, and response decoding.
All resource-specific calls live in the sibling modules (profile, devices, etc.).
"""

import json
import logging
from typing import Any, Dict, Optional, Type, TypeVar, Union
from urllib.parse import urlencode, urlsplit

import requests

from msband_cloud.sdk.auth import BearerAuth, StaticTokenSource, Token, TokenSource
from msband_cloud.sdk.errors import (
    DecodeError,
    EncodingError,
    HTTPStatusError,
    InvalidPath,
    TransportError,
    body_excerpt,
)
from msband_cloud.sdk.types import BASE_URL, USER_AGENT

logger = logging.getLogger(__name__)

T = TypeVar("T")

_HEX_DIGITS = frozenset("0123456789abcdefABCDEF")


class BandClient:
    """
    Microsoft Band cloud HTTP transport.

    Builds requests against a fixed base URL, sends them through a
    requests.Session with the token source attached to each request as
    its auth hook, and decodes JSON responses into record types.

    One instance may be shared between threads as long as the session
    and token source are; no request state is kept on the client. Several
    clients may share one session, each sending its own token.
    """

    def __init__(
        self,
        token_source: Union[TokenSource, Token, str],
        base_url: str = BASE_URL,
        user_agent: str = USER_AGENT,
        session: requests.Session = None,
        timeout=None,
    ):
        parts = urlsplit(base_url)
        if not parts.scheme or not parts.netloc:
            raise ValueError(f"Invalid base URL {base_url!r}")

        self._base_url = base_url
        self._user_agent = user_agent
        self._timeout = timeout
        # A shared session is never modified; auth and Accept are applied per request
        self._session = session or requests.Session()
        self._set_token_source(token_source)

    @property
    def base_url(self) -> str:
        return self._base_url

    @property
    def user_agent(self) -> str:
        return self._user_agent

    @property
    def token_source(self) -> TokenSource:
        return self._token_source

    def _set_token_source(self, token_source) -> None:
        if isinstance(token_source, (Token, str)):
            token_source = StaticTokenSource(token_source)
        self._token_source = token_source
        self._auth = BearerAuth(token_source)

    # ── Request building ─────────────────────────────────────────────────

    def new_request(self, method: str, path: str, body: Any = None) -> requests.Request:
        """
        Build a request for a path relative to the base URL.

        The URL is base_url + path, concatenated as strings. No separator is
        inserted and no "." / ".." resolution happens, so paths should start
        with "/".

        Args:
            method: HTTP method
            path: Resource path, e.g. "/Devices/abc"
            body: JSON-serializable payload, or None for no body

        Returns:
            Unprepared requests.Request with the User-Agent header set

        Raises:
            InvalidPath: If the path is not a well-formed relative reference
            EncodingError: If the body cannot be serialized
        """
        _validate_path(path)
        url = self._base_url + path

        data = None
        if body is not None:
            try:
                data = json.dumps(body).encode("utf-8")
            except (TypeError, ValueError) as e:
                raise EncodingError(f"Cannot encode request body: {e}") from e

        return requests.Request(
            method.upper(),
            url,
            data=data,
            headers={"User-Agent": self._user_agent},
        )

    # ── Transport ────────────────────────────────────────────────────────

    def execute(self, request: requests.Request) -> requests.Response:
        """
        Send a built request with the current bearer token attached.

        The response is streamed; its body is read once by decode().

        Raises:
            AuthError: If no valid token is available (nothing is sent)
            TransportError: On connection failures and timeouts
        """
        if request.auth is None:
            request.auth = self._auth
        prepared = self._session.prepare_request(request)
        if "Accept" not in request.headers:
            prepared.headers["Accept"] = "application/json"
        if prepared.body is not None and "Content-Type" not in prepared.headers:
            prepared.headers["Content-Type"] = "application/json"

        settings = self._session.merge_environment_settings(
            prepared.url, {}, True, None, None,
        )
        logger.debug("%s %s", prepared.method, prepared.url)
        try:
            response = self._session.send(prepared, timeout=self._timeout, **settings)
        except requests.RequestException as e:
            raise TransportError(f"{prepared.method} {prepared.url} failed: {e}") from e

        logger.debug("%s %s -> %s", prepared.method, prepared.url, response.status_code)
        return response

    # ── Response decoding ────────────────────────────────────────────────

    def decode(self, response: requests.Response, model: Type[T] = None) -> Optional[T]:
        """
        Check the status and decode the JSON body into a record.

        The response is closed on every path, exactly once.

        Args:
            response: Response from execute()
            model: Record class with a from_dict() constructor, or None to
                discard the body

        Returns:
            model instance, or None when no model is given

        Raises:
            HTTPStatusError: If the status is outside 200-299 (body not parsed)
            DecodeError: If the body is not JSON or does not fit the model
            TransportError: If reading the body fails
        """
        try:
            if not 200 <= response.status_code <= 299:
                raise HTTPStatusError(
                    response.status_code,
                    reason=response.reason or "",
                    url=response.url or "",
                    body=_error_body(response),
                    response=response,
                )
            if model is None:
                return None

            try:
                content = response.content
            except requests.RequestException as e:
                raise TransportError(f"Reading response from {response.url} failed: {e}") from e

            try:
                payload = json.loads(content)
            except ValueError as e:
                raise DecodeError(f"Invalid JSON in response from {response.url}: {e}") from e
            if not isinstance(payload, dict):
                raise DecodeError(
                    f"Expected a JSON object for {model.__name__}, "
                    f"got {type(payload).__name__}"
                )

            try:
                return model.from_dict(payload)
            except (TypeError, ValueError, KeyError) as e:
                raise DecodeError(f"Response does not match {model.__name__}: {e}") from e
        finally:
            response.close()

    def do(self, request: requests.Request, model: Type[T] = None) -> Optional[T]:
        """Execute a request and decode its response."""
        return self.decode(self.execute(request), model)

    def get(self, path: str, model: Type[T] = None, params: Dict[str, Any] = None) -> Optional[T]:
        """GET a resource path, with optional query parameters, into a model."""
        if params:
            path = f"{path}?{urlencode(params, safe=',:')}"
        return self.do(self.new_request("GET", path), model)

    # ── Token serialization ──────────────────────────────────────────────

    def export_token(self) -> str:
        """Export the current token as a JSON string."""
        return json.dumps(self._token_source.token().to_dict())

    def load_token(self, token_data: str) -> None:
        """Load a previously exported token.

        A refreshing token source keeps refreshing with the loaded token;
        any other source is replaced by a static one.
        """
        token = Token.from_dict(json.loads(token_data))
        if not self._token_source.replace(token):
            self._set_token_source(StaticTokenSource(token))


def _validate_path(path: str) -> None:
    """Reject paths that are not well-formed relative URI references."""
    if not isinstance(path, str):
        raise InvalidPath(f"Path must be a string, got {type(path).__name__}")

    for i, ch in enumerate(path):
        if ord(ch) <= 0x20 or ord(ch) == 0x7F:
            raise InvalidPath(f"Invalid character {ch!r} in path {path!r}")
        if ch == "%":
            escape = path[i + 1:i + 3]
            if len(escape) != 2 or not set(escape) <= _HEX_DIGITS:
                raise InvalidPath(f"Invalid percent escape in path {path!r}")

    try:
        parts = urlsplit(path)
    except ValueError as e:
        raise InvalidPath(f"Invalid path {path!r}: {e}") from e
    if parts.scheme or parts.netloc:
        raise InvalidPath(f"Path must be relative, got {path!r}")


def _error_body(response: requests.Response) -> str:
    """Best-effort text of an error response for diagnostics."""
    try:
        return body_excerpt(response.text)
    except (requests.RequestException, RuntimeError):
        return ""
