"""
REST fetcher for rest connections.

One httpx.Client per call, closed before returning; nothing is reused
across requests. The transport is injectable (httpx.MockTransport in tests).
"""

import base64
import logging
from typing import Any

import httpx

from beakdash.core.errors import ConfigError, UpstreamError
from beakdash.schemas import BasicAuth, BearerAuth, RestConfig

_log = logging.getLogger(__name__)

_BODY_METHODS = frozenset({"POST", "PUT", "PATCH"})


def auth_header(auth: BasicAuth | BearerAuth | None) -> str | None:
    """Authorization header value for the configured auth block, if any."""
    if isinstance(auth, BasicAuth):
        credentials = f"{auth.username}:{auth.password}".encode()
        return f"Basic {base64.b64encode(credentials).decode('ascii')}"
    if isinstance(auth, BearerAuth) and auth.token:
        return f"Bearer {auth.token}"
    return None


def build_request(config: RestConfig) -> dict[str, Any]:
    """Keyword arguments for ``httpx.Client.request`` built from the config."""
    if not config.url:
        raise ConfigError("REST connection URL is missing")

    method = (config.method or "GET").upper()
    headers: dict[str, str] = dict(config.headers or {})
    authorization = auth_header(config.auth)
    if authorization is not None:
        headers["Authorization"] = authorization

    kwargs: dict[str, Any] = {"method": method, "url": config.url}
    if method in _BODY_METHODS and config.body is not None:
        headers["Content-Type"] = "application/json"
        kwargs["json"] = config.body
    kwargs["headers"] = headers
    return kwargs


def _as_rows(value: Any) -> list[dict[str, Any]]:
    if isinstance(value, list):
        return [item if isinstance(item, dict) else {"value": item} for item in value]
    if isinstance(value, dict):
        return [value]
    if value is None:
        return []
    return [{"value": value}]


def extract_rows(payload: Any, result_path: str | None = None) -> list[dict[str, Any]]:
    """
    Walk ``result_path`` (dot-separated; numeric segments index lists) into
    the JSON payload and normalise what is found into rows. Without a path
    the whole payload is used.
    """
    value = payload
    if result_path:
        for segment in result_path.split("."):
            if isinstance(value, dict) and segment in value:
                value = value[segment]
            elif isinstance(value, list) and segment.lstrip("-").isdigit():
                index = int(segment)
                if not -len(value) <= index < len(value):
                    raise ConfigError(
                        f"Result path '{result_path}' not found in response"
                    )
                value = value[index]
            else:
                raise ConfigError(f"Result path '{result_path}' not found in response")
    return _as_rows(value)


def fetch_rest_rows(
    config: RestConfig,
    *,
    timeout: float | None = None,
    transport: httpx.BaseTransport | None = None,
) -> list[dict[str, Any]]:
    """Make the configured request and return the extracted rows."""
    request = build_request(config)
    _log.info("Making REST API request to: %s", config.url)
    try:
        with httpx.Client(timeout=timeout, transport=transport) as client:
            resp = client.request(**request)
            if not resp.is_success:
                raise UpstreamError(
                    "REST API request failed",
                    error=f"API returned {resp.status_code}: {resp.reason_phrase}",
                )
            payload = resp.json()
    except httpx.InvalidURL as e:
        raise ConfigError("Invalid REST connection URL", error=str(e)) from e
    except httpx.HTTPError as e:
        raise UpstreamError("REST API request failed", error=str(e)) from e
    except ValueError as e:
        raise UpstreamError(
            "REST API request failed", error=f"Invalid JSON response: {e}"
        ) from e
    return extract_rows(payload, config.result_path)
