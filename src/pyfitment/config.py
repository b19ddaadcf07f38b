"""Navigator configuration for pyfitment."""

from __future__ import annotations

import dataclasses
import os
from collections.abc import Callable
from typing import Any, TypeVar

from pyfitment.exceptions import FitmentConfigError

T = TypeVar("T")

DEFAULT_BASE_URL = "http://localhost:4000/api"


def _env_bool(value: str | None, default: bool) -> bool:
    if value is None:
        return default
    normalized = value.strip().lower()
    if normalized in {"1", "true", "yes", "y", "on"}:
        return True
    if normalized in {"0", "false", "no", "n", "off"}:
        return False
    return default


def _env_number(env_key: str, value: str, parse: Callable[[str], T]) -> T:
    try:
        return parse(value)
    except ValueError as exc:
        raise FitmentConfigError(f"{env_key} must be numeric, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class NavigatorConfig:
    """Navigator configuration.

    Parameters
    ----------
    base_url : str
        Catalog REST API base URL.  Only used when ``use_mocks`` is off.
    use_mocks : bool
        Serve the catalog from an in-memory snapshot instead of HTTP.
    search_debounce : float
        Seconds the search bar waits after the last keystroke before
        resolving the query.
    min_query_length : int
        Queries shorter than this (after stripping) never reach the
        provider.
    result_limit : int
        Maximum number of search results returned per resolution.
    mock_latency : float
        Simulated latency (seconds) awaited by the in-memory provider
        before each response.
    request_timeout : float
        Total timeout in seconds for a single HTTP request.
    catalog_path : str or None
        JSON catalog snapshot loaded by the in-memory provider.
    """

    base_url: str = DEFAULT_BASE_URL
    use_mocks: bool = True
    search_debounce: float = 0.2
    min_query_length: int = 2
    result_limit: int = 10
    mock_latency: float = 0.0
    request_timeout: float = 10.0
    catalog_path: str | None = None

    def __post_init__(self) -> None:
        if self.search_debounce < 0:
            raise FitmentConfigError("search_debounce must be >= 0")
        if self.min_query_length < 0:
            raise FitmentConfigError("min_query_length must be >= 0")
        if self.result_limit <= 0:
            raise FitmentConfigError("result_limit must be positive")
        if self.mock_latency < 0:
            raise FitmentConfigError("mock_latency must be >= 0")
        if self.request_timeout <= 0:
            raise FitmentConfigError("request_timeout must be positive")

    @classmethod
    def from_env(cls, **overrides: Any) -> NavigatorConfig:
        """Create configuration from environment variables.

        Reads ``FITMENT_API_URL`` and the optional ``FITMENT_*`` tuning
        variables.  Explicit keyword arguments override environment values.
        Mocks are enabled by default unless an API URL is configured.

        Parameters
        ----------
        **overrides
            Explicit field values that take precedence over env vars.

        Returns
        -------
        NavigatorConfig
            Populated configuration.
        """
        env = os.environ
        config_kwargs: dict[str, Any] = {}

        base_url = env.get("FITMENT_API_URL", "").strip()
        if base_url:
            config_kwargs["base_url"] = base_url

        if "use_mocks" not in overrides:
            config_kwargs["use_mocks"] = _env_bool(env.get("FITMENT_USE_MOCKS"), not base_url)

        _ENV_NUMERIC_MAP: dict[str, tuple[str, Callable[[str], Any]]] = {
            "FITMENT_SEARCH_DEBOUNCE": ("search_debounce", float),
            "FITMENT_MIN_QUERY_LENGTH": ("min_query_length", int),
            "FITMENT_RESULT_LIMIT": ("result_limit", int),
            "FITMENT_MOCK_LATENCY": ("mock_latency", float),
            "FITMENT_REQUEST_TIMEOUT": ("request_timeout", float),
        }
        for env_key, (field_name, parse) in _ENV_NUMERIC_MAP.items():
            val = env.get(env_key)
            if val is not None and field_name not in overrides:
                config_kwargs[field_name] = _env_number(env_key, val, parse)

        catalog_path = env.get("FITMENT_CATALOG_PATH")
        if catalog_path:
            config_kwargs["catalog_path"] = catalog_path

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
