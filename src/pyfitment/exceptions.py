"""Custom exception hierarchy for pyfitment."""

from __future__ import annotations

from collections.abc import Sequence


class FitmentError(Exception):
    """Base exception for all pyfitment errors."""


class FitmentConfigError(FitmentError):
    """Invalid or missing configuration."""


class FitmentTransportError(FitmentError):
    """HTTP-level failure (network, non-200, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        super().__init__(message)


class CatalogLookupError(FitmentError):
    """An identifier is not present in the catalog snapshot."""

    def __init__(self, kind: str, identifier: int) -> None:
        self.kind = kind
        self.identifier = identifier
        super().__init__(f"Unknown {kind} id {identifier}")


class ResolutionFailed(FitmentError):
    """A search result could not be resolved into concrete catalog entities.

    The expansion controller never raises this on its own; it reports a
    ``resolution_failed`` outcome instead.  Callers that prefer exceptions
    can call :meth:`pyfitment.models.ExpansionOutcome.raise_for_status`.
    """

    def __init__(self, missing: Sequence[str]) -> None:
        self.missing = tuple(missing)
        detail = ", ".join(self.missing) if self.missing else "provider failure"
        super().__init__(f"Could not resolve selection ({detail})")
