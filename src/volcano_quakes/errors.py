"""Exceptions raised by the data-acquisition layer."""

from __future__ import annotations

from typing import Optional


class FetchFailure(Exception):
    """A catalog request for one site could not produce events.

    Covers network errors, non-success HTTP statuses, exhausted 429 retries
    and undecodable response bodies.
    """

    def __init__(
        self,
        message: str,
        location_name: str,
        status_code: Optional[int] = None,
        cause: Optional[BaseException] = None,
    ):
        self.message = message
        self.location_name = location_name
        self.status_code = status_code
        self.cause = cause
        super().__init__(message)

    def __str__(self) -> str:
        detail = self.message
        if self.status_code is not None:
            detail = f"{detail} (HTTP {self.status_code})"
        return detail

    def __repr__(self) -> str:
        return (
            f"FetchFailure(location_name={self.location_name!r}, "
            f"status_code={self.status_code!r}, message={self.message!r})"
        )
