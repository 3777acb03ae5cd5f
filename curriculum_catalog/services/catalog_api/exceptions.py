# Copyright (C) 2025 Global Digital Labs (gdlabs.io)
# SPDX-License-Identifier: LGPL-3.0-or-later
"""Errors raised by CatalogClient.

Callers that only care whether the backend answered usefully catch
CatalogError; the subclasses separate a failed request from a body
that does not match any known envelope.
"""


class CatalogError(Exception):
    """A catalog backend call did not produce usable data.

    Attributes:
        message: What went wrong.
        details: Extra context such as the page or school involved.
    """

    def __init__(self, message: str, details: dict | None = None):
        self.message = message
        self.details = details or {}
        super().__init__(message)

    def __str__(self) -> str:
        if self.details:
            return f"{self.message} - Details: {self.details}"
        return self.message


class CatalogAPIError(CatalogError):
    """Request failed: transport error or non-2xx status.

    status_code is None when the backend was never reached.
    """

    def __init__(
        self,
        message: str,
        status_code: int | None = None,
        response_body: str | None = None,
        details: dict | None = None,
    ):
        self.status_code = status_code
        self.response_body = response_body
        super().__init__(message, details)

    def __str__(self) -> str:
        base = self.message
        if self.status_code:
            base = f"[{self.status_code}] {base}"
        if self.details:
            base = f"{base} - Details: {self.details}"
        return base


class CatalogResponseError(CatalogError):
    """2xx response whose body has no recognizable record list."""

    def __init__(
        self,
        message: str,
        endpoint: str | None = None,
        details: dict | None = None,
    ):
        self.endpoint = endpoint
        super().__init__(message, details)

    def __str__(self) -> str:
        if self.endpoint:
            return f"{self.message} (endpoint: {self.endpoint})"
        return self.message
