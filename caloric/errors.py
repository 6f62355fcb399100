# -*- coding: utf-8 -*-
"""Domain errors shared by the gateway, the store client and the routers."""

from __future__ import annotations


class CaloricError(Exception):
    status_code: int = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class PreconditionError(CaloricError):
    """The caller's request carries nothing usable (no query, bad image)."""

    status_code = 400


class ConfigurationError(CaloricError):
    """A required upstream credential or endpoint is not configured."""

    status_code = 500


class UpstreamError(CaloricError):
    """Network failure, timeout, non-2xx or empty reply from the model API."""

    status_code = 502


class MalformedResponseError(CaloricError):
    """The model replied, but the content does not match the expected schema."""

    status_code = 502


class StoreError(CaloricError):
    def __init__(self, message: str, status_code: int = 502) -> None:
        super().__init__(message)
        self.status_code = status_code
