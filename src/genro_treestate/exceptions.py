# Copyright 2025 Softwell S.r.l. - Genropy Team
# SPDX-License-Identifier: Apache-2.0

"""TreeState exceptions."""

from __future__ import annotations

from typing import Any


class TreeStateError(Exception):
    """Base exception for TreeState errors."""

    pass


class MissingFieldError(TreeStateError, KeyError):
    """Raised when a source record lacks the configured id or title field."""

    def __init__(self, field: str, record: Any) -> None:
        self.field = field
        self.record = record
        super().__init__(f"Record has no field '{field}': {record!r}")

    def __str__(self) -> str:
        # KeyError quotes its argument, keep the plain message
        return str(self.args[0])
