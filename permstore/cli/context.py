from __future__ import annotations

import os
import time
from dataclasses import dataclass
from pathlib import Path
from typing import Any, Literal

from permstore.config import STORE_FILE_ENV, load_store
from permstore.exceptions import (
    InvalidPathError,
    InvalidPolicyError,
    PermissionDeniedError,
    StoreConfigError,
    StoreError,
)
from permstore.samples import sample_store
from permstore.store import Store

from .errors import CLIError
from .results import CommandMeta, CommandResult, ErrorInfo

OutputFormat = Literal["table", "json"]

SAMPLE_STORE_LABEL = "<sample>"


@dataclass
class CLIContext:
    output: OutputFormat
    quiet: bool
    verbosity: int
    store_file: Path | None

    _store: Store | None = None

    def _effective_store_file(self) -> Path | None:
        if self.store_file is not None:
            return self.store_file
        env_file = os.getenv(STORE_FILE_ENV, "").strip()
        return Path(env_file) if env_file else None

    @property
    def store_label(self) -> str:
        path = self._effective_store_file()
        return str(path) if path is not None else SAMPLE_STORE_LABEL

    def get_store(self) -> Store:
        if self._store is not None:
            return self._store
        path = self._effective_store_file()
        self._store = load_store(path) if path is not None else sample_store()
        return self._store


def exit_code_for_exception(exc: Exception) -> int:
    if isinstance(exc, CLIError):
        return exc.exit_code
    if isinstance(exc, PermissionDeniedError):
        return 3
    if isinstance(exc, (StoreConfigError, InvalidPathError, InvalidPolicyError)):
        return 2
    if isinstance(exc, StoreError):
        return 1
    return 1


def _error_type(exc: Exception) -> str:
    if isinstance(exc, PermissionDeniedError):
        return "permission_denied"
    if isinstance(exc, StoreConfigError):
        return "config_error"
    if isinstance(exc, InvalidPathError):
        return "invalid_path"
    if isinstance(exc, InvalidPolicyError):
        return "invalid_policy"
    if isinstance(exc, StoreError):
        return "store_error"
    return "internal_error"


def error_info_for_exception(exc: Exception) -> ErrorInfo:
    if isinstance(exc, CLIError):
        return ErrorInfo(
            type=exc.error_type, message=exc.message, hint=exc.hint, details=exc.details
        )
    if isinstance(exc, PermissionDeniedError):
        return ErrorInfo(
            type=_error_type(exc),
            message=str(exc),
            details={"field": exc.field, "access": exc.access.value},
        )
    return ErrorInfo(type=_error_type(exc), message=str(exc), details=None)


def build_result(
    *,
    ok: bool,
    command: str,
    started_at: float,
    data: Any | None,
    warnings: list[str],
    store: str | None,
    error: ErrorInfo | None = None,
) -> CommandResult:
    duration_ms = int(max(0.0, (time.time() - started_at) * 1000))
    return CommandResult(
        ok=ok,
        command=command,
        data=data,
        warnings=warnings,
        meta=CommandMeta(duration_ms=duration_ms, store=store),
        error=error,
    )
