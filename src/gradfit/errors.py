from __future__ import annotations


class ShapeMismatchError(ValueError):
    """Raised when matrix row or column counts disagree."""


class NotFittedError(RuntimeError):
    """Raised when a trainer is used before ``fit``."""


def check_rows(a, b, what: str = "features/labels") -> None:
    if a.shape[0] != b.shape[0]:
        raise ShapeMismatchError(f"{what} row count mismatch: {a.shape[0]} != {b.shape[0]}")


__all__ = ["ShapeMismatchError", "NotFittedError", "check_rows"]
