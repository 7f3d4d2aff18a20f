from __future__ import annotations

from collections.abc import Iterator
from contextlib import contextmanager
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .diagnostics import CompilationError


class EvalError(Exception):
    """Base of every failure reported by the evaluator."""


@dataclass(slots=True)
class CompilationErrors(EvalError):
    errors: list[CompilationError] = field(default_factory=list)

    def __str__(self) -> str:
        return "".join(e.message for e in self.errors)


@dataclass(slots=True)
class TypeRedefinedVariablesLost(EvalError):
    variables: list[str] = field(default_factory=list)

    def __str__(self) -> str:
        return (
            "A type redefinition resulted in the following variables being lost: "
            + ", ".join(self.variables)
        )


@dataclass(slots=True)
class Message(EvalError):
    message: str

    def __str__(self) -> str:
        return self.message


@dataclass(slots=True)
class SubprocessTerminated(EvalError):
    message: str

    def __str__(self) -> str:
        return self.message


def error_from(source: BaseException | str) -> EvalError:
    """Funnel a lower-level failure into the evaluator's error type."""
    if isinstance(source, EvalError):
        return source
    return Message(str(source))


@contextmanager
def converting_errors() -> Iterator[None]:
    """Re-raise I/O and decoding failures as `Message`.

    Only `OSError` (file access, dynamic loading) and `ValueError` (JSON, UTF-8,
    malformed code blocks) are converted; anything else propagates unchanged.
    """
    try:
        yield
    except (OSError, ValueError) as e:
        raise error_from(e) from e
