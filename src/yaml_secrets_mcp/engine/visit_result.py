"""VisitResult for the recursive document walker.

Each visit returns either the (possibly updated) node or a failure carrying
the document path of the node that could not be processed. Failures bubble up
through the walker unchanged; the engine converts a failed result into an
InterpolationError at the top level. Nothing inside the walker raises for
control flow.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class VisitStatus(str, Enum):
    SUCCESS = "success"
    FAILED = "failed"


@dataclass
class VisitResult(Generic[T]):
    """
    Outcome of visiting one node of a document tree.

    Usage:
        result = build_tree(data)
        if not result:
            raise InterpolationError(result.error, path=result.path)
        tree = result.unwrap()
    """

    status: VisitStatus
    value: T | None = None
    error: str | None = None
    path: str | None = None

    def __post_init__(self) -> None:
        match self.status:
            case VisitStatus.SUCCESS if self.value is None:
                raise ValueError("A successful visit needs a node")
            case VisitStatus.FAILED if not self.error or self.path is None:
                raise ValueError("A failed visit needs an error message and a document path")

    @classmethod
    def success(cls, value: T) -> "VisitResult[T]":
        return cls(status=VisitStatus.SUCCESS, value=value)

    @classmethod
    def failure(cls, error: str, path: str) -> "VisitResult[T]":
        """Failed visit of the node at ``path``."""
        return cls(status=VisitStatus.FAILED, error=error, path=path)

    @property
    def is_success(self) -> bool:
        return self.status is VisitStatus.SUCCESS

    @property
    def is_failure(self) -> bool:
        return self.status is VisitStatus.FAILED

    def __bool__(self) -> bool:
        return self.is_success

    def unwrap(self) -> T:
        """Return the node, raising ValueError for a failed visit."""
        if self.is_failure or self.value is None:
            raise ValueError(f"Visit failed at {self.path}: {self.error}")
        return self.value
