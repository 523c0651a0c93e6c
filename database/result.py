"""Tagged result returned by every Record Access Layer call."""

from dataclasses import dataclass
from typing import ClassVar, Generic, TypeVar, Union

from database.exceptions import ServiceError

T = TypeVar("T")


@dataclass(frozen=True)
class Ok(Generic[T]):
    data: T
    ok: ClassVar[bool] = True

    def unwrap(self) -> T:
        return self.data


@dataclass(frozen=True)
class Err:
    error: ServiceError
    ok: ClassVar[bool] = False

    def unwrap(self):
        """Raise the carried error."""
        raise self.error


Result = Union[Ok[T], Err]
