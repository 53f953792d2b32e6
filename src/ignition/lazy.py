"""Values that are either fixed or produced on demand."""

from dataclasses import dataclass
from typing import Any, Callable


@dataclass(frozen=True)
class Fixed:
    value: Any

    def evaluate(self) -> Any:
        return self.value


@dataclass(frozen=True)
class Provider:
    fn: Callable[[], Any]

    def evaluate(self) -> Any:
        return self.fn()


Lazy = Fixed | Provider


def lazy(value: Any) -> Lazy:
    """Wrap a raw config value: callables become providers, anything else is fixed."""
    if isinstance(value, (Fixed, Provider)):
        return value
    if callable(value):
        return Provider(value)
    return Fixed(value)


def resolve(value: Lazy) -> Any:
    return value.evaluate()
