from dataclasses import dataclass
from typing import Any, Callable, ClassVar, List


@dataclass(eq=False)
class NativeFunction:
    """A host-provided function exposed in the root scope.

    `fn` takes the list of evaluated argument values and returns a runtime value.
    """
    name: str
    fn: Callable[[List[Any]], Any]
    kind: ClassVar[str] = 'native_function'

    def call(self, args: List[Any]) -> Any:
        return self.fn(args)

    def __repr__(self) -> str:
        return f"<native function {self.name}>"
