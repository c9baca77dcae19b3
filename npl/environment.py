from typing import Any, Dict, Optional, Set
from npl.errors import BindingError


class Environment:
    """A lexical scope: name bindings plus a link to the enclosing scope.

    Constants and functions are tracked as marker sets next to the value map;
    such names can be shadowed in a child scope but never reassigned or
    deleted.
    """
    def __init__(self, parent: Optional['Environment'] = None):
        self.parent = parent
        self.values: Dict[str, Any] = {}
        self.constants: Set[str] = set()
        self.functions: Set[str] = set()
        # a captured scope belongs to a closure and is never destroyed
        self.captured = False

    def capture(self):
        """Mark this scope and all its ancestors as retained by a closure."""
        env: Optional[Environment] = self
        while env is not None and not env.captured:
            env.captured = True
            env = env.parent

    def define(self, name: str, value: Any, is_constant: bool = False, is_function: bool = False) -> Any:
        if name in self.values:
            raise BindingError(f'Cannot redefine {name}')
        self.values[name] = value
        if is_function:
            self.functions.add(name)
        elif is_constant:
            self.constants.add(name)
        return value

    def get(self, name: str) -> Any:
        if name in self.values:
            return self.values[name]
        if self.parent:
            return self.parent.get(name)
        raise BindingError(f'Undefined variable {name}')

    def set(self, name: str, value: Any) -> Any:
        if name in self.values:
            if name in self.constants or name in self.functions:
                raise BindingError(f'Cannot reassign {name}')
            self.values[name] = value
            return value
        if self.parent:
            return self.parent.set(name, value)
        raise BindingError(f'Undefined variable {name}')

    def resolve(self, name: str) -> 'Environment':
        """Return the nearest environment that binds name."""
        if name in self.values:
            return self
        if self.parent:
            return self.parent.resolve(name)
        raise BindingError(f'Undefined variable {name}')

    def delete(self, name: str) -> Any:
        owner = self.resolve(name)
        if name in owner.functions:
            raise BindingError(f"Can't delete function definition {name}")
        if name in owner.constants:
            raise BindingError(f"Can't delete constant variable {name}")
        return owner.values.pop(name)

    def destroy(self):
        """Drop every binding of this scope; parents are untouched."""
        self.values.clear()
        self.constants.clear()
        self.functions.clear()

    def __contains__(self, name: str) -> bool:
        try:
            self.resolve(name)
        except BindingError:
            return False
        return True
