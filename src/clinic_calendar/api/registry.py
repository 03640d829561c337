"""Named calendar computations that clients can list and invoke over HTTP.

Registered functions take only ``str`` and ``int`` parameters and return
JSON-ready dicts.
"""

from __future__ import annotations

import inspect
from dataclasses import dataclass
from typing import Any, Callable, Dict, List

_SCHEMA_TYPES = {str: "string", int: "integer"}

_FUNCTIONS: Dict[str, "CalendarFunction"] = {}


@dataclass(frozen=True)
class CalendarFunction:
    name: str
    func: Callable[..., Dict[str, Any]]
    description: str
    tags: tuple[str, ...]
    signature: inspect.Signature

    def describe(self) -> Dict[str, Any]:
        properties: Dict[str, Any] = {}
        required: List[str] = []
        for param in self.signature.parameters.values():
            prop: Dict[str, Any] = {"type": _SCHEMA_TYPES[param.annotation]}
            if param.default is inspect.Parameter.empty:
                required.append(param.name)
            else:
                prop["default"] = param.default
            properties[param.name] = prop
        parameters: Dict[str, Any] = {"type": "object", "properties": properties}
        if required:
            parameters["required"] = required
        return {
            "name": self.name,
            "description": self.description,
            "tags": list(self.tags),
            "parameters": parameters,
        }

    def __call__(self, arguments: Dict[str, Any]) -> Dict[str, Any]:
        bound = self.signature.bind(**arguments)
        for name, value in bound.arguments.items():
            expected = self.signature.parameters[name].annotation
            # bool is an int subclass but never a valid hour or year.
            if not isinstance(value, expected) or isinstance(value, bool):
                raise TypeError(f"'{name}' must be {_SCHEMA_TYPES[expected]}")
        return self.func(*bound.args, **bound.kwargs)


def register_function(name: str, *, description: str, tags: tuple[str, ...] = ()):
    def decorator(func: Callable[..., Dict[str, Any]]) -> Callable[..., Dict[str, Any]]:
        if name in _FUNCTIONS:
            raise ValueError(f"Calendar function '{name}' is already registered.")
        signature = inspect.signature(func, eval_str=True)
        unsupported = [p.name for p in signature.parameters.values() if p.annotation not in _SCHEMA_TYPES]
        if unsupported:
            raise TypeError(f"Calendar function '{name}' has untyped parameters: {', '.join(unsupported)}")
        _FUNCTIONS[name] = CalendarFunction(name, func, description, tuple(tags), signature)
        return func

    return decorator


def get_functions() -> List[CalendarFunction]:
    return sorted(_FUNCTIONS.values(), key=lambda item: item.name)


def call_function(name: str, **arguments: Any) -> Dict[str, Any]:
    """Invoke a registered function; ``KeyError`` if unknown, ``TypeError`` on bad arguments."""

    if name not in _FUNCTIONS:
        raise KeyError(f"Calendar function '{name}' is not registered.")
    return _FUNCTIONS[name](arguments)
