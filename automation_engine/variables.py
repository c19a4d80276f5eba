"""
Per-execution variable store.
"""

from typing import Any, Dict, Iterator, Mapping, MutableMapping, Optional


class VariableStore(MutableMapping):
    """
    Mapping of variable name to value, owned by a single run.

    The initial bindings are copied, so steps that write variables never
    touch the caller's dict.
    """

    def __init__(self, initial: Optional[Mapping[str, Any]] = None):
        self._values: Dict[str, Any] = dict(initial or {})

    def __getitem__(self, name: str) -> Any:
        return self._values[name]

    def __setitem__(self, name: str, value: Any) -> None:
        self._values[name] = value

    def __delitem__(self, name: str) -> None:
        del self._values[name]

    def __iter__(self) -> Iterator[str]:
        return iter(self._values)

    def __len__(self) -> int:
        return len(self._values)

    def __repr__(self) -> str:
        return f"VariableStore({self._values!r})"

    def set(self, name: str, value: Any) -> None:
        self._values[name] = value

    def snapshot(self) -> Dict[str, Any]:
        """Shallow copy of the current bindings."""
        return dict(self._values)
