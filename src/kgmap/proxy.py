from __future__ import annotations

from typing import Any, TYPE_CHECKING

from kgmap.common.types import ResourceId

if TYPE_CHECKING:
    from kgmap.mapper import Mapper
    from kgmap.source.base import GraphSource

_OWN = frozenset({"_mapper", "_target", "_key", "_source", "_value", "_resolved"})


class LazyReference:
    """
    Stand-in for a related record that is materialized on first use.

    Any attribute read or write, item access, iteration, comparison or
    string conversion resolves the record once through the mapper and then
    delegates to it. ``isinstance(ref, Target)`` holds before resolution.
    Use the module functions (``resolve``, ``reference_key``,
    ``is_resolved``) to inspect a reference without going through the
    delegated surface.
    """

    def __init__(self, mapper: "Mapper", target: type, key: ResourceId, source: "GraphSource"):
        object.__setattr__(self, "_mapper", mapper)
        object.__setattr__(self, "_target", target)
        object.__setattr__(self, "_key", key)
        object.__setattr__(self, "_source", source)
        object.__setattr__(self, "_value", None)
        object.__setattr__(self, "_resolved", False)

    def _kgmap_resolve(self) -> Any:
        if object.__getattribute__(self, "_resolved"):
            return object.__getattribute__(self, "_value")
        mapper = object.__getattribute__(self, "_mapper")
        # one lock for the reference and its mapper
        with mapper.lock:
            if not object.__getattribute__(self, "_resolved"):
                value = mapper.from_graph(object.__getattribute__(self, "_target"),
                                          object.__getattribute__(self, "_key"),
                                          object.__getattribute__(self, "_source"))
                object.__setattr__(self, "_value", value)
                object.__setattr__(self, "_resolved", True)
                object.__setattr__(self, "_source", None)
        return object.__getattribute__(self, "_value")

    @property
    def __class__(self):
        return object.__getattribute__(self, "_target")

    def __getattr__(self, name: str) -> Any:
        if name in _OWN:
            raise AttributeError(name)
        return getattr(self._kgmap_resolve(), name)

    def __setattr__(self, name: str, value: Any) -> None:
        if name in _OWN:
            object.__setattr__(self, name, value)
        else:
            setattr(self._kgmap_resolve(), name, value)

    def __delattr__(self, name: str) -> None:
        delattr(self._kgmap_resolve(), name)

    def __eq__(self, other: Any) -> bool:
        return self._kgmap_resolve() == resolve(other)

    def __ne__(self, other: Any) -> bool:
        return not self == other

    def __hash__(self) -> int:
        return hash(self._kgmap_resolve())

    def __bool__(self) -> bool:
        return bool(self._kgmap_resolve())

    def __str__(self) -> str:
        return str(self._kgmap_resolve())

    def __repr__(self) -> str:
        if object.__getattribute__(self, "_resolved"):
            return repr(object.__getattribute__(self, "_value"))
        target = object.__getattribute__(self, "_target")
        return f"<LazyReference {target.__name__} {object.__getattribute__(self, '_key')}>"

    def __len__(self) -> int:
        return len(self._kgmap_resolve())

    def __iter__(self):
        return iter(self._kgmap_resolve())

    def __contains__(self, item: Any) -> bool:
        return item in self._kgmap_resolve()

    def __getitem__(self, item: Any) -> Any:
        return self._kgmap_resolve()[item]

    def __setitem__(self, item: Any, value: Any) -> None:
        self._kgmap_resolve()[item] = value

    def __call__(self, *args, **kwargs):
        return self._kgmap_resolve()(*args, **kwargs)


def is_reference(value: Any) -> bool:
    return type(value) is LazyReference


def is_resolved(ref: LazyReference) -> bool:
    return object.__getattribute__(ref, "_resolved")


def reference_key(ref: LazyReference) -> ResourceId:
    return object.__getattribute__(ref, "_key")


def resolve(value: Any) -> Any:
    """Resolved record behind a lazy reference, or the value itself."""
    if is_reference(value):
        return value._kgmap_resolve()
    return value
