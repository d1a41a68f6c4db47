"""
Concrete stand-ins for abstract record types.

A mappable type may be an abstract base class whose members are abstract
properties. Materializing it needs an instantiable class, so one is
generated: every abstract property becomes a plain stored property, every
other abstract method raises NotImplementedError.
"""
from __future__ import annotations

import inspect
import logging
import threading
from typing import Dict

from kgmap.errors import InvalidMappingError

logger = logging.getLogger(__name__)

_generated: Dict[type, type] = {}
_lock = threading.Lock()


def is_abstract(cls: type) -> bool:
    return inspect.isabstract(cls)


def _stored_property(name: str, original: property) -> property:
    slot = f"_kgmap_{name}"

    def fget(self):
        return self.__dict__.get(slot)

    def fset(self, value):
        self.__dict__[slot] = value

    for fn in (fget, fset):
        fn.__name__ = name
        fn.__qualname__ = name
    fget.__annotations__ = dict(getattr(original.fget, "__annotations__", {}))
    if hasattr(original.fget, "__rdf_property__"):
        fget.__rdf_property__ = original.fget.__rdf_property__
    # get_type_hints follows __wrapped__ to resolve names in the declaring module
    fget.__wrapped__ = original.fget
    return property(fget, fset, doc=original.__doc__)


def _not_implemented(name: str):
    def method(self, *args, **kwargs):
        raise NotImplementedError(f"{type(self).__name__}.{name} is not available on a generated instance")
    method.__name__ = name
    return method


def generate_instance_class(cls: type) -> type:
    """Return a concrete subclass of ``cls``, generating it on first use."""
    if not is_abstract(cls):
        return cls
    with _lock:
        generated = _generated.get(cls)
        if generated is not None:
            return generated

        namespace = {"__kgmap_generated_from__": cls, "__module__": cls.__module__}
        for name in sorted(cls.__abstractmethods__):
            attr = inspect.getattr_static(cls, name)
            if isinstance(attr, property):
                namespace[name] = _stored_property(name, attr)
            else:
                namespace[name] = _not_implemented(name)

        try:
            generated = type(f"{cls.__name__}Impl", (cls,), namespace)
        except TypeError as e:
            raise InvalidMappingError(f"Cannot generate an instance class for {cls.__name__}") from e

        _generated[cls] = generated
        logger.debug("Generated instance class %s", generated.__qualname__)
        return generated
