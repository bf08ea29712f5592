"""
Field binding for configuration targets.

A key is matched against the fields declared on the target's type, then on
each ancestor in MRO order. What a type declares is computed once and kept
in a bounded cache of recently loaded types:

- names in its own annotations (``ClassVar`` excluded)
- plain data attributes and data descriptors (properties, slots) in its own
  class ``__dict__``
- explicit aliases from a ``__config_keys__`` mapping of key to attribute name

Private names are matched through their mangled form, so ``__token`` finds
``_Owner__token``. Attributes only ever set on the instance are matched last,
as fields of the runtime type. ``object`` is never searched.
"""

from __future__ import annotations

import functools
import inspect
import logging
import typing
from dataclasses import dataclass
from typing import Any, Dict, Mapping, Optional, Set, Tuple

from pydantic import ConfigDict, PydanticUserError, TypeAdapter, ValidationError

from config_binder.errors import FieldBindingError
from config_binder.models import TypedValue

logger = logging.getLogger(__name__)

NO_ANNOTATION: Any = object()

_ADAPTER_CONFIG = ConfigDict(arbitrary_types_allowed=True)

# Field tables for the most recently loaded types; older entries are evicted.
_LEVEL_CACHE_SIZE = 256


@dataclass(frozen=True, slots=True)
class FieldRef:
    owner: type
    attribute: str
    annotation: Any = NO_ANNOTATION


@dataclass(frozen=True, slots=True)
class _Level:
    owner: type
    fields: Mapping[str, Any]
    aliases: Mapping[str, str]


def _is_dunder(name: str) -> bool:
    return name.startswith("__") and name.endswith("__")


def _is_class_var(annotation: Any) -> bool:
    if isinstance(annotation, str):
        return annotation.startswith(("ClassVar", "typing.ClassVar"))
    return annotation is typing.ClassVar or typing.get_origin(annotation) is typing.ClassVar


def _own_annotations(cls: type) -> Dict[str, Any]:
    try:
        return dict(inspect.get_annotations(cls, eval_str=True))
    except (NameError, TypeError, SyntaxError, AttributeError):
        # Unresolvable forward references stay as strings and are not type checked.
        logger.debug("Annotations of %s could not be evaluated; type checks skipped.", cls.__qualname__)
        return dict(inspect.get_annotations(cls))


def _is_data_attribute(value: Any) -> bool:
    if isinstance(value, property) or hasattr(type(value), "__set__"):
        return True
    if isinstance(value, (classmethod, staticmethod)) or callable(value):
        return False
    # Non-data descriptors behave like methods.
    return not hasattr(type(value), "__get__")


def _read_aliases(cls: type) -> Mapping[str, str]:
    aliases = cls.__dict__.get("__config_keys__")
    if aliases is None:
        return {}
    if not isinstance(aliases, Mapping) or not all(
        isinstance(k, str) and isinstance(v, str) for k, v in aliases.items()
    ):
        raise TypeError(f"{cls.__qualname__}.__config_keys__ must map key names to attribute names.")
    return dict(aliases)


def _build_level(cls: type, annotations: Mapping[str, Any], class_vars: Set[str]) -> _Level:
    fields: Dict[str, Any] = {}
    for name, annotation in annotations.items():
        if name not in class_vars:
            fields[name] = annotation
    for name, value in cls.__dict__.items():
        if _is_dunder(name) or name in annotations or name in class_vars:
            continue
        if _is_data_attribute(value):
            fields[name] = NO_ANNOTATION
    return _Level(owner=cls, fields=fields, aliases=_read_aliases(cls))


@functools.lru_cache(maxsize=_LEVEL_CACHE_SIZE)
def _class_levels(cls: type) -> Tuple[_Level, ...]:
    chain = [klass for klass in cls.__mro__ if klass is not object]
    annotations = {klass: _own_annotations(klass) for klass in chain}
    class_vars = {
        name for own in annotations.values() for name, annotation in own.items() if _is_class_var(annotation)
    }
    return tuple(_build_level(klass, annotations[klass], class_vars) for klass in chain)


def _mangled(owner: type, key: str) -> Optional[str]:
    if not key.startswith("__") or key.endswith("__"):
        return None
    stripped = owner.__name__.lstrip("_")
    if not stripped:
        return None
    return f"_{stripped}{key}"


def _search_type(target: Any) -> type:
    return target if isinstance(target, type) else type(target)


def resolve_field(target: Any, key: str) -> Optional[FieldRef]:
    """Find the field a key binds to, or None when no type in the chain declares it."""
    instance_dict: Mapping[str, Any] = {}
    if not isinstance(target, type):
        instance_dict = getattr(target, "__dict__", {})

    for level in _class_levels(_search_type(target)):
        alias = level.aliases.get(key)
        if alias is not None:
            return FieldRef(level.owner, alias, level.fields.get(alias, NO_ANNOTATION))
        if key in level.fields:
            return FieldRef(level.owner, key, level.fields[key])
        mangled = _mangled(level.owner, key)
        if mangled is not None and (mangled in level.fields or mangled in instance_dict):
            return FieldRef(level.owner, mangled, level.fields.get(mangled, NO_ANNOTATION))

    if key in instance_dict and not _is_dunder(key):
        return FieldRef(_search_type(target), key)
    return None


def check_value(ref: FieldRef, key: str, value: TypedValue) -> None:
    """Raise FieldBindingError when the value does not fit the field's annotation."""
    annotation = ref.annotation
    if annotation is NO_ANNOTATION or isinstance(annotation, str):
        return
    try:
        adapter = TypeAdapter(annotation, config=_ADAPTER_CONFIG)
    except PydanticUserError:
        logger.debug(
            "No validator for annotation of %s.%s; type check skipped.",
            ref.owner.__qualname__,
            ref.attribute,
        )
        return
    try:
        adapter.validate_python(value, strict=True)
    except ValidationError as e:
        raise FieldBindingError(
            key=key,
            owner=ref.owner,
            attribute=ref.attribute,
            value=value,
            reason=f"expected {_describe(annotation)}",
        ) from e


def assign(target: Any, ref: FieldRef, key: str, value: TypedValue) -> None:
    try:
        setattr(target, ref.attribute, value)
    except (AttributeError, TypeError, ValueError) as e:
        raise FieldBindingError(
            key=key,
            owner=ref.owner,
            attribute=ref.attribute,
            value=value,
            reason=str(e) or type(e).__name__,
        ) from e


def bind_value(target: Any, key: str, value: TypedValue) -> bool:
    """Bind one value. Returns False when no field matches the key."""
    ref = resolve_field(target, key)
    if ref is None:
        return False
    check_value(ref, key, value)
    assign(target, ref, key, value)
    return True


def _describe(annotation: Any) -> str:
    if isinstance(annotation, type):
        return annotation.__name__
    return repr(annotation)
