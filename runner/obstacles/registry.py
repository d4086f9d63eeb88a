from __future__ import annotations

from typing import Any, Dict, Mapping, Type

from .base import Obstacle

_registry: Dict[str, Type[Obstacle]] = {}


def register_obstacle(kind: str, cls: Type[Obstacle]) -> None:
    _registry[kind] = cls


def get_obstacle_class(kind: str) -> Type[Obstacle]:
    try:
        return _registry[kind]
    except KeyError:
        raise ValueError(f"Unknown obstacle kind: {kind!r}") from None


def make_obstacle(kind: str, **fields: Any) -> Obstacle:
    return get_obstacle_class(kind)(**fields)


def obstacle_from_dict(data: Mapping[str, Any]) -> Obstacle:
    fields = dict(data)
    kind = fields.pop("kind", None)
    if not isinstance(kind, str):
        raise ValueError("obstacle dict needs a string 'kind'")
    return make_obstacle(kind, **fields)
