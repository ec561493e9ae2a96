"""
Resource plumbing shared by resource types: the per-operation attribute container handed
to create/read/delete, and the base class the provider registry knows about.
"""
from typing import Any

from jwt_provider.errors import InvalidAttribute
from jwt_provider.schema import Attribute, apply_defaults


class ResourceData:
    """
    Attribute values and identifier for one resource instance during one lifecycle call.
    An empty id means the resource does not exist.
    """

    def __init__(self, schema: dict[str, Attribute], attributes: dict | None = None, resource_id: str = ""):
        self.schema = schema
        self._values = apply_defaults(schema, attributes or {})
        self.id = resource_id

    def _check_key(self, key: str) -> Attribute:
        attr = self.schema.get(key)
        if attr is None:
            raise InvalidAttribute(f"{key} is not an attribute of this resource.", attribute=key)
        return attr

    def get(self, key: str) -> Any:
        self._check_key(key)
        return self._values.get(key)

    def set(self, key: str, value: Any) -> None:
        """Resources may only set computed attributes."""
        attr = self._check_key(key)
        if not attr.computed:
            raise InvalidAttribute(f"{key} is not a computed attribute and cannot be set by the resource.", attribute=key)
        self._values[key] = value

    def set_id(self, resource_id: str) -> None:
        self.id = resource_id

    @property
    def attributes(self) -> dict:
        """All schema attributes, unset ones as None."""
        return {name: self._values.get(name) for name in self.schema}


class Resource:
    """Base for resource types. Subclasses set type_name and schema and implement the lifecycle."""

    type_name: str = ""
    description: str = ""
    schema: dict[str, Attribute] = {}

    def create(self, data: ResourceData) -> None:
        raise NotImplementedError

    def read(self, data: ResourceData) -> None:
        raise NotImplementedError

    def delete(self, data: ResourceData) -> None:
        raise NotImplementedError
