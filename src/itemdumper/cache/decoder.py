"""
Item Decoders

A decoder turns one raw archive record into an ItemDefinition. The binary
opcode decoder lives outside this package; JsonItemDecoder reads records that
were already extracted to JSON objects.
"""

import json
from typing import Any, Dict, Protocol

from itemdumper.definitions.item import ItemDefinition
from itemdumper.errors import DecodeError


class ItemDecoder(Protocol):
    """Decodes one record into a definition."""

    def decode(self, item_id: int, data: bytes) -> ItemDefinition:
        ...


# field name -> accepted python types
_FIELD_TYPES: Dict[str, tuple] = {
    "name": (str,),
    "cost": (int,),
    "stackable": (bool,),
    "members": (bool,),
    "tradeable": (bool,),
    "weight": (int,),
    "options": (list,),
    "noted_template": (int,),
    "noted_id": (int,),
    "bought_template_id": (int,),
    "bought_id": (int,),
    "placeholder_template_id": (int,),
    "placeholder_id": (int,),
}

_LINK_FIELDS = {
    "noted_template", "noted_id",
    "bought_template_id", "bought_id",
    "placeholder_template_id", "placeholder_id",
}


class JsonItemDecoder:
    """
    Decodes records holding a UTF-8 JSON object of definition fields.

    The object may carry its own "id"; if present it must match the record id.
    Unknown fields and wrongly typed values are decode errors.
    """

    def decode(self, item_id: int, data: bytes) -> ItemDefinition:
        try:
            obj = json.loads(data.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as e:
            raise DecodeError(item_id, f"invalid JSON: {e}") from e

        if not isinstance(obj, dict):
            raise DecodeError(item_id, f"expected an object, got {type(obj).__name__}")

        if "id" in obj and obj.pop("id") != item_id:
            raise DecodeError(item_id, "embedded id does not match record id")

        kwargs = self._check_fields(item_id, obj)
        return ItemDefinition(id=item_id, **kwargs)

    def _check_fields(self, item_id: int, obj: Dict[str, Any]) -> Dict[str, Any]:
        unknown = sorted(set(obj) - set(_FIELD_TYPES))
        if unknown:
            raise DecodeError(item_id, f"unknown field(s): {', '.join(unknown)}")

        for key, value in obj.items():
            types = _FIELD_TYPES[key]
            # bool is an int subclass
            if isinstance(value, bool) and bool not in types:
                raise DecodeError(item_id, f"field {key!r} must be {types[0].__name__}")
            if not isinstance(value, types):
                raise DecodeError(item_id, f"field {key!r} must be {types[0].__name__}")
            if key in _LINK_FIELDS and value < -1:
                raise DecodeError(item_id, f"field {key!r} out of range: {value}")

        options = obj.get("options")
        if options is not None and not all(o is None or isinstance(o, str) for o in options):
            raise DecodeError(item_id, "field 'options' must hold strings or null")

        return obj
