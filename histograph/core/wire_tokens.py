"""
Queue message vocabulary and translation into internal field maps.

The wire vocabulary is narrower than the internal one: messages carry the
dataset as "layer", the identifier as "hgID", and the entity payload nested
under "data". translate_wire_record flattens a message into the field map
the storage adapters consume.

Dependencies: json (stdlib), histograph.core.tokens
System role: Boundary between the upstream feed format and internal tokens
"""

import enum
import json
from typing import Any

from histograph.core.exceptions import ValidationError
from histograph.core.tokens import Actions, General, PITTokens, RelationTokens, Types


class WireGeneral(str, enum.Enum):
    """Top-level keys of a queue message."""

    DATA = "data"
    LAYER = "layer"
    TYPE = "type"
    ACTION = "action"
    HGID = "hgID"


class WireTypes(str, enum.Enum):
    PIT = "pit"
    RELATION = "relation"


class WireActions(str, enum.Enum):
    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"


class WirePITTokens(str, enum.Enum):
    ID = "id"
    TYPE = "type"
    NAME = "name"


class WireRelationTokens(str, enum.Enum):
    FROM = "from"
    TO = "to"
    LABEL = "label"


_PIT_PAYLOAD_FIELDS = (
    PITTokens.NAME,
    PITTokens.URI,
    PITTokens.GEOMETRY,
    PITTokens.HASBEGINNING,
    PITTokens.HASEND,
)

_RELATION_PAYLOAD_FIELDS = (
    RelationTokens.FROM,
    RelationTokens.TO,
    RelationTokens.LABEL,
)


def _as_field_value(value: Any) -> str:
    """Render a payload value as it is stored in a field map."""
    if isinstance(value, str):
        return value
    return json.dumps(value, separators=(",", ":"))


def translate_wire_record(message: dict[str, Any]) -> dict[str, str]:
    """
    Flatten a queue message into an internal field map.

    Args:
        message: Decoded queue message with action, type, layer and data keys

    Returns:
        dict[str, str]: Field map keyed by internal tokens. Structured payload
        values (geometry) are JSON-encoded; the raw payload is kept under
        "data" so downstream consumers can still see it.

    Raises:
        ValidationError: If action or type is not a known wire token, or the
            message carries no identifier
    """
    try:
        action = WireActions(message.get(WireGeneral.ACTION.value))
    except ValueError as e:
        raise ValidationError(
            f"Unknown action token: {message.get(WireGeneral.ACTION.value)!r}",
            field=WireGeneral.ACTION.value,
        ) from e

    try:
        record_type = WireTypes(message.get(WireGeneral.TYPE.value))
    except ValueError as e:
        raise ValidationError(
            f"Unknown type token: {message.get(WireGeneral.TYPE.value)!r}",
            field=WireGeneral.TYPE.value,
        ) from e

    payload = message.get(WireGeneral.DATA.value) or {}
    if not isinstance(payload, dict):
        raise ValidationError("Message data must be an object", field=WireGeneral.DATA.value)

    hgid = message.get(WireGeneral.HGID.value) or payload.get(WirePITTokens.ID.value)
    if not hgid:
        raise ValidationError("Message carries no identifier", field=WireGeneral.HGID.value)

    fields: dict[str, str] = {
        General.HGID.value: str(hgid),
        General.ACTION.value: Actions(action.value).value,
        General.TYPE.value: Types(record_type.value).value,
        General.DATA.value: _as_field_value(payload),
    }

    layer = message.get(WireGeneral.LAYER.value)
    if layer:
        fields[General.SOURCEID.value] = str(layer)

    payload_fields = (
        _PIT_PAYLOAD_FIELDS if record_type is WireTypes.PIT else _RELATION_PAYLOAD_FIELDS
    )
    for token in payload_fields:
        if token.value in payload and payload[token.value] is not None:
            fields[token.value] = _as_field_value(payload[token.value])

    return fields
