"""
Allow-list projection of field maps into stored documents.

Dependencies: json (stdlib), histograph.core.tokens
System role: Builds the only document shape ever written to the search index
"""

import json
from typing import Any, Mapping

from histograph.core.exceptions import ValidationError
from histograph.core.tokens import DocumentFields, General, PITTokens

# Copied verbatim when present in the input, in this order.
_SCALAR_FIELDS = (
    (General.HGID.value, DocumentFields.HGID.value),
    (General.SOURCEID.value, DocumentFields.SOURCE.value),
    (PITTokens.NAME.value, DocumentFields.NAME.value),
    (PITTokens.TYPE.value, DocumentFields.TYPE.value),
)

_OPTIONAL_FIELDS = (
    (PITTokens.URI.value, DocumentFields.URI.value),
    (PITTokens.HASBEGINNING.value, DocumentFields.HASBEGINNING.value),
    (PITTokens.HASEND.value, DocumentFields.HASEND.value),
)


def _parse_geometry(value: Any) -> Any:
    if isinstance(value, (dict, list)):
        return value
    try:
        return json.loads(value)
    except (TypeError, ValueError) as e:
        raise ValidationError(
            "Geometry is not valid JSON",
            field=PITTokens.GEOMETRY.value,
            details={"error": str(e)},
        ) from e


def project_document(fields: Mapping[str, Any]) -> dict[str, Any]:
    """
    Build the stored document for a field map.

    Copies hgid, sourceid (stored as "source"), name and type, then the
    geometry as a nested JSON value, then uri, hasBeginning and hasEnd.
    Each field is copied only when present in the input. Every other input
    field, including the raw "data" payload, is dropped.

    Args:
        fields: Field map keyed by internal tokens. A map already keyed by
            "source" instead of "sourceid" is accepted.

    Returns:
        dict: Document restricted to the DocumentFields allow-list

    Raises:
        ValidationError: If geometry is present but is not valid JSON
    """
    document: dict[str, Any] = {}

    for source_key, target_key in _SCALAR_FIELDS:
        if source_key in fields:
            document[target_key] = fields[source_key]

    if DocumentFields.SOURCE.value not in document and DocumentFields.SOURCE.value in fields:
        document[DocumentFields.SOURCE.value] = fields[DocumentFields.SOURCE.value]

    if PITTokens.GEOMETRY.value in fields:
        document[DocumentFields.GEOMETRY.value] = _parse_geometry(fields[PITTokens.GEOMETRY.value])

    for source_key, target_key in _OPTIONAL_FIELDS:
        if source_key in fields:
            document[target_key] = fields[source_key]

    return document
