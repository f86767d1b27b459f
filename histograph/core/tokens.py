"""
Histograph token vocabulary.

All field names, entity kinds, action kinds and routing targets used inside
the storage layer are defined here and nowhere else. Token strings are part
of the persisted/wire format: renaming one requires a data migration.

Dependencies: enum (stdlib)
System role: Shared contract validated against by both storage adapters
"""

import enum


class General(str, enum.Enum):
    """General tokens applicable to all record types."""

    DATA = "data"
    SOURCEID = "sourceid"
    TYPE = "type"
    ACTION = "action"
    HGID = "hgid"
    TARGET = "target"
    NAME = "name"


class Types(str, enum.Enum):
    """Record types."""

    PIT = "pit"
    RELATION = "relation"


class Actions(str, enum.Enum):
    """
    Mutation kinds carried by a record.

    ADD_TO_REJECTED is only produced after validation, for relations whose
    endpoints could not be resolved.
    """

    ADD = "add"
    UPDATE = "update"
    DELETE = "delete"
    ADD_TO_REJECTED = "addToRejected"


class Targets(str, enum.Enum):
    """Backends a record is replicated to."""

    RELATIONAL = "relational"
    DOCUMENT = "document"
    BOTH = "both"

    @property
    def includes_relational(self) -> bool:
        return self in (Targets.RELATIONAL, Targets.BOTH)

    @property
    def includes_document(self) -> bool:
        return self in (Targets.DOCUMENT, Targets.BOTH)


class PITTokens(str, enum.Enum):
    """Tokens applicable to PITs."""

    ID = "id"
    TYPE = "type"
    NAME = "name"
    URI = "uri"
    GEOMETRY = "geometry"
    HASBEGINNING = "hasBeginning"
    HASEND = "hasEnd"
    DATA = "data"


class RelationTokens(str, enum.Enum):
    """Tokens applicable to relations, including rejection metadata."""

    FROM = "from"
    TO = "to"
    LABEL = "label"
    FROM_IDENTIFYING_METHOD = "from_identifying_method"
    TO_IDENTIFYING_METHOD = "to_identifying_method"
    REJECTION_CAUSE = "rejection_cause"
    REJECTION_CAUSE_ID_METHOD = "rejection_cause_id_method"


class PITIdentifyingMethod(str, enum.Enum):
    """Ways a relation endpoint can be resolved to a PIT."""

    HGID = "hgid"
    URI = "uri"


class DocumentFields(str, enum.Enum):
    """
    Keys of a document stored in the search index.

    This is the complete allow-list: nothing outside it is ever persisted
    to the document store.
    """

    HGID = "hgid"
    SOURCE = "source"
    NAME = "name"
    TYPE = "type"
    GEOMETRY = "geometry"
    URI = "uri"
    HASBEGINNING = "hasBeginning"
    HASEND = "hasEnd"
