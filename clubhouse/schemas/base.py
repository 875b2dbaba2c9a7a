# clubhouse/schemas/base.py
"""
Shared base for every model stored in the document store.

Documents are written with camelCase field names and a `schemaVersion`.
Reading validates the stored shape; documents from an older schema are
upgraded first, documents from a newer one are rejected.
"""

from typing import Any, Dict, Optional, Type, TypeVar

from pydantic import BaseModel, ConfigDict, Field
from pydantic import ValidationError as PydanticValidationError
from pydantic.alias_generators import to_camel

from clubhouse.core.exceptions import SchemaError
from clubhouse.store.base import DocumentSnapshot

SCHEMA_VERSION = 1

M = TypeVar("M", bound="DocumentModel")


class CamelModel(BaseModel):
    """Request/response model speaking camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class DocumentModel(CamelModel):
    model_config = ConfigDict(
        alias_generator=to_camel, populate_by_name=True, extra="ignore"
    )

    # The document key; never stored inside the document itself
    id: Optional[str] = None
    schema_version: int = Field(SCHEMA_VERSION)

    @classmethod
    def upgrade(cls, data: Dict[str, Any], from_version: int) -> Dict[str, Any]:
        """Bring an older stored shape up to SCHEMA_VERSION."""
        return data

    @classmethod
    def from_snapshot(cls: Type[M], snapshot: DocumentSnapshot) -> Optional[M]:
        if not snapshot.exists:
            return None

        data = dict(snapshot.data)
        version = data.get("schemaVersion", 0)
        if not isinstance(version, int) or version > SCHEMA_VERSION:
            raise SchemaError(
                f"Unsupported schema version {version!r} for "
                f"{snapshot.collection}/{snapshot.key}",
                collection=snapshot.collection,
                key=snapshot.key,
            )
        if version < SCHEMA_VERSION:
            data = cls.upgrade(data, version)
            data["schemaVersion"] = SCHEMA_VERSION

        try:
            return cls.model_validate({**data, "id": snapshot.key})
        except PydanticValidationError as e:
            raise SchemaError(
                f"{snapshot.collection}/{snapshot.key} does not match the "
                f"{cls.__name__} schema: {e.error_count()} error(s)",
                collection=snapshot.collection,
                key=snapshot.key,
            ) from e

    def to_document(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True, exclude={"id"})
