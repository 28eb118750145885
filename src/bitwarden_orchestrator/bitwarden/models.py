"""Vault item models returned by `bw list items`.

Items are pass-through data: nothing here interprets or coerces the values.
Scalar fields accept any JSON value, JSON keys keep their camelCase names as
aliases, unknown keys (card, identity, fields, ...) are retained, and
`to_dict()` returns the decoded object unchanged.
"""

from __future__ import annotations

import copy
from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    JsonValue,
    ModelWrapValidatorHandler,
    PrivateAttr,
    TypeAdapter,
    field_validator,
    model_validator,
)


class _PassThroughModel(BaseModel):
    model_config = ConfigDict(extra="allow")

    _raw: dict[str, Any] | None = PrivateAttr(default=None)

    @model_validator(mode="wrap")
    @classmethod
    def _keep_raw(cls, data: Any, handler: ModelWrapValidatorHandler[Any]) -> Any:
        model = handler(data)
        if isinstance(data, dict):
            model._raw = copy.deepcopy(data)
        return model

    def to_dict(self) -> dict[str, Any]:
        """Return the record as it came from `bw`."""

        if self._raw is not None:
            return copy.deepcopy(self._raw)
        return self.model_dump(mode="json", by_alias=True, exclude_unset=True)


class VaultItemUri(_PassThroughModel):
    match: JsonValue = None
    uri: JsonValue = None


class VaultItemLogin(_PassThroughModel):
    username: JsonValue = None
    password: JsonValue = None
    totp: JsonValue = None
    password_revision_date: JsonValue = Field(default=None, alias="passwordRevisionDate")
    uris: list[VaultItemUri] | None = None

    @field_validator("uris", mode="before")
    @classmethod
    def _object_uris_only(cls, value: Any) -> Any:
        # Anything else stays reachable through to_dict().
        if not isinstance(value, list):
            return None
        return [entry for entry in value if isinstance(entry, dict)]


class VaultItem(_PassThroughModel):
    """A single vault record."""

    id: JsonValue = None
    object: JsonValue = None
    name: JsonValue = None
    type: JsonValue = None
    reprompt: JsonValue = None
    favorite: JsonValue = None
    notes: JsonValue = None
    folder_id: JsonValue = Field(default=None, alias="folderId")
    organization_id: JsonValue = Field(default=None, alias="organizationId")
    deleted_date: JsonValue = Field(default=None, alias="deletedDate")
    creation_date: JsonValue = Field(default=None, alias="creationDate")
    revision_date: JsonValue = Field(default=None, alias="revisionDate")
    collection_ids: JsonValue = Field(default=None, alias="collectionIds")
    password_history: JsonValue = Field(default=None, alias="passwordHistory")
    login: VaultItemLogin | None = None

    @field_validator("login", mode="before")
    @classmethod
    def _object_login_only(cls, value: Any) -> Any:
        return value if isinstance(value, dict) else None


_ITEMS_ADAPTER = TypeAdapter(list[VaultItem])


def parse_items(text: str) -> list[VaultItem]:
    """Decode `bw list items` output into items, preserving order.

    Raises:
        pydantic.ValidationError: If the text is not JSON or not an array of objects.
    """

    return _ITEMS_ADAPTER.validate_json(text)
