"""Data models for column-to-cell mappings and macro configuration."""

import uuid
from enum import Enum
from typing import Iterable, Union

from pydantic import BaseModel, ConfigDict, Field


class MappingField(str, Enum):
    """Editable fields of a mapping."""

    SOURCE_COLUMN = "source_column"
    TARGET_CELL = "target_cell"


_FIELD_ALIASES = {
    "sourceColumn": MappingField.SOURCE_COLUMN,
    "targetCell": MappingField.TARGET_CELL,
}


def _resolve_field(field: Union[str, MappingField]) -> MappingField:
    if isinstance(field, MappingField):
        return field
    if field in _FIELD_ALIASES:
        return _FIELD_ALIASES[field]
    try:
        return MappingField(field)
    except ValueError:
        raise ValueError(f"Unknown mapping field: {field!r}") from None


class Mapping(BaseModel):
    """Binding of one source column to one template cell.

    Both references are free text and are passed to the generator untouched.
    """

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    id: str
    source_column: str = Field(default="", alias="sourceColumn")
    target_cell: str = Field(default="", alias="targetCell")


def new_mapping(existing_ids: Iterable[str] = ()) -> Mapping:
    """Create an empty mapping whose id differs from every id in existing_ids."""
    taken = set(existing_ids)
    mapping_id = uuid.uuid4().hex
    while mapping_id in taken:
        mapping_id = uuid.uuid4().hex
    return Mapping(id=mapping_id)


class MappingSet(BaseModel):
    """Ordered, immutable collection of mappings.

    Every operation returns a new MappingSet; unknown ids are ignored.
    """

    model_config = ConfigDict(frozen=True)

    mappings: tuple[Mapping, ...] = ()

    def __len__(self) -> int:
        return len(self.mappings)

    @property
    def ids(self) -> list[str]:
        return [m.id for m in self.mappings]

    def get(self, mapping_id: str):
        for mapping in self.mappings:
            if mapping.id == mapping_id:
                return mapping
        return None

    def append(self, mapping: Mapping) -> "MappingSet":
        """Return a new set with mapping at the end."""
        if mapping.id in self.ids:
            raise ValueError(f"Duplicate mapping id: {mapping.id}")
        return MappingSet(mappings=self.mappings + (mapping,))

    def add(self) -> "MappingSet":
        """Return a new set with a fresh empty mapping appended."""
        return self.append(new_mapping(self.ids))

    def remove(self, mapping_id: str) -> "MappingSet":
        """Return a new set without the mapping matching mapping_id."""
        return MappingSet(mappings=tuple(m for m in self.mappings if m.id != mapping_id))

    def update(
        self, mapping_id: str, field: Union[str, MappingField], value: str
    ) -> "MappingSet":
        """Return a new set with one field of the matching mapping replaced."""
        attr = _resolve_field(field).value
        return MappingSet(
            mappings=tuple(
                m.model_copy(update={attr: value}) if m.id == mapping_id else m
                for m in self.mappings
            )
        )


def default_mappings() -> MappingSet:
    """Example mappings a new session starts with."""
    return MappingSet(
        mappings=(
            Mapping(id="1", source_column="B", target_cell="C5"),
            Mapping(id="2", source_column="C", target_cell="C6"),
        )
    )


class MacroConfig(BaseModel):
    """Parameters of the generated macro other than the mappings.

    No cross-field validation is done here; start_row is passed through as-is.
    """

    model_config = ConfigDict(populate_by_name=True)

    source_sheet_name: str = Field(default="Data Source", alias="sourceSheetName")
    template_sheet_name: str = Field(default="Form Letter", alias="templateSheetName")
    save_path: str = Field(
        default="C:\\Users\\Client\\Documents\\Generated PDFs\\", alias="savePath"
    )
    start_row: int = Field(default=2, alias="startRow")
    filename_column: str = Field(default="A", alias="filenameColumn")
