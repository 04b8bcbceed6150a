"""Single-user editing session state."""

import logging
from typing import Any, Optional, Union

from .generation import GenerationClient, GenerationWorkflow, WorkflowState
from .mapping import MacroConfig, Mapping, MappingField, MappingSet, default_mappings
from .workbook import ColumnDef, Workbook, decode_workbook, extract_columns

logger = logging.getLogger(__name__)


class Session:
    """
    Holds everything one user edits: the loaded workbook, the macro
    configuration, the mappings and the generation workflow.

    The column list is recomputed whenever the workbook or the source sheet
    changes, so it is never stale.
    """

    def __init__(self, workflow: Optional[GenerationWorkflow] = None):
        self.workbook: Optional[Workbook] = None
        self.config = MacroConfig()
        self.mappings: MappingSet = default_mappings()
        self.workflow = workflow or GenerationWorkflow(GenerationClient())
        self._columns: list[ColumnDef] = []

    @property
    def columns(self) -> list[ColumnDef]:
        return list(self._columns)

    @property
    def sheet_names(self) -> list[str]:
        return self.workbook.sheet_names if self.workbook else []

    @property
    def file_name(self) -> Optional[str]:
        return self.workbook.file_name if self.workbook else None

    @property
    def state(self) -> WorkflowState:
        return self.workflow.state

    def _refresh_columns(self):
        try:
            self._columns = extract_columns(self.workbook, self.config.source_sheet_name)
        except Exception as e:
            logger.warning(f"Column extraction failed for '{self.config.source_sheet_name}': {e}")
            self._columns = []

    def load_workbook(self, data: bytes, file_name: Optional[str] = None) -> Workbook:
        """
        Decode an upload and make it the session's workbook.

        The first sheet becomes the source sheet. On failure the session is
        left unchanged.

        Raises:
            WorkbookParseError: If the upload cannot be decoded
        """
        workbook = decode_workbook(data, file_name)
        self.workbook = workbook
        if workbook.sheet_names:
            self.config = self.config.model_copy(
                update={"source_sheet_name": workbook.sheet_names[0]}
            )
        self._refresh_columns()
        return workbook

    def update_config(self, **changes: Any) -> MacroConfig:
        """Replace configuration fields; accepts snake_case or camelCase names."""
        fields = MacroConfig.model_fields
        aliases = {info.alias: name for name, info in fields.items() if info.alias}
        normalized = {aliases.get(key, key): value for key, value in changes.items()}
        unknown = set(normalized) - set(fields)
        if unknown:
            raise ValueError(f"Unknown configuration field(s): {', '.join(sorted(unknown))}")

        self.config = MacroConfig.model_validate({**self.config.model_dump(), **normalized})
        self._refresh_columns()
        return self.config

    def add_mapping(self) -> Mapping:
        """Append an empty mapping and return it."""
        self.mappings = self.mappings.add()
        return self.mappings.mappings[-1]

    def remove_mapping(self, mapping_id: str) -> MappingSet:
        self.mappings = self.mappings.remove(mapping_id)
        return self.mappings

    def update_mapping(
        self, mapping_id: str, field: Union[str, MappingField], value: str
    ) -> MappingSet:
        self.mappings = self.mappings.update(mapping_id, field, value)
        return self.mappings

    async def generate(self) -> WorkflowState:
        """Generate a macro from the current configuration and mappings."""
        return await self.workflow.generate(self.config, self.mappings)

    def reset_generation(self) -> WorkflowState:
        return self.workflow.reset()
