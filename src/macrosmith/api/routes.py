"""API routes for MacroSmith."""

from typing import Optional

from fastapi import APIRouter, File, HTTPException, UploadFile
from pydantic import BaseModel, ConfigDict, Field

from ..generation import WorkflowState
from ..mapping import MacroConfig, Mapping
from ..workbook import ColumnDef, WorkbookParseError

router = APIRouter()


def get_session():
    """Get the global session instance."""
    from .app import get_session as _get_session

    return _get_session()


class WorkbookInfo(BaseModel):
    """Summary of the loaded workbook."""

    file_name: Optional[str] = None
    sheet_names: list[str] = Field(default_factory=list)


class ConfigUpdateRequest(BaseModel):
    """Partial update of the macro configuration."""

    model_config = ConfigDict(populate_by_name=True)

    source_sheet_name: Optional[str] = Field(default=None, alias="sourceSheetName")
    template_sheet_name: Optional[str] = Field(default=None, alias="templateSheetName")
    save_path: Optional[str] = Field(default=None, alias="savePath")
    start_row: Optional[int] = Field(default=None, alias="startRow")
    filename_column: Optional[str] = Field(default=None, alias="filenameColumn")


class MappingUpdateRequest(BaseModel):
    """Request to change one field of a mapping."""

    field: str  # "sourceColumn"/"targetCell" or snake_case equivalents
    value: str


@router.get("/health")
async def health_check():
    """Health check endpoint with diagnostics."""
    from ..config import settings

    # Gather non-secret diagnostics
    config = {
        "llm_provider": settings.llm_provider,
        "model_name": settings.active_model,
        "google_key_present": bool(settings.google_api_key),
        "anthropic_key_present": bool(settings.anthropic_api_key),
        "openrouter_key_present": bool(settings.openrouter_api_key),
    }

    return {"status": "ok", "service": "macrosmith", "config": config}


# Workbook endpoints


@router.post("/workbook", response_model=WorkbookInfo)
async def upload_workbook(file: UploadFile = File(...)):
    """Upload a CSV or Excel file to inspect its structure."""
    session = get_session()
    data = await file.read()
    try:
        workbook = session.load_workbook(data, file.filename)
    except WorkbookParseError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return WorkbookInfo(file_name=workbook.file_name, sheet_names=workbook.sheet_names)


@router.get("/workbook", response_model=WorkbookInfo)
async def get_workbook():
    """Get the loaded file name and its sheets."""
    session = get_session()
    return WorkbookInfo(file_name=session.file_name, sheet_names=session.sheet_names)


@router.get("/columns", response_model=list[ColumnDef])
async def list_columns():
    """List the source sheet's columns for mapping suggestions."""
    return get_session().columns


# Configuration endpoints


@router.get("/config", response_model=MacroConfig)
async def get_config():
    return get_session().config


@router.patch("/config", response_model=MacroConfig)
async def update_config(request: ConfigUpdateRequest):
    """Update one or more configuration fields."""
    session = get_session()
    try:
        return session.update_config(**request.model_dump(exclude_unset=True))
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))


# Mapping endpoints


@router.get("/mappings", response_model=list[Mapping])
async def list_mappings():
    return list(get_session().mappings.mappings)


@router.post("/mappings", response_model=Mapping, status_code=201)
async def add_mapping():
    """Append an empty mapping."""
    return get_session().add_mapping()


@router.patch("/mappings/{mapping_id}", response_model=list[Mapping])
async def update_mapping(mapping_id: str, request: MappingUpdateRequest):
    """Change one field of a mapping. Unknown ids are ignored."""
    session = get_session()
    try:
        mappings = session.update_mapping(mapping_id, request.field, request.value)
    except ValueError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return list(mappings.mappings)


@router.delete("/mappings/{mapping_id}", response_model=list[Mapping])
async def remove_mapping(mapping_id: str):
    """Remove a mapping. Unknown ids are ignored."""
    return list(get_session().remove_mapping(mapping_id).mappings)


# Generation endpoints


@router.post("/generate", response_model=WorkflowState)
async def generate():
    """Generate a VBA macro from the current configuration and mappings."""
    return await get_session().generate()


@router.get("/generation", response_model=WorkflowState)
async def get_generation_state():
    return get_session().state


@router.post("/generation/reset", response_model=WorkflowState)
async def reset_generation():
    return get_session().reset_generation()
