"""Pytest configuration and shared fixtures."""

import io
import json
from unittest.mock import Mock

import openpyxl
import pytest
import xlwt

from macrosmith.config import Settings
from macrosmith.generation import GenerationClient, GenerationWorkflow
from macrosmith.llm import LLMClient, LLMResponse
from macrosmith.session import Session


@pytest.fixture
def mock_settings() -> Settings:
    """Create settings with test values."""
    return Settings(
        llm_provider="gemini",
        google_api_key="test-google-key",
        gemini_model="gemini-2.5-flash",
        anthropic_api_key=None,
        openrouter_api_key=None,
        max_tokens=4096,
        llm_timeout_seconds=30.0,
        max_upload_bytes=1024 * 1024,
        host="127.0.0.1",
        port=8000,
        debug=False,
        cors_allow_origins=["*"],
    )


def make_xlsx(sheets: dict[str, list[list]]) -> bytes:
    """Build an .xlsx file in memory; each sheet is a list of rows starting at A1."""
    workbook = openpyxl.Workbook()
    workbook.remove(workbook.active)
    for name, rows in sheets.items():
        worksheet = workbook.create_sheet(title=name)
        for row_idx, row in enumerate(rows, start=1):
            for col_idx, value in enumerate(row, start=1):
                if value is not None:
                    worksheet.cell(row=row_idx, column=col_idx, value=value)
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_factory():
    """Return the in-memory .xlsx builder."""
    return make_xlsx


@pytest.fixture
def xls_bytes() -> bytes:
    """Legacy .xls workbook with a header row and one data row."""
    workbook = xlwt.Workbook()
    worksheet = workbook.add_sheet("People")
    for col_idx, value in enumerate(["Name", "City", 2024]):
        worksheet.write(0, col_idx, value)
    worksheet.write(1, 0, "Ada")
    worksheet.write(1, 1, "London")
    buffer = io.BytesIO()
    workbook.save(buffer)
    return buffer.getvalue()


@pytest.fixture
def xlsx_bytes() -> bytes:
    """Workbook with a data sheet and a template sheet."""
    return make_xlsx(
        {
            "Data": [
                ["Name", "", "Email"],
                ["Ada", "London", "ada@example.com"],
                ["Grace", "Arlington", "grace@example.com"],
            ],
            "Template": [["Dear", None, None]],
        }
    )


@pytest.fixture
def csv_bytes() -> bytes:
    return b"Name,City,Email\nAda,London,ada@example.com\nGrace,Arlington,grace@example.com\n"


@pytest.fixture
def generation_payload() -> str:
    return json.dumps({"code": "Sub X()\nEnd Sub", "explanation": "Run it."})


@pytest.fixture
def mock_llm_client(generation_payload) -> Mock:
    """Create a mocked LLM client returning a valid generation payload."""
    client = Mock(spec=LLMClient)
    client.complete = Mock(
        return_value=LLMResponse(
            text=generation_payload,
            stop_reason="STOP",
            usage={"input_tokens": 100, "output_tokens": 50},
        )
    )
    return client


@pytest.fixture
def generation_client(mock_llm_client, mock_settings) -> GenerationClient:
    return GenerationClient(llm_client=mock_llm_client, settings=mock_settings)


@pytest.fixture
def session(generation_client) -> Session:
    """Session wired to the mocked LLM client."""
    return Session(workflow=GenerationWorkflow(generation_client))
