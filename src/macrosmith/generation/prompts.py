"""Prompts for VBA macro generation."""

from ..mapping import MacroConfig, MappingSet
from .models import GenerationRequest

GENERATION_SYSTEM_PROMPT = """You are an expert Excel VBA developer who writes production-ready macros for non-programmers.
Respond with a single raw JSON object containing exactly two string keys: "code" and "explanation".
Do not wrap the JSON in markdown code fences and do not add any text before or after it."""

MAPPING_LINE = '- Copy Column "{source}" from Source to Cell "{target}" on Template'

GENERATION_PROMPT_TEMPLATE = """Act as a Senior Excel VBA Developer. Write a robust, modular VBA macro based on the following specifications:

**Configuration:**
- Source Sheet Name: "{source_sheet_name}"
- Template Sheet Name: "{template_sheet_name}"
- PDF Save Path: "{save_path}" (Note: Ensure code handles trailing backslash logic)
- Data Start Row: {start_row}
- Filename Source: Column "{filename_column}" (from Source Sheet)

**Data Mappings:**
{mapping_lines}

**Requirements:**
1. Use 'Option Explicit'.
2. Define variables clearly at the top.
3. Loop from Start Row until the last populated row in the Source Sheet.
4. Inside the loop, clear previous data in the template (optional but good practice) and map the new data.
5. Use 'ExportAsFixedFormat' Type:=xlTypePDF to save the Template Sheet.
6. Implement robust Error Handling (On Error GoTo ErrorHandler). Log errors to the Immediate Window or a message box if a specific row fails, but try to continue or exit gracefully.
7. Heavily comment the code so a junior developer can understand the mappings.
8. Add a simple message box at the end confirming completion.

**Output Format:**
Return the response as a JSON object with two keys:
1. "code": The full VBA code string.
2. "explanation": A brief, professional explanation (Markdown supported) of how the client should install and run this macro.

Do not use markdown formatting like ```json in the response, just return the raw JSON string."""


def format_mapping_lines(mappings: MappingSet) -> str:
    """One instruction line per mapping, in collection order."""
    return "\n".join(
        MAPPING_LINE.format(source=m.source_column, target=m.target_cell)
        for m in mappings.mappings
    )


def build_generation_request(config: MacroConfig, mappings: MappingSet) -> GenerationRequest:
    """Build the generation request for a configuration and its mappings.

    The output depends only on the arguments, so equal inputs always produce
    identical text. Field values are embedded verbatim.
    """
    prompt = GENERATION_PROMPT_TEMPLATE.format(
        source_sheet_name=config.source_sheet_name,
        template_sheet_name=config.template_sheet_name,
        save_path=config.save_path,
        start_row=config.start_row,
        filename_column=config.filename_column,
        mapping_lines=format_mapping_lines(mappings),
    )
    return GenerationRequest(prompt=prompt, system=GENERATION_SYSTEM_PROMPT)
