"""Command-line interface for MacroSmith."""

import argparse
import asyncio
import logging
import sys
from pathlib import Path
from typing import Optional

import uvicorn

from .config import settings


def main():
    """Main entry point for the CLI."""
    parser = argparse.ArgumentParser(
        description="MacroSmith - Excel VBA macro generator for template mail-merges"
    )
    subparsers = parser.add_subparsers(dest="command", help="Available commands")

    # Server command
    server_parser = subparsers.add_parser("serve", help="Start the web server")
    server_parser.add_argument(
        "--host", default=settings.host, help=f"Host to bind to (default: {settings.host})"
    )
    server_parser.add_argument(
        "--port", type=int, default=settings.port, help=f"Port to bind to (default: {settings.port})"
    )
    server_parser.add_argument(
        "--reload", action="store_true", help="Enable auto-reload for development"
    )

    # Columns command
    columns_parser = subparsers.add_parser(
        "columns", help="List the header columns of a spreadsheet"
    )
    columns_parser.add_argument("file", type=Path, help="CSV or Excel file")
    columns_parser.add_argument(
        "--sheet", "-s", help="Sheet to inspect (default: first sheet)"
    )

    # Generate command
    generate_parser = subparsers.add_parser("generate", help="Generate a VBA macro")
    generate_parser.add_argument("--source-sheet", default="Data Source")
    generate_parser.add_argument("--template-sheet", default="Form Letter")
    generate_parser.add_argument(
        "--save-path", default="C:\\Users\\Client\\Documents\\Generated PDFs\\"
    )
    generate_parser.add_argument("--start-row", type=int, default=2)
    generate_parser.add_argument("--filename-column", default="A")
    generate_parser.add_argument(
        "--map",
        "-m",
        action="append",
        default=[],
        metavar="COLUMN=CELL",
        help="Copy source COLUMN to template CELL (repeatable)",
    )
    generate_parser.add_argument(
        "--output", "-o", type=Path, help="Write the macro code to this file"
    )
    generate_parser.add_argument(
        "--prompt-only", action="store_true", help="Print the generation prompt and exit"
    )

    args = parser.parse_args()

    logging.basicConfig(
        level=settings.log_level.upper(),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
    )

    if args.command == "serve":
        run_server(args.host, args.port, args.reload)
    elif args.command == "columns":
        sys.exit(run_columns(args.file, args.sheet))
    elif args.command == "generate":
        sys.exit(asyncio.run(run_generate(args)))
    else:
        parser.print_help()
        sys.exit(1)


def run_server(host: str, port: int, reload: bool):
    """Run the web server."""
    uvicorn.run(
        "macrosmith.api:create_app",
        host=host,
        port=port,
        reload=reload,
        factory=True,
    )


def parse_mapping_arg(value: str) -> tuple[str, str]:
    """Split a COLUMN=CELL argument."""
    source, sep, target = value.partition("=")
    if not sep:
        raise ValueError(f"Mapping must look like COLUMN=CELL, got {value!r}")
    return source.strip(), target.strip()


def run_columns(path: Path, sheet: Optional[str] = None) -> int:
    """Print the columns of a spreadsheet file."""
    from .workbook import WorkbookParseError, decode_workbook, extract_columns

    try:
        workbook = decode_workbook(path.read_bytes(), path.name)
    except (OSError, WorkbookParseError) as e:
        print(f"Error: {e}")
        return 1

    sheet_name = sheet or (workbook.sheet_names[0] if workbook.sheet_names else None)
    print(f"Sheets: {', '.join(workbook.sheet_names)}")
    print(f"Columns of '{sheet_name}':")
    for column in extract_columns(workbook, sheet_name):
        print(f"  {column.letter:>4}  {column.header}")
    return 0


async def run_generate(args) -> int:
    """Build the request from CLI flags and run one generation."""
    from .generation import WorkflowStatus, build_generation_request
    from .session import Session

    session = Session()
    session.update_config(
        source_sheet_name=args.source_sheet,
        template_sheet_name=args.template_sheet,
        save_path=args.save_path,
        start_row=args.start_row,
        filename_column=args.filename_column,
    )

    if args.map:
        # Flags replace the example mappings
        for mapping_id in list(session.mappings.ids):
            session.remove_mapping(mapping_id)
        for value in args.map:
            try:
                source, target = parse_mapping_arg(value)
            except ValueError as e:
                print(f"Error: {e}")
                return 2
            mapping = session.add_mapping()
            session.update_mapping(mapping.id, "source_column", source)
            session.update_mapping(mapping.id, "target_cell", target)

    if args.prompt_only:
        print(build_generation_request(session.config, session.mappings).prompt)
        return 0

    state = await session.generate()
    if state.status != WorkflowStatus.SUCCEEDED:
        print(f"Error: {state.error}")
        return 1

    if args.output:
        args.output.write_text(state.result.code)
        print(f"Macro written to {args.output}")
    else:
        print(state.result.code)
    print()
    print(state.result.explanation)
    return 0


if __name__ == "__main__":
    main()
