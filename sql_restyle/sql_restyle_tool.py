import argparse
import shutil
import sys
from pathlib import Path
from typing import Any, Dict, List, Optional

from sql_restyle.formatter import (
    apply_keyword_case,
    assemble_clauses,
    format_sql,
    normalize_spacing,
    split_clauses,
)
from sql_restyle.options import (
    HOST_OPTION_NAMES,
    OPTION_SCHEMA,
    FormatOptions,
    choice_values,
    load_options_file,
)
from sql_restyle.verify import compare_token_streams, lint_formatted_sql


AUDIT_FOLDER = Path("sql_restyle_audit")
STDIN_AUDIT_NAME = "stdin"
DEFAULT_CONFIG_PATH = Path(".sqlrestyle")

EXIT_OK = 0
EXIT_CHANGED = 1
EXIT_ERROR = 2

# host option name -> argparse dest
FIELD_NAMES = {host: field for field, host in HOST_OPTION_NAMES.items()}


def write_stage(audit_path: Path, stage: int, name: str, content: str, debug: bool) -> int:
    if debug:
        (audit_path / f"{stage:02d}_{name}.sql").write_text(content, encoding="utf-8")
    return stage + 1


def format_with_audit(sql: str, options: FormatOptions, audit_path: Path, verbose: bool = False) -> str:
    """
    Run the formatting stages one by one, writing each stage's output to audit_path.
    """
    # Clears audit path
    if audit_path.exists():
        shutil.rmtree(audit_path)
    audit_path.mkdir(parents=True, exist_ok=True)

    stage = 1
    stage = write_stage(audit_path, stage, "original", sql, True)

    sql = normalize_spacing(sql, options.comma_position, verbose=verbose)
    stage = write_stage(audit_path, stage, "normalize_spacing", sql, True)

    sql = apply_keyword_case(sql, options.keyword_case, verbose=verbose)
    stage = write_stage(audit_path, stage, "keyword_case", sql, True)

    clauses = split_clauses(sql, verbose=verbose)
    stage = write_stage(audit_path, stage, "split_clauses", "\n".join(clauses), True)

    sql = assemble_clauses(clauses, options.keyword_case, verbose=verbose)
    stage = write_stage(audit_path, stage, "final", sql, True)

    return sql


def with_final_newline(formatted: str) -> str:
    # Files end with a newline; the engine output does not
    return formatted + "\n" if formatted else formatted


def audit_path_for(filepath: Path, root: Path, audit_folder: Path) -> Path:
    """
    Mirror the file's location under root so files sharing a stem get separate audit folders.
    """
    rel_path = filepath.relative_to(root) if root.is_dir() else Path(filepath.name)
    return audit_folder / rel_path.parent / filepath.stem


def report_checks(label: str, original: str, formatted: str, args: argparse.Namespace) -> None:
    if args.verify:
        for idx, before, after in compare_token_streams(original, formatted):
            print(f"[WARNING] {label}: token {idx} changed: {before!r} -> {after!r}")

    if args.lint:
        for violation in lint_formatted_sql(formatted, dialect=args.dialect):
            print(f"[LINT] {label}:L{violation['line_no']}: {violation['code']} {violation['description']}")


def process_sql_file(filepath: Path, root: Path, options: FormatOptions, args: argparse.Namespace) -> bool:
    """
    Format a single .sql file. root is the file or folder given on the command line.

    Returns:
        bool: True if formatting changes the file contents.
    """
    if not filepath.exists() or filepath.suffix.lower() != ".sql":
        print(f"[SKIPPED] {filepath} (not a .sql file)")
        return False

    try:
        sql = filepath.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        print(f"[ERROR] Failed to read {filepath}: {e}")
        return False

    if args.debug:
        audit_path = audit_path_for(filepath, root, Path(args.audit_folder))
        formatted = format_with_audit(sql, options, audit_path, verbose=args.verbose)
    else:
        formatted = format_sql(sql, options, verbose=args.verbose)

    output = with_final_newline(formatted)
    changed = output != sql
    report_checks(str(filepath), sql, formatted, args)

    # --- Finalize ---
    if args.debug:
        print(f"DEBUG MODE: Stages for {filepath} saved to {audit_path}")
    elif args.check:
        if changed:
            print(f"Would reformat: {filepath}")
    elif args.dry_run:
        print(formatted)
    elif changed:
        try:
            filepath.write_text(output, encoding="utf-8")
        except OSError as e:
            print(f"[ERROR] Failed to write {filepath}: {e}")
            return changed
        print(f"File {filepath} formatted and replaced successfully.")
    elif args.verbose:
        print(f"[DEBUG] {filepath} already formatted.")

    return changed


def collect_sql_files(path: Path) -> List[Path]:
    if path.is_file() and path.suffix.lower() == ".sql":
        return [path]
    if path.is_dir():
        return sorted(path.rglob("*.sql"))
    return []


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="SQL Restyle Tool")
    parser.add_argument("path", help="Path to SQL file or folder, or - to read stdin")
    parser.add_argument("--config", help=f"Path to an INI file with a [sql_restyle] section (default: {DEFAULT_CONFIG_PATH} if present)")

    style = parser.add_argument_group("style options")
    for name, schema in OPTION_SCHEMA.items():
        dest = FIELD_NAMES[name]
        flag = "--" + dest.replace("_", "-")
        if schema["type"] == "choice":
            style.add_argument(flag, dest=dest, choices=choice_values(name), default=None,
                               help=f"{schema['description']} (default: {schema['default']})")
        else:
            style.add_argument(flag, dest=dest, type=non_negative_int, default=None,
                               help=f"{schema['description']} (default: {schema['default']})")

    parser.add_argument("--dry-run", action="store_true", help="Print formatted SQL instead of writing files")
    parser.add_argument("--check", action="store_true", help="Exit with 1 if any file would be reformatted (formatted files end with one newline)")
    parser.add_argument("--verify", action="store_true", help="Warn when formatting changes the token stream")
    parser.add_argument("--lint", action="store_true", help="Run sqlfluff on the formatted SQL")
    parser.add_argument("--dialect", default="ansi", help="sqlfluff dialect used by --lint")
    parser.add_argument("--audit-folder", default=str(AUDIT_FOLDER), help="Where --debug writes stage files")
    parser.add_argument("--debug", action="store_true", help="Write each stage to the audit folder and leave files untouched")
    parser.add_argument("--verbose", action="store_true", help="Enable verbose debug logging")
    return parser


def non_negative_int(value: str) -> int:
    try:
        number = int(value)
    except ValueError:
        raise argparse.ArgumentTypeError(f"invalid integer: {value!r}")
    if number < 0:
        raise argparse.ArgumentTypeError(f"must not be negative: {number}")
    return number


def resolve_options(args: argparse.Namespace) -> FormatOptions:
    """
    Merge options: defaults < config file < command line flags.

    Raises:
        FileNotFoundError: If --config names a missing file.
        ValueError: If the config file holds an invalid value.
    """
    values: Dict[str, Any] = {}

    if args.config:
        values.update(load_options_file(Path(args.config)))
    elif DEFAULT_CONFIG_PATH.exists():
        values.update(load_options_file(DEFAULT_CONFIG_PATH))

    for field, host_name in HOST_OPTION_NAMES.items():
        flag_value = getattr(args, field)
        if flag_value is not None:
            values[host_name] = flag_value

    options = FormatOptions.from_mapping(values)
    if args.verbose:
        print(f"[DEBUG] Options: {options}")
    return options


# ------------------ Main entrypoint ------------------
def main(argv: Optional[List[str]] = None) -> int:
    parser = build_parser()
    args = parser.parse_args(argv)

    try:
        options = resolve_options(args)
    except (FileNotFoundError, ValueError) as e:
        print(f"ERROR: {e}")
        return EXIT_ERROR

    if args.path == "-":
        sql = sys.stdin.read()
        if args.debug:
            audit_path = Path(args.audit_folder) / STDIN_AUDIT_NAME
            formatted = format_with_audit(sql, options, audit_path, verbose=args.verbose)
        else:
            formatted = format_sql(sql, options, verbose=args.verbose)
        report_checks("<stdin>", sql, formatted, args)
        print(formatted)
        return EXIT_CHANGED if args.check and with_final_newline(formatted) != sql else EXIT_OK

    path = Path(args.path).resolve()
    if not path.exists():
        print(f"ERROR: Path does not exist: {path}")
        return EXIT_ERROR

    sql_files = collect_sql_files(path)
    if not sql_files:
        print("No .sql files found to process.")
        return EXIT_OK

    changed = [f for f in sql_files if process_sql_file(f, path, options, args)]

    if args.check and changed:
        print(f"{len(changed)} file(s) would be reformatted.")
        return EXIT_CHANGED
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
