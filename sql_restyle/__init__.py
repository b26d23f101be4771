from sql_restyle.formatter import (
    apply_keyword_case,
    assemble_clauses,
    format,
    format_sql,
    normalize_spacing,
    split_clauses,
)
from sql_restyle.options import DEFAULT_OPTIONS, OPTION_SCHEMA, FormatOptions

__all__ = [
    "DEFAULT_OPTIONS",
    "OPTION_SCHEMA",
    "FormatOptions",
    "apply_keyword_case",
    "assemble_clauses",
    "format",
    "format_sql",
    "normalize_spacing",
    "split_clauses",
]
