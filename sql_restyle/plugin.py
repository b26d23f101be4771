"""Parse/print callback pair and option schema for hosting the formatter in a code-formatting tool."""

from typing import Any, Dict, Mapping, Optional

from sql_restyle.formatter import format_sql
from sql_restyle.options import DEFAULT_OPTIONS, OPTION_SCHEMA


LANGUAGES = [
    {
        "name": "SQL",
        "parsers": ["sql"],
        "extensions": [".sql"],
        "vscode_language_ids": ["sql"],
    },
]

AST_FORMAT = "sql"

# Key holding the plugin's own options in the host option mapping
PLUGIN_OPTIONS_KEY = "sqlFormatter"

OPTIONS = OPTION_SCHEMA


def parse(text: str, options: Optional[Mapping[str, Any]] = None) -> Dict[str, str]:
    # No syntax tree: the node just carries the raw text
    return {"type": AST_FORMAT, "value": text}


def loc_start(node: Any) -> int:
    return 0


def loc_end(node: Any) -> int:
    return 0


def print_node(node: Mapping[str, str], options: Optional[Mapping[str, Any]] = None) -> str:
    """Format the text held by a parsed node using options[PLUGIN_OPTIONS_KEY]."""
    plugin_options = (options or {}).get(PLUGIN_OPTIONS_KEY) or {}
    return format_sql(node["value"], plugin_options)


PARSERS = {
    "sql": {
        "parse": parse,
        "ast_format": AST_FORMAT,
        "loc_start": loc_start,
        "loc_end": loc_end,
    },
}

PRINTERS = {
    AST_FORMAT: {
        "print": print_node,
    },
}

__all__ = [
    "DEFAULT_OPTIONS",
    "LANGUAGES",
    "OPTIONS",
    "PARSERS",
    "PRINTERS",
    "parse",
    "print_node",
]
