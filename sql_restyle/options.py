import configparser
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Dict, Mapping, Optional, Union


CONFIG_SECTION = "sql_restyle"


@dataclass(frozen=True)
class FormatOptions:
    """
    Style options for a single format call.

    indent_style, lines_between_queries and max_column_length are accepted
    and validated but do not change the output.
    """

    keyword_case: str = "upper"
    indent_style: str = "standard"
    lines_between_queries: int = 1
    max_column_length: int = 50
    comma_position: str = "after"

    @classmethod
    def from_mapping(cls, mapping: Optional[Mapping[str, Any]]) -> "FormatOptions":
        """
        Build options from a host mapping.

        Host (camelCase) and snake_case names are both accepted. Unknown keys
        are ignored and missing or None values keep their defaults.
        """
        if not mapping:
            return cls()

        values = {}
        for field in fields(cls):
            for key in (HOST_OPTION_NAMES[field.name], field.name):
                if mapping.get(key) is not None:
                    values[field.name] = mapping[key]
                    break
        return cls(**values)

    def to_host_mapping(self) -> Dict[str, Any]:
        return {HOST_OPTION_NAMES[f.name]: getattr(self, f.name) for f in fields(self)}


# snake_case field -> name used by the host configuration schema
HOST_OPTION_NAMES = {
    "keyword_case": "keywordCase",
    "indent_style": "indentStyle",
    "lines_between_queries": "linesBetweenQueries",
    "max_column_length": "maxColumnLength",
    "comma_position": "commaPosition",
}

DEFAULT_OPTIONS = FormatOptions().to_host_mapping()


OPTION_SCHEMA = {
    "keywordCase": {
        "type": "choice",
        "category": "SQL",
        "default": DEFAULT_OPTIONS["keywordCase"],
        "description": "Convert keywords to uppercase, lowercase, or preserve case",
        "choices": [
            {"value": "upper", "description": "Convert keywords to uppercase"},
            {"value": "lower", "description": "Convert keywords to lowercase"},
            {"value": "preserve", "description": "Preserve keyword case"},
        ],
    },
    "indentStyle": {
        "type": "choice",
        "category": "SQL",
        "default": DEFAULT_OPTIONS["indentStyle"],
        "description": "SQL indentation style",
        "choices": [
            {"value": "standard", "description": "Standard indentation"},
            {"value": "tabular", "description": "Tabular indentation for better readability"},
        ],
    },
    "linesBetweenQueries": {
        "type": "int",
        "category": "SQL",
        "default": DEFAULT_OPTIONS["linesBetweenQueries"],
        "description": "Number of blank lines between queries",
    },
    "maxColumnLength": {
        "type": "int",
        "category": "SQL",
        "default": DEFAULT_OPTIONS["maxColumnLength"],
        "description": "Maximum length for columns before wrapping",
    },
    "commaPosition": {
        "type": "choice",
        "category": "SQL",
        "default": DEFAULT_OPTIONS["commaPosition"],
        "description": "Position of commas in column lists",
        "choices": [
            {"value": "before", "description": "Commas at the beginning of lines"},
            {"value": "after", "description": "Commas at the end of lines"},
            {"value": "preserve", "description": "Preserve comma positions"},
        ],
    },
}


def coerce_options(options: Union[None, FormatOptions, Mapping[str, Any]]) -> FormatOptions:
    if isinstance(options, FormatOptions):
        return options
    return FormatOptions.from_mapping(options)


def choice_values(name: str) -> list:
    return [c["value"] for c in OPTION_SCHEMA[name]["choices"]]


def validate_options(mapping: Mapping[str, Any]) -> Dict[str, Any]:
    """
    Check host option values against OPTION_SCHEMA.

    Args:
        mapping (Mapping): Option values keyed by host (camelCase) name.

    Returns:
        dict: The known options, with int options converted to int.

    Raises:
        ValueError: If a choice is not one of its allowed values, or an int
            option is not a non-negative integer.
    """
    validated = {}
    for name, value in mapping.items():
        schema = OPTION_SCHEMA.get(name)
        if schema is None or value is None:
            continue

        if schema["type"] == "choice":
            allowed = choice_values(name)
            if value not in allowed:
                raise ValueError(
                    f"Invalid value for {name}: {value!r} (expected one of {', '.join(allowed)})"
                )
            validated[name] = value
        else:
            if isinstance(value, bool):
                raise ValueError(f"Invalid value for {name}: {value!r} (expected an integer)")
            try:
                number = int(value)
            except (TypeError, ValueError):
                raise ValueError(f"Invalid value for {name}: {value!r} (expected an integer)")
            if number < 0:
                raise ValueError(f"Invalid value for {name}: {number} (must not be negative)")
            validated[name] = number

    return validated


def load_options_file(config_path: Path) -> Dict[str, Any]:
    """
    Read style options from the [sql_restyle] section of an INI file.

    Keys may use either the host names (keywordCase) or snake_case
    (keyword_case).

    Raises:
        FileNotFoundError: If config_path does not exist.
        ValueError: If the file cannot be parsed or holds an invalid value.
    """
    if not config_path.exists():
        raise FileNotFoundError(f"Config file does not exist: {config_path}")

    parser = configparser.ConfigParser()
    # Keep camelCase keys as written
    parser.optionxform = str
    raw = {}
    try:
        parser.read(config_path, encoding="utf-8")
        if not parser.has_section(CONFIG_SECTION):
            return {}
        for key, value in parser.items(CONFIG_SECTION):
            raw[HOST_OPTION_NAMES.get(key, key)] = value.strip()
    except configparser.Error as e:
        raise ValueError(f"Invalid config file {config_path}: {e}")

    return validate_options(raw)
