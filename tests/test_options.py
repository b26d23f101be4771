import dataclasses

import pytest

from sql_restyle.options import (
    DEFAULT_OPTIONS,
    OPTION_SCHEMA,
    FormatOptions,
    coerce_options,
    load_options_file,
    validate_options,
)


def test_defaults():
    options = FormatOptions()
    assert options.keyword_case == "upper"
    assert options.indent_style == "standard"
    assert options.lines_between_queries == 1
    assert options.max_column_length == 50
    assert options.comma_position == "after"


def test_default_options_use_host_names():
    assert DEFAULT_OPTIONS == {
        "keywordCase": "upper",
        "indentStyle": "standard",
        "linesBetweenQueries": 1,
        "maxColumnLength": 50,
        "commaPosition": "after",
    }


def test_options_are_immutable():
    options = FormatOptions()
    with pytest.raises(dataclasses.FrozenInstanceError):
        options.keyword_case = "lower"


def test_from_mapping_accepts_host_and_snake_case_names():
    options = FormatOptions.from_mapping({"keywordCase": "lower", "comma_position": "before"})
    assert options.keyword_case == "lower"
    assert options.comma_position == "before"


def test_from_mapping_ignores_unknown_and_none():
    options = FormatOptions.from_mapping({"printWidth": 80, "keywordCase": None})
    assert options == FormatOptions()


@pytest.mark.parametrize("value", [None, {}])
def test_coerce_options_empty_gives_defaults(value):
    assert coerce_options(value) == FormatOptions()


def test_coerce_options_passes_instances_through():
    options = FormatOptions(keyword_case="preserve")
    assert coerce_options(options) is options


def test_schema_matches_defaults():
    for name, schema in OPTION_SCHEMA.items():
        assert schema["default"] == DEFAULT_OPTIONS[name]
        assert schema["category"] == "SQL"
        assert schema["type"] in ("choice", "int")


def test_validate_options_accepts_valid_values():
    validated = validate_options({
        "keywordCase": "lower",
        "indentStyle": "tabular",
        "linesBetweenQueries": "2",
        "maxColumnLength": 80,
        "commaPosition": "before",
        "unknown": "ignored",
    })
    assert validated == {
        "keywordCase": "lower",
        "indentStyle": "tabular",
        "linesBetweenQueries": 2,
        "maxColumnLength": 80,
        "commaPosition": "before",
    }


@pytest.mark.parametrize("mapping, name", [
    ({"keywordCase": "title"}, "keywordCase"),
    ({"commaPosition": "middle"}, "commaPosition"),
    ({"maxColumnLength": "wide"}, "maxColumnLength"),
    ({"linesBetweenQueries": -1}, "linesBetweenQueries"),
    ({"maxColumnLength": True}, "maxColumnLength"),
])
def test_validate_options_rejects_invalid_values(mapping, name):
    with pytest.raises(ValueError, match=name):
        validate_options(mapping)


def test_load_options_file(tmp_path):
    config = tmp_path / ".sqlrestyle"
    config.write_text(
        "[sql_restyle]\n"
        "keywordCase = lower\n"
        "comma_position = before\n"
        "maxColumnLength = 80\n",
        encoding="utf-8",
    )
    assert load_options_file(config) == {
        "keywordCase": "lower",
        "commaPosition": "before",
        "maxColumnLength": 80,
    }


def test_load_options_file_without_section(tmp_path):
    config = tmp_path / ".sqlrestyle"
    config.write_text("[other]\nkeywordCase = lower\n", encoding="utf-8")
    assert load_options_file(config) == {}


def test_load_options_file_missing(tmp_path):
    with pytest.raises(FileNotFoundError):
        load_options_file(tmp_path / "missing.ini")


def test_load_options_file_invalid_value(tmp_path):
    config = tmp_path / ".sqlrestyle"
    config.write_text("[sql_restyle]\nkeyword_case = shouting\n", encoding="utf-8")
    with pytest.raises(ValueError, match="keywordCase"):
        load_options_file(config)


def test_load_options_file_unparseable(tmp_path):
    config = tmp_path / ".sqlrestyle"
    config.write_text("keywordCase = lower\n", encoding="utf-8")
    with pytest.raises(ValueError, match="Invalid config file"):
        load_options_file(config)
