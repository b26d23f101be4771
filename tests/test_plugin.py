from sql_restyle import plugin
from sql_restyle.options import DEFAULT_OPTIONS


def format_through_host(text, formatter_options=None):
    node = plugin.PARSERS["sql"]["parse"](text, formatter_options)
    return plugin.PRINTERS["sql"]["print"](node, {"sqlFormatter": formatter_options or {}})


def test_language_registration():
    (language,) = plugin.LANGUAGES
    assert language["name"] == "SQL"
    assert language["extensions"] == [".sql"]
    assert language["parsers"] == ["sql"]


def test_parse_is_pass_through():
    text = "select  *\nfrom t"
    assert plugin.parse(text) == {"type": "sql", "value": text}


def test_parser_locations_are_zero():
    parser = plugin.PARSERS["sql"]
    node = parser["parse"]("select 1")
    assert parser["ast_format"] == "sql"
    assert parser["loc_start"](node) == 0
    assert parser["loc_end"](node) == 0


def test_print_with_host_options():
    assert format_through_host("SELECT id FROM users", {"keywordCase": "lower"}) == "select id\nfrom users"


def test_print_without_plugin_options_uses_defaults():
    node = plugin.parse("select id,name from users")
    assert plugin.print_node(node) == "SELECT id, name\nFROM users"
    assert plugin.print_node(node, {"printWidth": 80}) == "SELECT id, name\nFROM users"


def test_print_complex_query():
    text = (
        "select u.id,u.name from users u "
        "inner join orders o on u.id=o.user_id "
        "order by u.name desc limit 5"
    )
    assert format_through_host(text) == (
        "SELECT u.id, u.name\n"
        "FROM users u\n"
        "INNER JOIN orders o ON u.id = o.user_id\n"
        "ORDER BY u.name DESC\n"
        "LIMIT 5"
    )


def test_options_schema_exposed():
    assert set(plugin.OPTIONS) == set(DEFAULT_OPTIONS)
    assert plugin.DEFAULT_OPTIONS is DEFAULT_OPTIONS
