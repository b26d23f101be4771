import re


# Keywords that get re-cased by the keyword case stage
SQL_KEYWORDS = [
    "SELECT", "FROM", "WHERE", "AND", "OR", "INSERT", "UPDATE", "DELETE",
    "JOIN", "INNER JOIN", "LEFT JOIN", "RIGHT JOIN", "OUTER JOIN",
    "GROUP BY", "ORDER BY", "HAVING", "LIMIT", "OFFSET", "AS",
    "UNION", "ALL", "IN", "BETWEEN", "LIKE", "IS", "NULL",
    "CREATE", "TABLE", "DROP", "ALTER", "INDEX", "PRIMARY KEY",
    "FOREIGN KEY", "CONSTRAINT", "DEFAULT", "CASCADE",
    "DESC", "ASC",
]

# Keywords that start a new line
MAJOR_CLAUSE_KEYWORDS = [
    "SELECT",
    "FROM",
    "WHERE",
    "GROUP BY",
    "HAVING",
    "ORDER BY",
    "LIMIT",
]

JOIN_QUALIFIERS = [
    "INNER",
    "LEFT",
    "RIGHT",
    "OUTER",
]


def _alternation(keywords):
    return "|".join(re.escape(k) for k in keywords)


KEYWORD_REGEX = re.compile(rf"\b({_alternation(SQL_KEYWORDS)})\b", re.IGNORECASE)

MAJOR_CLAUSE_SPLIT_REGEX = re.compile(
    rf"\b({_alternation(MAJOR_CLAUSE_KEYWORDS)})\b", re.IGNORECASE
)

# Qualifier is optional: "LEFT JOIN" and "JOIN" both open a join clause
JOIN_SPLIT_REGEX = re.compile(
    rf"\b((?:(?:{_alternation(JOIN_QUALIFIERS)}) )?JOIN\b)", re.IGNORECASE
)

ON_REGEX = re.compile(r"\bON\b", re.IGNORECASE)
