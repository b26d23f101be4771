from itertools import zip_longest
from typing import Dict, List, Optional, Tuple

import sqlfluff
import sqlparse
from sqlparse import tokens as T


# Capitalisation and spacing
LINT_RULES = ["CP01", "LT01"]


# ------------------ Token comparison (sqlparse) ------------------
def _significant_tokens(sql: str) -> List[str]:
    values = []
    for statement in sqlparse.parse(sql):
        for token in statement.flatten():
            if token.is_whitespace:
                continue
            # Literal text must survive exactly; everything else may be re-cased
            if token.ttype in T.String:
                values.append(token.value)
            else:
                values.append(token.value.upper())
    return values


def compare_token_streams(original: str, formatted: str) -> List[Tuple[int, str, str]]:
    """
    Compare the non-whitespace tokens of the original and formatted SQL.

    Args:
        original (str): SQL before formatting.
        formatted (str): SQL after formatting.

    Returns:
        List[Tuple[int, str, str]]: (token index, original value, formatted value)
        for each mismatch. A token missing on one side is reported as "".
    """
    mismatches = []
    pairs = zip_longest(_significant_tokens(original), _significant_tokens(formatted), fillvalue="")
    for idx, (before, after) in enumerate(pairs):
        if before != after:
            mismatches.append((idx, before, after))
    return mismatches


# ------------------ Lint (sqlfluff) ------------------
def lint_formatted_sql(sql: str, dialect: str = "ansi", rules: Optional[List[str]] = None) -> List[Dict]:
    """
    Lint formatted SQL with sqlfluff.

    Returns:
        List[dict]: One dict per violation with line_no, code and description.
    """
    # sqlfluff expects files to end with a newline
    if not sql.endswith("\n"):
        sql += "\n"

    violations = sqlfluff.lint(sql, dialect=dialect, rules=rules or LINT_RULES)

    results = []
    for v in violations:
        results.append({
            "line_no": v.get("start_line_no", v.get("line_no")),
            "code": v.get("code"),
            "description": v.get("description"),
        })
    return results
