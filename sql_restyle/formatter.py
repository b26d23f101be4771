import re
from typing import Any, List, Mapping, Optional, Union

from sql_restyle.keywords import (
    JOIN_SPLIT_REGEX,
    KEYWORD_REGEX,
    MAJOR_CLAUSE_SPLIT_REGEX,
    ON_REGEX,
)
from sql_restyle.options import FormatOptions, coerce_options


# ------------------ Stage 1: spacing ------------------
def normalize_spacing(sql: str, comma_position: str = "after", verbose: bool = False) -> str:
    """
    Flatten the SQL into one line and normalize spacing around operators,
    commas and parentheses.

    Args:
        sql (str): Raw SQL string.
        comma_position (str): "before" renders commas as " , ", anything else as ", ".
        verbose (bool): Print debug info.

    Returns:
        str: Single-line SQL with normalized punctuation spacing.
    """
    # Replace any run of whitespace with a single space
    flattened = re.sub(r"\s+", " ", sql).strip()

    # Space around comparison operators
    flattened = re.sub(r"([=<>!]+)", r" \1 ", flattened)

    comma = " , " if comma_position == "before" else ", "
    flattened = re.sub(r"\s*,\s*", comma, flattened)

    # No space around opening parenthesis, one space after closing
    flattened = re.sub(r"\s*\(\s*", "(", flattened)
    flattened = re.sub(r"\s*\)\s*", ") ", flattened)

    flattened = re.sub(r"\s+", " ", flattened)

    # Function calls: "count (" -> "count("
    flattened = re.sub(r"(\w+)\s*\(", r"\1(", flattened)

    if verbose:
        print(f"[DEBUG] Normalized spacing (comma_position={comma_position}): {flattened}")
    return flattened


# ------------------ Stage 2: keyword case ------------------
def apply_keyword_case(sql: str, keyword_case: Optional[str] = "upper", verbose: bool = False) -> str:
    """
    Re-case every whole-word keyword from SQL_KEYWORDS.

    "lower" lowercases, "preserve" leaves the SQL alone, and anything else
    (including None or an unknown value) uppercases.
    Matching is lexical, so identifiers spelled like a keyword are re-cased too.
    """
    if keyword_case == "preserve":
        if verbose:
            print("[DEBUG] Keyword case preserved.")
        return sql

    if keyword_case == "lower":
        cased = KEYWORD_REGEX.sub(lambda m: m.group(0).lower(), sql)
    else:
        cased = KEYWORD_REGEX.sub(lambda m: m.group(0).upper(), sql)

    if verbose:
        print(f"[DEBUG] Applied keyword case '{keyword_case or 'upper'}': {cased}")
    return cased


# ------------------ Stage 3: clause segmentation ------------------
def split_clauses(sql: str, verbose: bool = False) -> List[str]:
    """
    Split single-line SQL into one entry per major clause or JOIN unit.

    A major clause keyword (SELECT, FROM, WHERE, GROUP BY, HAVING, ORDER BY,
    LIMIT) always starts a new clause. Inside the text between those
    keywords, each JOIN (with an optional INNER/LEFT/RIGHT/OUTER qualifier)
    starts a new clause that also takes the joined table and its ON condition.
    Clauses come out in source order.

    Args:
        sql (str): Normalized, keyword-cased SQL.
        verbose (bool): Print debug info.

    Returns:
        List[str]: Stripped, non-empty clauses.
    """
    clauses = []
    current = ""

    def close_current():
        if current.strip():
            clauses.append(current.strip())
            if verbose:
                print(f"[DEBUG] Closed clause: {current.strip()}")

    # re.split with one capture group puts the matched keywords at odd indices
    for i, part in enumerate(MAJOR_CLAUSE_SPLIT_REGEX.split(sql)):
        if not part.strip():
            continue

        if i % 2 == 1:
            close_current()
            current = part
            continue

        for j, join_part in enumerate(JOIN_SPLIT_REGEX.split(part)):
            join_part = join_part.strip()
            if not join_part:
                continue

            if j % 2 == 1:
                close_current()
                current = join_part
            else:
                current += " " + join_part

    close_current()
    return clauses


# ------------------ Stage 4: assembly ------------------
def assemble_clauses(clauses: List[str], keyword_case: Optional[str] = "upper", verbose: bool = False) -> str:
    """
    Join clauses one per line. Inside JOIN clauses, ON is cased to match
    keyword_case ("on" for "lower", "ON" otherwise, even for "preserve").
    """
    on_keyword = "on" if keyword_case == "lower" else "ON"

    lines = []
    for clause in clauses:
        if not clause:
            continue
        if "JOIN" in clause.upper():
            clause = ON_REGEX.sub(on_keyword, clause)
            if verbose:
                print(f"[DEBUG] Cased ON in join clause: {clause}")
        lines.append(clause)

    return "\n".join(lines)


# ------------------ Entry point ------------------
def format_sql(
    raw_sql: str,
    options: Union[None, FormatOptions, Mapping[str, Any]] = None,
    verbose: bool = False,
) -> str:
    """
    Format a SQL string: one clause per line, keyword casing, and
    operator/comma/parenthesis spacing.

    Never raises for string input; malformed SQL is transformed mechanically.

    Args:
        raw_sql (str): SQL text, possibly multi-line or malformed.
        options: FormatOptions, a host option mapping (keywordCase, ...), or None for defaults.
        verbose (bool): Print debug info for each stage.

    Returns:
        str: Newline-separated clauses, no trailing newline.
    """
    opts = coerce_options(options)

    sql = normalize_spacing(raw_sql, opts.comma_position, verbose=verbose)
    sql = apply_keyword_case(sql, opts.keyword_case, verbose=verbose)
    clauses = split_clauses(sql, verbose=verbose)
    return assemble_clauses(clauses, opts.keyword_case, verbose=verbose)


# Host-facing name for the single formatting operation
format = format_sql
