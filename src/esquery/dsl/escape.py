# Characters the query_string parser treats as operators, see
# https://www.elastic.co/guide/en/elasticsearch/reference/current/query-dsl-query-string-query.html#_reserved_characters
# Backslash must come first, so the escapes inserted for later tokens are left alone.
RESERVED = (
    "\\",
    "+",
    "=",
    "&&",
    "||",
    "!",
    "(",
    ")",
    "{",
    "}",
    "[",
    "]",
    "^",
    '"',
    "~",
    "*",
    "?",
    ":",
    "/",
)


def sanitize(text: str) -> str:
    """Backslash-escape reserved query_string tokens in free text.

    `&&` and `||` are escaped as whole tokens. Already escaped text is escaped
    again, so only pass raw user input.
    """
    sanitized = text
    for token in RESERVED:
        if token in sanitized:
            sanitized = sanitized.replace(token, "\\" + token)
    return sanitized
