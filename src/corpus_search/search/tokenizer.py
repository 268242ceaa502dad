"""Whitespace query tokenizer."""


def tokenize(query: str | None) -> list[str]:
    """Lowercase ``query`` and split it on runs of whitespace.

    Empty and whitespace-only queries yield ``[]``, which the scorer treats as
    "match everything".
    """
    if not query:
        return []
    return [term.strip() for term in query.lower().split() if term.strip()]
