from itertools import islice


def top_lines(text: str, count: int) -> str:
    """Return at most ``count`` leading lines of text, joined back with newlines."""
    if count <= 0:
        return ""
    return "\n".join(islice(text.split("\n"), count))
