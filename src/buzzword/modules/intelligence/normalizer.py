import re

# ASCII word boundaries: Japanese text runs straight into links and tags
RE_LINK = re.compile(r"\b\w+://\S+\b", re.ASCII)
RE_TAG = re.compile(r"(\B#\S+|\bnostr:\S+)", re.ASCII)


def normalize(text: str) -> str:
    """Strip links and hashtag / ``nostr:`` references, then trim."""
    text = RE_LINK.sub("", text)
    text = RE_TAG.sub("", text)
    return text.strip()
