import hashlib
from urllib.parse import urlsplit


def canonicalize_url(url: str) -> str:
    """Dedup key for a link: scheme, host and path lowercased; query and fragment dropped."""
    if not url:
        return ""

    candidate = url.strip()
    try:
        parsed = urlsplit(candidate)
    except ValueError:
        return candidate.lower()

    if not parsed.scheme or not parsed.netloc:
        return candidate.lower()

    return f"{parsed.scheme}://{parsed.netloc}{parsed.path}".lower()


def article_id(url: str) -> str:
    """SHA-256 hex digest of the canonical URL."""
    return hashlib.sha256(canonicalize_url(url).encode("utf-8")).hexdigest()
