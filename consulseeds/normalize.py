from typing import Iterable, List, Optional


def split_list(value: Optional[str], sep: str = ",") -> List[str]:
    """Split on sep, trim each part and drop empty parts."""
    if value is None:
        return []
    return [part.strip() for part in value.split(sep) if part.strip()]


def deduplicate(items: Iterable[str]) -> List[str]:
    """Deduplicate while preserving order."""
    seen = set()
    result = []
    for item in items:
        if item not in seen:
            seen.add(item)
            result.append(item)
    return result


def host_from_key(key: str) -> str:
    """Return the last '/'-delimited segment of a KV key."""
    return key.rstrip("/").split("/")[-1]


def tags_allowed(service_tags: Iterable[str], required_tags: Iterable[str]) -> bool:
    """True when every tag the service declares is among the required tags.

    An empty required set allows everything.
    """
    required = set(required_tags)
    if not required:
        return True
    return set(service_tags) <= required
