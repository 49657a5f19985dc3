"""
identifier normalization - pure text, no I/O.

canonical work id form is the OpenAlex URL:
    W2741809807                          -> https://openalex.org/W2741809807
    https://openalex.org/w2741809807     -> https://openalex.org/W2741809807
    api.openalex.org/works/W2741809807   -> https://openalex.org/W2741809807
"""

import re
from typing import Optional, Iterable, List

OPENALEX_PREFIX = "https://openalex.org/"
DOI_PREFIX = "https://doi.org/"

WORK_ID_PATTERN = re.compile(r'(?:openalex\.org/|works/)?(W\d{4,})', re.IGNORECASE)
DOI_URL_PATTERN = re.compile(r'doi\.org/(10\.[^\s?#]+)', re.IGNORECASE)
DOI_PATTERN = re.compile(r'^(10\.[^\s?#]+)$', re.IGNORECASE)


def normalize_work_id(raw) -> Optional[str]:
    """canonical openalex work url, or None if no id is present."""
    if not raw or not isinstance(raw, str):
        return None

    match = WORK_ID_PATTERN.search(raw.strip())
    if not match:
        return None

    return f"{OPENALEX_PREFIX}{match.group(1).upper()}"


def normalize_doi(raw) -> Optional[str]:
    """canonical doi url (lower-cased), or None."""
    if not raw or not isinstance(raw, str):
        return None

    trimmed = raw.strip()
    match = DOI_URL_PATTERN.search(trimmed) or DOI_PATTERN.match(trimmed)
    if not match:
        return None

    return f"{DOI_PREFIX}{match.group(1).lower()}"


def short_work_id(work_id: str) -> str:
    """W-form key used in provider filters."""
    return work_id.rstrip("/").rsplit("/", 1)[-1]


# generic entry point used by the graph builder
normalize = normalize_work_id


def unique_work_ids(raw_ids: Iterable) -> List[str]:
    """normalize ids, drop unparseable ones and duplicates, keep order."""
    seen = set()
    ordered = []
    for raw in raw_ids:
        work_id = normalize_work_id(raw)
        if work_id and work_id not in seen:
            seen.add(work_id)
            ordered.append(work_id)
    return ordered
