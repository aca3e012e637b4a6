"""
RECORD ID GENERATOR

Purpose:
- Generate unique ids for nurses, duties and requests
- Keep the short format of the browser roster: <prefix>_<7 base36 chars>

Format:
nurse_k3j9x0a, duty_0p2lm4q, req_z81ty6c

Notes:
- Collision detection via an in-memory set (per process)
- Ids already present in a loaded state are registered with `reserve_ids`
"""

import random
import string
from typing import Iterable, Set

_ALPHABET = string.digits + string.ascii_lowercase
_SUFFIX_LENGTH = 7

# In-memory collision tracker (survives during app lifecycle)
_GENERATED_IDS: Set[str] = set()


def generate_id(prefix: str) -> str:
    """
    Generate a unique record id.

    Examples:
        >>> generate_id("nurse").startswith("nurse_")
        True
        >>> len(generate_id("req"))
        11
    """
    max_retries = 10000

    for _ in range(max_retries):
        suffix = "".join(random.choices(_ALPHABET, k=_SUFFIX_LENGTH))
        record_id = f"{prefix}_{suffix}"

        if record_id not in _GENERATED_IDS:
            _GENERATED_IDS.add(record_id)
            return record_id

    raise RuntimeError(
        f"Failed to generate unique '{prefix}' id after {max_retries} attempts."
    )


def reserve_ids(ids: Iterable[str]) -> None:
    """Mark existing ids as taken so new ids never collide with them."""
    _GENERATED_IDS.update(ids)


def clear_id_cache() -> None:
    """
    Clear the in-memory id cache.

    WARNING: Only use in testing or system reset.
    """
    _GENERATED_IDS.clear()
