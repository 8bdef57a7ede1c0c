"""Translation core models.

Defines the load bookkeeping types and the key/lookup result structures.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Optional, Tuple


class LoadState(str, Enum):
    """Lifecycle of a (language, namespace) pair in the connector."""

    UNREQUESTED = "unrequested"
    PENDING = "pending"
    LOADED = "loaded"
    FAILED = "failed"


@dataclass
class LoadRecord:
    """Load bookkeeping for one (language, namespace) pair.

    Attributes:
        language: Language tag of the bundle.
        namespace: Namespace of the bundle.
        state: Current LoadState.
        attempts: Backend attempts made by the latest fetch.
        last_error: Last error message, if any.
        source: Where the bundle came from ("store", "cache" or "backend").
    """

    language: str
    namespace: str
    state: LoadState = LoadState.UNREQUESTED
    attempts: int = 0
    last_error: Optional[str] = None
    source: Optional[str] = None


@dataclass(frozen=True)
class ParsedKey:
    """A key split into its namespace list and in-namespace key.

    Attributes:
        key: Key without the namespace prefix.
        namespaces: Namespaces to search, in priority order.
    """

    key: str
    namespaces: Tuple[str, ...]


@dataclass
class ResolvedValue:
    """Outcome of a successful store lookup.

    Attributes:
        value: The leaf or subtree found.
        key: Base key that was requested.
        used_key: Concrete key (with suffixes) that matched.
        language: Language the value came from.
        namespace: Namespace the value came from.
    """

    value: Any
    key: str
    used_key: str
    language: str
    namespace: str
