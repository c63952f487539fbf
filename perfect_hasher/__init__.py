"""
Perfect Hasher - content-addressed identifier allocation

Assigns compact fixed-width integer identifiers to content: equal content
always gets the same identifier, distinct content never shares one.
"""

__version__ = "0.1.0"

from .widths import IdentifierWidth
from .hashing import (
    ContentHasher,
    MurmurHasher,
    HashlibHasher,
    ConstantHasher,
    HashType,
    HashConfig,
    DEFAULT_HASH_CONFIG,
)
from .identifier import Identifier
from .table import IdentifierTable, Projection, ProbeCycleError
from .associative import (
    AssociativeIdentifierTable,
    Entry,
    merge_sum,
    merge_replace,
    merge_keep,
)
from .config import TableConfig, load_config

__all__ = [
    "IdentifierWidth",
    "ContentHasher",
    "MurmurHasher",
    "HashlibHasher",
    "ConstantHasher",
    "HashType",
    "HashConfig",
    "DEFAULT_HASH_CONFIG",
    "Identifier",
    "IdentifierTable",
    "Projection",
    "ProbeCycleError",
    "AssociativeIdentifierTable",
    "Entry",
    "merge_sum",
    "merge_replace",
    "merge_keep",
    "TableConfig",
    "load_config",
]
