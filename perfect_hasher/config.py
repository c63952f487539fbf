"""
Table configuration.

TableConfig bundles everything needed to build a table; load_config()
fills it from environment variables, falling back to defaults.

Recognized variables:
    PERFECT_HASHER_WIDTH          (u8|u16|u32|u64|word)
    PERFECT_HASHER_HASH_TYPE      (murmur3|sha1|sha256|blake2b|constant)
    PERFECT_HASHER_SEED           (integer)
    PERFECT_HASHER_CAPACITY       (integer, optional)
    PERFECT_HASHER_ACCUMULATE_STATE   ("true" / "false" / "1" / "0")
    PERFECT_HASHER_DETECT_CYCLES  ("true" / "false" / "1" / "0")
    PERFECT_HASHER_ENABLE_LOGGING ("true" / "false" / "1" / "0")
"""

from __future__ import annotations
from dataclasses import dataclass
from typing import Mapping, Optional
import logging
import os

from .hashing import HashType
from .widths import DEFAULT_WIDTH, IdentifierWidth


@dataclass(frozen=True)
class TableConfig:
    """
    Settings for IdentifierTable / AssociativeIdentifierTable.

    Attributes:
        width: Identifier width; must comfortably exceed expected cardinality
        hash_type: Hash algorithm for the table's hasher
        seed: Hasher seed
        capacity: Expected number of entries (hint only)
        accumulate_state: Keep hasher state across content values (legacy)
        detect_cycles: Raise ProbeCycleError instead of probing forever
        enable_logging: Configure INFO logging when the table is built
    """
    width: IdentifierWidth = DEFAULT_WIDTH
    hash_type: HashType = HashType.MURMUR3
    seed: int = 42
    capacity: Optional[int] = None
    accumulate_state: bool = False
    detect_cycles: bool = True
    enable_logging: bool = False

    def apply_logging(self) -> None:
        if self.enable_logging and not logging.getLogger().handlers:
            logging.basicConfig(level=logging.INFO)


def _env_flag(env: Mapping[str, str], name: str, default: bool) -> bool:
    val = env.get(name)
    if val is None:
        return default
    return val.strip().lower() in ("1", "true", "yes", "on")


def _env_int(env: Mapping[str, str], name: str) -> Optional[int]:
    val = env.get(name)
    if val is None or not val.strip():
        return None
    try:
        return int(val, 0)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {val!r}") from None


def load_config(env: Optional[Mapping[str, str]] = None) -> TableConfig:
    """
    Load TableConfig from environment variables (or `env`), falling back
    to defaults.
    """
    env = os.environ if env is None else env

    hash_name = env.get("PERFECT_HASHER_HASH_TYPE", HashType.MURMUR3.value)
    try:
        hash_type = HashType(hash_name.strip().lower())
    except ValueError:
        raise ValueError(f"Unsupported hash type: {hash_name!r}") from None

    seed = _env_int(env, "PERFECT_HASHER_SEED")

    return TableConfig(
        width=IdentifierWidth.from_name(env.get("PERFECT_HASHER_WIDTH", DEFAULT_WIDTH.value)),
        hash_type=hash_type,
        seed=42 if seed is None else seed,
        capacity=_env_int(env, "PERFECT_HASHER_CAPACITY"),
        accumulate_state=_env_flag(env, "PERFECT_HASHER_ACCUMULATE_STATE", default=False),
        detect_cycles=_env_flag(env, "PERFECT_HASHER_DETECT_CYCLES", default=True),
        enable_logging=_env_flag(env, "PERFECT_HASHER_ENABLE_LOGGING", default=False),
    )


__all__ = [
    'TableConfig',
    'load_config',
]
