"""Rule definitions for archsentinel"""

from rules.config import (
    CONFIG_FILENAME,
    ArchConfig,
    ConfigError,
    Rule,
    load_config,
    load_rules,
    parse_config,
)
from rules.engine import RuleMatch, applicable_rules, match_edge, violates

__all__ = [
    "CONFIG_FILENAME",
    "ArchConfig",
    "ConfigError",
    "Rule",
    "RuleMatch",
    "applicable_rules",
    "load_config",
    "load_rules",
    "match_edge",
    "parse_config",
    "violates",
]
