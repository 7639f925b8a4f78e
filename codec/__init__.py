"""
Scenario codec — envelope encoding, payload validation, and legacy migration.
"""

from .envelope import (
    build_envelope,
    decode_scenario,
    decode_scenario_report,
    encode_scenario,
    params_from_query,
    parse_envelope,
    share_query,
)
from .merge import canonical_names, merge_overrides
from .migrations import MIGRATION_RULES, MigrationRule, resolve_collections
from .validators import DecodeReport, ValidationResult, validate_params

# Short names used by collaborators: encode(params) / decode(envelope)
encode = encode_scenario
decode = decode_scenario

__all__ = [
    "build_envelope",
    "decode",
    "decode_scenario",
    "decode_scenario_report",
    "encode",
    "encode_scenario",
    "params_from_query",
    "parse_envelope",
    "share_query",
    "canonical_names",
    "merge_overrides",
    "MIGRATION_RULES",
    "MigrationRule",
    "resolve_collections",
    "DecodeReport",
    "ValidationResult",
    "validate_params",
]
