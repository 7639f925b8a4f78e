"""
Scenario envelope — {"version": 1, "params": {...}} as JSON or base64(JSON).

Encoding:
  encode_scenario(params)                   compact JSON text
  encode_scenario(params, binary_safe=True) base64 of the same JSON (share links)

Decoding never fails. Anything unusable (bad text, non-integer version,
unsupported version, missing params) gives back the generated defaults.
"""

from __future__ import annotations

import base64
import binascii
import json
import logging
from datetime import datetime
from typing import Any, Dict, Mapping, Optional, Tuple, Union
from urllib.parse import parse_qs, urlencode

from core.params import ScenarioParams
from core.schema import ENVELOPE_VERSION, SCENARIO_QUERY_KEY
from scenarios.defaults import generate_default_params

from .merge import merge_overrides
from .validators import DecodeReport

logger = logging.getLogger(__name__)

RawEnvelope = Union[str, bytes, Mapping[str, Any]]


def build_envelope(params: ScenarioParams) -> Dict[str, Any]:
    return {"version": ENVELOPE_VERSION, "params": params.to_payload()}


def encode_scenario(params: ScenarioParams, *, binary_safe: bool = False) -> str:
    text = json.dumps(build_envelope(params), separators=(",", ":"))
    if not binary_safe:
        return text
    return base64.b64encode(text.encode("utf-8")).decode("ascii")


def share_query(params: ScenarioParams) -> str:
    """Query string carrying the scenario, e.g. ``scenario=eyJ2ZXJzaW9u...``."""
    return urlencode({SCENARIO_QUERY_KEY: encode_scenario(params, binary_safe=True)})


def _b64_decode(val: str) -> bytes:
    # Standard or URL-safe alphabet, padding optional. A "+" that went through
    # form decoding comes back as a space.
    s = "".join(val.strip().replace(" ", "+").split())
    s = s.replace("-", "+").replace("_", "/")
    padded = s + "=" * (-len(s) % 4)
    return base64.b64decode(padded.encode("ascii"), validate=True)


def parse_envelope(raw: RawEnvelope) -> Optional[Mapping[str, Any]]:
    """JSON first, then base64-wrapped JSON. Returns the object or None."""
    if isinstance(raw, Mapping):
        return raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError:
            return None
    if not isinstance(raw, str) or not raw.strip():
        return None

    # Deeply nested input makes json.loads raise RecursionError.
    try:
        candidate = json.loads(raw)
    except (ValueError, RecursionError):
        try:
            candidate = json.loads(_b64_decode(raw).decode("utf-8"))
        except (ValueError, RecursionError, binascii.Error):
            return None
    return candidate if isinstance(candidate, Mapping) else None


def _envelope_version(envelope: Mapping[str, Any]) -> Optional[int]:
    version = envelope.get("version")
    if isinstance(version, bool):
        return None
    if isinstance(version, int):
        return version
    if isinstance(version, float) and version.is_integer():
        return int(version)
    return None


def decode_scenario_report(
    raw: Optional[RawEnvelope],
    *,
    base: Optional[ScenarioParams] = None,
    now: Optional[datetime] = None,
) -> Tuple[ScenarioParams, DecodeReport]:
    """
    Decode an envelope onto ``base`` (generated defaults when not given).

    Returns
    -------
    (params, report) — params is always structurally valid.
    """
    if base is None:
        base = generate_default_params(now)
    report = DecodeReport()

    envelope = parse_envelope(raw) if raw is not None else None
    if envelope is None:
        logger.debug("Scenario envelope unreadable; using defaults.")
        report.used_defaults = True
        return base, report

    version = _envelope_version(envelope)
    if version is None:
        logger.debug("Scenario envelope has no integer version; using defaults.")
        report.used_defaults = True
        return base, report
    if version != ENVELOPE_VERSION:
        logger.warning("Unsupported scenario payload version: %s", version)
        report.warnings.append(f"Unsupported scenario payload version: {version}")
        report.used_defaults = True
        return base, report

    params = envelope.get("params")
    if not isinstance(params, Mapping):
        logger.debug("Scenario envelope has no params object; using defaults.")
        report.used_defaults = True
        return base, report

    return merge_overrides(base, params, report), report


def decode_scenario(
    raw: Optional[RawEnvelope],
    *,
    base: Optional[ScenarioParams] = None,
    now: Optional[datetime] = None,
) -> ScenarioParams:
    params, _report = decode_scenario_report(raw, base=base, now=now)
    return params


def params_from_query(
    query: Union[str, Mapping[str, Any], None],
    *,
    base: Optional[ScenarioParams] = None,
    now: Optional[datetime] = None,
) -> ScenarioParams:
    """
    Read the ``scenario`` parameter from a query string (or parsed mapping)
    and decode it; defaults when the parameter is missing.
    """
    if isinstance(query, str):
        values = parse_qs(query.lstrip("?"))
        raw = values.get(SCENARIO_QUERY_KEY, [None])[0]
    elif isinstance(query, Mapping):
        raw = query.get(SCENARIO_QUERY_KEY)
        if isinstance(raw, (list, tuple)):
            raw = raw[0] if raw else None
    else:
        raw = None
    return decode_scenario(raw, base=base, now=now)
