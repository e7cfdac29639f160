# src/floatchat/data/profile_synthesizer.py
"""
Deterministic synthetic depth profiles.

A profile is derived from ``(float_id, date, max_depth)`` alone: the seed is
the sum of the character codes of ``"<float_id>-<date>"`` and every sample
draws its noise from ``frac(sin(seed + i * 31.7) * 10000)``. The same triple
always yields the same rows.
"""
import math
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Optional

import pandas as pd

from ..utils.helpers import round_half_up

logger = logging.getLogger(__name__)

MIN_MAX_DEPTH = 100
MIN_STEP = 5
TARGET_SAMPLES = 400

SURFACE_TEMPERATURE_BASE = 8.0
SURFACE_TEMPERATURE_EXCESS = 12.0
THERMOCLINE_SCALE = 200.0
TEMPERATURE_NOISE = 1.5

SALINITY_BASE = 35.0
SALINITY_INCREASE = 0.8
HALOCLINE_SCALE = 800.0
SALINITY_NOISE = 0.2

SALINITY_OFFSET = 7


@dataclass(frozen=True)
class ProfileRequest:
    """One synthesis request; build a new one whenever an input changes"""
    float_id: str
    date: str
    max_depth: int


@dataclass(frozen=True)
class ProfileRow:
    depth: int
    temperature: float
    salinity: float

    def to_dict(self) -> Dict[str, Any]:
        return {'depth': self.depth, 'temperature': self.temperature, 'salinity': self.salinity}


def _code_unit(ch: str) -> int:
    """First UTF-16 code unit of a character"""
    code = ord(ch)
    if code > 0xFFFF:
        return 0xD800 + ((code - 0x10000) >> 10)
    return code


def seed_for(float_id: str, date: str) -> int:
    """Integer seed from the float identifier and date"""
    return sum(_code_unit(ch) for ch in f"{float_id}-{date}")


def pseudo_random(seed: int, i: float) -> float:
    """Pseudo-random value in [0, 1) for sample offset ``i``"""
    x = math.sin(seed + i * 31.7) * 10000
    return x - math.floor(x)


def depth_step(max_depth: int) -> int:
    """Metres between samples: roughly 400 rows, never finer than 5 m"""
    return max(MIN_STEP, math.floor(max_depth / TARGET_SAMPLES))


def clamp_max_depth(value: Any, minimum: int = MIN_MAX_DEPTH) -> int:
    """Coerce user input to a usable max depth; bad input becomes the minimum"""
    try:
        depth = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return minimum
    return max(minimum, depth)


def temperature_at(depth: int, noise: float) -> float:
    value = (SURFACE_TEMPERATURE_BASE
             + SURFACE_TEMPERATURE_EXCESS * math.exp(-depth / THERMOCLINE_SCALE)
             - noise * TEMPERATURE_NOISE)
    return max(0.0, value)


def salinity_at(depth: int, noise: float) -> float:
    return (SALINITY_BASE
            + SALINITY_INCREASE * (1 - math.exp(-depth / HALOCLINE_SCALE))
            + (noise - 0.5) * SALINITY_NOISE)


def generate_profile(request: ProfileRequest) -> List[ProfileRow]:
    """Synthesize the depth profile for a request.

    Rows run from depth 0 to ``request.max_depth`` inclusive in steps of
    :func:`depth_step`. Temperature noise uses offset ``d`` and salinity
    noise offset ``d + 7`` so the two streams differ at the same depth.
    """
    seed = seed_for(request.float_id, request.date)
    step = depth_step(request.max_depth)

    rows = []
    for depth in range(0, request.max_depth + 1, step):
        noise_t = pseudo_random(seed, depth)
        noise_s = pseudo_random(seed, depth + SALINITY_OFFSET)
        rows.append(ProfileRow(
            depth=depth,
            temperature=round_half_up(temperature_at(depth, noise_t), 2),
            salinity=round_half_up(salinity_at(depth, noise_s), 2)
        ))

    logger.debug(f"Synthesized {len(rows)} rows for float {request.float_id} on {request.date} "
                 f"(seed={seed}, step={step})")
    return rows


def synthesize_profile(float_id: str, date: str, max_depth: int) -> List[ProfileRow]:
    return generate_profile(ProfileRequest(float_id=float_id, date=date, max_depth=int(max_depth)))


def profile_to_dataframe(rows: List[ProfileRow]) -> pd.DataFrame:
    """Convert a profile series to a DataFrame, keeping row order"""
    return pd.DataFrame([row.to_dict() for row in rows], columns=['depth', 'temperature', 'salinity'])


def profile_summary(rows: List[ProfileRow]) -> Optional[Dict[str, Any]]:
    """Surface and bottom readings plus value ranges of a series"""
    if not rows:
        return None

    temperatures = [row.temperature for row in rows]
    salinities = [row.salinity for row in rows]
    return {
        'samples': len(rows),
        'step': rows[1].depth - rows[0].depth if len(rows) > 1 else None,
        'surface': rows[0].to_dict(),
        'bottom': rows[-1].to_dict(),
        'temperature_range': (min(temperatures), max(temperatures)),
        'salinity_range': (min(salinities), max(salinities))
    }
