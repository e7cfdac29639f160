# src/floatchat/utils/helpers.py
import numpy as np
import json
import math
from dataclasses import asdict, is_dataclass
from datetime import date, datetime
from decimal import Decimal, ROUND_HALF_UP
from enum import Enum
from typing import Any, Optional
import logging
from pathlib import Path

logger = logging.getLogger(__name__)

FILE_SIZE_UNITS = ['Bytes', 'KB', 'MB', 'GB']


def round_half_up(value: float, digits: int = 2) -> float:
    """Round the exact binary value of ``value``, ties away from zero"""
    quantum = Decimal(1).scaleb(-digits)
    return float(Decimal(value).quantize(quantum, rounding=ROUND_HALF_UP))


class ArgoHelpers:
    """Helper functions for float and profile handling"""

    @staticmethod
    def validate_coordinates(latitude: float, longitude: float) -> bool:
        """Check latitude/longitude lie on the globe"""
        try:
            lat = float(latitude)
            lon = float(longitude)
        except (TypeError, ValueError):
            return False
        if math.isnan(lat) or math.isnan(lon):
            return False
        return -90 <= lat <= 90 and -180 <= lon <= 180

    @staticmethod
    def parse_date_string(date_str: Optional[str]) -> Optional[datetime]:
        """Parse an ISO date or datetime string, None when malformed"""
        if not date_str:
            return None
        try:
            return datetime.fromisoformat(str(date_str).strip())
        except ValueError:
            return None

    @staticmethod
    def format_coordinates(latitude: float, longitude: float, precision: int = 4) -> str:
        return f"{latitude:.{precision}f}°, {longitude:.{precision}f}°"

    @staticmethod
    def format_hemisphere(latitude: float, longitude: float) -> str:
        """Format a position as 15.4°N, 73.8°E"""
        ns = 'N' if latitude >= 0 else 'S'
        ew = 'E' if longitude >= 0 else 'W'
        return f"{abs(latitude):.1f}°{ns}, {abs(longitude):.1f}°{ew}"


class FileHandler:
    """File handling utilities"""

    @staticmethod
    def format_file_size(size_bytes: int) -> str:
        """Human readable file size: 0 Bytes, 1 KB, 1.5 KB, 2.25 MB"""
        if size_bytes <= 0:
            return '0 Bytes'
        k = 1024
        i = min(int(math.floor(math.log(size_bytes) / math.log(k))), len(FILE_SIZE_UNITS) - 1)
        value = round_half_up(size_bytes / math.pow(k, i), 2)
        text = f"{value:.2f}".rstrip('0').rstrip('.')
        return f"{text} {FILE_SIZE_UNITS[i]}"

    @staticmethod
    def strip_extension(filename: str, extensions=('.nc', '.netcdf')) -> str:
        """Drop a matching extension (case-insensitive) from the end of a file name"""
        lowered = filename.lower()
        for extension in extensions:
            if lowered.endswith(extension):
                return filename[:-len(extension)]
        return filename

    @staticmethod
    def safe_json_serialize(data: Any) -> str:
        """Safely serialize data to JSON handling numpy types, dates and dataclasses"""
        def default_serializer(obj):
            if isinstance(obj, np.integer):
                return int(obj)
            elif isinstance(obj, np.floating):
                return float(obj)
            elif isinstance(obj, np.ndarray):
                return obj.tolist()
            elif isinstance(obj, (datetime, date)):
                return obj.isoformat()
            elif isinstance(obj, Enum):
                return obj.value
            elif isinstance(obj, (set, frozenset)):
                return sorted(obj)
            elif is_dataclass(obj) and not isinstance(obj, type):
                return asdict(obj)
            elif isinstance(obj, Path):
                return str(obj)
            raise TypeError(f"Object of type {type(obj)} is not JSON serializable")

        return json.dumps(data, default=default_serializer)
