# src/floatchat/data/fixtures.py
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from typing import List, Dict, Any, Tuple

import pandas as pd

from ..exceptions import UnknownFloatError

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FloatRecord:
    """A sample float shown on the map and dashboard"""
    float_id: str
    name: str
    region: str
    latitude: float
    longitude: float
    status: str
    last_profile: str
    max_depth_m: int
    temperature: float
    salinity: float
    trajectory: Tuple[Tuple[float, float], ...] = field(default_factory=tuple)

    @property
    def is_active(self) -> bool:
        return self.status == 'active'

    def to_dict(self) -> Dict[str, Any]:
        record = asdict(self)
        record['trajectory'] = [list(point) for point in self.trajectory]
        return record


class FloatFixtureProvider(ABC):
    """Source of float records; swap in a real data source by subclassing"""

    @abstractmethod
    def list_floats(self) -> List[FloatRecord]:
        ...

    def get_float(self, float_id: str) -> FloatRecord:
        for record in self.list_floats():
            if record.float_id == str(float_id):
                return record
        raise UnknownFloatError(float_id)


_SAMPLE_FLOATS = (
    FloatRecord(
        float_id='2902345', name='Arabian Sea North', region='Arabian Sea',
        latitude=15.1, longitude=73.5, status='active', last_profile='2024-01-14',
        max_depth_m=2000, temperature=27.8, salinity=36.1,
        trajectory=((13.2, 70.4), (13.9, 71.2), (14.4, 72.1), (14.8, 72.9), (15.1, 73.5))
    ),
    FloatRecord(
        float_id='2902346', name='Konkan Coast', region='Arabian Sea',
        latitude=15.7, longitude=74.1, status='active', last_profile='2024-01-13',
        max_depth_m=1800, temperature=27.2, salinity=35.9,
        trajectory=((16.9, 71.8), (16.5, 72.6), (16.2, 73.3), (15.7, 74.1))
    ),
    FloatRecord(
        float_id='4902345', name='Pacific Sentinel', region='Pacific Ocean',
        latitude=-8.4, longitude=-145.2, status='active', last_profile='2024-01-15',
        max_depth_m=2000, temperature=26.4, salinity=35.4,
        trajectory=((-6.9, -148.0), (-7.5, -147.1), (-8.0, -146.0), (-8.4, -145.2))
    ),
    FloatRecord(
        float_id='4902346', name='Atlantic Drifter', region='Atlantic Ocean',
        latitude=24.6, longitude=-38.7, status='active', last_profile='2024-01-15',
        max_depth_m=1500, temperature=22.9, salinity=37.1,
        trajectory=((23.1, -41.2), (23.6, -40.5), (24.2, -39.6), (24.6, -38.7))
    ),
    FloatRecord(
        float_id='4902347', name='Central Indian', region='Indian Ocean',
        latitude=-12.3, longitude=80.6, status='processing', last_profile='2024-01-15',
        max_depth_m=1800, temperature=28.1, salinity=34.6,
        trajectory=((-10.8, 78.2), (-11.4, 79.0), (-11.9, 79.9), (-12.3, 80.6))
    ),
    FloatRecord(
        float_id='4902348', name='Southern Ocean Explorer', region='Southern Ocean',
        latitude=-52.1, longitude=75.3, status='active', last_profile='2024-01-15',
        max_depth_m=2200, temperature=3.8, salinity=33.9,
        trajectory=((-50.2, 71.0), (-50.9, 72.6), (-51.6, 74.1), (-52.1, 75.3))
    ),
    FloatRecord(
        float_id='2902401', name='Bay of Bengal', region='Bay of Bengal',
        latitude=14.2, longitude=87.9, status='active', last_profile='2024-01-12',
        max_depth_m=2000, temperature=28.6, salinity=33.2,
        trajectory=((12.8, 86.1), (13.4, 86.8), (13.9, 87.4), (14.2, 87.9))
    ),
    FloatRecord(
        float_id='2902402', name='Mascarene Plateau', region='Indian Ocean',
        latitude=-27.6, longitude=78.8, status='inactive', last_profile='2023-11-02',
        max_depth_m=2000, temperature=21.3, salinity=35.3,
        trajectory=((-25.9, 76.4), (-26.5, 77.2), (-27.1, 78.1), (-27.6, 78.8))
    ),
)


class SampleFloatProvider(FloatFixtureProvider):
    """Hardcoded sample floats"""

    def list_floats(self) -> List[FloatRecord]:
        return list(_SAMPLE_FLOATS)


def floats_dataframe(provider: FloatFixtureProvider) -> pd.DataFrame:
    """Float table without trajectories, in provider order"""
    columns = ['float_id', 'name', 'region', 'latitude', 'longitude', 'status',
               'last_profile', 'max_depth_m', 'temperature', 'salinity']
    records = [{column: getattr(record, column) for column in columns}
               for record in provider.list_floats()]
    return pd.DataFrame(records, columns=columns)


def dashboard_metrics() -> List[Dict[str, str]]:
    return [
        {'title': 'Active Floats', 'value': '3847', 'change': '+12% from last month'},
        {'title': 'Profiles Today', 'value': '1,234', 'change': '+5% from yesterday'},
        {'title': 'Avg Temperature', 'value': '15.2°C', 'change': 'Global ocean average'},
        {'title': 'Data Quality', 'value': '98.7%', 'change': 'Quality controlled data'},
    ]


def recent_profiles() -> List[Dict[str, str]]:
    return [
        {'id': '4902345', 'location': 'Pacific Ocean', 'time': '2 hours ago', 'depth': '2000m', 'status': 'active'},
        {'id': '4902346', 'location': 'Atlantic Ocean', 'time': '4 hours ago', 'depth': '1500m', 'status': 'active'},
        {'id': '4902347', 'location': 'Indian Ocean', 'time': '6 hours ago', 'depth': '1800m', 'status': 'processing'},
        {'id': '4902348', 'location': 'Southern Ocean', 'time': '8 hours ago', 'depth': '2200m', 'status': 'active'},
    ]


def integration_status() -> List[Dict[str, Any]]:
    return [
        {'name': 'Leafly Dashboard', 'status': 'Ready for Integration', 'connectable': True},
        {'name': 'OpenStreetMap', 'status': 'Ready for Integration', 'connectable': True},
        {'name': 'ARGO Data API', 'status': 'Connected', 'connectable': False},
        {'name': 'Vector Database', 'status': 'Active', 'connectable': False},
    ]


def map_statistics() -> Dict[str, str]:
    return {
        'Active Floats': '3,847',
        'Recent Profiles': '42',
        'Data Quality': '98.7%',
        'Coverage Area': 'Indian Ocean',
    }


def metric_numeric_value(value: str) -> int:
    """Digits of a metric label as an integer, 0 when there are none"""
    digits = ''.join(ch for ch in value if ch.isdigit())
    return int(digits) if digits else 0
