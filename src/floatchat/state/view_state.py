# src/floatchat/state/view_state.py
"""View state owned by each dashboard page.

Every page keeps exactly one of these structs in ``st.session_state`` and
passes it down to the render helpers; nothing is shared between pages.
"""
import logging
from abc import ABC, abstractmethod
from dataclasses import dataclass, field, asdict
from datetime import date
from typing import Any, Dict, List, Optional, Tuple

from ..analysis.netcdf_analysis import NetCDFAnalysisSession
from ..config import config
from ..data.fixtures import dashboard_metrics, integration_status, recent_profiles
from ..data.profile_synthesizer import ProfileRequest, ProfileRow, clamp_max_depth, generate_profile
from ..nlp.chat_responder import ChatSession
from ..utils.helpers import ArgoHelpers, FileHandler

logger = logging.getLogger(__name__)

METRICS = ('temperature', 'salinity')


def _today() -> str:
    return date.today().isoformat()


class ViewState(ABC):
    @abstractmethod
    def to_dict(self) -> Dict[str, Any]:
        ...

    def to_json(self) -> str:
        return FileHandler.safe_json_serialize(self.to_dict())


@dataclass
class ProfileViewState(ViewState):
    float_id: str
    date: str = field(default_factory=_today)
    max_depth: int = field(default_factory=lambda: int(config.get('profile.default_max_depth', 2000)))
    metric: str = field(default_factory=lambda: config.get('profile.default_metric', 'temperature'))
    rows: List[ProfileRow] = field(default_factory=list)

    def __post_init__(self):
        self._check_metric(self.metric)
        self.max_depth = clamp_max_depth(self.max_depth, config.get('profile.min_max_depth', 100))

    @staticmethod
    def _check_metric(metric: str):
        if metric not in METRICS:
            raise ValueError(f"Unknown metric: {metric}")

    def request(self) -> ProfileRequest:
        return ProfileRequest(float_id=self.float_id, date=self.date, max_depth=self.max_depth)

    def apply(self) -> List[ProfileRow]:
        """Regenerate the displayed series from the current inputs"""
        self.rows = generate_profile(self.request())
        return self.rows

    def update(self, float_id: Optional[str] = None, date: Optional[str] = None,
               max_depth: Any = None, metric: Optional[str] = None) -> List[ProfileRow]:
        if metric is not None:
            self._check_metric(metric)
            self.metric = metric
        if float_id is not None:
            self.float_id = float_id
        if date is not None:
            self.date = date
        if max_depth is not None:
            self.max_depth = clamp_max_depth(max_depth, config.get('profile.min_max_depth', 100))
        return self.apply()

    def to_dict(self) -> Dict[str, Any]:
        return {
            'float_id': self.float_id,
            'date': self.date,
            'max_depth': self.max_depth,
            'metric': self.metric,
            'rows': [row.to_dict() for row in self.rows],
        }


@dataclass
class ChatViewState(ViewState):
    session: ChatSession = field(default_factory=ChatSession)
    input_value: str = ''

    def choose_sample(self, query: str):
        self.input_value = query

    def submit(self):
        reply = self.session.send(self.input_value)
        if reply is not None:
            self.input_value = ''
        return reply

    def to_dict(self) -> Dict[str, Any]:
        state = self.session.to_dict()
        state['input_value'] = self.input_value
        return state


@dataclass
class MapBounds:
    north: float
    south: float
    east: float
    west: float


def _default_center() -> Tuple[float, float]:
    lat, lon = config.get('map.center', [-27.6057, 78.8352])
    return (float(lat), float(lon))


@dataclass
class MapViewState(ViewState):
    center: Tuple[float, float] = field(default_factory=_default_center)
    zoom: int = field(default_factory=lambda: int(config.get('map.zoom', 3)))
    bounds: Optional[MapBounds] = None
    clicked: Optional[Tuple[float, float]] = None

    def update_view(self, center: Tuple[float, float], zoom: int, bounds: Optional[MapBounds] = None):
        lat, lon = center
        if not ArgoHelpers.validate_coordinates(lat, lon):
            raise ValueError(f"Invalid map center: {center}")
        self.center = (float(lat), float(lon))
        self.zoom = int(zoom)
        self.bounds = bounds

    def click(self, latitude: float, longitude: float) -> Tuple[float, float]:
        if not ArgoHelpers.validate_coordinates(latitude, longitude):
            raise ValueError(f"Invalid coordinates: {latitude}, {longitude}")
        self.clicked = (float(latitude), float(longitude))
        logger.debug(f"Map clicked at {self.clicked}")
        return self.clicked

    def to_dict(self) -> Dict[str, Any]:
        return {
            'center': list(self.center),
            'zoom': self.zoom,
            'bounds': asdict(self.bounds) if self.bounds else None,
            'clicked': list(self.clicked) if self.clicked else None,
        }


@dataclass
class DashboardViewState(ViewState):
    metrics: List[Dict[str, str]] = field(default_factory=dashboard_metrics)
    recent: List[Dict[str, str]] = field(default_factory=recent_profiles)
    integrations: List[Dict[str, Any]] = field(default_factory=integration_status)

    def to_dict(self) -> Dict[str, Any]:
        return {'metrics': self.metrics, 'recent': self.recent, 'integrations': self.integrations}


@dataclass
class AnalysisViewState(ViewState):
    session: NetCDFAnalysisSession = field(default_factory=NetCDFAnalysisSession)

    def to_dict(self) -> Dict[str, Any]:
        return self.session.to_dict()
