# tests/test_helpers.py

import json
import numpy as np
import pytest
from datetime import date, datetime
from pathlib import Path
import sys

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.data.profile_synthesizer import ProfileRow
from floatchat.nlp.chat_responder import ResponseKind
from floatchat.utils.helpers import ArgoHelpers, FileHandler, round_half_up


class TestRounding:
    """Test cases for half-up rounding"""

    def test_exact_ties_round_up(self):
        assert round_half_up(0.125) == 0.13
        assert round_half_up(-0.125) == -0.13
        assert round_half_up(19.5) == 19.5

    def test_binary_value_is_used(self):
        """2.675 is stored just below the tie"""
        assert round_half_up(2.675) == 2.67

    def test_digits(self):
        assert round_half_up(1.25, 1) == 1.3
        assert round_half_up(1.5, 0) == 2.0


class TestArgoHelpers:
    """Test cases for coordinate and date helpers"""

    def test_validate_coordinates(self):
        assert ArgoHelpers.validate_coordinates(0, 0)
        assert ArgoHelpers.validate_coordinates(-90, 180)
        assert not ArgoHelpers.validate_coordinates(90.1, 0)
        assert not ArgoHelpers.validate_coordinates(0, -180.5)
        assert not ArgoHelpers.validate_coordinates(None, 0)

    def test_parse_date_string(self):
        assert ArgoHelpers.parse_date_string('2024-01-15') == datetime(2024, 1, 15)
        assert ArgoHelpers.parse_date_string(' 2024-01-15T10:30:00 ') == datetime(2024, 1, 15, 10, 30)
        assert ArgoHelpers.parse_date_string('2024-13-01') is None
        assert ArgoHelpers.parse_date_string('') is None
        assert ArgoHelpers.parse_date_string(None) is None

    def test_format_coordinates(self):
        assert ArgoHelpers.format_coordinates(-27.6057, 78.8352) == '-27.6057°, 78.8352°'
        assert ArgoHelpers.format_coordinates(15.4, 73.8, precision=1) == '15.4°, 73.8°'

    def test_format_hemisphere(self):
        assert ArgoHelpers.format_hemisphere(15.4, 73.8) == '15.4°N, 73.8°E'
        assert ArgoHelpers.format_hemisphere(-8.4, -145.2) == '8.4°S, 145.2°W'


class TestFileHandler:
    """Test cases for file utilities"""

    @pytest.mark.parametrize("size,expected", [
        (0, '0 Bytes'), (500, '500 Bytes'), (1024, '1 KB'), (1536, '1.5 KB'),
        (1048576, '1 MB'), (2359296, '2.25 MB'), (1024 ** 3, '1 GB'), (1024 ** 4, '1024 GB'),
        (10 ** 6 * 1024 ** 3, '1000000 GB'), (5 * 10 ** 7 * 1024 ** 3 + 512 * 1024 ** 2, '50000000.5 GB')
    ])
    def test_format_file_size(self, size, expected):
        assert FileHandler.format_file_size(size) == expected

    def test_strip_extension(self):
        assert FileHandler.strip_extension('argo.nc') == 'argo'
        assert FileHandler.strip_extension('profile.netcdf') == 'profile'
        assert FileHandler.strip_extension('DATA.NC') == 'DATA'
        assert FileHandler.strip_extension('readme.txt') == 'readme.txt'
        assert FileHandler.strip_extension('my.nc.backup.nc') == 'my.nc.backup'

    def test_safe_json_serialize(self):
        payload = {
            'count': np.int64(3),
            'mean': np.float32(1.5),
            'values': np.array([1, 2]),
            'day': date(2024, 1, 15),
            'when': datetime(2024, 1, 15, 10, 30),
            'kind': ResponseKind.BGC,
            'flags': {'b', 'a'},
            'row': ProfileRow(depth=0, temperature=19.5, salinity=35.07),
            'path': Path('data/argo.nc'),
        }
        data = json.loads(FileHandler.safe_json_serialize(payload))
        assert data['count'] == 3
        assert data['mean'] == 1.5
        assert data['values'] == [1, 2]
        assert data['day'] == '2024-01-15'
        assert data['when'] == '2024-01-15T10:30:00'
        assert data['kind'] == 'bgc'
        assert data['flags'] == ['a', 'b']
        assert data['row'] == {'depth': 0, 'temperature': 19.5, 'salinity': 35.07}
        assert data['path'] == str(Path('data/argo.nc'))

    def test_safe_json_serialize_rejects_unknown(self):
        with pytest.raises(TypeError):
            FileHandler.safe_json_serialize({'obj': object()})


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
