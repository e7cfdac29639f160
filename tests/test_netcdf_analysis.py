# tests/test_netcdf_analysis.py

import pytest
from datetime import datetime
from pathlib import Path
import sys

# Add src to path
sys.path.append(str(Path(__file__).parent.parent / 'src'))

from floatchat.analysis.netcdf_analysis import (
    AnalysisStatus, NetCDFAnalysisSession, UploadedFile, accepts, fabricated_insights,
    render_report, report_filename
)
from floatchat.exceptions import AnalysisNotReadyError, UnknownResultError


class FixedRng:
    """Stand-in generator returning the same increment every draw"""

    def __init__(self, step):
        self.step = step

    def uniform(self, low, high):
        return min(self.step, high)


ANALYSIS_TIME = datetime(2024, 1, 15, 10, 30, 0)


def make_session(step=15.0):
    return NetCDFAnalysisSession(rng=FixedRng(step), clock=lambda: ANALYSIS_TIME, max_increment=15.0)


class TestFileAcceptance:
    """Test cases for upload filtering"""

    @pytest.mark.parametrize("name", ['argo.nc', 'ARGO.NC', 'profile.netcdf', 'a.b.nc'])
    def test_accepts_netcdf(self, name):
        assert accepts(name)

    @pytest.mark.parametrize("name", ['notes.txt', 'data.csv', 'nc', 'archive.nc.zip'])
    def test_rejects_other_files(self, name):
        assert not accepts(name)

    def test_report_filename(self):
        """Report name drops the NetCDF extension"""
        assert report_filename('argo.nc') == 'netcdf_analysis_argo.txt'
        assert report_filename('profile.netcdf') == 'netcdf_analysis_profile.txt'
        assert report_filename('SAMPLE.NC') == 'netcdf_analysis_SAMPLE.txt'

    def test_display_size(self):
        assert UploadedFile(name='a.nc', size=1536).display_size == '1.5 KB'
        assert UploadedFile(name='a.nc', size=0).display_size == '0 Bytes'


class TestAnalysisSession:
    """Test cases for the simulated analysis lifecycle"""

    def test_add_files_skips_rejected(self):
        """Only NetCDF uploads start an analysis"""
        session = make_session()
        started = session.add_files([
            UploadedFile(name='argo.nc', size=2048),
            UploadedFile(name='notes.txt', size=10),
        ])
        assert len(started) == 1
        assert [f.name for f in session.uploaded_files] == ['argo.nc']
        result = started[0]
        assert result.result_id.startswith('analysis-')
        assert result.status is AnalysisStatus.PROCESSING
        assert result.progress == 0
        assert result.timestamp == ANALYSIS_TIME
        assert session.is_processing

    def test_result_ids_unique(self):
        session = make_session()
        started = session.add_files([UploadedFile(name='a.nc', size=1), UploadedFile(name='a.nc', size=1)])
        assert started[0].result_id != started[1].result_id

    def test_progress_is_floored(self):
        """Displayed progress is the integer part of accumulated progress"""
        session = make_session(step=12.5)
        result = session.add_files([UploadedFile(name='argo.nc', size=1)])[0]
        session.advance(result.result_id)
        assert result.progress == 12
        session.advance(result.result_id)
        assert result.progress == 25
        session.advance(result.result_id)
        assert result.progress == 37

    def test_completes_at_one_hundred(self):
        """Analysis completes with insights once progress reaches 100"""
        session = make_session(step=15.0)
        result = session.add_files([UploadedFile(name='argo.nc', size=1)])[0]
        for _ in range(6):
            session.advance(result.result_id)
        assert result.progress == 90
        assert result.insights is None

        session.advance(result.result_id)
        assert result.status is AnalysisStatus.COMPLETED
        assert result.progress == 100
        assert result.insights == fabricated_insights()
        assert not session.is_processing

    def test_advance_after_completion_is_noop(self):
        session = make_session()
        result = session.add_files([UploadedFile(name='argo.nc', size=1)])[0]
        session.run_to_completion(result.result_id)
        session.advance(result.result_id)
        assert result.progress == 100
        assert session.completed_results() == [result]

    def test_real_generator_completes(self):
        """Default numpy generator drives the analysis to completion"""
        session = NetCDFAnalysisSession(max_increment=15.0)
        result = session.add_files([UploadedFile(name='argo.nc', size=1)])[0]
        session.run_to_completion(result.result_id)
        assert result.is_complete

    def test_unknown_result(self):
        session = make_session()
        with pytest.raises(UnknownResultError):
            session.get_result('analysis-missing')
        with pytest.raises(KeyError):
            session.advance('analysis-missing')

    def test_remove_file(self):
        """Removing a file drops its uploads and results"""
        session = make_session()
        session.add_files([UploadedFile(name='a.nc', size=1), UploadedFile(name='a.nc', size=1),
                           UploadedFile(name='b.nc', size=1)])
        assert session.remove_file('a.nc') == 2
        assert [f.name for f in session.uploaded_files] == ['b.nc']
        assert [r.file_name for r in session.results] == ['b.nc']
        assert session.remove_file('missing.nc') == 0

    def test_to_dict(self):
        session = make_session()
        session.add_files([UploadedFile(name='a.nc', size=5, content_type='application/x-netcdf')])
        state = session.to_dict()
        assert state['uploaded_files'][0]['content_type'] == 'application/x-netcdf'
        assert state['results'][0]['status'] == 'processing'


class TestReport:
    """Test cases for the plain text report"""

    @pytest.fixture
    def completed(self):
        session = make_session()
        result = session.add_files([UploadedFile(name='argo.nc', size=1)])[0]
        return session.run_to_completion(result.result_id)

    def test_report_lines(self, completed):
        report = render_report(completed, generated_at=datetime(2024, 1, 16, 8, 0, 0))
        lines = report.splitlines()
        assert lines[0] == "NetCDF Analysis Report"
        assert "File: argo.nc" in lines
        assert "Analysis Date: 2024-01-15 10:30:00" in lines
        assert "Temperature: 4.2 - 28.5 °C (Mean: 16.8°C)" in lines
        assert "Salinity: 34.2 - 35.8 PSU (Mean: 35.1PSU)" in lines
        assert "Pressure: 1013.2 - 2500 hPa (Mean: 1256.6hPa)" in lines
        assert "Depth: 0 - 2000 m (Mean: 1000m)" in lines
        assert "Latitude: -15.2° to 5.8°" in lines
        assert "Depth: 0m to 2000m" in lines
        assert "Completeness: 95.2%" in lines
        assert "Flags: Good data, Quality controlled, CF compliant" in lines
        assert "1. Strong temperature gradient observed between surface (28.5°C) and deep waters (4.2°C)" in lines
        assert lines[-1] == "2024-01-16 08:00:00"
        assert report.endswith("\n")

    def test_report_requires_completion(self):
        session = make_session()
        result = session.add_files([UploadedFile(name='argo.nc', size=1)])[0]
        with pytest.raises(AnalysisNotReadyError):
            render_report(result)


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
