# src/floatchat/main.py

import logging
import sys
from pathlib import Path
from typing import Dict, Any, Optional, List
import argparse
import signal
import json
from datetime import date, datetime

from . import __version__
from .analysis.netcdf_analysis import NetCDFAnalysisSession, UploadedFile, render_report
from .config import config
from .data.fixtures import SampleFloatProvider
from .data.profile_synthesizer import (ProfileRow, clamp_max_depth, profile_summary,
                                       synthesize_profile)
from .nlp.chat_responder import ChatResponder
from .utils.helpers import ArgoHelpers, FileHandler

# Handlers this module installed on the root logger, replaced on reconfiguration
_installed_handlers: List[logging.Handler] = []


class FloatChatSystem:
    """Command line controller for the simulated float dashboard"""

    def __init__(self):
        self.logger = self._setup_logging()
        self.float_provider = SampleFloatProvider()
        self.responder = ChatResponder()
        self.analysis_session = NetCDFAnalysisSession()
        self.is_running = False

        # SIGINT keeps its default handler so Ctrl-C raises KeyboardInterrupt
        signal.signal(signal.SIGTERM, self._signal_handler)

    def _setup_logging(self) -> logging.Logger:
        """Configure the root logger from settings"""
        log_level = config.get('logging.level', 'INFO')
        log_format = config.get('logging.format',
                                '%(asctime)s - %(name)s - %(levelname)s - %(message)s')
        log_file = config.get('logging.file')

        formatter = logging.Formatter(log_format)
        handlers: List[logging.Handler] = [logging.StreamHandler(sys.stderr)]

        if log_file:
            Path(log_file).parent.mkdir(parents=True, exist_ok=True)
            handlers.append(logging.FileHandler(log_file, encoding='utf-8'))

        root_logger = logging.getLogger()
        root_logger.setLevel(getattr(logging, str(log_level).upper(), logging.INFO))
        while _installed_handlers:
            stale = _installed_handlers.pop()
            root_logger.removeHandler(stale)
            stale.close()
        for handler in handlers:
            handler.setFormatter(formatter)
            root_logger.addHandler(handler)
            _installed_handlers.append(handler)

        return logging.getLogger(__name__)

    def generate_profile(self, float_id: str, profile_date: Optional[str] = None,
                         max_depth: Any = None) -> List[ProfileRow]:
        """Synthesize a profile with caller-side input clamping"""
        if not float_id or not float_id.strip():
            raise ValueError("Float id must not be empty")
        profile_date = profile_date or date.today().isoformat()
        if ArgoHelpers.parse_date_string(profile_date) is None:
            raise ValueError(f"Invalid date: {profile_date}")

        depth = clamp_max_depth(
            max_depth if max_depth is not None else config.get('profile.default_max_depth', 2000),
            config.get('profile.min_max_depth', 100)
        )
        self.logger.info(f"Generating profile for float {float_id} on {profile_date} to {depth} m")
        return synthesize_profile(float_id, profile_date, depth)

    def ask(self, query: str) -> Dict[str, Any]:
        response = self.responder.respond(query)
        self.logger.info(f"Chat query matched {response.kind.value}")
        return {
            'kind': response.kind.value,
            'content': response.content,
            'payload': response.payload
        }

    def analyze_files(self, paths: List[str]) -> List[str]:
        """Run the simulated analysis for local files and return reports"""
        uploads = []
        for path in paths:
            file_path = Path(path)
            if not file_path.is_file():
                self.logger.error(f"File not found: {path}")
                continue
            stat = file_path.stat()
            uploads.append(UploadedFile(name=file_path.name, size=stat.st_size,
                                        content_type='application/x-netcdf',
                                        last_modified=stat.st_mtime))

        reports = []
        for result in self.analysis_session.add_files(uploads):
            self.analysis_session.run_to_completion(result.result_id)
            reports.append(render_report(result))
        return reports

    def get_system_status(self) -> Dict[str, Any]:
        return {
            'system': {
                'status': 'running' if self.is_running else 'stopped',
                'version': __version__
            },
            'fixtures': {
                'floats': len(self.float_provider.list_floats())
            },
            'analysis': {
                'uploaded_files': len(self.analysis_session.uploaded_files),
                'completed': len(self.analysis_session.completed_results()),
                'processing': self.analysis_session.is_processing
            },
            'timestamp': datetime.now().isoformat()
        }

    def format_profile(self, rows: List[ProfileRow], as_json: bool = False) -> str:
        if as_json:
            return FileHandler.safe_json_serialize([row.to_dict() for row in rows])

        lines = [f"{'depth (m)':>10} {'temp (°C)':>10} {'sal (PSU)':>10}"]
        lines.extend(f"{row.depth:>10d} {row.temperature:>10.2f} {row.salinity:>10.2f}" for row in rows)
        summary = profile_summary(rows)
        if summary:
            lines.append(f"{summary['samples']} samples, step {summary['step']} m")
        return "\n".join(lines)

    def format_floats(self) -> str:
        lines = []
        for record in self.float_provider.list_floats():
            lines.append(f"{record.float_id}  {record.status:<10} {record.region:<15} "
                         f"{ArgoHelpers.format_hemisphere(record.latitude, record.longitude)}")
        return "\n".join(lines)

    def run_interactive_mode(self):
        """Run interactive command-line mode"""
        self.is_running = True

        print("=== FloatChat - Interactive Mode ===")
        print("Commands: status, floats, profile <float> [date] [max_depth], ask <text>, analyze <file>, exit")

        while self.is_running:
            try:
                command = input("\nfloatchat> ").strip().split()
                if not command:
                    continue

                cmd = command[0].lower()

                if cmd == 'exit':
                    break
                elif cmd == 'status':
                    print(json.dumps(self.get_system_status(), indent=2))
                elif cmd == 'floats':
                    print(self.format_floats())
                elif cmd == 'profile' and len(command) > 1:
                    rows = self.generate_profile(command[1],
                                                 command[2] if len(command) > 2 else None,
                                                 command[3] if len(command) > 3 else None)
                    print(self.format_profile(rows))
                elif cmd == 'ask' and len(command) > 1:
                    print(self.ask(' '.join(command[1:]))['content'])
                elif cmd == 'analyze' and len(command) > 1:
                    for report in self.analyze_files(command[1:]):
                        print(report)
                else:
                    print("Unknown command")

            except (KeyboardInterrupt, EOFError):
                break
            except ValueError as e:
                print(f"Error: {e}")

        self.shutdown()

    def _signal_handler(self, signum, frame):
        """Stop on SIGTERM, unblocking a pending input() call"""
        self.logger.info(f"Received signal {signum}, shutting down...")
        self.shutdown()
        raise SystemExit(0)

    def shutdown(self):
        if self.is_running:
            self.logger.info("Shutting down FloatChat...")
        self.is_running = False


def main(argv: Optional[List[str]] = None) -> int:
    """Main entry point with command-line interface"""
    parser = argparse.ArgumentParser(description='FloatChat simulated ARGO dashboard')
    parser.add_argument('--profile', metavar='FLOAT_ID', help='Print a synthetic depth profile')
    parser.add_argument('--date', help='Profile date (YYYY-MM-DD), defaults to today')
    parser.add_argument('--max-depth', help='Profile max depth in metres (minimum 100)')
    parser.add_argument('--json', action='store_true', help='Print the profile as JSON')
    parser.add_argument('--ask', metavar='TEXT', help='Ask the chat assistant')
    parser.add_argument('--floats', action='store_true', help='List sample floats')
    parser.add_argument('--analyze', nargs='+', metavar='FILE', help='Simulate NetCDF analysis of files')
    parser.add_argument('--interactive', action='store_true', help='Run interactive mode')
    parser.add_argument('--config', help='Path to configuration file')

    args = parser.parse_args(argv)

    if args.config:
        config.load_config(args.config)

    system = FloatChatSystem()

    try:
        if args.profile is not None:
            rows = system.generate_profile(args.profile, args.date, args.max_depth)
            print(system.format_profile(rows, as_json=args.json))
            return 0

        if args.ask:
            print(system.ask(args.ask)['content'])
            return 0

        if args.floats:
            print(system.format_floats())
            return 0

        if args.analyze:
            reports = system.analyze_files(args.analyze)
            for report in reports:
                print(report)
            return 0 if reports else 1

        system.run_interactive_mode()
        return 0

    except ValueError as e:
        system.logger.error(str(e))
        print(f"Error: {e}")
        return 1
    except KeyboardInterrupt:
        return 130
    finally:
        system.shutdown()


if __name__ == "__main__":
    sys.exit(main())
