"""Reporting for photo import runs."""

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Optional

from .models import ImportState, ItemResult
from .utils import format_bytes

logger = logging.getLogger(__name__)


class ImportReporter:
    """Generates reports for an import run."""

    def __init__(self, output_dir: Path):
        self.output_dir = Path(output_dir)

    @staticmethod
    def format_item(result: ItemResult) -> str:
        """One line per photo: success marker with destination, or a diagnostic."""
        if result.state is ImportState.DONE:
            prefix = "WOULD COPY" if result.reason == "would copy" else "IMPORTED"
            line = f"{prefix} {result.source} -> {result.destination}"
            if result.warnings:
                line += f" ({'; '.join(result.warnings)})"
            return line
        if result.state is ImportState.SKIPPED:
            return f"SKIPPED {result.source}: {result.reason}"
        return f"FAILED {result.error_kind}: {result.source}: {result.message}"

    def generate_summary_report(self, results: Dict[str, Any]) -> str:
        """
        Generate human-readable summary report.

        Args:
            results: Results from PhotoImporter.import_paths

        Returns:
            Formatted summary report
        """
        stats = results.get('statistics', {})
        dry_run = results.get('dry_run', False)

        report: List[str] = []
        report.append("=" * 50)
        report.append("PHOTO IMPORT SUMMARY REPORT")
        report.append("=" * 50)
        report.append(f"Completed: {results.get('timestamp', 'Unknown')}")
        report.append(f"Mode: {'DRY RUN' if dry_run else 'LIVE RUN'}")
        report.append(f"Output: {results.get('output_dir', 'N/A')}")
        report.append("")

        report.append("=== FILE STATISTICS ===")
        report.append(f"• Photos found: {stats.get('total', 0):,}")
        copied_label = "Photos to copy" if dry_run else "Photos copied"
        report.append(f"• {copied_label}: {stats.get('copied', 0):,} "
                      f"({format_bytes(stats.get('copied_size', 0))})")
        report.append(f"• Already imported (skipped): {stats.get('skipped', 0):,}")
        report.append(f"• Failed: {stats.get('failed', 0):,}")
        report.append(f"• Warnings: {stats.get('warnings', 0):,}")
        report.append("")

        errors = results.get('errors', [])
        if errors:
            report.append("=== ERRORS ENCOUNTERED ===")
            for error in errors:
                report.append(f"- {error}")
            report.append("")

        success = not errors and stats.get('warnings', 0) == 0
        report.append(f"STATUS: {'COMPLETE SUCCESS' if success else 'COMPLETED WITH ISSUES'}")

        return "\n".join(report)

    def save_report(self, results: Dict[str, Any], filename: Optional[str] = None) -> str:
        """
        Save a JSON report of the run under ``<output>/logs``.

        Args:
            results: Results dictionary
            filename: Optional filename (auto-generated if None)

        Returns:
            Path to saved report file
        """
        if filename is None:
            timestamp = results.get('timestamp', 'unknown').replace(':', '-')
            filename = f"import_report_{timestamp}.json"

        report_file = self.output_dir / "logs" / filename
        report_file.parent.mkdir(parents=True, exist_ok=True)

        report_data = {
            'dry_run': results.get('dry_run', False),
            'timestamp': results.get('timestamp'),
            'output_dir': results.get('output_dir'),
            'statistics': results.get('statistics', {}),
            'errors': results.get('errors', []),
            'results': [r.to_dict() for r in results.get('results', [])],
        }

        try:
            with open(report_file, 'w') as f:
                json.dump(report_data, f, indent=2)
        except OSError as e:
            logger.error(f"Failed to save report: {e}")
            raise

        logger.info(f"Report saved: {report_file}")
        return str(report_file)
