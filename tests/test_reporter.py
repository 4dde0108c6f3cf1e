"""Tests for import reports."""

import json
from pathlib import Path

from photobot.models import ImportState, ImportStats, ItemResult
from photobot.reporter import ImportReporter


def make_results(dry_run=False):
    done = ItemResult(source=Path('/in/a.jpg'), state=ImportState.DONE,
                      destination=Path('/out/timeline/a.jpg'), size=2048)
    skipped = ItemResult(source=Path('/in/b.jpg'), state=ImportState.SKIPPED,
                         reason='destination already exists: /out/b.jpg')
    failed = ItemResult(source=Path('/in/c.jpg'), state=ImportState.FAILED,
                        error_kind='MissingTimestamp', message='no date')
    stats = ImportStats()
    for result in (done, skipped, failed):
        stats.add(result)
    return {
        'dry_run': dry_run,
        'timestamp': '2024-01-01T00:00:00',
        'output_dir': '/out',
        'results': [done, skipped, failed],
        'statistics': stats.to_dict(),
        'errors': list(stats.errors),
    }


class TestFormatItem:

    def test_lines_per_outcome(self):
        done, skipped, failed = make_results()['results']

        assert ImportReporter.format_item(done) == "IMPORTED /in/a.jpg -> /out/timeline/a.jpg"
        assert ImportReporter.format_item(skipped).startswith("SKIPPED /in/b.jpg")
        assert ImportReporter.format_item(failed) == \
            "FAILED MissingTimestamp: /in/c.jpg: no date"


class TestSummary:

    def test_summary_counts(self, tmp_path):
        summary = ImportReporter(tmp_path).generate_summary_report(make_results())

        assert "Mode: LIVE RUN" in summary
        assert "Photos copied: 1 (2.0KB)" in summary
        assert "Already imported (skipped): 1" in summary
        assert "Failed: 1" in summary
        assert "MissingTimestamp: /in/c.jpg: no date" in summary
        assert "COMPLETED WITH ISSUES" in summary

    def test_dry_run_wording(self, tmp_path):
        summary = ImportReporter(tmp_path).generate_summary_report(make_results(dry_run=True))

        assert "Mode: DRY RUN" in summary
        assert "Photos to copy: 1" in summary


def test_save_report_writes_json_under_logs(tmp_path):
    report_file = Path(ImportReporter(tmp_path).save_report(make_results()))

    assert report_file.parent == tmp_path / 'logs'
    assert ':' not in report_file.name
    with open(report_file) as f:
        data = json.load(f)
    assert data['statistics']['copied'] == 1
    assert [r['state'] for r in data['results']] == ['done', 'skipped', 'failed']
