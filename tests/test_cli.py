import time

import pytest
from click.testing import CliRunner
from openpyxl import load_workbook

from conftest import WEEK_1, WEEK_2, WEEK_3
from hr_metrics.cli import entry_point
from hr_metrics.sheet import api


@pytest.fixture
def runner():
    return CliRunner()


@pytest.fixture
def invoke(runner, config_file):
    def run(*args):
        return runner.invoke(entry_point, ['--config', str(config_file)] + list(args))
    return run


def test_weeks_are_listed_chronologically(invoke, csv_file):
    result = invoke('report', 'weeks', '-i', str(csv_file))
    assert result.exit_code == 0, result.output
    assert result.output.splitlines() == [WEEK_1, WEEK_2, WEEK_3]


def test_summary(invoke, csv_file):
    result = invoke('report', 'summary', '-i', str(csv_file))
    assert result.exit_code == 0, result.output
    assert 'team: 15h, $340.00 over 3 week(s), weekly average 5h / $113.33' in result.output
    assert 'kyle: 7h, $140.00 over 2 week(s)' in result.output
    assert 'most time: Ads (6h, $145.00, 40.0%)' in result.output
    assert 'category breakdown (hours):' in result.output


def test_summary_writes_breakdown_csv(invoke, csv_file, tmp_path):
    output = tmp_path / 'out' / 'breakdown.csv'
    result = invoke('report', 'summary', '-i', str(csv_file), '--level', 'task', '--display', 'cost',
                    '-o', str(output))
    assert result.exit_code == 0, result.output
    lines = output.read_text().splitlines()
    assert lines[0] == 'Name,Category,Hours,Cost,Share'
    assert lines[1] == 'BD - Research,Business Development,3.00,65.00,19.1'
    assert lines[-1] == 'Extra Task,,2.00,50.00,14.7'


def test_summary_with_filters(invoke, csv_file):
    result = invoke('report', 'summary', '-i', str(csv_file), '--employee', 'kyle', '--start-week', WEEK_2)
    assert result.exit_code == 0, result.output
    assert f'filter: From {WEEK_2} onwards' in result.output
    assert 'team: 4h, $80.00 over 1 week(s)' in result.output


def test_summary_without_matches(invoke, csv_file):
    result = invoke('report', 'summary', '-i', str(csv_file), '--search', 'nobody-at-all')
    assert result.exit_code == 0, result.output
    assert 'No data available for the selected filters.' in result.output


def test_inverted_week_range_is_a_usage_error(invoke, csv_file):
    result = invoke('report', 'summary', '-i', str(csv_file), '--start-week', WEEK_3, '--end-week', WEEK_1)
    assert result.exit_code == 2
    assert 'start week must not be after end week' in result.output


def test_trend(invoke, csv_file):
    result = invoke('report', 'trend', '-i', str(csv_file))
    assert result.exit_code == 0, result.output
    lines = result.output.splitlines()
    assert lines[0] == 'Week\tBusiness Development\tAdvertising\tTotal Hours'
    assert lines[1] == f'{WEEK_1}\t3h\t4h\t9h'


def test_trend_needs_two_weeks(invoke, csv_file):
    result = invoke('report', 'trend', '-i', str(csv_file), '--end-week', WEEK_1)
    assert result.exit_code == 0, result.output
    assert 'Weekly trend data not available' in result.output


def test_export(invoke, csv_file, tmp_path):
    output = tmp_path / 'dashboard.xlsx'
    result = invoke('report', 'export', '-i', str(csv_file), '-o', str(output))
    assert result.exit_code == 0, result.output
    workbook = load_workbook(output)
    assert workbook.sheetnames == ['Team', 'Kyle', 'Brooke', 'Comparison']
    assert workbook['Team']['B2'].value == 15
    assert workbook['Kyle']['B8'].value == 20


def test_watch_runs_requested_cycles(invoke, csv_file, monkeypatch):
    sleeps = []
    monkeypatch.setattr(time, 'sleep', sleeps.append)
    result = invoke('report', 'watch', '-i', str(csv_file), '--count', '2', '--interval', '1')
    assert result.exit_code == 0, result.output
    assert sleeps == [1.0]
    assert 'generation 1' in result.output
    assert 'generation 2' in result.output


def test_report_without_data_source(invoke):
    result = invoke('report', 'summary')
    assert result.exit_code == 1
    assert 'no spreadsheet configured' in result.output


def test_fetch_saves_csv(invoke, monkeypatch, tmp_path):
    class Response:
        ok = True
        status_code = 200
        text = f'User,Week Range,Ads\nkyle,{WEEK_1},2\n'

    monkeypatch.setattr(api.requests, 'get', lambda url, timeout, headers: Response())
    output = tmp_path / 'entries.csv'
    result = invoke('sheet', 'fetch', '--spreadsheet-id', 'abc', '-o', str(output))
    assert result.exit_code == 0, result.output
    assert 'saved 1 time entries' in result.output
    assert output.read_text().startswith('User,Week Range,Ads')


def test_invalid_config_file(runner, tmp_path):
    path = tmp_path / 'config.yaml'
    path.write_text('rates:\n  kyle: 20\n', encoding='utf-8')
    result = runner.invoke(entry_point, ['--config', str(path), 'report', 'weeks'])
    assert result.exit_code == 1
    assert 'invalid configuration' in result.output


def test_undecodable_csv_is_reported(invoke, tmp_path):
    path = tmp_path / 'latin1.csv'
    path.write_bytes('User,Week Range,Ads\nRené,Mar 10 (2025),2\n'.encode('latin-1'))
    result = invoke('report', 'summary', '-i', str(path))
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert 'cannot read' in result.output


@pytest.mark.parametrize('text', ['rates:\n  kyle: abc\n  default: 25\n', 'categories: null\n'])
def test_malformed_config_values(runner, tmp_path, text):
    path = tmp_path / 'config.yaml'
    path.write_text(text, encoding='utf-8')
    result = runner.invoke(entry_point, ['--config', str(path), 'report', 'weeks'])
    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert 'invalid configuration' in result.output
