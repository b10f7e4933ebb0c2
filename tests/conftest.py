import csv
import datetime

import pytest
import yaml

from hr_metrics.context import DashboardContext
from hr_metrics.model.entry import load_rows

WEEK_1 = 'Mar 10 – Mar 15 (2025)'
WEEK_2 = 'Mar 17 – Mar 22 (2025)'
WEEK_3 = 'Mar 24 – Mar 29 (2025)'

TODAY = datetime.date(2025, 4, 1)

TASKS = ['BD - Research', 'BD - Calls', 'Ads', 'Extra Task']


@pytest.fixture
def config():
    return {
        'spreadsheet': {'id': None},
        'rates': {'kyle': 20.0, 'brooke': 25.0, 'default': 25.0},
        'employees': ['kyle', 'brooke'],
        'categories': {
            'Business Development': ['BD - Research', 'BD - Calls'],
            'Advertising': ['Ads'],
        },
        'categoryColors': {
            'Business Development': '#4CAF50',
            'Advertising': '#E91E63',
        },
        'employeeColors': {'kyle': '#2196F3'},
    }


@pytest.fixture
def context(config):
    return DashboardContext(config)


@pytest.fixture
def records():
    return [
        {'Date': '2025-03-10', 'User': 'kyle@example.com', 'Week Range': WEEK_1,
         'BD - Research': 2.0, 'BD - Calls': 0.0, 'Ads': 1.0},
        {'Date': '2025-03-11', 'User': 'brooke@example.com', 'Week Range': WEEK_1,
         'BD - Research': 1.0, 'Ads': 3.0, 'Extra Task': 2.0},
        {'Date': '2025-03-18', 'User': 'kyle@example.com', 'Week Range': WEEK_2,
         'BD - Calls': 4.0},
        {'Date': '2025-03-25', 'User': 'brooke@example.com', 'Week Range': WEEK_3,
         'Ads': 2.0},
    ]


@pytest.fixture
def rows(context, records):
    return load_rows(records, context.rates).unwrap()


@pytest.fixture
def csv_file(tmp_path, records):
    path = tmp_path / 'entries.csv'
    with open(path, 'w', newline='', encoding='utf-8') as f:
        writer = csv.DictWriter(f, fieldnames=['Date', 'User', 'Week Range'] + TASKS)
        writer.writeheader()
        for record in records:
            writer.writerow(record)
    return path


@pytest.fixture
def config_file(tmp_path, config):
    path = tmp_path / 'config.yaml'
    path.write_text(yaml.safe_dump(config, sort_keys=False), encoding='utf-8')
    return path
