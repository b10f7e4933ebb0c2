import datetime

from conftest import WEEK_1, WEEK_2, WEEK_3
from hr_metrics.common import ALL
from hr_metrics.model.week_range import (EPOCH, compare_week_ranges, describe_week_selection, parse_week_start,
                                         sort_week_ranges, validate_week_selection, within_week_range)


def test_parse_week_start_reads_month_day_and_year():
    assert parse_week_start(WEEK_1) == datetime.date(2025, 3, 10)


def test_parse_week_start_defaults_to_current_year():
    assert parse_week_start('Mar 10 – Mar 15', today=datetime.date(2024, 6, 1)) == datetime.date(2024, 3, 10)


def test_unparseable_labels_map_to_epoch():
    assert parse_week_start('garbage') == EPOCH
    assert parse_week_start('Foo 10 – Bar 15 (2025)') == EPOCH
    assert parse_week_start(None) == EPOCH
    assert parse_week_start('Feb 30 – Mar 5 (2025)') == EPOCH


def test_compare_crosses_year_boundary():
    assert compare_week_ranges('Dec 30 – Jan 4 (2024)', 'Jan 6 – Jan 11 (2025)') < 0
    assert compare_week_ranges(WEEK_2, WEEK_1) == 7
    assert compare_week_ranges(WEEK_1, WEEK_1) == 0


def test_sort_is_chronological_and_distinct():
    labels = [WEEK_3, 'garbage', WEEK_1, None, WEEK_2, WEEK_1]
    assert sort_week_ranges(labels) == ['garbage', WEEK_1, WEEK_2, WEEK_3]


def test_week_selection_validation():
    assert validate_week_selection(ALL, ALL)
    assert validate_week_selection(WEEK_3, ALL)
    assert validate_week_selection(WEEK_1, WEEK_1)
    assert not validate_week_selection(WEEK_3, WEEK_1)


def test_within_week_range_is_inclusive():
    assert within_week_range(WEEK_1, WEEK_1, WEEK_2)
    assert within_week_range(WEEK_2, WEEK_1, WEEK_2)
    assert not within_week_range(WEEK_3, WEEK_1, WEEK_2)
    assert not within_week_range(WEEK_1, WEEK_2, ALL)


def test_describe_week_selection():
    assert describe_week_selection(ALL, ALL) is None
    assert describe_week_selection(WEEK_1, ALL) == f'From {WEEK_1} onwards'
    assert describe_week_selection(ALL, WEEK_2) == f'Up to {WEEK_2}'
    assert describe_week_selection(WEEK_1, WEEK_2) == f'{WEEK_1} to {WEEK_2}'


def test_sort_keeps_encounter_order_for_same_start_date():
    assert sort_week_ranges([WEEK_1, 'Mar 10 (2025)', WEEK_2]) == [WEEK_1, 'Mar 10 (2025)', WEEK_2]
    assert sort_week_ranges(['Mar 10 (2025)', WEEK_2, WEEK_1]) == ['Mar 10 (2025)', WEEK_1, WEEK_2]
