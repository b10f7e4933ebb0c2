import pytest

from conftest import TODAY, WEEK_1, WEEK_3
from hr_metrics.errors import ValidationError
from hr_metrics.model.aggregation import COST, TASK
from hr_metrics.state import DashboardState, RecomputeScheduler
from test_cache import FakeClock


@pytest.fixture
def clock():
    return FakeClock(100.0)


def test_scheduler_waits_for_quiet_window(clock):
    calls = []
    scheduler = RecomputeScheduler(lambda: calls.append(clock.now) or len(calls), window=0.25, clock=clock)
    scheduler.request()
    assert scheduler.poll() is None
    clock.now += 0.3
    assert scheduler.poll() == 1
    assert scheduler.poll() is None
    assert calls == [100.3]


def test_newer_request_supersedes_pending_one(clock):
    calls = []
    scheduler = RecomputeScheduler(lambda: calls.append(1) or 'view', window=0.25, clock=clock)
    first = scheduler.request()
    clock.now += 0.2
    second = scheduler.request()
    clock.now += 0.2
    assert scheduler.poll() is None
    clock.now += 0.1
    assert scheduler.poll() == 'view'
    assert len(calls) == 1
    assert scheduler.applied == second
    assert not scheduler.accept(first)


def test_result_of_superseded_computation_is_dropped(clock):
    scheduler = RecomputeScheduler(lambda: None, window=0.25, clock=clock)
    ticket = scheduler.request()
    scheduler.request()
    assert not scheduler.accept(ticket)
    scheduler.cancel()
    assert scheduler.pending is None
    assert scheduler.flush() is None


@pytest.fixture
def state(context, clock):
    return DashboardState(context, today=TODAY, clock=clock)


def test_filters_apply_after_flush(state, rows):
    state.commit_rows(rows)
    assert state.apply_filters(employee='kyle')
    view = state.refresh()
    assert view.generation == 1
    assert len(view.filtered) == 2
    assert len(view.rows) == 4


def test_invalid_week_range_keeps_previous_filters(state, rows):
    state.commit_rows(rows)
    result = state.apply_filters(start_week=WEEK_3, end_week=WEEK_1)
    assert not result
    assert isinstance(result.error, ValidationError)
    assert state.filters.start_week == 'all'


def test_unknown_filter_is_a_validation_failure(state):
    result = state.apply_filters(colour='red')
    assert isinstance(result.error, ValidationError)


def test_modes_are_validated(state):
    assert state.set_modes(TASK, COST)
    assert (state.grouping, state.display) == (TASK, COST)
    assert not state.set_modes('employee')
    assert state.grouping == TASK


def test_recompute_uses_latest_committed_rows(state, rows, clock):
    state.commit_rows(rows)
    state.apply_filters(employee='brooke')
    state.commit_rows(rows[:2])
    clock.now += 1
    view = state.poll()
    assert view.generation == 2
    assert len(view.filtered) == 1
    assert state.view is view


def test_reset_filters(state, rows):
    state.commit_rows(rows)
    state.apply_filters(employee='kyle', search='example')
    assert state.reset_filters().is_unrestricted
    assert len(state.refresh().filtered) == 4


def test_reload_config_rebuilds_context(state, config):
    config['rates']['kyle'] = 30.0
    context = state.reload_config(config)
    assert state.context is context
    assert context.rates.rate_for('kyle') == 30.0
