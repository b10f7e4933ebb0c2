import pytest

from hr_metrics.errors import ValidationError
from hr_metrics.model.categories import CategoryIndex
from hr_metrics.model.colors import ColorCache, adjust_color, shade_percent


@pytest.fixture
def colors():
    categories = CategoryIndex({'Business Development': ['BD - Research', 'BD - Calls'], 'Advertising': ['Ads']})
    return ColorCache({'Business Development': '#4CAF50', 'Advertising': 'E91E63'}, categories,
                      {'kyle': '#2196F3'})


def test_adjust_color_scales_and_clamps():
    assert adjust_color('#4CAF50', 0) == '#4caf50'
    assert adjust_color('#808080', 15) == '#939393'
    assert adjust_color('#ffffff', 50) == '#ffffff'
    assert adjust_color('#101010', -200) == '#000000'


def test_shade_percent_is_centered():
    assert [shade_percent(index, 4) for index in range(4)] == [-30, -15, 0, 15]
    assert [shade_percent(index, 3) for index in range(3)] == [-15, 0, 15]
    assert shade_percent(0, 1) == 0


def test_category_colors_keep_base_with_alpha(colors):
    assert colors.category_color('Business Development') == '#4CAF50CC'
    assert colors.category_border_color('Business Development') == '#4CAF50'
    assert colors.category_border_color('Advertising') == '#E91E63'


def test_task_colors_are_shades_of_their_category(colors):
    assert colors.task_border_color('BD - Research') == '#419544'
    assert colors.task_color('BD - Research') == '#419544CC'
    assert colors.task_border_color('BD - Calls') == '#4caf50'
    assert colors.task_border_color('Ads') == '#e91e63'


def test_unknown_names_get_gray(colors):
    assert colors.task_color('Unknown') == '#ccccccCC'
    assert colors.task_border_color('Unknown') == '#cccccc'
    assert colors.employee_color('nobody') == '#ccccccCC'
    assert colors.employee_border_color('kyle') == '#2196F3'


def test_level_dispatch(colors):
    assert colors.color('Advertising', 'category') == '#E91E63CC'
    assert colors.border_color('Ads', 'task') == '#e91e63'


def test_cache_is_lazy_and_clearable(colors):
    assert not colors.initialized
    colors.task_color('Ads')
    assert colors.initialized
    colors.clear()
    assert not colors.initialized
    assert colors.task_border_color('Ads') == '#e91e63'


def test_invalid_color_is_rejected():
    colors = ColorCache({'A': 'not-a-color'}, CategoryIndex({'A': ['x']}))
    with pytest.raises(ValidationError):
        colors.initialize()


def test_reinitializing_gives_identical_colors(colors):
    before = [colors.task_color(task) for task in ('BD - Research', 'BD - Calls', 'Ads', 'Unknown')]
    colors.clear()
    colors.initialize()
    assert [colors.task_color(task) for task in ('BD - Research', 'BD - Calls', 'Ads', 'Unknown')] == before
