from hr_metrics.model.categories import CategoryIndex, NO_CATEGORY


def test_first_category_listing_a_task_wins():
    index = CategoryIndex({'A': ['x', 'y'], 'B': ['y', 'z']})
    assert index.category_of('y') == 'A'
    assert index.category_of('z') == 'B'
    assert index.category_of('unknown') == NO_CATEGORY
    assert index.tasks == ['x', 'y', 'z']
    assert index.tasks_of('B') == ('y', 'z')
    assert index.tasks_of('missing') == ()


def test_task_order_defaults_to_category_order():
    index = CategoryIndex({'A': ['x', 'y'], 'B': ['z']})
    assert index.task_order == ('x', 'y', 'z')
    assert index.task_position('z') == 2
    assert index.category_position('B') == 1
    assert index.names == ['A', 'B']
    assert 'A' in index
    assert len(index['A']) == 2


def test_inconsistencies_between_order_and_categories():
    index = CategoryIndex({'A': ['x', 'y']}, task_order=['x', 'ghost'])
    missing, extra = index.inconsistencies()
    assert missing == ['ghost']
    assert extra == ['y']
