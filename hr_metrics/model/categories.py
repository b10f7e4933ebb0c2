import typing

NO_CATEGORY = ''


class Category:

    def __init__(self, name: str, tasks: typing.Iterable[str], position: int):
        self._name = name
        self._tasks = tuple(tasks)
        self._position = position

    @property
    def name(self) -> str:
        return self._name

    @property
    def tasks(self) -> typing.Tuple[str, ...]:
        return self._tasks

    @property
    def position(self) -> int:
        return self._position

    def __contains__(self, task):
        return task in self._tasks

    def __len__(self):
        return len(self._tasks)


class CategoryIndex:

    def __init__(self, categories: typing.Mapping[str, typing.Iterable[str]],
                 task_order: typing.Iterable[str] = None):
        self._categories = {name: Category(name, tasks or (), position)
                            for position, (name, tasks) in enumerate(categories.items())}
        self._task_category = {}
        for category in self._categories.values():
            for task in category.tasks:
                self._task_category.setdefault(task, category.name)
        if task_order is None:
            task_order = [task for category in self._categories.values() for task in category.tasks]
        self._task_order = tuple(dict.fromkeys(task_order))
        self._task_position = {task: position for position, task in enumerate(self._task_order)}

    def __iter__(self):
        return iter(self._categories.values())

    def __contains__(self, category):
        return category in self._categories

    def __getitem__(self, category) -> Category:
        return self._categories[category]

    @property
    def names(self) -> typing.List[str]:
        return list(self._categories)

    @property
    def task_order(self) -> typing.Tuple[str, ...]:
        return self._task_order

    @property
    def tasks(self) -> typing.List[str]:
        return list(self._task_category)

    def category_of(self, task: str) -> str:
        return self._task_category.get(task, NO_CATEGORY)

    def tasks_of(self, category: str) -> typing.Tuple[str, ...]:
        if category not in self._categories:
            return ()
        return self._categories[category].tasks

    def task_position(self, task: str) -> typing.Optional[int]:
        return self._task_position.get(task)

    def category_position(self, category: str) -> typing.Optional[int]:
        if category not in self._categories:
            return None
        return self._categories[category].position

    def inconsistencies(self) -> typing.Tuple[typing.List[str], typing.List[str]]:
        """Tasks ordered but in no category, and categorized tasks missing from the order."""
        missing = [task for task in self._task_order if task not in self._task_category]
        extra = [task for task in self._task_category if task not in self._task_position]
        return missing, extra
