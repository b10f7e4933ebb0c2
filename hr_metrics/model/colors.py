import logging
import math
import re
import typing

from hr_metrics.errors import ValidationError
from hr_metrics.model.categories import CategoryIndex

logger = logging.getLogger(__name__)

FILL_ALPHA = 'CC'
FALLBACK_COLOR = '#cccccc'
SHADE_STEP = 15

_HEX_COLOR = re.compile(r'^#?[0-9A-Fa-f]{6}$')


def adjust_color(hex_color: str, percent: float) -> str:
    """Scales each RGB channel by (100 + percent) / 100, clamped to 0..255."""
    value = hex_color.lstrip('#')
    channels = (int(value[i:i + 2], 16) for i in (0, 2, 4))
    adjusted = (min(255, max(0, math.floor(channel * (100 + percent) / 100 + 0.5))) for channel in channels)
    return '#' + ''.join(f'{channel:02x}' for channel in adjusted)


def _with_hash(color):
    if isinstance(color, str) and color and not color.startswith('#'):
        return '#' + color
    return color


def shade_percent(index: int, count: int) -> int:
    if count <= 1:
        return 0
    return (index - count // 2) * SHADE_STEP


class ColorCache:

    def __init__(self, category_colors: typing.Mapping[str, str], categories: CategoryIndex,
                 employee_colors: typing.Mapping[str, str] = None):
        self._category_colors = {name: _with_hash(color) for name, color in category_colors.items()}
        self._categories = categories
        self._employee_colors = {name: _with_hash(color) for name, color in (employee_colors or {}).items()}
        self._fill = {}
        self._border = {}
        self._initialized = False

    @property
    def initialized(self) -> bool:
        return self._initialized

    def initialize(self):
        if self._initialized:
            return
        fill = {'category': {}, 'task': {}, 'employee': {}}
        border = {'category': {}, 'task': {}, 'employee': {}}
        for category, base_color in self._category_colors.items():
            self._check_color(category, base_color)
            fill['category'][category] = base_color + FILL_ALPHA
            border['category'][category] = base_color
        for category in self._categories:
            base_color = self._category_colors.get(category.name)
            if not base_color:
                logger.debug('no color configured for category %s', category.name)
                continue
            for index, task in enumerate(category.tasks):
                if task in border['task']:
                    continue
                color = adjust_color(base_color, shade_percent(index, len(category)))
                fill['task'][task] = color + FILL_ALPHA
                border['task'][task] = color
        for employee, color in self._employee_colors.items():
            self._check_color(employee, color)
            fill['employee'][employee] = color + FILL_ALPHA
            border['employee'][employee] = color
        self._fill = fill
        self._border = border
        self._initialized = True

    def clear(self):
        self._fill = {}
        self._border = {}
        self._initialized = False

    @staticmethod
    def _check_color(name, color):
        if not isinstance(color, str) or not _HEX_COLOR.match(color):
            raise ValidationError(f'invalid color for {name}: {color!r}')

    def _lookup(self, kind, name, fill=True) -> str:
        self.initialize()
        if fill:
            return self._fill[kind].get(name) or FALLBACK_COLOR + FILL_ALPHA
        return self._border[kind].get(name) or FALLBACK_COLOR

    def category_color(self, category: str) -> str:
        return self._lookup('category', category)

    def category_border_color(self, category: str) -> str:
        return self._lookup('category', category, fill=False)

    def task_color(self, task: str) -> str:
        return self._lookup('task', task)

    def task_border_color(self, task: str) -> str:
        return self._lookup('task', task, fill=False)

    def employee_color(self, employee: str) -> str:
        return self._lookup('employee', employee)

    def employee_border_color(self, employee: str) -> str:
        return self._lookup('employee', employee, fill=False)

    def color(self, name: str, level: str) -> str:
        return self.category_color(name) if level == 'category' else self.task_color(name)

    def border_color(self, name: str, level: str) -> str:
        return self.category_border_color(name) if level == 'category' else self.task_border_color(name)
