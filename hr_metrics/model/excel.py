import typing

from openpyxl.styles import Font, PatternFill, Alignment
from openpyxl.styles.colors import Color


def fill_for(color: typing.Optional[str]) -> typing.Optional[PatternFill]:
    """Solid fill from a ``#rrggbb`` color; alpha suffixes are dropped."""
    if not color or not color.startswith('#') or len(color) < 7:
        return None
    return PatternFill('solid', fgColor=color[1:7].upper())


class BaseSheet:

    _title = ''
    _header = None
    _header_font = Font(color='FF000000', bold=True)
    _header_fill = PatternFill('solid', fgColor=Color(indexed=22))
    _columns_width = None
    _wrap = False

    def __init__(self, sheet, title=None, header: typing.Mapping[str, str] = None, column_width=None, **kwargs):
        self._sheet = sheet
        if title:
            self._title = title
        sheet.title = self._title[:31]
        if header:
            self._header = header
        for cell, cell_title in (self._header or {}).items():
            self.set_header(cell, cell_title)
        if column_width:
            self._columns_width = column_width
        for column, width in (self._columns_width or {}).items():
            sheet.column_dimensions[column].width = width
        self._wrap = kwargs.get('wrap', self._wrap)

    @property
    def sheet(self):
        return self._sheet

    def set_header(self, cell, value):
        self.set_value(cell, value, font=self._header_font, fill=self._header_fill)

    def set_value(self, cell, value, font=None, fill=None, **kwargs):
        first_cell = cell.partition(':')[0]
        self._sheet[first_cell] = value
        if font:
            self[first_cell].font = font
        if fill:
            self[first_cell].fill = fill
        if kwargs.get('number_format'):
            self[first_cell].number_format = kwargs['number_format']
        if kwargs.get('wrap', self._wrap):
            self[first_cell].alignment = Alignment(wrap_text=True)
        if ':' in cell:
            self._sheet.merge_cells(cell)

    def write_table(self, row: int, column: int, header: typing.Sequence[str],
                    rows: typing.Iterable[typing.Sequence], number_formats: typing.Mapping[int, str] = None):
        """Writes a header line and data lines; returns the last row written."""
        for offset, title in enumerate(header):
            cell = self._sheet.cell(row=row, column=column + offset, value=title)
            cell.font = self._header_font
            cell.fill = self._header_fill
        last = row
        for last, values in enumerate(rows, start=row + 1):
            for offset, value in enumerate(values):
                cell = self._sheet.cell(row=last, column=column + offset, value=value)
                if number_formats and offset in number_formats:
                    cell.number_format = number_formats[offset]
        return last

    def __setitem__(self, key, value):
        self.set_value(key, value)

    def __getitem__(self, item):
        return self._sheet[item]
