import typing


class DashboardError(ValueError):

    kind = 'DASHBOARD_ERROR'

    def __init__(self, message: str, details: typing.Mapping = None):
        super().__init__(message)
        self._details = dict(details or {})

    @property
    def message(self) -> str:
        return self.args[0] if self.args else ''

    @property
    def details(self) -> dict:
        return self._details


class ValidationError(DashboardError):
    kind = 'VALIDATION_ERROR'


class DataFetchError(DashboardError):
    kind = 'DATA_FETCH_ERROR'
