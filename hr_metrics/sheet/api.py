import logging
import typing

import requests

from hr_metrics.common import parse_csv_text
from hr_metrics.errors import DataFetchError

logger = logging.getLogger(__name__)

EXPORT_URL = 'https://docs.google.com/spreadsheets/d/{id}/export?format={format}'
USER_AGENT = 'HR metrics time entries reader'


class SpreadsheetAPI:

    def __init__(self, spreadsheet_id: str, export_format: str = 'csv', gid=0, timeout: float = 30):
        if not spreadsheet_id:
            raise DataFetchError('missing spreadsheet id')
        self.spreadsheet_id = spreadsheet_id
        self.export_format = export_format
        self.gid = gid
        self.timeout = timeout

    @property
    def export_url(self) -> str:
        return EXPORT_URL.format(id=self.spreadsheet_id, format=self.export_format)

    @property
    def urls(self) -> typing.List[str]:
        return [self.export_url, f'{self.export_url}&gid={self.gid}']

    def call_api(self, url) -> requests.Response:
        return requests.get(url, timeout=self.timeout, headers={'User-Agent': USER_AGENT})

    def fetch_text(self) -> str:
        failures = {}
        for url in self.urls:
            try:
                response = self.call_api(url)
            except requests.RequestException as e:
                logger.info('fetching %s failed: %s', url, e)
                failures[url] = str(e)
                continue
            if response.ok:
                logger.debug('fetched %d bytes from %s', len(response.text), url)
                return response.text
            logger.info('fetching %s failed with status %s', url, response.status_code)
            failures[url] = f'HTTP {response.status_code}'
        raise DataFetchError('could not load data from the spreadsheet', {'attempts': failures})

    def iterate_records(self) -> typing.Iterator[dict]:
        yield from parse_csv_text(self.fetch_text())
