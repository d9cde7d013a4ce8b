"""
FakeSheetsService stands in for sheetcrud.service.SheetsService. It keeps the sheet as an
in-memory list of rows and answers each of the service methods the way the Google Sheets v4
API does for the requests sheetcrud issues:

    - values.get trims trailing empty cells from each row and trailing empty rows
    - values.update / values.batchUpdate write from the start cell of the range and skip None
    - values.append writes after the last non-empty row and reports the updatedRange
    - spreadsheets.batchUpdate applies deleteDimension requests in the order given

Every call is recorded in ``calls`` so tests can assert on what was (or was not) sent.
"""
import pytest

import sheetcrud
from sheetcrud.helpers import convert_cell_index_to_label, convert_cell_label_to_index


class FakeSheetsService(object):
    def __init__(self, rows=None, sheet_name='People', sheet_id=7704104867):
        self.spreadsheet_id = 'xyz1234'
        self.sheet_name = sheet_name
        self.sheet_id = sheet_id
        self.rows = [list(row) for row in (rows or [])]
        self.calls = []

    @property
    def call_names(self):
        return [name for name, _ in self.calls]

    @staticmethod
    def _start_row(range_):
        if '!' not in range_:
            return 1
        label = range_.rsplit('!', 1)[1].split(':')[0]
        row, _ = convert_cell_label_to_index(label)
        return row

    def _trimmed(self):
        trimmed = []
        for row in self.rows:
            row = list(row)
            while row and row[-1] in ('', None):
                row.pop()
            trimmed.append(row)
        while trimmed and not trimmed[-1]:
            trimmed.pop()
        return trimmed

    def _write(self, start_row, values):
        for offset, new_row in enumerate(values):
            idx = start_row - 1 + offset
            while len(self.rows) <= idx:
                self.rows.append([])
            row = self.rows[idx]
            for col, value in enumerate(new_row):
                if value is None:
                    continue
                while len(row) <= col:
                    row.append('')
                row[col] = value

    def get_values(self, range_):
        self.calls.append(('get_values', {'range': range_}))
        return self._trimmed()

    def update_values(self, range_, values):
        self.calls.append(('update_values', {'range': range_, 'values': values}))
        self._write(self._start_row(range_), values)
        return {'spreadsheetId': self.spreadsheet_id, 'updatedRows': len(values)}

    def append_values(self, range_, values):
        self.calls.append(('append_values', {'range': range_, 'values': values}))
        start_row = len(self._trimmed()) + 1
        self._write(start_row, values)
        last_label = convert_cell_index_to_label(start_row + len(values) - 1,
                                                 max(len(values[-1]), 1))
        updated_range = "'{}'!A{}:{}".format(self.sheet_name, start_row, last_label)
        return {'spreadsheetId': self.spreadsheet_id,
                'updates': {'updatedRange': updated_range, 'updatedRows': len(values)}}

    def batch_update_values(self, data):
        self.calls.append(('batch_update_values', {'data': data}))
        for entry in data:
            self._write(self._start_row(entry['range']), entry['values'])
        return {'spreadsheetId': self.spreadsheet_id,
                'totalUpdatedRows': len(data),
                'responses': [{'updatedRange': entry['range']} for entry in data]}

    def batch_update(self, requests):
        self.calls.append(('batch_update', {'requests': requests}))
        for request in requests:
            dimension_range = request['deleteDimension']['range']
            assert dimension_range['sheetId'] == self.sheet_id
            del self.rows[dimension_range['startIndex']:dimension_range['endIndex']]
        return {'spreadsheetId': self.spreadsheet_id, 'replies': [{} for _ in requests]}

    def get_sheet_properties(self):
        self.calls.append(('get_sheet_properties', {}))
        return [{'sheetId': 0, 'title': 'Sheet1'},
                {'sheetId': self.sheet_id, 'title': self.sheet_name}]


@pytest.fixture
def people_rows():
    """
    A sheet with:
        - a header row of 4 columns
        - a short row (Mary has no Tags)
        - a multi-value cell ('John, Mark') and a near-miss value ('Johnny')
    """
    return [['Name', 'Age', 'Gender', 'Tags'],
            ['John', '22', 'Male', 'python, sql'],
            ['Mary', '25', 'Female'],
            ['John, Mark', '30', 'Male', 'Go'],
            ['Johnny', '40', 'Male', 'rust, python']]


@pytest.fixture
def fake_service(people_rows):
    return FakeSheetsService(rows=people_rows)


@pytest.fixture
def empty_service():
    return FakeSheetsService(rows=[])


@pytest.fixture
def clear_envvars(monkeypatch):
    """ Make sure a real $SHEETCRUD_CREDENTIALS_PATH does not leak into tests """
    monkeypatch.delenv('SHEETCRUD_CREDENTIALS_PATH', raising=False)


@pytest.fixture
def mock_sheet(clear_envvars, fake_service):
    return sheetcrud.SheetClient('xyz1234', 'People', service=fake_service)


@pytest.fixture
def empty_sheet(clear_envvars, empty_service):
    return sheetcrud.SheetClient('xyz1234', 'People', service=empty_service)
