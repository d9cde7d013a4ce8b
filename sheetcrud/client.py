from collections import OrderedDict
from collections.abc import Mapping
import json
import logging
import os

from google.auth.exceptions import GoogleAuthError
from google.oauth2 import service_account
import google_auth_httplib2
from googleapiclient import discovery
from googleapiclient import errors as api_errors
import httplib2
import pandas as pd

from sheetcrud import exceptions, helpers
from sheetcrud.service import SheetsService

logger = logging.getLogger(__name__)

DEFAULT_CREDENTIALS_PATH = './credentials.json'
CREDENTIALS_PATH_ENVVAR = 'SHEETCRUD_CREDENTIALS_PATH'
SCOPES = ('https://www.googleapis.com/auth/spreadsheets',)


class SheetClient(object):
    def __init__(self, spreadsheet_id, sheet_name, credentials_path=None, service=None):
        """Create an authenticated client for row-level CRUD on one sheet of a spreadsheet

        Row 1 of the sheet is treated as a header row; its cells name the columns that the
        row-level methods of this class read and write by key.

        Args:
            spreadsheet_id (str): The ID of the spreadsheet, as found in its URL

            sheet_name (str): The name (title) of the sheet within the spreadsheet

            credentials_path (str): Path to a service account key file. If omitted, the path
                at ``$SHEETCRUD_CREDENTIALS_PATH`` is used, falling back to
                ``./credentials.json``. The sheet must be shared with the service account.

            service (sheetcrud.service.SheetsService): An already-authenticated service to use
                instead of loading credentials. Primarily a testing vehicle
        """
        if not spreadsheet_id:
            raise exceptions.ConfigurationError('ID of spreadsheet is required')
        if not sheet_name:
            raise exceptions.ConfigurationError('Name of sheet in your spreadsheet is required')

        self.spreadsheet_id = spreadsheet_id
        self.sheet_name = sheet_name
        self.credentials_path = os.path.expanduser(
            credentials_path
            or os.environ.get(CREDENTIALS_PATH_ENVVAR)
            or DEFAULT_CREDENTIALS_PATH
        )
        self.email = None

        if service is None:
            service = self._authenticate()
        self._service = service

    @classmethod
    def create(cls, spreadsheet_id, sheet_name, credentials_path=None):
        """Create a ready-to-use client

        Args:
            spreadsheet_id (str): The ID of the spreadsheet
            sheet_name (str): The name of the sheet within the spreadsheet
            credentials_path (str): Optional path to a service account key file

        Returns:
            sheetcrud.SheetClient: An authenticated client
        """
        return cls(spreadsheet_id, sheet_name, credentials_path=credentials_path)

    def __repr__(self):
        msg = "<{module}.{name}(spreadsheet_id='{spreadsheet_id}', sheet_name='{sheet_name}')>"
        return msg.format(module=self.__class__.__module__,
                          name=self.__class__.__name__,
                          spreadsheet_id=self.spreadsheet_id,
                          sheet_name=self.sheet_name)

    @property
    def service(self):
        """ Property for the SheetsService all requests go through """
        return self._service

    @property
    def url(self):
        """ Property for the URL of the spreadsheet """
        return 'https://docs.google.com/spreadsheets/d/{}'.format(self.spreadsheet_id)

    def _authenticate(self):
        """Exchange the service account key file for an authenticated SheetsService

        Returns:
            sheetcrud.service.SheetsService: A service scoped to spreadsheet read/write
        """
        try:
            with open(self.credentials_path) as f:
                keyfile_dict = json.load(f)
            if not isinstance(keyfile_dict, Mapping):
                raise ValueError('expected a JSON object, got {}'.format(
                    type(keyfile_dict).__name__))

            credentials = service_account.Credentials.from_service_account_info(
                keyfile_dict, scopes=SCOPES)
            http = google_auth_httplib2.AuthorizedHttp(credentials, http=httplib2.Http())
            # Bind sheets_svc directly to .spreadsheets() as the API exposes no other functionality
            sheets_svc = discovery.build('sheets', 'v4', http=http,
                                         cache_discovery=False).spreadsheets()
        except (OSError, ValueError, KeyError, GoogleAuthError,
                api_errors.Error, httplib2.HttpLib2Error) as e:
            msg = 'Error loading credentials from {}: {}'.format(self.credentials_path, e)
            raise exceptions.InitializationError(msg) from e

        self.email = keyfile_dict.get('client_email')  # used for logging
        logger.debug('Authenticated as %s for spreadsheet %s', self.email, self.spreadsheet_id)
        return SheetsService(self.spreadsheet_id, sheets_svc)

    def _fetch_rows(self):
        """Fetch the sheet's value range and split it into headers and rows

        Returns:
            tuple: (headers, rows) where rows includes the header row at position 0, so that
            ``rows[n - 1]`` is logical row ``n``. Both are empty lists for an empty sheet
        """
        rows = self._service.get_values(helpers._build_range(self.sheet_name))
        if not rows:
            return [], []

        headers = list(rows[0])
        helpers._check_headers(headers)
        return headers, rows

    def _fetch_sheet_id(self):
        """ Return the numeric sheetId of the configured sheet, which is distinct from its name """
        for properties in self._service.get_sheet_properties():
            if properties.get('title') == self.sheet_name:
                return properties['sheetId']

        msg = "Sheet '{}' not found in spreadsheet {}"
        raise exceptions.SheetNotFound(msg.format(self.sheet_name, self.spreadsheet_id))

    @staticmethod
    def _make_row_dict(headers, row):
        return OrderedDict(zip(headers, helpers._resize_row(row, len(headers))))

    def find_row(self, query, fmt='dict'):
        """Find rows by position or by column values

        Args:
            query (int or dict): Either a 1-based row position (which may not be 1, the header
                row) or a dict mapping column names to the values to look for. For string
                values a cell matches when any of its comma-separated parts equals the value,
                ignoring case and surrounding whitespace, so ``{'Name': 'john'}`` matches a cell
                of ``'John, Mark'`` but not ``'Johnny'``. Other values must be equal.

            fmt (str): The format in which to return the matches. Accepted values: 'dict', 'df'

        Returns:
            When fmt='dict' --> list of dicts in sheet order, e.g.::

                [{'row_index': 2, 'data': {header1: cell1, header2: cell2}},
                 ...]

            When fmt='df' --> pandas.DataFrame with one row per match, indexed by row_index

            Positions beyond the last row and empty sheets give no matches.
        """
        if fmt not in ('dict', 'df'):
            raise ValueError("Unexpected value '{}' for parameter `fmt`. "
                             "Accepted values are 'dict' and 'df'".format(fmt))

        if isinstance(query, Mapping):
            helpers._check_keys(query.keys())
        else:
            query = helpers._check_row_index(query)

        with helpers._translate_transport_errors('finding row'):
            headers, rows = self._fetch_rows()

        results = []
        if rows and isinstance(query, Mapping):
            columns = {key: headers.index(key) if key in headers else None for key in query}
            for position, row in enumerate(rows[1:], start=2):
                matches = True
                for key, value in query.items():
                    col = columns[key]
                    if col is None:
                        matches = False
                        break
                    cell = row[col] if col < len(row) else None
                    if not helpers._matches_cell(cell, value):
                        matches = False
                        break
                if matches:
                    results.append({'row_index': position,
                                    'data': self._make_row_dict(headers, row)})
        elif rows and query <= len(rows):
            results.append({'row_index': query,
                            'data': self._make_row_dict(headers, rows[query - 1])})

        if fmt == 'dict':
            return results

        if not results:
            return pd.DataFrame([])
        index = pd.Index([r['row_index'] for r in results], name='row_index')
        return pd.DataFrame(data=[list(r['data'].values()) for r in results],
                            columns=headers, index=index)

    def add_row(self, row_data):
        """Append a row, creating or extending the header row as needed

        If the sheet is empty the keys of `row_data` become the header row. If `row_data`
        names columns the header row lacks, they are appended to it and the header row is
        rewritten together with all existing rows before the new row is appended.

        Args:
            row_data (dict): Column name to cell value. Keys must start with an uppercase
                letter. Columns not supplied are left empty

        Returns:
            dict: ``{'row_index': int, 'row_data': row_data}`` where row_index is the 1-based
            position the new row was written to
        """
        helpers._check_row_data(row_data)
        if not row_data:
            raise exceptions.ValidationError('row_data must contain at least one column')

        sheet_range = helpers._build_range(self.sheet_name)

        with helpers._translate_transport_errors('adding row'):
            headers, rows = self._fetch_rows()

            if not rows:
                headers = list(row_data.keys())
                self._service.update_values(sheet_range, [headers])
                logger.info('Created header row %s in sheet %s', headers, self.sheet_name)
            else:
                new_columns = [key for key in row_data if key not in headers]
                if new_columns:
                    headers.extend(new_columns)
                    # Columns are positional, so every existing row is rewritten alongside
                    # the extended header row
                    self._service.update_values(sheet_range, [headers] + rows[1:])
                    logger.info('Extended header row of sheet %s with %s',
                                self.sheet_name, new_columns)

            values = [helpers._clean_value(row_data.get(header)) for header in headers]
            response = self._service.append_values(sheet_range, [values])
            try:
                row_index = helpers._parse_updated_row(response['updates']['updatedRange'])
            except (KeyError, TypeError, ValueError) as e:
                msg = 'Error adding row: unexpected append reply {!r}'.format(response)
                raise exceptions.TransportError(msg) from e

        logger.info('Added row %d to sheet %s', row_index, self.sheet_name)
        return {'row_index': row_index, 'row_data': row_data}

    def update_row(self, row_indexes, row_data):
        """Overwrite the named columns of one or more rows

        Only the columns present in `row_data` are sent; every other cell of the written range
        is left as None, which the API skips, so untouched cells keep their values, formulas
        and formatting. Keys with no matching header column are ignored.

        Args:
            row_indexes (int or list): One 1-based row position or a list of them. Row 1 (the
                header row) may not be targeted

            row_data (dict): Column name to new cell value. Keys must start with an uppercase
                letter

        Returns:
            dict: The raw response of the Sheets API values.batchUpdate call
        """
        indexes = helpers._normalize_row_indexes(row_indexes)
        helpers._check_row_data(row_data)

        with helpers._translate_transport_errors('updating row'):
            headers, _ = self._fetch_rows()

            unknown = [key for key in row_data if key not in headers]
            if unknown:
                logger.warning('Ignoring columns not present in the header row of sheet %s: %s',
                               self.sheet_name, unknown)

            # Cells left as None are skipped by the API, so untouched columns are never rewritten
            width = max(len(headers), 1)
            patch = [None] * width
            for key, value in row_data.items():
                if key in headers:
                    patch[headers.index(key)] = helpers._clean_value(value)

            data = []
            for row_index in indexes:
                label = 'A{}:{}'.format(row_index,
                                        helpers.convert_cell_index_to_label(row_index, width))
                data.append({'range': helpers._build_range(self.sheet_name, label),
                             'values': [list(patch)]})

            result = self._service.batch_update_values(data)

        logger.info('Updated rows %s of sheet %s', indexes, self.sheet_name)
        return result

    def delete_row(self, row_indexes):
        """Delete one or more rows, shifting the rows below them up

        Rows are deleted from the bottom up so that each position still refers to the row it
        named when the call was made.

        Args:
            row_indexes (int or list): One 1-based row position or a list of them

        Returns:
            dict: ``{'count_of_deleted_rows': int}``, taken from the number of replies
        """
        indexes = helpers._normalize_row_indexes(row_indexes, allow_header=True)
        indexes = sorted(set(indexes), reverse=True)

        with helpers._translate_transport_errors('deleting row'):
            sheet_id = self._fetch_sheet_id()
            requests = [{'deleteDimension': {
                            'range': {
                                'sheetId': sheet_id,
                                'dimension': 'ROWS',
                                'startIndex': index - 1,
                                'endIndex': index
                                }
                            }
                         } for index in indexes]
            result = self._service.batch_update(requests)

        count = len(result.get('replies', []))
        logger.info('Deleted %d rows from sheet %s', count, self.sheet_name)
        return {'count_of_deleted_rows': count}

    def convert_google_drive_link(self, url):
        """ See sheetcrud.helpers.convert_google_drive_link """
        return helpers.convert_google_drive_link(url)
