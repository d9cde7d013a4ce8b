"""
sheetcrud is a library for row-level create, read, update and delete operations on a single
sheet of a Google Spreadsheet. The first row of the sheet is treated as a header row naming the
columns, so rows can be read and written as dicts. It is built on top of Google's
google-api-python-client and google-auth libraries using the Google Sheets v4 REST API.
Further details on these libraries and APIs can be found here:

    google-api-python-client: https://github.com/googleapis/google-api-python-client
    google-auth: https://github.com/googleapis/google-auth-library-python
    Sheets v4: https://developers.google.com/sheets/api/reference/rest/
"""
from sheetcrud import exceptions
from sheetcrud.client import SheetClient
from sheetcrud.convenience import create
from sheetcrud.helpers import (convert_cell_index_to_label, convert_cell_label_to_index,
                               convert_google_drive_link)
from sheetcrud.service import SheetsService

__all__ = (
    'SheetClient',
    'SheetsService',
    '__version__',
    'convert_cell_index_to_label',
    'convert_cell_label_to_index',
    'convert_google_drive_link',
    'create',
    'exceptions',
)

__version__ = '0.1.0'
