"""
Functionality used elsewhere. Almost all of these functions are not intended to be utilized by
the end-user and are not exposed in the external API.
"""
from collections.abc import Mapping
import contextlib
import datetime as dt
import logging
import re

from google.auth.exceptions import GoogleAuthError
from googleapiclient import errors as api_errors
import httplib2
import numpy as np

from sheetcrud import exceptions

logger = logging.getLogger(__name__)

ASCII_CHAR_OFFSET = ord('A') - 1
NUMBER_OF_LETTERS_IN_ALPHABET = 26
HEADER_ROW_INDEX = 1

_DRIVE_FILE_ID_RE = re.compile(r'/d/([a-zA-Z0-9_-]+)')
_DRIVE_DIRECT_LINK = 'https://drive.google.com/uc?id={}'

# Everything a single round trip through googleapiclient may raise
_TRANSPORT_ERRORS = (api_errors.Error, httplib2.HttpLib2Error, GoogleAuthError, OSError)


def _build_range(sheet_name, label=None):
    """Build an A1-notation range for the given sheet

    The sheet name is always quoted so that names containing spaces or punctuation resolve.

    Args:
        sheet_name (str): The name of the sheet
        label (str): An optional cell label (e.g. 'A5') or range (e.g. 'A5:C5')

    Returns:
        str: The range, e.g. ``'My Sheet'!A5``
    """
    quoted = "'{}'".format(sheet_name.replace("'", "''"))
    if label is None:
        return quoted
    return '{}!{}'.format(quoted, label)


def _check_keys(keys):
    """Raise ValidationError for the first key not starting with an uppercase letter"""
    for key in keys:
        if not isinstance(key, str) or not key or not key[0].isupper():
            raise exceptions.ValidationError(
                'Key "{}" must start with an uppercase letter.'.format(key))


def _check_row_data(row_data):
    """Raise ValidationError unless row_data is a mapping of valid column keys"""
    if not isinstance(row_data, Mapping):
        raise exceptions.ValidationError(
            'row_data must be a mapping of column name to value, got {}'.format(
                type(row_data).__name__))
    _check_keys(row_data.keys())


def _check_headers(headers):
    """Raise ValidationError if any non-empty column name appears more than once"""
    seen = set()
    for name in headers:
        if name in ('', None):
            continue
        if name in seen:
            raise exceptions.ValidationError(
                'Duplicate column name "{}" in header row; column lookups would be '
                'ambiguous.'.format(name))
        seen.add(name)


def _check_row_index(row_index, allow_header=False):
    """Validate a single 1-based row position"""
    if isinstance(row_index, bool) or not isinstance(row_index, (int, np.integer)):
        raise exceptions.ValidationError(
            'Row index must be an integer, got {!r}'.format(row_index))
    if row_index < 1:
        raise exceptions.ValidationError('Row index must be >= 1, got {}'.format(row_index))
    if row_index == HEADER_ROW_INDEX and not allow_header:
        raise exceptions.ValidationError('Row index cannot be 1, because it is the header row.')
    return int(row_index)


def _normalize_row_indexes(row_indexes, allow_header=False):
    """Turn a single row position or a sequence of them into a validated list of ints"""
    if isinstance(row_indexes, (list, tuple, set, frozenset, range)):
        indexes = list(row_indexes)
    else:
        indexes = [row_indexes]

    if not indexes:
        raise exceptions.ValidationError('At least one row index must be provided')

    return [_check_row_index(i, allow_header=allow_header) for i in indexes]


def _clean_value(item):
    """Make a single cell value JSON serializable

    Datelike objects are converted to strings, None and NaN are converted to empty strings and
    numpy scalars are converted to their Python equivalents.
    """
    if item is None:
        return ''
    if isinstance(item, float) and np.isnan(item):
        return ''
    if isinstance(item, (dt.date, dt.datetime, dt.time)):
        return str(item)
    if isinstance(item, np.generic):
        return item.item()
    return item


def _get_column_letter(col_idx):
    """ Convert a column number into a label, e.g. 3 -> C, 27 -> AA, 53 -> BA, etc. """
    quotient, remainder = divmod(col_idx, NUMBER_OF_LETTERS_IN_ALPHABET)
    if remainder == 0:
        quotient -= 1
        remainder = NUMBER_OF_LETTERS_IN_ALPHABET
    suffix = chr(remainder + ASCII_CHAR_OFFSET)
    if quotient == 0:
        return suffix

    return _get_column_letter(quotient) + suffix


def _matches_cell(cell_value, query_value):
    """Decide whether a cell satisfies one term of a mapping query

    When both sides are strings the cell is treated as a comma-separated tag list and the
    comparison is case-insensitive; otherwise strict equality is required.
    """
    if isinstance(cell_value, str) and isinstance(query_value, str):
        tags = [part.strip().lower() for part in cell_value.split(',')]
        return query_value.lower() in tags
    return cell_value == query_value


def _parse_updated_row(updated_range):
    """Return the first row number of a range returned by the API

    Example:
        >>> _parse_updated_row("'Sheet1'!A5:C5")
        5
    """
    cells = updated_range.rsplit('!', 1)[-1]
    first_cell = cells.split(':')[0]
    row, _ = convert_cell_label_to_index(first_cell)
    return row


def _resize_row(array, new_len):
    """Alter the size of a list to match a specified length

    If the list is too long, trim it. If it is too short, pad it with Nones

    Args:
        array (list): The data set to pad or trim
        new_len (int): The desired length for the data set

    Returns:
        list: A copy of the input `array` that has been extended or trimmed
    """
    current_len = len(array)
    if current_len > new_len:
        return array[:new_len]
    else:
        padding = [None] * (new_len - current_len)
        return list(array) + padding


@contextlib.contextmanager
def _translate_transport_errors(action):
    """Re-raise any failure of the underlying API call as a TransportError

    Args:
        action (str): What was being attempted, e.g. 'adding row'. Used in the message
    """
    try:
        yield
    except _TRANSPORT_ERRORS as e:
        resp = getattr(e, 'resp', None)
        status = getattr(resp, 'status', None)
        raise exceptions.TransportError('Error {}: {}'.format(action, e), status=status) from e


def convert_cell_index_to_label(row, col):
    """Convert two cell indexes to a string address

    Args:
        row (int): The cell row number, starting from 1
        col (int): The cell column number, starting from 1

    Note that Google Sheets starts both the row and col indexes at 1.

    Example:
        >>> sheetcrud.convert_cell_index_to_label(1, 1)
        A1
        >>> sheetcrud.convert_cell_index_to_label(10, 40)
        AN10

    Returns:
        str: The cell reference as an address (e.g. 'B6')
    """
    row = int(row)
    col = int(col)

    if row < 1 or col < 1:
        raise ValueError('Row and column values must be >= 1')

    column_label = _get_column_letter(col)
    return '{}{}'.format(column_label, row)


def convert_cell_label_to_index(label):
    """Convert a cell label in string form into one based cell indexes of the form (row, col).

    Args:
        label (str): The cell label in string form

    Note that Google Sheets starts both the row and col indexes at 1.

    Example:
        >>> sheetcrud.convert_cell_label_to_index('A1')
        (1, 1)
        >>> sheetcrud.convert_cell_label_to_index('AN10')
        (10, 40)

    Returns:
        tuple: The cell reference in (row_int, col_int) form
    """
    if not isinstance(label, str):
        raise ValueError('Input must be a string')

    # Split out the letters from the numbers
    match = re.match(r'^([A-Za-z]+)([1-9]\d*)$', label)

    if not match:
        raise ValueError('Unable to parse user-provided label')

    column_label = match.group(1).upper()
    row = int(match.group(2))

    col = 0
    for c in column_label:
        col = col * NUMBER_OF_LETTERS_IN_ALPHABET + (ord(c) - ASCII_CHAR_OFFSET)

    return (row, col)


def convert_google_drive_link(url):
    """Convert a Google Drive share link into a direct content link

    Example:
        >>> sheetcrud.convert_google_drive_link('https://drive.google.com/file/d/ABC123/view')
        'https://drive.google.com/uc?id=ABC123'

    Args:
        url (str): A Google Drive share link

    Returns:
        str: The direct link, or `url` unchanged if it is not a string or holds no file ID
    """
    if not isinstance(url, str):
        logger.warning('Invalid URL provided. Expected a string, but got: %r', url)
        return url

    match = _DRIVE_FILE_ID_RE.search(url)
    if match:
        return _DRIVE_DIRECT_LINK.format(match.group(1))

    logger.warning('No Google Drive file ID found in the provided URL: %s', url)
    return url
