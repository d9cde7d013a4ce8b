"""
Convenience functions to simplify common end-user tasks like opening a sheet

These can be imported accessed directly from the sheetcrud module, e.g.::

    import sheetcrud
    sheet = sheetcrud.create({'spreadsheet_id': my_id, 'sheet_name': 'People'})
"""
from sheetcrud import exceptions
from sheetcrud.client import SheetClient


def create(config):
    """Create a ready-to-use SheetClient from a configuration mapping

    Args:
        config (dict): A mapping with the keys:

            spreadsheet_id (str): The ID of the spreadsheet (required)

            sheet_name (str): The name of the sheet within the spreadsheet (required)

            credentials_path (str): Path to a service account key file. Defaults to
                ``$SHEETCRUD_CREDENTIALS_PATH`` or ``./credentials.json``

    Returns:
        sheetcrud.SheetClient: An authenticated client
    """
    if config is None:
        raise exceptions.ConfigurationError('A configuration mapping is required')

    return SheetClient.create(
        spreadsheet_id=config.get('spreadsheet_id'),
        sheet_name=config.get('sheet_name'),
        credentials_path=config.get('credentials_path'),
    )
