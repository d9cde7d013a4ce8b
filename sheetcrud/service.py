"""
The narrow slice of the Google Sheets v4 API that sheetcrud depends on.

SheetClient never touches the googleapiclient resource directly; it goes through SheetsService,
whose methods each execute exactly one request. Tests substitute an in-memory object exposing
the same methods.
"""
import logging

logger = logging.getLogger(__name__)

VALUE_INPUT_OPTION = 'USER_ENTERED'


class SheetsService(object):
    def __init__(self, spreadsheet_id, sheets_svc):
        """Bind a Google Sheets discovery resource to a single spreadsheet

        Args:
            spreadsheet_id (str): The ID of the spreadsheet all requests are issued against
            sheets_svc (googleapiclient.discovery.Resource): The ``spreadsheets()`` collection
                of a Google Sheets v4 service
        """
        self.spreadsheet_id = spreadsheet_id
        self.sheets_svc = sheets_svc

    def __repr__(self):
        msg = "<{module}.{name}(spreadsheet_id='{spreadsheet_id}')>"
        return msg.format(module=self.__class__.__module__,
                          name=self.__class__.__name__,
                          spreadsheet_id=self.spreadsheet_id)

    def get_values(self, range_):
        """Read a value range

        Returns:
            list: A list of rows, each a list of cell values. Empty if the range holds no data
        """
        logger.debug('values.get %s', range_)
        response = self.sheets_svc.values().get(spreadsheetId=self.spreadsheet_id,
                                                range=range_).execute()
        return response.get('values', [])

    def update_values(self, range_, values):
        logger.debug('values.update %s (%d rows)', range_, len(values))
        body = {'values': values}
        return self.sheets_svc.values().update(spreadsheetId=self.spreadsheet_id, range=range_,
                                               valueInputOption=VALUE_INPUT_OPTION,
                                               body=body).execute()

    def append_values(self, range_, values):
        logger.debug('values.append %s (%d rows)', range_, len(values))
        body = {'values': values}
        return self.sheets_svc.values().append(spreadsheetId=self.spreadsheet_id, range=range_,
                                               valueInputOption=VALUE_INPUT_OPTION,
                                               body=body).execute()

    def batch_update_values(self, data):
        """Write several value ranges in one request

        Args:
            data (list): A list of dicts of the form ``{'range': ..., 'values': [[...]]}``

        Returns:
            dict: The raw BatchUpdateValuesResponse
        """
        logger.debug('values.batchUpdate (%d ranges)', len(data))
        body = {'valueInputOption': VALUE_INPUT_OPTION, 'data': data}
        return self.sheets_svc.values().batchUpdate(spreadsheetId=self.spreadsheet_id,
                                                    body=body).execute()

    def batch_update(self, requests):
        """Apply structural changes using Google Sheets' spreadsheets.batchUpdate method

        For the list of available request types see
        https://developers.google.com/sheets/api/reference/rest/v4/spreadsheets/request

        Args:
            requests (list): A list of requests, with each request provided as a dict

        Returns:
            dict: The raw BatchUpdateSpreadsheetResponse
        """
        logger.debug('spreadsheets.batchUpdate (%d requests)', len(requests))
        body = {'requests': requests}
        return self.sheets_svc.batchUpdate(spreadsheetId=self.spreadsheet_id,
                                           body=body).execute()

    def get_sheet_properties(self):
        """ Return the ``properties`` dict (sheetId, title) of every sheet in the spreadsheet """
        logger.debug('spreadsheets.get sheets/properties')
        response = self.sheets_svc.get(spreadsheetId=self.spreadsheet_id,
                                       fields='sheets/properties(sheetId,title)').execute()
        return [sheet['properties'] for sheet in response.get('sheets', [])]
