class SheetCrudException(Exception):
    """Base Exception for all other sheetcrud exceptions

    This is intended to make catching exceptions from this library easier.
    """


class ConfigurationError(SheetCrudException, ValueError):
    """ A required construction argument (spreadsheet ID or sheet name) is missing """


class InitializationError(SheetCrudException):
    """ Credentials could not be loaded or the Sheets service could not be built """


class ValidationError(SheetCrudException, ValueError):
    """ A row index or column key was rejected before any request was made """


class SheetNotFound(SheetCrudException, LookupError):
    """ Trying to resolve the ID of a non-existent sheet """


class TransportError(SheetCrudException):
    """A request to the Google Sheets API failed

    The original exception is chained as ``__cause__``. When the failure was an HTTP error
    its status code is available as ``status``.
    """
    def __init__(self, message, status=None):
        super(TransportError, self).__init__(message)
        self.status = status
