import pytest

import sheetcrud


def test_create(mocker):
    mocked_client = mocker.patch('sheetcrud.convenience.SheetClient')

    sheet = sheetcrud.convenience.create({'spreadsheet_id': 'xyz1234', 'sheet_name': 'People'})

    mocked_client.create.assert_called_once_with(spreadsheet_id='xyz1234', sheet_name='People',
                                                 credentials_path=None)
    assert sheet is mocked_client.create.return_value


def test_create_with_credentials_path(mocker):
    mocked_client = mocker.patch('sheetcrud.convenience.SheetClient')

    sheetcrud.create({'spreadsheet_id': 'xyz1234', 'sheet_name': 'People',
                      'credentials_path': '/tmp/key.json'})

    mocked_client.create.assert_called_once_with(spreadsheet_id='xyz1234', sheet_name='People',
                                                 credentials_path='/tmp/key.json')


@pytest.mark.parametrize('config', [None, {}, {'sheet_name': 'People'},
                                    {'spreadsheet_id': 'xyz1234'}])
def test_create_missing_configuration(mocker, config):
    mocked_authenticate = mocker.patch.object(sheetcrud.SheetClient, '_authenticate')

    with pytest.raises(sheetcrud.exceptions.ConfigurationError):
        sheetcrud.create(config)

    assert mocked_authenticate.call_count == 0
