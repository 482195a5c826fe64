import pytest

from chalicelib.constants.status_codes import http500
from chalicelib.utils import db
from chalicelib.utils.exceptions import RecordNotFound, StoreError
from tests.utils.request_utils import make_request


def test_generate_update_expression():
    set_expr, expr_attr_values, remove_expr = db.generate_update_expression(
        update_body={'status_': 'preparing', 'comment_': '', 'unexpected': 'value'},
        allowed_attrs_to_update=['status_', 'comment_'],
        allowed_attrs_to_delete=['comment_']
    )

    assert set_expr == 'SET status_=:status_'
    assert expr_attr_values == {':status_': 'preparing'}
    assert remove_expr == 'REMOVE comment_'


def test_generate_update_expression_nothing_to_update():
    assert db.generate_update_expression({}, ['status_'], []) == [None, None, None]


@pytest.mark.local_db_test
def test_get_db_item_not_found(gen_table):
    with pytest.raises(RecordNotFound):
        db.get_db_item('orders', 'nonexistent-id')


@pytest.mark.local_db_test
def test_store_is_shared_between_calls(gen_table):
    assert db.get_dynamodb() is db.get_dynamodb()
    assert db.get_gen_table() is db.get_gen_table()


@pytest.mark.local_db_test
def test_missing_table_raises_store_error(gen_table, monkeypatch):
    monkeypatch.setenv('GEN_TABLE_NAME', 'missing-table')

    with pytest.raises(StoreError):
        db.get_db_item('orders', 'any-id')


@pytest.mark.local_db_test
def test_store_error_is_server_error(chalice_client):
    db.get_gen_table().delete()

    response = make_request(chalice_client, endpoint='/restaurants')

    assert response.status_code == http500
    assert response.json_body['exception'] == 'StoreError'
