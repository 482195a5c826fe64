import pytest

from chalicelib.constants.status_codes import http200, http201, http400, http404
from tests.utils.request_utils import make_request

restaurant_to_create = {
    'name': 'Pizza Place',
    'address': 'Time Square, New York',
    'cuisine': 'Italian',
    'rating': 4.5,
    'menu': [
        {'itemName': 'Pizza', 'price': 10},
        {'itemName': 'Soda', 'price': 2.5}
    ]
}


def create_test_restaurant(chalice_client, restaurant=None):
    response = make_request(chalice_client, endpoint='/restaurants', method='POST',
                            json_body=restaurant or restaurant_to_create)
    assert response.status_code == http201
    return response.json_body


@pytest.mark.local_db_test
def test_create_restaurant(chalice_client):
    response_body = create_test_restaurant(chalice_client)

    assert response_body['id']
    assert response_body['name'] == 'Pizza Place'
    assert response_body['address'] == 'Time Square, New York'
    assert response_body['cuisine'] == 'Italian'
    assert response_body['rating'] == 4.5
    assert response_body['menu'] == restaurant_to_create['menu']


@pytest.mark.local_db_test
def test_create_restaurant_without_menu(chalice_client):
    response_body = create_test_restaurant(chalice_client, {'name': 'Empty Kitchen'})

    assert response_body['menu'] == []
    assert response_body['rating'] is None


@pytest.mark.local_db_test
@pytest.mark.parametrize('restaurant', [
    {'address': 'No name street'},
    {'name': 'Bad rating', 'rating': 'five'},
    {'name': 'NaN rating', 'rating': float('nan')},
    {'name': 'Bad menu', 'menu': 'pizza'},
])
def test_create_restaurant_validation_error(chalice_client, restaurant):
    response = make_request(chalice_client, endpoint='/restaurants', method='POST', json_body=restaurant)

    assert response.status_code == http400
    assert response.json_body['exception'] == 'ValidationException'


@pytest.mark.local_db_test
def test_get_restaurants_empty(chalice_client):
    response = make_request(chalice_client, endpoint='/restaurants')

    assert response.status_code == http200
    assert response.json_body == []


@pytest.mark.local_db_test
def test_get_restaurants(chalice_client):
    first = create_test_restaurant(chalice_client)
    second = create_test_restaurant(chalice_client, {'name': 'Sushi Bar', 'cuisine': 'Japanese'})

    response = make_request(chalice_client, endpoint='/restaurants')

    assert response.status_code == http200
    assert sorted(rest['id'] for rest in response.json_body) == sorted([first['id'], second['id']])


@pytest.mark.local_db_test
def test_get_restaurant_by_id(chalice_client):
    created = create_test_restaurant(chalice_client)

    response = make_request(chalice_client, endpoint=f"/restaurants/{created['id']}")

    assert response.status_code == http200
    assert response.json_body == created


@pytest.mark.local_db_test
def test_get_restaurant_not_found(chalice_client):
    response = make_request(chalice_client, endpoint='/restaurants/nonexistent-id')

    assert response.status_code == http404
    assert response.json_body['exception'] == 'RecordNotFound'
