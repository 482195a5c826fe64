from chalice import Chalice

from chalicelib import orders, restaurants, users
from chalicelib.utils.logger import logger, log_request

app = Chalice(app_name='food-ordering-backend')

app.debug = False


@app.middleware('http')
def request_id_middleware(event, get_response):
    logger.new_request_id()
    log_request(event)
    return get_response(event)


@app.route('/health-check', methods=['GET'], cors=True)
def health_check():
    return {'health': 'check'}


# USERS
@app.route('/users', methods=['POST'], cors=True)
def create_user():
    return users.endpoint_create_user(app.current_request)


@app.route('/users/{user_id}', methods=['GET'], cors=True)
def get_user_by_id(user_id):
    return users.endpoint_get_user(user_id)


# RESTAURANTS
@app.route('/restaurants', methods=['POST'], cors=True)
def create_restaurant():
    return restaurants.endpoint_create_restaurant(app.current_request)


@app.route('/restaurants', methods=['GET'], cors=True)
def get_restaurants():
    return restaurants.endpoint_get_all(app.current_request)


@app.route('/restaurants/{restaurant_id}', methods=['GET'], cors=True)
def get_restaurant_by_id(restaurant_id):
    return restaurants.endpoint_get_by_id(restaurant_id)


# ORDERS
@app.route('/orders', methods=['POST'], cors=True)
def create_order():
    """
    total amount is computed from the items, status always starts as placed
    """
    return orders.endpoint_create_order(app.current_request)


@app.route('/orders/{order_id}', methods=['GET'], cors=True)
def get_order_by_id(order_id):
    return orders.endpoint_get_order_by_id(order_id)


@app.route('/orders/{order_id}', methods=['PATCH'], cors=True)
def update_order_status(order_id):
    """
    only the status can be changed, body: {"status": "preparing"}
    """
    return orders.endpoint_update_order_status(app.current_request, order_id)
