import os
from decimal import Decimal
from typing import Tuple, List, Dict, Iterable
from uuid import uuid4

from botocore.exceptions import ClientError
from chalice import Response

from chalicelib.base_class_entity import EntityBase, utc_now
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import ORDER_STATUSES, ORDER_STATUS_PLACED
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import data as utils_data, db as utils_db, app as utils_app, exceptions
from chalicelib.utils.logger import logger


def calculate_total_amount(items: Iterable[Dict]) -> Decimal:
    """
    Sum of price * quantity over the order lines, no rounding applied.
    An empty order costs 0.
    """
    return sum(
        (utils_data.to_decimal(item['price']) * utils_data.to_decimal(item['quantity']) for item in items),
        Decimal(0)
    )


def validate_items(items) -> List[Dict]:
    """
    Checks the shape of order lines and keeps only the known fields.
    Negative prices and quantities are accepted.
    """
    if not isinstance(items, list):
        raise exceptions.ValidationException('items must be a list')
    clean_items = []
    for position, item in enumerate(items):
        if not isinstance(item, dict):
            raise exceptions.ValidationException(f'items[{position}] must be an object')
        if not isinstance(item.get('itemName'), str):
            raise exceptions.ValidationException(f'items[{position}].itemName must be a string')
        for field in ('price', 'quantity'):
            if not utils_data.is_number(item.get(field)):
                raise exceptions.ValidationException(f'items[{position}].{field} must be a number')
        clean_items.append({
            'itemName': item['itemName'],
            'price': utils_data.to_decimal(item['price']),
            'quantity': utils_data.to_decimal(item['quantity'])
        })
    return clean_items


def strict_status_transitions() -> bool:
    return os.environ.get('STRICT_STATUS_TRANSITIONS', 'true').lower() not in ('false', '0', 'no')


def validate_status(status) -> str:
    if not isinstance(status, str) or status not in ORDER_STATUSES:
        raise exceptions.ValidationException(f'status must be one of {list(ORDER_STATUSES)}, got {status!r}')
    return status


def validate_status_transition(current_status: str, new_status: str, strict: bool = True) -> None:
    """
    placed -> preparing -> completed, one step at a time.
    Re-applying the current status is allowed. With strict=False any known status may replace any other.
    """
    validate_status(new_status)
    if not strict or current_status not in ORDER_STATUSES:
        return
    step = ORDER_STATUSES.index(new_status) - ORDER_STATUSES.index(current_status)
    if step not in (0, 1):
        raise exceptions.InvalidStatusTransition(
            f'Order status can not be changed from {current_status} to {new_status}')


class Order(EntityBase):
    pk = keys_structure.orders_pk
    sk = keys_structure.orders_sk

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'user_id': lambda x: isinstance(x, str) and x != '',
        'restaurant_id': lambda x: isinstance(x, str) and x != '',
        'items': lambda x: isinstance(x, list),
        'total_amount': utils_data.is_number,
        'placed_at': lambda x: isinstance(x, str)
    }

    required_mutable_fields_validation = {
        'status_': lambda x: x in ORDER_STATUSES
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.user_id: str = kwargs.get('user_id')
        self.restaurant_id: str = kwargs.get('restaurant_id')
        self.items: List[Dict] = kwargs.get('items')
        self.total_amount: Decimal = kwargs.get('total_amount')
        self.status_: str = kwargs.get('status_', ORDER_STATUS_PLACED)
        self.placed_at: str = kwargs.get('placed_at')
        self.record_type = 'order'

    @classmethod
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        request_body = utils_data.parse_raw_body(request)
        return cls(
            id_=str(uuid4()),
            user_id=request_body.get('userId'),
            restaurant_id=request_body.get('restaurantId'),
            items=request_body.get('items')
        )

    def create(self) -> Dict:
        """
        Stores a new order: total is derived from the items once, status always starts as placed
        """
        if self.items is None:
            raise exceptions.ValidationException('items are required')
        self.items = validate_items(self.items)
        self.total_amount = calculate_total_amount(self.items)
        self.status_ = ORDER_STATUS_PLACED
        self.placed_at = utc_now()
        self._create_db_record()
        logger.info(f"create ::: order {self.id_} placed, total_amount={self.total_amount}")
        return self._to_ui()

    @classmethod
    def update_status(cls, order_id: str, new_status) -> Dict:
        """
        Replaces only the status of an existing order and returns the updated order.
        In strict mode the write only lands while the stored status is still the one
        the transition was checked against.
        """
        validate_status(new_status)
        strict = strict_status_transitions()
        condition_expression = utils_db.EXISTS_CONDITION
        condition_values = None
        if strict:
            current = cls._get_for_status_update(order_id)
            validate_status_transition(current.status_, new_status, strict=strict)
            condition_expression = f'{utils_db.EXISTS_CONDITION} AND status_ = :current_status'
            condition_values = {':current_status': current.status_}

        order = cls(order_id)
        pk, sk = order._get_pk_sk()
        try:
            response, _ = utils_db.update_db_record(
                key={'partkey': pk, 'sortkey': sk},
                update_body={'status_': new_status},
                allowed_attrs_to_update=order._update_fields_whitelist(),
                allowed_attrs_to_delete=[],
                condition_expression=condition_expression,
                condition_values=condition_values,
                return_values='ALL_NEW'
            )
        except ClientError:
            if not strict:
                raise exceptions.OrderNotFound(f'Order {order_id} not found')
            stored = cls._get_for_status_update(order_id)
            if stored.status_ == new_status:
                return stored._to_ui()
            logger.warning(f"update_status ::: order {order_id} status changed concurrently to {stored.status_}")
            raise exceptions.InvalidStatusTransition(
                f'Order status can not be changed from {stored.status_} to {new_status}')
        logger.info(f"update_status ::: order {order_id} status set to {new_status}")
        return cls(**response['Attributes'])._to_ui()

    @classmethod
    def _get_for_status_update(cls, order_id: str):
        try:
            return cls.init_by_id(order_id)
        except exceptions.RecordNotFound:
            raise exceptions.OrderNotFound(f'Order {order_id} not found')

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(order_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'user_id': self.user_id,
            'restaurant_id': self.restaurant_id,
            'items': self.items,
            'total_amount': self.total_amount,
            'status_': self.status_,
            'placed_at': self.placed_at
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_create_order(request) -> Response:
    order = Order.init_request_create(request)
    return Response(status_code=http201, body=order.create())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_order_by_id(order_id) -> Response:
    return Response(status_code=http200, body=Order.init_by_id(order_id).to_ui())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_update_order_status(request, order_id) -> Response:
    request_body = utils_data.parse_raw_body(request)
    if 'status' not in request_body:
        raise exceptions.ValidationException('status is required')
    return Response(status_code=http200, body=Order.update_status(order_id, request_body['status']))
