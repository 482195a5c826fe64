from decimal import Decimal

import pytest

from chalicelib.orders import calculate_total_amount, validate_items, validate_status, validate_status_transition
from chalicelib.utils.exceptions import ValidationException, InvalidStatusTransition


def test_total_amount_pizza_and_soda():
    items = [
        {'itemName': 'Pizza', 'price': 10, 'quantity': 2},
        {'itemName': 'Soda', 'price': 2, 'quantity': 3}
    ]
    assert calculate_total_amount(items) == Decimal(26)


def test_total_amount_empty_order_is_zero():
    assert calculate_total_amount([]) == Decimal(0)


def test_total_amount_keeps_decimal_precision():
    items = [{'itemName': 'Candy', 'price': 0.1, 'quantity': 3}]
    assert calculate_total_amount(items) == Decimal('0.3')


def test_total_amount_accepts_negative_values():
    items = [
        {'itemName': 'Burger', 'price': Decimal('18.50'), 'quantity': 1},
        {'itemName': 'Discount', 'price': Decimal('-3.50'), 'quantity': 1}
    ]
    assert calculate_total_amount(items) == Decimal('15.00')


def test_validate_items_keeps_known_fields_only():
    items = validate_items([{'itemName': 'Pizza', 'price': 10, 'quantity': 2, 'extra': 'x'}])
    assert items == [{'itemName': 'Pizza', 'price': Decimal(10), 'quantity': Decimal(2)}]


@pytest.mark.parametrize('items', [
    None,
    'Pizza',
    ['Pizza'],
    [{'price': 10, 'quantity': 2}],
    [{'itemName': 'Pizza', 'price': '10', 'quantity': 2}],
    [{'itemName': 'Pizza', 'price': 10}],
    [{'itemName': 'Pizza', 'price': 10, 'quantity': True}],
    [{'itemName': 'Pizza', 'price': float('nan'), 'quantity': 1}],
    [{'itemName': 'Pizza', 'price': Decimal('Infinity'), 'quantity': 1}],
])
def test_validate_items_rejects_malformed_lines(items):
    with pytest.raises(ValidationException):
        validate_items(items)


@pytest.mark.parametrize('status', ['cancelled', '', 'PLACED', None, 1])
def test_validate_status_rejects_unknown_values(status):
    with pytest.raises(ValidationException):
        validate_status(status)


@pytest.mark.parametrize('current_status, new_status', [
    ('placed', 'placed'),
    ('placed', 'preparing'),
    ('preparing', 'completed'),
    ('completed', 'completed'),
])
def test_forward_transitions_are_allowed(current_status, new_status):
    validate_status_transition(current_status, new_status)


@pytest.mark.parametrize('current_status, new_status', [
    ('preparing', 'placed'),
    ('completed', 'preparing'),
    ('completed', 'placed'),
    ('placed', 'completed'),
])
def test_backward_or_skipping_transitions_are_rejected(current_status, new_status):
    with pytest.raises(InvalidStatusTransition):
        validate_status_transition(current_status, new_status)


def test_permissive_transitions_allow_any_known_status():
    validate_status_transition('completed', 'placed', strict=False)
    with pytest.raises(ValidationException):
        validate_status_transition('completed', 'cancelled', strict=False)
