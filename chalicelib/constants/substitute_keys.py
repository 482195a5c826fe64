# UI (camelCase) -> DB attribute names
to_db = {
    'id': 'id_',
    'name': 'name_',
    'status': 'status_',
    'userId': 'user_id',
    'restaurantId': 'restaurant_id',
    'totalAmount': 'total_amount',
    'placedAt': 'placed_at',
    'dateCreated': 'date_created'
}

# DB attribute names -> UI, keys mapped to None never leave the backend
from_db = {
    'partkey': None,
    'sortkey': None,
    'record_type': None,
    'password_hash': None,
    **{db_key: ui_key for ui_key, db_key in to_db.items()}
}
