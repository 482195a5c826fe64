DEFAULT_GEN_TABLE_NAME = 'food-ordering-gen'
DEFAULT_REGION = 'eu-central-1'

DEFAULT_PASSWORD_HASH_ITERATIONS = 260000

# Order lifecycle, in transition order
ORDER_STATUS_PLACED = 'placed'
ORDER_STATUS_PREPARING = 'preparing'
ORDER_STATUS_COMPLETED = 'completed'
ORDER_STATUSES = (ORDER_STATUS_PLACED, ORDER_STATUS_PREPARING, ORDER_STATUS_COMPLETED)
