__all__ = ["ValidationException", "UserAlreadyExists", "RecordNotFound", "OrderNotFound",
           "InvalidStatusTransition", "StoreError"]


# Validations exceptions
class ValidationException(Exception):
    LEVEL = 'warning'


class UserAlreadyExists(Exception):
    LEVEL = 'warning'


# DynamoDB exceptions
class RecordNotFound(Exception):
    LEVEL = 'warning'


class StoreError(Exception):
    pass


# Order lifecycle exceptions
class OrderNotFound(Exception):
    LEVEL = 'warning'


class InvalidStatusTransition(Exception):
    LEVEL = 'warning'
