import functools
import os
from typing import Dict, List, Optional

import boto3
from botocore.config import Config
from botocore.exceptions import BotoCoreError, ClientError

from chalicelib.constants.constants import DEFAULT_GEN_TABLE_NAME, DEFAULT_REGION
from chalicelib.utils import exceptions
from chalicelib.utils.logger import logger, log_exception

# Errors the callers translate into domain exceptions themselves
CONDITIONAL_ERRORS = ('ConditionalCheckFailedException', 'TransactionCanceledException')
need_return_capacity = ('put_item', 'get_item', 'update_item', 'delete_item', 'query')

NOT_EXISTS_CONDITION = 'attribute_not_exists(partkey)'
EXISTS_CONDITION = 'attribute_exists(partkey)'

aws_config_ddb = Config(retries={'max_attempts': 3, 'mode': 'standard'},
                        region_name=os.environ.get('AWS_REGION', DEFAULT_REGION))

_DB = None
_TABLES: Dict[str, object] = {}


def error_code(error: Exception) -> str:
    if isinstance(error, ClientError):
        return error.response.get('Error', {}).get('Code', '')
    return ''


def db_call(func):
    """
        should be used for any atomic
        get/put/update/delete/query call in the code
    """

    @functools.wraps(func)
    def wrapper(*args, **kwargs):
        logger.debug(f'{func.__name__}:: args={args}, kwargs={kwargs}')
        if func.__name__ in need_return_capacity:
            kwargs.update({'ReturnConsumedCapacity': 'TOTAL'})
        try:
            result = func(*args, **kwargs)
        except ClientError as e:
            if error_code(e) in CONDITIONAL_ERRORS:
                logger.info(f'{func.__name__}:: condition failed, code={error_code(e)}')
                raise
            log_exception(e, status_code=500, msg=f'Got exception while trying to {func.__name__}: ')
            raise exceptions.StoreError(f'{func.__name__} failed: {e}') from e
        except BotoCoreError as e:
            log_exception(e, status_code=500, msg=f'Got exception while trying to {func.__name__}: ')
            raise exceptions.StoreError(f'{func.__name__} failed: {e}') from e
        logger.info(f'{func.__name__}:: SUCCESS')
        return result

    return wrapper


def get_dynamodb():
    """
    Process-wide DynamoDB resource, created on first use
    """
    global _DB
    if _DB is None:
        if os.environ.get('ENDPOINT_URL'):
            _DB = boto3.resource('dynamodb', endpoint_url=os.environ.get('ENDPOINT_URL'), config=aws_config_ddb)
        else:
            _DB = boto3.resource('dynamodb', config=aws_config_ddb)
        logger.info('get_dynamodb ::: DynamoDB resource created')
    return _DB


def close_db() -> None:
    global _DB
    if _DB is not None:
        _DB.meta.client.close()
        logger.info('close_db ::: DynamoDB client closed')
    _DB = None
    _TABLES.clear()


def get_table(table_name: str):
    if table_name not in _TABLES:
        gl_table = get_dynamodb().Table(table_name)

        gl_table.put_item = db_call(gl_table.put_item)
        gl_table.get_item = db_call(gl_table.get_item)
        gl_table.update_item = db_call(gl_table.update_item)
        gl_table.delete_item = db_call(gl_table.delete_item)
        gl_table.query = db_call(gl_table.query)

        _TABLES[table_name] = gl_table

    return _TABLES[table_name]


def get_gen_table_name() -> str:
    return os.environ.get('GEN_TABLE_NAME', DEFAULT_GEN_TABLE_NAME)


def get_gen_table():
    return get_table(get_gen_table_name())


def create_gen_table(table_name: Optional[str] = None):
    """
    Provision the generic table, for local development and tests
    """
    table_name = table_name or get_gen_table_name()
    table = get_dynamodb().create_table(
        TableName=table_name,
        KeySchema=[
            {'AttributeName': 'partkey', 'KeyType': 'HASH'},
            {'AttributeName': 'sortkey', 'KeyType': 'RANGE'}
        ],
        AttributeDefinitions=[
            {'AttributeName': 'partkey', 'AttributeType': 'S'},
            {'AttributeName': 'sortkey', 'AttributeType': 'S'}
        ],
        BillingMode='PAY_PER_REQUEST'
    )
    table.wait_until_exists()
    logger.info(f'create_gen_table ::: table {table_name} is ready')
    return table


def put_db_record(item: dict, condition_expression: Optional[str] = None, table=get_gen_table):
    kwargs = {'Item': item}
    if condition_expression:
        kwargs.update({'ConditionExpression': condition_expression})
    table().put_item(**kwargs)


def transact_put_db_records(items: List[dict], condition_expression: str = NOT_EXISTS_CONDITION,
                            table=get_gen_table):
    """
    Put all items in one transaction, each guarded by condition_expression.
    Raises ClientError with code TransactionCanceledException if any condition fails.
    """
    gen_table = table()
    transact_items = [
        {'Put': {'TableName': gen_table.name, 'Item': item, 'ConditionExpression': condition_expression}}
        for item in items
    ]
    db_call(gen_table.meta.client.transact_write_items)(TransactItems=transact_items)


def update_db_record(key: dict, update_body: dict, allowed_attrs_to_update: list,
                     allowed_attrs_to_delete: list, condition_expression: Optional[str] = None,
                     condition_values: Optional[dict] = None, return_values: str = 'UPDATED_NEW',
                     table=get_gen_table):
    set_expr, expr_attr_values, remove_expr = generate_update_expression(
        update_body=update_body,
        allowed_attrs_to_update=allowed_attrs_to_update,
        allowed_attrs_to_delete=allowed_attrs_to_delete
    )
    update_item_dict = {"Key": key, "ReturnValues": return_values}
    if condition_expression:
        update_item_dict.update({"ConditionExpression": condition_expression})

    set_response = None
    if set_expr:
        set_item_dict = {
            **update_item_dict,
            "UpdateExpression": set_expr,
            "ExpressionAttributeValues": {**expr_attr_values, **(condition_values or {})}
        }
        set_response = table().update_item(**set_item_dict)

    remove_response = None
    if remove_expr:
        remove_item_dict = {
            **update_item_dict,
            "UpdateExpression": remove_expr
        }
        if condition_values:
            remove_item_dict["ExpressionAttributeValues"] = condition_values
        remove_response = table().update_item(**remove_item_dict)

    return set_response, remove_response


def generate_update_expression(update_body: dict, allowed_attrs_to_update: list, allowed_attrs_to_delete: list):
    """
    Generate expressions to update and delete attributes.
    if a key of update_body is empty - the attribute is deleted, else - attribute is updated
    """
    expr_attr_values = {}
    set_expr = 'SET '
    remove_expr = 'REMOVE '
    return_value = [None, None, None]
    for field in allowed_attrs_to_update:
        field_value = update_body.get(field, None)
        if field_value is not None:
            # if field is in update_body but is equal to empty string, list etc. - delete field
            if field_value in ['', [], {}] and field in allowed_attrs_to_delete:
                remove_expr += f'{field}, '
            else:
                # if field is in update_body and has a real value - update field
                expr_attr_values[f':{field}'] = update_body.get(field)
                set_expr += f'{field}=:{field}, '
        else:
            continue

    if set_expr != 'SET ':
        return_value[0] = set_expr[:-2]
        return_value[1] = expr_attr_values

    if remove_expr != 'REMOVE ':
        return_value[2] = remove_expr[:-2]

    return return_value


def get_db_item(partkey, sortkey, table=get_gen_table):
    result = table().get_item(
        Key={
            'partkey': partkey,
            'sortkey': sortkey
        }
    )

    if 'Item' in result:
        return result['Item']
    else:
        logger.warning(f"get_db_item ::: record partkey={partkey} sortkey={sortkey} not found")
        raise exceptions.RecordNotFound(f'record partkey={partkey} sortkey={sortkey} not found')


def query_items_paginated(
        key_condition_expression,
        filter_expression=None,
        projection_expression=None,
        table=get_gen_table,
        index_name=None,
        expr_attr_names=None,
        limit=None,
        start_key=None
):
    kwargs = {'KeyConditionExpression': key_condition_expression}
    if filter_expression:
        kwargs.update({'FilterExpression': filter_expression})

    if projection_expression:
        kwargs.update({'ProjectionExpression': projection_expression})

    if expr_attr_names:
        kwargs.update({'ExpressionAttributeNames': expr_attr_names})

    if limit:
        kwargs.update({'Limit': int(limit)})

    if index_name:
        kwargs.update({'IndexName': index_name})

    if start_key:
        kwargs.update({'ExclusiveStartKey': start_key})

    resp = table().query(**kwargs)
    return resp['Items'], resp.get('LastEvaluatedKey')


def query_items_paged(key_condition_expression, filter_expression=None, projection_expression=None,
                      table=get_gen_table, index_name=None, expr_attr_names=None):
    """ This method shall be used whenever you think the query will
        return more than 1mb of data at once"""
    all_items = []
    items, last_evaluated_key = query_items_paginated(
        key_condition_expression,
        filter_expression=filter_expression,
        projection_expression=projection_expression,
        table=table,
        index_name=index_name,
        expr_attr_names=expr_attr_names
    )
    all_items.extend(items)

    while last_evaluated_key is not None:
        items, last_evaluated_key = query_items_paginated(
            key_condition_expression,
            filter_expression=filter_expression,
            projection_expression=projection_expression,
            table=table,
            index_name=index_name,
            expr_attr_names=expr_attr_names,
            start_key=last_evaluated_key
        )
        all_items.extend(items)

    return all_items
