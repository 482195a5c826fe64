import json
from typing import Optional

from chalice.test import Client


def make_request(chalice_client: Client, endpoint: str = '/', method: str = 'GET',
                 json_body=None, raw_body: Optional[str] = None):
    """Request to the app through the chalice test client"""
    kwargs = {'headers': {'Content-Type': 'application/json'}}
    if raw_body is not None:
        kwargs['body'] = raw_body
    elif json_body is not None:
        kwargs['body'] = json.dumps(json_body)
    return chalice_client.http.request(method=method, path=endpoint, **kwargs)
