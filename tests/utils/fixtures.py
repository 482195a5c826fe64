import os

import pytest
from chalice.test import Client
from moto import mock_aws

from app import app
from chalicelib.utils import db

PROJECT_DIR = os.path.dirname(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# keep in sync with the "test" stage of .chalice/config.json
TEST_ENVIRON = {
    'AWS_ACCESS_KEY_ID': 'testing',
    'AWS_SECRET_ACCESS_KEY': 'testing',
    'AWS_SECURITY_TOKEN': 'testing',
    'AWS_SESSION_TOKEN': 'testing',
    'AWS_DEFAULT_REGION': 'eu-central-1',
    'AWS_REGION': 'eu-central-1',
    'GEN_TABLE_NAME': 'food-ordering-gen-test',
    'PASSWORD_HASH_ITERATIONS': '1000',
    'STRICT_STATUS_TRANSITIONS': 'true',
}


@pytest.fixture
def aws_environ(monkeypatch):
    for key, value in TEST_ENVIRON.items():
        monkeypatch.setenv(key, value)
    monkeypatch.delenv('ENDPOINT_URL', raising=False)


@pytest.fixture
def gen_table(aws_environ):
    with mock_aws():
        db.close_db()
        table = db.create_gen_table()
        yield table
        db.close_db()


@pytest.fixture
def chalice_client(gen_table):
    with Client(app, stage_name='test', project_dir=PROJECT_DIR) as client:
        yield client
