import os
import uuid
from typing import Tuple, Dict

from botocore.exceptions import ClientError
from chalice import Response
from werkzeug.security import generate_password_hash, check_password_hash

from chalicelib.base_class_entity import EntityBase, utc_now
from chalicelib.constants import keys_structure
from chalicelib.constants.constants import DEFAULT_PASSWORD_HASH_ITERATIONS
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import app as utils_app, data as utils_data, db as utils_db, exceptions
from chalicelib.utils.logger import logger


def password_hash_method() -> str:
    iterations = int(os.environ.get('PASSWORD_HASH_ITERATIONS', DEFAULT_PASSWORD_HASH_ITERATIONS))
    return f'pbkdf2:sha256:{iterations}'


class User(EntityBase):
    pk = keys_structure.users_pk
    sk = keys_structure.users_sk

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'email': lambda x: isinstance(x, str) and x != '',
        'password_hash': lambda x: isinstance(x, str),
        'date_created': lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'name_': lambda x: isinstance(x, str),
        'address': lambda x: isinstance(x, str)
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.name_ = kwargs.get('name_')
        self.email = kwargs.get('email')
        self.password_hash = kwargs.get('password_hash')
        self.address = kwargs.get('address')
        self.date_created = kwargs.get('date_created')
        self.record_type = 'user'

    @classmethod
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        request_body = utils_data.parse_raw_body(request)
        password = request_body.get('password')
        if not isinstance(password, str) or password == '':
            raise exceptions.ValidationException('Validation error occurred while validating the field=password')
        return cls(
            id_=str(uuid.uuid4()),
            name_=request_body.get('name'),
            email=request_body.get('email'),
            password_hash=generate_password_hash(password, method=password_hash_method()),
            address=request_body.get('address'),
            date_created=utc_now()
        )

    def create(self) -> Dict:
        """
        Stores the user together with a lock record for the email, so that a second
        registration with the same email fails without touching the first one
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        email_lock_record = {
            'partkey': keys_structure.users_emails_pk,
            'sortkey': keys_structure.users_emails_sk.format(email=self.email),
            'record_type': 'user_email',
            'user_id': self.id_
        }
        try:
            utils_db.transact_put_db_records([self.db_record, email_lock_record])
        except ClientError as error:
            logger.warning(f"create ::: user with email={self.email} already exists, code={utils_db.error_code(error)}")
            raise exceptions.UserAlreadyExists(f'User with email {self.email} already exists') from error
        logger.info(f"create ::: user {self.id_} successfully created")
        return self._to_ui()

    def check_password(self, password: str) -> bool:
        return check_password_hash(self.password_hash, password)

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(user_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'email': self.email,
            'password_hash': self.password_hash,
            'address': self.address,
            'date_created': self.date_created
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_create_user(request) -> Response:
    return Response(status_code=http201, body=User.init_request_create(request).create())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_user(user_id) -> Response:
    return Response(status_code=http200, body=User.init_by_id(user_id).to_ui())
