from datetime import datetime, timezone
from typing import Tuple, Dict, List

from botocore.exceptions import ClientError

from chalicelib.constants.substitute_keys import from_db
from chalicelib.utils import db as utils_db, exceptions
from chalicelib.utils.data import substitute_keys
from chalicelib.utils.logger import logger


def utc_now() -> str:
    return datetime.now(timezone.utc).isoformat(timespec='seconds')


class EntityBase:
    pk = None
    sk = None

    required_immutable_fields_validation = {}
    required_mutable_fields_validation = {}
    optional_fields_validation = {}

    def __init__(self, id_, **kwargs):
        self.id_: str = id_
        self.record_type: str = ''
        self.db_record: Dict = {}

    @classmethod
    def init_by_id(cls, id_):
        logger.info(f"init_by_id ::: {cls.__name__} {id_=}")
        c = cls(id_)
        c.__init__(**c._get_db_item())
        return c

    def _get_pk_sk(self) -> Tuple[str, str]:
        """
        Should be re-implemented in each child class
        :return:
        partkey, sortkey of db item for child
        """
        return self.pk, self.sk

    def _get_db_item(self) -> Dict:
        return utils_db.get_db_item(*self._get_pk_sk())

    def _to_dict(self) -> Dict:
        """
        Should be re-implemented in each child class
        :return:
        dict of item's attributes
        """
        return {
            'id_': self.id_,
            'record_type': self.record_type
        }

    def _init_db_record(self) -> None:
        """
        New DB record initialization
        :return:
        None
        """
        pk, sk = self._get_pk_sk()
        self.db_record = {
            'partkey': pk,
            'sortkey': sk,
            'record_type': self.record_type,
            **self._to_dict()
        }

    @staticmethod
    def _ui_name(key: str) -> str:
        return from_db.get(key) or key

    def _validate_mandatory_fields(self):
        """
        Validates mandatory fields if all fields have correct type to put to db
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        logger.info("validate_mandatory_fields ::: started")
        for key, validator_func in {
            **self.required_immutable_fields_validation,
            **self.required_mutable_fields_validation
        }.items():
            if validator_func(self.db_record.get(key)) is False:
                message = f'Validation error occurred while validating the field={self._ui_name(key)}'
                logger.warning(f"validate_mandatory_fields ::: {message}")
                raise exceptions.ValidationException(message)
        logger.info("validate_mandatory_fields ::: finished")

    def _validate_optional_fields(self):
        """
        Validates optional fields, only those which are set
        Raise ValidationException in case if a field is not valid
        :return:
        None
        """
        for key, validator_func in self.optional_fields_validation.items():
            value = self.db_record.get(key)
            if value is not None and validator_func(value) is False:
                message = f'Validation error occurred while validating the field={self._ui_name(key)}'
                logger.warning(f"validate_optional_fields ::: {message}")
                raise exceptions.ValidationException(message)

    def _create_db_record(self) -> None:
        """
        Creates entity db record
        :return:
        None
        """
        self._init_db_record()
        self._validate_mandatory_fields()
        self._validate_optional_fields()
        try:
            utils_db.put_db_record(self.db_record, condition_expression=utils_db.NOT_EXISTS_CONDITION)
        except ClientError as error:
            raise exceptions.StoreError(f'{self.record_type} {self.id_} already exists') from error
        logger.info(f"_create_db_record ::: {self.record_type=} {self.id_=} {self.db_record.get('partkey')=} "
                    f"{self.db_record.get('sortkey')=} successfully created")

    def _update_fields_whitelist(self) -> List:
        return [*self.required_mutable_fields_validation.keys(), *self.optional_fields_validation.keys()]

    def _to_ui(self) -> Dict:
        item = self._to_dict()
        substitute_keys(dict_to_process=item, base_keys=from_db)
        return item

    def to_ui(self) -> Dict:
        return self._to_ui()
