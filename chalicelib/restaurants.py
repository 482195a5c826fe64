from typing import Tuple, List, Dict
from uuid import uuid4

from boto3.dynamodb.conditions import Key
from chalice import Response

from chalicelib.base_class_entity import EntityBase, utc_now
from chalicelib.constants import keys_structure
from chalicelib.constants.status_codes import http200, http201
from chalicelib.utils import data as utils_data, db as utils_db, app as utils_app
from chalicelib.utils.logger import logger


class Restaurant(EntityBase):
    pk = keys_structure.restaurants_pk
    sk = keys_structure.restaurants_sk

    required_immutable_fields_validation = {
        'id_': lambda x: isinstance(x, str),
        'name_': lambda x: isinstance(x, str) and x != '',
        'menu': lambda x: isinstance(x, list),
        "date_created": lambda x: isinstance(x, str)
    }

    optional_fields_validation = {
        'address': lambda x: isinstance(x, str),
        'cuisine': lambda x: isinstance(x, str),
        'rating': utils_data.is_number
    }

    def __init__(self, id_, **kwargs):
        EntityBase.__init__(self, id_, **kwargs)

        self.name_: str = kwargs.get('name_')
        self.address: str = kwargs.get('address')
        self.cuisine: str = kwargs.get('cuisine')
        self.rating = kwargs.get('rating')
        self.menu: list = kwargs.get('menu', [])
        self.date_created: str = kwargs.get('date_created') or utc_now()
        self.record_type = 'restaurant'

    @classmethod
    def init_request_create(cls, request):
        logger.info("init_request_create ::: started")
        request_body = utils_data.parse_raw_body(request)
        return cls(
            id_=str(uuid4()),
            name_=request_body.get('name'),
            address=request_body.get('address'),
            cuisine=request_body.get('cuisine'),
            rating=request_body.get('rating'),
            menu=request_body.get('menu', [])
        )

    @classmethod
    def get_all(cls) -> List[Dict]:
        restaurant_db_records: List[Dict] = utils_db.query_items_paged(
            Key('partkey').eq(keys_structure.restaurants_pk)
        )
        return [cls(**record).to_ui() for record in restaurant_db_records]

    def create(self) -> Dict:
        self._create_db_record()
        return self._to_ui()

    def _get_pk_sk(self) -> Tuple[str, str]:
        return self.pk, self.sk.format(restaurant_id=self.id_)

    def _to_dict(self):
        return {
            'id_': self.id_,
            'name_': self.name_,
            'address': self.address,
            'cuisine': self.cuisine,
            'rating': self.rating,
            'menu': self.menu,
            "date_created": self.date_created
        }


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_create_restaurant(request) -> Response:
    return Response(status_code=http201, body=Restaurant.init_request_create(request).create())


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_all(request) -> Response:
    restaurants = Restaurant.get_all()
    logger.info(f"endpoint_get_all ::: returning restaurants={[rest['id'] for rest in restaurants]}")
    return Response(status_code=http200, body=restaurants)


@utils_app.request_exception_handler
@utils_app.log_start_finish
def endpoint_get_by_id(restaurant_id) -> Response:
    restaurant = Restaurant.init_by_id(restaurant_id).to_ui()
    logger.info(f"endpoint_get_by_id ::: returning restaurant={restaurant['id']}")
    return Response(status_code=http200, body=restaurant)
