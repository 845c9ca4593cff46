from fesghel.dao.mongo.short_url_mongo_dao import ShortURLMongoDAO
from fesghel.dao.mongo.mixins import MongoClientMixin


__all__ = [
    'ShortURLMongoDAO',
    'MongoClientMixin',
]
