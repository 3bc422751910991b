from pymongo import MongoClient

from ..config import DB_NAME, MONGO_URI, SIGNALS_COLLECTION


def get_db(uri=MONGO_URI, db_name=DB_NAME):
    client = MongoClient(uri)
    return client[db_name]


def get_collection(uri=MONGO_URI, db_name=DB_NAME, name=SIGNALS_COLLECTION):
    return get_db(uri, db_name)[name]
