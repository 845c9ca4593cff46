"""Unit tests for the shorten_url AWS Lambda handler.

Verify that the Lambda correctly handles incoming API Gateway events,
interacts with the DAO layer, and returns proper HTTP responses in both
success and error scenarios. The handler builds a real ShortURLMongoDAO
through the DAO factory; its MongoDB client is the in-memory double.

Test coverage includes:

1. Successful shortening
   - Ensures generated and caller-supplied keys are stored and returned (HTTP 200).
   - Ensures absent, empty and "-" names all mean "generate a key".
   - Ensures the unique index is built before storing.
   - Ensures every created short URL is counted.

2. Invalid requests
   - Ensures malformed JSON bodies return HTTP 400 INVALID_JSON_BODY.
   - Ensures missing or non-http(s) URLs return HTTP 400 INVALID_URL.
   - Ensures invalid names return HTTP 400 INVALID_NAME.
   - Ensures rejected requests are counted as validation errors.

3. Key collisions
   - Ensures a taken caller-supplied name returns HTTP 409 and never overwrites.
   - Ensures generated keys are regenerated on collision.
   - Ensures exhausting every attempt returns HTTP 500 KEY_SPACE_EXHAUSTED.
   - Ensures every collision is counted as a duplicate key error.

4. Server-side failures
   - Ensures configuration errors return HTTP 500.
   - Ensures data store failures return HTTP 500 DATA_STORE_ERROR.
   - Ensures data store failures are counted as database errors.
   - Ensures unexpected errors are turned into HTTP 500 responses.

Fixtures:
    - `apigw_event`: builds API Gateway events for a given JSON body.
    - `keys`: scripted sequence of generated keys.
    - `_patch_lambda_dependencies`: autouse fixture that monkeypatches app dependencies
                                    (config, MongoDB client and key generator) and
                                    records the DAO factory calls.
"""

import json

import pymongo.errors
import pytest

from fesghel.lambdas.shorten_url import app
from fesghel.dao import build_short_url_dao
from fesghel.exceptions import BadConfigurationError
from fesghel.utils.metrics import REGISTRY


# -------------------------------
# Fixtures
# -------------------------------


@pytest.fixture()
def apigw_event():
    def _event(body):
        return {
            'body': body if isinstance(body, str) or body is None else json.dumps(body),
            'resource': '/v1/shorten',
            'headers': {'User-Agent': 'pytest'},
            'httpMethod': 'POST',
            'path': '/v1/shorten',
            'requestContext': {
                'resourcePath': '/v1/shorten',
                'httpMethod': 'POST',
                'domainName': 'testhost:1000',
                'stage': 'test',
            },
        }

    return _event


@pytest.fixture()
def config():
    return {'mongo': {'address': 'mongodb://mongo.test:27017', 'name': 'fesghel'}}


@pytest.fixture()
def keys():
    """Keys handed out by the patched random_key(), in order."""
    return ['Gh71Wa']


@pytest.fixture(autouse=True)
def _patch_lambda_dependencies(monkeypatch, config, mongo_client, keys):
    generated = iter(keys)
    factory_calls = []

    def _build_short_url_dao(app_config, prefix=None):
        factory_calls.append((app_config, prefix))
        return build_short_url_dao(app_config, prefix=prefix)

    monkeypatch.setattr('fesghel.dao.mongo.mixins.AsyncMongoClient', lambda *args, **kwargs: mongo_client)
    monkeypatch.setattr(app, 'load_config', lambda: config)
    monkeypatch.setattr(app, 'build_short_url_dao', _build_short_url_dao)
    monkeypatch.setattr(app, 'random_key', lambda: next(generated))
    return factory_calls


def stored(urls_collection):
    return {d['key']: d['url'] for d in urls_collection.documents}


def sample(name: str, labels: dict | None = None) -> float:
    return REGISTRY.get_sample_value(name, labels) or 0.0


def errors(error_type: str) -> float:
    return sample('fesghel_errors_total', {'type': error_type})


# -------------------------------
# 1. Successful shortening
# -------------------------------


def test_lambda_handler_generated_key(apigw_event, urls_collection, mongo_client):
    """Ensure the Lambda stores the URL under a generated key and returns 200."""
    created_before = sample('fesghel_urls_created_total')

    response = app.lambda_handler(apigw_event({'url': 'https://example.com/blog/post'}), None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert response['headers']['Content-Type'] == 'application/json'
    assert body == {
        'message': 'Successfully shortened https://example.com/blog/post to https://testhost:1000/Gh71Wa',
        'url': 'https://example.com/blog/post',
        'key': 'Gh71Wa',
        'short_url': 'https://testhost:1000/Gh71Wa',
    }
    assert stored(urls_collection) == {'Gh71Wa': 'https://example.com/blog/post'}
    assert 'key_unique' in urls_collection.indexes
    assert mongo_client.closed
    assert sample('fesghel_urls_created_total') == created_before + 1


def test_lambda_handler_custom_name(apigw_event, urls_collection):
    response = app.lambda_handler(apigw_event({'url': 'http://example.com', 'name': 'my-link_1'}), None)
    body = json.loads(response['body'])

    assert response['statusCode'] == 200
    assert body['key'] == 'my-link_1'
    assert body['short_url'] == 'https://testhost:1000/my-link_1'
    assert stored(urls_collection) == {'my-link_1': 'http://example.com'}


@pytest.mark.parametrize('name', [None, '', '-'])
def test_lambda_handler_generates_key_for_empty_names(apigw_event, urls_collection, name):
    request = {'url': 'https://example.com'}
    if name is not None:
        request['name'] = name

    response = app.lambda_handler(apigw_event(request), None)

    assert response['statusCode'] == 200
    assert json.loads(response['body'])['key'] == 'Gh71Wa'


def test_lambda_handler_passes_app_prefix_to_factory(apigw_event, monkeypatch, config, _patch_lambda_dependencies):
    monkeypatch.setenv('APP_NAME', 'fesghel')
    monkeypatch.setenv('APP_ENV', 'dev')

    app.lambda_handler(apigw_event({'url': 'https://example.com'}), None)

    assert _patch_lambda_dependencies == [(config, 'fesghel:dev')]


# -------------------------------
# 2. Invalid requests
# -------------------------------


@pytest.mark.parametrize('body', ['{"invalid_json": true', '[1, 2, 3]', '"https://example.com"', 'null'])
def test_lambda_handler_invalid_json(apigw_event, urls_collection, body):
    """Ensure malformed or non-object JSON bodies return 400."""
    response = app.lambda_handler(apigw_event(body), None)

    assert response['statusCode'] == 400
    assert json.loads(response['body']) == {'message': 'Bad Request (invalid JSON body)', 'errorCode': 'INVALID_JSON_BODY'}
    assert urls_collection.insert_calls == 0


@pytest.mark.parametrize(
    'body',
    [
        None,
        {},
        {'url': ''},
        {'url': 42},
        {'url': 'example.com'},
        {'url': 'ftp://example.com/file'},
        {'url': 'javascript:alert(1)'},
        {'target_url': 'https://example.com'},
    ],
)
def test_lambda_handler_invalid_url(apigw_event, urls_collection, body):
    response = app.lambda_handler(apigw_event(body), None)

    assert response['statusCode'] == 400
    assert json.loads(response['body'])['errorCode'] == 'INVALID_URL'
    assert urls_collection.insert_calls == 0


@pytest.mark.parametrize('name', ['has space', 'slash/key', 'x' * 65, 'ünïcode', 42, ['abc']])
def test_lambda_handler_invalid_name(apigw_event, urls_collection, name):
    response = app.lambda_handler(apigw_event({'url': 'https://example.com', 'name': name}), None)

    assert response['statusCode'] == 400
    assert json.loads(response['body'])['errorCode'] == 'INVALID_NAME'
    assert urls_collection.insert_calls == 0


@pytest.mark.parametrize(
    'body',
    ['{"invalid_json": true', {'url': 'example.com'}, {'url': 'https://example.com', 'name': 'has space'}],
)
def test_lambda_handler_counts_validation_errors(apigw_event, body):
    validation_before = errors('validation')
    created_before = sample('fesghel_urls_created_total')

    assert app.lambda_handler(apigw_event(body), None)['statusCode'] == 400
    assert errors('validation') == validation_before + 1
    assert sample('fesghel_urls_created_total') == created_before


# -------------------------------
# 3. Key collisions
# -------------------------------


def test_lambda_handler_custom_name_taken(apigw_event, urls_collection):
    """Ensure a taken name returns 409 and keeps the existing mapping."""
    urls_collection.documents.append({'_id': 1, 'url': 'https://first.example', 'key': 'taken'})
    duplicates_before = errors('duplicate_key')

    response = app.lambda_handler(apigw_event({'url': 'https://second.example', 'name': 'taken'}), None)

    assert response['statusCode'] == 409
    assert json.loads(response['body']) == {'message': "Conflict (key 'taken' already exists)", 'errorCode': 'KEY_ALREADY_EXISTS'}
    assert stored(urls_collection) == {'taken': 'https://first.example'}
    assert urls_collection.insert_calls == 1
    assert errors('duplicate_key') == duplicates_before + 1


@pytest.mark.parametrize('keys', [['aaaaaa', 'bbbbbb', 'Gh71Wa']])
def test_lambda_handler_regenerates_colliding_keys(apigw_event, urls_collection, keys):
    """Ensure a generated key that collides is replaced by a fresh one."""
    urls_collection.documents.extend(
        [
            {'_id': 1, 'url': 'https://a.example', 'key': 'aaaaaa'},
            {'_id': 2, 'url': 'https://b.example', 'key': 'bbbbbb'},
        ]
    )

    response = app.lambda_handler(apigw_event({'url': 'https://c.example'}), None)

    assert response['statusCode'] == 200
    assert json.loads(response['body'])['key'] == 'Gh71Wa'
    assert urls_collection.insert_calls == 3
    assert stored(urls_collection) == {'aaaaaa': 'https://a.example', 'bbbbbb': 'https://b.example', 'Gh71Wa': 'https://c.example'}


@pytest.mark.parametrize('keys', [['aaaaaa'] * 10])
def test_lambda_handler_key_space_exhausted(apigw_event, urls_collection, keys):
    """Ensure generation gives up after MAX_KEY_ATTEMPTS collisions."""
    urls_collection.documents.append({'_id': 1, 'url': 'https://a.example', 'key': 'aaaaaa'})
    duplicates_before = errors('duplicate_key')

    response = app.lambda_handler(apigw_event({'url': 'https://c.example'}), None)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'KEY_SPACE_EXHAUSTED'
    assert urls_collection.insert_calls == app.MAX_KEY_ATTEMPTS == 5
    assert stored(urls_collection) == {'aaaaaa': 'https://a.example'}
    assert errors('duplicate_key') == duplicates_before + 5


# -------------------------------
# 4. Server-side failures
# -------------------------------


@pytest.mark.parametrize('error', [FileNotFoundError('config/local.yml'), BadConfigurationError('bad backend')])
def test_lambda_handler_configuration_error(apigw_event, monkeypatch, urls_collection, error):
    def _load_config():
        raise error

    monkeypatch.setattr(app, 'load_config', _load_config)

    response = app.lambda_handler(apigw_event({'url': 'https://example.com'}), None)

    assert response['statusCode'] == 500
    assert json.loads(response['body']) == {'message': 'Internal Server Error'}
    assert urls_collection.insert_calls == 0


def test_lambda_handler_data_store_unreachable(apigw_event, mongo_client):
    mongo_client.admin.error = pymongo.errors.ServerSelectionTimeoutError('No servers found')

    response = app.lambda_handler(apigw_event({'url': 'https://example.com'}), None)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'DATA_STORE_ERROR'
    assert mongo_client.closed


def test_lambda_handler_data_store_write_failure(apigw_event, urls_collection, mongo_client):
    """Ensure a failed insert is reported as 500, never as a collision."""

    async def _failing_insert(document):
        raise pymongo.errors.AutoReconnect('connection reset')

    urls_collection.insert_one = _failing_insert
    database_before = errors('database')

    response = app.lambda_handler(apigw_event({'url': 'https://example.com', 'name': 'my-link'}), None)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['errorCode'] == 'DATA_STORE_ERROR'
    assert mongo_client.closed
    assert errors('database') == database_before + 1


def test_lambda_handler_unexpected_error(apigw_event, monkeypatch):
    def _build_short_url_dao(app_config, prefix=None):
        raise RuntimeError('boom')

    monkeypatch.setattr(app, 'build_short_url_dao', _build_short_url_dao)

    response = app.lambda_handler(apigw_event({'url': 'https://example.com'}), None)

    assert response['statusCode'] == 500
    assert json.loads(response['body'])['error_code'] == 'UNKNOWN_INTERNAL_SERVER_ERROR'
