"""API Gateway (Lambda Proxy) response builders shared by the lambda handlers."""

import json

from fesghel.types import LambdaResponse


def _error_body(base: str, message: str | None, error_code: str | None) -> str:
    body = {'message': base if not message else f'{base} ({message})'}
    if error_code:
        body['errorCode'] = error_code
    return json.dumps(body)


def response_200(body: dict) -> LambdaResponse:
    return {
        'statusCode': 200,
        'headers': {'Content-Type': 'application/json'},
        'body': json.dumps(body),
    }


def response_204() -> LambdaResponse:
    return {'statusCode': 204, 'body': ''}


def response_307(*, location: str) -> LambdaResponse:
    return {
        'statusCode': 307,
        'headers': {'Location': location},
        'body': json.dumps({}),  # no body needed for redirects
    }


def response_400(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {'statusCode': 400, 'body': _error_body('Bad Request', message, error_code)}


def response_404(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {'statusCode': 404, 'body': _error_body('Not Found', message, error_code)}


def response_409(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {'statusCode': 409, 'body': _error_body('Conflict', message, error_code)}


def response_500(message: str | None = None, error_code: str | None = None) -> LambdaResponse:
    return {'statusCode': 500, 'body': _error_body('Internal Server Error', message, error_code)}
