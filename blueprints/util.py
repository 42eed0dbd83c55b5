import json
import uuid
from collections.abc import Callable
from typing import Any

import marshmallow
from flask import Blueprint, Flask, Response, request
from flask.views import MethodView

from .errors import InvalidIdentifierError, ServiceError, ValidationError


def class_route(blp: Blueprint, rule: str, **kwargs: Any) -> Callable[[type[MethodView]], type[MethodView]]:  # noqa: ANN401
    def decorator(cls: type[MethodView]) -> type[MethodView]:
        blp.add_url_rule(rule, view_func=cls.as_view(cls.__name__), **kwargs)
        return cls

    return decorator


def json_response(data: Any, status: int) -> Response:  # noqa: ANN401
    return Response(json.dumps(data), status=status, mimetype='application/json')


def error_response(msg: str, code: int, **extra: Any) -> Response:  # noqa: ANN401
    return json_response({'code': code, 'message': msg, **extra}, code)


def validate_id(value: str, entity: str) -> str:
    try:
        uuid.UUID(value)
    except ValueError as err:
        raise InvalidIdentifierError(f'Invalid {entity} id', entity=entity) from err
    return value


def load_body(schema: marshmallow.Schema) -> dict[str, Any]:
    data = request.get_json(silent=True)
    if not isinstance(data, dict):
        raise ValidationError('Invalid JSON body')

    return schema.load(data)  # type: ignore[no-any-return]


def handle_service_error(err: ServiceError) -> Response:
    extra = {'kind': err.kind.value}
    conflict_on = getattr(err, 'conflict_on', None)
    if conflict_on is not None:
        extra['conflict_on'] = conflict_on

    return error_response(err.message, err.status_code, **extra)


def handle_schema_error(err: marshmallow.ValidationError) -> Response:
    return error_response('Invalid payload', 422, kind=ValidationError.kind.value, errors=err.messages)


def register_error_handlers(app: Flask) -> None:
    app.register_error_handler(ServiceError, handle_service_error)
    app.register_error_handler(marshmallow.ValidationError, handle_schema_error)
