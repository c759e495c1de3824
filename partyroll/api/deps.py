"""
Request helpers shared by the routers.

``parse_body`` lets every write endpoint accept either a JSON document or an
HTML form post. Form values arrive as strings; list fields may repeat the
key, and structured fields (the recipient filter, notification preferences)
are sent as JSON strings.
"""
import json
import types
from dataclasses import dataclass
from typing import Any, Callable, TypeVar, Union, get_args, get_origin

from fastapi import Query, Request
from pydantic import BaseModel, ValidationError
from starlette.datastructures import FormData

from partyroll.core.config import settings
from partyroll.core.errors import ValidationFailed

T = TypeVar("T", bound=BaseModel)

FORM_CONTENT_TYPES = ("application/x-www-form-urlencoded", "multipart/form-data")


def _unwrap(annotation: Any) -> Any:
    """Strip Optional[...] and Annotated[...] down to the underlying type."""
    origin = get_origin(annotation)
    if origin in (Union, types.UnionType):
        args = [a for a in get_args(annotation) if a is not type(None)]
        return _unwrap(args[0]) if len(args) == 1 else annotation
    if origin is not None and hasattr(annotation, "__metadata__"):
        return _unwrap(get_args(annotation)[0])
    return annotation


def _field_kind(annotation: Any) -> str:
    annotation = _unwrap(annotation)
    origin = get_origin(annotation)
    if origin in (list, set, tuple):
        return "list"
    if origin is dict or annotation is dict:
        return "json"
    if isinstance(annotation, type) and issubclass(annotation, BaseModel):
        return "json"
    return "scalar"


def _decode_json(name: str, raw: str) -> Any:
    try:
        return json.loads(raw)
    except ValueError:
        raise ValidationFailed(details=[{"loc": [name], "msg": "Invalid JSON value", "type": "json_invalid"}])


def form_to_payload(form: FormData, schema: type[BaseModel]) -> dict[str, Any]:
    """Turn form fields into the dict ``schema`` expects. Blank fields are left out."""
    payload: dict[str, Any] = {}
    kinds = {name: _field_kind(field.annotation) for name, field in schema.model_fields.items()}

    for name in form.keys():
        values = [v for v in form.getlist(name) if isinstance(v, str) and v != ""]
        if not values:
            continue
        kind = kinds.get(name, "scalar")
        if kind == "list":
            if len(values) == 1 and values[0].lstrip().startswith("["):
                payload[name] = _decode_json(name, values[0])
            else:
                payload[name] = values
        elif kind == "json":
            payload[name] = _decode_json(name, values[0])
        else:
            payload[name] = values[-1]
    return payload


def parse_body(schema: type[T]) -> Callable:
    """Dependency factory: validate a JSON or form body against ``schema``."""

    async def dependency(request: Request) -> T:
        content_type = request.headers.get("content-type", "")
        if content_type.startswith(FORM_CONTENT_TYPES):
            payload: Any = form_to_payload(await request.form(), schema)
        else:
            body = await request.body()
            payload = _decode_json("body", body) if body.strip() else {}

        try:
            return schema.model_validate(payload)
        except ValidationError as exc:
            raise ValidationFailed(details=exc.errors(include_url=False, include_context=False))

    return dependency


@dataclass
class Pagination:
    page: int
    per_page: int


def pagination(
    page: int = Query(1, ge=1),
    perPage: int = Query(settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> Pagination:
    return Pagination(page=page, per_page=perPage)
