"""
Parking API — Declarative Request Validation
=============================================

What:  Turns a Pydantic model into a FastAPI dependency that validates the
       query string, and normalizes Pydantic errors into field-level messages.
Why:   Every 400 response has one shape, `{"errors": [{field, message}]}`,
       whether the problem is in the query string or the JSON body.
How:   `validate_query(Model)` reads `request.query_params`, runs
       `Model.model_validate`, and on failure raises ValidationError carrying
       ALL errors Pydantic found. FastAPI's own RequestValidationError (bodies,
       path params) is converted with the same `format_errors` helper in main.py.

Why a dependency instead of typed Query(...) parameters:
    Dependencies run in declaration order. Declaring the auth dependencies on
    the route and the validator on the handler means authenticate → authorize
    → validate, so an anonymous caller gets 401 before any 400. Typed query
    parameters would be validated after every dependency and reported as 422.
"""

from typing import Any, Callable, Dict, Iterable, List, Type, TypeVar

from fastapi import Request
from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from parking_api.exceptions import ValidationError

ModelT = TypeVar("ModelT", bound=BaseModel)

# Leading loc segments FastAPI adds to say where a value came from
_LOCATION_PREFIXES = {"body", "query", "path", "header", "cookie"}


def _field_name(loc: Iterable[Any]) -> str | None:
    parts = [str(p) for p in loc]
    if parts and parts[0] in _LOCATION_PREFIXES:
        parts = parts[1:]
    return ".".join(parts) or None


def _message(error: Dict[str, Any]) -> str:
    # ValueErrors raised by our own validators carry the exact user message;
    # Pydantic prefixes msg with "Value error, " so read it from ctx instead.
    if error.get("type") == "value_error":
        ctx_error = (error.get("ctx") or {}).get("error")
        if ctx_error is not None:
            return str(ctx_error)
    if error.get("type") == "missing":
        return "Field required"
    return error.get("msg", "Invalid value")


def format_errors(errors: Iterable[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Convert Pydantic/FastAPI error dicts into `{field, message}` entries."""
    return [
        {"field": _field_name(error.get("loc", ())), "message": _message(error)}
        for error in errors
    ]


def validate_query(model: Type[ModelT]) -> Callable[[Request], Any]:
    """
    Build a dependency that validates the query string against `model`.

    Usage:
        @router.get("/revenue", dependencies=[Depends(authorize_admin)])
        async def revenue(query: RevenueQuery = Depends(validate_query(RevenueQuery))):
            ...

    Raises (from the dependency):
        ValidationError: with every violated constraint listed.
    """

    async def dependency(request: Request) -> ModelT:
        params = dict(request.query_params)
        try:
            return model.model_validate(params)
        except PydanticValidationError as e:
            raise ValidationError(
                errors=format_errors(e.errors()),
                context={"path": request.url.path},
            )

    dependency.__name__ = f"validate_{model.__name__}"
    return dependency
