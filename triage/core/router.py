"""Router with request injection and response serialization."""

import inspect
from collections.abc import Callable
from functools import wraps
from typing import Any

import orjson
from pydantic import BaseModel
from robyn import Request, Response, SubRouter, status_codes
from robyn.robyn import HttpMethod

JSON_HEADERS = {"content-type": "application/json"}
TEXT_HEADERS = {"content-type": "text/plain; charset=utf-8"}


def json_response(payload: Any, status_code: int = status_codes.HTTP_200_OK, headers: dict | None = None) -> Response:
    """Serialize a JSON-compatible payload into a Response."""
    return Response(
        status_code=status_code,
        headers={**JSON_HEADERS, **(headers or {})},
        description=orjson.dumps(payload).decode(),
    )


def text_response(text: str, status_code: int = status_codes.HTTP_200_OK, headers: dict | None = None) -> Response:
    return Response(status_code=status_code, headers={**TEXT_HEADERS, **(headers or {})}, description=text)


def parse_response(result: Any, headers: dict | None = None) -> Response:
    """Convert handler result to Response."""
    match result:
        case Response():
            return result
        case BaseModel():
            return Response(
                status_code=status_codes.HTTP_200_OK,
                headers={**JSON_HEADERS, **(headers or {})},
                description=result.model_dump_json(by_alias=True, indent=4),
            )
        case dict() | list():
            return json_response(result, headers=headers)
        case _:
            return text_response(str(result), headers=headers)


HTTP_METHODS = (
    HttpMethod.GET,
    HttpMethod.POST,
    HttpMethod.PUT,
    HttpMethod.DELETE,
    HttpMethod.PATCH,
    HttpMethod.HEAD,
    HttpMethod.OPTIONS,
)


def method_name(method: HttpMethod) -> str:
    return str(method).split(".")[-1].lower()


def _create_method_wrapper(original_method: Callable) -> Callable:
    @wraps(original_method)
    def method_wrapper(*args, **kwargs) -> Callable:
        decorator = original_method(*args, **kwargs)

        def handler_decorator(handler: Callable) -> Callable:
            sig = inspect.signature(handler)
            has_request_param = "request" in sig.parameters

            @wraps(handler)
            async def wrapped_handler(request: Request, **h_kwargs):
                # Pass request to handler only if it declared it
                if has_request_param:
                    h_kwargs["request"] = request

                result = await handler(**h_kwargs)
                return parse_response(result)

            # Robyn injects by signature, so request is always declared
            new_params = [inspect.Parameter("request", inspect.Parameter.POSITIONAL_OR_KEYWORD, annotation=Request)]
            new_params += [param for name, param in sig.parameters.items() if name != "request"]

            wrapped_handler.__signature__ = sig.replace(parameters=new_params)  # type: ignore[attr-defined]
            return decorator(wrapped_handler)

        return handler_decorator

    return method_wrapper


class Router(SubRouter):
    """SubRouter that serializes handler results and can bind one handler to many methods."""

    def __init__(self, *args, **kwargs) -> None:
        super().__init__(*args, **kwargs)
        self._wrap_methods()

    def _wrap_methods(self) -> None:
        """Wrap HTTP methods with response handling."""
        for method in HTTP_METHODS:
            name = method_name(method)
            if hasattr(self, name):
                setattr(self, name, _create_method_wrapper(getattr(self, name)))

    def any(self, endpoint: str, methods: tuple[HttpMethod, ...] = HTTP_METHODS) -> Callable:
        """Register one handler for several HTTP methods."""

        def decorator(handler: Callable) -> Callable:
            for method in methods:
                getattr(self, method_name(method))(endpoint)(handler)
            return handler

        return decorator
