from __future__ import annotations

from typing import Annotated, Any, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

AnnotationKind = Literal[
    "verb",
    "path",
    "produces",
    "consumes",
    "path_param",
    "query_param",
    "header_param",
    "form_param",
    "param",
    "request_line",
    "headers",
    "body",
    "expander",
]

_RECORD_ATTR = "__contract_annotations__"


class URI(str):
    """Parameter type marking a full URL override for the request."""


class ContractAnnotation(BaseModel):
    """
    Base for every recognized annotation.

    Instances double as decorators: applying one to a class or function records it
    on the target. Decorators run bottom-up, so each new one is prepended to keep
    the recorded order equal to the order they are written in.
    """

    model_config = ConfigDict(frozen=True)

    kind: AnnotationKind

    def __call__(self, target: Any) -> Any:
        recorded = list(vars(target).get(_RECORD_ATTR, ()))
        recorded.insert(0, self)
        setattr(target, _RECORD_ATTR, tuple(recorded))
        return target


def recorded_annotations(target: Any) -> tuple[ContractAnnotation, ...]:
    # only the target's own annotations, never a base class's
    try:
        return tuple(vars(target).get(_RECORD_ATTR, ()))
    except TypeError:
        return ()


class _Valued(ContractAnnotation):
    value: str

    def __init__(self, value: str = "", **data: Any) -> None:
        super().__init__(value=value, **data)


class _MultiValued(ContractAnnotation):
    values: tuple[str, ...] = ()

    def __init__(self, *values: str, **data: Any) -> None:
        super().__init__(values=values, **data)


# verb-per-annotation vocabulary


class HttpMethod(_Valued):
    kind: Literal["verb"] = "verb"


class Path(_Valued):
    kind: Literal["path"] = "path"


class Produces(_MultiValued):
    kind: Literal["produces"] = "produces"


class Consumes(_MultiValued):
    kind: Literal["consumes"] = "consumes"


class PathParam(_Valued):
    kind: Literal["path_param"] = "path_param"


class QueryParam(_Valued):
    kind: Literal["query_param"] = "query_param"


class HeaderParam(_Valued):
    kind: Literal["header_param"] = "header_param"


class FormParam(_Valued):
    kind: Literal["form_param"] = "form_param"


# request-line vocabulary


class RequestLine(_Valued):
    kind: Literal["request_line"] = "request_line"


class Param(_Valued):
    kind: Literal["param"] = "param"
    expander: Any = None


# shared by both vocabularies


class Headers(_MultiValued):
    kind: Literal["headers"] = "headers"


class Body(_Valued):
    kind: Literal["body"] = "body"


class Expander(ContractAnnotation):
    kind: Literal["expander"] = "expander"
    value: Any

    def __init__(self, value: Any, **data: Any) -> None:
        super().__init__(value=value, **data)


Annotation = Annotated[
    Union[
        HttpMethod,
        Path,
        Produces,
        Consumes,
        PathParam,
        QueryParam,
        HeaderParam,
        FormParam,
        RequestLine,
        Param,
        Headers,
        Body,
        Expander,
    ],
    Field(discriminator="kind"),
]


def http_method(name: str) -> HttpMethod:
    """Verb annotation for methods outside the predefined set, e.g. ``http_method("PATCH")``."""
    return HttpMethod(name.strip().upper())


GET = HttpMethod("GET")
POST = HttpMethod("POST")
PUT = HttpMethod("PUT")
DELETE = HttpMethod("DELETE")
PATCH = HttpMethod("PATCH")
HEAD = HttpMethod("HEAD")
OPTIONS = HttpMethod("OPTIONS")
