"""
Annotation vocabularies.

A strategy turns one annotation (or the annotations of one parameter) into a
MetadataDelta. Hooks receive a frozen snapshot of the template built so far and
never mutate anything; the parser applies what they return.

Two vocabularies are supported and converge on the same MethodMetadata:
  - VerbAnnotationStrategy: @GET / @Path / @Produces / @Consumes, and
    PathParam / QueryParam / HeaderParam / FormParam on parameters
  - RequestLineStrategy: @RequestLine("POST /domains/{id}?x=1"), and Param
    on parameters
Headers, Body and Expander are understood by both.
"""

from __future__ import annotations

from typing import Iterable, Literal, Protocol

from httpcontract.contract.delta import EMPTY_DELTA, MetadataDelta
from httpcontract.contract.validation import require_first, require_value
from httpcontract.domain.annotations import ContractAnnotation
from httpcontract.domain.declarations import InterfaceDecl
from httpcontract.domain.metadata import RequestTemplate
from httpcontract.errors import EmptyAnnotationValue, EmptyPathOnMethod, EmptyPathOnType, UnsupportedAnnotation

Style = Literal["auto", "verb", "request-line"]

ACCEPT = "Accept"
CONTENT_TYPE = "Content-Type"
CONTENT_LENGTH = "Content-Length"

_PARAM_LABELS = {
    "path_param": "PathParam",
    "query_param": "QueryParam",
    "header_param": "HeaderParam",
    "form_param": "FormParam",
}


class HttpAnnotationStrategy(Protocol):
    name: str

    def on_interface_annotation(
        self, template: RequestTemplate, annotation: ContractAnnotation, interface_name: str
    ) -> MetadataDelta:
        ...

    def on_method_annotation(
        self, template: RequestTemplate, annotation: ContractAnnotation, method_name: str
    ) -> MetadataDelta:
        ...

    def on_parameter_annotations(
        self, template: RequestTemplate, index: int, annotations: Iterable[ContractAnnotation]
    ) -> MetadataDelta:
        ...


def _unsupported(strategy: str, annotation: ContractAnnotation, where: str) -> UnsupportedAnnotation:
    return UnsupportedAnnotation(
        f"{type(annotation).__name__} is not part of the {strategy} vocabulary; found on {where}"
    )


def _placeholder(name: str) -> str:
    return "{" + name + "}"


def headers_delta(lines: tuple[str, ...], where: str) -> MetadataDelta:
    """Header lines of the form "Name: value"; each line adds one more value under its name."""
    message = f"Headers annotation was empty on {where}."
    if not lines:
        raise EmptyAnnotationValue(message)

    out = []
    for line in lines:
        name, colon, value = line.partition(":")
        if not colon:
            raise EmptyAnnotationValue(f"Headers annotation on {where} has no ':' in line {line!r}.")
        out.append((require_value(name, message).strip(), value.strip()))
    return MetadataDelta(add_headers=tuple(out))


def body_delta(value: str, method_name: str) -> MetadataDelta:
    # taken byte-for-byte: no trimming
    body = require_value(value, f"Body annotation was empty on method {method_name}.")
    if "{" in body:
        return MetadataDelta(body_template=body)
    payload = body.encode("utf-8")
    return MetadataDelta(body=payload, set_headers=((CONTENT_LENGTH, str(len(payload))),))


def expander_delta(annotation: ContractAnnotation, index: int) -> MetadataDelta:
    if annotation.value is None:
        raise EmptyAnnotationValue(f"Expander.value() was empty on parameter {index}")
    return MetadataDelta(expander=annotation.value)


class VerbAnnotationStrategy:
    """One verb annotation per method plus separate Path / Produces / Consumes."""

    name = "verb"

    def on_interface_annotation(self, template, annotation, interface_name):
        kind = annotation.kind
        if kind == "path":
            value = require_value(
                annotation.value, f"Path.value() was empty on {interface_name}", EmptyPathOnType
            )
            return MetadataDelta(path=value)
        if kind == "produces":
            value = require_first(annotation.values, f"Produces.value() was empty on method {interface_name}")
            return MetadataDelta(set_headers=((ACCEPT, value),))
        if kind == "consumes":
            value = require_first(annotation.values, f"Consumes.value() was empty on method {interface_name}")
            return MetadataDelta(set_headers=((CONTENT_TYPE, value),))
        if kind == "headers":
            return headers_delta(annotation.values, f"type {interface_name}")
        raise _unsupported(self.name, annotation, interface_name)

    def on_method_annotation(self, template, annotation, method_name):
        kind = annotation.kind
        if kind == "verb":
            value = require_value(annotation.value, f"HttpMethod.value() was empty on method {method_name}")
            return MetadataDelta(method=value)
        if kind == "path":
            value = require_value(
                annotation.value, f"Path.value() was empty on {method_name}", EmptyPathOnMethod
            )
            return MetadataDelta(path=value)
        if kind == "produces":
            value = require_first(annotation.values, f"Produces.value() was empty on method {method_name}")
            return MetadataDelta(set_headers=((ACCEPT, value),))
        if kind == "consumes":
            value = require_first(annotation.values, f"Consumes.value() was empty on method {method_name}")
            return MetadataDelta(set_headers=((CONTENT_TYPE, value),))
        if kind == "headers":
            return headers_delta(annotation.values, f"method {method_name}")
        if kind == "body":
            return body_delta(annotation.value, method_name)
        raise _unsupported(self.name, annotation, f"method {method_name}")

    def on_parameter_annotations(self, template, index, annotations):
        delta = EMPTY_DELTA
        for annotation in annotations:
            kind = annotation.kind
            if kind == "expander":
                delta = delta.merge(expander_delta(annotation, index))
                continue
            if kind not in _PARAM_LABELS:
                raise _unsupported(self.name, annotation, f"parameter {index}")

            name = require_value(
                annotation.value, f"{_PARAM_LABELS[kind]}.value() was empty on parameter {index}"
            )
            if kind == "path_param":
                step = MetadataDelta(names=(name,), http_param=True)
            elif kind == "query_param":
                step = MetadataDelta(add_queries=((name, _placeholder(name)),), names=(name,), http_param=True)
            elif kind == "header_param":
                step = MetadataDelta(add_headers=((name, _placeholder(name)),), names=(name,), http_param=True)
            else:
                step = MetadataDelta(form_params=(name,), names=(name,), http_param=True)
            delta = delta.merge(step)
        return delta


class RequestLineStrategy:
    """A single "VERB /path?query" literal per method, Param on parameters."""

    name = "request-line"

    def on_interface_annotation(self, template, annotation, interface_name):
        if annotation.kind == "headers":
            return headers_delta(annotation.values, f"type {interface_name}")
        raise _unsupported(self.name, annotation, interface_name)

    def on_method_annotation(self, template, annotation, method_name):
        kind = annotation.kind
        if kind == "request_line":
            line = require_value(
                annotation.value, f"RequestLine annotation was empty on method {method_name}."
            )
            return self._request_line(line)
        if kind == "headers":
            return headers_delta(annotation.values, f"method {method_name}")
        if kind == "body":
            return body_delta(annotation.value, method_name)
        raise _unsupported(self.name, annotation, f"method {method_name}")

    def on_parameter_annotations(self, template, index, annotations):
        delta = EMPTY_DELTA
        for annotation in annotations:
            if annotation.kind == "expander":
                delta = delta.merge(expander_delta(annotation, index))
                continue
            if annotation.kind != "param":
                raise _unsupported(self.name, annotation, f"parameter {index}")

            name = require_value(annotation.value, f"Param annotation was empty on param {index}.")
            # names not substituted anywhere in the template are form fields
            form = () if template.mentions(_placeholder(name)) else (name,)
            delta = delta.merge(
                MetadataDelta(names=(name,), form_params=form, expander=annotation.expander, http_param=True)
            )
        return delta

    @staticmethod
    def _request_line(line: str) -> MetadataDelta:
        parts = line.strip().split(None, 1)
        if len(parts) == 1:
            return MetadataDelta(method=parts[0])

        verb, path = parts
        tokens = path.rsplit(None, 1)
        if len(tokens) == 2 and tokens[1].upper().startswith("HTTP/"):
            path = tokens[0]
        return MetadataDelta(method=verb, path=path.strip())


STRATEGIES: dict[str, type] = {
    VerbAnnotationStrategy.name: VerbAnnotationStrategy,
    RequestLineStrategy.name: RequestLineStrategy,
}


def select_strategy(decl: InterfaceDecl, style: Style = "auto") -> HttpAnnotationStrategy:
    """
    Pick the vocabulary an interface is written in. "auto" chooses the request-line
    style as soon as any method carries a RequestLine annotation.
    """
    if style != "auto":
        return STRATEGIES[style]()
    for method in decl.methods:
        if any(a.kind == "request_line" for a in method.annotations):
            return RequestLineStrategy()
    return VerbAnnotationStrategy()
