from __future__ import annotations

import inspect
import typing
from typing import Annotated, Any, Iterable, get_args, get_origin

from httpcontract.domain.annotations import URI, ContractAnnotation, recorded_annotations
from httpcontract.domain.declarations import InterfaceDecl, MethodDecl, ParameterDecl

_TRIVIAL_BASES = (object, typing.Generic, typing.Protocol)


def _unwrap(hint: Any) -> tuple[Any, tuple[Any, ...]]:
    # Annotated[T, x, y] -> (T, (x, y))
    if get_origin(hint) is Annotated:
        args = get_args(hint)
        return args[0], tuple(args[1:])
    return hint, ()


def _type_name(tp: Any) -> str:
    if tp is None:
        return "object"
    raw = get_origin(tp) or tp
    return getattr(raw, "__name__", None) or str(raw)


def _iter_methods(cls: type) -> Iterable[tuple[str, Any]]:
    # inherited first, then the class itself, each in definition order
    for owner in reversed(cls.__mro__):
        if owner in _TRIVIAL_BASES:
            continue
        for name, value in vars(owner).items():
            if name.startswith("_") or not inspect.isfunction(value):
                continue
            yield name, value


class ClassAnnotationSource:
    """
    Reads annotations off a plain Python class:

        @Path("/repos")
        class GitHub:
            @GET
            @Path("/{owner}/{repo}/contributors")
            def contributors(self, owner: Annotated[str, PathParam("owner")],
                             repo: Annotated[str, PathParam("repo")]) -> list: ...

    Class and method annotations are the ones applied as decorators; parameter
    annotations come from typing.Annotated metadata or from a default value that is
    itself an annotation. Static and class methods and _private names are skipped.
    """

    def describe(self, target: Any) -> InterfaceDecl:
        if not inspect.isclass(target):
            raise TypeError(f"expected a class, got {target!r}")

        type_parameters = tuple(
            getattr(tv, "__name__", str(tv)) for tv in getattr(target, "__parameters__", ())
        )
        bases = tuple(b.__qualname__ for b in target.__bases__ if b not in _TRIVIAL_BASES)

        return InterfaceDecl(
            name=f"{target.__module__}.{target.__qualname__}",
            simple_name=target.__name__,
            annotations=recorded_annotations(target),
            methods=tuple(self._describe_method(name, fn) for name, fn in _iter_methods(target)),
            type_parameters=type_parameters,
            bases=bases,
        )

    def _describe_method(self, name: str, fn: Any) -> MethodDecl:
        hints = typing.get_type_hints(fn, include_extras=True)
        signature = inspect.signature(fn)

        # the first parameter is the instance
        params = list(signature.parameters.values())[1:]

        parameters = []
        for index, p in enumerate(params):
            hint = hints.get(p.name)
            declared, extras = _unwrap(hint)
            annotations = [a for a in extras if isinstance(a, ContractAnnotation)]
            if isinstance(p.default, ContractAnnotation):
                annotations.append(p.default)

            parameters.append(
                ParameterDecl(
                    index=index,
                    name=p.name,
                    type_name=_type_name(declared),
                    type=declared,
                    url_override=declared is URI,
                    annotations=tuple(annotations),
                )
            )

        return MethodDecl(
            name=name,
            annotations=recorded_annotations(fn),
            parameters=tuple(parameters),
            return_type=hints.get("return"),
        )
