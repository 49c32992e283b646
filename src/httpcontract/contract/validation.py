from __future__ import annotations

from typing import Optional, Sequence

from httpcontract.domain.declarations import InterfaceDecl
from httpcontract.errors import (
    ConflictingHttpMethod,
    EmptyAnnotationValue,
    EmptyPathOnType,
    UnsupportedInterface,
)


def empty_to_none(value: Optional[str]) -> Optional[str]:
    if value is None or not value.strip():
        return None
    return value


def require_value(
    value: Optional[str],
    message: str,
    error: type[EmptyAnnotationValue] = EmptyAnnotationValue,
) -> str:
    """Return value unchanged, or raise `error` if it is missing or blank."""
    checked = empty_to_none(value)
    if checked is None:
        raise error(message)
    return checked


def require_first(values: Sequence[str], message: str) -> str:
    # Produces({}) and Produces({""}) both fail
    return require_value(values[0] if values else None, message)


def check_single_method(current: Optional[str], incoming: str, method_name: str) -> None:
    if current is not None:
        raise ConflictingHttpMethod(
            f"Method {method_name} contains multiple HTTP methods. Found: {current} and {incoming}"
        )


def check_interface(decl: InterfaceDecl) -> None:
    """Interface-wide checks, run before any method is processed."""
    if decl.type_parameters:
        raise UnsupportedInterface(f"Parameterized types unsupported: {decl.key_name}")
    if len(decl.bases) > 1:
        raise UnsupportedInterface(f"Only single inheritance supported: {decl.key_name}")
    for annotation in decl.annotations:
        if annotation.kind == "path":
            require_value(
                annotation.value,
                f"Path.value() was empty on {decl.name}",
                EmptyPathOnType,
            )
