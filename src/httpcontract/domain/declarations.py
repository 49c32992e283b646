from __future__ import annotations

from typing import Any, Optional, Protocol

from pydantic import BaseModel, ConfigDict, Field

from httpcontract.domain.annotations import Annotation


class ParameterDecl(BaseModel):
    model_config = ConfigDict(frozen=True)

    index: int
    name: str = ""
    type_name: str = "object"   # raw type name, used in config keys
    type: Any = None            # declared (possibly generic) type, captured as body_type
    url_override: bool = False
    annotations: tuple[Annotation, ...] = ()


class MethodDecl(BaseModel):
    model_config = ConfigDict(frozen=True)

    name: str
    annotations: tuple[Annotation, ...] = ()
    parameters: tuple[ParameterDecl, ...] = ()
    return_type: Any = None


class InterfaceDecl(BaseModel):
    """
    Everything an AnnotationSource extracted from one interface, in declaration order.
    """

    model_config = ConfigDict(frozen=True)

    name: str                   # fully qualified, used in interface-level messages
    simple_name: str = ""       # used in config keys
    annotations: tuple[Annotation, ...] = ()
    methods: tuple[MethodDecl, ...] = Field(default_factory=tuple)
    type_parameters: tuple[str, ...] = ()
    bases: tuple[str, ...] = ()

    @property
    def key_name(self) -> str:
        return self.simple_name or self.name.rsplit(".", 1)[-1]

    def method(self, name: str) -> Optional[MethodDecl]:
        for m in self.methods:
            if m.name == name:
                return m
        return None


class AnnotationSource(Protocol):
    def describe(self, target: Any) -> InterfaceDecl:
        ...
