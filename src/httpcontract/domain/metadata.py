from __future__ import annotations

from types import MappingProxyType
from typing import Any, Mapping, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class RequestTemplate(BaseModel):
    model_config = ConfigDict(frozen=True, validate_default=True)

    method: Optional[str] = None
    url: str = ""
    headers: Mapping[str, tuple[Optional[str], ...]] = Field(default_factory=dict)
    queries: Mapping[str, tuple[Optional[str], ...]] = Field(default_factory=dict)
    body: Optional[bytes] = None
    body_template: Optional[str] = None

    @field_validator("headers", "queries")
    @classmethod
    def read_only_maps(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))

    def mentions(self, placeholder: str) -> bool:
        """True when the placeholder appears in the url, a query value or a header value."""
        if placeholder in self.url:
            return True
        for values in (*self.queries.values(), *self.headers.values()):
            if any(v is not None and placeholder in v for v in values):
                return True
        return False


class MethodMetadata(BaseModel):
    """
    Canonical, immutable description of one interface method.

    Produced once per method by ContractParser; the execution layer only reads it.
    """

    model_config = ConfigDict(frozen=True, validate_default=True)

    config_key: str                         # Interface#method(ParamType,...)
    template: RequestTemplate
    return_type: Any = None

    body_index: Optional[int] = None
    body_type: Any = None                   # never set alongside form params
    url_index: Optional[int] = None

    # read-only views; item assignment raises TypeError
    index_to_name: Mapping[int, tuple[str, ...]] = Field(default_factory=dict)
    form_params: tuple[str, ...] = ()
    index_to_expander: Mapping[int, Any] = Field(default_factory=dict)

    @field_validator("index_to_name", "index_to_expander")
    @classmethod
    def read_only_maps(cls, value: Mapping) -> Mapping:
        return MappingProxyType(dict(value))
