from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from httpcontract.contract.validation import check_single_method
from httpcontract.domain.metadata import MethodMetadata, RequestTemplate
from httpcontract.template.query import extract, merge_queries

HeaderValue = tuple[str, Optional[str]]


@dataclass(frozen=True)
class MetadataDelta:
    """
    Changes a strategy hook asks for. Hooks return deltas; only the builder mutates.
    """

    method: Optional[str] = None
    path: Optional[str] = None                      # appended, query part extracted
    add_headers: tuple[HeaderValue, ...] = ()       # accumulate onto existing values
    set_headers: tuple[tuple[str, str], ...] = ()   # replace existing values
    add_queries: tuple[HeaderValue, ...] = ()
    body: Optional[bytes] = None
    body_template: Optional[str] = None

    # parameter-level only
    names: tuple[str, ...] = ()
    form_params: tuple[str, ...] = ()
    expander: Any = None
    http_param: bool = False

    def merge(self, other: "MetadataDelta") -> "MetadataDelta":
        """Combine two parameter-level deltas for the same position, self first."""
        return MetadataDelta(
            add_headers=self.add_headers + other.add_headers,
            add_queries=self.add_queries + other.add_queries,
            names=self.names + other.names,
            form_params=self.form_params + other.form_params,
            expander=other.expander if other.expander is not None else self.expander,
            http_param=self.http_param or other.http_param,
        )


EMPTY_DELTA = MetadataDelta()


@dataclass
class MetadataBuilder:
    """Mutable per-method state for a single parsing pass; freeze() ends it."""

    config_key: str
    method_name: str
    return_type: Any = None
    decode_queries: bool = True

    method: Optional[str] = None
    url: str = ""
    headers: dict[str, tuple[Optional[str], ...]] = field(default_factory=dict)
    queries: dict[str, tuple[Optional[str], ...]] = field(default_factory=dict)
    body: Optional[bytes] = None
    body_template: Optional[str] = None

    body_index: Optional[int] = None
    body_type: Any = None
    url_index: Optional[int] = None
    index_to_name: dict[int, list[str]] = field(default_factory=dict)
    form_params: list[str] = field(default_factory=list)
    index_to_expander: dict[int, Any] = field(default_factory=dict)

    def snapshot(self) -> RequestTemplate:
        return RequestTemplate(
            method=self.method,
            url=self.url,
            headers=dict(self.headers),
            queries=dict(self.queries),
            body=self.body,
            body_template=self.body_template,
        )

    def apply(self, delta: MetadataDelta, index: Optional[int] = None) -> None:
        if delta.method is not None:
            check_single_method(self.method, delta.method, self.method_name)
            self.method = delta.method

        if delta.path is not None:
            self.url, entries = extract(self.url, delta.path, decode=self.decode_queries)
            self.queries = merge_queries(self.queries, entries)

        for name, value in delta.add_headers:
            self.headers[name] = self.headers.get(name, ()) + (value,)
        for name, value in delta.set_headers:
            self.headers[name] = (value,)
        for name, value in delta.add_queries:
            self.queries[name] = self.queries.get(name, ()) + (value,)

        if delta.body is not None:
            self.body = delta.body
            self.body_template = None
        if delta.body_template is not None:
            self.body_template = delta.body_template
            self.body = None

        if index is None:
            return
        for name in delta.names:
            self.index_to_name.setdefault(index, []).append(name)
        self.form_params.extend(delta.form_params)
        if delta.expander is not None:
            self.index_to_expander[index] = delta.expander

    def freeze(self) -> MethodMetadata:
        return MethodMetadata(
            config_key=self.config_key,
            template=self.snapshot(),
            return_type=self.return_type,
            body_index=self.body_index,
            body_type=self.body_type,
            url_index=self.url_index,
            index_to_name={i: tuple(names) for i, names in self.index_to_name.items()},
            form_params=tuple(self.form_params),
            index_to_expander=dict(self.index_to_expander),
        )
