from __future__ import annotations

import logging
from typing import Any, Iterable, Optional

from httpcontract.contract.binder import ParameterBinder
from httpcontract.contract.delta import MetadataBuilder
from httpcontract.contract.strategies import HttpAnnotationStrategy, select_strategy
from httpcontract.contract.validation import check_interface
from httpcontract.domain.declarations import AnnotationSource, InterfaceDecl, MethodDecl
from httpcontract.domain.metadata import MethodMetadata
from httpcontract.errors import MissingHttpMethod, UnsupportedInterface
from httpcontract.settings import ContractSettings
from httpcontract.source.reflect import ClassAnnotationSource

logger = logging.getLogger(__name__)


def config_key(decl: InterfaceDecl, method: MethodDecl) -> str:
    """
    Stable lookup key for a method, e.g. "GitHub#contributors(str,str)".
    """
    params = ",".join(p.type_name for p in method.parameters)
    return f"{decl.key_name}#{method.name}({params})"


def find_metadata(metadata: Iterable[MethodMetadata], key: str) -> Optional[MethodMetadata]:
    for md in metadata:
        if md.config_key == key:
            return md
    return None


class ContractParser:
    """
    Turns an annotated interface into one MethodMetadata per method.

    For every method, in declaration order: interface annotations, then method
    annotations, then parameters; each step fails fast. A failing method aborts the
    whole interface, so callers either get every method or an exception.
    """

    def __init__(
        self,
        strategy: Optional[HttpAnnotationStrategy] = None,
        source: Optional[AnnotationSource] = None,
        settings: Optional[ContractSettings] = None,
    ) -> None:
        self.settings = settings or ContractSettings()
        self.strategy = strategy
        self.source = source or ClassAnnotationSource()

    def parse(self, target: Any) -> list[MethodMetadata]:
        return self.parse_declaration(self.source.describe(target))

    def parse_declaration(self, decl: InterfaceDecl) -> list[MethodMetadata]:
        check_interface(decl)
        strategy = self._strategy_for(decl)
        binder = ParameterBinder(strategy)

        result: dict[str, MethodMetadata] = {}
        for method in decl.methods:
            md = self._parse_method(decl, method, strategy, binder)
            if md.config_key in result:
                raise UnsupportedInterface(f"Overrides unsupported: {md.config_key}")
            result[md.config_key] = md

        logger.debug("%s: parsed %d method(s) with the %s strategy", decl.name, len(result), strategy.name)
        return list(result.values())

    def parse_method(self, decl: InterfaceDecl, method_name: str) -> MethodMetadata:
        method = decl.method(method_name)
        if method is None:
            raise KeyError(f"{decl.name} declares no method {method_name!r}")
        check_interface(decl)
        strategy = self._strategy_for(decl)
        return self._parse_method(decl, method, strategy, ParameterBinder(strategy))

    def _strategy_for(self, decl: InterfaceDecl) -> HttpAnnotationStrategy:
        if self.strategy is not None:
            return self.strategy
        return select_strategy(decl, self.settings.default_style)

    def _parse_method(
        self,
        decl: InterfaceDecl,
        method: MethodDecl,
        strategy: HttpAnnotationStrategy,
        binder: ParameterBinder,
    ) -> MethodMetadata:
        builder = MetadataBuilder(
            config_key=config_key(decl, method),
            method_name=method.name,
            return_type=method.return_type,
            decode_queries=self.settings.decode_queries,
        )

        for annotation in decl.annotations:
            builder.apply(strategy.on_interface_annotation(builder.snapshot(), annotation, decl.name))

        for annotation in method.annotations:
            builder.apply(strategy.on_method_annotation(builder.snapshot(), annotation, method.name))

        if builder.method is None:
            raise MissingHttpMethod(
                f"Method {method.name} not annotated with HTTP method type (ex. GET, POST)"
            )

        for parameter in method.parameters:
            binder.bind(builder, parameter)

        md = builder.freeze()
        logger.debug("%s -> %s %s", md.config_key, md.template.method, md.template.url or "<no path>")
        return md
