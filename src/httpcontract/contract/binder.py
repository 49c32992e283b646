from __future__ import annotations

import logging

from httpcontract.contract.delta import MetadataBuilder
from httpcontract.contract.strategies import HttpAnnotationStrategy
from httpcontract.domain.declarations import ParameterDecl
from httpcontract.errors import BodyWithFormParameters, TooManyBodyParameters

logger = logging.getLogger(__name__)

_FORM_AND_BODY = "Body parameters cannot be used with form parameters."


class ParameterBinder:
    """
    Assigns each parameter position its role: a named HTTP parameter (path, query,
    header, form), the URL override, or the request body.
    """

    def __init__(self, strategy: HttpAnnotationStrategy) -> None:
        self.strategy = strategy

    def bind(self, builder: MetadataBuilder, parameter: ParameterDecl) -> bool:
        """
        Bind one position. Returns True when an HTTP-role annotation claimed it.
        """
        index = parameter.index
        delta = self.strategy.on_parameter_annotations(builder.snapshot(), index, parameter.annotations)
        if delta.form_params and builder.body_index is not None:
            raise BodyWithFormParameters(_FORM_AND_BODY)
        builder.apply(delta, index)

        if parameter.url_override:
            builder.url_index = index
            # the url slot is substituted whole, never by name
            builder.index_to_name.pop(index, None)
        elif not delta.http_param:
            self._claim_body(builder, parameter)
        return delta.http_param

    @staticmethod
    def _claim_body(builder: MetadataBuilder, parameter: ParameterDecl) -> None:
        if builder.form_params:
            raise BodyWithFormParameters(_FORM_AND_BODY)
        if builder.body_index is not None:
            raise TooManyBodyParameters(f"Method has too many Body parameters: {builder.config_key}")

        builder.body_index = parameter.index
        builder.body_type = parameter.type
        logger.debug("%s: parameter %s is the request body", builder.config_key, parameter.index)
