"""
Error taxonomy for contract parsing.

Every error is raised at construction time, while an interface is being parsed,
and is fatal for that interface: no partial metadata is ever returned.

- EmptyAnnotationValue: a required annotation literal is empty or blank
- EmptyPathOnType / EmptyPathOnMethod: blank interface / method path
- ConflictingHttpMethod: a method declares more than one HTTP verb
- MissingHttpMethod: a method declares no HTTP verb at all
- TooManyBodyParameters: more than one parameter qualifies as the request body
- BodyWithFormParameters: a body parameter and form parameters on one method
- UnsupportedAnnotation: an annotation outside the strategy's vocabulary
- UnsupportedInterface: parameterized interfaces, multiple bases, overrides
"""

from __future__ import annotations


class ContractError(ValueError):
    """Base class for every misdeclared-interface error."""


class EmptyAnnotationValue(ContractError):
    """An annotation value that must be non-empty was empty or blank."""


class EmptyPathOnType(EmptyAnnotationValue):
    pass


class EmptyPathOnMethod(EmptyAnnotationValue):
    pass


class ConflictingHttpMethod(ContractError):
    pass


class MissingHttpMethod(ContractError):
    pass


class TooManyBodyParameters(ContractError):
    pass


class BodyWithFormParameters(ContractError):
    pass


class UnsupportedAnnotation(ContractError):
    pass


class UnsupportedInterface(ContractError):
    pass
