from datetime import datetime
from typing import Annotated

import pytest

from httpcontract.contract.parser import ContractParser
from httpcontract.contract.strategies import RequestLineStrategy
from httpcontract.domain.annotations import URI, Body, Headers, Param, PathParam, RequestLine
from httpcontract.errors import (
    BodyWithFormParameters,
    EmptyAnnotationValue,
    TooManyBodyParameters,
    UnsupportedAnnotation,
)
from httpcontract.source.reflect import ClassAnnotationSource

source = ClassAnnotationSource()
parser = ContractParser(strategy=RequestLineStrategy())


def parse(cls, name):
    return parser.parse_method(source.describe(cls), name)


class Methods:
    @RequestLine("POST /")
    def post(self): ...

    @RequestLine("PUT /")
    def put(self): ...

    @RequestLine("GET /")
    def get(self): ...

    @RequestLine("DELETE /")
    def delete(self): ...


class BodyParams:
    @RequestLine("POST")
    def post(self, body: list[str]) -> dict: ...

    @RequestLine("POST")
    def tooMany(self, body: list[str], body2: list[str]) -> dict: ...


class CustomMethod:
    @RequestLine("PATCH")
    def patch(self) -> dict: ...


class WithQueryParamsInPath:
    @RequestLine("GET /")
    def none(self): ...

    @RequestLine("GET /?Action=GetUser&Version=2010-05-08")
    def two(self): ...

    @RequestLine("GET /?flag&Action=GetUser&Version=2010-05-08")
    def empty(self): ...


class BodyWithoutParameters:
    @RequestLine("POST /")
    @Headers("Content-Type: application/xml")
    @Body("<v01:getAccountsListOfUser/>")
    def post(self): ...


class WithURIParam:
    @RequestLine("GET /{1}/{2}")
    def uriParam(self, one: Annotated[str, Param("1")], endpoint: URI, two: Annotated[str, Param("2")]): ...


class WithPathAndQueryParams:
    @RequestLine("GET /domains/{domainId}/records?name={name}&type={type}")
    def recordsByNameAndType(
        self,
        id: Annotated[int, Param("domainId")],
        nameFilter: Annotated[str, Param("name")],
        typeFilter: Annotated[str, Param("type")],
    ): ...


LOGIN_TEMPLATE = (
    '%7B"customer_name": "{customer_name}", "user_name": "{user_name}", "password": "{password}"%7D'
)


class FormParams:
    @RequestLine("POST /")
    @Body(LOGIN_TEMPLATE)
    def login(
        self,
        customer: Annotated[str, Param("customer_name")],
        user: Annotated[str, Param("user_name")],
        password: Annotated[str, Param("password")],
    ) -> None: ...

    @RequestLine("POST /")
    def formThenBody(self, user: Annotated[str, Param("user_name")], body: dict) -> None: ...


class HeaderParams:
    @RequestLine("POST /")
    @Headers("Auth-Token: {authToken}", "Auth-Token: Foo")
    def logout(self, token: Annotated[str, Param("authToken")]) -> None: ...


class DateToMillis:
    pass


class CustomExpander:
    @RequestLine("POST /?date={date}")
    def date(self, date: Annotated[datetime, Param("date", expander=DateToMillis)]) -> None: ...


class Misdeclared:
    @RequestLine("  ")
    def blank(self): ...

    @RequestLine("GET /")
    @Headers()
    def noHeaders(self): ...

    @RequestLine("GET /")
    @Headers("Accept: application/json", "NoColonHere")
    def headerWithoutColon(self): ...

    @RequestLine("GET /")
    def emptyParam(self, value: Annotated[str, Param(" ")]): ...

    @RequestLine("GET /{id}")
    def wrongVocabulary(self, id: Annotated[str, PathParam("id")]): ...

    @RequestLine("GET /users HTTP/1.1")
    def withProtocol(self): ...


def test_http_methods():
    assert parse(Methods, "post").template.method == "POST"
    assert parse(Methods, "put").template.method == "PUT"
    assert parse(Methods, "get").template.method == "GET"
    assert parse(Methods, "delete").template.method == "DELETE"


def test_body_param_is_generic():
    md = parse(BodyParams, "post")
    assert md.body_index == 0
    assert md.body_type == list[str]


def test_too_many_bodies():
    with pytest.raises(TooManyBodyParameters) as exc:
        parse(BodyParams, "tooMany")
    assert "Method has too many Body" in str(exc.value)


def test_custom_method_without_path():
    md = parse(CustomMethod, "patch")
    assert md.template.method == "PATCH"
    assert md.template.url == ""


def test_query_params_in_path_extract():
    md = parse(WithQueryParamsInPath, "none")
    assert md.template.url == "/"
    assert md.template.queries == {}

    md = parse(WithQueryParamsInPath, "two")
    assert md.template.url == "/"
    assert list(md.template.queries.items()) == [
        ("Action", ("GetUser",)),
        ("Version", ("2010-05-08",)),
    ]

    md = parse(WithQueryParamsInPath, "empty")
    assert list(md.template.queries.items()) == [
        ("flag", (None,)),
        ("Action", ("GetUser",)),
        ("Version", ("2010-05-08",)),
    ]


def test_body_without_parameters():
    md = parse(BodyWithoutParameters, "post")
    assert md.template.body == b"<v01:getAccountsListOfUser/>"
    assert md.body_index is None


def test_headers_and_content_length_for_literal_body():
    md = parse(BodyWithoutParameters, "post")
    assert md.template.headers == {
        "Content-Type": ("application/xml",),
        "Content-Length": (str(len(md.template.body)),),
    }


def test_with_path_and_uri_param():
    md = parse(WithURIParam, "uriParam")
    assert md.index_to_name == {0: ("1",), 2: ("2",)}
    assert md.url_index == 1


def test_path_and_query_params():
    md = parse(WithPathAndQueryParams, "recordsByNameAndType")

    assert md.template.url == "/domains/{domainId}/records"
    assert md.template.queries == {"name": ("{name}",), "type": ("{type}",)}
    assert md.index_to_name == {0: ("domainId",), 1: ("name",), 2: ("type",)}
    assert md.form_params == ()


def test_body_with_template():
    md = parse(FormParams, "login")
    assert md.template.body_template == LOGIN_TEMPLATE
    assert md.template.body is None
    assert "Content-Length" not in md.template.headers


def test_form_params_parse_into_index_to_name():
    md = parse(FormParams, "login")

    assert md.form_params == ("customer_name", "user_name", "password")
    assert md.index_to_name == {0: ("customer_name",), 1: ("user_name",), 2: ("password",)}


def test_form_params_do_not_set_body_type():
    assert parse(FormParams, "login").body_type is None


def test_body_after_form_params_fails():
    with pytest.raises(BodyWithFormParameters) as exc:
        parse(FormParams, "formThenBody")
    assert str(exc.value) == "Body parameters cannot be used with form parameters."


def test_header_params_parse_into_index_to_name():
    md = parse(HeaderParams, "logout")

    assert md.template.headers == {"Auth-Token": ("{authToken}", "Foo")}
    assert md.index_to_name == {0: ("authToken",)}
    assert md.form_params == ()


def test_custom_expander():
    md = parse(CustomExpander, "date")
    assert md.index_to_expander == {0: DateToMillis}
    assert md.template.queries == {"date": ("{date}",)}


def test_protocol_suffix_is_dropped():
    md = parse(Misdeclared, "withProtocol")
    assert md.template.method == "GET"
    assert md.template.url == "/users"


def test_blank_request_line():
    with pytest.raises(EmptyAnnotationValue) as exc:
        parse(Misdeclared, "blank")
    assert str(exc.value) == "RequestLine annotation was empty on method blank."


def test_empty_headers_annotation():
    with pytest.raises(EmptyAnnotationValue) as exc:
        parse(Misdeclared, "noHeaders")
    assert str(exc.value) == "Headers annotation was empty on method noHeaders."


def test_header_line_without_colon():
    with pytest.raises(EmptyAnnotationValue) as exc:
        parse(Misdeclared, "headerWithoutColon")
    assert str(exc.value) == "Headers annotation on method headerWithoutColon has no ':' in line 'NoColonHere'."


def test_empty_param():
    with pytest.raises(EmptyAnnotationValue) as exc:
        parse(Misdeclared, "emptyParam")
    assert str(exc.value) == "Param annotation was empty on param 0."


def test_verb_vocabulary_parameter_rejected():
    with pytest.raises(UnsupportedAnnotation):
        parse(Misdeclared, "wrongVocabulary")


class Relative:
    @RequestLine("GET domains?limit=10")
    def domains(self): ...


def test_relative_request_line_path_gets_leading_slash():
    md = parse(Relative, "domains")
    assert md.template.url == "/domains"
    assert md.template.queries == {"limit": ("10",)}
