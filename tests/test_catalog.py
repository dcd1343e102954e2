from __future__ import annotations

from decimal import Decimal

import pytest
from pydantic import BaseModel, Field

from apiconsole.adapters.catalog_loader import builtin_catalog, load_catalog, to_catalog
from apiconsole.core.domain.catalog import (
    OperationCatalog,
    ParameterSpec,
    ServiceDescriptor,
    service_name_of,
    verb_of,
)
from apiconsole.core.domain.models import FilePayload, Response
from apiconsole.core.domain.types import Int8, TypeKind, UInt64
from apiconsole.core.errors import CatalogError
from sample_clients import AccountsClient, ChangePassword, Point


class Settings(BaseModel):
    retries: Int8 = 3
    region: str = Field(default="eu", frozen=True)


class ReportsClient:
    def __init__(self, client) -> None:
        self._client = client

    async def list_async(self, page: UInt64, amount: Decimal = Decimal("1.5")) -> Response:
        return Response(status_code=200)

    async def configure_async(self, settings: Settings) -> Response:
        return Response(status_code=200)

    async def scoped_async(self, name: str, *, token: str) -> Response:
        return Response(status_code=200)

    async def tolerant_async(self, name: str, *, trace: bool = False, **extra) -> Response:
        return Response(status_code=200)

    def sync_helper(self) -> Response:
        return Response(status_code=200)

    async def _private_async(self) -> Response:
        return Response(status_code=200)


class ExtendedReportsClient(ReportsClient):
    async def list_async(self, page: UInt64) -> Response:
        return Response(status_code=200)


def test_naming_conventions():
    assert service_name_of("AccountsClient") == "Accounts"
    assert service_name_of("Accounts") == "Accounts"
    assert service_name_of("Client") == "Client"
    assert verb_of("sign_up_async") == "sign_up"
    assert verb_of("ping") == "ping"
    assert verb_of("_async") == "_async"


def test_service_descriptor_collects_public_coroutines():
    service = ServiceDescriptor.from_client(ReportsClient)

    assert service.name == "ReportsClient"
    assert service.service_name == "Reports"
    assert [op.verb for op in service.operations] == ["list", "configure", "tolerant"]


def test_required_keyword_only_operation_is_skipped():
    service = ServiceDescriptor.from_client(ReportsClient)

    assert "scoped" not in [op.verb for op in service.operations]


def test_optional_keyword_only_and_var_keyword_are_hidden():
    service = ServiceDescriptor.from_client(ReportsClient)
    tolerant = next(op for op in service.operations if op.verb == "tolerant")

    assert [p.name for p in tolerant.parameters] == ["name"]


def test_subclass_override_wins():
    service = ServiceDescriptor.from_client(ExtendedReportsClient)
    listing = next(op for op in service.operations if op.verb == "list")

    assert [p.name for p in listing.parameters] == ["page"]
    assert listing.func is ExtendedReportsClient.list_async


def test_parameter_specs_from_annotations():
    service = ServiceDescriptor.from_client(ReportsClient)
    page, amount = next(op for op in service.operations if op.verb == "list").parameters

    assert page.type_kind is TypeKind.UINT64
    assert not page.is_optional
    assert amount.type_kind is TypeKind.DECIMAL
    assert amount.is_optional
    assert amount.default == Decimal("1.5")


def test_nullable_and_aliases():
    spec = ParameterSpec.from_annotation("active", bool | None, default=None)

    assert spec.type_kind is TypeKind.BOOLEAN
    assert spec.nullable
    assert spec.is_optional
    assert spec.alias == "bool | None"
    assert ParameterSpec.from_annotation("f", FilePayload).alias == "FilePayload"
    assert ParameterSpec.from_annotation("p", Point).alias == "Point"
    assert ParameterSpec.from_annotation("n", int).type_kind is TypeKind.INT64
    assert ParameterSpec.from_annotation("n", float).type_kind is TypeKind.FLOAT64


def test_writable_model_is_flattened():
    spec = ParameterSpec.from_annotation("change", ChangePassword)

    assert spec.is_flattenable
    assert [f.name for f in spec.fields] == ["access_token", "current_password", "proposed_password"]
    assert all(f.is_optional and f.nullable for f in spec.fields)


def test_frozen_models_and_fields_are_not_flattened():
    assert not ParameterSpec.from_annotation("point", Point).is_flattenable
    assert not ParameterSpec.from_annotation("settings", Settings).is_flattenable


def test_flattened_only_for_single_object_parameter():
    accounts = ServiceDescriptor.from_client(AccountsClient)
    by_verb = {op.verb: op for op in accounts.operations}

    assert by_verb["change_password"].flattened is not None
    assert [p.name for p in by_verb["change_password"].visible_parameters] == [
        "access_token",
        "current_password",
        "proposed_password",
    ]
    assert by_verb["move"].flattened is None
    assert by_verb["sign_up"].flattened is None


def test_merge_prefers_other_catalog():
    first = OperationCatalog.from_clients(ReportsClient)
    replacement = OperationCatalog([ServiceDescriptor(name="ReportsClient", factory=ReportsClient)])

    merged = first.merge(replacement)

    assert list(merged) == ["ReportsClient"]
    assert merged["ReportsClient"].operations == ()


def test_builtin_catalog_has_utility_and_authentication():
    assert list(builtin_catalog()) == ["UtilityClient", "AuthenticationClient"]


def test_load_catalog_from_reference():
    catalog = load_catalog("sample_clients:AccountsClient")

    assert list(catalog) == ["UtilityClient", "AuthenticationClient", "AccountsClient"]


def test_load_catalog_without_reference():
    assert list(load_catalog(None)) == list(builtin_catalog())


def test_to_catalog_accepts_callables_and_iterables():
    assert list(to_catalog(lambda: [AccountsClient, ReportsClient])) == ["AccountsClient", "ReportsClient"]

    catalog = OperationCatalog.from_clients(ReportsClient)
    assert to_catalog(catalog) is catalog


@pytest.mark.parametrize(
    "reference, message",
    [
        ("sample_clients", "must look like"),
        ("no_such_module_xyz:Thing", "Unable to import"),
        ("sample_clients:MissingClient", "has no attribute"),
    ],
)
def test_load_catalog_errors(reference, message):
    with pytest.raises(CatalogError, match=message):
        load_catalog(reference)


def test_to_catalog_rejects_other_values():
    with pytest.raises(CatalogError, match="Cannot build"):
        to_catalog(42)
