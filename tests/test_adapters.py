import asyncio

import httpx
import pytest

from cep_service.adapters.implementations import ApiCEPAdapter, ViaCEPAdapter
from cep_service.core.exceptions import UpstreamDecodeError, UpstreamTransportError
from cep_service.domain.models import ProviderName

VIACEP_BODY = {
    "cep": "01001-000",
    "logradouro": "Praça da Sé",
    "complemento": "lado ímpar",
    "bairro": "Sé",
    "localidade": "São Paulo",
    "uf": "SP",
    "ibge": "3550308",
}

APICEP_BODY = {
    "status": 200,
    "ok": True,
    "code": "01001-000",
    "state": "SP",
    "city": "São Paulo",
    "district": "Sé",
    "address": "Praça da Sé - lado ímpar",
    "statusText": "ok",
}


def _fetch(adapter, handler, code="01001-000"):
    async def _run():
        async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as client:
            return await adapter.fetch(code, client)
    return asyncio.run(_run())


def test_viacep_builds_path_embedded_url():
    adapter = ViaCEPAdapter("https://viacep.com.br/")
    assert adapter.build_url("01001-000") == "https://viacep.com.br/ws/01001-000/json/"


def test_apicep_builds_file_url():
    adapter = ApiCEPAdapter("https://cdn.apicep.com")
    assert adapter.build_url("01001-000") == "https://cdn.apicep.com/file/apicep/01001-000.json"


def test_viacep_maps_fields_and_tags_provider():
    seen = []

    def handler(request):
        seen.append(str(request.url))
        return httpx.Response(200, json=VIACEP_BODY)

    record = _fetch(ViaCEPAdapter("https://viacep.com.br"), handler)

    assert seen == ["https://viacep.com.br/ws/01001-000/json/"]
    assert record.code == "01001-000"
    assert record.street == "Praça da Sé"
    assert record.neighborhood == "Sé"
    assert record.city == "São Paulo"
    assert record.region == "SP"
    assert record.source_provider is ProviderName.VIACEP


def test_apicep_maps_fields_and_tags_provider():
    record = _fetch(ApiCEPAdapter("https://cdn.apicep.com"), lambda r: httpx.Response(200, json=APICEP_BODY))

    assert record.to_response() == {
        "cep": "01001-000",
        "logradouro": "Praça da Sé - lado ímpar",
        "bairro": "Sé",
        "localidade": "São Paulo",
        "uf": "SP",
        "api": "ApiCep",
    }


def test_missing_fields_become_empty_strings():
    body = {"code": "01001-000", "state": "SP", "address": None}
    record = _fetch(ApiCEPAdapter("https://cdn.apicep.com"), lambda r: httpx.Response(200, json=body))

    assert record.street == ""
    assert record.neighborhood == ""
    assert record.city == ""
    assert record.region == "SP"


def test_non_string_values_are_passed_through_as_text():
    body = dict(VIACEP_BODY, uf=35)
    record = _fetch(ViaCEPAdapter("https://viacep.com.br"), lambda r: httpx.Response(200, json=body))
    assert record.region == "35"


def test_body_that_is_not_json_is_a_decode_error():
    with pytest.raises(UpstreamDecodeError) as exc_info:
        _fetch(ViaCEPAdapter("https://viacep.com.br"), lambda r: httpx.Response(200, text="<html>oops</html>"))
    assert exc_info.value.provider == "ViaCEP"


def test_json_array_is_a_decode_error():
    with pytest.raises(UpstreamDecodeError):
        _fetch(ApiCEPAdapter("https://cdn.apicep.com"), lambda r: httpx.Response(200, json=[1, 2]))


def test_viacep_unknown_cep_marker_is_a_decode_error():
    with pytest.raises(UpstreamDecodeError) as exc_info:
        _fetch(ViaCEPAdapter("https://viacep.com.br"), lambda r: httpx.Response(200, json={"erro": True}))
    assert exc_info.value.context["keys"] == ["erro"]


def test_error_status_is_a_transport_error():
    with pytest.raises(UpstreamTransportError) as exc_info:
        _fetch(ApiCEPAdapter("https://cdn.apicep.com"), lambda r: httpx.Response(503))
    assert exc_info.value.context["status_code"] == 503


def test_connection_failure_is_a_transport_error():
    def handler(request):
        raise httpx.ConnectError("connection refused", request=request)

    with pytest.raises(UpstreamTransportError) as exc_info:
        _fetch(ViaCEPAdapter("https://viacep.com.br"), handler)
    assert "connection refused" in exc_info.value.context["original_error"]


def test_fetch_makes_exactly_one_call_on_failure():
    calls = []

    def handler(request):
        calls.append(request)
        return httpx.Response(500)

    with pytest.raises(UpstreamTransportError):
        _fetch(ViaCEPAdapter("https://viacep.com.br"), handler)
    assert len(calls) == 1
