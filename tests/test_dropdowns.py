"""
Tests for the workspace and form dropdown resolvers.
"""
import pytest
import respx
import httpx
from prometheus_client import REGISTRY
from opnform_connector.integrations.dropdowns import workspace_options, form_options
from opnform_connector.integrations.opnform_types import Credential

BASE = "https://api.opnform.test"
FORMS_URL = f"{BASE}/open/workspaces/ws1/forms"


@pytest.fixture
def credential():
    return Credential(apiKey="test_key", baseApiUrl=BASE)


@pytest.mark.asyncio
async def test_workspaces_without_credential():
    state = await workspace_options(None)
    assert state.disabled is True
    assert state.options == []
    assert state.placeholder == "Connect OpnForm account"


@pytest.mark.asyncio
@respx.mock
async def test_workspaces_one_option_per_record(credential):
    respx.get(f"{BASE}/open/workspaces").mock(
        return_value=httpx.Response(
            200,
            json=[
                {"id": "ws1", "name": "Marketing"},
                {"id": "ws2", "name": "Support"},
            ],
        )
    )

    state = await workspace_options(credential)

    assert state.disabled is False
    assert [(o.label, o.value) for o in state.options] == [
        ("Marketing", "ws1"),
        ("Support", "ws2"),
    ]


@pytest.mark.asyncio
@respx.mock
async def test_workspaces_error_becomes_disabled_state(credential):
    respx.get(f"{BASE}/open/workspaces").mock(return_value=httpx.Response(401))

    state = await workspace_options(credential)

    assert state.disabled is True
    assert state.options == []
    assert state.placeholder == "Failed to load workspaces: Invalid OpnForm API key"


@pytest.mark.asyncio
async def test_forms_without_credential():
    state = await form_options(None, "ws1")
    assert state.disabled is True
    assert state.options == []
    assert state.placeholder == "Connect OpnForm account"


@pytest.mark.asyncio
async def test_forms_without_workspace(credential):
    state = await form_options(credential, None)
    assert state.disabled is True
    assert state.options == []
    assert state.placeholder == "Select workspace"


@pytest.mark.asyncio
@respx.mock
async def test_forms_follow_pagination_in_order(credential):
    route = respx.get(FORMS_URL).mock(
        side_effect=[
            httpx.Response(
                200,
                json={
                    "meta": {"current_page": 1, "last_page": 2, "per_page": 1, "from": 1, "to": 1, "total": 2},
                    "data": [{"id": "f1", "title": "Signup"}],
                },
            ),
            httpx.Response(
                200,
                json={
                    "meta": {"current_page": 2, "last_page": 2, "per_page": 1, "from": 2, "to": 2, "total": 2},
                    "data": [{"id": "f2", "title": "Feedback", "slug": "feedback"}],
                },
            ),
        ]
    )

    state = await form_options(credential, "ws1")

    assert state.disabled is False
    assert state.placeholder == "Select form"
    assert [(o.label, o.value) for o in state.options] == [("Signup", "f1"), ("Feedback", "f2")]
    assert route.call_count == 2
    assert [c.request.url.params["page"] for c in route.calls] == ["1", "2"]


@pytest.mark.asyncio
@respx.mock
async def test_forms_single_page_without_meta(credential):
    route = respx.get(FORMS_URL).mock(
        return_value=httpx.Response(
            200,
            json={"data": [{"id": "f1", "title": "Signup"}, {"id": "f2", "title": "Survey"}]},
        )
    )

    state = await form_options(credential, "ws1")

    assert [o.value for o in state.options] == ["f1", "f2"]
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_forms_missing_data_on_first_page(credential):
    route = respx.get(FORMS_URL).mock(
        return_value=httpx.Response(200, json={"meta": {"current_page": 1, "last_page": 3}})
    )

    state = await form_options(credential, "ws1")

    assert state.disabled is False
    assert state.options == []
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_forms_missing_data_keeps_earlier_pages(credential):
    route = respx.get(FORMS_URL).mock(
        side_effect=[
            httpx.Response(
                200,
                json={
                    "meta": {"current_page": 1, "last_page": 3},
                    "data": [{"id": "f1", "title": "Signup"}],
                },
            ),
            httpx.Response(200, json={"meta": {"current_page": 2, "last_page": 3}}),
        ]
    )

    state = await form_options(credential, "ws1")

    assert [o.value for o in state.options] == ["f1"]
    assert route.call_count == 2


@pytest.mark.asyncio
@respx.mock
async def test_forms_error_is_reported_in_placeholder(credential):
    respx.get(FORMS_URL).mock(
        side_effect=[
            httpx.Response(
                200,
                json={
                    "meta": {"current_page": 1, "last_page": 2},
                    "data": [{"id": "f1", "title": "Signup"}],
                },
            ),
            httpx.Response(500),
        ]
    )

    state = await form_options(credential, "ws1")

    assert state.disabled is True
    assert state.options == []
    assert state.placeholder == "Failed to load forms: OpnForm server error: 500"


@pytest.mark.asyncio
@respx.mock
async def test_forms_meta_without_page_bounds_is_single_page(credential):
    route = respx.get(FORMS_URL).mock(
        return_value=httpx.Response(
            200,
            json={"meta": {"total": 1}, "data": [{"id": "f1", "title": "Signup"}]},
        )
    )

    state = await form_options(credential, "ws1")

    assert state.disabled is False
    assert [o.value for o in state.options] == ["f1"]
    assert route.call_count == 1


@pytest.mark.asyncio
@respx.mock
async def test_forms_pages_counted(credential):
    respx.get(FORMS_URL).mock(
        side_effect=[
            httpx.Response(200, json={"meta": {"current_page": 1, "last_page": 2}, "data": []}),
            httpx.Response(200, json={"meta": {"current_page": 2, "last_page": 2}, "data": []}),
        ]
    )
    before = REGISTRY.get_sample_value("opnform_form_pages_fetched_total") or 0.0

    await form_options(credential, "ws1")

    assert REGISTRY.get_sample_value("opnform_form_pages_fetched_total") == before + 2
