from http import HTTPStatus
from unittest import mock

import pytest

from pageable import DoesNotExist
from pageable import Pager
from pageable import SyncPager
from pageable import ValueObject
from pageable.api_client import ApiException
from pageable.api_client import DeserializationError
from pageable.mgmt import ClientSettings
from pageable.mgmt import ManagementClient
from pageable.mgmt import SyncManagementClient
from pageable.oauth2 import CCTokenGateway
from pageable.oauth2 import OAuth2CCSettings
from pageable.oauth2 import SyncCCTokenGateway

MODULE = "pageable.mgmt.client"


class Thing(ValueObject):
    thing_id: int


@pytest.fixture
def settings() -> ClientSettings:
    return ClientSettings(endpoint="https://management.example.com", timeout=2.0)


@pytest.fixture
def credential():
    credential = mock.create_autospec(CCTokenGateway, instance=True)
    credential.fetch_headers.return_value = {"Authorization": "Bearer abc"}
    return credential


@pytest.fixture
def client(settings, credential) -> ManagementClient:
    with mock.patch(MODULE + ".ApiProvider", autospec=True):
        client = ManagementClient(settings, credential)
    client.provider.url = "https://management.example.com/"
    return client


@pytest.fixture
def sync_client(settings) -> SyncManagementClient:
    credential = mock.create_autospec(SyncCCTokenGateway, instance=True)
    with mock.patch(MODULE + ".SyncApiProvider", autospec=True):
        client = SyncManagementClient(settings, credential)
    client.provider.url = "https://management.example.com/"
    return client


def test_settings_defaults():
    settings = ClientSettings()

    assert str(settings.endpoint) == "https://management.azure.com/"
    assert settings.get_scopes() == ["https://management.azure.com/.default"]
    assert settings.retries == 3


def test_settings_scopes():
    settings = ClientSettings(scopes=["a", "b"])

    assert settings.get_scopes() == ["a", "b"]


def test_settings_invalid_endpoint():
    with pytest.raises(ValueError):
        ClientSettings(endpoint="not a url")


@mock.patch(MODULE + ".ApiProvider", autospec=True)
def test_provider_settings(api_provider_m, settings):
    client = ManagementClient(settings)

    api_provider_m.assert_called_once_with(
        url=settings.endpoint, headers_factory=None, retries=3, backoff_factor=1.0
    )
    assert client.provider is api_provider_m.return_value


async def test_headers_use_scopes(client: ManagementClient, credential):
    headers = await client._headers()

    assert headers == {"Authorization": "Bearer abc"}
    credential.fetch_headers.assert_awaited_once_with(
        ["https://management.example.com/.default"]
    )


async def test_pager_is_lazy(client: ManagementClient):
    pager = client.pager("things", Thing, "2020-01-01")

    assert isinstance(pager, Pager)
    assert not client.provider.request.called


async def test_pager(client: ManagementClient):
    client.provider.request.side_effect = [
        {"value": [{"thingId": 1}], "nextLink": "/things?$skiptoken=x"},
        {"value": [{"thingId": 2}]},
    ]

    pager = client.pager("things", Thing, "2020-01-01", params={"$top": 1})

    assert await pager.collect() == [Thing(thing_id=1), Thing(thing_id=2)]
    assert client.provider.request.call_args_list == [
        mock.call(
            "GET",
            "things",
            params={"api-version": "2020-01-01", "$top": 1},
            timeout=2.0,
        ),
        mock.call(
            "GET",
            "https://management.example.com/things?$skiptoken=x",
            params={"api-version": "2020-01-01"},
            timeout=2.0,
        ),
    ]


async def test_pager_http_error_ends(client: ManagementClient):
    client.provider.request.side_effect = [
        {"value": [{"thingId": 1}], "nextLink": "/things?page=2"},
        ApiException({"error": {}}, status=HTTPStatus.INTERNAL_SERVER_ERROR),
    ]
    pager = client.pager("things", Thing, "2020-01-01")
    consumed = []

    with pytest.raises(ApiException):
        async for thing in pager:
            consumed.append(thing)

    assert consumed == [Thing(thing_id=1)]
    assert await pager.collect() == []


async def test_get(client: ManagementClient):
    client.provider.request.return_value = {"thingId": 3}

    actual = await client.get("things/3", Thing, "2020-01-01")

    assert actual == Thing(thing_id=3)
    client.provider.request.assert_awaited_once_with(
        "GET", "things/3", params={"api-version": "2020-01-01"}, timeout=2.0
    )


async def test_get_does_not_exist(client: ManagementClient):
    client.provider.request.side_effect = ApiException(
        {}, status=HTTPStatus.NOT_FOUND
    )

    with pytest.raises(DoesNotExist) as e:
        await client.get("things/3", Thing, "2020-01-01")

    assert str(e.value) == "does not exist: Thing at things/3"


async def test_get_other_error(client: ManagementClient):
    client.provider.request.side_effect = ApiException({}, status=HTTPStatus.FORBIDDEN)

    with pytest.raises(ApiException) as e:
        await client.get("things/3", Thing, "2020-01-01")

    assert e.value.status is HTTPStatus.FORBIDDEN


async def test_get_deserialization_error(client: ManagementClient):
    client.provider.request.return_value = {"thingId": "x"}

    with pytest.raises(DeserializationError):
        await client.get("things/3", Thing, "2020-01-01")


async def test_context_manager(client: ManagementClient):
    async with client as c:
        assert c is client
        client.provider.connect.assert_awaited_once_with()

    client.provider.disconnect.assert_awaited_once_with()
    client.credential.disconnect.assert_awaited_once_with()


@mock.patch(MODULE + ".ApiProvider", autospec=True)
async def test_disconnect_without_credential(api_provider_m, settings):
    client = ManagementClient(settings)

    await client.disconnect()

    client.provider.disconnect.assert_awaited_once_with()


async def test_disconnect_closes_credential_session(settings):
    credential = CCTokenGateway(
        OAuth2CCSettings(
            token_url="https://authserver/token",
            client_id="cid",
            client_secret="secret",
            scope="all",
        )
    )
    async with ManagementClient(settings, credential):
        await credential.provider.connect()
        session = credential.provider._session

    assert session.closed
    assert credential.provider._session is None


def test_sync_headers_use_scopes(sync_client: SyncManagementClient):
    sync_client._headers()

    sync_client.credential.fetch_headers.assert_called_once_with(
        ["https://management.example.com/.default"]
    )


def test_sync_pager(sync_client: SyncManagementClient):
    sync_client.provider.request.side_effect = [
        {"value": [{"thingId": 1}], "nextLink": "/things?page=2"},
        {"value": [{"thingId": 2}]},
    ]

    pager = sync_client.pager("things", Thing, "2020-01-01")

    assert isinstance(pager, SyncPager)
    assert [thing.thing_id for thing in pager] == [1, 2]
    assert sync_client.provider.request.call_count == 2


def test_sync_get_does_not_exist(sync_client: SyncManagementClient):
    sync_client.provider.request.side_effect = ApiException(
        {}, status=HTTPStatus.NOT_FOUND
    )

    with pytest.raises(DoesNotExist):
        sync_client.get("things/3", Thing, "2020-01-01")


def test_sync_context_manager(sync_client: SyncManagementClient):
    with sync_client:
        pass

    sync_client.provider.disconnect.assert_called_once_with()
    sync_client.credential.disconnect.assert_called_once_with()
