"""
Unit tests for the Zabbix API client and registrar.
"""

import json
from unittest.mock import MagicMock

import pytest
import requests

from host_discovery.core.data_models import HostRecord
from host_discovery.registration.base_registrar import LoggingRegistrar
from host_discovery.registration.zabbix_client import (
    ZabbixAPIClient,
    ZabbixAPIError,
    ZabbixAuthenticationError,
    ZabbixConnectionError,
    ZabbixRegistrar,
)
from host_discovery.utils.error_handler import RegistrationError


def json_response(payload, status_code=200):
    response = MagicMock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = json.dumps(payload)
    return response


def rpc_result(result):
    return json_response({"jsonrpc": "2.0", "result": result, "id": 1})


def rpc_error(message, data=""):
    return json_response({"jsonrpc": "2.0", "error": {"code": -32602, "message": message, "data": data}, "id": 1})


@pytest.fixture
def session():
    session = MagicMock(spec=requests.Session)
    session.headers = {}
    return session


@pytest.fixture
def client(session):
    return ZabbixAPIClient("http://zabbix.local", "Admin", "secret", session=session)


def sent_payloads(session):
    return [call.kwargs["json"] for call in session.post.call_args_list]


class TestZabbixAPIClient:
    """Tests for JSON-RPC calls."""

    def test_endpoint_is_completed(self, client):
        assert client.url == "http://zabbix.local/api_jsonrpc.php"

    def test_full_endpoint_is_kept(self, session):
        client = ZabbixAPIClient("https://z/zabbix/api_jsonrpc.php", "u", "p", session=session)
        assert client.url == "https://z/zabbix/api_jsonrpc.php"

    def test_login_once_then_bearer_token(self, client, session):
        session.post.side_effect = [rpc_result("token-123"), rpc_result([]), rpc_result([])]

        client.find_hosts("sw1")
        client.find_hosts("sw2")

        payloads = sent_payloads(session)
        assert [p["method"] for p in payloads] == ["user.login", "host.get", "host.get"]
        assert payloads[0]["params"] == {"username": "Admin", "password": "secret"}
        headers = session.post.call_args_list[1].kwargs["headers"]
        assert headers == {"Authorization": "Bearer token-123"}
        assert session.post.call_args_list[0].kwargs["headers"] == {}

    def test_login_failure(self, client, session):
        session.post.return_value = rpc_error("Incorrect user name or password")

        with pytest.raises(ZabbixAuthenticationError):
            client.find_hosts("sw1")

    def test_api_error(self, client, session):
        session.post.side_effect = [rpc_result("token"), rpc_error("Invalid params.", "Host already exists")]

        with pytest.raises(ZabbixAPIError, match="Host already exists"):
            client.create_host({"host": "sw1"})

    def test_http_error(self, client, session):
        session.post.return_value = json_response({}, status_code=500)

        with pytest.raises(ZabbixAPIError, match="HTTP 500"):
            client.call("apiinfo.version", {}, authenticated=False)

    def test_connection_error(self, client, session):
        session.post.side_effect = requests.exceptions.ConnectionError("refused")

        with pytest.raises(ZabbixConnectionError):
            client.call("apiinfo.version", {}, authenticated=False)

    def test_errors_are_registration_errors(self):
        assert issubclass(ZabbixConnectionError, RegistrationError)
        assert issubclass(ZabbixAuthenticationError, RegistrationError)


class TestZabbixRegistrar:
    """Tests for host registration."""

    def test_creates_missing_host(self, client, session, quiet_logger):
        session.post.side_effect = [rpc_result("token"), rpc_result([]), rpc_result({"hostids": ["10501"]})]
        registrar = ZabbixRegistrar(client, logger=quiet_logger)

        registrar.register(HostRecord("core-sw-01", "10.0.0.1"), "22", "10452")

        create = sent_payloads(session)[2]
        assert create["method"] == "host.create"
        params = create["params"]
        assert params["host"] == "core-sw-01"
        assert params["groups"] == [{"groupid": "22"}]
        assert params["proxyid"] == "10452"
        assert params["monitored_by"] == 1
        interface = params["interfaces"][0]
        assert interface["ip"] == "10.0.0.1"
        assert interface["type"] == 2
        assert interface["port"] == "161"

    @pytest.mark.parametrize("result", [None, {}, {"hostids": []}, ["10501"]])
    def test_malformed_create_result(self, client, session, quiet_logger, result):
        session.post.side_effect = [rpc_result("token"), rpc_result([]), rpc_result(result)]
        registrar = ZabbixRegistrar(client, logger=quiet_logger)

        with pytest.raises(ZabbixAPIError, match="host.create"):
            registrar.register(HostRecord("core-sw-01", "10.0.0.1"), "22", "10452")

    def test_existing_host_is_left_alone(self, client, session, quiet_logger):
        session.post.side_effect = [rpc_result("token"), rpc_result([{"hostid": "10501", "host": "core-sw-01"}])]
        registrar = ZabbixRegistrar(client, logger=quiet_logger)

        registrar.register(HostRecord("core-sw-01", "10.0.0.1"), "22", "10452")

        assert [p["method"] for p in sent_payloads(session)] == ["user.login", "host.get"]

    def test_no_proxy(self, client, quiet_logger):
        registrar = ZabbixRegistrar(client, snmp_port=1161, logger=quiet_logger)

        params = registrar.build_host_params(HostRecord("sw", "10.0.0.2"), "22", "")

        assert "proxyid" not in params
        assert "monitored_by" not in params
        assert params["interfaces"][0]["port"] == "1161"


class TestLoggingRegistrar:
    """The dry-run registrar never fails."""

    def test_register_succeeds(self, quiet_logger):
        LoggingRegistrar(quiet_logger).register(HostRecord("sw", "10.0.0.2"), "", "")

    def test_register_without_logger(self):
        LoggingRegistrar().register(HostRecord("sw", "10.0.0.2"), "22", "1")
