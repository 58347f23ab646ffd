from unittest.mock import MagicMock

import pytest
import requests

from core.heatman.exceptions import ActuatorUnreachableError, MalformedResponseError
from core.heatman.plug_client import PlugClient


def make_client(payload=None, error: Exception | None = None) -> tuple[PlugClient, MagicMock]:
    session = MagicMock()
    if error:
        session.get.side_effect = error
    else:
        response = MagicMock()
        if isinstance(payload, Exception):
            response.json.side_effect = payload
        else:
            response.json.return_value = payload
        session.get.return_value = response
    return PlugClient("http://192.168.178.86/rpc/", session=session), session


@pytest.mark.parametrize("output", [True, False])
def test_query_power(output):
    client, session = make_client({"switch:0": {"id": 0, "output": output, "apower": 0.0}})
    assert client.query_power() is output
    session.get.assert_called_once_with("http://192.168.178.86/rpc/Shelly.GetStatus", timeout=5)


def test_query_power_uses_switch_id():
    client, session = make_client({"switch:1": {"output": True}})
    client.switch_id = 1
    assert client.query_power() is True


@pytest.mark.parametrize(
    "payload",
    [
        {},
        {"switch:0": "on"},
        {"switch:0": {}},
        {"switch:0": {"output": "true"}},
        {"switch:0": {"output": 1}},
        ["switch:0"],
        ValueError("not json"),
    ],
)
def test_query_power_malformed(payload):
    client, _ = make_client(payload)
    with pytest.raises(MalformedResponseError):
        client.query_power()


def test_query_power_unreachable():
    client, _ = make_client(error=requests.exceptions.ConnectTimeout("timeout"))
    with pytest.raises(ActuatorUnreachableError):
        client.query_power()


@pytest.mark.parametrize("on,flag", [(True, "true"), (False, "false")])
def test_set_power(on, flag):
    client, session = make_client({})
    client.set_power(on)
    session.get.assert_called_once_with(
        "http://192.168.178.86/rpc/Switch.Set",
        params={"id": 0, "on": flag},
        timeout=5,
    )
    # Fire and forget, the response body is never read
    session.get.return_value.json.assert_not_called()


def test_set_power_unreachable():
    client, _ = make_client(error=requests.exceptions.ConnectionError("refused"))
    with pytest.raises(ActuatorUnreachableError):
        client.set_power(True)
