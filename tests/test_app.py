import pytest

from wizweb.app import HELLO_PAGE, SETTINGS_PAGE, build_server, main
from wizweb.config import BaudRate, CanConfig, EthMode


def _split(response: bytes):
    head, _, body = response.partition(b"\r\n\r\n")
    return head.decode("latin-1"), body


def test_root_serves_settings_page():
    server = build_server(CanConfig())
    head, body = _split(server.build_response(b"GET / HTTP/1.1\r\nHost: x\r\n\r\n"))
    assert head.startswith("HTTP/1.1 200 OK")
    assert "Content-Type: text/html" in head
    assert body == SETTINGS_PAGE.encode("latin-1")
    assert f"Content-Length: {len(body)}" in head


def test_index_by_name_matches_root():
    server = build_server(CanConfig())
    root = server.build_response(b"GET / HTTP/1.1\r\n\r\n")
    named = server.build_response(b"GET /index.html HTTP/1.1\r\n\r\n")
    assert root == named


def test_default_config_used_when_none_given():
    server = build_server(None)
    assert server.settings.config.eth_mode == EthMode.TCP_SERVER
    assert server.settings.config.baudrate == BaudRate.BDRATE_125


def test_get_devinfo_reports_config():
    config = CanConfig(EthMode.TCP_CLIENT, BaudRate.BDRATE_250)
    server = build_server(config)
    _, body = _split(server.build_response(b"GET /get_devinfo.cgi HTTP/1.1\r\n\r\n"))
    assert body == b'DevinfoCallback({"opmode":"1","baud":"1",});'


def test_post_set_devinfo_changes_shared_config():
    config = CanConfig()
    server = build_server(config)
    form = "opmode=1&baud=2"
    raw = f"POST /set_devinfo.cgi HTTP/1.1\r\nContent-Length: {len(form)}\r\n\r\n{form}"
    _, body = _split(server.build_response(raw.encode("latin-1")))
    assert body == b"1"
    assert config.eth_mode == EthMode.TCP_CLIENT
    assert config.baudrate == BaudRate.BDRATE_500
    assert server.settings.consume_change() is True
    assert server.settings.consume_change() is False


def test_unknown_page_is_not_found():
    server = build_server(CanConfig())
    head, _ = _split(server.build_response(b"GET /missing.html HTTP/1.1\r\n\r\n"))
    assert head.startswith("HTTP/1.1 404 Not Found")


def test_settings_page_offers_both_fields():
    server = build_server(CanConfig())
    _, body = _split(server.build_response(b"GET /index.html HTTP/1.1\r\n\r\n"))
    assert b'name="opmode"' in body
    assert b'name="baud"' in body
    assert "Hello, World!" in HELLO_PAGE


def test_main_rejects_bad_port():
    with pytest.raises(SystemExit) as excinfo:
        main(["--port", "notanumber"])
    assert excinfo.value.code == 2


def test_main_rejects_out_of_range_port():
    with pytest.raises(SystemExit) as excinfo:
        main(["--port", "70000"])
    assert excinfo.value.code == 2