from wizweb.config import BaudRate, CanConfig, EthMode, default_can_config
from wizweb.handlers import (
    HTTP_FAILED,
    HTTP_OK,
    DeviceSettings,
    make_json_devinfo,
    set_devinfo,
)


def _post(body: str) -> str:
    return (
        "/set_devinfo.cgi HTTP/1.1\r\n"
        "Host: device.example.com\r\n"
        f"Content-Length: {len(body)}\r\n"
        "\r\n"
        f"{body}"
    )


def test_json_devinfo_default():
    assert make_json_devinfo(default_can_config()) == (
        'DevinfoCallback({"opmode":"0","baud":"0",});'
    )


def test_json_devinfo_reflects_config():
    text = make_json_devinfo(CanConfig(EthMode.TCP_CLIENT, BaudRate.BDRATE_500))
    assert '"opmode":"1"' in text
    assert '"baud":"2"' in text


def test_set_devinfo_applies_both_fields():
    config = default_can_config()
    assert set_devinfo(config, _post("opmode=1&baud=2")) is True
    assert config.eth_mode == EthMode.TCP_CLIENT
    assert config.baudrate == BaudRate.BDRATE_500


def test_set_devinfo_ignores_bad_mode():
    config = CanConfig(EthMode.TCP_CLIENT, BaudRate.BDRATE_250)
    assert set_devinfo(config, _post("opmode=7")) is True
    assert config.eth_mode == EthMode.TCP_CLIENT
    assert config.baudrate == BaudRate.BDRATE_250


def test_set_devinfo_bad_baud_falls_back_to_125():
    config = CanConfig(EthMode.TCP_SERVER, BaudRate.BDRATE_500)
    assert set_devinfo(config, _post("baud=9")) is True
    assert config.baudrate == BaudRate.BDRATE_125


def test_set_devinfo_without_fields():
    config = CanConfig(EthMode.TCP_CLIENT, BaudRate.BDRATE_250)
    assert set_devinfo(config, _post("other=1")) is False
    assert config == CanConfig(EthMode.TCP_CLIENT, BaudRate.BDRATE_250)


def test_get_devinfo_cgi_round_trip():
    settings = DeviceSettings()
    settings.post_cgi("set_devinfo.cgi", _post("opmode=1&baud=1"))
    result = settings.get_cgi("get_devinfo.cgi")
    assert result.status == HTTP_OK
    assert result.body == make_json_devinfo(settings.config)
    assert result.length == len(result.body)
    assert '"opmode":"1"' in result.body


def test_get_unknown_cgi_is_accepted_empty():
    result = DeviceSettings().get_cgi("unknown.cgi")
    assert result.status == HTTP_OK
    assert result.body == ""
    assert bool(result) is True


def test_post_set_devinfo_reports_applied():
    settings = DeviceSettings()
    result = settings.post_cgi("set_devinfo.cgi", _post("opmode=1"))
    assert result.status == HTTP_OK
    assert result.body == "1"
    assert settings.config.eth_mode == EthMode.TCP_CLIENT


def test_post_set_devinfo_without_fields_reports_zero():
    result = DeviceSettings().post_cgi("set_devinfo.cgi", _post("x=1"))
    assert result.body == "0"


def test_post_example_cgi():
    result = DeviceSettings().post_cgi("example.cgi", _post(""))
    assert result.status == HTTP_OK
    assert result.body == "1"


def test_post_unknown_cgi_fails_but_marks_change():
    settings = DeviceSettings()
    result = settings.post_cgi("missing.cgi", _post(""))
    assert result.status == HTTP_FAILED
    assert bool(result) is False
    assert settings.changed is True


def test_consume_change_clears_flag():
    settings = DeviceSettings()
    assert settings.consume_change() is False
    settings.post_cgi("set_devinfo.cgi", _post("baud=1"))
    assert settings.consume_change() is True
    assert settings.consume_change() is False