"""CGI endpoints that read and change the CAN bridge settings."""

from __future__ import annotations

from dataclasses import dataclass, field

from wizweb.config import BaudRate, CanConfig, EthMode, default_can_config
from wizweb.parser import atoi, get_http_param_value

HTTP_FAILED = 0
HTTP_OK = 1
HTTP_RESET = 2

_ETH_MODE_MAX = len(EthMode)
_BDRATE_MAX = len(BaudRate)


def make_json_devinfo(config: CanConfig) -> str:
    """Build the JSONP reply that the settings page evaluates."""
    return (
        f'DevinfoCallback({{"opmode":"{int(config.eth_mode)}",'
        f'"baud":"{int(config.baudrate)}",'
        "});"
    )


def set_devinfo(config: CanConfig, request_text: str | bytes) -> bool:
    """Apply the ``opmode`` and ``baud`` form fields of a POST request to ``config``.

    An out-of-range mode is ignored; an out-of-range bit rate falls back to
    125 kbps. Returns True when either field was present.
    """
    found = False

    value = get_http_param_value(request_text, "opmode")
    if value is not None:
        eth_mode = atoi(value, 10) & 0xFF
        if eth_mode < _ETH_MODE_MAX:
            config.eth_mode = EthMode(eth_mode)
        found = True

    value = get_http_param_value(request_text, "baud")
    if value is not None:
        baud = atoi(value, 10) & 0xFF
        if baud >= _BDRATE_MAX:
            baud = BaudRate.BDRATE_125
        config.baudrate = BaudRate(baud)
        found = True

    return found


@dataclass
class CgiResult:
    """Outcome of a CGI request: a status code and the body to send."""

    status: int
    body: str = ""

    def __bool__(self) -> bool:
        return self.status != HTTP_FAILED

    @property
    def length(self) -> int:
        return len(self.body)


@dataclass
class DeviceSettings:
    """The live settings together with a flag telling that they were posted."""

    config: CanConfig = field(default_factory=default_can_config)
    changed: bool = False

    def get_cgi(self, uri_name: str) -> CgiResult:
        """Answer a GET of a CGI resource."""
        if uri_name == "get_devinfo.cgi":
            return CgiResult(HTTP_OK, make_json_devinfo(self.config))
        # Any other CGI name is accepted with an empty body.
        return CgiResult(HTTP_OK, "")

    def post_cgi(self, uri_name: str, request_text: str | bytes) -> CgiResult:
        """Answer a POST to a CGI resource; any POST marks the settings changed."""
        self.changed = True
        if uri_name == "set_devinfo.cgi":
            applied = set_devinfo(self.config, request_text)
            return CgiResult(HTTP_OK, str(int(applied)))
        if uri_name == "example.cgi":
            return CgiResult(HTTP_OK, "1")
        return CgiResult(HTTP_FAILED, "")

    def consume_change(self) -> bool:
        """Report whether the settings were posted since the last call, and clear it."""
        was_changed = self.changed
        self.changed = False
        return was_changed