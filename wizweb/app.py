"""Entry point: the CAN bridge settings page served over HTTP."""

from __future__ import annotations

import argparse
import socket
import sys
from typing import Optional, Sequence, TextIO

from wizweb.config import CanConfig, default_can_config, format_can_config
from wizweb.content import INITIAL_WEBPAGE, ContentStore
from wizweb.handlers import DeviceSettings
from wizweb.parser import HTTP_SERVER_PORT
from wizweb.server import HttpServer

HELLO_PAGE = (
    "<!DOCTYPE html>"
    '<html lang="en">'
    "<head>"
    '<meta charset="UTF-8">'
    "<title>HTTP Server Example</title>"
    "</head>"
    "<body>"
    "<h1>Hello, World!</h1>"
    "</body>"
    "</html>"
)

SETTINGS_PAGE = """<!DOCTYPE html>
<html>
<head>
<meta http-equiv="Content-Type" content="text/html; charset=UTF-8">
<meta http-equiv="pragma" content="no-cache">
<title>CAN Settings</title>
<style>
body { font: normal 14px Helvetica, Arial, sans-serif; margin: 0; padding: 0; }
.usual { padding: 15px 20px; margin: 8px auto; }
.usual div { padding: 10px; background: #EEF3FF; }
.btn { background: #3498db; color: #ffffff; border-radius: 28px; padding: 3px 10px; border: 0; }
.btn:hover { background: #3cb0fd; cursor: pointer; }
label { margin-left: 10px; }
</style>
<script>
function selset(id, val) {
  var o = document.getElementById(id);
  for (var i = 0; i < o.options.length; i++) {
    if (i == val) { o.options[i].selected = true; break; }
  }
}
function DevinfoCallback(o) {
  selset('selOpMode1', o.opmode);
  selset('selBaud1', o.baud);
}
function getDevinfo() {
  var s = document.createElement('script');
  s.src = 'get_devinfo.cgi?' + Date.now();
  document.body.appendChild(s);
}
function setDevinfo() {
  var body = '&opmode=' + document.getElementById('selOpMode1').value +
             '&baud=' + document.getElementById('selBaud1').value;
  var req = new XMLHttpRequest();
  req.open('POST', 'set_devinfo.cgi', true);
  req.setRequestHeader('Content-Type', 'application/x-www-form-urlencoded');
  req.onreadystatechange = function () {
    if (req.readyState == 4 && req.status == 200) { alert('Request successful'); }
  };
  req.send(body);
}
</script>
</head>
<body>
<div class="usual">
<h1>CAN bridge</h1>
<input type="button" class="btn" value="Get Settings" onclick="getDevinfo();">
<input type="button" class="btn" value="Set Settings" onclick="setDevinfo();">
<h3>CAN setting</h3>
<div>
<label for="selOpMode1">Operation mode:</label>
<select id="selOpMode1" name="opmode">
<option value="0">TCP Server</option>
<option value="1">TCP Client</option>
</select>
<label for="selBaud1">Baudrate:</label>
<select id="selBaud1" name="baud">
<option value="0">125</option>
<option value="1">250</option>
<option value="2">500</option>
</select>
</div>
</div>
</body>
</html>
"""


def build_server(can_config: Optional[CanConfig] = None) -> HttpServer:
    """Create a server that shows and changes ``can_config`` through its settings page."""
    config = can_config if can_config is not None else default_can_config()
    store = ContentStore()
    store.register(INITIAL_WEBPAGE, SETTINGS_PAGE)
    return HttpServer(store=store, settings=DeviceSettings(config=config))


def _build_hello_server() -> HttpServer:
    store = ContentStore()
    store.register(INITIAL_WEBPAGE, HELLO_PAGE)
    return HttpServer(store=store)


def _serve(server: HttpServer, host: str, port: int, out: TextIO) -> None:
    """Answer connections one at a time, reporting settings whenever they are posted."""
    with socket.socket(socket.AF_INET, socket.SOCK_STREAM) as listener:
        listener.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        listener.bind((host, port))
        listener.listen()
        server.server_address = listener.getsockname()
        server.ready.set()
        while True:
            conn, _ = listener.accept()
            try:
                server.handle_connection(conn)
            except OSError:
                continue
            if server.settings.consume_change():
                out.write(format_can_config(server.settings.config))
                out.flush()


def _parse_args(argv: Optional[Sequence[str]]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        prog="wizweb", description="Serve the CAN bridge settings page over HTTP."
    )
    parser.add_argument("--host", default="", help="address to listen on (default: all)")
    parser.add_argument(
        "--port", type=int, default=HTTP_SERVER_PORT, help="port to listen on (default: 80)"
    )
    parser.add_argument(
        "--hello", action="store_true", help="serve a plain greeting page instead of the settings"
    )
    args = parser.parse_args(argv)
    if not 0 <= args.port <= 0xFFFF:
        parser.error(f"port out of range: {args.port}")
    return args


def main(argv: Optional[Sequence[str]] = None) -> int:
    """Run the server until interrupted."""
    args = _parse_args(argv)
    out = sys.stdout
    if args.hello:
        server = _build_hello_server()
    else:
        server = build_server(default_can_config())
        out.write(format_can_config(server.settings.config))
        out.flush()
    try:
        _serve(server, args.host, args.port, out)
    except KeyboardInterrupt:
        return 0
    return 0


if __name__ == "__main__":
    sys.exit(main())