# wizweb

`wizweb` is a small HTTP server that serves pages registered in memory and
answers CGI requests for reading and changing the settings of a
CAN-to-Ethernet bridge: its Ethernet mode (TCP server or TCP client) and its
CAN bit rate (125, 250 or 500 kbps).

It uses only the standard library.

## Installing

```
pip install .
```

For the tests:

```
pip install ".[test]"
pytest
```

## Running the server

```
wizweb
```

This prints the current CAN settings and starts serving the settings page,
registered as `index.html`, on port 80 of every address. Requesting `/`
serves that page. Each time settings are posted, the new settings are printed
again.

Options:

- `--host ADDRESS` – address to listen on (default: all addresses)
- `--port PORT` – port to listen on (default: 80)
- `--hello` – serve a plain "Hello, World!" page instead of the settings page

Stop the server with Ctrl-C.

## Endpoints

- `GET /` (also `/m` and `/mobile`, which map to `m/index.html` and
  `mobile/index.html`) serves the registered start page.
- `GET /get_devinfo.cgi` returns the current settings as a JSONP call:
  `DevinfoCallback({"opmode":"0","baud":"0",});`
  Any other `.cgi` name asked for with GET gets an empty body.
- `POST /set_devinfo.cgi` with a form body such as `opmode=1&baud=2` and a
  `Content-Length` header changes the settings and replies `1` if either
  field was present, `0` otherwise. An out-of-range mode is ignored; an
  out-of-range bit rate falls back to 125 kbps.
- `POST /example.cgi` replies `1`. A POST to any other `.cgi` name, or to a
  name that is not `.cgi`, gets a `404 Not Found` reply.
- Any other registered page is served by name with a header chosen from its
  extension (`.html`, `.css`, `.js`, `.png`, …). Pages whose extension is
  `.xml` or not recognised are sent without a header. Unknown pages get a
  `404 Not Found` reply and unrecognised requests a `400` reply.

## Using it from Python

```python
from wizweb.app import build_server
from wizweb.config import BaudRate, CanConfig, EthMode

server = build_server(CanConfig(EthMode.TCP_CLIENT, BaudRate.BDRATE_250))
server.serve_forever("127.0.0.1", 8080)
```

`HttpServer.build_response(raw)` turns the bytes of one request into the
bytes of its reply, which is handy for testing without a socket;
`HttpServer.handle_connection(conn)` reads one request from a socket-like
object, answers it and closes it.

The building blocks can also be used on their own:

- `wizweb.parser` parses requests (`parse_http_request`,
  `get_http_uri_name`, `get_http_param_value`), decodes `%XX` escapes
  (`unescape_http_url`), picks a `ContentType` from a file name
  (`find_http_uri_type`), builds response headers
  (`make_http_response_head`) and parses dotted addresses (`inet_addr`).
- `wizweb.config` holds `CanConfig`, `EthMode`, `BaudRate`,
  `default_can_config`, `format_can_config` for a readable summary, and
  `RxRingBuffer`, a fixed-size queue of received `CanMessage` frames.
- `wizweb.handlers` holds `make_json_devinfo`, `set_devinfo` and
  `DeviceSettings`, which answers the CGI requests and records whether the
  settings were posted (`consume_change`).
- `wizweb.content` holds `ContentStore`, a registry of up to twenty named
  pages (`register`, `find`, `read`, `describe`).

## What it does not do

- It does not talk to a CAN bus. Changed settings are stored and printed,
  but no frames are sent or received; `CanMessage` and `RxRingBuffer` are
  data structures only, and nothing relays frames to or from a TCP peer.
- The server answers one connection at a time, reads a single request of at
  most 2048 bytes from it and then closes it; there is no keep-alive, no
  TLS and no serving of files from disk.