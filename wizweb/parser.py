"""Parsing helpers for HTTP requests and construction of response headers."""

from __future__ import annotations

from dataclasses import dataclass
from enum import IntEnum

HTTP_SERVER_PORT = 80
MAX_URI_SIZE = 512

NOT_FOUND_PAGE = (
    "HTTP/1.1 404 Not Found\r\nContent-Type: text/html\r\nContent-Length: 78\r\n\r\n"
    "<HTML>\r\n<BODY>\r\nSorry, the page you requested was not found.\r\n</BODY>\r\n</HTML>\r\n"
)
BAD_REQUEST_PAGE = (
    "HTTP/1.1 400 OK\r\nContent-Type: text/html\r\nContent-Length: 50\r\n\r\n"
    "<HTML>\r\n<BODY>\r\nInvalid request.\r\n</BODY>\r\n</HTML>\r\n"
)

HTML_HEADER = "HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: "
CGI_RESPONSE_HEAD = "HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nContent-Length: "


class Method(IntEnum):
    """Request method as recognised by the parser."""

    ERR = 0
    GET = 1
    HEAD = 2
    POST = 3


class ContentType(IntEnum):
    """Content type of a requested resource, decided from its name."""

    ERR = 0
    HTML = 1
    GIF = 2
    TEXT = 3
    JPEG = 4
    FLASH = 5
    MPEG = 6
    PDF = 7
    CGI = 8
    XML = 9
    CSS = 10
    JS = 11
    JSON = 12
    PNG = 13
    ICO = 14
    TTF = 20
    OTF = 21
    WOFF = 22
    EOT = 23
    SVG = 24


_RESPONSE_HEADS: dict[ContentType, str] = {
    ContentType.HTML: "HTTP/1.1 200 OK\r\nContent-Type: text/html\r\nConnection: keep-alive\r\nContent-Length: ",
    ContentType.GIF: "HTTP/1.1 200 OK\r\nContent-Type: image/gif\r\nContent-Length: ",
    ContentType.TEXT: "HTTP/1.1 200 OK\r\nContent-Type: text/plain\r\nContent-Length: ",
    ContentType.JPEG: "HTTP/1.1 200 OK\r\nContent-Type: image/jpeg\r\nContent-Length: ",
    ContentType.FLASH: "HTTP/1.1 200 OK\r\nContent-Type: application/x-shockwave-flash\r\nContent-Length: ",
    ContentType.XML: "HTTP/1.1 200 OK\r\nContent-Type: text/xml\r\nConnection: keep-alive\r\nContent-Length: ",
    ContentType.CSS: "HTTP/1.1 200 OK\r\nContent-Type: text/css\r\nContent-Length: ",
    ContentType.JSON: "HTTP/1.1 200 OK\r\nContent-Type: application/json\r\nContent-Length: ",
    ContentType.JS: "HTTP/1.1 200 OK\r\nContent-Type: application/javascript\r\nContent-Length: ",
    ContentType.CGI: CGI_RESPONSE_HEAD,
    ContentType.PNG: "HTTP/1.1 200 OK\r\nContent-Type: image/png\r\nContent-Length: ",
    ContentType.ICO: "HTTP/1.1 200 OK\r\nContent-Type: image/x-icon\r\nContent-Length: ",
    ContentType.TTF: "HTTP/1.1 200 OK\r\nContent-Type: application/x-font-truetype\r\nContent-Length: ",
    ContentType.OTF: "HTTP/1.1 200 OK\r\nContent-Type: application/x-font-opentype\r\nContent-Length: ",
    ContentType.WOFF: "HTTP/1.1 200 OK\r\nContent-Type: application/font-woff\r\nContent-Length: ",
    ContentType.EOT: "HTTP/1.1 200 OK\r\nContent-Type: application/vnd.ms-fontobject\r\nContent-Length: ",
    ContentType.SVG: "HTTP/1.1 200 OK\r\nContent-Type: image/svg+xml\r\nContent-Length: ",
}

# Checked in order; the first matching group of extensions wins.
_EXTENSIONS: tuple[tuple[tuple[str, ...], ContentType], ...] = (
    ((".htm", ".html"), ContentType.HTML),
    ((".gif",), ContentType.GIF),
    ((".text", ".txt"), ContentType.TEXT),
    ((".jpeg", ".jpg"), ContentType.JPEG),
    ((".swf",), ContentType.FLASH),
    ((".cgi", ".CGI"), ContentType.CGI),
    ((".json", ".JSON"), ContentType.JSON),
    ((".js", ".JS"), ContentType.JS),
    ((".xml", ".XML"), ContentType.XML),
    ((".css", ".CSS"), ContentType.CSS),
    ((".png", ".PNG"), ContentType.PNG),
    ((".ico", ".ICO"), ContentType.ICO),
    ((".ttf", ".TTF"), ContentType.TTF),
    ((".otf", ".OTF"), ContentType.OTF),
    ((".woff", ".WOFF"), ContentType.WOFF),
    ((".eot", ".EOT"), ContentType.EOT),
    ((".svg", ".SVG"), ContentType.SVG),
)


@dataclass
class HttpRequest:
    """A parsed request line: method, target and the content type of the target."""

    method: Method
    uri: str = ""
    content_type: ContentType = ContentType.ERR


def _as_text(data: str | bytes) -> str:
    text = data.decode("latin-1") if isinstance(data, (bytes, bytearray)) else data
    nul = text.find("\0")
    return text if nul < 0 else text[:nul]


def _hex_value(ch: str) -> int:
    """Value of a hex digit; any other character stands for its own code."""
    code = ord(ch)
    if "0" <= ch <= "9":
        return code - ord("0")
    if "a" <= ch <= "f":
        return 10 + code - ord("a")
    if "A" <= ch <= "F":
        return 10 + code - ord("A")
    return code


def unescape_http_url(url: str) -> str:
    """Replace every %XX escape in ``url`` by the character it encodes."""
    out: list[str] = []
    pos = 0
    while pos < len(url):
        ch = url[pos]
        if ch == "%":
            high = _hex_value(url[pos + 1]) if pos + 1 < len(url) else 0
            low = _hex_value(url[pos + 2]) if pos + 2 < len(url) else 0
            out.append(chr((high * 0x10 + low) & 0xFF))
            pos += 3
        else:
            out.append(ch)
            pos += 1
    return "".join(out)


def make_http_response_head(content_type: ContentType | int, length: int) -> str:
    """Build a ``200 OK`` header for a body of ``length`` bytes of the given type."""
    try:
        head = _RESPONSE_HEADS[ContentType(content_type)]
    except (ValueError, KeyError):
        raise ValueError(f"no response header for content type {content_type!r}") from None
    return f"{head}{length}\r\n\r\n"


def find_http_uri_type(name: str) -> ContentType:
    """Decide the content type of a resource from the extensions found in its name."""
    for extensions, content_type in _EXTENSIONS:
        if any(ext in name for ext in extensions):
            return content_type
    return ContentType.ERR


def parse_http_request(raw: str | bytes) -> HttpRequest:
    """Parse the method and target of a request.

    For GET and HEAD the target is the second space-separated token; for POST
    it is everything after the method, so the body stays available to CGI handlers.
    """
    text = _as_text(raw).lstrip(" ")
    if not text:
        return HttpRequest(Method.ERR)
    first, sep, rest = text.partition(" ")
    remainder = rest if sep else None

    if first in ("GET", "get", "HEAD", "head"):
        method = Method.GET if first in ("GET", "get") else Method.HEAD
        target = None
        if remainder is not None:
            stripped = remainder.lstrip(" ")
            if stripped:
                target = stripped.split(" ", 1)[0]
    elif first in ("POST", "post"):
        method = Method.POST
        target = remainder or None
    else:
        method = Method.ERR
        target = first

    if target is None:
        return HttpRequest(Method.ERR)
    return HttpRequest(method, target)


def atoi(text: str, base: int) -> int:
    """Convert digits up to the first space or end of text, as a 16-bit value."""
    num = 0
    for ch in text:
        if ch in ("\0", " "):
            break
        num = num * base + _hex_value(ch)
    return num & 0xFFFF


def mid(src: str, start: str, end: str) -> str:
    """Return the text of ``src`` between the first ``start`` and the next ``end``."""
    begin = src.find(start)
    if begin < 0:
        raise ValueError(f"{start!r} not found")
    begin += len(start)
    stop = src.find(end, begin)
    if stop < 0:
        raise ValueError(f"{end!r} not found after {start!r}")
    return src[begin:stop]


def get_http_param_value(request_text: str | bytes, param_name: str) -> str | None:
    """Look up a form parameter in the body of a POST request.

    The body is taken after the blank line and cut to the Content-Length.
    Returns None when the parameter does not occur.
    """
    text = _as_text(request_text)
    try:
        content_length = atoi(mid(text, "Content-Length: ", "\r\n"), 10)
    except ValueError:
        content_length = 0
    separator = text.find("\r\n\r\n")
    if separator < 0:
        return None
    body = text[separator + 4:][:content_length]

    found = body.find(param_name)
    if found < 0:
        return None
    value_start = found + len(param_name) + 1
    value_end = body.find("&", value_start)
    value = body[value_start:] if value_end < 0 else body[value_start:value_end]
    if not value:
        return ""
    return unescape_http_url(value).replace("+", " ")


def get_http_uri_name(uri: str) -> str:
    """Return the requested resource name without its leading slash or query."""
    stripped = uri.lstrip(" ?")
    if not stripped:
        raise ValueError("empty request target")
    end = len(stripped)
    for delimiter in (" ", "?"):
        pos = stripped.find(delimiter)
        if 0 <= pos < end:
            end = pos
    name = stripped[:end]
    return name if name == "/" else name[1:]


def inet_addr(text: str) -> tuple[int, int, int, int]:
    """Parse a dotted address; each part may be decimal or 0x-prefixed hex."""
    parts = [part for part in text.split(".") if part]
    if len(parts) < 4:
        raise ValueError(f"not a dotted IPv4 address: {text!r}")
    octets = []
    for part in parts[:4]:
        value = atoi(part[2:], 16) if part.startswith("0x") else atoi(part, 10)
        octets.append(value & 0xFF)
    return (octets[0], octets[1], octets[2], octets[3])