import pytest

from wizweb.content import (
    INITIAL_WEBPAGE,
    MAX_CONTENT_CALLBACK,
    ContentStore,
    StorageType,
    WebContent,
)

PAGE = "<html><body>Hello, World!</body></html>" * 3


def test_register_and_find():
    store = ContentStore()
    assert store.register(INITIAL_WEBPAGE, PAGE) is True
    assert store.find("index.html") == (0, len(PAGE))
    assert len(store) == 1


def test_find_missing_returns_none():
    store = ContentStore()
    store.register("a.html", "abc")
    assert store.find("b.html") is None


def test_find_returns_first_match():
    store = ContentStore()
    store.register("a.html", "first")
    store.register("a.html", "second page")
    assert store.find("a.html") == (0, 5)


def test_register_none_is_rejected():
    store = ContentStore()
    assert store.register(None, "x") is False
    assert store.register("x.html", None) is False
    assert len(store) == 0


def test_store_fills_up_at_capacity():
    store = ContentStore()
    results = [store.register(f"p{i}.html", "x") for i in range(MAX_CONTENT_CALLBACK + 2)]
    assert results.count(True) == MAX_CONTENT_CALLBACK
    assert results[-1] is False
    assert len(store) == MAX_CONTENT_CALLBACK
    assert store.find(f"p{MAX_CONTENT_CALLBACK}.html") is None


def test_content_is_cut_at_nul():
    store = ContentStore()
    store.register("n.html", b"abc\0def")
    assert store.find("n.html") == (0, 3)
    assert store.read(0, 0, 10) == b"abc"


def test_read_chunks_reassemble_content():
    store = ContentStore()
    store.register("big.html", PAGE)
    index, length = store.find("big.html")
    chunks = [store.read(index, offset, 16) for offset in range(0, length, 16)]
    assert all(len(chunk) <= 16 for chunk in chunks)
    assert b"".join(chunks) == PAGE.encode()


def test_read_past_end_is_empty():
    store = ContentStore()
    store.register("a.html", "abc")
    assert store.read(0, 3, 5) == b""


def test_read_bad_index_raises():
    store = ContentStore()
    store.register("a.html", "abc")
    with pytest.raises(IndexError):
        store.read(1, 0, 1)


def test_describe_empty():
    assert ContentStore().describe() == ">> Web content file not found\r\n"


def test_describe_lists_entries():
    store = ContentStore()
    store.register("s.html", "short")
    store.register("big.html", PAGE)
    text = store.describe()
    assert text.startswith("\r\n=== List of Web content in code flash ===\r\n")
    assert " [1] s.html, 5 byte, [short]\r\n" in text
    assert f" [2] big.html, {len(PAGE)} byte, [ ... ]\r\n" in text
    assert text.endswith("=========================================\r\n\r\n")


def test_iteration_yields_web_content():
    store = ContentStore()
    store.register("a.html", "abc")
    items = list(store)
    assert items == [WebContent("a.html", b"abc")]
    assert items[0].length == 3


def test_storage_type_values():
    assert StorageType(1) is StorageType.CODEFLASH
    assert StorageType(1).name == "CODEFLASH"
    with pytest.raises(ValueError):
        StorageType(4)