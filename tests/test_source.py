import pytest
import requests

import mirrorlist.source.archlinux as source_mod
from mirrorlist.network import Endpoint
from mirrorlist.source import (
    Scheme,
    SourceUnavailable,
    fetch_mirror_list,
    parse_mirror_list,
    source_url_for,
)

LIST_URL = "https://archlinux.org/mirrorlist/all"


def test_parse_server_line_valid_and_invalid() -> None:
    assert (
        source_mod._parse_server_line("#Server = https://m.example/arch/$repo/os/$arch")
        == "https://m.example/arch"
    )
    assert (
        source_mod._parse_server_line("Server=http://m.example/$repo/os/$arch")
        == "http://m.example"
    )
    assert source_mod._parse_server_line("## Germany") is None
    assert source_mod._parse_server_line("") is None
    assert source_mod._parse_server_line("#Server = ftp://m.example/$repo/os/$arch") is None
    assert source_mod._parse_server_line("#Server = https://m.example/arch") is None


def test_parse_mirror_list_dedups_and_keeps_order(mirror_list_text: str) -> None:
    endpoints = parse_mirror_list(mirror_list_text)

    assert endpoints == [
        Endpoint("https://geo.mirror.pkgbuild.com"),
        Endpoint("http://mirror.rackspace.com/archlinux"),
        Endpoint("https://mirror.example.de/archlinux"),
        Endpoint("http://plain.example.org/arch"),
    ]


@pytest.mark.parametrize(
    "scheme, expected",
    [
        (Scheme.HTTP, ["http://mirror.rackspace.com/archlinux", "http://plain.example.org/arch"]),
        (Scheme.HTTPS, ["https://geo.mirror.pkgbuild.com", "https://mirror.example.de/archlinux"]),
    ],
)
def test_parse_mirror_list_filters_by_scheme(mirror_list_text: str, scheme, expected) -> None:
    assert [e.url for e in parse_mirror_list(mirror_list_text, scheme)] == expected


def test_parse_mirror_list_empty_text() -> None:
    assert parse_mirror_list("## nothing here\n\n") == []


def test_source_url_for_each_scheme() -> None:
    assert source_url_for(Scheme.ALL, LIST_URL) == LIST_URL
    assert source_url_for(Scheme.HTTP, LIST_URL + "/") == LIST_URL + "/http"
    assert source_url_for(Scheme.HTTPS) == LIST_URL + "/https"


def test_fetch_mirror_list_returns_text(fake_session_factory, mirror_list_text: str) -> None:
    session = fake_session_factory({LIST_URL: [mirror_list_text]})

    assert fetch_mirror_list(LIST_URL, timeout=3.0, session=session) == mirror_list_text
    assert session.calls == [LIST_URL]


def test_fetch_mirror_list_uses_module_requests_without_session(
    monkeypatch: pytest.MonkeyPatch, fake_session_factory
) -> None:
    fake = fake_session_factory({LIST_URL: ["#Server = http://a.example/$repo/os/$arch"]})
    monkeypatch.setattr(source_mod.requests, "get", fake.get)

    assert "a.example" in fetch_mirror_list(LIST_URL)


def test_fetch_mirror_list_network_error(fake_session_factory) -> None:
    session = fake_session_factory({LIST_URL: [requests.ConnectTimeout("timed out")]})

    with pytest.raises(SourceUnavailable) as excinfo:
        fetch_mirror_list(LIST_URL, session=session)

    assert excinfo.value.url == LIST_URL
    assert "timed out" in excinfo.value.reason


def test_fetch_mirror_list_bad_status(fake_session_factory) -> None:
    session = fake_session_factory({LIST_URL: [503]})

    with pytest.raises(SourceUnavailable) as excinfo:
        fetch_mirror_list(LIST_URL, session=session)

    assert "could not get response from" in str(excinfo.value)
