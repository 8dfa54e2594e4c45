import pytest

from linkcheck.utils.url import get_hostname, is_http_url, normalize_url


@pytest.mark.parametrize('url, expected', [
    ('https://example.com', 'https://example.com/'),
    ('HTTPS://Example.COM/Docs?q=1#intro', 'https://example.com/Docs?q=1'),
    ('  https://example.com/a#  ', 'https://example.com/a'),
    ('https://bücher.example/seite', 'https://xn--bcher-kva.example/seite'),
])
def test_normalize_url(url, expected):
    assert normalize_url(url) == expected


def test_hostname_is_idna_encoded():
    assert get_hostname('https://Bücher.example/') == 'xn--bcher-kva.example'
    assert get_hostname('https://xn--bcher-kva.example/') == 'xn--bcher-kva.example'
    assert get_hostname('/relative') is None


@pytest.mark.parametrize('url, expected', [
    ('https://example.com/', True),
    ('http://bücher.example', True),
    ('ftp://example.com/', False),
    ('mailto:team@example.com', False),
    ('example.com', False),
    ('', False),
])
def test_is_http_url(url, expected):
    assert is_http_url(url) is expected


def test_unparseable_url_raises_value_error():
    with pytest.raises(ValueError):
        normalize_url('http://[broken')
