import logging

import pytest

from linkcheck.crawler.parser import LinkExtractor

PAGE_URL = 'https://example.com/docs/index.html'

HTML = """
<html>
  <head><link href="/style.css" rel="stylesheet"></head>
  <body>
    <a href="/about">About</a>
    <a href="guide.html#install">Guide</a>
    <a href="guide.html">Guide again</a>
    <a href="https://EXAMPLE.com/contact?x=1#form">Contact</a>
    <a href="https://external.com/page">External</a>
    <a href="//cdn.example.org/lib.js">CDN</a>
    <a href="mailto:team@example.com">Mail</a>
    <a href="javascript:void(0)">Script</a>
    <a href="#top">Top</a>
    <a href="">Empty</a>
    <a>No href</a>
  </body>
</html>
"""


@pytest.fixture
def extractor():
    return LinkExtractor('example.com')


def test_extracts_same_host_links(extractor):
    links = extractor.extract_links(HTML, PAGE_URL)

    assert links == [
        'https://example.com/about',
        'https://example.com/docs/guide.html',
        'https://example.com/contact?x=1',
    ]


def test_include_external_keeps_other_hosts(extractor):
    links = extractor.extract_links(HTML, PAGE_URL, include_external=True)

    assert 'https://external.com/page' in links
    assert 'https://cdn.example.org/lib.js' in links
    assert not any(link.startswith(('mailto:', 'javascript:')) for link in links)
    assert len(links) == len(set(links))


def test_extraction_is_idempotent(extractor):
    first = extractor.extract_links(HTML, PAGE_URL, include_external=True)
    second = extractor.extract_links(HTML, PAGE_URL, include_external=True)

    assert first == second


def test_unresolvable_href_is_skipped(extractor, caplog):
    html = '<a href="http://[broken/x">bad</a><a href="/ok">ok</a>'

    with caplog.at_level(logging.DEBUG, logger='linkcheck.crawler.parser'):
        links = extractor.extract_links(html, 'https://example.com/')

    assert links == ['https://example.com/ok']
    assert 'Could not resolve link' in caplog.text


def test_host_comparison_ignores_case():
    extractor = LinkExtractor('Example.COM')

    assert extractor.is_internal('https://example.com/page')
    assert not extractor.is_internal('https://www.example.com/page')


def test_empty_document_has_no_links(extractor):
    assert extractor.extract_links('', 'https://example.com/') == []
