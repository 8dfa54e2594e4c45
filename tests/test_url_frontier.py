from linkcheck.crawler.url_frontier import URLFrontier


def test_dequeue_is_fifo():
    frontier = URLFrontier()
    for url in ('https://example.com/1', 'https://example.com/2', 'https://example.com/3'):
        frontier.enqueue(url)

    assert frontier.dequeue() == 'https://example.com/1'
    assert frontier.dequeue() == 'https://example.com/2'
    assert len(frontier) == 1


def test_dequeue_on_empty_queue_returns_none():
    frontier = URLFrontier()
    assert frontier.is_empty()
    assert frontier.dequeue() is None


def test_enqueue_does_not_deduplicate():
    frontier = URLFrontier()
    frontier.enqueue('https://example.com/')
    frontier.enqueue('https://example.com/')

    assert len(frontier) == 2


def test_claim_grants_ownership_once():
    frontier = URLFrontier()

    assert frontier.claim('https://example.com/') is True
    assert frontier.claim('https://example.com/') is False
    assert frontier.is_visited('https://example.com/')
    assert not frontier.is_visited('https://example.com/other')


def test_stats():
    frontier = URLFrontier()
    frontier.enqueue('https://example.com/a')
    frontier.enqueue('https://example.com/a')
    url = frontier.dequeue()
    frontier.claim(url)
    frontier.claim(frontier.dequeue())

    assert frontier.get_stats() == {
        'total_queued': 0,
        'total_enqueued': 2,
        'total_claimed': 1,
        'duplicate_claims': 1
    }
