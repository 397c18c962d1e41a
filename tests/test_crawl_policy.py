from keywordcrawl.domain.crawl_state import DomainCrawlState
from keywordcrawl.services.crawl_policy import MIN_FETCH_TIMEOUT, CrawlBudget


class FakeClock:
    def __init__(self, now=0.0):
        self.now = now

    def __call__(self):
        return self.now


def _state(start=0.0):
    return DomainCrawlState("https://a.test", start_time=start)


def test_time_not_exceeded_without_limit():
    clock = FakeClock(1_000.0)
    budget = CrawlBudget(max_pages=10, clock=clock)
    assert not budget.time_exceeded(_state())
    assert budget.deadline(_state()) is None


def test_time_exceeded_only_past_limit():
    clock = FakeClock(5.0)
    budget = CrawlBudget(max_pages=10, max_time_seconds=5, clock=clock)
    state = _state()
    assert not budget.time_exceeded(state)
    clock.now = 5.01
    assert budget.time_exceeded(state)


def test_deadline_is_relative_to_state_start():
    budget = CrawlBudget(max_pages=10, max_time_seconds=5, clock=FakeClock())
    assert budget.deadline(_state(start=100.0)) == 105.0


def test_pages_exhausted_at_cap():
    budget = CrawlBudget(max_pages=2, clock=FakeClock())
    state = _state()
    state.pages_crawled = 1
    assert not budget.pages_exhausted(state)
    state.pages_crawled = 2
    assert budget.pages_exhausted(state)


def test_zero_page_budget_is_exhausted_immediately():
    assert CrawlBudget(max_pages=0, clock=FakeClock()).pages_exhausted(_state())


def test_depth_unbounded_when_not_set():
    state = _state()
    state.pagination_hops = 50
    assert not CrawlBudget(max_pages=10, clock=FakeClock()).depth_exhausted(state)


def test_depth_exhausted_after_max_hops():
    budget = CrawlBudget(max_pages=10, max_depth=2, clock=FakeClock())
    state = _state()
    state.pagination_hops = 1
    assert not budget.depth_exhausted(state)
    state.pagination_hops = 2
    assert budget.depth_exhausted(state)


def test_fetch_timeout_defaults_to_http_timeout():
    budget = CrawlBudget(max_pages=10, http_timeout=7.0, clock=FakeClock())
    assert budget.fetch_timeout(_state()) == 7.0


def test_fetch_timeout_shrinks_to_remaining_budget():
    clock = FakeClock(3.0)
    budget = CrawlBudget(max_pages=10, max_time_seconds=5, http_timeout=10.0, clock=clock)
    assert budget.fetch_timeout(_state()) == 2.0
    clock.now = 4.99
    assert budget.fetch_timeout(_state()) == MIN_FETCH_TIMEOUT
