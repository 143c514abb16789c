from santa.services.rate_limit import RateLimiter


class FakeClock:
    def __init__(self):
        self.now = 100.0

    def __call__(self):
        return self.now


def test_allows_up_to_max_calls():
    clock = FakeClock()
    limiter = RateLimiter(max_calls=2, period_seconds=10, clock=clock)
    assert limiter.allow(1, "generate").allowed
    assert limiter.allow(1, "generate").allowed
    blocked = limiter.allow(1, "generate")
    assert not blocked.allowed
    assert blocked.retry_after == 10


def test_window_slides():
    clock = FakeClock()
    limiter = RateLimiter(max_calls=1, period_seconds=10, clock=clock)
    assert limiter.allow(1, "upload").allowed
    clock.now += 4
    assert limiter.allow(1, "upload").retry_after == 6
    clock.now += 6
    assert limiter.allow(1, "upload").allowed


def test_keys_are_per_user_and_action():
    limiter = RateLimiter(max_calls=1, period_seconds=10, clock=FakeClock())
    assert limiter.allow(1, "upload").allowed
    assert limiter.allow(2, "upload").allowed
    assert limiter.allow(1, "generate").allowed
    assert not limiter.allow(1, "upload").allowed

