from outreach.config import get_settings
from outreach.database import engine


def test_pool_checkout_is_bounded_by_storage_timeout() -> None:
    assert engine.sync_engine.pool.timeout() == get_settings().storage_timeout_seconds
