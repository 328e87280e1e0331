import pytest


@pytest.fixture(autouse=True)
def _ctx(catalogue_bed):
    """Push domain context before each test, cleanup after."""
    with catalogue_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()
