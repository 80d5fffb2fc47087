import pytest

import lazystream

@pytest.fixture(autouse=True)
def add_namespace(doctest_namespace):
	for name in lazystream.__all__:
		doctest_namespace[name] = getattr(lazystream, name)
