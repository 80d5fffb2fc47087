from __future__ import annotations
from typing import List

from lazystream import of, ofarray, ofcollection, empty, intrange, \
	generate, iterate, Stream, END, SizeBounds
from lazystream._stream._python import _INITIAL, _PULL, _RESTART, _BOUNDS

from hypothesis import given, strategies as st

import array
import itertools
import operator
import pytest

smallints = st.integers(min_value=-20, max_value=20)
counts = st.integers(min_value=0, max_value=30)

def streams(items:List[int]):
	return st.sampled_from([of(*items), ofarray(items),
		ofarray(array.array('q', items)), ofcollection(items)])

def test_dispatch_tables_cover_every_kind():
	for table in [_INITIAL, _PULL, _RESTART, _BOUNDS]:
		assert set(table) == set(Stream._Kind)

@given(st.lists(smallints))
def test_producers(items:List[int]):
	assert list(of(*items)) == items
	assert list(ofarray(items)) == items
	assert list(ofarray(tuple(items))) == items
	assert list(ofarray(array.array('q', items))) == items
	assert list(ofcollection(items)) == items
	assert list(ofcollection(iter(items))) == items
	assert list(empty()) == []

@given(st.lists(smallints), st.data())
def test_exhaustion_is_permanent(items:List[int], data):
	s = data.draw(streams(items))
	assert list(s) == items
	for _ in range(3):
		assert s.pull() is END
	with pytest.raises(StopIteration):
		next(s)

def test_exhaustion_is_permanent_after_map_terminates():
	calls = []
	def mapper(x):
		calls.append(x)
		return None if x == 2 else x
	s = of(1, 2, 3).map(mapper)
	assert s.pull() == 1
	assert s.pull() is END
	assert s.pull() is END
	assert calls == [1, 2]

@given(st.lists(smallints))
def test_map(items:List[int]):
	assert list(of(*items).map(lambda x: x * 3)) == [x * 3 for x in items]
	assert list(of(*items).map(str)) == [str(x) for x in items]

@given(st.lists(smallints))
def test_select_reject(items:List[int]):
	even = lambda x: x % 2 == 0
	assert list(of(*items).select(even)) == [x for x in items if even(x)]
	assert list(of(*items).reject(even)) == [x for x in items if not even(x)]
	assert list(of(*items).select(even).select(lambda x: not even(x))) == []

@given(st.lists(smallints))
def test_inspect(items:List[int]):
	seen: List[int] = []
	s = of(*items).inspect(seen.append)
	assert seen == []
	assert list(s) == items
	assert seen == items

def test_inspect_runs_before_downstream():
	order: List[str] = []
	s = of(1, 2).inspect(lambda x: order.append('inspect {}'.format(x))) \
		.map(lambda x: order.append('map {}'.format(x)) or x)
	list(s)
	assert order == ['inspect 1', 'map 1', 'inspect 2', 'map 2']

@given(st.lists(smallints), counts, counts)
def test_drop_take(items:List[int], n:int, k:int):
	assert list(of(*items).drop(n)) == items[n:]
	assert list(of(*items).take(n)) == items[:n]
	assert list(of(*items).drop(n).take(k)) == items[n:n+k]
	assert list(of(*items).drop(0).drop(n).take(k).drop(0)) == items[n:n+k]

@given(counts)
def test_take_infinite(n:int):
	assert list(iterate(0, lambda x: x + 1).take(n)) == list(range(n))

def test_take_stops_pulling_upstream():
	pulled: List[int] = []
	s = iterate(0, lambda x: x + 1).inspect(pulled.append).take(3)
	assert list(s) == [0, 1, 2]
	assert s.pull() is END
	assert pulled == [0, 1, 2]

def test_drop_past_the_end():
	s = of(1, 2).drop(5)
	assert s.pull() is END
	assert s.pull() is END

@pytest.mark.parametrize('method', ['drop', 'take'])
def test_count_arguments(method:str):
	with pytest.raises(ValueError):
		getattr(of(1), method)(-1)
	with pytest.raises(TypeError):
		getattr(of(1), method)(1.5)

@given(st.lists(smallints), smallints)
def test_dropwhile_takewhile(items:List[int], pivot:int):
	below = lambda x: x < pivot
	assert list(of(*items).dropwhile(below)) == list(itertools.dropwhile(below, items))
	assert list(of(*items).takewhile(below)) == list(itertools.takewhile(below, items))
	above = lambda x: x >= pivot
	assert list(of(*items).dropuntil(above)) == list(itertools.dropwhile(below, items))
	assert list(of(*items).takeuntil(above)) == list(itertools.takewhile(below, items))

def test_dropwhile_decides_once():
	s = of(1, 2, 9, 1, 2).dropwhile(lambda x: x < 5)
	assert list(s) == [9, 1, 2]

def test_takewhile_decides_once():
	s = of(1, 2, 9, 1, 2).takewhile(lambda x: x < 5)
	assert s.pull() == 1
	assert s.pull() == 2
	assert s.pull() is END
	assert s.pull() is END

@given(st.lists(st.integers(min_value=0, max_value=5)))
def test_unique(items:List[int]):
	expected = list(dict.fromkeys(items))
	assert list(of(*items).unique()) == expected
	assert list(of(*items).unique().unique()) == expected

def test_unique_unhashable():
	with pytest.raises(TypeError):
		list(of([1], [2]).unique())

def test_unique_infinite_with_finite_values():
	assert list(iterate(0, lambda x: (x + 1) % 3).unique().take(3)) == [0, 1, 2]

@given(st.lists(smallints, max_size=10), st.integers(min_value=-3, max_value=5))
def test_cycle(items:List[int], times:int):
	assert list(of(*items).cycle(times)) == items * times
	assert list(of(*items).repeat(times)) == items * times

@given(st.lists(smallints, min_size=1, max_size=10), counts)
def test_cycle_forever(items:List[int], n:int):
	assert list(of(*items).cycle().take(n)) == list(itertools.islice(itertools.cycle(items), n))

def test_cycle_empty_forever_ends():
	assert list(empty().cycle()) == []
	assert list(of(1, 2).select(lambda x: x > 5).cycle()) == []

def test_cycle_through_operators():
	s = intrange(0, 10).select(lambda x: x % 3 == 0).map(str).cycle(2)
	assert list(s) == ['0', '3', '6', '9'] * 2

@given(st.lists(smallints))
def test_enumerate(items:List[int]):
	assert list(of(*items).enumerate()) == list(enumerate(items))
	s = of(*items).enumerate()
	assert list(s.restart()) == list(enumerate(items))

def test_enumerate_counter_is_private():
	s = of('a', 'b', 'c')
	e1 = s.restart().enumerate()
	e2 = s.restart().enumerate()
	assert e1.pull() == (0, 'a')
	assert e2.pull() == (0, 'a')
	assert e1.pull() == (1, 'b')

@given(st.lists(smallints))
def test_bimap(items:List[int]):
	assert list(of(*items).bimap(lambda x: (x, x * x))) == [(x, x * x) for x in items]
	assert list(of(*items).bimap(lambda x: [x, -x]).map(operator.add)) == [0] * len(items)

def test_bimap_requires_pairs():
	with pytest.raises(ValueError):
		of(1).bimap(lambda x: (x, x, x)).pull()

@given(st.lists(smallints), smallints)
def test_terminals(items:List[int], pivot:int):
	below = lambda x: x < pivot
	assert of(*items).allmatch(below) == all(map(below, items))
	assert of(*items).anymatch(below) == any(map(below, items))
	assert of(*items).nonematch(below) == (not any(map(below, items)))
	assert of(*items).isempty() == (not items)
	seen: List[int] = []
	assert of(*items).foreach(seen.append) is None
	assert seen == items

def test_terminals_short_circuit():
	naturals = iterate(0, lambda x: x + 1)
	assert not naturals.restart().allmatch(lambda x: x < 5)
	assert naturals.restart().anymatch(lambda x: x == 5)
	assert not naturals.restart().nonematch(lambda x: x == 5)
	s = naturals.restart()
	assert s.anymatch(lambda x: x == 5)
	assert s.pull() == 6

def test_isempty_consumes():
	s = of(1, 2)
	assert not s.isempty()
	assert list(s) == [2]

@pytest.mark.parametrize('method', ['map', 'bimap', 'select', 'reject', 'inspect',
	'dropwhile', 'dropuntil', 'takewhile', 'takeuntil',
	'foreach', 'allmatch', 'anymatch', 'nonematch'])
def test_missing_callable(method:str):
	with pytest.raises(TypeError):
		getattr(of(1, 2), method)(None)

def test_missing_callable_producers():
	with pytest.raises(TypeError):
		generate(None)
	with pytest.raises(TypeError):
		iterate(0, None)
	with pytest.raises(TypeError):
		ofarray(None)
	with pytest.raises(TypeError):
		ofcollection(None)

def test_callback_errors_propagate():
	def boom(x):
		raise KeyError(x)
	s = of(1, 2).map(boom)
	with pytest.raises(KeyError):
		s.pull()

def test_laziness():
	calls: List[int] = []
	s = iterate(0, lambda x: x + 1).map(lambda x: calls.append(x) or x) \
		.select(lambda x: x % 2 == 0).drop(1).take(2)
	assert calls == []
	assert s.pull() == 2
	assert calls == [0, 1, 2]

def test_iterate_is_lazy():
	calls: List[int] = []
	def succ(x):
		calls.append(x)
		return x + 1
	s = iterate(0, succ)
	assert s.pull() == 0
	assert calls == []
	assert s.pull() == 1
	assert calls == [0]

def test_generate():
	counter = itertools.count()
	assert list(generate(lambda: next(counter)).take(3)) == [0, 1, 2]
	assert list(generate(lambda: 'x').take(2)) == ['x', 'x']

def test_python_iteration():
	s = intrange(0, 5)
	assert next(s) == 0
	assert iter(s) is s
	assert [x for x in s] == [1, 2, 3, 4]

@given(st.lists(smallints), counts, counts)
def test_sizebounds(items:List[int], n:int, k:int):
	s = of(*items)
	assert s.sizebounds() == SizeBounds(len(items), len(items))
	chain = of(*items).drop(n).take(k)
	size = len(items[n:n+k])
	assert chain.sizebounds() == SizeBounds(size, size)
	assert operator.length_hint(chain) == size
	lower, upper = of(*items).select(bool).sizebounds()
	assert lower == 0 and upper == len(items)
	cycled = of(*items).cycle(3)
	assert cycled.sizebounds() == SizeBounds(3 * len(items), 3 * len(items))
	assert len(list(cycled)) == 3 * len(items)
	assert cycled.sizebounds() == SizeBounds(0, 0)

def test_sizebounds_track_pulls():
	s = intrange(0, 10).take(4)
	s.pull()
	assert s.sizebounds() == SizeBounds(3, 3)
	c = of(1, 2).cycle(2)
	c.pull(); c.pull(); c.pull()
	assert c.sizebounds() == SizeBounds(1, 1)
	assert of(1, 2).cycle().sizebounds() == SizeBounds(2, None)
	assert generate(lambda: 0).sizebounds() == SizeBounds(0, None)
	assert ofcollection(iter([1])).sizebounds() == SizeBounds(0, None)
	assert of(1, 1, 2).unique().sizebounds() == SizeBounds(1, 3)

def test_sizebounds_cycle_ignores_upstream_pulls():
	s = of(1, 2, 3)
	c = s.cycle(2)
	s.pull(); s.pull()
	assert c.sizebounds() == SizeBounds(6, 6)
	assert len(list(c)) == 6
	s = of(1, 2)
	c = s.cycle()
	assert list(s) == [1, 2]
	assert c.sizebounds() == SizeBounds(2, None)
	assert len(list(itertools.islice(c, 7))) == 7

def test_empty_streams_share_construction():
	assert repr(empty()) == repr(of(1).cycle(0)) == '<Stream empty>'
	assert of(1).cycle(0).sizebounds() == empty().sizebounds() == SizeBounds(0, 0)

def test_repr():
	assert repr(of(1).map(str)) == '<Stream array.map>'
	assert repr(intrange(0, 3).reject(bool).cycle(2)) == '<Stream range.reject.cycle>'
	assert repr(of(1).enumerate()) == '<PairStream array.enumerate>'
