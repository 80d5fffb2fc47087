from __future__ import annotations
from typing import Any, Callable, Dict, TypeVar, Tuple, \
	List, Optional, cast

import enum
import logging
import operator
import warnings

from ._base import StreamBase, PairStreamBase
from .. import _util
from .._util import NOTHING, SizeBounds, EXACT_ZERO, UNKNOWN, \
	check_callable, check_count, spread, as_pair, sphinx_build

T = TypeVar('T')
R = TypeVar('R')
S = TypeVar('S')
A = TypeVar('A')
B = TypeVar('B')

log = logging.getLogger(__name__)

class Stream(StreamBase[T]):
	# Every producer and operator is represented by this one class,
	# tagged with its kind. The per-kind behaviour lives in the
	# dispatch tables at the bottom of the module.

	# _upstream is None for producers.
	# _func is the user callable, if the kind takes one.
	# _args holds the construction arguments, restart() rebuilds from them.
	# _state is the mutable per-kind cursor, see _INITIAL.
	# _done is set once the stream has returned NOTHING.

	__doc__ = StreamBase.__doc__

	__slots__ = ('_kind', '_upstream', '_func', '_args', '_state', '_done')

	if not sphinx_build:
		_kind: Stream._Kind
		_upstream: Optional[Stream[Any]]
		_func: Optional[Callable[..., Any]]
		_args: Tuple[Any, ...]
		_state: List[Any]
		_done: bool

	class _Kind(enum.Enum):
		# producers
		Empty = 0
		Array = 1
		Collection = 2
		Range = 3
		Generate = 4
		Iterate = 5
		# stateless operators
		Map = 6
		Select = 7
		Inspect = 8
		# stateful operators
		Drop = 9
		Take = 10
		DropWhile = 11
		TakeWhile = 12
		Unique = 13
		Cycle = 14
		Enumerate = 15

	class _Phase(enum.Enum):
		Searching = 0
		Settled = 1

	def __new__(cls, _kind, _upstream, _func, _args):
		self = super(Stream, cls).__new__(cls)
		self._kind = _kind
		self._upstream = _upstream
		self._func = _func
		self._args = _args
		self._state = _INITIAL[_kind](self)
		self._done = False
		return self

	def _wrap(self, kind:Stream._Kind, func:Optional[Callable[..., Any]]=None,
			*args:Any) -> Stream[Any]:
		return Stream(kind, self, func, args)

	def pull(self) -> T:
		if self._done:
			return NOTHING
		value = _PULL[self._kind](self)
		if value is NOTHING:
			self._done = True
		return value

	def restart(self) -> Stream[T]:
		if not self.restartable:
			log.debug('restart of %r is not independent', self)
			return self
		return _RESTART[self._kind](self)

	@property
	def restartable(self) -> bool:
		if self._upstream is not None:
			return self._upstream.restartable
		if self._kind == Stream._Kind.Generate:
			return False
		if self._kind == Stream._Kind.Collection:
			return cast(bool, self._args[1])
		return True

	def sizebounds(self) -> SizeBounds:
		if self._done:
			return EXACT_ZERO
		return _BOUNDS[self._kind](self)

	def map(self, mapper:Callable[[T], Optional[R]]) -> Stream[R]:
		return self._wrap(Stream._Kind.Map, check_callable('mapper', mapper))

	def bimap(self, mapper:Callable[[T], Tuple[R, S]]) -> PairStream[R, S]:
		mapper = check_callable('mapper', mapper)
		return PairStream(self._wrap(Stream._Kind.Map, lambda x: as_pair(mapper(x))))

	def select(self, predicate:Callable[[T], Any]) -> Stream[T]:
		return self._wrap(Stream._Kind.Select, check_callable('predicate', predicate), True)

	def reject(self, predicate:Callable[[T], Any]) -> Stream[T]:
		return self._wrap(Stream._Kind.Select, check_callable('predicate', predicate), False)

	def inspect(self, action:Callable[[T], Any]) -> Stream[T]:
		return self._wrap(Stream._Kind.Inspect, check_callable('action', action))

	def drop(self, count:int) -> Stream[T]:
		return self._wrap(Stream._Kind.Drop, None, check_count('count', count))

	def take(self, count:int) -> Stream[T]:
		return self._wrap(Stream._Kind.Take, None, check_count('count', count))

	def dropwhile(self, predicate:Callable[[T], Any]) -> Stream[T]:
		return self._wrap(Stream._Kind.DropWhile, check_callable('predicate', predicate))

	def takewhile(self, predicate:Callable[[T], Any]) -> Stream[T]:
		return self._wrap(Stream._Kind.TakeWhile, check_callable('predicate', predicate))

	def unique(self) -> Stream[T]:
		return self._wrap(Stream._Kind.Unique)

	def cycle(self, times:Optional[int]=None) -> Stream[T]:
		if times is not None:
			times = operator.index(times)
			if times < 1:
				return _empty()
		if not self.restartable:
			if _util.strict_restart:
				raise TypeError('cannot cycle a stream which is not restartable: {!r}'.format(self))
			warnings.warn('cycling a stream which is not restartable, '
				'it will not be repeated: {!r}'.format(self), RuntimeWarning, stacklevel=2)
		return self._wrap(Stream._Kind.Cycle, None, times)

	def enumerate(self) -> PairStream[int, T]:
		return PairStream(self._wrap(Stream._Kind.Enumerate))

	def pairs(self) -> PairStream[Any, Any]:
		return PairStream(self)

	def foreach(self, action:Callable[[T], Any]) -> None:
		action = check_callable('action', action)
		value = self.pull()
		while value is not NOTHING:
			action(value)
			value = self.pull()

	def allmatch(self, predicate:Callable[[T], Any]) -> bool:
		predicate = check_callable('predicate', predicate)
		value = self.pull()
		while value is not NOTHING:
			if not predicate(value):
				return False
			value = self.pull()
		return True

	def anymatch(self, predicate:Callable[[T], Any]) -> bool:
		predicate = check_callable('predicate', predicate)
		value = self.pull()
		while value is not NOTHING:
			if predicate(value):
				return True
			value = self.pull()
		return False

	def isempty(self) -> bool:
		return self.pull() is NOTHING

	def _names(self) -> List[str]:
		names = [] if self._upstream is None else self._upstream._names()
		names.append(_NAMES[self._kind] if self._kind != Stream._Kind.Select
			else 'select' if self._args[0] else 'reject')
		return names

	def __repr__(self) -> str:
		return '<Stream {}>'.format('.'.join(self._names()))

	__str__ = __repr__

class PairStream(PairStreamBase[A, B]):
	__doc__ = PairStreamBase.__doc__

	__slots__ = ('_stream',)

	if not sphinx_build:
		_stream: Stream[Tuple[A, B]]

	def __init__(self, _stream:Stream[Tuple[A, B]]):
		self._stream = _stream

	def pull(self) -> Tuple[A, B]:
		return self._stream.pull()

	def restart(self) -> PairStream[A, B]:
		return PairStream(self._stream.restart())

	@property
	def restartable(self) -> bool:
		return self._stream.restartable

	def sizebounds(self) -> SizeBounds:
		return self._stream.sizebounds()

	def unpaired(self) -> Stream[Tuple[A, B]]:
		return self._stream

	# methods that leave the pair form
	def map(self, mapper:Callable[[A, B], Optional[R]]) -> Stream[R]:
		return self._stream.map(spread(check_callable('mapper', mapper)))

	# methods that unpack the pair for the callable
	def bimap(self, mapper:Callable[[A, B], Tuple[R, S]]) -> PairStream[R, S]:
		return self._stream.bimap(spread(check_callable('mapper', mapper)))
	def select(self, predicate:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.select(spread(check_callable('predicate', predicate))))
	def reject(self, predicate:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.reject(spread(check_callable('predicate', predicate))))
	def inspect(self, action:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.inspect(spread(check_callable('action', action))))
	def dropwhile(self, predicate:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.dropwhile(spread(check_callable('predicate', predicate))))
	def dropuntil(self, predicate:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.dropuntil(spread(check_callable('predicate', predicate))))
	def takewhile(self, predicate:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.takewhile(spread(check_callable('predicate', predicate))))
	def takeuntil(self, predicate:Callable[[A, B], Any]) -> PairStream[A, B]:
		return PairStream(self._stream.takeuntil(spread(check_callable('predicate', predicate))))

	# methods that pass the pairs through whole
	def drop(self, count:int) -> PairStream[A, B]:
		return PairStream(self._stream.drop(count))
	def take(self, count:int) -> PairStream[A, B]:
		return PairStream(self._stream.take(count))
	def unique(self) -> PairStream[A, B]:
		return PairStream(self._stream.unique())
	def cycle(self, times:Optional[int]=None) -> PairStream[A, B]:
		return PairStream(self._stream.cycle(times))
	def enumerate(self) -> PairStream[int, Tuple[A, B]]:
		return self._stream.enumerate()

	# terminal methods
	def foreach(self, action:Callable[[A, B], Any]) -> None:
		self._stream.foreach(spread(check_callable('action', action)))
	def allmatch(self, predicate:Callable[[A, B], Any]) -> bool:
		return self._stream.allmatch(spread(check_callable('predicate', predicate)))
	def anymatch(self, predicate:Callable[[A, B], Any]) -> bool:
		return self._stream.anymatch(spread(check_callable('predicate', predicate)))
	def isempty(self) -> bool:
		return self._stream.isempty()

	def __repr__(self) -> str:
		return '<PairStream {}>'.format('.'.join(self._stream._names()))

	__str__ = __repr__

K = Stream._Kind
P = Stream._Phase

def _empty() -> Stream[Any]:
	return Stream(K.Empty, None, None, ())

# Initial _state, called on construction and so on every restart.

def _cursor(self:Stream[Any]) -> List[Any]:
	return [0]

def _no_state(self:Stream[Any]) -> List[Any]:
	return []

def _collection_state(self:Stream[Any]) -> List[Any]:
	# iterator, number of elements pulled so far
	return [iter(self._args[0]), 0]

def _range_state(self:Stream[Any]) -> List[Any]:
	return [self._args[0]]

def _iterate_state(self:Stream[Any]) -> List[Any]:
	return [NOTHING]

def _flag_state(self:Stream[Any]) -> List[Any]:
	return [False]

def _phase_state(self:Stream[Any]) -> List[Any]:
	return [P.Searching]

def _unique_state(self:Stream[Any]) -> List[Any]:
	return [set()]

def _cycle_state(self:Stream[Any]) -> List[Any]:
	# current pass, number of the current pass
	assert self._upstream is not None
	return [self._upstream.restart(), 1]

_INITIAL: Dict[Stream._Kind, Callable[[Stream[Any]], List[Any]]] = {
	K.Empty: _no_state,
	K.Array: _cursor,
	K.Collection: _collection_state,
	K.Range: _range_state,
	K.Generate: _no_state,
	K.Iterate: _iterate_state,
	K.Map: _no_state,
	K.Select: _no_state,
	K.Inspect: _no_state,
	K.Drop: _flag_state,
	K.Take: _cursor,
	K.DropWhile: _phase_state,
	K.TakeWhile: _phase_state,
	K.Unique: _unique_state,
	K.Cycle: _cycle_state,
	K.Enumerate: _cursor,
}

# Pull one element, or NOTHING. Only called while the stream is not done.

def _pull_empty(self:Stream[Any]) -> Any:
	return NOTHING

def _pull_array(self:Stream[Any]) -> Any:
	source = self._args[0]
	index = self._state[0]
	if index >= len(source):
		return NOTHING
	self._state[0] = index + 1
	return source[index]

def _pull_collection(self:Stream[Any]) -> Any:
	state = self._state
	value = next(state[0], NOTHING)
	if value is not NOTHING:
		state[1] += 1
	return value

def _pull_range(self:Stream[Any]) -> Any:
	stop, step, closed, lo, hi = self._args[1:]
	curr = self._state[0]
	if curr is None:
		return NOTHING
	if step > 0:
		if curr > stop or (curr == stop and not closed):
			return NOTHING
	elif curr < stop or (curr == stop and not closed):
		return NOTHING
	succ = curr + step
	# stepping past the width ends the range instead of wrapping around
	self._state[0] = succ if lo <= succ <= hi else None
	return curr

def _pull_generate(self:Stream[Any]) -> Any:
	assert self._func is not None
	return self._func()

def _pull_iterate(self:Stream[Any]) -> Any:
	assert self._func is not None
	curr = self._state[0]
	curr = self._args[0] if curr is NOTHING else self._func(curr)
	self._state[0] = curr
	return curr

def _pull_map(self:Stream[Any]) -> Any:
	assert self._upstream is not None and self._func is not None
	value = self._upstream.pull()
	if value is NOTHING:
		return NOTHING
	value = self._func(value)
	return NOTHING if value is None else value

def _pull_select(self:Stream[Any]) -> Any:
	assert self._upstream is not None and self._func is not None
	upstream, predicate, keep = self._upstream, self._func, self._args[0]
	value = upstream.pull()
	while value is not NOTHING and bool(predicate(value)) != keep:
		value = upstream.pull()
	return value

def _pull_inspect(self:Stream[Any]) -> Any:
	assert self._upstream is not None and self._func is not None
	value = self._upstream.pull()
	if value is not NOTHING:
		self._func(value)
	return value

def _pull_drop(self:Stream[Any]) -> Any:
	assert self._upstream is not None
	upstream = self._upstream
	if not self._state[0]:
		for _ in range(self._args[0]):
			if upstream.pull() is NOTHING:
				break
		self._state[0] = True
	return upstream.pull()

def _pull_take(self:Stream[Any]) -> Any:
	assert self._upstream is not None
	if self._state[0] >= self._args[0]:
		return NOTHING
	self._state[0] += 1
	return self._upstream.pull()

def _pull_dropwhile(self:Stream[Any]) -> Any:
	assert self._upstream is not None and self._func is not None
	upstream = self._upstream
	value = upstream.pull()
	if self._state[0] == P.Searching:
		predicate = self._func
		while value is not NOTHING and predicate(value):
			value = upstream.pull()
		self._state[0] = P.Settled
	return value

def _pull_takewhile(self:Stream[Any]) -> Any:
	assert self._upstream is not None and self._func is not None
	if self._state[0] == P.Settled:
		return NOTHING
	value = self._upstream.pull()
	if value is not NOTHING and self._func(value):
		return value
	self._state[0] = P.Settled
	return NOTHING

def _pull_unique(self:Stream[Any]) -> Any:
	assert self._upstream is not None
	upstream, seen = self._upstream, self._state[0]
	value = upstream.pull()
	while value is not NOTHING and value in seen:
		value = upstream.pull()
	if value is not NOTHING:
		seen.add(value)
	return value

def _pull_cycle(self:Stream[Any]) -> Any:
	assert self._upstream is not None
	state, times = self._state, self._args[0]
	value = state[0].pull()
	# a fresh pass that is empty straight away means the upstream is
	# empty, so only one new pass is started per pull
	if value is NOTHING and (times is None or state[1] < times):
		log.debug('pass %d of %r exhausted, restarting', state[1], self)
		state[0] = self._upstream.restart()
		state[1] += 1
		value = state[0].pull()
	return value

def _pull_enumerate(self:Stream[Any]) -> Any:
	assert self._upstream is not None
	value = self._upstream.pull()
	if value is NOTHING:
		return NOTHING
	index = self._state[0]
	self._state[0] = index + 1
	return index, value

_PULL: Dict[Stream._Kind, Callable[[Stream[Any]], Any]] = {
	K.Empty: _pull_empty,
	K.Array: _pull_array,
	K.Collection: _pull_collection,
	K.Range: _pull_range,
	K.Generate: _pull_generate,
	K.Iterate: _pull_iterate,
	K.Map: _pull_map,
	K.Select: _pull_select,
	K.Inspect: _pull_inspect,
	K.Drop: _pull_drop,
	K.Take: _pull_take,
	K.DropWhile: _pull_dropwhile,
	K.TakeWhile: _pull_takewhile,
	K.Unique: _pull_unique,
	K.Cycle: _pull_cycle,
	K.Enumerate: _pull_enumerate,
}

# Create a replay from the logical start.

def _restart_leaf(self:Stream[Any]) -> Stream[Any]:
	return Stream(self._kind, None, self._func, self._args)

def _restart_operator(self:Stream[Any]) -> Stream[Any]:
	assert self._upstream is not None
	return Stream(self._kind, self._upstream.restart(), self._func, self._args)

def _restart_cycle(self:Stream[Any]) -> Stream[Any]:
	# the upstream itself is never pulled, only its restarts
	return Stream(self._kind, self._upstream, self._func, self._args)

_RESTART: Dict[Stream._Kind, Callable[[Stream[Any]], Stream[Any]]] = {
	K.Empty: _restart_leaf,
	K.Array: _restart_leaf,
	K.Collection: _restart_leaf,
	K.Range: _restart_leaf,
	K.Generate: _restart_leaf,
	K.Iterate: _restart_leaf,
	K.Map: _restart_operator,
	K.Select: _restart_operator,
	K.Inspect: _restart_operator,
	K.Drop: _restart_operator,
	K.Take: _restart_operator,
	K.DropWhile: _restart_operator,
	K.TakeWhile: _restart_operator,
	K.Unique: _restart_operator,
	K.Cycle: _restart_cycle,
	K.Enumerate: _restart_operator,
}

# Bounds on the remaining elements. Only called while the stream is not done.

def _exact(count:int) -> SizeBounds:
	return SizeBounds(count, count)

def _bounds_empty(self:Stream[Any]) -> SizeBounds:
	return EXACT_ZERO

def _bounds_array(self:Stream[Any]) -> SizeBounds:
	return _exact(max(0, len(self._args[0]) - self._state[0]))

def _bounds_collection(self:Stream[Any]) -> SizeBounds:
	collection = self._args[0]
	if not self._args[1]:
		return UNKNOWN
	try:
		size = len(collection)
	except TypeError:
		return UNKNOWN
	return _exact(max(0, size - self._state[1]))

def _bounds_range(self:Stream[Any]) -> SizeBounds:
	stop, step, closed, lo, hi = self._args[1:]
	curr = self._state[0]
	if curr is None:
		return EXACT_ZERO
	if step > 0:
		last = min(stop if closed else stop - 1, hi)
		count = (last - curr) // step + 1 if curr <= last else 0
	else:
		last = max(stop if closed else stop + 1, lo)
		count = (curr - last) // -step + 1 if curr >= last else 0
	return _exact(count)

def _bounds_unknown(self:Stream[Any]) -> SizeBounds:
	return UNKNOWN

def _bounds_same(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	return self._upstream.sizebounds()

def _bounds_loose(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	return self._upstream.sizebounds().loosen()

def _bounds_drop(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	bounds = self._upstream.sizebounds()
	return bounds if self._state[0] else bounds.shift(self._args[0])

def _bounds_take(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	return self._upstream.sizebounds().clip(self._args[0] - self._state[0])

def _bounds_dropwhile(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	bounds = self._upstream.sizebounds()
	return bounds if self._state[0] == P.Settled else bounds.loosen()

def _bounds_takewhile(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	if self._state[0] == P.Settled:
		return EXACT_ZERO
	return self._upstream.sizebounds().loosen()

def _bounds_unique(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	lower, upper = self._upstream.sizebounds()
	# with nothing seen yet the first element is always new
	return SizeBounds(min(lower, 1) if not self._state[0] else 0, upper)

def _bounds_cycle(self:Stream[Any]) -> SizeBounds:
	assert self._upstream is not None
	current = self._state[0].sizebounds()
	times = self._args[0]
	if not self._upstream.restartable:
		return current
	# passes are replays, never the upstream node itself
	full = self._upstream.restart().sizebounds()
	if times is None:
		if full.upper == 0:
			return current
		return SizeBounds(current.lower, None)
	left = times - self._state[1]
	lower = current.lower + left * full.lower
	if current.upper is None or full.upper is None:
		return SizeBounds(lower, None)
	return SizeBounds(lower, current.upper + left * full.upper)

_BOUNDS: Dict[Stream._Kind, Callable[[Stream[Any]], SizeBounds]] = {
	K.Empty: _bounds_empty,
	K.Array: _bounds_array,
	K.Collection: _bounds_collection,
	K.Range: _bounds_range,
	K.Generate: _bounds_unknown,
	K.Iterate: _bounds_unknown,
	K.Map: _bounds_loose,
	K.Select: _bounds_loose,
	K.Inspect: _bounds_same,
	K.Drop: _bounds_drop,
	K.Take: _bounds_take,
	K.DropWhile: _bounds_dropwhile,
	K.TakeWhile: _bounds_takewhile,
	K.Unique: _bounds_unique,
	K.Cycle: _bounds_cycle,
	K.Enumerate: _bounds_same,
}

_NAMES: Dict[Stream._Kind, str] = {kind: kind.name.lower() for kind in K}

__all__ = ('Stream', 'PairStream')
