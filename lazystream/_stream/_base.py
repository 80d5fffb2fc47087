from __future__ import annotations
from typing import Generic, Iterator, TypeVar, Callable, Any, \
	Optional, Tuple
from abc import abstractmethod

from .._util import NOTHING, SizeBounds, check_callable, negate

T = TypeVar('T')
R = TypeVar('R')
S = TypeVar('S')
A = TypeVar('A')
B = TypeVar('B')

# Every stream node owns exactly one upstream, so a chain is a tree
# walked once per pulled element. Nothing is computed until a terminal
# operation (or plain iteration) starts pulling.

class StreamBase(Generic[T]):
	r'''
	Lazy pull-based stream

	A possibly infinite sequence of lazily evaluated elements supporting
	operations which act on the elements.

	Do not instantiate directly, instead use the factory functions such as
	:func:`of`, :func:`ofarray` or :func:`intrange` to create an instance.

	Operations fall into three groups:

		- producers create a stream over some source of elements
		- intermediate operations wrap a stream in a new stream,
		  computing nothing until pulled
		- terminal operations pull until the stream ends
		  (or until the answer is known)

	A stream is also a Python iterator: iteration pulls from it,
	so elements are consumed as they are seen.

	>>> evens = intrange(0, 10).select(lambda x: x % 2 == 0)
	>>> list(evens.map(lambda x: x * x))
	[0, 4, 16, 36, 64]
	>>> list(of(1, 1, 2, 3, 2).unique())
	[1, 2, 3]
	>>> list(of('a', 'b', 'c').cycle(2))
	['a', 'b', 'c', 'a', 'b', 'c']
	'''

	@abstractmethod
	def pull(self) -> T:
		r'''
		:math:`O(1)` per link in the chain. Produce the next element,
		or :data:`END` if the stream is exhausted.

		Once :data:`END` has been returned, every following pull returns
		:data:`END` as well.

		>>> s = of(1, 2)
		>>> s.pull(), s.pull()
		(1, 2)
		>>> s.pull() is END
		True
		>>> s.pull() is END
		True
		'''

	@abstractmethod
	def restart(self) -> StreamBase[T]:
		r'''
		Create a stream replaying this one from its logical start.

		The replay is independent of how many elements have already been
		pulled from this stream. Streams over a one-shot resource
		(:func:`generate`, :func:`ofcollection` over an iterator), and any
		chain built on one, cannot be replayed and return themselves, see
		:attr:`restartable`.

		>>> s = intrange(0, 5).map(lambda x: x * 10)
		>>> s.pull(), s.pull()
		(0, 10)
		>>> list(s.restart())
		[0, 10, 20, 30, 40]
		>>> list(s)
		[20, 30, 40]
		'''

	@property
	@abstractmethod
	def restartable(self) -> bool:
		r'''
		Whether :meth:`restart` creates an independent replay.

		>>> of(1, 2, 3).take(2).restartable
		True
		>>> ofcollection(iter([1, 2, 3])).restartable
		False
		'''

	@abstractmethod
	def sizebounds(self) -> SizeBounds:
		r'''
		Bounds on the number of elements left to pull, without pulling.

		>>> intrange(0, 10).drop(3).sizebounds()
		SizeBounds(lower=7, upper=7)
		>>> intrange(0, 10).select(bool).sizebounds()
		SizeBounds(lower=0, upper=10)
		>>> iterate(0, lambda x: x + 1).sizebounds()
		SizeBounds(lower=0, upper=None)
		'''

	def __length_hint__(self) -> int:
		return self.sizebounds().lower

	def __iter__(self) -> Iterator[T]:
		return self

	def __next__(self) -> T:
		value = self.pull()
		if value is NOTHING:
			raise StopIteration
		return value

	@abstractmethod
	def map(self, mapper:Callable[[T], Optional[R]]) -> StreamBase[R]:
		r'''
		Apply a function to every element.

		A mapper returning ``None`` ends the stream at that element.

		>>> list(of(1, 2, 3).map(str))
		['1', '2', '3']
		>>> list(of(1, 2, 3, 4).map(lambda x: x if x < 3 else None))
		[1, 2]
		'''

	@abstractmethod
	def bimap(self, mapper:Callable[[T], Tuple[R, S]]) -> PairStreamBase[R, S]:
		r'''
		Map every element to a pair.

		>>> list(of(1, 2).bimap(lambda x: (x, -x)))
		[(1, -1), (2, -2)]
		'''

	@abstractmethod
	def select(self, predicate:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Keep the elements satisfying the predicate.

		Selecting from an infinite stream where no further element matches
		never returns.

		>>> list(intrange(0, 5).select(lambda x: x % 2 == 0))
		[0, 2, 4]
		'''

	@abstractmethod
	def reject(self, predicate:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Drop the elements satisfying the predicate.

		>>> list(intrange(0, 5).reject(lambda x: x % 2 == 0))
		[1, 3]
		'''

	@abstractmethod
	def inspect(self, action:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Call an action on every element as it passes through.

		>>> seen = []
		>>> list(of(1, 2, 3).inspect(seen.append).take(2))
		[1, 2]
		>>> seen
		[1, 2]
		'''

	@abstractmethod
	def drop(self, count:int) -> StreamBase[T]:
		r'''
		Skip the first ``count`` elements.

		>>> list(intrange(0, 5).drop(2))
		[2, 3, 4]
		>>> list(intrange(0, 5).drop(10))
		[]
		'''

	@abstractmethod
	def take(self, count:int) -> StreamBase[T]:
		r'''
		Stop after ``count`` elements.

		>>> list(intrange(0, 5).take(2))
		[0, 1]
		>>> list(iterate(1, lambda x: x * 2).take(5))
		[1, 2, 4, 8, 16]
		'''

	@abstractmethod
	def dropwhile(self, predicate:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Skip leading elements while the predicate holds.

		Only the leading run is skipped, later matches are kept.

		>>> list(of(1, 2, 5, 1, 2).dropwhile(lambda x: x < 3))
		[5, 1, 2]
		'''

	def dropuntil(self, predicate:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Skip leading elements until the predicate holds.

		>>> list(of(1, 2, 5, 1, 2).dropuntil(lambda x: x > 3))
		[5, 1, 2]
		'''
		return self.dropwhile(negate(check_callable('predicate', predicate)))

	@abstractmethod
	def takewhile(self, predicate:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Take leading elements while the predicate holds.

		>>> list(of(1, 2, 5, 1, 2).takewhile(lambda x: x < 3))
		[1, 2]
		'''

	def takeuntil(self, predicate:Callable[[T], Any]) -> StreamBase[T]:
		r'''
		Take leading elements until the predicate holds.

		>>> list(of(1, 2, 5, 1, 2).takeuntil(lambda x: x > 3))
		[1, 2]
		'''
		return self.takewhile(negate(check_callable('predicate', predicate)))

	@abstractmethod
	def unique(self) -> StreamBase[T]:
		r'''
		Drop elements equal to an earlier element.

		Every distinct element is remembered, so elements must be hashable.

		>>> list(of(1, 1, 2, 3, 2).unique())
		[1, 2, 3]
		'''

	@abstractmethod
	def cycle(self, times:Optional[int]=None) -> StreamBase[T]:
		r'''
		Replay the stream ``times`` times, or forever when ``times`` is ``None``.

		Replays go through :meth:`restart`, so a stream which is not
		:attr:`restartable` is not repeated.

		>>> list(of(1, 2, 3).cycle(2))
		[1, 2, 3, 1, 2, 3]
		>>> list(of(1, 2, 3).cycle().take(7))
		[1, 2, 3, 1, 2, 3, 1]
		>>> list(of(1, 2, 3).cycle(0))
		[]
		'''

	def repeat(self, times:int) -> StreamBase[T]:
		r'''
		Replay the stream ``times`` times.

		>>> list(of(1, 2).repeat(3))
		[1, 2, 1, 2, 1, 2]
		'''
		return self.cycle(times)

	@abstractmethod
	def enumerate(self) -> PairStreamBase[int, T]:
		r'''
		Pair every element with its index.

		>>> list(of('a', 'b', 'c').enumerate())
		[(0, 'a'), (1, 'b'), (2, 'c')]
		'''

	@abstractmethod
	def pairs(self) -> PairStreamBase[Any, Any]:
		r'''
		View a stream of 2-tuples as a :class:`PairStream`.

		>>> list(of((1, 'a'), (2, 'b')).pairs().map(lambda n, s: s * n))
		['a', 'bb']
		'''

	@abstractmethod
	def foreach(self, action:Callable[[T], Any]) -> None:
		r'''
		Pull until the end, calling an action on every element.

		>>> of(1, 2, 3).foreach(print)
		1
		2
		3
		'''

	@abstractmethod
	def allmatch(self, predicate:Callable[[T], Any]) -> bool:
		r'''
		Whether every element satisfies the predicate.

		Stops pulling at the first element which does not.

		>>> of(2, 4, 6).allmatch(lambda x: x % 2 == 0)
		True
		>>> iterate(0, lambda x: x + 1).allmatch(lambda x: x < 10)
		False
		'''

	@abstractmethod
	def anymatch(self, predicate:Callable[[T], Any]) -> bool:
		r'''
		Whether some element satisfies the predicate.

		Stops pulling at the first element which does.

		>>> iterate(0, lambda x: x + 1).anymatch(lambda x: x > 10)
		True
		>>> empty().anymatch(bool)
		False
		'''

	def nonematch(self, predicate:Callable[[T], Any]) -> bool:
		r'''
		Whether no element satisfies the predicate.

		>>> of(1, 3, 5).nonematch(lambda x: x % 2 == 0)
		True
		'''
		return self.allmatch(negate(check_callable('predicate', predicate)))

	@abstractmethod
	def isempty(self) -> bool:
		r'''
		Whether the stream has no elements.

		This pulls (and discards) the first element if there is one.

		>>> s = of(1, 2, 3)
		>>> s.isempty()
		False
		>>> list(s)
		[2, 3]
		>>> empty().isempty()
		True
		'''

	@abstractmethod
	def __repr__(self) -> str:
		r'''
		Describe the chain of operations, without pulling.

		>>> intrange(0, 5).select(bool).take(2)
		<Stream range.select.take>
		'''

	__str__ = __repr__

class PairStreamBase(Generic[A, B]):
	r'''
	Lazy pull-based stream of pairs

	A view over a :class:`Stream` of 2-tuples whose operations pass the two
	halves of each pair as separate arguments. Operations which do not look
	at the elements behave exactly as on the underlying stream,
	comparing pairs component-wise.

	>>> ages = ofmapping({'ann': 31, 'bob': 17, 'cid': 45})
	>>> list(ages.select(lambda name, age: age > 18).map(lambda name, age: name))
	['ann', 'cid']
	'''

	@abstractmethod
	def pull(self) -> Tuple[A, B]:
		r'''
		Produce the next pair, or :data:`END` if the stream is exhausted.

		>>> s = ofmapping({1: 2})
		>>> s.pull()
		(1, 2)
		>>> s.pull() is END
		True
		'''

	@abstractmethod
	def restart(self) -> PairStreamBase[A, B]:
		'''Create a stream replaying this one from its logical start.'''

	@property
	@abstractmethod
	def restartable(self) -> bool:
		'''Whether :meth:`restart` creates an independent replay.'''

	@abstractmethod
	def sizebounds(self) -> SizeBounds:
		'''Bounds on the number of pairs left to pull, without pulling.'''

	@abstractmethod
	def unpaired(self) -> StreamBase[Tuple[A, B]]:
		r'''
		The underlying stream of tuples.

		This is the same cursor, pulling from either pulls from both.

		>>> list(ofmapping({1: 2, 3: 4}).unpaired().map(sum))
		[3, 7]
		'''

	def __length_hint__(self) -> int:
		return self.sizebounds().lower

	def __iter__(self) -> Iterator[Tuple[A, B]]:
		return self

	def __next__(self) -> Tuple[A, B]:
		value = self.pull()
		if value is NOTHING:
			raise StopIteration
		return value

	@abstractmethod
	def map(self, mapper:Callable[[A, B], Optional[R]]) -> StreamBase[R]:
		r'''
		Map every pair to a single value.

		>>> list(of(1, 2).enumerate().map(lambda i, x: i + x))
		[1, 3]
		'''

	@abstractmethod
	def bimap(self, mapper:Callable[[A, B], Tuple[R, S]]) -> PairStreamBase[R, S]:
		r'''
		Map every pair to a new pair.

		>>> list(ofmapping({1: 'a'}).bimap(lambda k, v: (v, k)))
		[('a', 1)]
		'''

	@abstractmethod
	def select(self, predicate:Callable[[A, B], Any]) -> PairStreamBase[A, B]:
		'''Keep the pairs satisfying the predicate.'''

	@abstractmethod
	def reject(self, predicate:Callable[[A, B], Any]) -> PairStreamBase[A, B]:
		'''Drop the pairs satisfying the predicate.'''

	@abstractmethod
	def inspect(self, action:Callable[[A, B], Any]) -> PairStreamBase[A, B]:
		'''Call an action on every pair as it passes through.'''

	@abstractmethod
	def drop(self, count:int) -> PairStreamBase[A, B]: ...
	@abstractmethod
	def take(self, count:int) -> PairStreamBase[A, B]: ...
	@abstractmethod
	def dropwhile(self, predicate:Callable[[A, B], Any]) -> PairStreamBase[A, B]: ...
	@abstractmethod
	def dropuntil(self, predicate:Callable[[A, B], Any]) -> PairStreamBase[A, B]: ...
	@abstractmethod
	def takewhile(self, predicate:Callable[[A, B], Any]) -> PairStreamBase[A, B]: ...
	@abstractmethod
	def takeuntil(self, predicate:Callable[[A, B], Any]) -> PairStreamBase[A, B]: ...

	@abstractmethod
	def unique(self) -> PairStreamBase[A, B]:
		r'''
		Drop pairs equal to an earlier pair.

		>>> list(of((1, 2), (1, 3), (1, 2)).pairs().unique())
		[(1, 2), (1, 3)]
		'''

	@abstractmethod
	def cycle(self, times:Optional[int]=None) -> PairStreamBase[A, B]: ...

	def repeat(self, times:int) -> PairStreamBase[A, B]:
		return self.cycle(times)

	@abstractmethod
	def enumerate(self) -> PairStreamBase[int, Tuple[A, B]]: ...

	@abstractmethod
	def foreach(self, action:Callable[[A, B], Any]) -> None:
		r'''
		Pull until the end, calling an action on every pair.

		>>> ofmapping({'x': 1, 'y': 2}).foreach(print)
		x 1
		y 2
		'''

	@abstractmethod
	def allmatch(self, predicate:Callable[[A, B], Any]) -> bool: ...
	@abstractmethod
	def anymatch(self, predicate:Callable[[A, B], Any]) -> bool: ...

	def nonematch(self, predicate:Callable[[A, B], Any]) -> bool:
		return self.allmatch(negate(check_callable('predicate', predicate)))

	@abstractmethod
	def isempty(self) -> bool: ...

	@abstractmethod
	def __repr__(self) -> str: ...

	__str__ = __repr__
