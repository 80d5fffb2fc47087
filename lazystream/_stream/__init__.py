from __future__ import annotations
from collections.abc import Iterator, Iterable, Mapping
from typing import TypeVar, Tuple, Callable, Any

import operator

from .._util import NOTHING, SizeBounds, Indexable, check_callable, \
	check_width, sphinx_build
from ._base import StreamBase, PairStreamBase
from ._python import Stream, PairStream, _empty

T = TypeVar('T')
K = TypeVar('K')
V = TypeVar('V')

Iterator.register(Stream)
Iterator.register(PairStream)

END: Any = NOTHING
'''Returned by :meth:`Stream.pull` once a stream is exhausted.'''

_EMPTY_ARGS: Tuple[Any, ...] = ()

def empty() -> Stream[Any]:
	'''
	Create a stream with no elements

	>>> list(empty())
	[]
	'''
	return _empty()

def of(*values:T) -> Stream[T]:
	'''
	Create a stream over the given values

	>>> list(of(1, 2, 3))
	[1, 2, 3]
	'''
	return Stream(Stream._Kind.Array, None, None, (values,))

def ofarray(array:Indexable[T]) -> Stream[T]:
	r'''
	Create a stream over an index-addressable container

	:math:`O(1)`. The container is not copied, elements are read by index
	as they are pulled. Typed containers such as :class:`python:array.array`
	or :class:`python:bytes` produce plain Python values.

	>>> list(ofarray([1, 2, 3]))
	[1, 2, 3]
	>>> list(ofarray(b'hi'))
	[104, 105]
	'''
	if not (hasattr(array, '__len__') and hasattr(array, '__getitem__')):
		raise TypeError('array must support len() and indexing, not {}'.format(type(array).__name__))
	return Stream(Stream._Kind.Array, None, None, (array,))

def ofcollection(collection:Iterable[T]) -> Stream[T]:
	r'''
	Create a stream over an iterable

	Restarting iterates the collection again. A one-shot iterator cannot
	be iterated again, so a stream over one is not restartable.

	>>> list(ofcollection({1: 'a', 2: 'b'}))
	[1, 2]
	>>> ofcollection(x for x in 'ab').restartable
	False
	'''
	if collection is None:
		raise TypeError('collection must not be None')
	restartable = not isinstance(collection, Iterator)
	return Stream(Stream._Kind.Collection, None, None, (collection, restartable))

def ofmapping(mapping:Mapping[K, V]) -> PairStream[K, V]:
	r'''
	Create a pair stream over the items of a mapping

	>>> list(ofmapping({'a': 1, 'b': 2}))
	[('a', 1), ('b', 2)]
	'''
	if mapping is None:
		raise TypeError('mapping must not be None')
	return PairStream(ofcollection(mapping.items()))

def _range(bits:int, start:int, stop:int, step:int, closed:bool) -> Stream[int]:
	start, stop, step = operator.index(start), operator.index(stop), operator.index(step)
	if step == 0:
		raise ValueError('range step must not be zero')
	lo, hi = check_width(bits, start, stop, step)
	return Stream(Stream._Kind.Range, None, None,
		(start, stop, step, bool(closed), lo, hi))

def byterange(start:int, stop:int, step:int=1, closed:bool=False) -> Stream[int]:
	r'''
	Create a stream over an 8-bit integer range

	Counts from ``start`` up to ``stop`` (down, for a negative ``step``),
	excluding ``stop`` unless ``closed`` is set. A step which would leave
	the 8-bit range ends the stream rather than wrapping around.

	>>> list(byterange(0, 5))
	[0, 1, 2, 3, 4]
	>>> list(byterange(120, 127, 5, closed=True))
	[120, 125]
	>>> list(byterange(100, 127, 100, closed=True))
	[100]
	'''
	return _range(8, start, stop, step, closed)

def shortrange(start:int, stop:int, step:int=1, closed:bool=False) -> Stream[int]:
	'''Create a stream over a 16-bit integer range, see :func:`byterange`'''
	return _range(16, start, stop, step, closed)

def intrange(start:int, stop:int, step:int=1, closed:bool=False) -> Stream[int]:
	r'''
	Create a stream over a 32-bit integer range, see :func:`byterange`

	>>> list(intrange(0, 5))
	[0, 1, 2, 3, 4]
	>>> list(intrange(5, 0, -2))
	[5, 3, 1]
	>>> list(intrange(1, 3, closed=True))
	[1, 2, 3]
	'''
	return _range(32, start, stop, step, closed)

def longrange(start:int, stop:int, step:int=1, closed:bool=False) -> Stream[int]:
	'''Create a stream over a 64-bit integer range, see :func:`byterange`'''
	return _range(64, start, stop, step, closed)

def generate(supplier:Callable[[], T]) -> Stream[T]:
	r'''
	Create an infinite stream calling a function for every element

	The function may hold hidden state, so the stream is not restartable.

	>>> import itertools
	>>> counter = itertools.count()
	>>> list(generate(lambda: next(counter)).take(3))
	[0, 1, 2]
	'''
	return Stream(Stream._Kind.Generate, None,
		check_callable('supplier', supplier), _EMPTY_ARGS)

def iterate(seed:T, successor:Callable[[T], T]) -> Stream[T]:
	r'''
	Create an infinite stream of ``seed``, ``successor(seed)``,
	``successor(successor(seed))`` and so on

	Each successor is computed on the pull which needs it.

	>>> list(iterate(1, lambda x: x * 3).take(4))
	[1, 3, 9, 27]
	'''
	return Stream(Stream._Kind.Iterate, None,
		check_callable('successor', successor), (seed,))

__all__: Tuple[str, ...] = ('Stream', 'PairStream', 'SizeBounds', 'END',
	'empty', 'of', 'ofarray', 'ofcollection', 'ofmapping',
	'byterange', 'shortrange', 'intrange', 'longrange',
	'generate', 'iterate')
if sphinx_build: __all__ += ('StreamBase', 'PairStreamBase')
