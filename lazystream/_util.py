from typing import Any, Callable, TypeVar, Optional, Tuple, NamedTuple, cast
from typing_extensions import Protocol

import builtins
import operator
import os

T = TypeVar('T')
T_co = TypeVar('T_co', covariant=True)

# Marker returned by pull() once a stream is exhausted.
NOTHING = cast(Any, object())

class Indexable(Protocol[T_co]):
	def __len__(self) -> int: ...
	def __getitem__(self, index:int) -> T_co: ...

class SizeBounds(NamedTuple):
	'''
	Bounds on the number of elements a stream has left to produce.

	``upper`` is ``None`` when no bound is known.
	'''
	lower: int
	upper: Optional[int]

	def clip(self, count:int) -> 'SizeBounds':
		if self.upper is None:
			return SizeBounds(min(self.lower, count), count)
		return SizeBounds(min(self.lower, count), min(self.upper, count))

	def shift(self, count:int) -> 'SizeBounds':
		upper = None if self.upper is None else max(0, self.upper - count)
		return SizeBounds(max(0, self.lower - count), upper)

	def loosen(self) -> 'SizeBounds':
		return SizeBounds(0, self.upper)

EXACT_ZERO = SizeBounds(0, 0)
UNKNOWN = SizeBounds(0, None)

def check_callable(name:str, func:Any) -> Callable:
	if not callable(func):
		raise TypeError('{} must be callable, not {}'.format(name, type(func).__name__))
	return func

def check_count(name:str, count:Any) -> int:
	count = operator.index(count)
	if count < 0:
		raise ValueError('{} must be non-negative: {}'.format(name, count))
	return count

# (minimum, maximum) of the signed fixed-width integer types
WIDTHS = {
	8: (-(1 << 7), (1 << 7) - 1),
	16: (-(1 << 15), (1 << 15) - 1),
	32: (-(1 << 31), (1 << 31) - 1),
	64: (-(1 << 63), (1 << 63) - 1),
}

def check_width(bits:int, *values:int) -> Tuple[int, int]:
	lo, hi = WIDTHS[bits]
	for value in values:
		if not (lo <= value <= hi):
			raise OverflowError('{} out of range for a {}-bit integer'.format(value, bits))
	return lo, hi

def negate(pred:Callable[..., Any]) -> Callable[..., bool]:
	def inner(*args):
		return not pred(*args)
	return inner

def spread(func:Callable[..., T]) -> Callable[[Tuple[Any, Any]], T]:
	def inner(pair):
		return func(*pair)
	return inner

def as_pair(value:Any) -> Any:
	if value is None:
		return None
	first, second = value
	return first, second

sphinx_build: bool = getattr(builtins, '__sphinx_build__', False)

strict_restart: bool = bool(os.environ.get('LAZYSTREAM_STRICT_RESTART'))
