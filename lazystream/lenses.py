from __future__ import annotations

from typing import *

from ._stream import Stream, PairStream, of

from lenses import hooks

T = TypeVar('T')
A = TypeVar('A')
B = TypeVar('B')

# Reading through a lens iterates a restarted stream, so the stream
# itself is left unconsumed (unless it is not restartable).

@hooks.to_iter.register(Stream)
def _stream_to_iter(self:Stream[T]) -> Iterator[T]:
	return iter(self.restart())
@hooks.from_iter.register(Stream)
def _stream_from_iter(self:Stream[Any], items:Iterator[T]) -> Stream[T]:
	return of(*items)

@hooks.to_iter.register(PairStream)
def _pairstream_to_iter(self:PairStream[A,B]) -> Iterator[Tuple[A,B]]:
	return iter(self.restart())
@hooks.from_iter.register(PairStream)
def _pairstream_from_iter(self:PairStream[Any,Any], items:Iterator[Tuple[A,B]]) -> PairStream[A,B]:
	return of(*items).pairs()
