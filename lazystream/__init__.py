from ._version import __version__
from ._util import SizeBounds
from ._stream import Stream, PairStream, END, \
	empty, of, ofarray, ofcollection, ofmapping, \
	byterange, shortrange, intrange, longrange, \
	generate, iterate

__all__ = (
	'Stream', 'PairStream', 'SizeBounds', 'END',
	'empty', 'of', 'ofarray', 'ofcollection', 'ofmapping',
	'byterange', 'shortrange', 'intrange', 'longrange',
	'generate', 'iterate',
)
