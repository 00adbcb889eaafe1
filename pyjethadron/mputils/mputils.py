import sys


class ColorS(object):
	def str(*args):
		_s = ' '.join([str(s) for s in args])
		return _s
	def green(*s):
		return '\033[92m{}\033[00m'.format(ColorS.str(*s))
	def yellow(*s):
		return '\033[93m{}\033[00m'.format(ColorS.str(*s))
	def purple(*s):
		return '\033[95m{}\033[00m'.format(ColorS.str(*s))


# 0 = no debug info, 1 = some debug info, 2 = all debug info
_debug_level = 0

def set_debug_level(level):
	global _debug_level
	_debug_level = int(level) if level else 0

def debug_level():
	return _debug_level

def pwarning(*args, file=sys.stderr):
	print(ColorS.yellow('[w]', *args), file=file)

def pdebug(*args, level=1, file=sys.stderr):
	if _debug_level < level:
		return
	print(ColorS.purple('[d]', *args), file=file)

def pinfo(*args, file=sys.stdout):
	print(ColorS.green('[i]', *args), file=file)


class UniqueString(object):
	locked_strings = []

	def str(base=None):
		i = 0
		retstring = 'UniqueString_0' if base is None else '{}_{}'.format(str(base), i)
		while retstring in UniqueString.locked_strings:
			i = i + 1
			retstring = '{}_{}'.format(str(base), i)
		UniqueString.locked_strings.append(retstring)
		return retstring


class MPBase(object):
	def __init__(self, **kwargs):
		self.configure_from_args(name=None)
		for key, value in kwargs.items():
			self.__setattr__(key, value)
		if self.name is None:
			self.name = UniqueString.str(type(self).__name__)

	def configure_from_args(self, **kwargs):
		for key, value in kwargs.items():
			self.__setattr__(key, value)

	def configure_from_dict(self, d, ignore_none=False):
		for k in d:
			if ignore_none and d[k] is None:
				continue
			self.__setattr__(k, d[k])

	def __str__(self):
		s = []
		for v in self.__dict__:
			if v.startswith('_'):
				continue
			_s = '{} = {}'.format(v, self.__dict__[v])
			s.append((_s[:200] + '..') if len(_s) > 200 else _s)
		return '[i] {} ({}) with \n -  {}'.format(self.name, type(self).__name__, '\n -  '.join(s))
