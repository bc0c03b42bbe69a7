from PySide6.QtCore import QObject
from PySide6.QtCore import QTimer
from PySide6.QtCore import Signal
from PySide6.QtCore import Slot
from sprinter.errors import InputOverflow
from sprinter.events import ReaderTick

import os
import select


BATCH = 20
CHUNK_SIZE = 4096
BUF_SIZE = 8192
IDLE_BACKOFF = 10


class Framer:
	"""Split a byte stream into items delimited by `separator`."""

	def __init__(self, separator=b'\n', size=BUF_SIZE, encoding='utf-8'):
		if not separator:
			raise ValueError('empty separator')
		self._sep = separator
		self._size = size
		self._enc = encoding
		self._buf = bytearray()

	def feed(self, data):
		buf = self._buf
		start = max(0, len(buf) - len(self._sep) + 1)
		buf += data
		items = []

		while True:
			pos = buf.find(self._sep, start)
			if pos == -1:
				break
			items.append(self._decode(buf[:pos]))
			del buf[:pos + len(self._sep)]
			start = 0

		# Bytes past the limit may only be the start of a separator.
		if len(buf) > self._size and not self._sep.startswith(bytes(buf[self._size:])):
			raise InputOverflow(self._size)

		return items

	def flush(self):
		if not self._buf:
			return []
		if len(self._buf) > self._size:
			raise InputOverflow(self._size)
		item = self._decode(self._buf)
		self._buf = bytearray()
		return [item]

	def _decode(self, data):
		return bytes(data).decode(self._enc, 'surrogateescape')


class StreamReader(QObject):
	"""Drain a file descriptor from the event loop without blocking it.

	Each tick of the idle hook does at most `BATCH` reads, each only after
	`select()` reported data, and then reports the framed items through
	`ticked`.  The hook stops on EOF, read errors and overflow.
	"""

	ticked = Signal(object)

	def __init__(self, logger, fd=None, separator=b'\n', size=BUF_SIZE):
		super().__init__()
		self._logger = logger
		self._fd = 0 if fd is None else fd
		self._framer = Framer(separator, size)
		self._timer = QTimer(self)
		self._timer.timeout.connect(self._tick)
		self.done = False
		self.reads = 0

	def start(self):
		self._timer.start(0)

	def stop(self):
		self._timer.stop()

	def step(self):
		"""Run one tick and return its `ReaderTick`."""
		if self.done:
			return ReaderTick([], True, None)

		items = []
		self.reads = 0
		try:
			self._read(items)
		except InputOverflow as error:
			self._logger.print(f'reader: {error}')
			self.done = True
			return ReaderTick(items, True, error)

		if items:
			self._logger.print(f'reader: framed {len(items)} items')
		return ReaderTick(items, self.done, None)

	def _read(self, items):
		try:
			for _ in range(BATCH):
				readable, _, _ = select.select([self._fd], [], [], 0)
				if not readable:
					break
				data = os.read(self._fd, CHUNK_SIZE)
				self.reads += 1
				if not data:
					self._logger.print('reader: end of input')
					items.extend(self._framer.flush())
					self.done = True
					break
				items.extend(self._framer.feed(data))
		except OSError as error:
			self._logger.print(f'reader: closing input: {error}')
			items.extend(self._framer.flush())
			self.done = True

	@Slot()
	def _tick(self):
		tick = self.step()
		if tick.done:
			self._timer.stop()
		elif self.reads:
			self._timer.setInterval(0)
		else:
			self._timer.setInterval(IDLE_BACKOFF)
		self.ticked.emit(tick)
