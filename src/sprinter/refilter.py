from PySide6.QtCore import QObject
from PySide6.QtCore import QTimer
from PySide6.QtCore import Signal
from sprinter.match import fold
from sprinter.match import matches


REFILTER_DELAY = 200


class Refilter(QObject):
	"""Debounced recomputation of item visibility.

	Edits restart a single-shot timer; when it expires `fired` is emitted
	and the owner calls `run()`.  A filter text that only appends to the
	previous one can only hide rows, so such runs look at visible rows only.
	"""

	fired = Signal()
	selectionCleared = Signal()

	def __init__(self, store, view, query, completer, logger,
			delay=REFILTER_DELAY):
		super().__init__()
		self._store = store
		self._view = view
		self._query = query
		self._completer = completer
		self._logger = logger
		self._last_filter_text = ''
		self._dirty = False
		self._timer = QTimer(self)
		self._timer.setSingleShot(True)
		self._timer.setInterval(delay)
		self._timer.timeout.connect(self.fired)

	@property
	def pending(self):
		return self._timer.isActive()

	@property
	def last_filter_text(self):
		return self._last_filter_text

	def schedule(self):
		if not self._query.filtering_enabled:
			return
		# Restarting an active timer drops the previous schedule.
		self._timer.start()

	def cancel(self):
		self._timer.stop()

	def accepts(self, text):
		"""Visibility for an item arriving now, against the current query."""
		filter_text = self._query.filter_text
		if filter_text != self._last_filter_text:
			self._dirty = True
		return matches(text, filter_text)

	def run(self):
		self._timer.stop()
		filter_text = self._query.filter_text
		last = self._last_filter_text

		if filter_text == last and not self._dirty:
			self._logger.print(f'refilter: {filter_text!r} unchanged')
			return False

		if filter_text != last:
			self.selectionCleared.emit()

		narrowing = not self._dirty and fold(filter_text).startswith(fold(last))
		if narrowing:
			rows = list(self._view.visible_iter())
		else:
			rows = range(len(self._store))

		store = self._store
		for i in rows:
			store.set_visible(i, matches(store.get(i).text, filter_text))
		store.refresh()

		self._last_filter_text = filter_text
		self._dirty = False
		self._logger.print(
			f'refilter: {filter_text!r} scanned {len(rows)} rows '
			f'({"narrowed" if narrowing else "full"}), '
			f'{self._view.rowCount()} visible'
		)

		first = self._view.first()
		if first is not None:
			self._completer.complete(store.get(first).text)
		return True
