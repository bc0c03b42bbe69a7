from PySide6.QtCore import QEvent
from PySide6.QtCore import QObject
from PySide6.QtCore import Qt
from PySide6.QtCore import Signal
from PySide6.QtCore import Slot
from sprinter.events import FIELD
from sprinter.events import FieldEdit
from sprinter.events import KeyPress
from sprinter.events import LIST
from sprinter.events import ListCursor
from sprinter.events import ReaderTick
from sprinter.events import RefilterFire
from sprinter.query import head_of


IDLE = 'idle'
TYPING = 'typing'
SUBMITTED = 'submitted'
CANCELLED = 'cancelled'
FATAL = 'fatal'

TERMINAL_STATES = (SUBMITTED, CANCELLED, FATAL)

SUBMIT_KEYS = (Qt.Key_Return, Qt.Key_Enter)
TO_LIST_KEYS = (Qt.Key_Tab, Qt.Key_Down, Qt.Key_PageDown)
TO_FIELD_KEYS = (Qt.Key_Up, Qt.Key_PageUp)


class Controller(QObject):
	"""Owns the picker state and reacts to events.

	All events go through `dispatch()`.  Terminal states are announced with
	`picked` (the text to print), `dismissed` or `failed` (a diagnostic).
	"""

	picked = Signal(str)
	dismissed = Signal()
	failed = Signal(str)

	state = IDLE

	def __init__(
			self,
			logger,
			store,
			view,
			query,
			refilter,
			list_view,
			icons=None,
			minimal=False
		):
		super().__init__()
		self._logger = logger
		self._store = store
		self._view = view
		self._query = query
		self._refilter = refilter
		self._list = list_view
		self._icons = icons
		self._minimal = minimal
		self._focus = FIELD
		self.original_text = query.raw

		self._handlers = {
			KeyPress: self._key_press,
			FieldEdit: self._field_edit,
			ReaderTick: self._reader_tick,
			RefilterFire: self._refilter_fire,
			ListCursor: self._list_cursor,
		}

		query.changed.connect(self._on_query_changed)
		refilter.fired.connect(self._on_refilter_fired)
		refilter.selectionCleared.connect(self._clear_selection)
		list_view.setModel(view)
		selection = list_view.selectionModel()
		selection.currentChanged.connect(self._on_list_changed)
		selection.selectionChanged.connect(self._on_list_changed)
		for widget in (query.field, list_view, list_view.viewport()):
			widget.installEventFilter(self)

	@property
	def focus(self):
		return self._focus

	@property
	def multi(self):
		return bool(self._query.output_separator)

	def dispatch(self, event):
		if self.state in TERMINAL_STATES:
			return True
		return self._handlers[type(event)](event)

	def submit(self):
		return self.dispatch(KeyPress(Qt.Key_Return, '', self._focus))

	def cancel(self):
		return self.dispatch(KeyPress(Qt.Key_Escape, '', self._focus))

	def _key_press(self, event):
		key = event.key
		if key == Qt.Key_Escape:
			self._transition(CANCELLED)
			self.dismissed.emit()
			return True

		if key in SUBMIT_KEYS:
			self._transition(SUBMITTED)
			self.picked.emit(self._query.raw)
			return True

		if event.origin == FIELD and key in TO_LIST_KEYS:
			return self._focus_list()

		if event.origin == LIST:
			if key in TO_FIELD_KEYS and self._list.currentIndex().row() <= 0:
				self._focus_field(self.original_text)
				return True
			if self.multi and event.text and event.text == self._query.output_separator:
				self._focus_field(self._query.raw + event.text)
				self._refilter.schedule()
				return True

		return False

	def _field_edit(self, event):
		if self.state == IDLE:
			self._transition(TYPING)
		self.original_text = event.text
		self._refilter.schedule()
		return True

	def _reader_tick(self, event):
		store = self._store
		for text in event.items:
			icon = self._icons(text) if self._icons is not None else None
			store.append(text, icon, self._refilter.accepts(text))

		if event.overflow is not None:
			self._transition(FATAL)
			self.failed.emit(str(event.overflow))
		elif event.done:
			self._logger.print(f'controller: input closed, {len(store)} items')
		return True

	def _refilter_fire(self, event):
		return self._refilter.run()

	def _list_cursor(self, event):
		if self._focus != LIST or not event.rows:
			return False

		store = self._store
		self._view.set_cursor(event.rows[-1])
		if self.multi:
			sep = self._query.output_separator
			head = head_of(self.original_text, sep)
			text = head + sep.join(store.get(i).text for i in event.rows)
		else:
			text = store.get(event.rows[-1]).text
		self._query.replace(text)
		return True

	def _focus_list(self):
		view = self._view
		if not view.rowCount():
			# Keep Qt from moving focus to an empty list.
			return True

		self._focus = LIST
		if self._minimal:
			self._list.show()
		self._list.setFocus()

		cursor = view.cursor_row()
		if cursor is None:
			self._list.setCurrentIndex(view.index(0, 0))
		else:
			self._list.setCurrentIndex(view.index(view.row_of(cursor), 0))
		self.dispatch(ListCursor(self._selected_rows()))
		return True

	def _focus_field(self, text):
		self._focus = FIELD
		self._list.clearSelection()
		self._query.replace(text)
		self.original_text = text
		self._query.field.setFocus()

	def _selected_rows(self):
		view = self._view
		selection = self._list.selectionModel()
		rows = sorted(i.row() for i in selection.selectedRows())
		if not rows:
			current = self._list.currentIndex()
			rows = [current.row()] if current.isValid() else []
		return [view.mapToSource(view.index(r, 0)).row() for r in rows]

	def eventFilter(self, watched, event):
		# Clicks reach the list before its cursor moves, so a mouse press
		# counts as focus.
		if event.type() in (QEvent.FocusIn, QEvent.MouseButtonPress):
			self._focus = FIELD if watched is self._query.field else LIST
		return False

	def _transition(self, state):
		self._logger.print(f'controller: {self.state} -> {state}')
		self.state = state
		if state in TERMINAL_STATES:
			self._refilter.cancel()

	@Slot()
	def _on_query_changed(self):
		self.dispatch(FieldEdit(self._query.raw))

	@Slot()
	def _on_refilter_fired(self):
		self.dispatch(RefilterFire())

	def _on_list_changed(self, *args):
		if self._focus == LIST:
			self.dispatch(ListCursor(self._selected_rows()))

	@Slot()
	def _clear_selection(self):
		self._list.selectionModel().clearSelection()

	@Slot(object)
	def on_reader_ticked(self, tick):
		self.dispatch(tick)
