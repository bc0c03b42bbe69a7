from contextlib import contextmanager
from PySide6.QtCore import QObject
from PySide6.QtCore import Signal
from PySide6.QtCore import Slot


def derive_filter_text(raw, sel_from, sep=''):
	"""The part of `raw` the list is filtered by.

	That is the text before the selection, counting only from the last
	output separator on, so earlier picks do not take part in filtering.
	"""
	head = raw[:sel_from]
	if sep:
		pos = head.rfind(sep)
		if pos != -1:
			return head[pos + len(sep):]
	return head


def head_of(raw, sep=''):
	"""Everything up to and including the last separator of `raw`."""
	if not sep:
		return ''
	pos = raw.rfind(sep)
	if pos == -1:
		return ''
	return raw[:pos + len(sep)]


def diff_edit(old, new):
	"""Describe the change from `old` to `new` as a deletion and insertion.

	Returns `(start, deleted_end, inserted)`: the range of `old` that was
	removed and the text that replaced it.
	"""
	limit = min(len(old), len(new))
	start = 0
	while start < limit and old[start] == new[start]:
		start += 1
	tail = 0
	while (tail < limit - start and
			old[len(old) - 1 - tail] == new[len(new) - 1 - tail]):
		tail += 1
	return start, len(old) - tail, new[start:len(new) - tail]


def describe_edit(old, new, selection=None):
	"""Like `diff_edit`, but prefer typing over the selection `(start, end)`.

	Typing over a selection replaces it, which a plain diff may mistake for
	a shorter deletion.
	"""
	if selection is not None:
		start, end = selection
		kept = len(old) - end
		if (start < end <= len(old) and len(new) >= start + kept and
				new[:start] == old[:start] and new[len(new) - kept:] == old[end:]):
			return start, end, new[start:len(new) - kept]
	return diff_edit(old, new)


class QueryModel(QObject):
	"""What the user is searching for, read from a line edit.

	Text and selection are always the field's current ones.  Edits are
	reported through `deleted`, `inserted` and `changed` only while
	`filtering_enabled` holds; programmatic edits go through `programmatic()`
	so that they pass unnoticed.
	"""

	inserted = Signal(str)
	deleted = Signal(int, int)
	changed = Signal()

	filtering_enabled = True
	last_edit_inserted = False

	def __init__(self, field, output_separator=''):
		super().__init__()
		self._field = field
		self._sep = output_separator or ''
		self._text = field.text()
		self._selection = self.selection
		field.textChanged.connect(self._on_text_changed)
		field.selectionChanged.connect(self._remember_selection)
		field.cursorPositionChanged.connect(self._remember_selection)

	@property
	def field(self):
		return self._field

	@property
	def output_separator(self):
		return self._sep

	@property
	def raw(self):
		return self._field.text()

	@property
	def cursor(self):
		return self._field.cursorPosition()

	@property
	def selection(self):
		field = self._field
		if field.hasSelectedText():
			start = field.selectionStart()
			return start, start + field.selectionLength()
		cursor = field.cursorPosition()
		return cursor, cursor

	@property
	def sel_from(self):
		return self.selection[0]

	@property
	def sel_to(self):
		return self.selection[1]

	@property
	def filter_text(self):
		return derive_filter_text(self.raw, self.sel_from, self._sep)

	@property
	def head(self):
		return head_of(self.raw, self._sep)

	@contextmanager
	def programmatic(self):
		previous = self.filtering_enabled
		self.filtering_enabled = False
		try:
			yield self._field
		finally:
			self.filtering_enabled = previous

	def replace(self, text):
		"""Set the whole field to `text` with the cursor at the end."""
		with self.programmatic() as field:
			field.setText(text)
			field.setCursorPosition(len(text))
		self.last_edit_inserted = False

	@Slot(str)
	def _on_text_changed(self, text):
		old, self._text = self._text, text
		if not self.filtering_enabled:
			return

		start, end, inserted = describe_edit(old, text, self._selection)
		if end > start:
			self.deleted.emit(start, end)
		if inserted:
			self.inserted.emit(inserted)
		self.last_edit_inserted = bool(inserted)
		self.changed.emit()

	def _remember_selection(self, *args):
		# Signals about the selection arrive after the text change, so this
		# is still the selection an edit started from.
		self._selection = self.selection
