from PySide6.QtCore import QAbstractListModel
from PySide6.QtCore import QModelIndex
from PySide6.QtCore import QSortFilterProxyModel
from PySide6.QtCore import Qt
from PySide6.QtCore import Signal
from PySide6.QtCore import Slot
from sprinter.match import natural_compare


INSERTION = 'insertion'
NATURAL = 'natural'

VisibleRole = Qt.UserRole + 1
IndexRole = Qt.UserRole + 2


class Item:
	__slots__ = ('text', 'icon', 'visible', 'label')

	def __init__(self, text, icon=None, visible=True):
		self.text = text
		self.label = _printable(text)
		self.icon = icon
		self.visible = visible

	def __repr__(self):
		return f'<Item {self.text!r} visible={self.visible}>'


def _printable(text):
	# Undecodable input bytes are kept as surrogates, which Qt cannot show.
	try:
		text.encode('utf-8')
		return text
	except UnicodeEncodeError:
		return text.encode('utf-8', 'surrogateescape').decode('utf-8', 'replace')


class ItemStore(QAbstractListModel):
	"""Append-only list of items.

	Rows are never removed nor moved, so a row number identifies an item for
	the lifetime of the store.  Only the visibility of an item changes after
	it is appended; flags can be flipped in bulk and announced once through
	`refresh()`.
	"""

	visibilityChanged = Signal()

	def __init__(self, parent=None):
		super().__init__(parent)
		self._items = []

	def append(self, text, icon=None, visible=True):
		index = len(self._items)
		self.beginInsertRows(QModelIndex(), index, index)
		self._items.append(Item(text, icon, visible))
		self.endInsertRows()
		return index

	def get(self, index):
		return self._items[index]

	def set_visible(self, index, visible):
		self._items[index].visible = visible

	def refresh(self):
		self.visibilityChanged.emit()

	def __iter__(self):
		return iter(self._items)

	def __len__(self):
		return len(self._items)

	def rowCount(self, parent=QModelIndex()):
		if parent.isValid():
			return 0
		return len(self._items)

	def data(self, index, role=Qt.DisplayRole):
		if not index.isValid() or not 0 <= index.row() < len(self._items):
			return None
		item = self._items[index.row()]
		if role == Qt.DisplayRole:
			return item.label
		if role == Qt.DecorationRole:
			return item.icon
		if role == VisibleRole:
			return item.visible
		if role == IndexRole:
			return index.row()
		return None


class FilteredView(QSortFilterProxyModel):
	"""The visible rows of an `ItemStore`, in insertion or natural order.

	The view holds no items, only store row numbers: the cursor is kept as a
	store index and everything else is looked up on demand.
	"""

	cursorChanged = Signal(object)

	_cursor = None

	def __init__(self, store, ordering=INSERTION, parent=None):
		super().__init__(parent)
		self._store = store
		self._ordering = ordering
		self.setSourceModel(store)
		self.setDynamicSortFilter(True)
		store.visibilityChanged.connect(self._refilter)
		if ordering == NATURAL:
			self.sort(0)

	@property
	def ordering(self):
		return self._ordering

	@property
	def store(self):
		return self._store

	def visible_iter(self):
		for row in range(self.rowCount()):
			yield self.mapToSource(self.index(row, 0)).row()

	def first(self):
		return next(self.visible_iter(), None)

	def cursor_row(self):
		if self._cursor is not None and not self._store.get(self._cursor).visible:
			return None
		return self._cursor

	def set_cursor(self, index):
		if index is not None and not self._store.get(index).visible:
			index = None
		if index != self._cursor:
			self._cursor = index
			self.cursorChanged.emit(index)

	def row_of(self, index):
		"""Return the view row showing store index `index`, or -1."""
		return self.mapFromSource(self._store.index(index, 0)).row()

	def filterAcceptsRow(self, source_row, source_parent):
		return self._store.get(source_row).visible

	def lessThan(self, left, right):
		a, b = left.row(), right.row()
		order = natural_compare(self._store.get(a).text, self._store.get(b).text)
		if order:
			return order < 0
		return a < b

	@Slot()
	def _refilter(self):
		if hasattr(self, 'endFilterChange'):
			self.beginFilterChange()
			self.endFilterChange(QSortFilterProxyModel.Direction.Rows)
		else:
			self.invalidateRowsFilter()
		if self._cursor is not None and not self._store.get(self._cursor).visible:
			self.set_cursor(None)
