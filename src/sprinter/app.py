from PySide6.QtCore import QEvent
from PySide6.QtCore import QFileInfo
from PySide6.QtCore import QMimeDatabase
from PySide6.QtCore import QObject
from PySide6.QtCore import QSize
from PySide6.QtCore import Qt
from PySide6.QtCore import QTimer
from PySide6.QtGui import QIcon
from PySide6.QtWidgets import QAbstractItemView
from PySide6.QtWidgets import QApplication
from PySide6.QtWidgets import QHBoxLayout
from PySide6.QtWidgets import QLineEdit
from PySide6.QtWidgets import QListView
from PySide6.QtWidgets import QPushButton
from PySide6.QtWidgets import QVBoxLayout
from PySide6.QtWidgets import QWidget
from sprinter.completion import Completer
from sprinter.controller import Controller
from sprinter.events import FIELD
from sprinter.events import KeyPress
from sprinter.events import LIST
from sprinter.model import FilteredView
from sprinter.model import INSERTION
from sprinter.model import ItemStore
from sprinter.model import NATURAL
from sprinter.query import QueryModel
from sprinter.reader import StreamReader
from sprinter.refilter import Refilter

import signal
import sys


ICON_SIZE = 16
DEFAULT_SIZE = (320, 320)


class IconResolver:
	"""Theme icon for the MIME type of the file an item names, if any."""

	def __init__(self):
		self._mime = QMimeDatabase()
		self._cache = {}

	def __call__(self, text):
		if not text:
			return None
		try:
			info = QFileInfo(text)
		except UnicodeError:
			return None
		if not info.exists():
			return None

		mime = self._mime.mimeTypeForFile(info)
		name = mime.iconName()
		if name not in self._cache:
			icon = QIcon.fromTheme(name)
			if icon.isNull():
				icon = QIcon.fromTheme(mime.genericIconName())
			self._cache[name] = None if icon.isNull() else icon
		return self._cache[name]


class KeyFilter(QObject):
	def __init__(self, controller, origin):
		super().__init__()
		self._controller = controller
		self._origin = origin

	def eventFilter(self, watched, event):
		if event.type() == QEvent.KeyPress:
			key = KeyPress(event.key(), event.text(), self._origin)
			return bool(self._controller.dispatch(key))
		return False


class MainWindow(QWidget):
	_controller = None

	def __init__(self, title=None, label=None, geometry=None, minimal=False):
		super().__init__()
		self._geometry = geometry

		self.field = QLineEdit()
		self.list = QListView()
		self.list.setUniformItemSizes(True)
		self.list.setTextElideMode(Qt.ElideMiddle)
		self.list.setEditTriggers(QAbstractItemView.NoEditTriggers)
		self.list.setIconSize(QSize(ICON_SIZE, ICON_SIZE))
		self.list.setVisible(not minimal)

		top = QHBoxLayout()
		top.addWidget(self.field)
		self.button = None
		if label:
			self.button = QPushButton(label)
			self.button.setFocusPolicy(Qt.NoFocus)
			top.addWidget(self.button)

		layout = QVBoxLayout(self)
		layout.setContentsMargins(2, 2, 2, 2)
		layout.setSpacing(2)
		layout.addLayout(top)
		layout.addWidget(self.list)

		self.setWindowFlags(Qt.WindowStaysOnTopHint)
		if title:
			self.setWindowTitle(title)

	def setController(self, controller):
		self._controller = controller
		if self.button is not None:
			self.button.clicked.connect(lambda: controller.submit())

	def show(self):
		geometry = self._geometry or {}
		width, height = geometry.get('size') or DEFAULT_SIZE
		self.resize(width, height)
		super().show()

		position = geometry.get('position')
		if position is not None:
			self.move(*position)
		else:
			frameGeometry = self.frameGeometry()
			screen = QApplication.primaryScreen()
			frameGeometry.moveCenter(screen.geometry().center())
			self.move(frameGeometry.topLeft())
		self.field.setFocus()

	def closeEvent(self, event):
		if self._controller is not None:
			self._controller.cancel()
		return super().closeEvent(event)


class Picker:
	_app_name = 'sprinter'
	_enc = 'utf-8'

	def __init__(
			self,
			logger,
			input_separator=b'\n',
			output_separator='',
			sort=False,
			minimal=False,
			title=None,
			label=None,
			geometry=None,
			stdin=None,
			stdout=None,
			stderr=None,
		):
		self._logger = logger
		self._stdout = sys.stdout.buffer if stdout is None else stdout
		self._stderr = sys.stderr if stderr is None else stderr

		self._app = QApplication.instance() or QApplication(sys.argv)
		self._app.setApplicationName(self._app_name)
		self._view = MainWindow(title, label, geometry, minimal)

		self._store = ItemStore()
		self._filtered = FilteredView(
			self._store,
			NATURAL if sort else INSERTION
		)
		field, list_view = self._view.field, self._view.list
		if output_separator:
			list_view.setSelectionMode(QAbstractItemView.ExtendedSelection)

		self._query = QueryModel(field, output_separator)
		self._completer = Completer(self._query, logger)
		self._refilter = Refilter(
			self._store,
			self._filtered,
			self._query,
			self._completer,
			logger
		)
		self._controller = Controller(
			logger,
			self._store,
			self._filtered,
			self._query,
			self._refilter,
			list_view,
			icons=IconResolver(),
			minimal=minimal
		)
		self._controller.picked.connect(self._picked)
		self._controller.dismissed.connect(lambda: self.exit(1))
		self._controller.failed.connect(self._failed)
		self._view.setController(self._controller)

		self._filters = [
			KeyFilter(self._controller, FIELD),
			KeyFilter(self._controller, LIST),
		]
		field.installEventFilter(self._filters[0])
		list_view.installEventFilter(self._filters[1])

		fd = (sys.stdin if stdin is None else stdin).fileno()
		self._reader = StreamReader(logger, fd, input_separator)
		self._reader.ticked.connect(self._controller.on_reader_ticked)

		signal.signal(signal.SIGINT, lambda s, f: self.exit(1))
		QTimer.singleShot(0, self._reader.start)

		# Let the Python interpreter run now and then, so SIGINT is noticed.
		self._keep_event_loop_active = QTimer()
		self._keep_event_loop_active.timeout.connect(lambda: None)
		self._keep_event_loop_active.start(100)

	def exec(self):
		self._view.show()
		return self._app.exec()

	def exit(self, code):
		self._reader.stop()
		self._app.exit(code)

	def _picked(self, text):
		self._stdout.write(text.encode(self._enc, 'surrogateescape'))
		self._stdout.flush()
		self.exit(0)

	def _failed(self, message):
		self._stderr.write(message + '\n')
		self._stderr.flush()
		self.exit(2)


def run(**kw):
	return Picker(**kw).exec()
