import os

os.environ.setdefault('QT_QPA_PLATFORM', 'offscreen')

from PySide6.QtWidgets import QApplication
from PySide6.QtWidgets import QLineEdit
from PySide6.QtWidgets import QListView
from sprinter import nulllogger
from sprinter.completion import Completer
from sprinter.controller import Controller
from sprinter.model import FilteredView
from sprinter.model import INSERTION
from sprinter.model import ItemStore
from sprinter.query import QueryModel
from sprinter.refilter import Refilter

import pytest


@pytest.fixture(scope='session', autouse=True)
def qapp():
	app = QApplication.instance() or QApplication([])
	yield app


class Picker:
	"""The picker components wired together, without a window or stdin."""

	def __init__(self, items=(), ordering=INSERTION, output_separator='', **kw):
		logger = nulllogger()
		self.field = QLineEdit()
		self.list = QListView()
		self.store = ItemStore()
		self.view = FilteredView(self.store, ordering)
		self.query = QueryModel(self.field, output_separator)
		self.completer = Completer(self.query, logger)
		self.refilter = Refilter(
			self.store, self.view, self.query, self.completer, logger)
		self.controller = Controller(
			logger,
			self.store,
			self.view,
			self.query,
			self.refilter,
			self.list,
			**kw
		)
		self.output = []
		self.dismissed = []
		self.failures = []
		self.controller.picked.connect(self.output.append)
		self.controller.dismissed.connect(lambda: self.dismissed.append(True))
		self.controller.failed.connect(self.failures.append)
		for text in items:
			self.store.append(text, visible=self.refilter.accepts(text))

	def type(self, text):
		for c in text:
			self.field.insert(c)

	def visible(self):
		return [self.store.get(i).text for i in self.view.visible_iter()]


@pytest.fixture
def picker():
	return Picker
