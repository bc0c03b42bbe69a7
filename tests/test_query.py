from PySide6.QtWidgets import QLineEdit
from sprinter.query import QueryModel
from sprinter.query import derive_filter_text
from sprinter.query import describe_edit
from sprinter.query import head_of


def test_filter_text_stops_at_selection():
	assert derive_filter_text('apple', 1) == 'a'
	assert derive_filter_text('apple', 5) == 'apple'
	assert derive_filter_text('', 0) == ''


def test_filter_text_starts_after_last_output_separator():
	assert derive_filter_text('red,bl', 6, ',') == 'bl'
	assert derive_filter_text('red,', 4, ',') == ''
	assert derive_filter_text('red,blue', 5, ',') == 'b'
	assert derive_filter_text('a::b::c', 7, '::') == 'c'
	assert derive_filter_text('red', 3, ',') == 'red'


def test_head_of():
	assert head_of('red,bl', ',') == 'red,'
	assert head_of('red', ',') == ''
	assert head_of('red,bl', '') == ''


def test_describe_edit():
	assert describe_edit('ap', 'apr') == (2, 2, 'r')
	assert describe_edit('apr', 'ap') == (2, 3, '')
	assert describe_edit('foo', 'fo', (1, 3)) == (1, 3, 'o')
	assert describe_edit('foo', 'f', (1, 3)) == (1, 3, '')
	assert describe_edit('foo', 'fo') == (2, 3, '')


def _model(text='', sep=''):
	field = QLineEdit(text)
	query = QueryModel(field, sep)
	events = []
	query.inserted.connect(lambda s: events.append(('insert', s)))
	query.deleted.connect(lambda a, b: events.append(('delete', a, b)))
	query.changed.connect(lambda: events.append(('change',)))
	return field, query, events


def test_typing_reports_insertions():
	field, query, events = _model()
	field.insert('a')
	field.insert('p')
	assert query.raw == 'ap'
	assert query.selection == (2, 2)
	assert query.filter_text == 'ap'
	assert query.last_edit_inserted
	assert events == [('insert', 'a'), ('change',), ('insert', 'p'), ('change',)]


def test_backspace_reports_deletion():
	field, query, events = _model()
	field.insert('ab')
	events.clear()
	field.backspace()
	assert events == [('delete', 1, 2), ('change',)]
	assert not query.last_edit_inserted


def test_typing_over_selection_is_an_insertion():
	field, query, events = _model('foo')
	field.setSelection(1, 2)
	assert query.selection == (1, 3)
	assert query.filter_text == 'f'
	events.clear()

	field.insert('o')
	assert query.raw == 'fo'
	assert events == [('delete', 1, 3), ('insert', 'o'), ('change',)]
	assert query.last_edit_inserted


def test_programmatic_edits_are_silent():
	field, query, events = _model()
	assert query.filtering_enabled
	with query.programmatic():
		assert not query.filtering_enabled
		field.setText('quiet')
	query.replace('also quiet')
	assert query.filtering_enabled
	assert events == []
	assert query.raw == 'also quiet'
	assert query.cursor == len('also quiet')

	field.insert('!')
	assert events == [('insert', '!'), ('change',)]


def test_filter_text_with_output_separator():
	field, query, events = _model(sep=',')
	field.insert('red,gr')
	assert query.filter_text == 'gr'
	assert query.head == 'red,'
	assert query.output_separator == ','
