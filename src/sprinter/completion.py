from sprinter.match import startswith_folded


class Completer:
	"""Complete the filter text in place with the rest of a candidate.

	The proposed text is inserted at the cursor and left selected, so the
	next keystroke replaces it.
	"""

	def __init__(self, query, logger):
		self._query = query
		self._logger = logger

	def can_complete(self, text):
		query = self._query
		sel_from, sel_to = query.selection
		filter_text = query.filter_text
		return (
			query.last_edit_inserted and
			sel_from == sel_to and
			sel_to == len(query.raw) and
			len(text) > len(filter_text) and
			startswith_folded(text, filter_text)
		)

	def complete(self, text):
		if not self.can_complete(text):
			return False

		suffix = text[len(self._query.filter_text):]
		with self._query.programmatic() as field:
			start = field.cursorPosition()
			field.insert(suffix)
			field.setSelection(start, len(suffix))

		self._logger.print(f'completion: proposing {suffix!r}')
		return True
