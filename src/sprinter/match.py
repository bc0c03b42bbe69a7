import string


_UPPER = str.maketrans(string.ascii_lowercase, string.ascii_uppercase)


def fold(text):
	# Only ASCII letters are folded; anything else compares as is.
	return text.translate(_UPPER)


def match_tokens(haystack, needle):
	"""Return the position where `needle` matches in `haystack`, or None.

	The needle is split on single spaces into tokens which must appear in
	`haystack` in order and without overlapping.  The returned position is
	where the first token matched.
	"""
	if not needle:
		return 0

	haystack = fold(haystack)
	tokens = fold(needle).split(' ')

	first = haystack.find(tokens[0])
	if first == -1:
		return None

	# The earliest occurrence of each token leaves the most room for the
	# remaining ones, so a greedy scan finds a witness whenever one exists.
	pos = first + len(tokens[0])
	for token in tokens[1:]:
		found = haystack.find(token, pos)
		if found == -1:
			return None
		pos = found + len(token)

	return first


def matches(haystack, needle):
	return match_tokens(haystack, needle) is not None


def startswith_folded(text, prefix):
	return fold(text).startswith(fold(prefix))


def natural_compare(a, b):
	"""Compare two strings, taking runs of digits as numbers."""
	i = j = 0
	la, lb = len(a), len(b)

	while i < la and j < lb:
		ca, cb = a[i], b[j]
		if _isdigit(ca) and _isdigit(cb):
			ei, ej = _digits_end(a, i), _digits_end(b, j)
			na, nb = int(a[i:ei]), int(b[j:ej])
			if na != nb:
				return -1 if na < nb else 1
			i, j = ei, ej
		elif ca != cb:
			return -1 if ca < cb else 1
		else:
			i += 1
			j += 1

	rest_a, rest_b = la - i, lb - j
	return (rest_a > rest_b) - (rest_a < rest_b)


def _isdigit(c):
	return '0' <= c <= '9'


def _digits_end(text, start):
	end = start
	while end < len(text) and _isdigit(text[end]):
		end += 1
	return end
