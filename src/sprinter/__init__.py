#!/usr/bin/python
"""Sprinter.

Reads items from STDIN, lets the user narrow them down by typing and prints
the chosen text to STDOUT.

Usage:
    sprinter [--debug]
             [--geometry=<geometry>]
             [--input-separator=<sep>]
             [--label=<label>]
             [--minimal]
             [--output-separator=<sep>]
             [--sort]
             [--title=<title>]
    sprinter --help

Options:
    -d, --debug
        Print additional information to STDERR.

    -g <geometry>, --geometry <geometry>
        Window size and position, as WxH, WxH+X+Y or +X+Y.  By default the
        window is 320x320 and centered on the screen.

    -i <sep>, --input-separator <sep>
        Items in STDIN are separated by <sep> instead of a newline.  The
        escapes \\n and \\t stand for newline and tab; a backslash before
        any other character stands for that character.

    -l <label>, --label <label>
        Show a button with <label> next to the input; clicking it accepts
        the input.

    -m, --minimal
        Start with the list of items hidden.  It is shown when the focus
        moves to it.

    -o <sep>, --output-separator <sep>
        Allow picking several items, joined with <sep> in the output.  Only
        the text after the last <sep> in the input is used for filtering.
        Escapes are handled as in --input-separator.

    -s, --sort
        Sort items in natural order (numbers within the text are compared
        by value) instead of the order they were read.

    -t <title>, --title <title>
        Set the window title to <title>.

    -h, --help
        Show this.

Key bindings:

    Enter
        Accept the input, that is, print it to STDOUT and exit.

    Esc
        Quit without printing anything.

    Tab/Down/PageDown
        Move from the input to the list.  Moving through the list copies the
        current item into the input.

    Up/PageUp
        On the first item of the list, go back to the input and restore what
        was typed.

    Ctrl+Space
        Toggle the current item when several items can be picked, see the
        output separator option.  Typing the output separator in the list
        goes back to the input to pick another item.

Exit status is 0 if the input was accepted, 1 if the picker was dismissed
and 2 on usage errors or unreadable input.
"""

from docopt import docopt
from docopt import DocoptExit
from docopt import printable_usage
from sprinter.app import run
from sprinter.errors import UsageError

import re
import sys


def main(args):
	if args['--help']:
		sys.stderr.write(__doc__)
		return 0

	logger = streamlogger(sys.stderr if args['--debug'] else None)

	try:
		options = parse_options(args)
	except UsageError as error:
		sys.stderr.write(f'{error}\n{printable_usage(__doc__)}\n')
		return 2

	return run(logger=logger, **options)


def parse_options(args):
	input_separator = args['--input-separator']
	if input_separator is None:
		input_separator = '\n'
	input_separator = unescape(input_separator)
	if not input_separator:
		raise UsageError('the input separator must not be empty')

	return dict(
		input_separator=input_separator.encode('utf-8', 'surrogateescape'),
		output_separator=unescape(args['--output-separator'] or ''),
		sort=args['--sort'],
		minimal=args['--minimal'],
		title=args['--title'],
		label=args['--label'],
		geometry=parse_geometry(args['--geometry'])
	)


def cli(argv=None):
	try:
		args = docopt(__doc__, argv=argv, help=False)
	except DocoptExit as error:
		sys.stderr.write(f'{error}\n')
		return 2
	return main(args)


def unescape(text):
	out = []
	it = iter(text)
	for c in it:
		if c == '\\':
			c = next(it, '\\')
			c = {'n': '\n', 't': '\t'}.get(c, c)
		out.append(c)
	return ''.join(out)


_geometry = re.compile(r'^(?:(\d+)x(\d+))?(?:([+-]\d+)([+-]\d+))?$')


def parse_geometry(text):
	if not text:
		return None
	m = _geometry.match(text)
	if m is None or not any(m.groups()):
		raise UsageError(f'invalid geometry: {text!r}')
	width, height, x, y = m.groups()
	return dict(
		size=(int(width), int(height)) if width else None,
		position=(int(x), int(y)) if x else None,
	)


class streamlogger:
	def __init__(self, stream):
		self._stream = stream

	def print(self, message):
		if self._stream is not None:
			self._stream.write(message + '\n')
			self._stream.flush()


class nulllogger:
	def print(self, message):
		pass


if __name__ == '__main__':
	sys.exit(cli())
