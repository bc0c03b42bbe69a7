from sprinter import nulllogger
from sprinter.errors import InputOverflow
from sprinter.reader import BUF_SIZE
from sprinter.reader import Framer
from sprinter.reader import StreamReader

import os
import pytest


@pytest.fixture
def pipe():
	r, w = os.pipe()
	yield r, w
	for fd in (r, w):
		try:
			os.close(fd)
		except OSError:
			pass


def test_framer_splits_on_separator():
	framer = Framer()
	assert framer.feed(b'apple\nbana') == ['apple']
	assert framer.feed(b'na\napricot\n') == ['banana', 'apricot']
	assert framer.flush() == []


def test_framer_flushes_unterminated_item():
	framer = Framer()
	assert framer.feed(b'  last  ') == []
	assert framer.flush() == ['  last  ']


def test_framer_multibyte_separator_across_chunks():
	framer = Framer(b'::')
	assert framer.feed(b'a:') == []
	assert framer.feed(b':b::') == ['a', 'b']
	assert framer.feed(b'c:') == []
	assert framer.flush() == ['c:']


def test_framer_keeps_empty_items():
	assert Framer(b',').feed(b',x,,') == ['', 'x', '']


def test_framer_undecodable_bytes_round_trip():
	item, = Framer().feed(b'caf\xe9\n')
	assert item.encode('utf-8', 'surrogateescape') == b'caf\xe9'


def test_framer_overflow():
	framer = Framer(size=4)
	assert framer.feed(b'abcd') == []
	with pytest.raises(InputOverflow):
		framer.feed(b'e')


def test_framer_item_of_exactly_buffer_size():
	framer = Framer(b'\r\n', size=4)
	assert framer.feed(b'abcd\r') == []
	assert framer.feed(b'\n') == ['abcd']


def test_framer_overflow_with_multibyte_separator():
	framer = Framer(b'ab', size=4)
	assert framer.feed(b'xxxx') == []
	with pytest.raises(InputOverflow):
		framer.feed(b'x')


def test_framer_partial_separator_past_limit():
	framer = Framer(b'ab', size=4)
	assert framer.feed(b'xxxxa') == []
	assert framer.feed(b'b') == ['xxxx']


def test_framer_flush_checks_size():
	framer = Framer(b'ab', size=4)
	assert framer.feed(b'xxxxa') == []
	with pytest.raises(InputOverflow):
		framer.flush()


def test_reader_overflow_on_unterminated_tail(pipe):
	r, w = pipe
	reader = StreamReader(nulllogger(), r, separator=b'\r\n', size=4)
	os.write(w, b'ok\r\nabcd\r')
	os.close(w)
	tick = reader.step()
	assert tick.done
	assert tick.items == ['ok']
	assert isinstance(tick.overflow, InputOverflow)


def test_reader_emits_items_in_order(pipe):
	r, w = pipe
	reader = StreamReader(nulllogger(), r)
	os.write(w, b'one\ntwo\nthr')
	tick = reader.step()
	assert tick.items == ['one', 'two']
	assert not tick.done

	os.write(w, b'ee')
	os.close(w)
	tick = reader.step()
	assert tick.items == ['three']
	assert tick.done and tick.overflow is None
	assert reader.step() == ([], True, None)


def test_reader_does_not_block_without_data(pipe):
	r, w = pipe
	reader = StreamReader(nulllogger(), r)
	tick = reader.step()
	assert tick.items == [] and not tick.done
	assert reader.reads == 0


def test_reader_custom_separator(pipe):
	r, w = pipe
	reader = StreamReader(nulllogger(), r, separator=b'\0')
	os.write(w, b'a b\0c\nd\0')
	assert reader.step().items == ['a b', 'c\nd']


def test_reader_overflow(pipe):
	r, w = pipe
	reader = StreamReader(nulllogger(), r)
	os.write(w, b'x' * (BUF_SIZE + 1))
	tick = reader.step()
	assert tick.done
	assert isinstance(tick.overflow, InputOverflow)
	assert str(BUF_SIZE) in str(tick.overflow)


def test_reader_closed_descriptor_ends_input(pipe):
	r, w = pipe
	reader = StreamReader(nulllogger(), r)
	os.close(r)
	tick = reader.step()
	assert tick.done and tick.overflow is None
