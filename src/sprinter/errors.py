class SprinterError(Exception):
	pass


class UsageError(SprinterError):
	pass


class InputOverflow(SprinterError):
	def __init__(self, size):
		super().__init__(f'Item too big (buffer size is {size} bytes)!')
		self.size = size
