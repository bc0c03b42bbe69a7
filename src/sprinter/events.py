from collections import namedtuple


# Everything the controller reacts to.  Qt signals deliver these to
# `Controller.dispatch`, which is the only place where state changes.

KeyPress = namedtuple('KeyPress', 'key text origin')
FieldEdit = namedtuple('FieldEdit', 'text')
ReaderTick = namedtuple('ReaderTick', 'items done overflow')
RefilterFire = namedtuple('RefilterFire', '')
ListCursor = namedtuple('ListCursor', 'rows')

FIELD = 'field'
LIST = 'list'
