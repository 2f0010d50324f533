from .encodings import *
from .title import *
