from .datetime_ import *
from .httpx import *
from .lazy import *
from .rate import *
