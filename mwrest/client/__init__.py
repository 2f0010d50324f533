from .api import *
from .auth import *
from .connection import *
from .endpoint import *
from .errors import *
from .models import *
