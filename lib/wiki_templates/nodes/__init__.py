from .nodes import *
from .builder import make_page, make_template, make_field, make_value
