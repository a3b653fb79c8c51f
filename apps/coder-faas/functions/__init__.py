"""
coder-faas functions

Each module defines one stateless handler. Importing this package
registers all of them with the coderfaas registry.
"""

from . import api, hello, hello_faas, math_faas
from .examples import hello_node
