# -*- coding: utf-8 -*-
"""
Python implementation of the RADEX non-LTE radiative transfer solver
"""

from . import helpers, LAMDA_file, molecule, radiative_transfer, exceptions
from importlib.metadata import version

__version__ = version("radexsolver")
