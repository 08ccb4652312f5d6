# -*- coding: utf-8 -*-
# (c) Nelen & Schuurmans

from .base.domain.exceptions import *  # NOQA
from .base.domain.open_enum import OpenEnum  # NOQA
from .base.domain.pager import *  # NOQA
from .base.domain.pagination import *  # NOQA
from .base.domain.provider import *  # NOQA
from .base.domain.types import *  # NOQA
from .base.domain.value_object import ValueObject  # NOQA

# fmt: off
__version__ = '0.1.0.dev0'
# fmt: on
