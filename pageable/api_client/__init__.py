from .api_provider import *  # NOQA
from .exceptions import *  # NOQA
from .page_fetchers import *  # NOQA
from .response import *  # NOQA
from .sync_api_provider import *  # NOQA
