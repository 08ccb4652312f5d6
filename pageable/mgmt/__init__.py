from .client import *  # NOQA
from .datafactory import *  # NOQA
from .devtestlabs import *  # NOQA
from .migrate import *  # NOQA
from .models import *  # NOQA
from .service_client import *  # NOQA
from .settings import *  # NOQA
