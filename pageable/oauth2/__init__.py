from .client_credentials import *  # NOQA
