# services/__init__.py

# This file makes the 'services' directory a Python package and
# exposes its modules for import.

from . import valuation_service
from . import edit_session
from . import notifications
from . import sync_controller
