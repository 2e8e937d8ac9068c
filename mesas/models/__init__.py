from mesas.models.user import User
from mesas.models.table import Table
from mesas.models.turn import Turn
from mesas.models.reservation import Reservation

# This makes the models directory a Python package and ensures all models are loaded
