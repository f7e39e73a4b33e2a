from .inventory import Truck, TruckImage, TruckFeature
from .tracking import TruckView
from .leads import Inquiry, FinancingApplication
from .auth import User, SessionToken

__all__ = [
    'Truck', 'TruckImage', 'TruckFeature',
    'TruckView',
    'Inquiry', 'FinancingApplication',
    'User', 'SessionToken',
]
