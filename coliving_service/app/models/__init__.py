from shared.models.users import User

from .rooms import Room
from .bookings import Booking
from .payments import Payment
from .contacts import Contact

from .contract_templates import ContractTemplate
from .admin_signatures import AdminSignature
from .contracts import Contract
from .contract_signatures import ContractSignature
