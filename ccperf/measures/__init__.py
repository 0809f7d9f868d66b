from .estimation import EstimationKind
from .catalog import MeasureType
from .traffic import agent_to_contact_traffic, contact_to_agent_traffic

__all__ = [
    "EstimationKind",
    "MeasureType",
    "agent_to_contact_traffic",
    "contact_to_agent_traffic",
]
