"""Record models"""

from calltriage.models.patient import Patient
from calltriage.models.bot import Bot
from calltriage.models.call import Call, CallFlag, ApiCall

__all__ = [
    "Patient",
    "Bot",
    "Call",
    "CallFlag",
    "ApiCall",
]
