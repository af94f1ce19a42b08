from app.models.owner import Owner
from app.models.payment import Payment

__all__ = ["Owner", "Payment"]
