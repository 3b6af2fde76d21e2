"""Database module."""

from showroom.db.base import get_db
from showroom.db.models import AppSettings, CarOffer, Partner, PartnerFilter, PartnerOffer

__all__ = ["get_db", "AppSettings", "CarOffer", "Partner", "PartnerFilter", "PartnerOffer"]
