from .donation import Donation
from .donation_medication import DonationMedication

__all__ = ["Donation", "DonationMedication"]
