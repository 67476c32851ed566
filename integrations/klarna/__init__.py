"""
Klarna Checkout integration.

Form fields are posted straight to Klarna, signed with a merchant digest.
"""

from integrations.klarna.helper import Helper
from integrations.klarna.signature import digest, sign

__all__ = ["Helper", "digest", "sign"]
