"""PartyRoll - membership management API for a political party."""
__version__ = "1.0.0"
