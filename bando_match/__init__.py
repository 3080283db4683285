"""Company-to-bando matching for the lead-generation site."""

__version__ = "0.1.0"
