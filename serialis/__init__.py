"""serialis — serialisable-extension reasoning for abstract argumentation."""

__version__ = "0.3.0"
