"""swiftstyle: a rule engine for Swift style checks and automatic corrections."""

__version__ = "0.1.0"
