"""thriftlint - rule-checking engine for Thrift IDL files."""

__version__ = "0.4.0"
