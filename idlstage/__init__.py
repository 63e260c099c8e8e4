"""idlstage — stage Thrift IDL files and drive the Scrooge generator."""

__version__ = "0.1.0"
