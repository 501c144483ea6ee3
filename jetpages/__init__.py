"""Page-level structures of Jet database files: definitions, usage maps, rows, properties and search arguments."""

__version__ = "1.0.1"