"""Exception types raised by bundled collaborators."""


class FieldfindError(Exception):
    """Base class for fieldfind errors."""


class RecordStoreError(FieldfindError):
    """The record store could not supply the record tree or documents."""


class FilterStoreError(FieldfindError):
    """The filter store could not load or persist saved filters."""
