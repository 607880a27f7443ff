"""Exceptions raised by the organizer."""


class OrganizerError(Exception):
    """Base class for organizer errors."""


class SourceDirectoryError(OrganizerError):
    """Source root is missing or is not a directory."""


class CollisionLimitError(OrganizerError):
    """No free disambiguated name was found for a target path."""
