"""Tools for resolving stack frames into displayable locations."""
import logging
from typing import Optional

from statmemprof._records import FrameIdentity
from statmemprof._records import Location

logger = logging.getLogger(__name__)

UNKNOWN_LOCATION = "?"


def resolve_location(frame: FrameIdentity) -> Optional[Location]:
    """Ask ``frame`` for its source location.

    Frames are opaque: ones without a ``location`` method, or whose
    resolution fails, simply have no location.
    """
    resolver = getattr(frame, "location", None)
    if not callable(resolver):
        return None
    try:
        return resolver()  # type: ignore[no-any-return]
    except Exception:
        logger.debug("Could not resolve location of %r", frame, exc_info=True)
        return None


def format_location(frame: FrameIdentity) -> str:
    location = resolve_location(frame)
    if location is None:
        return UNKNOWN_LOCATION
    return str(location)
