"""
Container locator.

Checks that fetched text is an Adobe Launch library and isolates the text
following the container assignment. This is a textual split, not a parse:
the returned slice still carries whatever code follows the container object.
"""

from typing import Optional

from nightjar.utils.errors import ContainerNotFoundError, InvalidBundleFormatError
from nightjar.utils.logging import get_logger

logger = get_logger(__name__)

# Either marker is enough to accept the text as a Launch library
BUNDLE_MARKERS = ("window._satellite", "_satellite.container")

CONTAINER_MARKER = "window._satellite.container="


def is_launch_bundle(text: str) -> bool:
    return any(marker in text for marker in BUNDLE_MARKERS)


def validate_bundle(text: str, source_url: Optional[str] = None) -> None:
    """
    Raise if the text carries none of the Launch library markers.

    Args:
        text: Raw bundle text
        source_url: Where the text came from, for the error details

    Raises:
        InvalidBundleFormatError: If no marker is present
    """
    if not text or not is_launch_bundle(text):
        raise InvalidBundleFormatError(source_url)


def locate_container(text: str, source_url: Optional[str] = None) -> str:
    """
    Return everything after the container assignment marker.

    Args:
        text: Raw bundle text
        source_url: Where the text came from, for the error details

    Returns:
        Text following the first occurrence of the container marker

    Raises:
        InvalidBundleFormatError: If the text is not a Launch library
        ContainerNotFoundError: If the container assignment is missing or empty
    """
    validate_bundle(text, source_url)

    _, found, container = text.partition(CONTAINER_MARKER)
    if not found or not container:
        raise ContainerNotFoundError(CONTAINER_MARKER)

    logger.debug(f"Container located, {len(container)} characters after marker")
    return container
