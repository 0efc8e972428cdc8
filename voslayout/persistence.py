"""Save and load layouts as self-describing ``.npz`` archives."""

from __future__ import annotations

import logging
import zipfile

import numpy as np

from .layout import Layout, PathLike
from .logging_utils import apply_debug_logging

logger = logging.getLogger(__name__)

FORMAT_TAG = "voslayout.Layout"
FORMAT_VERSION = 1


class LayoutPersistenceError(Exception):
    """Base class for failures while saving or loading a layout."""


class LayoutIOError(LayoutPersistenceError, OSError):
    """Raised when the layout file cannot be read or written."""


class LayoutDeserializationError(LayoutPersistenceError, ValueError):
    """Raised when a file does not contain a valid layout."""


def save_layout(layout: Layout, path: PathLike) -> None:
    """Write ``layout`` to ``path``; doubles are stored bit for bit."""

    coordinates = layout.get_coordinates()
    try:
        # A file handle keeps numpy from appending ".npz" to the path.
        with open(path, "wb") as handle:
            np.savez(
                handle,
                format=np.array(FORMAT_TAG),
                version=np.array(FORMAT_VERSION),
                coordinates=coordinates,
            )
    except OSError as exc:
        raise LayoutIOError(f"cannot write layout to {path}: {exc}") from exc
    logger.info("Saved layout with %d nodes to %s", coordinates.shape[1], path)


def _read_archive(path: PathLike) -> np.ndarray:
    with open(path, "rb") as handle:
        try:
            archive = np.load(handle, allow_pickle=False)
        except (ValueError, EOFError, zipfile.BadZipFile) as exc:
            raise LayoutDeserializationError(f"{path} is not a layout archive: {exc}") from exc
        if getattr(archive, "files", None) is None:
            raise LayoutDeserializationError(f"{path} is not a layout archive")
        with archive:
            missing = {"format", "version", "coordinates"} - set(archive.files)
            if missing:
                raise LayoutDeserializationError(
                    f"{path} is missing layout fields: {', '.join(sorted(missing))}"
                )
            try:
                tag = str(archive["format"])
                version = int(archive["version"])
                coordinates = archive["coordinates"]
            except (ValueError, TypeError, EOFError, zipfile.BadZipFile) as exc:
                raise LayoutDeserializationError(f"{path} has unreadable layout fields: {exc}") from exc

    if tag != FORMAT_TAG:
        raise LayoutDeserializationError(f"{path} holds {tag!r}, expected {FORMAT_TAG!r}")
    if version != FORMAT_VERSION:
        raise LayoutDeserializationError(f"{path} has unsupported layout version {version}")
    if coordinates.dtype != np.float64 or coordinates.ndim != 2 or coordinates.shape[0] != 2:
        raise LayoutDeserializationError(
            f"{path} has coordinates of dtype {coordinates.dtype} and shape {coordinates.shape}"
        )
    return coordinates


def load_layout(path: PathLike) -> Layout:
    """Read a layout written by :func:`save_layout`."""

    try:
        coordinates = _read_archive(path)
    except LayoutPersistenceError:
        raise
    except OSError as exc:
        raise LayoutIOError(f"cannot read layout from {path}: {exc}") from exc
    layout = Layout.from_coordinates(coordinates)
    logger.info("Loaded layout with %d nodes from %s", layout.n_nodes, path)
    return layout


apply_debug_logging(globals(), logger=logger)


__all__ = [
    "FORMAT_TAG",
    "FORMAT_VERSION",
    "LayoutDeserializationError",
    "LayoutIOError",
    "LayoutPersistenceError",
    "load_layout",
    "save_layout",
]
