"""Multi-file content search.

Candidate files are selected by extension and searched in parallel. Content is
decoded strictly as UTF-8 and falls back to lossy decoding, since skeleton and
atlas files are nominally text but may contain invalid byte sequences. Files
that cannot be read are reported and left out of the matches.
"""

import logging
from pathlib import Path
from typing import Iterable, Optional, Tuple

from spinerestore.core.batch import ProgressCallback, run_batch
from spinerestore.core.scanner import scan_files
from spinerestore.errors import FileAccessError
from spinerestore.models.core import FileEntry, TypeTag
from spinerestore.models.search import SearchQuery, SearchResult
from spinerestore.utils.text import decode_text

logger = logging.getLogger(__name__)


def file_matches(path: Path, query: SearchQuery) -> Tuple[bool, bool]:
    """Check one file against *query*.

    Returns:
        ``(matched, lossy)`` where *lossy* tells whether replacement characters
        had to be substituted while decoding.

    Raises:
        FileAccessError: If the file cannot be read.
    """
    try:
        data = path.read_bytes()
    except OSError as e:
        raise FileAccessError(f"Cannot read file ({e.strerror})", path) from e
    decoded = decode_text(data)
    return query.matches(decoded.text), decoded.lossy


def search(
    root_dir: Path,
    extension: Optional[str],
    query: SearchQuery,
    *,
    workers: Optional[int] = None,
    progress: Optional[ProgressCallback] = None,
) -> SearchResult:
    """Search files under *root_dir* whose extension matches *extension*.

    Args:
        root_dir: Directory to search recursively.
        extension: Extension filter (case-insensitive, dot optional); None
            searches every file.
        query: Terms and match mode.
        workers: Pool size; None resolves through configuration.
        progress: Optional ``(completed, total)`` callback.

    Returns:
        The SearchResult with matching paths and per-file errors.

    Raises:
        FileNotFoundError: If the directory doesn't exist.
        ValueError: If the path is not a directory.
    """
    entries = scan_files(root_dir, extension)
    result = SearchResult(
        root=Path(root_dir).absolute(), query=query, scanned=len(entries)
    )

    def check(entry: FileEntry) -> Tuple[Path, bool, bool, Optional[str]]:
        try:
            matched, lossy = file_matches(entry.path, query)
        except FileAccessError as e:
            logger.warning("Search failed for %s: %s", entry.path, e)
            return entry.path, False, False, str(e)
        return entry.path, matched, lossy, None

    for path, matched, lossy, error in run_batch(
        entries, check, workers=workers, progress=progress
    ):
        if error is not None:
            result.errors.append((path, error))
            continue
        if lossy:
            result.lossy += 1
        if matched:
            result.matches.append(path)

    logger.info(
        "Searched %d file(s) in %s: %d match(es), %d error(s)",
        result.scanned,
        result.root,
        len(result.matches),
        len(result.errors),
    )
    return result


def search_atlas(root_dir: Path, text: str, **kwargs) -> SearchResult:
    """Single-term substring search over ``.atlas`` files."""
    return search(root_dir, TypeTag.ATLAS.extension, SearchQuery.single(text), **kwargs)


def search_skel(root_dir: Path, terms: Iterable[str], **kwargs) -> SearchResult:
    """All-terms search over ``.skel`` files."""
    return search(root_dir, TypeTag.SKEL.extension, SearchQuery.all_of(terms), **kwargs)
