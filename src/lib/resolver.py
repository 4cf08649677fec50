"""
Module path resolver

Maps a local relative import specifier to the file that backs it, using the
usual shorthand of ES module imports:

    ./utils        -> ./utils.js, then ./utils/index.js
    ./utils.js     -> ./utils.js (taken as-is, not checked)

Only one source extension is tried and there is no package lookup; package
specifiers never reach this module.
"""

import os
from pathlib import Path
from typing import Optional, Union

from ..config import appsettings
from ..models.errors import UnresolvedImportError
from .log import LOG


def specifier_isLocal(specifier: str) -> bool:
    """Check whether an import specifier names a file of this project"""
    return appsettings.specifier_isLocal(specifier)


def path_resolve(
    base_path: Union[str, Path],
    relative_path: str,
    extension: Optional[str] = None,
    index_basename: Optional[str] = None,
) -> Path:
    """
    Resolve a relative specifier against the file that imports it.

    Args:
        base_path: Absolute path of the importing file
        relative_path: Specifier as written in the import (e.g., "./utils")
        extension: Source extension, defaults to the configured one
        index_basename: Directory index stem, defaults to the configured one

    Returns:
        Absolute path of the imported file

    Raises:
        UnresolvedImportError: neither <target><ext> nor <target>/index<ext> exists
    """
    extension = extension if extension is not None else appsettings.source_extension
    index_basename = index_basename if index_basename is not None else appsettings.index_basename

    target = os.path.normpath(os.path.join(os.path.dirname(str(base_path)), relative_path))

    if target.endswith(extension):
        return Path(target)

    candidate = Path(target + extension)
    if candidate.exists():
        LOG(f"Resolved {relative_path} -> {candidate}", level=3)
        return candidate

    candidate = Path(target) / f"{index_basename}{extension}"
    if candidate.exists():
        LOG(f"Resolved {relative_path} -> {candidate}", level=3)
        return candidate

    raise UnresolvedImportError(base_path, relative_path)
