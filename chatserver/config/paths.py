"""Search-path resolution for configuration files and runtime directories.

Both helpers only check for existence; they never create anything. `/tmp`
is the first candidate for files and the last one for directories.
"""

from __future__ import annotations

import os


def config_resolve_file(file_name: str) -> str:
    """Find a configuration file on the search path.

    Candidates, first match wins: `/tmp/<name>`, `./config/<name>`,
    `../config/<name>`, `<name>`.

    Args:
        file_name: Logical file name, for example `config.json`.

    Returns:
        str: Absolute path of the first existing candidate, or `file_name`
        unchanged when no candidate exists.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    candidates = (
        "/tmp/" + file_name,
        "./config/" + file_name,
        "../config/" + file_name,
        file_name,
    )
    for candidate in candidates:
        if os.path.exists(candidate):
            return os.path.abspath(candidate)
    return file_name


def config_resolve_dir(dir_name: str) -> str:
    """Find a runtime directory on the search path.

    Candidates, first match wins: `./<name>/`, `../<name>/`, `/tmp/<name>`.

    Args:
        dir_name: Logical directory name, for example `logs`.

    Returns:
        str: Absolute directory path with exactly one trailing separator. The
        current directory is returned when no candidate exists.

    Raises:
        RuntimeError: This helper does not raise runtime errors.
    """

    resolved = "."
    candidates = (
        "./" + dir_name + "/",
        "../" + dir_name + "/",
        "/tmp/" + dir_name,
    )
    for candidate in candidates:
        if os.path.exists(candidate):
            resolved = candidate
            break
    return os.path.abspath(resolved).rstrip(os.sep) + os.sep
