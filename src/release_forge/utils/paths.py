from pathlib import Path


def get_project_root(start: Path | None = None) -> Path:
    """Get the root of the repository being released.

    Walks up from ``start`` (default: the current working directory) looking
    for a ``.git`` directory or a ``.github`` directory, which is where the
    release resources live.

    Returns:
        Path to the project root directory, or ``start`` itself if no marker
        is found
    """
    current = (start or Path.cwd()).resolve()

    for parent in [current, *current.parents]:
        if (parent / ".git").exists() or (parent / ".github").is_dir():
            return parent

    return current
