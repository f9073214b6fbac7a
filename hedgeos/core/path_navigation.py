from __future__ import annotations

SEPARATOR = "/"


def join_path(parent: str, name: str) -> str:
    if parent.endswith(SEPARATOR):
        return f"{parent}{name}"
    return f"{parent}{SEPARATOR}{name}"


def is_within(path: str, root: str) -> bool:
    return path == root or path.startswith(join_path(root, ""))


def parent_path(path: str, root: str) -> str | None:
    """Parent of ``path`` inside the tree rooted at ``root``; None at the root."""
    if path == root or not is_within(path, root):
        return None
    head, _, _ = path.rpartition(SEPARATOR)
    if not head:
        return SEPARATOR
    return head


def path_prefixes(path: str, root: str) -> list[str]:
    """Every folder path from ``root`` down to ``path``, inclusive."""
    if not is_within(path, root):
        return []
    prefixes = [root]
    current = root
    for segment in path[len(root):].split(SEPARATOR):
        if not segment:
            continue
        current = join_path(current, segment)
        prefixes.append(current)
    return prefixes
