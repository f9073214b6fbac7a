from __future__ import annotations

import asyncio
import json
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from types import MappingProxyType
from typing import Any, Iterator, Mapping

from pydantic import ValidationError

from hedgeos.core.errors import LoadError, NotAFolder, NotFound
from hedgeos.core.logging import get_logger, log_event
from hedgeos.core.path_navigation import join_path
from hedgeos.core.tree_schema import NodeDescription, TreeDescription

logger = get_logger(__name__)

TreeSource = Path | str | Mapping[str, Any]


class NodeKind(Enum):
    FOLDER = "folder"
    FILE = "file"


@dataclass(frozen=True, slots=True, eq=False)
class Node:
    name: str
    path: str
    kind: NodeKind
    hidden: bool = False
    file_type: str | None = None
    app_type: str | None = None
    config: Mapping[str, Any] = field(default_factory=lambda: MappingProxyType({}))
    content: str | None = None
    children: tuple[Node, ...] = ()

    @property
    def is_folder(self) -> bool:
        return self.kind is NodeKind.FOLDER

    @property
    def is_file(self) -> bool:
        return self.kind is NodeKind.FILE

    def __repr__(self) -> str:
        return f"Node({self.kind.value} {self.path!r})"


def get_extension(name: str) -> str:
    """Last ``.``-delimited segment of ``name``, lower-cased; empty without a dot."""
    if "." not in name:
        return ""
    return name.rsplit(".", 1)[1].lower()


class TreeStore:
    """Holds the virtual file tree and answers path queries against it.

    The tree is built once per successful ``load`` and never mutated
    afterwards. Lookups are exact string matches on canonical paths.
    """

    def __init__(self) -> None:
        self._root: Node | None = None
        self._index: dict[str, Node] = {}

    @property
    def loaded(self) -> bool:
        return self._root is not None

    @property
    def root(self) -> Node:
        if self._root is None:
            raise LoadError("Tree not loaded")
        return self._root

    @property
    def home_path(self) -> str:
        return self.root.path

    def load(self, source: TreeSource) -> bool:
        """Parse ``source`` into the node tree, replacing any previous tree.

        Raises ``LoadError`` when the source cannot be read or does not
        describe a valid tree. A failed load keeps the previous tree.
        """
        if isinstance(source, Mapping) or str(source).lstrip().startswith("{"):
            label = "<inline>"
        else:
            label = str(source)
        try:
            raw = self._read_source(source)
            description = TreeDescription.model_validate(raw)
            index: dict[str, Node] = {}
            root = self._build(
                description.root_node,
                description.home_path,
                index,
            )
        except LoadError as exc:
            log_event(logger, "tree_load_failed", source=label, error=str(exc))
            raise
        except ValidationError as exc:
            error = LoadError("Malformed tree description", self._summarize(exc))
            log_event(logger, "tree_load_failed", source=label, error=str(error))
            raise error from exc
        except RecursionError as exc:
            error = LoadError("Tree description is nested too deeply")
            log_event(logger, "tree_load_failed", source=label, error=str(error))
            raise error from exc

        self._root = root
        self._index = index
        log_event(logger, "tree_loaded", source=label, home=root.path, nodes=len(index))
        return True

    async def load_async(self, source: TreeSource) -> bool:
        return await asyncio.to_thread(self.load, source)

    def exists(self, path: str) -> bool:
        return path in self._index

    def is_folder(self, path: str) -> bool:
        node = self._index.get(path)
        return node is not None and node.is_folder

    def get_item(self, path: str) -> Node | None:
        return self._index.get(path)

    def get_contents(self, path: str, include_hidden: bool = False) -> tuple[Node, ...]:
        if self._root is None:
            raise LoadError("Tree not loaded")
        node = self._index.get(path)
        if node is None:
            raise NotFound(path)
        if not node.is_folder:
            raise NotAFolder(path)
        if include_hidden:
            return node.children
        return tuple(child for child in node.children if not child.hidden)

    def get_extension(self, name: str) -> str:
        return get_extension(name)

    def iter_nodes(self) -> Iterator[Node]:
        if self._root is None:
            return
        stack = [self._root]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def __len__(self) -> int:
        return len(self._index)

    def _read_source(self, source: TreeSource) -> Any:
        if isinstance(source, Mapping):
            return dict(source)
        if isinstance(source, str) and source.lstrip().startswith("{"):
            text = source
        else:
            path = Path(source).expanduser()
            try:
                text = path.read_text(encoding="utf-8")
            except (OSError, UnicodeDecodeError) as exc:
                raise LoadError(f"Unable to read tree description: {path}", str(exc)) from exc
        try:
            return json.loads(text)
        except json.JSONDecodeError as exc:
            raise LoadError("Tree description is not valid JSON", str(exc)) from exc

    def _build(
        self,
        description: NodeDescription,
        path: str,
        index: dict[str, Node],
    ) -> Node:
        if path in index:
            raise LoadError("Duplicate path in tree description", path)

        if description.is_folder:
            children = tuple(
                self._build(child, join_path(path, child.name), index)
                for child in description.children or ()
            )
            node = Node(
                name=description.name,
                path=path,
                kind=NodeKind.FOLDER,
                hidden=description.hidden,
                children=children,
            )
        else:
            node = Node(
                name=description.name,
                path=path,
                kind=NodeKind.FILE,
                hidden=description.hidden,
                file_type=description.fileType or None,
                app_type=description.appType or None,
                config=MappingProxyType(dict(description.config)),
                content=description.content,
            )
        index[path] = node
        return node

    @staticmethod
    def _summarize(exc: ValidationError) -> str:
        parts = []
        for error in exc.errors():
            location = ".".join(str(item) for item in error.get("loc", ()))
            parts.append(f"{location}: {error.get('msg', '')}" if location else error.get("msg", ""))
        return "; ".join(parts)
