from __future__ import annotations

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, RootModel, field_validator, model_validator

from hedgeos.core.path_navigation import SEPARATOR


class NodeDescription(BaseModel):
    """One entry of the static tree description."""

    model_config = ConfigDict(extra="allow")

    name: str = Field(min_length=1)
    type: Literal["folder", "file"] | None = None
    hidden: bool = False
    children: list[NodeDescription] | None = None
    fileType: str | None = None
    appType: str | None = None
    config: dict[str, Any] = Field(default_factory=dict)
    content: str | None = None

    @field_validator("name")
    @classmethod
    def _plain_name(cls, value: str) -> str:
        if SEPARATOR in value:
            raise ValueError(f"name may not contain '{SEPARATOR}': {value!r}")
        if value.strip() != value or value in {".", ".."}:
            raise ValueError(f"invalid node name: {value!r}")
        return value

    @model_validator(mode="after")
    def _check_shape(self) -> NodeDescription:
        if self.type == "file" and self.children is not None:
            raise ValueError(f"file {self.name!r} cannot have children")
        seen: set[str] = set()
        for child in self.children or ():
            if child.name in seen:
                raise ValueError(f"duplicate name {child.name!r} in {self.name!r}")
            seen.add(child.name)
        return self

    @property
    def is_folder(self) -> bool:
        if self.type is not None:
            return self.type == "folder"
        return self.children is not None


NodeDescription.model_rebuild()


class TreeDescription(RootModel[dict[str, NodeDescription]]):
    """Top level of the data file: exactly one root keyed by its home path."""

    @model_validator(mode="after")
    def _single_root(self) -> TreeDescription:
        if len(self.root) != 1:
            raise ValueError(f"expected exactly one root, found {len(self.root)}")
        (home,) = self.root
        if not home.startswith(SEPARATOR):
            raise ValueError(f"root path must be absolute: {home!r}")
        if home != SEPARATOR and home.endswith(SEPARATOR):
            raise ValueError(f"root path may not end with '{SEPARATOR}': {home!r}")
        node = self.root[home]
        if not node.is_folder:
            raise ValueError(f"root {home!r} must be a folder")
        return self

    @property
    def home_path(self) -> str:
        return next(iter(self.root))

    @property
    def root_node(self) -> NodeDescription:
        return self.root[self.home_path]
