from __future__ import annotations


class WorkerGroup:
    TREE_LOAD = "tree_load"
