import json

import pytest

from hedgeos.core.errors import LoadError, NotAFolder, NotFound
from hedgeos.core.paths import DEFAULT_DATA_FILE
from hedgeos.core.tree_store import NodeKind, TreeStore, get_extension


def test_paths_are_unique_and_built_from_parent(store):
    paths = [node.path for node in store.iter_nodes()]
    assert len(paths) == len(set(paths)) == len(store)
    for node in store.iter_nodes():
        for child in node.children:
            assert child.path == f"{node.path}/{child.name}"


def test_home_path_and_root(store):
    assert store.loaded
    assert store.home_path == "/home/hedge"
    assert store.root.kind is NodeKind.FOLDER
    assert store.root.name == "hedge"


def test_get_contents_filters_hidden(store):
    visible = [node.name for node in store.get_contents("/home/hedge")]
    everything = [node.name for node in store.get_contents("/home/hedge", include_hidden=True)]
    assert visible == ["Documents", "Applications", "mystery.unknownext"]
    assert everything == visible[:2] + ["mystery.unknownext", ".bashrc", ".private"]


def test_get_contents_preserves_description_order(store):
    names = [node.name for node in store.get_contents("/home/hedge/Documents")]
    assert names == ["readme.md", "notes.txt", "script.md", "Empty"]


def test_get_contents_of_empty_folder(store):
    assert store.get_contents("/home/hedge/Documents/Empty") == ()


def test_get_contents_unknown_path_raises_not_found(store):
    with pytest.raises(NotFound) as info:
        store.get_contents("/does/not/exist")
    assert info.value.path == "/does/not/exist"
    assert info.value.code == "not_found"


def test_get_contents_of_file_raises_not_a_folder(store):
    with pytest.raises(NotAFolder):
        store.get_contents("/home/hedge/Documents/notes.txt")


def test_queries(store):
    assert store.exists("/home/hedge/.bashrc")
    assert not store.exists("/home/hedge/Documents/")
    assert store.is_folder("/home/hedge/Documents")
    assert not store.is_folder("/home/hedge/Documents/notes.txt")
    assert not store.is_folder("/nope")
    item = store.get_item("/home/hedge/Documents/script.md")
    assert item is not None
    assert item.file_type == "shell"
    assert item.content == "echo hi"
    assert store.get_item("/nope") is None


def test_file_config_is_read_only(store):
    item = store.get_item("/home/hedge/Applications/timer.app")
    assert item.config["title"] == "Launch"
    with pytest.raises(TypeError):
        item.config["title"] = "changed"


def test_queries_before_load_raise_load_error():
    empty = TreeStore()
    assert not empty.loaded
    with pytest.raises(LoadError):
        empty.get_contents("/home/hedge")
    with pytest.raises(LoadError):
        _ = empty.home_path
    assert list(empty.iter_nodes()) == []


def test_duplicate_sibling_names_are_rejected(sample_tree):
    docs = sample_tree["/home/hedge"]["children"][0]
    docs["children"].append({"name": "notes.txt", "type": "file"})
    store = TreeStore()
    with pytest.raises(LoadError) as info:
        store.load(sample_tree)
    assert "duplicate" in str(info.value)
    assert not store.loaded


def test_missing_name_is_rejected(sample_tree):
    sample_tree["/home/hedge"]["children"].append({"type": "file"})
    with pytest.raises(LoadError):
        TreeStore().load(sample_tree)


@pytest.mark.parametrize("name", ["a/b", "..", " padded"])
def test_invalid_names_are_rejected(sample_tree, name):
    sample_tree["/home/hedge"]["children"].append({"name": name, "type": "file"})
    with pytest.raises(LoadError):
        TreeStore().load(sample_tree)


def test_file_with_children_is_rejected(sample_tree):
    sample_tree["/home/hedge"]["children"].append(
        {"name": "odd.txt", "type": "file", "children": []}
    )
    with pytest.raises(LoadError):
        TreeStore().load(sample_tree)


def test_more_than_one_root_is_rejected(sample_tree):
    sample_tree["/srv"] = {"name": "srv", "type": "folder", "children": []}
    with pytest.raises(LoadError):
        TreeStore().load(sample_tree)


def test_relative_root_is_rejected():
    with pytest.raises(LoadError):
        TreeStore().load({"home": {"name": "home", "type": "folder", "children": []}})


def test_type_is_inferred_from_children():
    store = TreeStore()
    store.load(
        {
            "/r": {
                "name": "r",
                "children": [{"name": "sub", "children": []}, {"name": "leaf"}],
            }
        }
    )
    assert store.is_folder("/r/sub")
    assert store.get_item("/r/leaf").is_file


def test_failed_reload_keeps_previous_tree(store):
    with pytest.raises(LoadError):
        store.load("{not json")
    assert store.home_path == "/home/hedge"
    assert store.exists("/home/hedge/Documents")


def test_load_from_file(tmp_path, sample_tree):
    path = tmp_path / "tree.json"
    path.write_text(json.dumps(sample_tree), encoding="utf-8")
    store = TreeStore()
    assert store.load(path) is True
    assert store.exists("/home/hedge/Documents/readme.md")


def test_load_from_missing_file(tmp_path):
    with pytest.raises(LoadError) as info:
        TreeStore().load(tmp_path / "missing.json")
    assert info.value.code == "load_failed"


def test_load_from_undecodable_file(tmp_path, store):
    path = tmp_path / "latin.json"
    path.write_bytes(b'{"/r": {"name": "caf\xff\xfe", "type": "folder", "children": []}}')
    with pytest.raises(LoadError) as info:
        store.load(path)
    assert info.value.code == "load_failed"
    assert store.home_path == "/home/hedge"


def test_deeply_nested_description_is_rejected(store):
    depth = 100_000
    text = '{"/r": ' + "[" * depth + "]" * depth + "}"
    with pytest.raises(LoadError):
        store.load(text)
    assert store.home_path == "/home/hedge"


def test_load_from_json_string(sample_tree):
    store = TreeStore()
    store.load(json.dumps(sample_tree))
    assert store.loaded


async def test_load_async(sample_tree):
    store = TreeStore()
    assert await store.load_async(sample_tree)
    assert store.home_path == "/home/hedge"


def test_bundled_tree_loads():
    store = TreeStore()
    store.load(DEFAULT_DATA_FILE)
    assert store.home_path == "/home/hedge"
    assert store.exists("/home/hedge/Applications/music_player.app")


@pytest.mark.parametrize(
    ("name", "expected"),
    [
        ("readme.md", "md"),
        ("archive.tar.gz", "gz"),
        ("README.MD", "md"),
        (".bashrc", "bashrc"),
        ("Makefile", ""),
        ("trailing.", ""),
    ],
)
def test_get_extension(name, expected):
    assert get_extension(name) == expected
    assert TreeStore().get_extension(name) == expected
