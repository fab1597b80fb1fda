"""Behaviour shared by every storage backend."""

from pathlib import Path

import pytest

from backend.src.services.storage import (
    AlreadyExistsError,
    FileSystemStorageBackend,
    InvalidPathError,
    MemoryStorageBackend,
    NotAFolderError,
    NotFoundError,
    StorageBackend,
)


@pytest.fixture(params=["memory", "filesystem"])
def storage(request, tmp_path: Path) -> StorageBackend:
    if request.param == "memory":
        return MemoryStorageBackend()
    return FileSystemStorageBackend(tmp_path / "store")


@pytest.mark.asyncio
async def test_create_then_get_file(storage: StorageBackend) -> None:
    await storage.initialize()

    created = await storage.create_file("/notes.txt")
    node = await storage.get_node("/notes.txt")

    assert created.model_dump() == {"name": "/notes.txt", "type": "file"}
    assert node is not None
    assert node.model_dump() == {"name": "/notes.txt", "type": "file"}
    assert await storage.read_content("/notes.txt") == ""


@pytest.mark.asyncio
async def test_paths_are_normalized(storage: StorageBackend) -> None:
    await storage.initialize()

    await storage.create_folder("chats/")
    await storage.create_file("chats//a.md")

    node = await storage.get_node("/chats/a.md/")
    assert node is not None and node.name == "/chats/a.md"


@pytest.mark.asyncio
async def test_duplicate_create_rejected(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/a.txt")
    await storage.create_folder("/f")

    with pytest.raises(AlreadyExistsError):
        await storage.create_file("/a.txt")
    with pytest.raises(AlreadyExistsError):
        await storage.create_folder("/f")
    with pytest.raises(AlreadyExistsError):
        await storage.create_folder("/a.txt")


@pytest.mark.asyncio
async def test_create_auto_creates_ancestors(storage: StorageBackend) -> None:
    await storage.initialize()

    await storage.create_file("/x/y/z.md")

    assert (await storage.get_node("/x")).type == "folder"
    assert (await storage.get_node("/x/y")).type == "folder"
    assert [n.name for n in await storage.list_nodes("/x")] == ["/x/y"]


@pytest.mark.asyncio
async def test_create_under_file_rejected(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/f.txt")

    with pytest.raises(NotAFolderError):
        await storage.create_file("/f.txt/child.txt")


@pytest.mark.asyncio
async def test_delete_removes_subtree(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_folder("/a")
    await storage.create_file("/a/b.txt")
    await storage.create_file("/a/c/d.txt")
    await storage.create_file("/ab.txt")

    await storage.delete_node("/a")

    assert await storage.get_node("/a") is None
    assert await storage.get_node("/a/b.txt") is None
    assert await storage.get_node("/a/c/d.txt") is None
    assert await storage.get_node("/ab.txt") is not None


@pytest.mark.asyncio
async def test_delete_missing_and_root(storage: StorageBackend) -> None:
    await storage.initialize()

    with pytest.raises(NotFoundError):
        await storage.delete_node("/missing")
    with pytest.raises(InvalidPathError):
        await storage.delete_node("/")


@pytest.mark.asyncio
async def test_rename_preserves_content_and_relocates_descendants(
    storage: StorageBackend,
) -> None:
    await storage.initialize()
    await storage.create_folder("/docs")
    await storage.create_file("/docs/x.md")
    await storage.write_content("/docs/x.md", "hello")
    await storage.write_metadata("/docs/x.md", {"title": "X"})
    await storage.create_file("/docs/sub/y.txt")
    await storage.write_content("/docs/sub/y.txt", "raw")
    await storage.write_metadata("/docs", {"title": "Docs"})

    renamed = await storage.rename_node("/docs", "/documentation")

    assert renamed.name == "/documentation"
    assert renamed.type == "folder"
    assert renamed.metadata == {"title": "Docs"}
    assert await storage.get_node("/docs") is None
    assert await storage.get_node("/docs/x.md") is None
    moved = await storage.get_node("/documentation/x.md")
    assert moved.metadata == {"title": "X"}
    assert await storage.read_content("/documentation/x.md") == "hello"
    assert await storage.read_content("/documentation/sub/y.txt") == "raw"


@pytest.mark.asyncio
async def test_rename_moves_into_new_ancestors(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/a.md")

    await storage.rename_node("/a.md", "/deep/er/a.md")

    assert (await storage.get_node("/deep/er")).type == "folder"
    assert await storage.get_node("/deep/er/a.md") is not None
    assert await storage.get_node("/a.md") is None


@pytest.mark.asyncio
async def test_rename_collision_rejected(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/a.txt")
    await storage.create_file("/b.txt")

    with pytest.raises(AlreadyExistsError):
        await storage.rename_node("/a.txt", "/b.txt")
    assert await storage.get_node("/a.txt") is not None


@pytest.mark.asyncio
async def test_rename_invalid_moves(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_folder("/a")

    with pytest.raises(NotFoundError):
        await storage.rename_node("/missing", "/other")
    with pytest.raises(InvalidPathError):
        await storage.rename_node("/a", "/a/inside")
    with pytest.raises(InvalidPathError):
        await storage.rename_node("/", "/root")


@pytest.mark.asyncio
async def test_folder_content_is_a_document(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_folder("/p")

    assert await storage.read_content("/p") == ""
    await storage.write_content("/p", "x")
    await storage.write_metadata("/p", {"k": 1})

    assert await storage.read_content("/p") == "x"
    assert (await storage.get_node("/p")).metadata == {"k": 1}


@pytest.mark.asyncio
async def test_listing_excludes_folder_document(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_folder("/p")
    await storage.write_content("/p", "index")
    await storage.write_metadata("/p", {"title": "P"})
    await storage.create_file("/p/b.md")
    await storage.create_folder("/p/a")

    listed = await storage.list_nodes("/p")

    assert [(n.name, n.type) for n in listed] == [("/p/a", "folder"), ("/p/b.md", "file")]


@pytest.mark.asyncio
async def test_folder_document_name_is_reserved(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_folder("/p")

    with pytest.raises(InvalidPathError):
        await storage.create_file("/p/readme.md")
    assert await storage.get_node("/p/readme.md") is None


@pytest.mark.asyncio
async def test_list_on_file_rejected(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/f.txt")

    with pytest.raises(NotFoundError):
        await storage.list_nodes("/f.txt")
    with pytest.raises(NotFoundError):
        await storage.list_nodes("/nowhere")


@pytest.mark.asyncio
async def test_write_content_preserves_metadata(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/c.md")
    await storage.write_metadata("/c.md", {"title": "Chat", "tags": ["a"]})

    await storage.write_content("/c.md", "first")
    await storage.write_content("/c.md", "second")

    assert await storage.read_content("/c.md") == "second"
    assert (await storage.get_node("/c.md")).metadata == {"title": "Chat", "tags": ["a"]}


@pytest.mark.asyncio
async def test_write_metadata_replaces_wholesale(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/c.md")
    await storage.write_content("/c.md", "body")
    await storage.write_metadata("/c.md", {"title": "A", "draft": True})

    await storage.write_metadata("/c.md", {"title": "B"})
    assert (await storage.get_node("/c.md")).metadata == {"title": "B"}

    await storage.write_metadata("/c.md", {})
    node = await storage.get_node("/c.md")
    assert node.metadata is None
    assert "metadata" not in node.model_dump()
    assert await storage.read_content("/c.md") == "body"


@pytest.mark.asyncio
async def test_non_markdown_files_never_carry_metadata(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/data.txt")
    await storage.write_content("/data.txt", "---\ntitle: raw\n---\nbody")

    await storage.write_metadata("/data.txt", {"title": "ignored"})

    assert (await storage.get_node("/data.txt")).metadata is None
    assert await storage.read_content("/data.txt") == "---\ntitle: raw\n---\nbody"


@pytest.mark.asyncio
async def test_missing_targets_raise_not_found(storage: StorageBackend) -> None:
    await storage.initialize()

    assert await storage.get_node("/nope.md") is None
    with pytest.raises(NotFoundError):
        await storage.read_content("/nope.md")
    with pytest.raises(NotFoundError):
        await storage.write_content("/nope.md", "x")
    with pytest.raises(NotFoundError):
        await storage.write_metadata("/nope.md", {"a": 1})


@pytest.mark.asyncio
async def test_parent_references_rejected(storage: StorageBackend) -> None:
    await storage.initialize()

    with pytest.raises(InvalidPathError):
        await storage.create_file("/a/../escape.txt")


@pytest.mark.asyncio
async def test_non_string_yaml_keys_become_strings(storage: StorageBackend) -> None:
    await storage.initialize()
    await storage.create_file("/ci.md")
    await storage.create_file("/ok.md")
    await storage.write_content("/ci.md", "---\non: push\n2024: x\nnested:\n  1: one\n---\nbody")

    node = await storage.get_node("/ci.md")
    listed = await storage.list_nodes("/")

    assert node.metadata == {"True": "push", "2024": "x", "nested": {"1": "one"}}
    assert [n.name for n in listed] == ["/ci.md", "/ok.md"]
    assert await storage.read_content("/ci.md") == "body"
