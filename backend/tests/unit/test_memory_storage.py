import pytest

from backend.src.services.storage import AlreadyExistsError, MemoryStorageBackend


@pytest.mark.asyncio
async def test_clear_keeps_only_root() -> None:
    storage = MemoryStorageBackend()
    await storage.create_file("/a/b.md")
    await storage.write_content("/a/b.md", "hello")

    storage.clear()

    assert list(storage.all_nodes()) == ["/"]
    assert await storage.list_nodes("/") == []
    assert await storage.get_node("/a") is None


@pytest.mark.asyncio
async def test_size_counts_nodes_and_raw_document_text() -> None:
    storage = MemoryStorageBackend()
    await storage.create_file("/a.txt")
    await storage.write_content("/a.txt", "12345")

    assert storage.size() == {"node_count": 2, "total_content_size": 5}


@pytest.mark.asyncio
async def test_all_nodes_reports_metadata() -> None:
    storage = MemoryStorageBackend()
    await storage.create_folder("/f")
    await storage.write_metadata("/f", {"title": "Folder"})

    nodes = storage.all_nodes()

    assert nodes["/f"].metadata == {"title": "Folder"}
    assert nodes["/"].type == "folder"


@pytest.mark.asyncio
async def test_instances_do_not_share_state() -> None:
    first = MemoryStorageBackend()
    second = MemoryStorageBackend()

    await first.create_file("/only-here.txt")

    assert await second.get_node("/only-here.txt") is None


@pytest.mark.asyncio
async def test_failed_rename_leaves_tree_untouched() -> None:
    storage = MemoryStorageBackend()
    await storage.create_file("/a/x.txt")
    await storage.create_file("/taken/y.txt")
    before = storage.all_nodes()

    with pytest.raises(AlreadyExistsError):
        await storage.rename_node("/a", "/taken")

    assert storage.all_nodes() == before
