import os
from pathlib import Path

import pytest

from backend.src.services.storage import FileSystemStorageBackend, NotAFileError


@pytest.fixture
def base(tmp_path: Path) -> Path:
    return tmp_path / "store"


@pytest.mark.asyncio
async def test_initialize_creates_base_directory(base: Path) -> None:
    storage = FileSystemStorageBackend(base)

    await storage.initialize()

    assert base.is_dir()
    assert storage.base_path == base.resolve()


@pytest.mark.asyncio
async def test_logical_paths_map_onto_directories(base: Path) -> None:
    storage = FileSystemStorageBackend(base)
    await storage.initialize()

    await storage.create_file("/chats/001-hello.md")
    await storage.write_metadata("/chats/001-hello.md", {"title": "Hello"})
    await storage.write_content("/chats/001-hello.md", "Body")

    document = base / "chats" / "001-hello.md"
    assert document.read_text(encoding="utf-8") == "---\ntitle: Hello\n---\nBody"


@pytest.mark.asyncio
async def test_folder_document_lives_in_readme(base: Path) -> None:
    storage = FileSystemStorageBackend(base)
    await storage.initialize()
    await storage.create_folder("/p")

    await storage.write_metadata("/p", {"title": "Project"})
    await storage.write_content("/p", "index")

    readme = base / "p" / "readme.md"
    assert readme.read_text(encoding="utf-8") == "---\ntitle: Project\n---\nindex"
    assert await storage.list_nodes("/p") == []


@pytest.mark.asyncio
async def test_empty_folder_metadata_does_not_create_readme(base: Path) -> None:
    storage = FileSystemStorageBackend(base)
    await storage.initialize()
    await storage.create_folder("/p")

    await storage.write_metadata("/p", {})

    assert not (base / "p" / "readme.md").exists()
    assert (await storage.get_node("/p")).metadata is None


@pytest.mark.asyncio
async def test_existing_tree_is_readable(base: Path) -> None:
    (base / "old").mkdir(parents=True)
    (base / "old" / "readme.md").write_text("---\ntitle: Old\n---\n", encoding="utf-8")
    (base / "old" / "note.md").write_text("plain note", encoding="utf-8")
    storage = FileSystemStorageBackend(base)
    await storage.initialize()

    folder = await storage.get_node("/old")
    listed = await storage.list_nodes("/old")

    assert folder.metadata == {"title": "Old"}
    assert [node.name for node in listed] == ["/old/note.md"]
    assert await storage.read_content("/old/note.md") == "plain note"


@pytest.mark.asyncio
async def test_line_endings_are_kept(base: Path) -> None:
    storage = FileSystemStorageBackend(base)
    await storage.initialize()
    await storage.create_file("/crlf.txt")

    await storage.write_content("/crlf.txt", "a\r\nb\r\n")

    assert await storage.read_content("/crlf.txt") == "a\r\nb\r\n"


@pytest.mark.skipif(not hasattr(os, "mkfifo"), reason="requires named pipes")
@pytest.mark.asyncio
async def test_special_entries_are_rejected(base: Path) -> None:
    base.mkdir(parents=True)
    os.mkfifo(base / "pipe")
    storage = FileSystemStorageBackend(base)

    with pytest.raises(NotAFileError):
        await storage.get_node("/pipe")


@pytest.mark.asyncio
async def test_undecodable_document_does_not_break_listing(base: Path) -> None:
    base.mkdir(parents=True)
    (base / "bad.md").write_bytes(b"---\ntitle: \xff\xfe\n---\nx")
    (base / "ok.md").write_text("---\ntitle: Fine\n---\nbody", encoding="utf-8")
    (base / "blob.bin").write_bytes(b"\x00\xff\x80")
    storage = FileSystemStorageBackend(base)
    await storage.initialize()

    listed = await storage.list_nodes("/")

    assert [node.name for node in listed] == ["/bad.md", "/blob.bin", "/ok.md"]
    assert listed[2].metadata == {"title": "Fine"}
    assert (await storage.get_node("/bad.md")).metadata == {"title": "\ufffd\ufffd"}
    assert await storage.read_content("/blob.bin") == "\x00\ufffd\ufffd"
