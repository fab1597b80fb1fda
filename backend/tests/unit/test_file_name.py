import pytest

from backend.src.services.file_name import change_file_name, generate_file_name, slugify


@pytest.mark.parametrize(
    "title, expected",
    [
        ("Hello, World!", "hello-world"),
        ("  _Multiple   spaces_ ", "multiple-spaces"),
        ("a -- b", "a-b"),
        ("!!!", "untitled"),
    ],
)
def test_slugify(title: str, expected: str) -> None:
    assert slugify(title) == expected


def test_slugify_truncates() -> None:
    assert len(slugify("x" * 250)) == 100


def test_generate_file_name_pads_number() -> None:
    assert generate_file_name(7, "Hello World") == "007-hello-world"
    assert generate_file_name(1234, "x") == "1234-x"


def test_change_file_name_keeps_number_and_suffix() -> None:
    assert change_file_name("/chats/003-old.md", "New Title") == "/chats/003-new-title.md"
    assert change_file_name("/chats/notes", "Plan") == "/chats/000-plan"
    assert change_file_name("/top.md", "Top") == "/000-top.md"


def test_change_file_name_without_title() -> None:
    assert change_file_name("/a/001-x.md", "") == "/a/001-x.md"
