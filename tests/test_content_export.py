# tests/test_content_export.py
import pytest

from dir2txt_lib.dir2txt_config import make_config
from dir2txt_lib.dir2txt_content import (
    SKIP_BINARY, SKIP_DIRECTORY, SKIP_ENCODING, SKIP_STAT, SKIP_TOO_LARGE,
    convert_to_utf8, format_block, is_binary, language_hint, serialize_file,
)

from conftest import make_symlink


def test_is_binary():
    assert is_binary(b"abc\x00def")
    assert not is_binary(b"plain text")
    # NUL past the sniff window does not count
    assert not is_binary(b"a" * 600 + b"\x00", limit=512)


def test_convert_utf8_passthrough():
    assert convert_to_utf8("héllo".encode("utf-8")) == ("héllo", "UTF-8")


def test_convert_gbk_fallback():
    text, encoding = convert_to_utf8("中文注释".encode("gbk"))
    assert text == "中文注释"
    assert encoding == "GBK"


def test_convert_unrecognized_raises():
    with pytest.raises(UnicodeDecodeError):
        convert_to_utf8(b"\xff\xfe\xfd", fallback_encodings=("gbk",))


@pytest.mark.parametrize("name, expected", [
    ("main.py", "py"),
    ("App.JAVA", "java"),
    ("Makefile", "text"),
    ("archive.tar.gz", "gz"),
])
def test_language_hint(name, expected):
    assert language_hint(name) == expected


def test_format_block_adds_missing_newline():
    assert format_block("proj/a.py", "x = 1", "py") == "## File: proj/a.py\n\n```py\nx = 1\n```\n\n---\n\n"


def test_format_block_keeps_existing_newline():
    block = format_block("proj/a.py", "x = 1\n", "py")
    assert "x = 1\n```" in block
    assert "x = 1\n\n```" not in block


def test_format_block_empty_file():
    assert format_block("proj/empty.txt", "", "txt") == "## File: proj/empty.txt\n\n```txt\n```\n\n---\n\n"


# === serialize_file gates ===

def test_serialize_text_file(tmp_path, recorder):
    f = tmp_path / "main.go"
    f.write_text("package main", encoding="utf-8")
    result = serialize_file(f, "proj/main.go", make_config(), recorder)
    assert result.emitted
    assert result.encoding == "UTF-8"
    assert result.block.startswith("## File: proj/main.go\n\n```go\npackage main\n```")
    assert "skip" not in recorder.levels()


def test_serialize_binary_skipped(tmp_path, recorder):
    f = tmp_path / "blob.bin"
    f.write_bytes(b"\x00\x01\x02binary")
    result = serialize_file(f, "proj/blob.bin", make_config(), recorder)
    assert not result.emitted
    assert result.skip_reason == SKIP_BINARY
    assert any("Binary file detected" in m for m in recorder.messages("skip"))


def test_forced_text_extension_bypasses_binary_sniff(tmp_path, recorder):
    f = tmp_path / "weird.txt"
    f.write_bytes(b"before\x00after")
    result = serialize_file(f, "proj/weird.txt", make_config(), recorder)
    assert result.emitted
    assert "before\x00after" in result.block


def test_serialize_gbk_file_logs_conversion(tmp_path, recorder):
    f = tmp_path / "legacy.c"
    f.write_bytes("// 中文注释\n".encode("gbk"))
    result = serialize_file(f, "proj/legacy.c", make_config(), recorder)
    assert result.emitted
    assert result.encoding == "GBK"
    assert "// 中文注释\n" in result.block
    assert any("GBK -> UTF-8" in m for m in recorder.messages("notice"))


def test_serialize_unrecognized_encoding_warns(tmp_path, recorder):
    f = tmp_path / "bad.dat"
    f.write_bytes(b"\xff\xfe\xfd")
    config = make_config(fallback_encodings=("gbk",))
    result = serialize_file(f, "proj/bad.dat", config, recorder)
    assert not result.emitted
    assert result.skip_reason == SKIP_ENCODING
    assert any("Unrecognized file encoding" in m for m in recorder.messages("warning"))


def test_serialize_too_large(tmp_path, recorder):
    f = tmp_path / "big.txt"
    f.write_text("x" * 2048, encoding="utf-8")
    result = serialize_file(f, "proj/big.txt", make_config(max_file_size=1024), recorder)
    assert not result.emitted
    assert result.skip_reason == SKIP_TOO_LARGE
    assert any("Large file" in m for m in recorder.messages("skip"))


def test_size_limit_is_inclusive(tmp_path):
    f = tmp_path / "exact.txt"
    f.write_text("x" * 1024, encoding="utf-8")
    assert serialize_file(f, "proj/exact.txt", make_config(max_file_size=1024)).emitted


def test_serialize_missing_file_is_silent(tmp_path, recorder):
    result = serialize_file(tmp_path / "gone.txt", "proj/gone.txt", make_config(), recorder)
    assert not result.emitted
    assert result.skip_reason == SKIP_STAT
    assert recorder.records == []


def test_serialize_directory_behind_symlink(tmp_path, recorder):
    target = tmp_path / "target_dir"
    target.mkdir()
    link = tmp_path / "link"
    make_symlink(link, target)
    result = serialize_file(link, "proj/link", make_config(), recorder)
    assert not result.emitted
    assert result.skip_reason == SKIP_DIRECTORY


def test_serialize_directory_uses_single_stat(tmp_path, recorder, monkeypatch):
    target = tmp_path / "plain_dir"
    target.mkdir()

    def no_is_dir(self):
        raise AssertionError("is_dir should not be called after stat")

    monkeypatch.setattr(type(target), "is_dir", no_is_dir)
    result = serialize_file(target, "proj/plain_dir", make_config(), recorder)
    assert not result.emitted
    assert result.skip_reason == SKIP_DIRECTORY
    assert any("points to a directory" in m for m in recorder.messages("skip"))
