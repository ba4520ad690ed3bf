from pathlib import Path

from staticblocks.utils import copy_tree, ensure_clean_dir, iter_files, page_slug


def test_iter_files_sorted_and_filtered(tmp_path):
    (tmp_path / "b").mkdir()
    (tmp_path / "b" / "two.yaml").write_text("", encoding="utf-8")
    (tmp_path / "one.yaml").write_text("", encoding="utf-8")
    (tmp_path / "notes.txt").write_text("", encoding="utf-8")
    files = iter_files(tmp_path, ".yaml")
    assert [p.relative_to(tmp_path).as_posix() for p in files] == ["b/two.yaml", "one.yaml"]
    assert iter_files(tmp_path / "missing", ".yaml") == []


def test_page_slug():
    assert page_slug(Path("src/pages"), Path("src/pages/index.yaml")) == "index"
    assert page_slug(Path("src/pages"), Path("src/pages/blog/post.yaml")) == "blog/post"


def test_ensure_clean_dir(tmp_path):
    target = tmp_path / "dist"
    ensure_clean_dir(target)
    assert target.is_dir()
    (target / "old.html").write_text("x", encoding="utf-8")
    ensure_clean_dir(target)
    assert list(target.iterdir()) == []


def test_copy_tree(tmp_path):
    source = tmp_path / "assets"
    (source / "img").mkdir(parents=True)
    (source / "img" / "logo.svg").write_text("<svg/>", encoding="utf-8")
    (source / "site.css").write_text("body{}", encoding="utf-8")
    dest = tmp_path / "out"
    assert copy_tree(source, dest) == 2
    assert (dest / "img" / "logo.svg").read_text(encoding="utf-8") == "<svg/>"
    assert copy_tree(tmp_path / "missing", dest) == 0
