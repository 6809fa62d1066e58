import json

import pytest

from conceptsite.build import apply_prepath, build_site, main


def _make_content(tmp_path, prepath: str = ""):
    content = tmp_path / "content"
    (content / "immutability").mkdir(parents=True)
    (content / "_assets").mkdir()
    (content / "_assets" / "style.css").write_text("body {}", encoding="utf-8")
    (content / "site.json").write_text(
        json.dumps(
            {
                "title": "Concepts",
                "prepath": prepath,
                "menubar_items": [["Home", ""], ["Immutability", "immutability"]],
            }
        ),
        encoding="utf-8",
    )
    (content / "index.md").write_text(
        "---\ntitle: Home\ntagline: Values and names\n---\n# Home\n\n{{fill tagline}} and {{bar 2}}\n",
        encoding="utf-8",
    )
    (content / "immutability" / "index.md").write_text("---\ntitle: Immutability\n---\n# Immutability\n", encoding="utf-8")
    (content / "immutability" / "bindings.md").write_text(
        "---\ntitle: Bindings\nmenu: Immutability/bindings\n---\n# Bindings\n\n[back](/immutability/)\n",
        encoding="utf-8",
    )
    return content


def test_apply_prepath_rewrites_root_relative_links_only() -> None:
    doc = '<a href="/x/">x</a><img src="/assets/a.png"><a href="https://e.org/">e</a><a href="rel/">r</a><script src="//cdn.org/a.js">'
    out = apply_prepath(doc, "/notes/")
    assert 'href="/notes/x/"' in out
    assert 'src="/notes/assets/a.png"' in out
    assert 'href="https://e.org/"' in out
    assert 'href="rel/"' in out
    assert 'src="//cdn.org/a.js"' in out
    assert apply_prepath(doc, "") == doc


def test_build_site_writes_pages_and_marks_active(tmp_path) -> None:
    content = _make_content(tmp_path)
    site = tmp_path / "site"
    assert build_site(content, site) == 3

    home = (site / "index.html").read_text(encoding="utf-8")
    assert '<li class="menu-list-item active"><a href="/" class="menu-list-link active"> Home</a>' in home
    assert "Values and names and 1.41" in home
    assert "<title>Home | Concepts</title>" in home

    bindings = (site / "immutability" / "bindings" / "index.html").read_text(encoding="utf-8")
    assert 'href="/immutability/" class="menu-list-link active"' in bindings
    assert 'href="/" class="menu-list-link"' in bindings

    assert (site / "immutability" / "index.html").exists()
    assert (site / "assets" / "style.css").exists()


def test_build_site_applies_prepath_and_cli_override(tmp_path) -> None:
    content = _make_content(tmp_path, prepath="notes")
    site = tmp_path / "site"
    build_site(content, site)
    assert 'href="/notes/immutability/"' in (site / "index.html").read_text(encoding="utf-8")

    build_site(content, site, prepath="")
    assert 'href="/immutability/"' in (site / "index.html").read_text(encoding="utf-8")


def test_build_site_uses_custom_layout(tmp_path) -> None:
    content = _make_content(tmp_path)
    (content / "_layout").mkdir()
    (content / "_layout" / "page.html").write_text(
        "<nav>{{menu_items_list}}</nav><h1>{{page_title}}</h1>{{content}}<p>{{upper footer}}</p>",
        encoding="utf-8",
    )
    site = tmp_path / "site"
    build_site(content, site)
    doc = (site / "immutability" / "index.html").read_text(encoding="utf-8")
    assert doc.startswith("<nav><li")
    assert "<h1>Immutability</h1>" in doc
    assert doc.endswith("<p>FOOTER</p>")


def test_build_site_missing_content_dir(tmp_path) -> None:
    with pytest.raises(SystemExit, match="Missing content directory"):
        build_site(tmp_path / "nope", tmp_path / "site")


def test_main_builds_site(tmp_path, capsys) -> None:
    content = _make_content(tmp_path)
    site = tmp_path / "out"
    assert main(["--content", str(content), "--output", str(site)]) == 0
    assert (site / "index.html").exists()
    assert "Built 3 pages." in capsys.readouterr().out


def test_build_site_explicit_layout(tmp_path) -> None:
    content = _make_content(tmp_path)
    layout = tmp_path / "plain.html"
    layout.write_text("<title>{{page_title}}</title>{{content}}", encoding="utf-8")
    site = tmp_path / "site"
    assert main(["--content", str(content), "--output", str(site), "--layout", str(layout)]) == 0
    assert (site / "index.html").read_text(encoding="utf-8").startswith("<title>Home</title>")


def test_build_site_missing_explicit_layout(tmp_path) -> None:
    content = _make_content(tmp_path)
    with pytest.raises(SystemExit, match="Missing layout"):
        build_site(content, tmp_path / "site", layout=tmp_path / "nope.html")


def test_build_site_keeps_helper_calls_in_code_fences(tmp_path) -> None:
    content = _make_content(tmp_path)
    (content / "helpers.md").write_text("# Helpers\n\n```\n{{upper x}}\n```\n\n{{upper y}}\n", encoding="utf-8")
    site = tmp_path / "site"
    build_site(content, site)
    doc = (site / "helpers" / "index.html").read_text(encoding="utf-8")
    assert "{{upper x}}" in doc
    assert "<p>Y</p>" in doc


def test_build_site_rejects_pages_with_same_output(tmp_path) -> None:
    content = _make_content(tmp_path)
    (content / "immutability.md").write_text("# Clash\n", encoding="utf-8")
    with pytest.raises(SystemExit, match="immutability and immutability/index both render to immutability/index.html"):
        build_site(content, tmp_path / "site")
