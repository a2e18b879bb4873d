import json

from gallery.scripts import build_catalog, prewarm

from conftest import make_item

def test_build_catalog_writes_json(root, tmp_path, capsys):
    make_item(root, "art", "rock01", price="40")
    make_item(root, "Prints", "p1", image=False)
    out = tmp_path / "export" / "catalog.json"

    assert build_catalog.main(["--root", str(root), "--price", "10", "--out", str(out)]) == 0
    data = json.loads(out.read_text(encoding="utf-8"))
    assert [e["sku"] for e in data["items"]] == ["art/rock01", "Prints/p1"]
    assert [e["price"] for e in data["items"]] == [40.0, 10.0]
    assert data["categories"] == ["art", "Prints"]
    assert "wrote 2 items" in capsys.readouterr().out

def test_build_catalog_to_stdout(root, capsys):
    make_item(root, "art", "rock01")
    build_catalog.main(["--root", str(root)])
    data = json.loads(capsys.readouterr().out)
    assert data["items"][0]["slug"] == "art-rock01"

def test_prewarm_generates_previews(root, capsys):
    make_item(root, "art", "rock01")
    make_item(root, "art", "sketch", image=False)
    assert prewarm.main(["--root", str(root)]) == 0
    assert (root / "art" / "rock01" / "rock01.preview.jpg").exists()
    assert "Previews ready: 1, without preview: 1" in capsys.readouterr().out
