import numpy as np

import pytest

from goresgen.export import export_map, import_map
from goresgen.grid import GridMap
from goresgen.tiles import BlockType
from render_map import render_map


def sample_grid():
    g = GridMap.empty(6, 4, fill=BlockType.EMPTY)
    g.set(0, 3, BlockType.HOOKABLE)
    g.set(5, 0, BlockType.PLATFORM)
    return g


def test_export_writes_top_row_first(tmp_path):
    path = export_map(sample_grid(), tmp_path / "maps" / "m.tsv")
    rows = import_map(path).as_rows()
    assert len(rows) == 4 and len(rows[0]) == 6
    assert rows[0][0] == BlockType.HOOKABLE
    assert rows[-1][-1] == BlockType.PLATFORM


def test_import_restores_grid(tmp_path):
    g = sample_grid()
    path = export_map(g, tmp_path / "m.tsv")
    back = import_map(path)
    assert back.shape == g.shape
    assert np.array_equal(back.cells, g.cells)


def test_import_with_header_and_expected_shape(tmp_path):
    g = sample_grid()
    path = export_map(g, tmp_path / "m.tsv", include_header=True)
    back = import_map(path, has_header=True, shape=(6, 4))
    assert np.array_equal(back.cells, g.cells)
    with pytest.raises(ValueError, match="expected 5x4"):
        import_map(path, has_header=True, shape=(5, 4))


def test_import_rejects_bad_files(tmp_path):
    ragged = tmp_path / "ragged.tsv"
    ragged.write_text("1\t1\t1\n1\t1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="ragged"):
        import_map(ragged)

    unknown = tmp_path / "unknown.tsv"
    unknown.write_text("1\t9\n1\t1\n", encoding="utf-8")
    with pytest.raises(ValueError, match="unknown block"):
        import_map(unknown)

    empty = tmp_path / "empty.tsv"
    empty.write_text("", encoding="utf-8")
    with pytest.raises(ValueError):
        import_map(empty)


def test_render_png(tmp_path):
    from PIL import Image

    tsv = export_map(sample_grid(), tmp_path / "m.tsv")
    png = render_map(str(tsv), str(tmp_path / "png" / "m.png"), cell=3)
    with Image.open(png) as img:
        assert img.size == (18, 12)
        assert img.getpixel((0, 0))[:3] == (150, 120, 90)
