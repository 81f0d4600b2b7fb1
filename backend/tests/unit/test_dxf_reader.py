"""
DXF 读取器单元测试

每个模块完成后必须运行：pytest tests/unit/test_dxf_reader.py -v
"""

import math
from pathlib import Path

import ezdxf
import pytest
from ezdxf import units

from block_identity.cad import DxfDocumentReader
from block_identity.interfaces import DocumentReadError
from block_identity.models import (
    ArcEntity,
    CircleEntity,
    EllipseEntity,
    IgnoredEntity,
    InsertEntity,
    LineEntity,
    MTextEntity,
    PolylineEntity,
    SolidEntity,
    TextEntity,
)


@pytest.fixture
def reader() -> DxfDocumentReader:
    return DxfDocumentReader()


def _save(doc, temp_dir: Path, name: str = "test.dxf") -> Path:
    path = temp_dir / name
    doc.saveas(path)
    return path


class TestRead:
    """文件读取测试"""

    def test_read_line_block(self, reader, temp_dir):
        """测试直线图块转换"""
        doc = ezdxf.new()
        blk = doc.blocks.new(name="WALL")
        blk.add_line((0, 0), (10, 0), dxfattribs={"layer": "E"})

        cad = reader.read(_save(doc, temp_dir))

        wall = cad.get_block_by_name("WALL")
        assert wall is not None
        line = wall.entities[0]
        assert isinstance(line, LineEntity)
        assert line.layer == "E"
        assert line.start == (0.0, 0.0)
        assert line.end == (10.0, 0.0)
        assert cad.get_block(wall.handle) is wall

    def test_layout_blocks_present(self, reader, temp_dir):
        """测试模型空间/图纸空间作为块定义出现（由引擎过滤）"""
        cad = reader.read(_save(ezdxf.new(), temp_dir))
        names = {b.name.upper() for b in cad.blocks}
        assert "*MODEL_SPACE" in names

    def test_missing_file(self, reader, temp_dir):
        """测试文件不存在"""
        with pytest.raises(DocumentReadError):
            reader.read(temp_dir / "missing.dxf")

    def test_invalid_file(self, reader, temp_dir):
        """测试非DXF内容"""
        path = temp_dir / "broken.dxf"
        path.write_text("this is not a dxf file", encoding="utf-8")
        with pytest.raises(DocumentReadError):
            reader.read(path)

    def test_units(self, reader, temp_dir):
        """测试 $INSUNITS 映射"""
        doc = ezdxf.new()
        doc.units = units.MM
        assert reader.read(_save(doc, temp_dir)).unit == "Millimeters"

        doc.units = 0
        assert reader.read(_save(doc, temp_dir, "unitless.dxf")).unit is None


class TestEntityMapping:
    """图元映射测试"""

    def test_insert_resolves_handle(self, reader):
        """测试块参照句柄解析与角度转换"""
        doc = ezdxf.new()
        doc.blocks.new(name="WALL").add_line((0, 0), (10, 0))
        dup = doc.blocks.new(name="DUP")
        dup.add_blockref("wall", (5, 5), dxfattribs={"rotation": 90, "xscale": 2})

        cad = reader.from_ezdxf(doc)

        ins = cad.get_block_by_name("DUP").entities[0]
        assert isinstance(ins, InsertEntity)
        assert ins.block_handle == cad.get_block_by_name("WALL").handle
        assert ins.insert == (5.0, 5.0)
        assert ins.x_scale == 2.0
        assert ins.rotation == pytest.approx(math.pi / 2)

    def test_curves(self, reader):
        """测试圆/圆弧/椭圆映射"""
        doc = ezdxf.new()
        blk = doc.blocks.new(name="CURVES")
        blk.add_circle((1, 1), 2)
        blk.add_arc((0, 0), 1, 0, 180)
        blk.add_ellipse((0, 0), major_axis=(2, 0), ratio=0.5)

        circle, arc, ellipse = reader.from_ezdxf(doc).get_block_by_name("CURVES").entities

        assert isinstance(circle, CircleEntity) and circle.radius == 2.0
        assert isinstance(arc, ArcEntity)
        assert arc.end_angle == pytest.approx(math.pi)
        assert isinstance(ellipse, EllipseEntity)
        assert ellipse.full_ellipse

    def test_polylines_and_solid(self, reader):
        """测试多段线与实心映射"""
        doc = ezdxf.new()
        blk = doc.blocks.new(name="SHAPES")
        blk.add_lwpolyline([(0, 0), (1, 0), (1, 1)], close=True)
        blk.add_polyline2d([(0, 0), (2, 0)])
        blk.add_solid([(0, 0), (1, 0), (0, 1)])

        lw, pl, solid = reader.from_ezdxf(doc).get_block_by_name("SHAPES").entities

        assert isinstance(lw, PolylineEntity) and lw.closed
        assert lw.vertices == [(0.0, 0.0), (1.0, 0.0), (1.0, 1.0)]
        assert isinstance(pl, PolylineEntity) and not pl.closed
        assert isinstance(solid, SolidEntity)
        assert len(solid.corners) == 4

    def test_text(self, reader):
        """测试文字与多行文字映射"""
        doc = ezdxf.new()
        blk = doc.blocks.new(name="LABEL")
        blk.add_text("ABC", dxfattribs={"height": 2.5, "insert": (1, 1)})
        blk.add_mtext("HELLO", dxfattribs={"char_height": 1.0, "width": 30.0})

        text, mtext = reader.from_ezdxf(doc).get_block_by_name("LABEL").entities

        assert isinstance(text, TextEntity)
        assert text.text == "ABC" and text.height == 2.5
        assert isinstance(mtext, MTextEntity)
        assert mtext.text == "HELLO" and mtext.rect_width == 30.0

    def test_hatch_ignored(self, reader):
        """测试填充映射为忽略分支"""
        doc = ezdxf.new()
        blk = doc.blocks.new(name="FILL")
        hatch = blk.add_hatch(color=2)
        hatch.paths.add_polyline_path([(0, 0), (1, 0), (1, 1)], is_closed=True)

        entity = reader.from_ezdxf(doc).get_block_by_name("FILL").entities[0]

        assert isinstance(entity, IgnoredEntity)
        assert entity.dxftype == "HATCH"
