"""
CAD 读取模块 - DXF/DWG 文档适配

子模块：
- dxf_reader: ezdxf 文档 → 只读图块树
- oda_converter: DWG → DXF 转换
"""

from .dxf_reader import DxfDocumentReader
from .oda_converter import ODAConverter

__all__ = [
    "DxfDocumentReader",
    "ODAConverter",
]
