"""
图块内容指纹系统 - 后端核心模块

模块结构：
- config/     运行期配置加载
- models/     数据模型定义（实体/图块/指纹/导入统计）
- geometry/   几何基础（仿射变换/曲线采样/规范化记号流）
- hashing/    图块展开遍历与内容指纹计算
- cad/        DXF/DWG 读取适配（ezdxf / ODA）
- storage/    图块目录存储（内存/JSON）
- importer/   文档级导入编排
"""

__version__ = "0.1.0"
