"""
仿射变换单元测试

每个模块完成后必须运行：pytest tests/unit/test_transform.py -v
"""

import math
import random

import pytest

from block_identity.geometry import AffineTransform
from block_identity.models import InsertEntity


def _random_transform(rng: random.Random) -> AffineTransform:
    return AffineTransform.from_instance(
        rng.uniform(-3, 3),
        rng.uniform(-3, 3),
        rng.uniform(-math.pi, math.pi),
        rng.uniform(-100, 100),
        rng.uniform(-100, 100),
    )


class TestConstruction:
    """构造测试"""

    def test_identity_apply(self):
        """测试单位变换不改变点"""
        assert AffineTransform.identity().apply(3.5, -2.0) == (3.5, -2.0)

    def test_from_instance_matrix(self):
        """测试插入参数到矩阵的映射"""
        t = AffineTransform.from_instance(2.0, 3.0, math.pi / 2, 10.0, 20.0)
        assert t.m11 == pytest.approx(0.0, abs=1e-12)
        assert t.m12 == pytest.approx(-3.0)
        assert t.m21 == pytest.approx(2.0)
        assert t.m22 == pytest.approx(0.0, abs=1e-12)
        assert (t.tx, t.ty) == (10.0, 20.0)

    def test_from_instance_apply(self):
        """测试先缩放、再旋转、最后平移"""
        t = AffineTransform.from_instance(2.0, 1.0, math.pi / 2, 5.0, 0.0)
        x, y = t.apply(1.0, 0.0)
        assert x == pytest.approx(5.0)
        assert y == pytest.approx(2.0)

    def test_from_insert(self):
        """测试由块参照构造"""
        ins = InsertEntity(block_handle="A", insert=(5.0, 5.0), x_scale=1.0, y_scale=1.0)
        assert AffineTransform.from_insert(ins).apply(0.0, 0.0) == (5.0, 5.0)

    def test_immutable(self):
        """测试不可变"""
        t = AffineTransform.identity()
        with pytest.raises(AttributeError):
            t.tx = 1.0  # type: ignore[misc]


class TestCompose:
    """复合测试"""

    def test_compose_matches_nested_apply(self):
        """测试 compose(o, i).apply(p) == o.apply(i.apply(p))"""
        rng = random.Random(7)
        for _ in range(50):
            outer = _random_transform(rng)
            inner = _random_transform(rng)
            p = (rng.uniform(-50, 50), rng.uniform(-50, 50))
            composed = AffineTransform.compose(outer, inner).apply(*p)
            nested = outer.apply(*inner.apply(*p))
            assert composed[0] == pytest.approx(nested[0], abs=1e-9)
            assert composed[1] == pytest.approx(nested[1], abs=1e-9)

    def test_associativity(self):
        """测试结合律（1e-9 内）"""
        rng = random.Random(11)
        for _ in range(50):
            a, b, c = (_random_transform(rng) for _ in range(3))
            p = (rng.uniform(-50, 50), rng.uniform(-50, 50))
            left = AffineTransform.compose(AffineTransform.compose(a, b), c).apply(*p)
            right = AffineTransform.compose(a, AffineTransform.compose(b, c)).apply(*p)
            assert left[0] == pytest.approx(right[0], abs=1e-9)
            assert left[1] == pytest.approx(right[1], abs=1e-9)

    def test_identity_laws(self):
        """测试左右单位律"""
        rng = random.Random(3)
        identity = AffineTransform.identity()
        for _ in range(20):
            t = _random_transform(rng)
            assert AffineTransform.compose(identity, t) == t
            assert AffineTransform.compose(t, identity) == t

    def test_not_componentwise(self):
        """测试两次旋转90°累计为180°（矩阵乘法而非逐分量）"""
        quarter = AffineTransform.from_instance(1.0, 1.0, math.pi / 2, 0.0, 0.0)
        half = quarter @ quarter
        x, y = half.apply(1.0, 0.0)
        assert x == pytest.approx(-1.0)
        assert y == pytest.approx(0.0, abs=1e-12)

    def test_nan_propagates(self):
        """测试NaN原样传播"""
        t = AffineTransform.from_instance(1.0, 1.0, 0.0, float("nan"), 0.0)
        x, _ = t.apply(1.0, 1.0)
        assert math.isnan(x)

    def test_is_identity(self):
        """测试单位变换判定"""
        assert AffineTransform.identity().is_identity
        assert AffineTransform.from_instance(1.0, 1.0, 0.0, 0.0, 0.0).is_identity
        assert not AffineTransform.from_instance(1.0, 1.0, 0.0, 1.0, 0.0).is_identity

    def test_matmul_equals_compose(self):
        """测试 @ 运算符与 compose 等价"""
        outer = AffineTransform.from_instance(2.0, 1.0, 0.5, 3.0, -1.0)
        inner = AffineTransform.from_instance(1.0, 3.0, -0.2, 0.0, 4.0)
        assert outer @ inner == AffineTransform.compose(outer, inner)
