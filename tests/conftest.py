import json
from pathlib import Path

import numpy as np
import pytest

# BGR
RED = (0, 0, 255)
BLUE = (255, 0, 0)
WHITE = (255, 255, 255)


@pytest.fixture
def tmp_json(tmp_path: Path):
    def _make(data, name="sample.json"):
        path = tmp_path / name
        path.write_text(json.dumps(data, ensure_ascii=False), encoding="utf-8")
        return path

    return _make


@pytest.fixture
def red_white_image():
    """2x2: 빨강 3픽셀 + 흰색 1픽셀"""
    image = np.zeros((2, 2, 3), dtype=np.uint8)
    image[:, :] = RED
    image[1, 1] = WHITE
    return image


@pytest.fixture
def document_image():
    """100x100 흰 바탕에 빨간 도장 영역과 파란 글자 영역"""
    image = np.full((100, 100, 3), WHITE, dtype=np.uint8)
    image[:50, :50] = RED
    image[50:, 50:] = BLUE
    return image


@pytest.fixture
def noisy_image():
    rng = np.random.default_rng(7)
    return rng.integers(0, 256, size=(32, 48, 3), dtype=np.uint8)
