"""Shared fixtures for the extraction tests."""
import os

import pytest

os.environ.setdefault("LOG_LEVEL", "WARNING")

from fastapi.testclient import TestClient

from material_extractor.layers.extraction import MaterialExtractionLayer
from material_extractor.main import app


@pytest.fixture
def extractor():
    return MaterialExtractionLayer()


@pytest.fixture
def client():
    return TestClient(app)
