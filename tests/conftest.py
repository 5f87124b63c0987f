"""Pytest configuration for vmodels tests."""

import pytest

from vmodels.catalog import Catalog
from vmodels.config.schema_definition import VirtualModelDefinition


def hf_base(key="lmstudio-community/llama-3-8b-gguf", user="lmstudio-community", repo="llama-3-8b-GGUF"):
    return {"key": key, "sources": [{"type": "huggingface", "user": user, "repo": repo}]}


def make_def(model, base=None, load=None, operation=None, **extra):
    """Build a definition from wire-shaped keyword data."""
    data = {"model": model, "base": base if base is not None else [hf_base()]}
    config = {}
    if load is not None:
        config["load"] = {"fields": [{"key": k, "value": v} for k, v in load.items()]}
    if operation is not None:
        config["operation"] = {"fields": [{"key": k, "value": v} for k, v in operation.items()]}
    if config:
        data["config"] = config
    data.update(extra)
    return VirtualModelDefinition.model_validate(data)


@pytest.fixture(autouse=True)
def quiet_logs(monkeypatch):
    """Keep log records out of captured CLI output."""
    monkeypatch.setenv("VMODELS_LOG_LEVEL", "ERROR")


@pytest.fixture
def three_level_catalog():
    """leaf -> mid -> root, root ends in two concrete bases."""
    root = make_def(
        "acme/root",
        base=[hf_base(), hf_base("acme/llama-3-8b-mlx", "acme", "llama-3-8b-mlx")],
        load={"temperature": 0.5, "contextLength": 8192},
        operation={"topK": 40},
        tags=["llama", "base"],
        metadataOverrides={"domain": "llm", "architectures": ["llama"], "vision": False},
    )
    mid = make_def(
        "acme/mid",
        base="acme/root",
        load={"temperature": 0.8},
        tags=["instruct", "llama"],
        metadataOverrides={"architectures": ["llama", "llama3"], "vision": True},
    )
    leaf = make_def("acme/leaf", base="acme/mid", operation={"topK": 20})
    return Catalog([root, mid, leaf])
