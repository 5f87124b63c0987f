"""Tests for definition schemas."""

import pytest
from pydantic import ValidationError

from vmodels.config.schema_definition import (
    BaseReference,
    ConcreteBases,
    MetadataOverrides,
    StringCustomFieldDefinition,
    VirtualModelDefinition,
)

from conftest import hf_base


class TestVirtualModelDefinition:
    """Validation of authored definitions."""

    def test_model_key_shape(self):
        """model must look like owner/repo."""
        VirtualModelDefinition.model_validate({"model": "a/b", "base": "c/d"})
        for bad in ("ab", "a/b/c", "/b", "a/"):
            with pytest.raises(ValidationError):
                VirtualModelDefinition.model_validate({"model": bad, "base": "c/d"})

    def test_base_variants(self):
        """base is either a reference or a non-empty list of concrete bases."""
        ref = VirtualModelDefinition.model_validate({"model": "a/b", "base": "c/d"}).base_ref()
        leaves = VirtualModelDefinition.model_validate({"model": "a/b", "base": [hf_base()]}).base_ref()

        assert ref == BaseReference("c/d")
        assert isinstance(leaves, ConcreteBases) and leaves.bases[0].sources[0].type == "huggingface"
        with pytest.raises(ValidationError):
            VirtualModelDefinition.model_validate({"model": "a/b", "base": []})

    def test_tag_length(self):
        """Tags longer than 100 characters are rejected."""
        with pytest.raises(ValidationError):
            VirtualModelDefinition.model_validate({"model": "a/b", "base": "c/d", "tags": ["x" * 101]})

    def test_duplicate_field_key_within_definition(self):
        """One definition may not declare the same custom field key twice."""
        field = {"type": "boolean", "key": "k", "displayName": "K", "description": "", "defaultValue": False}
        with pytest.raises(ValidationError):
            VirtualModelDefinition.model_validate(
                {"model": "a/b", "base": "c/d", "customFields": [field, dict(field, defaultValue=True)]}
            )

    def test_definitions_are_frozen(self):
        """Published definitions cannot be mutated."""
        d = VirtualModelDefinition.model_validate({"model": "a/b", "base": "c/d"})
        with pytest.raises(ValidationError):
            d.model = "x/y"

    def test_wire_round_trip(self):
        """Authored JSON re-serializes to the same shape."""
        data = {
            "model": "a/b",
            "base": [hf_base()],
            "tags": ["t"],
            "config": {"load": {"fields": [{"key": "contextLength", "value": 4096}]}},
            "metadataOverrides": {"domain": "llm", "compatibilityTypes": ["gguf"], "vision": "mixed"},
            "suggestions": [{"message": "m", "conditions": [{"type": "equals", "key": "k", "value": {"x": [1]}}]}],
        }
        assert VirtualModelDefinition.model_validate(data).to_wire() == data


class TestCustomFieldSchema:
    """Variant-specific rules for custom fields."""

    def test_string_field_rejects_prompt_effects(self):
        """String fields may only carry setJinjaVariable effects."""
        with pytest.raises(ValidationError) as exc:
            StringCustomFieldDefinition.model_validate({
                "type": "string", "key": "p", "displayName": "P", "description": "", "defaultValue": "",
                "effects": [{"type": "appendSystemPrompt", "content": "hi"}],
            })
        assert "setJinjaVariable" in str(exc.value)

    def test_boolean_default_must_be_bool(self):
        """A boolean field's default must be a real boolean."""
        with pytest.raises(ValidationError):
            VirtualModelDefinition.model_validate({"model": "a/b", "base": "c/d", "customFields": [
                {"type": "boolean", "key": "k", "displayName": "K", "description": "", "defaultValue": "true"},
            ]})


class TestMetadataOverrides:
    """Tri-state parsing."""

    def test_tristate_values(self):
        """Only true, false and "mixed" are accepted."""
        assert MetadataOverrides.model_validate({"vision": "mixed"}).vision == "mixed"
        assert MetadataOverrides.model_validate({"vision": False}).vision is False
        for bad in ("true", "sometimes", 1):
            with pytest.raises(ValidationError):
                MetadataOverrides.model_validate({"vision": bad})

    def test_context_lengths_accept_any_number(self):
        """contextLengths takes fractional numbers as well as integers."""
        md = MetadataOverrides.model_validate({"contextLengths": [4096.5, 8192]})
        assert md.context_lengths == [4096.5, 8192]
        assert md.to_wire() == {"contextLengths": [4096.5, 8192]}
        with pytest.raises(ValidationError):
            MetadataOverrides.model_validate({"contextLengths": ["long"]})
