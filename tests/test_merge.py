"""Tests for config merging and metadata reduction."""

from vmodels.config.schema_definition import KVConfig
from vmodels.resolve.chain import resolve_chain
from vmodels.resolve.merge import ConfigMerger
from vmodels.resolve.metadata import reduce_metadata, reduce_tristate
from vmodels.catalog import Catalog

from conftest import make_def


class TestConfigMerger:
    """First-writer-wins merging of load/operation blocks."""

    def test_merge_scalars(self):
        """Test scalar merging (first non-None wins)."""
        merger = ConfigMerger()
        assert merger.merge_scalars([None, None, "value"]) == "value"
        assert merger.merge_scalars(["first", "second"]) == "first"
        assert merger.merge_scalars([]) is None

    def test_merge_dicts_higher_layer_wins(self):
        """Higher-priority dicts keep their keys; lower ones only fill gaps."""
        merger = ConfigMerger()
        high = {"a": 1, "b": {"x": 1, "y": 2}}
        low = {"b": {"y": 3, "z": 4}, "c": 5}

        assert merger.merge_dicts([high, None, low]) == {"a": 1, "b": {"x": 1, "y": 2, "z": 4}, "c": 5}
        assert high == {"a": 1, "b": {"x": 1, "y": 2}}

    def test_merge_lists(self):
        """Union keeps first-seen order and de-dupes by value."""
        merger = ConfigMerger()
        assert merger.merge_lists([["b", "a"], None, ["a", "c"]]) == ["b", "a", "c"]
        assert merger.merge_lists([[8192, 4096.5], [4096.5, 2048]]) == [8192, 4096.5, 2048]
        assert merger.merge_lists([]) == []

    def test_scenario_mid_overrides_root(self, three_level_catalog):
        """leaf -> mid -> root: mid's temperature beats root's; leaf defers."""
        merged = ConfigMerger().merge_chain(resolve_chain("acme/leaf", three_level_catalog))

        assert merged.load.get("temperature") == 0.8
        assert merged.load.get("contextLength") == 8192
        assert merged.operation.get("topK") == 20

    def test_field_order_is_first_seen(self, three_level_catalog):
        """Merged fields keep the order in which the most specific writer introduced them."""
        merged = ConfigMerger().merge_chain(resolve_chain("acme/leaf", three_level_catalog))
        assert merged.load.keys() == ["temperature", "contextLength"]

    def test_idempotent(self, three_level_catalog):
        """Merging the same chain twice gives identical output."""
        chain = resolve_chain("acme/leaf", three_level_catalog)
        first = ConfigMerger().merge_chain(chain)
        second = ConfigMerger().merge_chain(chain)

        assert first == second
        assert first.load.model_dump_json() == second.load.model_dump_json()

    def test_explicit_null_is_a_write(self):
        """A field explicitly set to null still shadows less specific values."""
        catalog = Catalog([
            make_def("acme/top", base="acme/bottom", load={"seed": None}),
            make_def("acme/bottom", load={"seed": 42}),
        ])
        merged = ConfigMerger().merge_chain(resolve_chain("acme/top", catalog))
        assert merged.load.has("seed")
        assert merged.load.get("seed") is None


class TestKVConfig:
    """Field-level get/set contract."""

    def test_set_returns_new_block(self):
        """set() never mutates the original block."""
        cfg = KVConfig(fields=[{"key": "a", "value": 1}])
        updated = cfg.set("a", 2).set("b", [1, 2])

        assert cfg.get("a") == 1
        assert updated.to_dict() == {"a": 2, "b": [1, 2]}
        assert updated.get("missing", "dflt") == "dflt"


class TestTriState:
    """Tri-state reduction."""

    def test_disagreement_is_mixed(self):
        """true and false contributions reduce to mixed."""
        assert reduce_tristate([True, None, False]) == "mixed"

    def test_agreement_propagates(self):
        """Agreeing contributions keep their value."""
        assert reduce_tristate([True, True]) is True
        assert reduce_tristate([None, False]) is False

    def test_no_contribution_is_absent(self):
        """Nobody setting the field leaves it unset."""
        assert reduce_tristate([None, None]) is None
        assert reduce_tristate([]) is None

    def test_mixed_is_sticky(self):
        """A single mixed contributor makes the result mixed."""
        assert reduce_tristate(["mixed", True, True]) == "mixed"
        assert reduce_tristate([True, "mixed"]) == "mixed"


class TestReduceMetadata:
    """Metadata override reduction across a chain."""

    def test_three_level_metadata(self, three_level_catalog):
        """Sets union, scalars most-specific, tri-states mixed on conflict."""
        md = reduce_metadata(resolve_chain("acme/leaf", three_level_catalog))

        assert md.architectures == ["llama", "llama3"]
        assert md.domain == "llm"
        assert md.vision == "mixed"
        assert md.trained_for_tool_use is None
        assert md.context_lengths is None

    def test_scalars_most_specific_wins(self):
        """domain and minMemoryUsageBytes come from the most specific setter."""
        catalog = Catalog([
            make_def("acme/top", base="acme/bottom",
                     metadataOverrides={"minMemoryUsageBytes": 4_000_000_000, "contextLengths": [8192]}),
            make_def("acme/bottom",
                     metadataOverrides={"domain": "embedding", "minMemoryUsageBytes": 9_000_000_000,
                                        "contextLengths": [4096, 8192], "paramsStrings": ["8B"],
                                        "trainedForToolUse": True}),
        ])
        md = reduce_metadata(resolve_chain("acme/top", catalog))

        assert md.min_memory_usage_bytes == 4_000_000_000
        assert md.domain == "embedding"
        assert md.context_lengths == [8192, 4096]
        assert md.params_strings == ["8B"]
        assert md.trained_for_tool_use is True

    def test_no_overrides(self):
        """A chain without overrides reduces to an empty record."""
        md = reduce_metadata(resolve_chain("acme/solo", Catalog([make_def("acme/solo")])))
        assert md.to_wire() == {}
