"""
Import test suite for bytemap.

Validates that the public API is exported and importable from the paths
drivers and tools use.
"""
import pytest


class TestTopLevelImports:
    """Test top-level package imports."""

    def test_import_bytemap(self):
        """Test basic bytemap package import."""
        import bytemap
        assert bytemap.__version__ is not None

    def test_bytemap_exports_core_classes(self):
        """Test that bytemap exports the walkthrough entry points."""
        from bytemap import (
            WalkthroughEngine,
            WalkthroughProtocol,
            WalkthroughState,
            Phase,
            DetectorConfig,
            DeviceByteConfig,
            SyntheticTablet,
        )
        assert WalkthroughEngine is not None
        assert WalkthroughProtocol is not None
        assert WalkthroughState is not None
        assert Phase is not None
        assert DetectorConfig is not None
        assert DeviceByteConfig is not None
        assert SyntheticTablet is not None

    def test_all_names_resolve(self):
        import bytemap
        for name in bytemap.__all__:
            assert getattr(bytemap, name) is not None


class TestSubmoduleImports:
    """Test submodule imports."""

    @pytest.mark.parametrize("module", [
        "bytemap.analysis",
        "bytemap.analysis.stats",
        "bytemap.analysis.selector",
        "bytemap.analysis.status",
        "bytemap.analysis.buttons",
        "bytemap.config",
        "bytemap.models",
        "bytemap.synthesize",
        "bytemap.metadata",
        "bytemap.protocol",
        "bytemap.protocol.machine",
        "bytemap.engine",
        "bytemap.source",
        "bytemap.source.synthetic",
    ])
    def test_import(self, module):
        import importlib
        assert importlib.import_module(module) is not None

    def test_protocol_exports(self):
        import bytemap.protocol as protocol
        for name in protocol.__all__:
            assert hasattr(protocol, name)


class TestStepTable:
    """The step table covers every capture phase exactly once."""

    def test_phases(self):
        from bytemap.protocol import STEPS, Phase

        phases = [s.phase for s in STEPS]
        assert len(phases) == len(set(phases))
        assert Phase.IDLE not in phases
        assert Phase.AWAITING_METADATA not in phases
        assert Phase.COMPLETE not in phases

    def test_steps_chain(self):
        from bytemap.protocol import STEPS, Phase

        for current, following in zip(STEPS, STEPS[1:]):
            assert current.next_phase is following.phase
        assert STEPS[-1].next_phase is Phase.AWAITING_METADATA
