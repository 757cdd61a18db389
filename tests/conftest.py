"""
Pytest configuration for bytemap tests.

This file provides fixtures shared by the test modules.
"""
import pytest
import sys
from pathlib import Path

# Ensure bytemap package is importable
sys.path.insert(0, str(Path(__file__).parent.parent))


@pytest.fixture
def tablet():
    """Synthetic tablet with the report id stripped (status at offset 0)."""
    from bytemap.source import SyntheticTablet
    return SyntheticTablet(seed=7)


@pytest.fixture
def tablet_with_report_id():
    """Synthetic tablet whose reports keep the report id at offset 0."""
    from bytemap.source import SyntheticTablet
    return SyntheticTablet(seed=7, include_report_id=True)


@pytest.fixture
def log_records():
    """(level, message) pairs captured from an engine or protocol run."""
    return []


@pytest.fixture
def recording_logger(log_records):
    return lambda level, msg: log_records.append((level, msg))


@pytest.fixture
def run_walkthrough():
    """Drive every capture step of an engine from a synthetic tablet."""
    from bytemap.protocol import STEPS

    def _run(engine, tablet, skip_tablet_buttons=False):
        engine.attach(tablet)
        engine.start()
        for step in STEPS:
            if skip_tablet_buttons and step.optional:
                engine.skip_step()
                continue
            tablet.play(step.phase)
            engine.complete_step()
        return engine

    return _run
