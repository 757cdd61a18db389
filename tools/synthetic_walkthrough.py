import json
import logging
import sys
from pathlib import Path

from bytemap import SyntheticTablet, UserMetadata, WalkthroughEngine, load_config
from bytemap.protocol import STEPS


def run(config_path=None, seed=0, include_report_id=False):
    engine = WalkthroughEngine(config=load_config(config_path))
    tablet = SyntheticTablet(seed=seed, include_report_id=include_report_id)
    engine.attach(tablet)

    engine.start()
    for step in STEPS:
        tablet.play(step.phase)
        engine.complete_step()

    engine.submit_metadata(UserMetadata(name="Synthetic Tablet", manufacturer="XP-Pen", button_count=8))
    return engine


def main():
    logging.basicConfig(level=logging.INFO, format="%(levelname)s %(message)s")

    if len(sys.argv) < 2:
        print("Usage: python tools/synthetic_walkthrough.py <out.json> [detector.yaml]")
        sys.exit(2)
    out = Path(sys.argv[1])
    config_path = sys.argv[2] if len(sys.argv) > 2 else None

    engine = run(config_path)
    if not engine.is_complete:
        print(f"Walkthrough stopped at {engine.phase.name}")
        sys.exit(1)

    with out.open("w", encoding="utf-8") as fp:
        json.dump(engine.complete_config, fp, indent=2)
    print(f"Wrote {out}")
    print(engine.device_config.to_json())


if __name__ == "__main__":
    main()
