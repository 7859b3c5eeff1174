"""
Run the posts text-mining walkthrough.

This script is a convenience wrapper around
`postmining.pipeline.walkthrough.run_walkthrough`, which:

- loads the posts CSV configured in config/data.yaml
- preprocesses the messages (lowercase, stopwords, punctuation,
  whitespace, stemming)
- builds term-count and tf-idf document-term matrices
- writes term tables under outputs/results/
- saves bar charts, word clouds and a likes histogram under outputs/figures/

Usage (from project root):

    python -m scripts.run_walkthrough
    # or
    python scripts/run_walkthrough.py --data-config config/data.yaml
"""

from __future__ import annotations

import argparse

from postmining.pipeline.walkthrough import run_walkthrough
from postmining.utils.common import get_logger, load_run_config


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="Preprocess posts, build document-term matrices and plot term weights."
    )
    parser.add_argument(
        "--data-config",
        type=str,
        default="config/data.yaml",
        help="Path to data config YAML (default: config/data.yaml).",
    )
    parser.add_argument(
        "--run-config",
        type=str,
        default="config/run.yaml",
        help="Path to run config YAML (default: config/run.yaml).",
    )
    return parser.parse_args()


def main() -> None:
    args = parse_args()

    run_cfg = load_run_config(args.run_config)
    logger = get_logger(
        name="run_walkthrough",
        config=run_cfg,
        log_file_suffix="walkthrough",
    )

    logger.info("=" * 80)
    logger.info("Starting walkthrough. Configs: data=%s, run=%s", args.data_config, args.run_config)

    results = run_walkthrough(
        data_config_path=args.data_config,
        run_config_path=args.run_config,
    )

    frequencies = results["frequencies"]
    if not frequencies.empty:
        logger.info("Top terms:\n%s", frequencies.head(20).to_string())
    else:
        logger.warning("Walkthrough finished, but no terms survived preprocessing.")

    logger.info("Figures: %s", results["figures"])


if __name__ == "__main__":
    main()
