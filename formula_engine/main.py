"""
Command-line entrypoint: evaluate a formula sheet.

This script:
- Reads a sheet of formulas (plain text or archive), one formula per line
- Evaluates the lines in order on a single engine, so assignments carry over
- Writes one result line per formula next to the input file
"""
import argparse
from pathlib import Path
from typing import List, Optional, Sequence

from pydantic import BaseModel, FilePath, ValidationError

from formula_engine.common.config import EngineConfig
from formula_engine.common.logger import logger, set_level
from formula_engine.core.trie import MatchPolicy
from formula_engine.sheet.loader import SheetLoader
from formula_engine.sheet.runner import SheetRunner


class CliArgs(BaseModel):
    """
    Pydantic model used to validate CLI arguments.

    Attributes
    ----------
    file_path : FilePath
        Path to the formula sheet.
    match_policy : MatchPolicy
        Symbol matching policy of the engine.
    log_level : Optional[str]
        Level of the formula_engine logger.
    """

    file_path: FilePath
    match_policy: MatchPolicy = MatchPolicy.LONGEST
    log_level: Optional[str] = None


def parse_args(argv: Optional[Sequence[str]] = None) -> CliArgs:
    """
    Parse and validate command-line arguments.

    :param argv: Arguments to parse, defaults to ``sys.argv[1:]``

    :return: Validated CLI arguments
    :rtype: CliArgs
    """
    parser = argparse.ArgumentParser(description="Evaluate a sheet of formulas")

    parser.add_argument(
        "file_path",
        help="Path to the file containing formulas (.txt, .zip, .tar.xz or .7z)",
    )
    parser.add_argument(
        "--match-policy",
        choices=[policy.value for policy in MatchPolicy],
        default=MatchPolicy.LONGEST.value,
        help="How to match a symbol that is a prefix of another (e.g. '>' and '>=')",
    )
    parser.add_argument(
        "--log-level",
        default=None,
        help="Log level of the engine (DEBUG, INFO, WARNING, ...)",
    )

    args = parser.parse_args(argv)

    try:
        return CliArgs(file_path=args.file_path, match_policy=args.match_policy, log_level=args.log_level)
    except ValidationError as exc:
        parser.error(str(exc))


def build_output_path(input_path: Path) -> Path:
    """
    Construct the results path based on the input file.

    - Preserves the original folder
    - Replaces dots in extensions with underscores
    - Appends '_results.txt' at the end

    Examples
    --------
    input: sheets/budget.7z
    output: sheets/budget_7z_results.txt

    :param input_path: Path to the input file
    :return: Path to the output file
    """
    suffixes = "".join(input_path.suffixes)
    suffix_safe = suffixes.replace(".", "_")
    # Drop every suffix from the stem, for names such as sheet.tar.xz
    stem = input_path.name[: len(input_path.name) - len(suffixes)]
    return input_path.with_name(f"{stem}{suffix_safe}_results.txt")


def main(argv: Optional[Sequence[str]] = None) -> None:
    """
    Main function of the ``formula-engine`` command.
    """
    cli_args = parse_args(argv)
    input_path = Path(cli_args.file_path)
    output_path = build_output_path(input_path)

    try:
        config = EngineConfig(match_policy=cli_args.match_policy, log_level=cli_args.log_level)
    except ValidationError as exc:
        raise SystemExit(f"Invalid configuration: {exc}") from exc
    if config.log_level is not None:
        set_level(config.log_level)

    formulas: List[str] = SheetLoader().read(input_path)
    runner = SheetRunner(config=config)
    results = runner.run(formulas)
    runner.write(results, output_path)

    failed = sum(1 for result in results if not result.ok)
    logger.info(f"Evaluated {len(results)} formulas ({failed} failed), results in {output_path}")


if __name__ == "__main__":
    main()
