"""
Interactive console for the option portfolio variance engine.
"""
import argparse
import logging
import sys
from typing import Optional

from .output import ReportGenerator
from .portfolio import (OptionKind, OptionPosition, InvalidOptionParameters,
                        MarketAssumptions, InvalidMarketAssumptions)
from .risk import PortfolioRiskEngine, VarianceInfo
from .utils import load_config, setup_logging

logger = logging.getLogger(__name__)

ADD_PROMPT = "Enter option type (Call/Put), strike, time to expiry, position: "
CONTINUE_PROMPT = "Do you want to add more options? (y/n): "
CANDIDATE_PROMPT = ("Enter details of the new option to calculate variance "
                    "(Type, Strike, Time to Expiry, Position): ")


def parse_option_line(line: str) -> OptionPosition:
    """
    Parse "<Call|Put> <strike> <time to expiry> <position>".

    Args:
        line: Whitespace separated option fields

    Returns:
        OptionPosition (strike and expiry are checked by the engine)

    Raises:
        InvalidOptionParameters: If the line is malformed
    """
    fields = line.split()
    if len(fields) != 4:
        raise InvalidOptionParameters(f"Expected 4 fields, got {len(fields)}: {line.strip()!r}")

    kind = OptionKind.from_string(fields[0])
    try:
        strike, time_to_expiry, position = (float(value) for value in fields[1:])
    except ValueError as e:
        raise InvalidOptionParameters(f"Could not parse option fields: {e}") from e

    return OptionPosition(kind, strike, time_to_expiry, position)


class VarianceConsole:
    """Collects options from a text stream and prints variance results."""

    def __init__(self, engine: PortfolioRiskEngine, report_generator: ReportGenerator = None,
                 input_stream=None, output_stream=None):
        """
        Initialize console.

        Args:
            engine: Risk engine receiving the options
            report_generator: Used to print the final breakdown (optional)
            input_stream: Readable text stream (default stdin)
            output_stream: Writable text stream (default stdout)
        """
        self.engine = engine
        self.report_generator = report_generator
        self.input_stream = input_stream if input_stream is not None else sys.stdin
        self.output_stream = output_stream if output_stream is not None else sys.stdout

    def _write(self, text: str):
        print(text, file=self.output_stream)

    def _prompt(self, message: str) -> Optional[str]:
        """Show a prompt and read one line, None at end of input."""
        self.output_stream.write(message)
        self.output_stream.flush()
        line = self.input_stream.readline()
        if not line:
            return None
        return line

    def _read_option(self, message: str) -> Optional[OptionPosition]:
        while True:
            line = self._prompt(message)
            if line is None:
                return None
            try:
                return parse_option_line(line)
            except InvalidOptionParameters as e:
                self._write(f"Invalid option: {e}")

    def collect_positions(self) -> int:
        """
        Add options until the user declines or input ends.

        Returns:
            Number of options added
        """
        added = 0

        while True:
            option = self._read_option(ADD_PROMPT)
            if option is None:
                break

            try:
                variance = self.engine.add_option(option)
            except InvalidOptionParameters as e:
                self._write(f"Invalid option parameters: {e}")
                continue

            added += 1
            self._write(f"Portfolio Variance: {variance:.10g}")

            answer = self._prompt(CONTINUE_PROMPT)
            if answer is None or not answer.strip().lower().startswith('y'):
                break

        logger.info(f"Collected {added} options")
        return added

    def preview_purchase(self) -> Optional[VarianceInfo]:
        """Ask for a candidate option and print the variance if it were bought."""
        while True:
            option = self._read_option(CANDIDATE_PROMPT)
            if option is None:
                return None

            try:
                info = self.engine.get_variance_if_purchased(option)
            except InvalidOptionParameters as e:
                self._write(f"Invalid option parameters: {e}")
                continue

            self._write(f"Current Variance: {info.current_variance:.10g}")
            self._write(f"New Variance if Purchased: {info.hypothetical_variance:.10g}")
            return info

    def run(self) -> Optional[VarianceInfo]:
        """Run the full session: collect, preview, report."""
        self.collect_positions()
        info = self.preview_purchase()

        if self.report_generator is not None:
            report = self.report_generator.generate_full_report(self.engine, info)
            self.report_generator.print_report(report, stream=self.output_stream)

        return info


def main(argv=None) -> int:
    """Main entry point."""
    parser = argparse.ArgumentParser(description="Option portfolio variance calculator")
    parser.add_argument('--config', default='config/config.yaml', help="Path to YAML config")
    args = parser.parse_args(argv)

    config = load_config(args.config)
    setup_logging(log_level=config['logging']['level'], log_file=config['logging']['file'])

    try:
        assumptions = MarketAssumptions.from_config(config)
    except InvalidMarketAssumptions as e:
        logger.error(f"Invalid market configuration: {e}")
        return 1

    engine = PortfolioRiskEngine(assumptions)
    report_generator = ReportGenerator(config['reporting']['export_path'])

    try:
        VarianceConsole(engine, report_generator).run()
    except KeyboardInterrupt:
        logger.info("Interrupted by user")

    return 0


if __name__ == "__main__":
    sys.exit(main())
