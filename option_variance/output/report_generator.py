"""
Report generation for portfolio variance analysis.
"""
import logging
import os
from datetime import datetime
from typing import Dict

import pandas as pd

from ..risk.risk_engine import PortfolioRiskEngine, VarianceInfo

logger = logging.getLogger(__name__)

BREAKDOWN_COLUMNS = {
    'kind': 'Kind',
    'strike': 'Strike',
    'time_to_expiry': 'Expiry (y)',
    'position_multiplier': 'Multiplier',
    'd1': 'd1',
    'delta': 'Delta',
    'contribution': 'Contribution',
    'weighted_variance': 'Weighted Variance'
}


class ReportGenerator:
    """Generate portfolio variance reports."""

    def __init__(self, export_path: str = 'data/reports/'):
        """
        Initialize report generator.

        Args:
            export_path: Path to export reports (created on first export)
        """
        self.export_path = export_path

    def generate_position_breakdown(self, engine: PortfolioRiskEngine) -> pd.DataFrame:
        """
        Generate per-position variance breakdown.

        Args:
            engine: Risk engine holding the positions

        Returns:
            DataFrame with one row per position, in insertion order
        """
        rows = engine.position_breakdown()
        df = pd.DataFrame(rows, columns=list(BREAKDOWN_COLUMNS))
        return df.rename(columns=BREAKDOWN_COLUMNS)

    def generate_variance_summary(self, engine: PortfolioRiskEngine,
                                  info: VarianceInfo = None) -> pd.DataFrame:
        """
        Generate variance summary.

        Args:
            engine: Risk engine
            info: Optional result of get_variance_if_purchased

        Returns:
            DataFrame with Metric/Value rows
        """
        assumptions = engine.assumptions

        summary_data = [
            {'Metric': 'Underlying Price', 'Value': f"{assumptions.underlying_price:,.2f}"},
            {'Metric': 'Underlying Volatility', 'Value': f"{assumptions.underlying_volatility:.2%}"},
            {'Metric': 'Risk-Free Rate', 'Value': f"{assumptions.risk_free_rate:.2%}"},
            {'Metric': 'Number of Positions', 'Value': len(engine)},
            {'Metric': 'Current Variance', 'Value': f"{engine.cached_variance:.8f}"}
        ]

        if info is not None:
            summary_data.extend([
                {'Metric': 'Variance if Purchased', 'Value': f"{info.hypothetical_variance:.8f}"},
                {'Metric': 'Variance Change', 'Value': f"{info.change:+.8f}"}
            ])

        return pd.DataFrame(summary_data)

    def generate_full_report(self, engine: PortfolioRiskEngine,
                             info: VarianceInfo = None) -> Dict[str, pd.DataFrame]:
        """
        Generate report with summary and position breakdown sections.

        Args:
            engine: Risk engine
            info: Optional result of get_variance_if_purchased

        Returns:
            Dictionary of report section name -> DataFrame
        """
        return {
            'Variance Summary': self.generate_variance_summary(engine, info),
            'Position Breakdown': self.generate_position_breakdown(engine)
        }

    def export_to_csv(self, df: pd.DataFrame, filename: str):
        """
        Export DataFrame to CSV.

        Args:
            df: DataFrame to export
            filename: Output filename

        Returns:
            Path of the written file, or None on failure
        """
        try:
            os.makedirs(self.export_path, exist_ok=True)
            filepath = os.path.join(self.export_path, filename)
            df.to_csv(filepath, index=False)
            logger.info(f"Exported CSV to {filepath}")
            return filepath
        except OSError as e:
            logger.error(f"Error exporting CSV: {e}")
            return None

    def print_report(self, report: Dict[str, pd.DataFrame], stream=None):
        """
        Print report to console.

        Args:
            report: Dictionary of report sections
            stream: File-like object to write to (default stdout)
        """
        print("\n" + "=" * 80, file=stream)
        print("OPTION PORTFOLIO VARIANCE REPORT", file=stream)
        print(f"Generated: {datetime.now().strftime('%Y-%m-%d %H:%M:%S')}", file=stream)
        print("=" * 80 + "\n", file=stream)

        for section_name, df in report.items():
            print(f"\n{section_name}", file=stream)
            print("-" * len(section_name), file=stream)
            if df.empty:
                print("(none)", file=stream)
            else:
                print(df.to_string(index=False), file=stream)
            print(file=stream)
