import sys
import logging
import argparse
import asyncio

import aiohttp

# Required: Use uvloop for better performance
import uvloop
asyncio.set_event_loop_policy(uvloop.EventLoopPolicy())

from gasbench.configuration import (
    COLLECTION_SIZES, RPC_URL, CONTRACT_ARTIFACT, ACCOUNTS_OVERRIDE,
    TOKEN_NAME, TOKEN_SYMBOL, DEFAULT_BACKEND, DEFAULT_REPORT_FORMAT,
)
from gasbench.common.errors import GasBenchError
from gasbench.common.phase_manager import OwnershipPhase

# Set up logging (only if not already configured)
if not logging.root.handlers:
    logging.basicConfig(level=logging.INFO, format='%(asctime)s - %(levelname)s - %(message)s')
logger = logging.getLogger(__name__)


def _parse_accounts(value: str):
    return [account.strip() for account in value.split(',') if account.strip()]


class GasBenchmarkCLI:
    """CLI interface for the ERC-721 gas benchmark."""

    def __init__(self, stdout=None):
        self.parser = self._create_parser()
        self.stdout = stdout or sys.stdout

    def _create_parser(self):
        """Create the main argument parser."""
        parser = argparse.ArgumentParser(
            description='ERC-721 Gas Benchmark CLI',
            formatter_class=argparse.RawDescriptionHelpFormatter,
            epilog="""
Examples:
  # Measure the default matrix (1, 100, 1000 units) against a local hardhat node
  gasbench run --artifact artifacts/contracts/FixedCostNFT.sol/FixedCostNFT.json

  # Dry run against the in-memory collection, one label set per size
  gasbench run --backend simulated --sizes 1 100 --per-size --format table

  # List the labels a run would produce
  gasbench scenarios --sizes 1 100 --measure-mint
            """
        )

        subparsers = parser.add_subparsers(dest='command', help='Available commands')

        # Run command
        run_parser = subparsers.add_parser('run', help='Run the scenario matrix and print gas stats')
        run_parser.add_argument('--backend', choices=['web3', 'simulated'], default=DEFAULT_BACKEND,
                                help=f'Collection backend (default: {DEFAULT_BACKEND})')
        run_parser.add_argument('--rpc-url', type=str, default=RPC_URL,
                                help=f'JSON-RPC endpoint (default: {RPC_URL})')
        run_parser.add_argument('--artifact', type=str, default=CONTRACT_ARTIFACT,
                                help=f'Contract artifact JSON (default: {CONTRACT_ARTIFACT})')
        run_parser.add_argument('--accounts', type=_parse_accounts, default=None,
                                help='Comma-separated participant accounts, omnibus first '
                                     '(default: node accounts)')
        run_parser.add_argument('--format', choices=['text', 'table'], default=DEFAULT_REPORT_FORMAT,
                                help=f'Report format (default: {DEFAULT_REPORT_FORMAT})')
        self._add_matrix_arguments(run_parser)

        # Scenarios command
        scenarios_parser = subparsers.add_parser('scenarios', help='List the labels a run would record')
        self._add_matrix_arguments(scenarios_parser)

        return parser

    def _add_matrix_arguments(self, parser):
        parser.add_argument('--sizes', type=int, nargs='+', default=list(COLLECTION_SIZES),
                            help=f'Collection sizes (default: {" ".join(map(str, COLLECTION_SIZES))})')
        parser.add_argument('--phases', choices=[p.value for p in OwnershipPhase], nargs='+',
                            default=[p.value for p in OwnershipPhase],
                            help='Ownership phases to measure (default: all)')
        parser.add_argument('--per-size', action='store_true',
                            help='Record each collection size under its own labels')
        parser.add_argument('--measure-mint', action='store_true',
                            help='Also record the cost of minting each collection')

    def _create_factory(self, args):
        """Create the collection factory for the selected backend."""
        accounts = args.accounts or _parse_accounts(ACCOUNTS_OVERRIDE) or None

        if args.backend == 'simulated':
            from gasbench.systems.simulated import SimulatedCollectionFactory
            return SimulatedCollectionFactory(TOKEN_NAME, TOKEN_SYMBOL, accounts=accounts)

        from gasbench.systems.web3_erc721 import Web3CollectionFactory
        return Web3CollectionFactory(
            rpc_url=args.rpc_url,
            artifact_path=args.artifact,
            accounts=accounts,
        )

    async def run_benchmark(self, args):
        """Run the scenario matrix and emit the report."""
        from gasbench.algorithms.scenario import ScenarioDriver
        from gasbench.persistence.base import SampleStore
        from gasbench.visualization.report import emit_report, summary_frame

        logger.info(f"=== Gas Benchmark ({args.backend}) ===")

        store = SampleStore()
        try:
            async with self._create_factory(args) as factory:
                driver = ScenarioDriver(
                    factory,
                    await factory.accounts(),
                    store,
                    sizes=args.sizes,
                    phases=[OwnershipPhase(p) for p in args.phases],
                    split_by_size=args.per_size,
                    measure_mint=args.measure_mint,
                )
                await driver.run()
        except (GasBenchError, ValueError, OSError, aiohttp.ClientError, asyncio.TimeoutError) as e:
            logger.error(f"Benchmark aborted: {e}")
            return 1

        if args.format == 'table':
            print(summary_frame(store).to_string(index=False), file=self.stdout)
        else:
            emit_report(store, self.stdout)

        logger.info("Benchmark completed successfully")
        return 0

    def run_scenarios(self, args):
        """List the labels for the selected matrix."""
        from gasbench.algorithms.scenario import plan_labels

        labels = plan_labels(
            args.sizes,
            [OwnershipPhase(p) for p in args.phases],
            split_by_size=args.per_size,
            measure_mint=args.measure_mint,
        )
        for label in labels:
            print(label, file=self.stdout)
        return 0

    def run(self, args=None):
        """Run the CLI with the given arguments."""
        if args is None:
            args = sys.argv[1:]

        parsed_args = self.parser.parse_args(args)

        if not parsed_args.command:
            self.parser.print_help()
            return 1

        if any(size < 1 for size in parsed_args.sizes):
            logger.error(f"Collection sizes must be positive: {parsed_args.sizes}")
            return 1

        try:
            if parsed_args.command == 'run':
                return asyncio.run(self.run_benchmark(parsed_args))
            elif parsed_args.command == 'scenarios':
                return self.run_scenarios(parsed_args)
            else:
                logger.error(f"Unknown command: {parsed_args.command}")
                return 1

        except KeyboardInterrupt:
            logger.info("Operation interrupted by user")
            return 1


def main():
    """Main entry point."""
    cli = GasBenchmarkCLI()
    sys.exit(cli.run())


if __name__ == '__main__':
    main()
