#!/usr/bin/env python3
"""
Example: Fetch and display BingX account information.

This example demonstrates how to:
1. Create an authenticated BingX client using environment variables
2. Fetch the margin balance
3. Retrieve and display all open positions with P&L details
4. List open orders, including untriggered stop/take-profit orders
5. Display request statistics

Prerequisites:
- Set BINGX_API_KEY and BINGX_SECRET_KEY environment variables
- Install dependencies with Poetry (recommended): poetry install
- OR install perp-broker in development mode: pip install -e .

Usage:
    # Method 1: Using Poetry (recommended)
    poetry run python examples/account_info.py

    # Method 2: After pip install -e .
    python examples/account_info.py

Environment Variables:
    BINGX_API_KEY=your_api_key_here
    BINGX_SECRET_KEY=your_secret_key_here
    BINGX_DEMO_MODE=true
"""

import asyncio
import logging

from perp_broker import BingXClient, BrokerError, OrderStatus

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


def format_currency(amount: float, currency: str = "USDT") -> str:
    """Format amount as currency."""
    return f"{amount:,.2f} {currency}"


def print_section_header(title: str):
    """Print a formatted section header."""
    print("\n" + "=" * 70)
    print(f" {title.upper()} ".center(70, "="))
    print("=" * 70)


def print_balance(balance):
    """Print formatted balance."""
    print_section_header("Balance")
    print(f"Asset:           {balance.asset}")
    print(f"Equity:          {format_currency(balance.total, balance.asset)}")
    print(f"Available:       {format_currency(balance.available, balance.asset)}")
    print(f"In Use:          {format_currency(balance.in_use, balance.asset)}")
    print(f"Unrealized P&L:  {format_currency(balance.unrealized_pnl, balance.asset)}")


def print_positions(positions):
    """Print formatted positions."""
    print_section_header(f"Open Positions ({len(positions)})")

    if not positions:
        print("No open positions")
        return

    for position in positions:
        liquidation = (
            f"{position.liquidation_price:,.2f}" if position.liquidation_price else "none"
        )
        print(
            f"{position.symbol:<12} {position.side.value:<5} size={position.size:<10g} "
            f"entry={position.entry_price:,.2f} mark={position.mark_price:,.2f} "
            f"liq={liquidation} lev={position.leverage}x "
            f"uPnL={position.unrealized_pnl:+,.2f}"
        )


def print_orders(orders):
    """Print formatted open orders."""
    print_section_header(f"Open Orders ({len(orders)})")

    for order in orders:
        pending = " (untriggered)" if order.status == OrderStatus.PENDING else ""
        reduce = " reduce-only" if order.reduce_only else ""
        print(
            f"{order.order_id} {order.symbol} {order.side.value} {order.order_type} "
            f"{order.size:g} @ {order.price or order.stop_price:,.2f} "
            f"{order.status}{pending}{reduce}"
        )


async def main():
    """Main function to display account information."""
    logger.info("Creating BingX client from environment variables...")

    async with BingXClient.from_env() as client:
        try:
            balance = await client.get_balance(timeout=10)
            positions = await client.get_positions(timeout=10)
            orders = await client.get_orders(timeout=10)
        except BrokerError as e:
            logger.error(f"Failed to fetch account data: {e}")
            return

        print_balance(balance)
        print_positions(positions)
        print_orders(orders)

        stats = client.get_statistics()
        print_section_header("Statistics")
        print(f"Requests:        {stats.total_requests}")
        print(f"Avg latency:     {stats.avg_duration_ms:.1f} ms")


if __name__ == "__main__":
    asyncio.run(main())
