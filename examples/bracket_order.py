#!/usr/bin/env python3
"""
Example: Place a BTC-USDT limit entry with attached stop-loss and take-profit.

This example demonstrates how to:
1. Create a BingX client against the demo (VST) environment
2. Set leverage for the long side
3. Place a limit BUY with a bracket (stop-loss + take-profit legs)
4. List the resulting orders and cancel everything again

Prerequisites:
- Set BINGX_API_KEY and BINGX_SECRET_KEY environment variables
- Install dependencies with Poetry (recommended): poetry install
- OR install perp-broker in development mode: pip install -e .

Usage:
    poetry run python examples/bracket_order.py

Environment Variables:
    BINGX_API_KEY=your_api_key_here
    BINGX_SECRET_KEY=your_secret_key_here
"""

import asyncio
import logging

from perp_broker import (
    APIError,
    BingXClient,
    BrokerError,
    OrderFilter,
    OrderRequest,
    OrderType,
    Side,
    StopLossConfig,
    TakeProfitConfig,
)

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)


async def main():
    """Place a bracketed limit order on the demo account."""

    # Configuration
    SYMBOL = "BTC-USDT"
    QUANTITY = 0.001
    LEVERAGE = 5

    # Demo mode trades virtual USDT (VST)
    client = BingXClient.from_env(demo_mode=True)

    try:
        features = client.supported_features()
        if not features.bracket_orders:
            logger.error(f"{client.name()} does not support bracket orders")
            return

        price = await client.get_current_price(SYMBOL)
        logger.info(f"{SYMBOL} last price: {price:,.2f}")

        await client.set_leverage(SYMBOL, "LONG", LEVERAGE)

        entry = round(price * 0.98, 1)
        request = OrderRequest(
            symbol=SYMBOL,
            side=Side.LONG,
            order_type=OrderType.LIMIT,
            size=QUANTITY,
            price=entry,
            stop_loss=StopLossConfig(trigger_price=round(entry * 0.97, 1)),
            take_profit=TakeProfitConfig(trigger_price=round(entry * 1.05, 1)),
        )

        order = await client.place_order(request, timeout=10)
        logger.info(f"Placed order {order.order_id}: {order.status}")

        for open_order in await client.get_orders(OrderFilter(symbol=SYMBOL)):
            logger.info(
                f"  {open_order.order_id} {open_order.order_type} {open_order.status} "
                f"reduce_only={open_order.reduce_only}"
            )

        await client.cancel_all_orders(SYMBOL)
        logger.info("All orders cancelled")

    except APIError as e:
        logger.error(f"Exchange rejected request: code={e.api_code} msg={e.message}")
    except BrokerError as e:
        logger.error(f"Request failed: {e}")
    finally:
        await client.close()


if __name__ == "__main__":
    asyncio.run(main())
