"""
Initialise the coin ledger
Creates the tables (development databases) and seeds the coin supply and the
system wallet that holds it.
"""
import asyncio

from daswos_ledger.core.config import get_settings
from daswos_ledger.core.container import ApplicationContainer
from daswos_ledger.infrastructure.database import init_db


async def init_ledger():
    """Create tables and the system wallet"""
    container = ApplicationContainer.from_settings(get_settings())
    try:
        await init_db(container.engine)
        await container.ledger.bootstrap()
        supply = await container.ledger.get_total_supply()
        system_wallet = await container.ledger.get_wallet(container.ledger.system_account_id)
    finally:
        await container.dispose()

    print("=" * 50)
    print(f"Total supply:   {supply.total}")
    print(f"Minted:         {supply.minted}")
    print(f"System wallet:  {system_wallet.user_id} (balance {system_wallet.balance})")
    print("=" * 50)


if __name__ == "__main__":
    asyncio.run(init_ledger())
