import argparse
import asyncio
import logging
import os
import sys

# Aggiungi backend/ alla PYTHONPATH per importare invoicing.*
sys.path.insert(0, os.path.join(os.path.dirname(__file__), "backend"))

from invoicing.core.config import get_settings
from invoicing.core.database import Database
from invoicing.seed import seed

logger = logging.getLogger("reset_db")


async def reset(with_seed: bool) -> None:
    database = Database.from_settings(get_settings())
    try:
        print("Connessione al database, eliminazione tabelle...")
        await database.connect()
        await database.drop_all()
        print("Tabelle eliminate. Creazione nuove tabelle...")
        await database.create_all()

        if with_seed:
            async with database.session() as session:
                counts = await seed(session)
                await session.commit()
            print(f"Dati dimostrativi inseriti: {counts}")
    finally:
        await database.dispose()
    print("Database resettato con successo!")


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Ricrea le tabelle del database")
    parser.add_argument("--seed", action="store_true", help="Inserisce i dati dimostrativi")
    args = parser.parse_args()

    logging.basicConfig(level=get_settings().log_level)
    asyncio.run(reset(args.seed))
