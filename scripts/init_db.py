#!/usr/bin/env python3
"""Initialize the database with tables."""

import asyncio

from showroom.db.base import create_all


if __name__ == "__main__":
    asyncio.run(create_all())
    print("Database initialized!")
