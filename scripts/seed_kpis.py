#!/usr/bin/env python3
"""
Seed a KPI snapshot for today
Writes one sample snapshot for the first user in the database
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bdr_dragon import create_app
from bdr_dragon.seed import seed_kpi_snapshot

if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        snapshot = seed_kpi_snapshot()
        print(f"✅ Seeded KPI snapshot for user {snapshot.user_id} on {snapshot.date}")
