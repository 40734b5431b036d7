#!/usr/bin/env python3
"""Create all database tables for the configured DATABASE_URL."""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bdr_dragon import create_app, db

if __name__ == '__main__':
    app = create_app()
    with app.app_context():
        db.create_all()
        print("Database tables created successfully!")
