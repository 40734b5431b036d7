#!/usr/bin/env python3
"""
Initialize Authentication for BDR Dragon
Creates the database tables and the default admin user
"""

import sys
import os
sys.path.append(os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

from bdr_dragon import create_app, db
from bdr_dragon.seed import seed_admin, DEFAULT_ADMIN_EMAIL, DEFAULT_ADMIN_PASSWORD

def init_auth():
    app = create_app()

    with app.app_context():
        # Create database tables
        db.create_all()

        email = os.environ.get('ADMIN_EMAIL') or DEFAULT_ADMIN_EMAIL
        password = os.environ.get('ADMIN_PASSWORD') or DEFAULT_ADMIN_PASSWORD

        admin_user, created = seed_admin(email, password)
        if created:
            print("✅ Created admin user:")
            print(f"   Email: {admin_user.email}")
            print(f"   Password: {password}")
            print(f"   ID: {admin_user.id}")
            print("   ⚠️  IMPORTANT: Change this password immediately!")
        else:
            print(f"⚠️  Admin user already exists: {admin_user.email}")

if __name__ == '__main__':
    init_auth()
