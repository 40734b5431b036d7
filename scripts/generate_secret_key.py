#!/usr/bin/env python3
"""
Generate secrets for BDR Dragon
Prints fresh values for SECRET_KEY, JWT_ACCESS_SECRET and JWT_REFRESH_SECRET
"""

import secrets

SECRET_NAMES = ('SECRET_KEY', 'JWT_ACCESS_SECRET', 'JWT_REFRESH_SECRET')

def generate_secrets():
    return {name: secrets.token_urlsafe(48) for name in SECRET_NAMES}

if __name__ == '__main__':
    print("🔐 Add these to your .env file (use different values per environment):")
    print("-" * 50)
    for name, value in generate_secrets().items():
        print(f"{name}={value}")
    print("-" * 50)
