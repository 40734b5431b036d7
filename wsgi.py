#!/usr/bin/env python3
"""
WSGI entry point for the BDR Dragon API
This file is used by web servers to run the Flask application
"""

import os
import sys

# Add the current directory to Python path
sys.path.insert(0, os.path.dirname(__file__))

from bdr_dragon import create_app

app = create_app()

if __name__ == "__main__":
    app.run(host='0.0.0.0', port=int(os.environ.get('PORT', 4000)), debug=False)
