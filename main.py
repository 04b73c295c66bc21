"""
Run the temperature model comparison from a source checkout.

    python main.py --system thermosim/systems/constant.py --steps 50
"""

import sys

from thermosim.main import main

if __name__ == "__main__":
    sys.exit(main())
