"""
Run: python -m antmachine --ants 256 --threads 16
"""

from antmachine.services.runner import main

if __name__ == "__main__":
    main()
