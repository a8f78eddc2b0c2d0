import os
import sys

# Make the package importable without installation.
sys.path.insert(0, os.path.join(os.path.dirname(__file__), ".."))
