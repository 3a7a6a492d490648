import os
import sys

# Make the project root importable when tests run without an install
sys.path.insert(0, os.path.join(os.path.dirname(__file__), '..'))
