"""
PythonAnywhere WSGI entry point.

In the PythonAnywhere Web tab:
  - Source code:    /home/<your-username>/juggleTrainer
  - Working dir:    /home/<your-username>/juggleTrainer
  - WSGI file:      /home/<your-username>/juggleTrainer/wsgi.py
  - Virtualenv:     /home/<your-username>/juggleTrainer/.venv
"""
import sys
import os

# Make sure the project directory is on the path
project_dir = os.path.dirname(os.path.abspath(__file__))
if project_dir not in sys.path:
    sys.path.insert(0, project_dir)

from app import app as application  # noqa: F401  (PythonAnywhere looks for 'application')
