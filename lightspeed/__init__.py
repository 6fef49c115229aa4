"""
Client for the Ansible Lightspeed completion and explanation service.
"""

__version__ = "0.1.0"
